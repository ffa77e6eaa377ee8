import json
import sys

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core import errors
from core.models import Item, ItemType
from core.services.export import read_records
from core.utils.parsing import parse_bool, parse_decimal


class Command(BaseCommand):
    help = ("Carga/actualiza items desde JSON, CSV o Excel. Columnas: name, itemType, category, price "
            "(opcionales: code, subcategory, description, soldByWeight, notifyExpiry).")

    def add_arguments(self, parser):
        parser.add_argument("path", nargs="?", help="Ruta al archivo. Si se omite, lee JSON de STDIN.")
        parser.add_argument("--sheet", default="", help="Hoja a leer si es Excel.")

    @transaction.atomic
    def handle(self, *args, **opts):
        path = opts.get("path")
        try:
            data = read_records(path, sheet=opts.get("sheet")) if path else json.load(sys.stdin)
        except Exception as e:
            raise CommandError(f"No pude leer el archivo: {e}")

        if not isinstance(data, list):
            raise CommandError("Se esperaba una lista de items.")

        required = {"name", "itemType", "category", "price"}
        created = updated = 0

        for i, row in enumerate(data, 1):
            if not required.issubset(row):
                faltan = required - set(row)
                raise CommandError(f"Fila {i}: faltan columnas {faltan}")

            item_type = str(row["itemType"]).strip()
            if item_type not in ItemType.values:
                raise CommandError(f"Fila {i}: itemType inválido {item_type!r}")
            try:
                price = parse_decimal(row["price"], field="price")
                defaults = {
                    "name": str(row["name"]).strip(),
                    "item_type": item_type,
                    "category": Item.MACHINE_CATEGORY if item_type == ItemType.MACHINE else str(row["category"]).strip(),
                    "subcategory": str(row.get("subcategory") or "").strip(),
                    "price": price,
                    "description": str(row.get("description") or "").strip(),
                    "sold_by_weight": parse_bool(row.get("soldByWeight")),
                    "notify_expiry": parse_bool(row.get("notifyExpiry")),
                }
            except errors.DomainError as e:
                raise CommandError(f"Fila {i}: {e.message}")
            if price < 0:
                raise CommandError(f"Fila {i}: precio negativo")

            code = str(row.get("code") or "").strip()
            if code:
                _, is_new = Item.objects.update_or_create(code=code, defaults=defaults)
            else:
                # sin código: se identifica por nombre + tipo
                obj = Item.objects.filter(name=defaults["name"], item_type=item_type).first()
                if obj is None:
                    Item.objects.create(code=Item.generate_code(), **defaults)
                    is_new = True
                else:
                    for field, value in defaults.items():
                        setattr(obj, field, value)
                    obj.save()
                    is_new = False
            created += int(is_new)
            updated += int(not is_new)

        self.stdout.write(self.style.SUCCESS(f"OK: created={created}, updated={updated}"))
