import json
import sys

from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from core.models import Branch
from core.services.export import read_records


class Command(BaseCommand):
    help = "Carga/actualiza sucursales desde JSON, CSV o Excel (name, address, manager, phone, email)."

    def add_arguments(self, parser):
        parser.add_argument(
            "path",
            nargs="?",
            help="Ruta al archivo (.json/.csv/.xlsx). Si se omite, lee JSON desde STDIN."
        )
        parser.add_argument("--sheet", default="", help="Hoja a leer si es Excel.")

    @transaction.atomic
    def handle(self, *args, **opts):
        path = opts.get("path")
        try:
            data = read_records(path, sheet=opts.get("sheet")) if path else json.load(sys.stdin)
        except Exception as e:
            raise CommandError(f"No pude leer el archivo: {e}")

        if not isinstance(data, list):
            raise CommandError("Se esperaba una lista de sucursales.")

        created = updated = 0
        for i, row in enumerate(data, start=1):
            try:
                name = str(row["name"]).strip()
                address = str(row["address"]).strip()
                manager = str(row["manager"]).strip()
            except KeyError as ke:
                raise CommandError(f"Fila {i}: falta la clave {ke!s}")
            if not name:
                raise CommandError(f"Fila {i}: nombre vacío")

            _, is_new = Branch.objects.update_or_create(
                name=name,
                defaults={
                    "address": address,
                    "manager": manager,
                    "phone": str(row.get("phone") or "").strip(),
                    "email": str(row.get("email") or "").strip(),
                },
            )
            created += int(is_new)
            updated += int(not is_new)

        self.stdout.write(self.style.SUCCESS(f"OK: sucursales creadas={created}, actualizadas={updated}"))
