from django.core.management.base import BaseCommand, CommandError

from core import errors
from core.services.expiry import scan_expiring
from core.utils.parsing import parse_date


class Command(BaseCommand):
    help = "Genera avisos de lotes grocery próximos a vencer (pensado para cron)."

    def add_arguments(self, parser):
        parser.add_argument("--date", help="Fecha de referencia YYYY-MM-DD (default: hoy).")

    def handle(self, *args, **opts):
        try:
            today = parse_date(opts.get("date"), field="--date", required=False)
        except errors.ValidationError as e:
            raise CommandError(e.message)

        result = scan_expiring(today)
        if "error" in result:
            raise CommandError(f"Chequeo de vencimientos falló: {result['error']}")
        self.stdout.write(self.style.SUCCESS(result["message"]))
