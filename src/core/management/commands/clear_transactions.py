from django.core.management.base import BaseCommand, CommandError

from core.services.maintenance import clear_transactions


class Command(BaseCommand):
    help = "Borra todos los movimientos (stock, ventas, caja, transferencias, avisos). Conserva maestros y usuarios."

    def add_arguments(self, parser):
        parser.add_argument("--yes", action="store_true", help="No pedir confirmación.")

    def handle(self, *args, **opts):
        if not opts["yes"]:
            answer = input("Esto borra TODOS los movimientos. Escribí 'yes' para continuar: ")
            if answer.strip().lower() != "yes":
                raise CommandError("Cancelado.")

        summary = clear_transactions()
        detail = ", ".join(f"{k}={v}" for k, v in summary.items())
        self.stdout.write(self.style.SUCCESS(f"OK: {detail}"))
