from django.core.management.base import BaseCommand

from core.services.expiry import cleanup_notification_messages


class Command(BaseCommand):
    help = 'Quita fragmentos "(Batch: ...)" de los mensajes de avisos viejos.'

    def handle(self, *args, **opts):
        updated = cleanup_notification_messages()
        self.stdout.write(self.style.SUCCESS(f"OK: mensajes actualizados={updated}"))
