from django.http import JsonResponse


def ok(message=None, status=200, **data):
    """Envelope estándar: {success: true, message?, <clave>: datos}."""
    payload = {"success": True}
    if message:
        payload["message"] = message
    payload.update(data)
    return JsonResponse(payload, status=status)
