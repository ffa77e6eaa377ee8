from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from core.services import activities, expiry, notifier
from core.utils.http import ok
from core.utils.parsing import parse_date, read_json


@csrf_exempt
@require_http_methods(["GET", "POST"])
def notification_list(request):
    if request.method == "POST":
        notif = notifier.create_notification(read_json(request))
        return ok("Notification created", status=201, notification=notif.to_dict())
    return ok(notifications=notifier.list_notifications(request.GET))


@csrf_exempt
@require_POST
def mark_read(request, notification_id):
    data = read_json(request)
    notif = notifier.mark_read(notification_id, data.get("userId"))
    return ok("Notification marked as read", notification=notif.to_dict())


@csrf_exempt
@require_POST
def check_expiring(request):
    data = read_json(request)
    result = expiry.scan_expiring(parse_date(data.get("date"), required=False))
    if "error" in result:
        return JsonResponse(
            {"success": False, "message": "Expiry check failed", "error": result["error"]},
            status=500,
        )
    return ok(result["message"], checked=result["checked"], created=result["created"])


@require_GET
def activity_list(request):
    return ok(activities=activities.list_activities(request.GET))
