from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from core.services import users
from core.utils.http import ok
from core.utils.parsing import read_json


@csrf_exempt
@require_http_methods(["GET", "POST"])
def user_list(request):
    if request.method == "POST":
        profile = users.create_user(read_json(request))
        return ok("User created successfully", status=201, user=profile.to_dict())
    return ok(users=users.list_users())


@csrf_exempt
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
def user_detail(request, code):
    if request.method == "PUT":
        profile = users.update_user(code, read_json(request))
        return ok("User updated successfully", user=profile.to_dict())
    if request.method == "PATCH":
        # solo cambio de estado (Active / Inactive)
        profile = users.change_status(code, read_json(request).get("status"))
        return ok("User status updated", user=profile.to_dict())
    if request.method == "DELETE":
        users.delete_user(code)
        return ok("User deleted successfully")
    return ok(user=users.get_profile(code).to_dict())


@csrf_exempt
@require_POST
def login_view(request):
    """
    Valida credenciales y devuelve el perfil con accesos efectivos.
    La sesión la maneja el cliente.
    """
    profile = users.login(read_json(request))
    return ok("Login successful", user=profile.to_dict())
