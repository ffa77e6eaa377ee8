import logging

from django.conf import settings
from django.http import JsonResponse

from core.errors import DomainError

logger = logging.getLogger(__name__)


class ApiErrorMiddleware:
    """Convierte excepciones de las rutas /api/ al envelope {success, message}."""

    def __init__(self, get_response):
        self.get_response = get_response
        self.api_prefixes = [
            self._normalize_prefix(p)
            for p in getattr(settings, "API_PREFIXES", ["/api/"])
            if p
        ]

    def __call__(self, request):
        response = self.get_response(request)
        # los require_GET / require_POST devuelven un 405 en texto plano
        if response.status_code == 405 and self._is_api(request.path_info):
            allowed = response.get("Allow", "")
            response = JsonResponse(
                {"success": False, "message": f"Method {request.method} not allowed"},
                status=405,
            )
            if allowed:
                response["Allow"] = allowed
        return response

    def process_exception(self, request, exception):
        if not self._is_api(request.path_info):
            return None

        if isinstance(exception, DomainError):
            logger.info("%s %s -> %s: %s", request.method, request.path_info,
                        type(exception).__name__, exception.message)
            return JsonResponse(
                {"success": False, "message": exception.message},
                status=exception.status_code,
            )

        # el detalle queda solo en el log del servidor
        logger.exception("Error no controlado en %s %s", request.method, request.path_info)
        return JsonResponse(
            {"success": False, "message": "Internal server error"},
            status=500,
        )

    def _is_api(self, path: str) -> bool:
        path = path or "/"
        return any(path.startswith(prefix) for prefix in self.api_prefixes)

    def _normalize_prefix(self, prefix: str) -> str:
        if not prefix:
            return ""
        return "/" + prefix.lstrip("/")
