import logging

from django.http import JsonResponse

from .exceptions import ApplicationError

logger = logging.getLogger(__name__)


class ApplicationErrorMiddleware:
    """
    Render ApplicationError raised by a view as a JSON error response

    Response body: {"success": false, "error": "...", "errors": {...}}
    Anything else propagates to Django's normal 500 handling.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not isinstance(exception, ApplicationError):
            return None

        logger.info(
            f"{request.method} {request.path} -> {exception.status_code} "
            f"{type(exception).__name__}: {exception.message}"
        )
        return JsonResponse(exception.as_dict(), status=exception.status_code)
