from functools import wraps
from urllib.parse import urlencode

from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import redirect

from .identity import resolve_identity


def _wants_json(request) -> bool:
    return request.content_type == "application/json" or "application/json" in request.headers.get("Accept", "")


def identity_required(view_func):
    """
    Like login_required, but against the external identity provider.
    Sets request.identity to the resolved user id.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        user_id = resolve_identity(request)
        if not user_id:
            if _wants_json(request):
                return JsonResponse({"ok": False, "error": "Authentication required."}, status=401)
            return redirect(f"{settings.LOGIN_URL}?{urlencode({'next': request.get_full_path()})}")
        request.identity = user_id
        return view_func(request, *args, **kwargs)

    return _wrapped
