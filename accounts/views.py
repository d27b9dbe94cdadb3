import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.http import require_POST

from .identity import forget_identity, lookup_user_id, remember_identity

logger = logging.getLogger(__name__)

SIGN_IN_EVENTS = ("SIGNED_IN", "TOKEN_REFRESHED", "INITIAL_SESSION")


@require_POST
def auth_state(request):
    """
    Receives auth-state changes forwarded by the browser SDK.
    Accepts JSON: { "event": "SIGNED_IN", "session": { "access_token": "..." } }
    """
    try:
        payload = json.loads(request.body or b"{}")
    except ValueError:
        return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)

    if not isinstance(payload, dict):
        return JsonResponse({"ok": False, "error": "Invalid JSON"}, status=400)

    event = (payload.get("event") or "").strip()

    if event == "SIGNED_OUT":
        forget_identity(request)
        return JsonResponse({"ok": True, "redirect": settings.LOGIN_URL})

    if event not in SIGN_IN_EVENTS:
        return JsonResponse({"ok": False, "error": f"Unsupported event: {event or '(empty)'}"}, status=400)

    session = payload.get("session") or {}
    token = (session.get("access_token") or "").strip() if isinstance(session, dict) else ""
    if not token:
        return JsonResponse({"ok": False, "error": "Missing access token."}, status=400)

    # don't trust the user id sent by the browser, ask the provider
    user_id = lookup_user_id(token)
    if not user_id:
        forget_identity(request)
        return JsonResponse({"ok": False, "error": "Session could not be verified."}, status=401)

    remember_identity(request, user_id, token)
    logger.info("Auth state %s for user %s", event, user_id)
    return JsonResponse({"ok": True, "user_id": user_id})
