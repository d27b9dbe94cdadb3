# accounts/identity.py
import base64
import binascii
import json
import logging
import time

from launchpad.backend import get_supabase_client

logger = logging.getLogger(__name__)

SESSION_KEY = "supabase_identity"


def token_expiry(access_token: str):
    """
    Read the `exp` claim of an access token, or None when it has none.
    The signature isn't checked here; the provider does that in lookup_user_id.
    """
    parts = (access_token or "").split(".")
    if len(parts) != 3:
        return None
    segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(segment))
    except (binascii.Error, ValueError):
        return None
    exp = claims.get("exp") if isinstance(claims, dict) else None
    return exp if isinstance(exp, (int, float)) else None


def remember_identity(request, user_id: str, access_token: str):
    request.session[SESSION_KEY] = {
        "user_id": str(user_id),
        "access_token": access_token,
        "expires_at": token_expiry(access_token),
    }


def forget_identity(request):
    request.session.pop(SESSION_KEY, None)


def _bearer_token(request) -> str:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def _expired(state) -> bool:
    expires_at = state.get("expires_at")
    return expires_at is not None and expires_at <= time.time()


def lookup_user_id(access_token: str):
    """
    Ask the identity provider who owns this access token.
    Returns None when the token is rejected or the provider can't be reached.
    """
    if not access_token:
        return None
    try:
        resp = get_supabase_client().auth.get_user(access_token)
    except Exception:
        logger.warning("Identity provider rejected access token", exc_info=True)
        return None

    user = getattr(resp, "user", None)
    if user is None or not getattr(user, "id", None):
        return None
    return str(user.id)


def resolve_identity(request):
    """
    An explicit bearer token decides on its own and is never cached.
    Without one, the identity captured from an auth-state notification is used
    until its token expires, then the session token is checked with the provider again.
    Never invents an identifier.
    """
    bearer = _bearer_token(request)
    if bearer:
        return lookup_user_id(bearer)

    state = request.session.get(SESSION_KEY) or {}
    if state.get("user_id") and not _expired(state):
        return state["user_id"]

    token = state.get("access_token") or ""
    user_id = lookup_user_id(token)
    if user_id:
        remember_identity(request, user_id, token)
    elif state:
        logger.info("Cached identity for %s is no longer valid", state.get("user_id") or "(unknown)")
        forget_identity(request)
    return user_id
