from django.conf import settings
from django.core.checks import Error, register

from .services.submission import UPLOAD_POLICIES


@register()
def supabase_settings_check(app_configs, **kwargs):
    errors = []
    if not (getattr(settings, "SUPABASE_URL", "") or "").strip():
        errors.append(Error(
            "SUPABASE_URL is not set.",
            hint="Set SUPABASE_URL in the environment or .env file.",
            id="startups.E001",
        ))
    if not (getattr(settings, "SUPABASE_ANON_KEY", "") or "").strip():
        errors.append(Error(
            "SUPABASE_ANON_KEY is not set.",
            hint="Set SUPABASE_ANON_KEY in the environment or .env file.",
            id="startups.E002",
        ))
    policy = getattr(settings, "STARTUP_LOGO_UPLOAD_POLICY", "")
    if policy not in UPLOAD_POLICIES:
        errors.append(Error(
            f"STARTUP_LOGO_UPLOAD_POLICY must be one of {', '.join(UPLOAD_POLICIES)}, got {policy!r}.",
            id="startups.E003",
        ))
    return errors
