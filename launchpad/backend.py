# launchpad/backend.py
import logging

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured
from supabase import Client, create_client

logger = logging.getLogger(__name__)

_client = None


def get_supabase_client() -> Client:
    """
    Shared Supabase client (auth, storage, tables).
    Created on first use from SUPABASE_URL / SUPABASE_ANON_KEY.
    """
    global _client
    if _client is None:
        url = (settings.SUPABASE_URL or "").strip()
        key = (settings.SUPABASE_ANON_KEY or "").strip()
        if not url or not key:
            raise ImproperlyConfigured("SUPABASE_URL and SUPABASE_ANON_KEY must both be set.")
        logger.info("Creating Supabase client for %s", url)
        _client = create_client(url, key)
    return _client
