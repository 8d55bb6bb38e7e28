from __future__ import annotations

from fastapi import Request

from gemchat.config import get_settings


def get_effective_owner(request: Request) -> str:
    """Resolve the owner key for this request.

    Every request is attributed to the configured single-tenant identity
    (DEFAULT_OWNER_ID). The login flow lives in the web shell and its session
    is not validated here.
    """
    # TODO: validate the web shell's session token and return its subject
    settings = getattr(request.app.state, "settings", None) or get_settings()
    return settings.default_owner_id
