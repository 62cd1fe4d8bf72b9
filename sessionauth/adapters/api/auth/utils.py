"""Helpers shared by the auth routes: flash messages and redirects.

Flash messages live under their own session key, separate from the identity
field owned by ``SessionCodec``. They are appended by a POST handler and
popped by the next page view, like connect-flash.
"""

from typing import Dict, List, MutableMapping, Any

from fastapi import status
from starlette.responses import RedirectResponse

from sessionauth.domain.services.auth import Flash, GateResult

FLASH_KEY = "_flash"


def push_flash(session: MutableMapping[str, Any], flash: Flash) -> None:
    flashes: Dict[str, List[str]] = dict(session.get(FLASH_KEY) or {})
    flashes.setdefault(flash.category, []).append(flash.message)
    session[FLASH_KEY] = flashes


def pop_flashes(session: MutableMapping[str, Any]) -> Dict[str, List[str]]:
    return session.pop(FLASH_KEY, None) or {}


def redirect_for(result: GateResult, session: MutableMapping[str, Any]) -> RedirectResponse:
    """Record the result's flash message and redirect (303, so the browser issues a GET)."""
    if result.flash is not None:
        push_flash(session, result.flash)
    return RedirectResponse(result.redirect_to, status_code=status.HTTP_303_SEE_OTHER)
