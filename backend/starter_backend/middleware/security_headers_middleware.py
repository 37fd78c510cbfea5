"""Adds security response headers driven by AppSettings.

Headers already set by a route are left untouched, and a header whose value
is empty is skipped.
"""

import logging
from typing import List, Optional, Tuple

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from starter_backend.managers.config import config_manager

logger = logging.getLogger(__name__)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, settings=None) -> None:
        super().__init__(app)
        self.settings = settings if settings is not None else config_manager.app_settings

    def _hsts_enabled(self) -> bool:
        enabled = getattr(self.settings, "security_hsts_enabled", None)
        if enabled is None:
            return not getattr(self.settings, "is_development", True)
        return bool(enabled)

    def _headers(self) -> List[Tuple[str, Optional[str]]]:
        s = self.settings
        headers: List[Tuple[str, Optional[str]]] = []
        if getattr(s, "security_nosniff_enabled", True):
            headers.append(("X-Content-Type-Options", "nosniff"))
        if getattr(s, "security_xfo_enabled", True):
            headers.append(("X-Frame-Options", getattr(s, "security_xfo_value", "SAMEORIGIN")))
        if getattr(s, "security_referrer_policy_enabled", True):
            headers.append(
                ("Referrer-Policy", getattr(s, "security_referrer_policy_value", "no-referrer"))
            )
        if getattr(s, "security_csp_enabled", True):
            headers.append(("Content-Security-Policy", getattr(s, "security_csp_value", None)))
        if getattr(s, "security_coop_enabled", True):
            headers.append(
                ("Cross-Origin-Opener-Policy", getattr(s, "security_coop_value", "same-origin"))
            )
        if self._hsts_enabled():
            headers.append(("Strict-Transport-Security", getattr(s, "security_hsts_value", None)))
        return headers

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        for name, value in self._headers():
            if value and name not in response.headers:
                response.headers[name] = value
        return response
