"""Unit tests for SecurityHeadersMiddleware."""

import pytest
from unittest.mock import MagicMock, patch
from fastapi import Request
from starlette.responses import Response

from starter_backend.middleware.security_headers_middleware import SecurityHeadersMiddleware


class MockAppSettings:
    """Mock app settings for testing."""

    def __init__(self, **kwargs):
        self.is_development = kwargs.get("is_development", False)
        self.security_nosniff_enabled = kwargs.get("security_nosniff_enabled", True)
        self.security_xfo_enabled = kwargs.get("security_xfo_enabled", True)
        self.security_xfo_value = kwargs.get("security_xfo_value", "SAMEORIGIN")
        self.security_referrer_policy_enabled = kwargs.get(
            "security_referrer_policy_enabled", True
        )
        self.security_referrer_policy_value = kwargs.get(
            "security_referrer_policy_value", "no-referrer"
        )
        self.security_csp_enabled = kwargs.get("security_csp_enabled", True)
        self.security_csp_value = kwargs.get("security_csp_value", "default-src 'self'")
        self.security_coop_enabled = kwargs.get("security_coop_enabled", True)
        self.security_coop_value = kwargs.get("security_coop_value", "same-origin")
        self.security_hsts_enabled = kwargs.get("security_hsts_enabled", None)
        self.security_hsts_value = kwargs.get("security_hsts_value", "max-age=15552000")


@pytest.fixture
def mock_app():
    """Mock FastAPI app."""
    return MagicMock()


@pytest.fixture
def mock_request():
    """Mock request object."""
    request = MagicMock(spec=Request)
    request.url.path = "/api/test"
    return request


@pytest.fixture
def mock_response():
    """Mock response object."""
    response = MagicMock(spec=Response)
    response.headers = {}
    return response


@pytest.fixture
def mock_call_next(mock_response):
    """Mock call_next function."""

    async def call_next(request):
        return mock_response

    return call_next


class TestSecurityHeadersMiddleware:
    """Test cases for SecurityHeadersMiddleware."""

    @patch("starter_backend.middleware.security_headers_middleware.config_manager")
    def test_init_defaults_to_global_settings(self, mock_config_manager, mock_app):
        mock_config_manager.app_settings = MockAppSettings()

        middleware = SecurityHeadersMiddleware(mock_app)

        assert middleware.settings is mock_config_manager.app_settings

    def test_init_with_explicit_settings(self, mock_app):
        settings = MockAppSettings()

        middleware = SecurityHeadersMiddleware(mock_app, settings=settings)

        assert middleware.settings is settings

    @pytest.mark.asyncio
    async def test_all_headers_enabled_default(self, mock_app, mock_request, mock_call_next):
        middleware = SecurityHeadersMiddleware(mock_app, settings=MockAppSettings())
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "SAMEORIGIN"
        assert response.headers["Referrer-Policy"] == "no-referrer"
        assert response.headers["Content-Security-Policy"] == "default-src 'self'"
        assert response.headers["Cross-Origin-Opener-Policy"] == "same-origin"
        assert response.headers["Strict-Transport-Security"] == "max-age=15552000"

    @pytest.mark.asyncio
    async def test_custom_header_values(self, mock_app, mock_request, mock_call_next):
        custom_csp = "default-src 'self'; script-src 'unsafe-inline'"
        settings = MockAppSettings(
            security_xfo_value="DENY",
            security_referrer_policy_value="strict-origin-when-cross-origin",
            security_csp_value=custom_csp,
        )

        middleware = SecurityHeadersMiddleware(mock_app, settings=settings)
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
        assert response.headers["Content-Security-Policy"] == custom_csp

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "flag, header",
        [
            ("security_nosniff_enabled", "X-Content-Type-Options"),
            ("security_xfo_enabled", "X-Frame-Options"),
            ("security_referrer_policy_enabled", "Referrer-Policy"),
            ("security_csp_enabled", "Content-Security-Policy"),
            ("security_coop_enabled", "Cross-Origin-Opener-Policy"),
            ("security_hsts_enabled", "Strict-Transport-Security"),
        ],
    )
    async def test_single_header_disabled(
        self, flag, header, mock_app, mock_request, mock_call_next
    ):
        middleware = SecurityHeadersMiddleware(mock_app, settings=MockAppSettings(**{flag: False}))
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert header not in response.headers
        # Other headers should still be set
        assert len(response.headers) == 5

    @pytest.mark.asyncio
    async def test_hsts_skipped_in_development_when_unset(
        self, mock_app, mock_request, mock_call_next
    ):
        middleware = SecurityHeadersMiddleware(
            mock_app, settings=MockAppSettings(is_development=True)
        )
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert "Strict-Transport-Security" not in response.headers

    @pytest.mark.asyncio
    async def test_hsts_forced_in_development(self, mock_app, mock_request, mock_call_next):
        middleware = SecurityHeadersMiddleware(
            mock_app,
            settings=MockAppSettings(is_development=True, security_hsts_enabled=True),
        )
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers["Strict-Transport-Security"] == "max-age=15552000"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", ["", None])
    async def test_csp_empty_value(self, value, mock_app, mock_request, mock_call_next):
        """CSP header is not set when value is empty or None."""
        middleware = SecurityHeadersMiddleware(
            mock_app, settings=MockAppSettings(security_csp_value=value)
        )
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert "Content-Security-Policy" not in response.headers

    @pytest.mark.asyncio
    async def test_existing_headers_not_overwritten(self, mock_app, mock_request):
        response = MagicMock(spec=Response)
        response.headers = {
            "X-Content-Type-Options": "existing-value",
            "X-Frame-Options": "existing-xfo",
            "Content-Security-Policy": "existing-csp",
            "Custom-Header": "custom-value",
        }

        async def call_next_with_existing_headers(request):
            return response

        middleware = SecurityHeadersMiddleware(mock_app, settings=MockAppSettings())
        result = await middleware.dispatch(mock_request, call_next_with_existing_headers)

        assert result.headers["X-Content-Type-Options"] == "existing-value"
        assert result.headers["X-Frame-Options"] == "existing-xfo"
        assert result.headers["Content-Security-Policy"] == "existing-csp"
        assert result.headers["Custom-Header"] == "custom-value"
        # Missing headers should be added
        assert result.headers["Referrer-Policy"] == "no-referrer"

    @pytest.mark.asyncio
    async def test_getattr_fallbacks(self, mock_app, mock_request, mock_call_next):
        """Settings objects missing attributes fall back to defaults."""

        class MinimalSettings:
            security_csp_value = None

        middleware = SecurityHeadersMiddleware(mock_app, settings=MinimalSettings())
        response = await middleware.dispatch(mock_request, mock_call_next)

        assert response.headers.get("X-Content-Type-Options") == "nosniff"
        assert response.headers.get("X-Frame-Options") == "SAMEORIGIN"
        assert response.headers.get("Referrer-Policy") == "no-referrer"
        assert "Content-Security-Policy" not in response.headers
        # No is_development attribute: treated as development, so no HSTS
        assert "Strict-Transport-Security" not in response.headers
