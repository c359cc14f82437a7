"""
Tests for middleware/security_headers.py and middleware/session.py
"""

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

import config
from middleware.security_headers import SecurityHeadersMiddleware
from middleware.session import SessionMiddleware
from utils.session_token import create_session_token


def make_app() -> FastAPI:
    app = FastAPI()
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(SessionMiddleware)

    @app.get("/whoami")
    async def whoami(request: Request):
        return {"user_id": request.state.user_id}

    return app


class TestSecurityHeadersMiddleware:

    def test_headers_when_enabled(self, monkeypatch):
        monkeypatch.setattr(config, "SECURITY_HEADERS_ENABLED", True)
        monkeypatch.setattr(config, "HSTS_ENABLED", True)

        response = TestClient(make_app()).get("/whoami")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"
        assert "max-age=31536000" in response.headers["Strict-Transport-Security"]
        assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"

    def test_no_hsts_over_plain_http(self, monkeypatch):
        monkeypatch.setattr(config, "SECURITY_HEADERS_ENABLED", True)
        monkeypatch.setattr(config, "HSTS_ENABLED", False)

        response = TestClient(make_app()).get("/whoami")

        assert "Strict-Transport-Security" not in response.headers

    def test_disabled(self, monkeypatch):
        monkeypatch.setattr(config, "SECURITY_HEADERS_ENABLED", False)

        response = TestClient(make_app()).get("/whoami")

        assert "X-Frame-Options" not in response.headers


class TestSessionMiddleware:

    def test_anonymous(self):
        assert TestClient(make_app()).get("/whoami").json() == {"user_id": None}

    def test_valid_cookie(self):
        client = TestClient(make_app(), cookies={config.SESSION_COOKIE_NAME: create_session_token(12)})

        assert client.get("/whoami").json() == {"user_id": 12}

    @pytest.mark.parametrize("token", ["garbage", "12.0.forged"])
    def test_invalid_cookie_is_anonymous(self, token):
        client = TestClient(make_app(), cookies={config.SESSION_COOKIE_NAME: token})

        assert client.get("/whoami").json() == {"user_id": None}
