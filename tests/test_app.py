import time

import pytest

from postcode_gate import create_app, create_production_app, GateConfig
from postcode_gate.exceptions import ConfigurationException, PostCodeMismatchException
from postcode_gate.models import SessionData
from postcode_gate.sessions import InMemorySessionStore

from conftest import client_with_session, session_token

INVALID_FORMAT = "無効な形式"
MISMATCH = "郵便番号が違います。"


def test_index_renders_form(client):
    response = client.get("/")
    assert response.status_code == 200
    assert 'name="post_code"' in response.get_data(as_text=True)


def test_correct_code_redirects_with_session_cookie():
    gate = create_app(GateConfig.from_env({}))
    response = gate.app.test_client().post("/", data={"post_code": "1111111"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/info")
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("__session=")
    for attribute in ("HttpOnly", "Secure", "SameSite=Lax", "Path=/", "Max-Age=60"):
        assert attribute in cookie


def test_wrong_code_shows_mismatch(client):
    response = client.post("/", data={"post_code": "9999999"})
    assert response.status_code == 200
    assert MISMATCH in response.get_data(as_text=True)
    assert "Set-Cookie" not in response.headers


@pytest.mark.parametrize("post_code", ["abc", "111-1111", "１１１１１１１", "111111"])
def test_malformed_code_shows_format_error(client, post_code):
    response = client.post("/", data={"post_code": post_code})
    assert response.status_code == 200
    body = response.get_data(as_text=True)
    assert INVALID_FORMAT in body
    assert MISMATCH not in body
    assert "Set-Cookie" not in response.headers


@pytest.mark.parametrize("data", [{}, {"post_code": ""}])
def test_missing_code_falls_back_to_placeholder(client, data):
    response = client.post("/", data=data)
    assert response.status_code == 200
    assert MISMATCH in response.get_data(as_text=True)
    assert "Set-Cookie" not in response.headers


def test_configured_secret_is_used():
    gate = create_app(GateConfig(post_code="1234567", secret_key="k"))
    client = gate.app.test_client()
    assert client.post("/", data={"post_code": "1111111"}).status_code == 200
    assert client.post("/", data={"post_code": "1234567"}).status_code == 302


def test_info_requires_session(gate):
    response = gate.app.test_client().get("/info")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_info_with_issued_session(gate):
    token = session_token(gate.app.test_client().post("/", data={"post_code": "1111111"}))
    response = client_with_session(gate, token).get("/info")
    assert response.status_code == 200


def test_secure_cookie_round_trip_over_https(gate):
    client = gate.app.test_client()
    client.post("/", data={"post_code": "1111111"}, base_url="https://localhost")
    response = client.get("/info", base_url="https://localhost")
    assert response.status_code == 200


def test_info_rejects_forged_session(gate):
    response = client_with_session(gate, "forged.token.value").get("/info")
    assert response.status_code == 302


def test_info_rejects_token_signed_with_other_key(gate):
    other = create_app(GateConfig(secret_key="some-other-key"))
    token = other.session_store.issue(SessionData(verified=True))
    response = client_with_session(gate, token).get("/info")
    assert response.status_code == 302


def test_info_rejects_unverified_session(gate):
    token = gate.session_store.issue(SessionData(verified=False))
    response = client_with_session(gate, token).get("/info")
    assert response.status_code == 302


def test_session_expires_after_sixty_seconds(gate, monkeypatch):
    issued_at = time.time()
    monkeypatch.setattr(time, "time", lambda: issued_at)
    token = session_token(gate.app.test_client().post("/", data={"post_code": "1111111"}))
    client = client_with_session(gate, token)

    monkeypatch.setattr(time, "time", lambda: issued_at + 30)
    assert client.get("/info").status_code == 200

    monkeypatch.setattr(time, "time", lambda: issued_at + 61)
    response = client.get("/info")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_logout_clears_cookie(client):
    response = client.get("/logout")
    assert response.status_code == 302
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("__session=;")
    assert "Max-Age=0" in cookie


def test_swapped_session_store(config):
    store = InMemorySessionStore(max_age=60)
    gate = create_app(config, session_store=store)
    response = gate.app.test_client().post("/", data={"post_code": "1111111"})
    token = session_token(response)
    assert store.verify(token).verified
    info = client_with_session(gate, token).get("/info")
    assert info.status_code == 200


def test_insecure_cookie_for_plain_http():
    gate = create_app(GateConfig(cookie_secure=False))
    response = gate.app.test_client().post("/", data={"post_code": "1111111"})
    assert "Secure" not in response.headers["Set-Cookie"]


def test_production_app_requires_configuration(monkeypatch):
    monkeypatch.delenv("POST_CODE", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ConfigurationException):
        create_production_app()


def test_production_app_with_configuration(monkeypatch):
    monkeypatch.setenv("POST_CODE", "7654321")
    monkeypatch.setenv("SECRET_KEY", "prod-key")
    gate = create_production_app()
    assert gate.config.post_code == "7654321"
    assert gate.config.cookie_secure is True


def test_gate_exceptions_render_form(gate):
    def raises():
        raise PostCodeMismatchException()

    gate.app.add_url_rule("/raises", "raises", raises)
    response = gate.app.test_client().get("/raises")
    assert response.status_code == 200
    assert MISMATCH in response.get_data(as_text=True)


def test_flask_session_signing_is_not_configured(gate):
    # the gate signs its own cookie; Flask's session stays unkeyed
    assert gate.app.secret_key is None
    assert gate.session_store.verify(
        gate.session_store.issue(SessionData(verified=True))
    ).verified
