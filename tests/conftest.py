import pytest

from postcode_gate import create_app, GateConfig


@pytest.fixture
def config():
    return GateConfig(post_code="1111111", secret_key="test-secret-key")


@pytest.fixture
def gate(config):
    return create_app(config)


@pytest.fixture
def client(gate):
    return gate.app.test_client()


def session_token(response):
    """Pull the __session cookie value out of a Set-Cookie header"""
    header = response.headers["Set-Cookie"]
    name, _, rest = header.partition("=")
    assert name == "__session"
    return rest.split(";", 1)[0]


def client_with_session(gate, token):
    """Test client whose cookie jar already holds the given session token"""
    client = gate.app.test_client()
    client.set_cookie("__session", token)
    return client
