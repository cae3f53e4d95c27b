import json
import hashlib
import pytest
import requests
from fastapi.testclient import TestClient
from unittest.mock import patch, MagicMock

from backend.app import app
from backend.config.settings import settings

client = TestClient(app)

PAYU_BODY = {
    "amount": "500",
    "firstname": "Asha",
    "email": "a@x.com",
    "phone": "9999999999",
    "productinfo": "Dental Service",
}

CASHFREE_BODY = {
    "name": "Asha",
    "email": "a@x.com",
    "phone": "9999999999",
    "amount": 500,
}

@pytest.fixture
def payu_env(monkeypatch):
    monkeypatch.setenv("PAYU_KEY", "testkey")
    monkeypatch.setenv("PAYU_SALT", "testsalt")

@pytest.fixture
def cashfree_env(monkeypatch):
    monkeypatch.setenv("CASHFREE_APP_ID", "app123")
    monkeypatch.setenv("CASHFREE_SECRET_KEY", "secret456")

@pytest.fixture
def no_credentials(monkeypatch):
    for name in ("PAYU_KEY", "PAYU_SALT", "CASHFREE_APP_ID", "CASHFREE_SECRET_KEY"):
        monkeypatch.delenv(name, raising=False)

@pytest.fixture
def mock_post():
    """Mock the outbound Cashfree call"""
    with patch('backend.services.payment_service.requests.post') as mock:
        yield mock

def provider_response(status_code, body):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = body
    response.headers = {"Content-Type": "application/json"}
    response.json.side_effect = lambda: json.loads(body)
    return response

def test_health_check():
    """Test health check endpoint"""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "dental-payments"}
    assert "X-Process-Time" in response.headers

def test_root_endpoint():
    """Test root endpoint"""
    response = client.get("/api")
    assert response.status_code == 200
    assert "message" in response.json()
    assert "endpoints" in response.json()

def test_list_services():
    """Test the service catalog"""
    response = client.get("/api/services")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == len(data["services"])
    assert all(s["price"] > 0 for s in data["services"])

def test_get_service_by_id():
    response = client.get("/api/services/cleaning")
    assert response.status_code == 200
    assert response.json()["price"] == 1500

def test_get_unknown_service():
    response = client.get("/api/services/unknown")
    assert response.status_code == 404
    assert response.json() == {"message": "Service not found"}

@pytest.mark.parametrize("path", [
    "/api/create-payment-order",
    "/api/payu/create-payment-order",
    "/api/cashfree/create-payment-order",
])
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE", "PATCH"])
def test_non_post_is_rejected(path, method, payu_env, cashfree_env):
    """Any verb other than POST gets 405 with Allow: POST"""
    response = client.request(method, path)
    assert response.status_code == 405
    assert response.headers["allow"] == "POST"

def test_payu_order_scenario(payu_env):
    """A valid request is signed with key, fields, ten empty UDFs and salt"""
    response = client.post("/api/payu/create-payment-order", json=PAYU_BODY)

    assert response.status_code == 200
    data = response.json()
    assert data["key"] == "testkey"
    assert data["txnid"].startswith("TXN")
    assert data["amount"] == "500"
    assert data["firstname"] == "Asha"
    assert data["phone"] == "9999999999"
    assert data["surl"] == settings.PAYU_SUCCESS_URL
    assert data["furl"] == settings.PAYU_FAILURE_URL

    hash_string = "|".join(
        ["testkey", data["txnid"], "500", "Dental Service", "Asha", "a@x.com"]
        + [""] * 10 + ["testsalt"]
    )
    assert data["hash"] == hashlib.sha512(hash_string.encode("utf-8")).hexdigest()

def test_payu_missing_config(no_credentials):
    """Missing PAYU_KEY/SALT is reported before the body is read"""
    response = client.post(
        "/api/payu/create-payment-order",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 500
    assert "PAYU_KEY" in response.json()["message"]

@pytest.mark.parametrize("missing", ["amount", "firstname", "email", "phone", "productinfo"])
def test_payu_missing_field(payu_env, missing):
    body = {k: v for k, v in PAYU_BODY.items() if k != missing}
    response = client.post("/api/payu/create-payment-order", json=body)
    assert response.status_code == 400
    assert response.json() == {"message": "Missing required fields."}

def test_payu_rejects_delimiter_in_field(payu_env):
    body = dict(PAYU_BODY, firstname="Asha|admin")
    response = client.post("/api/payu/create-payment-order", json=body)
    assert response.status_code == 400

def test_payu_invalid_json(payu_env):
    response = client.post(
        "/api/payu/create-payment-order",
        content=b"{broken",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400

def test_payu_unexpected_error(payu_env):
    with patch('backend.routes.payment_routes.payu_service.create_order',
               side_effect=RuntimeError("boom")):
        response = client.post("/api/payu/create-payment-order", json=PAYU_BODY)
    assert response.status_code == 500
    assert "message" in response.json()

def test_cashfree_order_success(cashfree_env, mock_post):
    mock_post.return_value = provider_response(
        200, b'{"cf_order_id": 12345, "payment_session_id": "session_abc"}'
    )

    response = client.post("/api/cashfree/create-payment-order", json=CASHFREE_BODY)

    assert response.status_code == 200
    assert response.json() == {"payment_session_id": "session_abc"}

    _, kwargs = mock_post.call_args
    assert kwargs["headers"]["x-client-id"] == "app123"
    assert kwargs["headers"]["x-client-secret"] == "secret456"
    assert kwargs["json"]["order_currency"] == "INR"
    assert kwargs["json"]["order_amount"] == 500
    assert kwargs["json"]["customer_details"]["customer_email"] == "a@x.com"
    assert kwargs["json"]["order_meta"]["return_url"].endswith("?order_id={order_id}")

def test_cashfree_zero_amount_scenario(cashfree_env, mock_post):
    """amount 0 is rejected without calling Cashfree"""
    response = client.post("/api/cashfree/create-payment-order", json=dict(CASHFREE_BODY, amount=0))
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid input"}
    mock_post.assert_not_called()

@pytest.mark.parametrize("missing", ["name", "email", "phone", "amount"])
def test_cashfree_missing_field(cashfree_env, mock_post, missing):
    body = {k: v for k, v in CASHFREE_BODY.items() if k != missing}
    response = client.post("/api/cashfree/create-payment-order", json=body)
    assert response.status_code == 400
    mock_post.assert_not_called()

def test_cashfree_provider_error_forwarded(cashfree_env, mock_post):
    """Provider errors are relayed with their status and exact body"""
    mock_post.return_value = provider_response(402, b'{"code":"insufficient_funds"}')

    response = client.post("/api/cashfree/create-payment-order", json=CASHFREE_BODY)

    assert response.status_code == 402
    assert response.content == b'{"code":"insufficient_funds"}'
    assert response.json() == {"code": "insufficient_funds"}

def test_cashfree_transport_failure(cashfree_env, mock_post):
    mock_post.side_effect = requests.exceptions.ConnectionError("connection refused")

    response = client.post("/api/cashfree/create-payment-order", json=CASHFREE_BODY)

    assert response.status_code == 500
    assert "connection refused" in response.json()["error"]

def test_cashfree_missing_config(no_credentials, mock_post):
    response = client.post(
        "/api/cashfree/create-payment-order",
        content=b"not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 500
    assert "CASHFREE_APP_ID" in response.json()["message"]
    mock_post.assert_not_called()

def test_shared_route_defaults_to_payu(payu_env):
    with patch.object(settings, "PAYMENT_GATEWAY", "payu"):
        response = client.post("/api/create-payment-order", json=PAYU_BODY)
    assert response.status_code == 200
    assert "hash" in response.json()

def test_shared_route_uses_cashfree_when_configured(cashfree_env, mock_post):
    mock_post.return_value = provider_response(200, b'{"payment_session_id": "session_xyz"}')
    with patch.object(settings, "PAYMENT_GATEWAY", "cashfree"):
        response = client.post("/api/create-payment-order", json=CASHFREE_BODY)
    assert response.status_code == 200
    assert response.json() == {"payment_session_id": "session_xyz"}

@pytest.mark.parametrize("amount", ["inf", "Infinity", "nan"])
def test_payu_rejects_non_finite_amount(payu_env, amount):
    response = client.post("/api/payu/create-payment-order", json=dict(PAYU_BODY, amount=amount))
    assert response.status_code == 400
    assert "hash" not in response.json()

def test_cashfree_rejects_infinite_amount(cashfree_env, mock_post):
    """A bare Infinity literal in the body never reaches Cashfree"""
    body = b'{"name": "Asha", "email": "a@x.com", "phone": "9999999999", "amount": Infinity}'
    response = client.post(
        "/api/cashfree/create-payment-order",
        content=body,
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"message": "Invalid input"}
    mock_post.assert_not_called()
