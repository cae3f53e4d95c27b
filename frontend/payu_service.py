import os
import requests
from typing import Dict, Any, List

# Get backend URL from environment variable with default
BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:8000")
API_BASE_URL = BACKEND_URL + "/api"

class PaymentClientError(Exception):
    """Raised when the backend refuses or fails to create an order"""

def create_payu_order(payment_details: Dict[str, str], timeout: float = 30) -> Dict[str, Any]:
    """
    POST patient and amount details to the backend and return the signed
    PayU payload (key, txnid, amount, ..., hash).

    Raises PaymentClientError with the backend's message on any non-2xx
    response or connection failure.
    """
    try:
        response = requests.post(
            f"{API_BASE_URL}/create-payment-order",
            json=payment_details,
            timeout=timeout
        )
    except requests.exceptions.RequestException as e:
        raise PaymentClientError(f"Failed to create PayU order: {e}")

    if not response.ok:
        try:
            message = response.json().get("message")
        except ValueError:
            message = None
        raise PaymentClientError(message or "Failed to create PayU order")

    try:
        return response.json()
    except ValueError:
        raise PaymentClientError("Failed to create PayU order: invalid response from server")

def get_services() -> List[Dict[str, Any]]:
    """Fetch the dental service catalog from the backend"""
    try:
        response = requests.get(f"{API_BASE_URL}/services", timeout=10)
        response.raise_for_status()
        return response.json().get("services", [])
    except requests.exceptions.RequestException:
        return []

def check_api_connection() -> bool:
    """Test connection to the backend API"""
    try:
        response = requests.get(f"{BACKEND_URL}/health", timeout=5)
        return response.status_code == 200
    except requests.exceptions.RequestException:
        return False
