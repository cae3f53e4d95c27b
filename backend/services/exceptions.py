from typing import Optional


class PaymentError(Exception):
    """Base exception for payment order errors"""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MethodNotAllowedError(PaymentError):
    """Request used a verb other than POST"""
    status_code = 405

    def __init__(self, message: str = "Method Not Allowed"):
        super().__init__(message)


class ServerMisconfiguredError(PaymentError):
    """Merchant credentials are missing from the environment"""
    status_code = 500


class InvalidRequestError(PaymentError):
    """Request body is missing fields or carries invalid values"""
    status_code = 400


class ProviderError(PaymentError):
    """The payment gateway rejected the order; its response is relayed as-is"""

    def __init__(self, status_code: int, body: bytes, content_type: Optional[str] = None):
        super().__init__(f"Provider responded with status {status_code}")
        self.status_code = status_code
        self.body = body
        self.content_type = content_type or "application/json"


class PaymentServerError(PaymentError):
    """Transport failure or any other unexpected error"""
    status_code = 500

    def __init__(self, message: str = "Internal Server Error", error: Optional[str] = None):
        super().__init__(message)
        self.error = error
