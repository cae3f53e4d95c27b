import os
from dotenv import load_dotenv
from typing import Optional

# Load environment variables
load_dotenv()

SANDBOX_CASHFREE_ORDERS_URL = "https://sandbox.cashfree.com/pg/orders"

class Settings:
    """Application settings configuration"""

    # Application
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    DEBUG: bool = ENVIRONMENT == "development"
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("API_PORT", "8000"))
    APP_BASE_URL: str = os.getenv("APP_BASE_URL", "http://localhost:8501")

    # Which integration serves /api/create-payment-order ("payu" or "cashfree")
    PAYMENT_GATEWAY: str = os.getenv("PAYMENT_GATEWAY", "payu").lower()

    # PayU Bolt
    PAYU_SUCCESS_URL: str = os.getenv("PAYU_SUCCESS_URL", f"{APP_BASE_URL}/payment/success")
    PAYU_FAILURE_URL: str = os.getenv("PAYU_FAILURE_URL", f"{APP_BASE_URL}/payment/failure")

    # Cashfree
    CASHFREE_API_URL: str = os.getenv("CASHFREE_API_URL", SANDBOX_CASHFREE_ORDERS_URL)
    CASHFREE_API_VERSION: str = os.getenv("CASHFREE_API_VERSION", "2023-08-01")
    CASHFREE_RETURN_URL: str = os.getenv("CASHFREE_RETURN_URL", f"{APP_BASE_URL}/payment/status")
    CASHFREE_TIMEOUT: float = float(os.getenv("CASHFREE_TIMEOUT", "30"))
    PAYMENT_CURRENCY: str = "INR"

    # CORS
    CORS_ORIGINS: list = [o for o in os.getenv("CORS_ORIGINS", "").split(",") if o] or ["*"]

    # Secrets are looked up per request so a missing value surfaces as a
    # configuration error on that request rather than at startup.
    @property
    def PAYU_KEY(self) -> Optional[str]:
        return os.getenv("PAYU_KEY")

    @property
    def PAYU_SALT(self) -> Optional[str]:
        return os.getenv("PAYU_SALT")

    @property
    def CASHFREE_APP_ID(self) -> Optional[str]:
        return os.getenv("CASHFREE_APP_ID")

    @property
    def CASHFREE_SECRET_KEY(self) -> Optional[str]:
        return os.getenv("CASHFREE_SECRET_KEY")

    # Validation methods
    def validate_payu_config(self) -> bool:
        """Validate PayU merchant key/salt configuration"""
        return all([self.PAYU_KEY, self.PAYU_SALT])

    def validate_cashfree_config(self) -> bool:
        """Validate Cashfree app id/secret configuration"""
        return all([self.CASHFREE_APP_ID, self.CASHFREE_SECRET_KEY])

# Global settings instance
settings = Settings()
