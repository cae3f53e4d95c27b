from pydantic import BaseModel, Field, field_validator
import math
from typing import Any, Optional

def _coerce_to_text(value: Any) -> Any:
    """Numbers arrive unquoted from some clients; sign their string form"""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, str):
        return value.strip()
    return value

class PayUOrderRequest(BaseModel):
    """Validated body of a PayU create-order request"""
    amount: str = Field(..., min_length=1)
    firstname: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    productinfo: str = Field(..., min_length=1)

    @field_validator("*", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> Any:
        return _coerce_to_text(value)

    @field_validator("*")
    @classmethod
    def reject_delimiter(cls, value: str) -> str:
        # The signature is computed over a pipe-joined string
        if "|" in value:
            raise ValueError("must not contain '|'")
        return value

    @field_validator("amount")
    @classmethod
    def amount_positive(cls, value: str) -> str:
        try:
            parsed = float(value)
        except ValueError:
            raise ValueError("amount must be a number")
        if not math.isfinite(parsed):
            raise ValueError("amount must be finite")
        if not parsed > 0:
            raise ValueError("amount must be greater than zero")
        return value

class CashfreeOrderRequest(BaseModel):
    """Validated body of a Cashfree create-order request"""
    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0, allow_inf_nan=False)

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

class PayUOrderResponse(BaseModel):
    """Signed payload handed to the Bolt checkout SDK"""
    key: str
    txnid: str
    amount: str
    productinfo: str
    firstname: str
    email: str
    phone: str
    surl: str
    furl: str
    hash: str

class CashfreeOrderResponse(BaseModel):
    payment_session_id: str

class OrderSession(BaseModel):
    """Order created with Cashfree; the session id is single-use"""
    order_id: str
    payment_session_id: str
    cf_order_id: Optional[str] = None
