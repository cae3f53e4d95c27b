import re
import time
import hashlib
from typing import Optional, Sequence

HASH_DELIMITER = "|"
USER_DEFINED_FIELD_COUNT = 10

def sanitize_input(text: str) -> str:
    """
    Sanitize user input to prevent injection attacks
    and remove potentially harmful characters.
    """
    if not text:
        return ""

    # Remove potentially harmful characters
    sanitized = re.sub(r'[<>{}[\]\\]', '', text.strip())
    # Limit length to prevent abuse
    return sanitized[:500]

def generate_payu_hash(key: str, txnid: str, amount: str, productinfo: str,
                       firstname: str, email: str, salt: str,
                       udf: Optional[Sequence[str]] = None) -> str:
    """
    Compute the PayU payment hash.

    The fields are joined with "|" in the order PayU expects:
    key|txnid|amount|productinfo|firstname|email|udf1..udf10|salt
    and digested with SHA-512, returned as lowercase hex. Missing
    user-defined fields are sent as empty strings.
    """
    udf_values = list(udf or [])
    if len(udf_values) > USER_DEFINED_FIELD_COUNT:
        raise ValueError(f"PayU accepts at most {USER_DEFINED_FIELD_COUNT} user-defined fields")
    udf_values += [""] * (USER_DEFINED_FIELD_COUNT - len(udf_values))

    hash_string = HASH_DELIMITER.join(
        [key, txnid, amount, productinfo, firstname, email, *udf_values, salt]
    )
    return hashlib.sha512(hash_string.encode("utf-8")).hexdigest()

def _timestamp_ms() -> int:
    return int(time.time() * 1000)

def generate_transaction_id() -> str:
    """Generate a PayU transaction ID from the current time in milliseconds"""
    return f"TXN{_timestamp_ms()}"

def generate_order_id() -> str:
    """Generate a Cashfree order ID from the current time in milliseconds"""
    return f"order_{_timestamp_ms()}"

def generate_customer_id(phone: str) -> str:
    """Cashfree customer IDs are limited to alphanumerics, '_' and '-'"""
    digits = re.sub(r'[^A-Za-z0-9_-]', '', phone)
    return f"cust_{digits or _timestamp_ms()}"
