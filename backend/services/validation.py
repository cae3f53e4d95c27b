import logging
from typing import Any

from pydantic import ValidationError

from ..models.payment_model import PayUOrderRequest, CashfreeOrderRequest
from ..utils.helpers import sanitize_input
from .exceptions import InvalidRequestError

logger = logging.getLogger(__name__)

PAYU_MISSING_FIELDS_MESSAGE = "Missing required fields."
PAYU_INVALID_FIELDS_MESSAGE = "Invalid field values."
MISSING_ERROR_TYPES = {"missing", "string_too_short"}
CASHFREE_INVALID_INPUT_MESSAGE = "Invalid input"

def _describe(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in e['loc']) or 'body'}: {e['msg']}"
        for e in error.errors()
    )

def validate_payu_request(body: Any) -> PayUOrderRequest:
    """
    Coerce an untrusted JSON body into a PayUOrderRequest.

    ``name`` is accepted in place of ``firstname``. Raises
    InvalidRequestError when a field is missing, empty, not a positive
    amount or contains the hash delimiter.
    """
    if not isinstance(body, dict):
        raise InvalidRequestError(PAYU_MISSING_FIELDS_MESSAGE)

    data = dict(body)
    if not data.get("firstname") and data.get("name"):
        data["firstname"] = data["name"]
    for field in ("firstname", "productinfo"):
        if isinstance(data.get(field), str):
            data[field] = sanitize_input(data[field])

    try:
        return PayUOrderRequest.model_validate(
            {key: data[key] for key in PayUOrderRequest.model_fields if data.get(key) is not None}
        )
    except ValidationError as e:
        logger.warning(f"Rejected PayU order request: {_describe(e)}")
        if any(err["type"] in MISSING_ERROR_TYPES for err in e.errors()):
            raise InvalidRequestError(PAYU_MISSING_FIELDS_MESSAGE)
        raise InvalidRequestError(PAYU_INVALID_FIELDS_MESSAGE)

def validate_cashfree_request(body: Any) -> CashfreeOrderRequest:
    """Coerce an untrusted JSON body into a CashfreeOrderRequest (amount must be > 0)"""
    if not isinstance(body, dict):
        raise InvalidRequestError(CASHFREE_INVALID_INPUT_MESSAGE)

    data = dict(body)
    if isinstance(data.get("name"), str):
        data["name"] = sanitize_input(data["name"])

    try:
        return CashfreeOrderRequest.model_validate(
            {key: data[key] for key in CashfreeOrderRequest.model_fields if key in data}
        )
    except ValidationError as e:
        logger.warning(f"Rejected Cashfree order request: {_describe(e)}")
        raise InvalidRequestError(CASHFREE_INVALID_INPUT_MESSAGE)
