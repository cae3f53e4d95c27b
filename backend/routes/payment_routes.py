import logging
from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ..config.settings import settings
from ..models.payment_model import CashfreeOrderResponse
from ..services.payment_service import payu_service, cashfree_service
from ..services.validation import validate_payu_request, validate_cashfree_request
from ..services.exceptions import (
    PaymentError, MethodNotAllowedError, InvalidRequestError, ProviderError, PaymentServerError
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Every verb is routed to the handlers so they can answer 405 themselves
ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

def error_response(exc: PaymentError) -> Response:
    """Map a PaymentError onto the HTTP response the client sees"""
    if isinstance(exc, MethodNotAllowedError):
        return Response(content=exc.message, status_code=405,
                        headers={"Allow": "POST"}, media_type="text/plain")
    if isinstance(exc, ProviderError):
        return Response(content=exc.body, status_code=exc.status_code,
                        media_type=exc.content_type)
    content = {"message": exc.message}
    if isinstance(exc, PaymentServerError) and exc.error:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content)

async def read_json_body(request: Request):
    try:
        return await request.json()
    except ValueError:
        raise InvalidRequestError("Request body must be valid JSON.")

async def create_payu_order(request: Request):
    """
    Create a signed PayU Bolt payload.

    Checks, in order: method, merchant configuration, body. The response
    carries key, txnid, amount, productinfo, firstname, email, phone,
    surl, furl and hash.
    """
    logger.info("PayU API: Request received")
    try:
        if request.method != "POST":
            raise MethodNotAllowedError()
        payu_service.ensure_configured()
        order = validate_payu_request(await read_json_body(request))
        payload = payu_service.create_order(order)
        return JSONResponse(content=payload.model_dump())
    except PaymentError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error creating PayU order: {e}", exc_info=True)
        return error_response(PaymentServerError("Failed to create payment order."))

async def create_cashfree_order(request: Request):
    """Create a Cashfree order and return its payment_session_id"""
    logger.info("Cashfree API: Request received")
    try:
        if request.method != "POST":
            raise MethodNotAllowedError()
        cashfree_service.ensure_configured()
        order = validate_cashfree_request(await read_json_body(request))
        session = cashfree_service.create_order(order)
        return JSONResponse(
            content=CashfreeOrderResponse(payment_session_id=session.payment_session_id).model_dump()
        )
    except PaymentError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error creating Cashfree order: {e}", exc_info=True)
        return error_response(PaymentServerError(error=str(e)))

@router.api_route("/payu/create-payment-order", methods=ANY_METHOD)
async def payu_order_endpoint(request: Request):
    return await create_payu_order(request)

@router.api_route("/cashfree/create-payment-order", methods=ANY_METHOD)
async def cashfree_order_endpoint(request: Request):
    return await create_cashfree_order(request)

@router.api_route("/create-payment-order", methods=ANY_METHOD)
async def create_payment_order(request: Request):
    """Serve the gateway selected by PAYMENT_GATEWAY"""
    if settings.PAYMENT_GATEWAY == "cashfree":
        return await create_cashfree_order(request)
    return await create_payu_order(request)
