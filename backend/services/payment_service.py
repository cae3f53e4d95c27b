import logging
import requests
from typing import Dict, Any

from ..config.settings import settings
from ..models.payment_model import (
    PayUOrderRequest, PayUOrderResponse, CashfreeOrderRequest, OrderSession
)
from ..utils.helpers import (
    generate_payu_hash, generate_transaction_id, generate_order_id, generate_customer_id
)
from .exceptions import ServerMisconfiguredError, ProviderError, PaymentServerError

logger = logging.getLogger(__name__)

class PayUService:
    """Prepares signed payloads for the PayU Bolt checkout"""

    def ensure_configured(self) -> None:
        if not settings.validate_payu_config():
            raise ServerMisconfiguredError(
                "Server configuration error: PAYU_KEY or PAYU_SALT is missing."
            )

    def create_order(self, order: PayUOrderRequest) -> PayUOrderResponse:
        """
        Build the Bolt launch payload for a validated order.

        No call is made to PayU here; the browser hands this payload to
        the checkout SDK, and PayU recomputes the hash to verify it.
        """
        self.ensure_configured()
        key = settings.PAYU_KEY
        txnid = generate_transaction_id()

        signature = generate_payu_hash(
            key=key,
            txnid=txnid,
            amount=order.amount,
            productinfo=order.productinfo,
            firstname=order.firstname,
            email=order.email,
            salt=settings.PAYU_SALT,
        )
        logger.info(f"PayU payload signed for txnid={txnid} amount={order.amount}")

        return PayUOrderResponse(
            key=key,
            txnid=txnid,
            amount=order.amount,
            productinfo=order.productinfo,
            firstname=order.firstname,
            email=order.email,
            phone=order.phone,
            surl=settings.PAYU_SUCCESS_URL,
            furl=settings.PAYU_FAILURE_URL,
            hash=signature,
        )

class CashfreeService:
    """Creates hosted-checkout orders through the Cashfree orders API"""

    def ensure_configured(self) -> None:
        if not settings.validate_cashfree_config():
            raise ServerMisconfiguredError(
                "Server configuration error: CASHFREE_APP_ID or CASHFREE_SECRET_KEY is missing."
            )

    def _get_headers(self) -> Dict[str, str]:
        return {
            "x-client-id": settings.CASHFREE_APP_ID,
            "x-client-secret": settings.CASHFREE_SECRET_KEY,
            "x-api-version": settings.CASHFREE_API_VERSION,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def build_order_payload(self, order_id: str, order: CashfreeOrderRequest) -> Dict[str, Any]:
        """Cashfree order body; {order_id} in return_url is filled in by Cashfree"""
        return {
            "order_id": order_id,
            "order_amount": round(order.amount, 2),
            "order_currency": settings.PAYMENT_CURRENCY,
            "customer_details": {
                "customer_id": generate_customer_id(order.phone),
                "customer_name": order.name,
                "customer_email": order.email,
                "customer_phone": order.phone,
            },
            "order_meta": {
                "return_url": f"{settings.CASHFREE_RETURN_URL}?order_id={{order_id}}",
            },
        }

    def create_order(self, order: CashfreeOrderRequest) -> OrderSession:
        """
        Create an order and return its payment session.

        Provider error responses are raised as ProviderError carrying the
        untouched status and body. Transport failures become
        PaymentServerError with the underlying error text.
        """
        self.ensure_configured()
        order_id = generate_order_id()
        payload = self.build_order_payload(order_id, order)

        logger.info(f"Creating Cashfree order {order_id} amount={payload['order_amount']}")
        try:
            response = requests.post(
                settings.CASHFREE_API_URL,
                json=payload,
                headers=self._get_headers(),
                timeout=settings.CASHFREE_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Cashfree request failed for order {order_id}: {e}")
            raise PaymentServerError(error=str(e))

        if not response.ok:
            logger.warning(f"Cashfree rejected order {order_id}: status={response.status_code}")
            raise ProviderError(
                status_code=response.status_code,
                body=response.content,
                content_type=response.headers.get("Content-Type"),
            )

        try:
            data = response.json()
        except ValueError as e:
            raise PaymentServerError(error=f"Invalid JSON from Cashfree: {e}")

        payment_session_id = data.get("payment_session_id")
        if not payment_session_id:
            raise PaymentServerError(error="payment_session_id missing from Cashfree response")

        logger.info(f"Cashfree order {order_id} created")
        return OrderSession(
            order_id=order_id,
            payment_session_id=payment_session_id,
            cf_order_id=str(data["cf_order_id"]) if data.get("cf_order_id") is not None else None,
        )

payu_service = PayUService()
cashfree_service = CashfreeService()
