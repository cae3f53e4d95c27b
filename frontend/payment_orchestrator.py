"""
Payment form state machine.

Owns the patient details, the amount source (catalog service or custom
amount), the loading flag and the status shown to the patient. It has no
UI framework dependency: the Streamlit app drives it, and tests drive it
with a fake checkout gateway.
"""
import re
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol

from pydantic import BaseModel

from .payu_service import create_payu_order

logger = logging.getLogger(__name__)

CUSTOM_AMOUNT_PATTERN = re.compile(r"^\d*\.?\d*$")
DEFAULT_PRODUCT_INFO = "Dental Service"

class PaymentStatusState(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"

class PaymentStatus(BaseModel):
    state: PaymentStatusState = PaymentStatusState.IDLE
    title: str = ""
    message: str = ""
    transaction_id: Optional[str] = None

class PatientDetails(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""

class CheckoutCallbacks(BaseModel):
    """Handlers the checkout SDK calls with its outcome"""
    response_handler: Callable[[Dict[str, Any]], None]
    catch_exception: Callable[[Any], None]

class CheckoutGateway(Protocol):
    def launch(self, payload: Dict[str, Any], callbacks: CheckoutCallbacks) -> None:
        ...

def format_amount(amount: float) -> str:
    """500 -> "500", 99.5 -> "99.5" """
    return str(int(amount)) if float(amount).is_integer() else str(amount)

class PaymentOrchestrator:
    def __init__(self, services: List[Dict[str, Any]], gateway: CheckoutGateway,
                 on_close: Callable[[], None],
                 create_order: Callable[[Dict[str, str]], Dict[str, Any]] = create_payu_order,
                 product_info: str = DEFAULT_PRODUCT_INFO):
        self.services = services
        self.gateway = gateway
        self.on_close = on_close
        self.create_order = create_order
        self.product_info = product_info

        self.patient = PatientDetails()
        self.selected_service_id = ""
        self.custom_amount = ""
        self.is_loading = False
        self.status = PaymentStatus()

    # Form state

    def open(self, initial_service_id: Optional[str] = None) -> None:
        """Preselect a service when the modal is opened from a service card"""
        if initial_service_id:
            self.selected_service_id = initial_service_id
            self.custom_amount = ""
        else:
            self.selected_service_id = ""

    def set_detail(self, field: str, value: str) -> None:
        if field not in PatientDetails.model_fields:
            raise ValueError(f"Unknown patient field: {field}")
        setattr(self.patient, field, value)

    def select_service(self, service_id: str) -> None:
        self.selected_service_id = service_id
        self.custom_amount = ""

    def set_custom_amount(self, value: str) -> bool:
        """Accept value only if it is a well-formed non-negative decimal; returns whether it was taken"""
        if not CUSTOM_AMOUNT_PATTERN.match(value):
            return False
        self.custom_amount = value
        self.selected_service_id = ""
        return True

    @property
    def selected_service(self) -> Optional[Dict[str, Any]]:
        return next((s for s in self.services if s["id"] == self.selected_service_id), None)

    @property
    def amount(self) -> float:
        service = self.selected_service
        if service:
            return service["price"]
        try:
            return float(self.custom_amount)
        except ValueError:
            return 0

    # Submission

    def submit(self) -> None:
        if self.is_loading:
            return

        if self.amount <= 0 or not all([self.patient.name, self.patient.email, self.patient.phone]):
            self.status = PaymentStatus(
                state=PaymentStatusState.ERROR,
                title="Validation Error",
                message="Please fill all fields and ensure the amount is greater than zero."
            )
            return

        self.is_loading = True
        self.status = PaymentStatus(
            state=PaymentStatusState.PENDING,
            title="Redirecting to PayU",
            message="Please wait while we initiate the secure payment..."
        )

        try:
            data = self.create_order({
                "amount": format_amount(self.amount),
                "firstname": self.patient.name,
                "email": self.patient.email,
                "phone": self.patient.phone,
                "productinfo": self.product_info,
            })
            payload = {key: data[key] for key in (
                "key", "txnid", "amount", "firstname", "email", "phone",
                "productinfo", "surl", "furl", "hash"
            )}
            self.gateway.launch(payload, CheckoutCallbacks(
                response_handler=self.handle_checkout_response,
                catch_exception=self.handle_checkout_exception,
            ))
        except Exception as e:
            logger.error(f"Payment Error: {e}", exc_info=True)
            self.is_loading = False
            self.status = PaymentStatus(
                state=PaymentStatusState.ERROR,
                title="Payment Error",
                message="Unable to initialize payment. Please try again."
            )

    def handle_checkout_response(self, response: Dict[str, Any]) -> None:
        """Bolt responseHandler: {"response": {"status": ..., "txnid": ..., "error_Message": ...}}"""
        self.is_loading = False
        result = response.get("response") or {}
        if result.get("status") == "success":
            txnid = result.get("txnid")
            self.status = PaymentStatus(
                state=PaymentStatusState.SUCCESS,
                title="Payment Successful!",
                message=f"Transaction ID: {txnid}",
                transaction_id=txnid
            )
        else:
            self.status = PaymentStatus(
                state=PaymentStatusState.ERROR,
                title="Payment Failed",
                message=result.get("error_Message") or "Payment was unsuccessful."
            )

    def handle_checkout_exception(self, error: Any) -> None:
        """Bolt catchException"""
        logger.error(f"Bolt Exception: {error}")
        self.is_loading = False
        self.status = PaymentStatus(
            state=PaymentStatusState.ERROR,
            title="Payment Error",
            message="Payment could not be completed. Please try again."
        )

    # Closing

    def close(self) -> bool:
        """Close the form unless a payment is in flight; returns whether it closed"""
        if self.is_loading:
            return False
        self.status = PaymentStatus()
        self.on_close()
        return True

    def close_status(self) -> None:
        """Dismiss the status panel; a successful payment also ends the flow"""
        was_success = self.status.state == PaymentStatusState.SUCCESS
        self.status = PaymentStatus()
        if was_success:
            self.on_close()
