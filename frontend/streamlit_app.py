import os
import sys
from pathlib import Path

import streamlit as st

# Allow `streamlit run frontend/streamlit_app.py` from the project root
sys.path.append(str(Path(__file__).resolve().parent.parent))

from frontend.payu_service import get_services, check_api_connection
from frontend.payment_orchestrator import (
    PaymentOrchestrator, PaymentStatus, PaymentStatusState, CheckoutCallbacks
)
from frontend.bolt_gateway import BoltCheckoutGateway, has_result, dispatch_result

# Configure page
st.set_page_config(
    page_title="Dental Clinic Payments",
    page_icon="🦷",
    layout="centered"
)

def close_payment_form():
    st.session_state.form_open = False

def get_orchestrator(services) -> PaymentOrchestrator:
    """One orchestrator per browser session, kept across reruns"""
    if "orchestrator" not in st.session_state:
        st.session_state.orchestrator = PaymentOrchestrator(
            services=services,
            gateway=BoltCheckoutGateway(),
            on_close=close_payment_form,
            product_info=os.getenv("PAYU_PRODUCT_INFO", "Dental Service"),
        )
    return st.session_state.orchestrator

def display_payment_status(status: PaymentStatus, orchestrator: PaymentOrchestrator):
    """Show the current payment status to the patient"""
    if status.state == PaymentStatusState.IDLE:
        return

    body = f"**{status.title}**\n\n{status.message}"
    if status.state == PaymentStatusState.PENDING:
        st.info(body, icon="⏳")
        return
    if status.state == PaymentStatusState.SUCCESS:
        st.success(body, icon="✅")
    else:
        st.error(body, icon="⚠️")

    if st.button("Close", key="close_status"):
        orchestrator.close_status()
        st.rerun()

def display_payment_form(orchestrator: PaymentOrchestrator, services):
    """Patient details, service or custom amount, and the pay button"""
    st.header("Online Payment")
    st.markdown("Complete the form below to pay for your service securely.")

    if st.button("✕ Close", key="close_form", disabled=orchestrator.is_loading):
        orchestrator.close()
        st.rerun()

    name = st.text_input("Full Name", value=orchestrator.patient.name)
    email = st.text_input("Email Address", value=orchestrator.patient.email)
    phone = st.text_input("Phone Number", value=orchestrator.patient.phone)
    orchestrator.set_detail("name", name.strip())
    orchestrator.set_detail("email", email.strip())
    orchestrator.set_detail("phone", phone.strip())

    options = [""] + [s["id"] for s in services]
    labels = {s["id"]: f"{s['name']} - ₹{s['price']:,}" for s in services}
    labels[""] = "-- Choose a service --"
    service_id = st.selectbox(
        "Select Service",
        options,
        index=options.index(orchestrator.selected_service_id) if orchestrator.selected_service_id in options else 0,
        format_func=lambda sid: labels[sid],
    )
    if service_id != orchestrator.selected_service_id and service_id:
        orchestrator.select_service(service_id)

    st.markdown("<p style='text-align:center'>OR</p>", unsafe_allow_html=True)

    custom = st.text_input("Enter Custom Amount (₹)", value=orchestrator.custom_amount,
                           placeholder="e.g., 5000")
    if custom != orchestrator.custom_amount and custom:
        if not orchestrator.set_custom_amount(custom):
            st.warning("Please enter a valid amount, e.g. 5000 or 99.50")
        else:
            st.rerun()

    st.metric("Total Amount to Pay", f"₹{orchestrator.amount:,.2f}")

    label = "Processing..." if orchestrator.is_loading else "Pay Securely"
    if st.button(label, type="primary", disabled=orchestrator.is_loading):
        orchestrator.submit()

def main():
    """Main Streamlit application"""
    st.title("🦷 Dental Clinic")

    if not check_api_connection():
        st.error("⚠️ Payment server is not available. Please try again later.")
        return

    services = get_services()
    orchestrator = get_orchestrator(services)
    st.session_state.setdefault("form_open", False)

    # Bolt reports its outcome by reloading the page with query parameters
    params = st.query_params.to_dict()
    if has_result(params):
        dispatch_result(params, CheckoutCallbacks(
            response_handler=orchestrator.handle_checkout_response,
            catch_exception=orchestrator.handle_checkout_exception,
        ))
        st.query_params.clear()
        st.session_state.form_open = True

    display_payment_status(orchestrator.status, orchestrator)

    if not st.session_state.form_open:
        st.subheader("Our Services")
        for service in services:
            col1, col2 = st.columns([3, 1])
            with col1:
                st.markdown(f"**{service['name']}** - ₹{service['price']:,}")
                st.caption(service["description"])
            with col2:
                if st.button("Pay", key=f"pay_{service['id']}"):
                    orchestrator.open(service["id"])
                    st.session_state.form_open = True
                    st.rerun()
        if st.button("Pay a custom amount", type="primary"):
            orchestrator.open()
            st.session_state.form_open = True
            st.rerun()
        return

    display_payment_form(orchestrator, services)

if __name__ == "__main__":
    main()
