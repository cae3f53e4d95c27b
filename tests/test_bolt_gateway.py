import json
from unittest.mock import MagicMock, patch

from frontend.bolt_gateway import BoltCheckoutGateway, has_result, dispatch_result
from frontend.payment_orchestrator import CheckoutCallbacks

def make_callbacks():
    return CheckoutCallbacks(response_handler=MagicMock(), catch_exception=MagicMock())

def test_launcher_embeds_script_and_payload():
    gateway = BoltCheckoutGateway(script_url="https://example.test/bolt.js")
    payload = {"key": "testkey", "txnid": "TXN1", "hash": "abc"}

    html = gateway.render_launcher(payload)

    assert 'src="https://example.test/bolt.js"' in html
    assert json.dumps(payload) in html
    assert "bolt.launch(" in html

def test_launch_renders_component():
    gateway = BoltCheckoutGateway()
    callbacks = make_callbacks()
    with patch('frontend.bolt_gateway.components.html') as mock_html:
        gateway.launch({"txnid": "TXN1"}, callbacks)
    mock_html.assert_called_once()
    assert gateway.callbacks is callbacks

def test_dispatch_success_result():
    callbacks = make_callbacks()
    params = {"payment_status": "success", "txnid": "TXN1"}

    assert has_result(params)
    dispatch_result(params, callbacks)

    callbacks.response_handler.assert_called_once_with({
        "response": {"status": "success", "txnid": "TXN1", "error_Message": None}
    })
    callbacks.catch_exception.assert_not_called()

def test_dispatch_exception_result():
    callbacks = make_callbacks()
    dispatch_result({"bolt_exception": "bolt is not defined"}, callbacks)
    callbacks.catch_exception.assert_called_once_with("bolt is not defined")
    callbacks.response_handler.assert_not_called()

def test_no_result_in_plain_url():
    assert not has_result({})
