import json
import os
from typing import Any, Dict, Mapping, Optional

import streamlit.components.v1 as components

from .payment_orchestrator import CheckoutCallbacks

BOLT_SCRIPT_URL = os.getenv(
    "BOLT_SCRIPT_URL", "https://sboxcheckout-static.citruspay.com/bolt/run/bolt.min.js"
)

# Query parameters the launcher page uses to report the Bolt outcome back to the app
STATUS_PARAM = "payment_status"
TXNID_PARAM = "txnid"
ERROR_PARAM = "error_Message"
EXCEPTION_PARAM = "bolt_exception"

_LAUNCH_TEMPLATE = """
<script id="bolt-script" src="{script_url}"></script>
<script>
  function report(params) {{
    const target = new URL(window.top.location.href);
    Object.entries(params).forEach(([k, v]) => target.searchParams.set(k, v || ""));
    window.top.location.href = target.toString();
  }}
  window.addEventListener("load", function () {{
    try {{
      bolt.launch({payload}, {{
        responseHandler: function (response) {{
          const r = response.response || {{}};
          report({{"{status}": r.status, "{txnid}": r.txnid, "{error}": r.error_Message}});
        }},
        catchException: function (e) {{
          report({{"{exception}": (e && e.message) || String(e)}});
        }}
      }});
    }} catch (e) {{
      report({{"{exception}": e.message || String(e)}});
    }}
  }});
</script>
"""

class BoltCheckoutGateway:
    """
    Launches PayU Bolt inside a Streamlit HTML component.

    Bolt runs in the browser, so its callbacks cannot reach Python
    directly. The launcher page reloads the app with the outcome in the
    query string and the app passes it to ``dispatch_result``.
    """

    def __init__(self, script_url: str = BOLT_SCRIPT_URL):
        self.script_url = script_url
        self.callbacks: Optional[CheckoutCallbacks] = None

    def render_launcher(self, payload: Dict[str, Any]) -> str:
        return _LAUNCH_TEMPLATE.format(
            script_url=self.script_url,
            payload=json.dumps(payload),
            status=STATUS_PARAM,
            txnid=TXNID_PARAM,
            error=ERROR_PARAM,
            exception=EXCEPTION_PARAM,
        )

    def launch(self, payload: Dict[str, Any], callbacks: CheckoutCallbacks) -> None:
        self.callbacks = callbacks
        components.html(self.render_launcher(payload), height=0)

def has_result(params: Mapping[str, str]) -> bool:
    return STATUS_PARAM in params or EXCEPTION_PARAM in params

def dispatch_result(params: Mapping[str, str], callbacks: CheckoutCallbacks) -> None:
    """Replay a Bolt outcome carried in query parameters onto the checkout callbacks"""
    if EXCEPTION_PARAM in params:
        callbacks.catch_exception(params[EXCEPTION_PARAM])
        return
    callbacks.response_handler({
        "response": {
            "status": params.get(STATUS_PARAM),
            "txnid": params.get(TXNID_PARAM),
            "error_Message": params.get(ERROR_PARAM),
        }
    })
