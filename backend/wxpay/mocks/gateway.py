"""
Mock Unified Order Gateway

In-process stand-in for the gateway's /pay/unifiedorder endpoint.
Implements the Transport interface so it can be handed straight to
UnifiedOrderClient.

Mock Behavior:
- Request signature is checked with the merchant key; a bad one yields
  return_code=FAIL, return_msg=SIGNERROR
- out_trade_no values listed in used_trade_nos yield OUT_TRADE_NO_USED
- mode selects a deliberately broken reply for negative tests
"""
import hashlib
import logging
from typing import Literal, Optional, Set

from ..config import Credentials
from ..exceptions import DecodeError, InvalidAlgorithmError, MissingSignatureError
from ..models.params import ParamSet, new_nonce_str
from ..services.signature_service import SIGN_FIELD, parse_sign_type, sign_params, verify_params
from ..services.transport import TransportResponse

logger = logging.getLogger(__name__)

MockMode = Literal["normal", "return_fail", "tampered_sign", "unsigned", "http_error", "garbage"]


class MockUnifiedOrderGateway:
    """
    Args:
        credentials: Merchant credentials the gateway trusts
        mode: Reply behavior (see module docstring)
        used_trade_nos: Merchant order numbers treated as already used
    """

    def __init__(
        self,
        credentials: Credentials,
        mode: MockMode = "normal",
        used_trade_nos: Optional[Set[str]] = None
    ):
        self.credentials = credentials
        self.mode = mode
        self.used_trade_nos = set(used_trade_nos or ())
        self.calls = []

    def send(self, url: str, content_type: str, body: bytes) -> TransportResponse:
        self.calls.append({"url": url, "content_type": content_type, "body": body})

        if self.mode == "http_error":
            return TransportResponse(status_code=502, body=b"Bad Gateway")
        if self.mode == "garbage":
            return TransportResponse(status_code=200, body=b"<xml><return_code>SUCC")

        try:
            request = ParamSet.from_xml(body)
        except DecodeError:
            return self._reply(ParamSet({"return_code": "FAIL", "return_msg": "XML_FORMAT_ERROR"}), None)

        sign_type = request.get("sign_type") or None
        if self.mode == "return_fail" or not self._request_signature_ok(request, sign_type):
            return self._reply(ParamSet({"return_code": "FAIL", "return_msg": "SIGNERROR"}), None)

        reply = ParamSet({
            "return_code": "SUCCESS",
            "return_msg": "OK",
            "appid": self.credentials.app_id,
            "mch_id": self.credentials.mch_id,
            "nonce_str": new_nonce_str(16),
            "device_info": request.get("device_info", ""),
            "trade_type": request.get("trade_type", ""),
        })

        out_trade_no = request.get("out_trade_no")
        if out_trade_no in self.used_trade_nos:
            reply.add("result_code", "FAIL")
            reply.add("err_code", "OUT_TRADE_NO_USED")
            reply.add("err_code_des", "商户订单号重复")
        else:
            self.used_trade_nos.add(out_trade_no)
            reply.add("result_code", "SUCCESS")
            reply.add("prepay_id", "wx" + hashlib.md5(str(out_trade_no).encode("utf-8")).hexdigest()[:28])
            if request.get("trade_type") == "NATIVE":
                reply.add("code_url", f"weixin://wxpay/bizpayurl?pr={new_nonce_str(7)}")
            elif request.get("trade_type") == "MWEB":
                reply.add("mweb_url", f"https://wx.tenpay.com/cgi-bin/mmpayweb-bin/checkmweb?prepay_id={reply.get('prepay_id')}")

        return self._reply(reply, sign_type)

    def _request_signature_ok(self, request: ParamSet, sign_type) -> bool:
        try:
            return verify_params(request, sign_type, self.credentials.api_key)
        except (MissingSignatureError, InvalidAlgorithmError):
            return False

    def _reply(self, reply: ParamSet, sign_type) -> TransportResponse:
        if reply.get("return_code") == "SUCCESS" and self.mode != "unsigned":
            reply.add(SIGN_FIELD, sign_params(reply, parse_sign_type(sign_type), self.credentials.api_key))
            if self.mode == "tampered_sign":
                reply.add(SIGN_FIELD, "0" * 32)
        logger.debug(f"Mock gateway reply: return_code={reply.get('return_code')} result_code={reply.get('result_code')}")
        return TransportResponse(status_code=200, body=reply.to_xml())
