"""
Unified Order Service

Turns caller intent into a validated, signed, wire-ready unified order
request, sends it once and returns the verified gateway result.

Validation is terminal: no request is ever sent for a ParamSet that
fails any check.
"""
import logging
from dataclasses import dataclass
from typing import Mapping, Optional, Union

from ..config import Credentials, Settings, UNIFIED_ORDER_URL
from ..config import settings as default_settings
from ..exceptions import (
    EmptyRequiredFieldError,
    InvalidTradeTypeError,
    MissingOpenIdError,
    MissingRequiredFieldError,
    MissingTradeTypeError,
    NilParamsError,
    PayerNotConfiguredError,
    UnknownFieldError,
)
from ..models.params import ParamSet, ParamValue, TradeType
from ..models.results import UnifiedOrderResult
from .response_service import ResponseVerifier
from .signature_service import SIGN_FIELD, SignType, parse_sign_type, sign_params
from .transport import RequestsTransport, Transport, XML_CONTENT_TYPE

logger = logging.getLogger(__name__)


REQUIRED_FIELDS = (
    "appid",
    "mch_id",
    "nonce_str",
    "body",
    "out_trade_no",
    "total_fee",
    "spbill_create_ip",
    "notify_url",
    "trade_type",
)

OPTIONAL_FIELDS = (
    "device_info",
    "sign_type",
    "detail",
    "attach",
    "fee_type",
    "time_start",
    "time_expire",
    "goods_tag",
    "limit_pay",
    "receipt",
    "openid",
)


@dataclass(frozen=True)
class PreparedOrder:
    """Signed request ready for the transport."""
    body: bytes
    sign_type: SignType
    params: ParamSet


class OrderRequestBuilder:
    """
    Validates and signs unified order requests.

    Args:
        credentials: Merchant credentials; None makes every build() fail
            with PayerNotConfiguredError
    """

    def __init__(self, credentials: Optional[Credentials]):
        self.credentials = credentials

    def build(self, params: Union[ParamSet, Mapping[str, ParamValue], None]) -> PreparedOrder:
        """
        Validate, sign and serialize a unified order request.

        The caller's ParamSet is copied, never modified.

        Returns:
            PreparedOrder with the XML body and the sign type in effect

        Raises:
            NilParamsError: params empty or None
            PayerNotConfiguredError: no credentials
            MissingTradeTypeError / InvalidTradeTypeError: trade_type
            MissingOpenIdError: JSAPI without openid
            MissingRequiredFieldError: first missing required field
            EmptyRequiredFieldError: required field present with an empty value
            UnknownFieldError: first field outside the allow-list
            InvalidAlgorithmError: sign_type not MD5 / HMAC-SHA256
        """
        if not params:
            raise NilParamsError()
        if self.credentials is None:
            raise PayerNotConfiguredError()

        params = params.copy() if isinstance(params, ParamSet) else ParamSet(params)
        params.add("appid", self.credentials.app_id)
        params.add("mch_id", self.credentials.mch_id)

        if not params.has_value("trade_type"):
            raise MissingTradeTypeError()
        try:
            trade_type = TradeType(params.get("trade_type"))
        except ValueError:
            raise InvalidTradeTypeError(params.get("trade_type")) from None

        raw_sign_type = params.get("sign_type")

        if trade_type is TradeType.JSAPI and not params.has_value("openid"):
            raise MissingOpenIdError()

        for field in REQUIRED_FIELDS:
            if field not in params:
                raise MissingRequiredFieldError(field)
            if not params.has_value(field):
                raise EmptyRequiredFieldError(field)

        for field in params:
            if field not in REQUIRED_FIELDS and field not in OPTIONAL_FIELDS:
                raise UnknownFieldError(field)

        sign_type = parse_sign_type(raw_sign_type)
        params.add(SIGN_FIELD, sign_params(params, sign_type, self.credentials.api_key))

        logger.debug(f"Built unified order out_trade_no={params.get('out_trade_no')} trade_type={trade_type.value} sign_type={sign_type.value}")
        return PreparedOrder(body=params.to_xml(), sign_type=sign_type, params=params)


class UnifiedOrderClient:
    """
    One unified order round trip: build, send once, verify.

    No retry, backoff or timeout logic lives here; configure the
    transport for timeouts.
    """

    def __init__(
        self,
        credentials: Optional[Credentials],
        transport: Optional[Transport] = None,
        url: str = UNIFIED_ORDER_URL
    ):
        self.builder = OrderRequestBuilder(credentials)
        self.verifier = ResponseVerifier(credentials)
        self.transport = transport or RequestsTransport()
        self.url = url

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        transport: Optional[Transport] = None
    ) -> "UnifiedOrderClient":
        """Build a client from settings, the process-wide WXPAY_* settings by default."""
        if settings is None:
            settings = default_settings
        transport = transport or RequestsTransport(timeout=settings.http_timeout)
        return cls(settings.credentials(), transport=transport, url=settings.unified_order_url)

    def unified_order(self, params: Union[ParamSet, Mapping[str, ParamValue], None]) -> UnifiedOrderResult:
        """
        Place a unified order.

        Returns:
            Verified UnifiedOrderResult (prepay_id, code_url, ...)

        Raises:
            WxPayError subclasses from validation, transport and verification
        """
        order = self.builder.build(params)
        logger.info(f"Sending unified order out_trade_no={order.params.get('out_trade_no')}")
        response = self.transport.send(self.url, XML_CONTENT_TYPE, order.body)
        return self.verifier.check(response, order.sign_type)
