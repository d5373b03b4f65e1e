"""
WeChat Pay Exception Hierarchy

Every stage of a unified order call fails fast with a named error.
All error codes use the wxpay: prefix so callers can map them to API payloads.
"""
from typing import Optional, Dict, Any


class WxPayError(Exception):
    """
    Base exception for all unified order errors.

    Carries a stable error code, a human readable message and optional
    structured details (offending field, gateway codes, HTTP status).
    """

    def __init__(
        self,
        error_code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to API error response format."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# ============================================================================
# Configuration
# ============================================================================

class ConfigurationError(WxPayError):
    """Gateway credentials are missing or unusable."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("wxpay:config:invalid", message, details)


class PayerNotConfiguredError(ConfigurationError):
    """
    No credentials were supplied.

    Example:
    - Builder constructed from settings with WXPAY_API_KEY unset
    """

    def __init__(self, message: str = "payer credentials are not configured"):
        super().__init__(message)
        self.error_code = "wxpay:config:payer_not_configured"


# ============================================================================
# Request validation
# ============================================================================

class ParamsValidationError(WxPayError):
    """Caller supplied parameters are not a legal unified order request."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        error_code: str = "wxpay:params:invalid"
    ):
        details = {"field": field} if field else {}
        super().__init__(error_code, message, details)
        self.field = field


class NilParamsError(ParamsValidationError):
    def __init__(self):
        super().__init__("params must not be empty", error_code="wxpay:params:nil")


class MissingTradeTypeError(ParamsValidationError):
    def __init__(self):
        super().__init__(
            "trade_type is required",
            field="trade_type",
            error_code="wxpay:params:missing_trade_type"
        )


class InvalidTradeTypeError(ParamsValidationError):
    def __init__(self, trade_type: Any):
        super().__init__(
            f"unsupported trade_type: {trade_type}",
            field="trade_type",
            error_code="wxpay:params:invalid_trade_type"
        )


class MissingOpenIdError(ParamsValidationError):
    """JSAPI orders must name the paying user."""

    def __init__(self):
        super().__init__(
            "openid is required for JSAPI trade_type",
            field="openid",
            error_code="wxpay:params:missing_openid"
        )


class MissingRequiredFieldError(ParamsValidationError):
    def __init__(self, field: str):
        super().__init__(
            f"need {field}",
            field=field,
            error_code="wxpay:params:missing_field"
        )


class EmptyRequiredFieldError(MissingRequiredFieldError):
    """Required field is present but empty ('' or 0), so it would not be signed."""

    def __init__(self, field: str):
        ParamsValidationError.__init__(
            self,
            f"{field} must be non-empty",
            field=field,
            error_code="wxpay:params:empty_field"
        )


class UnknownFieldError(ParamsValidationError):
    """Field is neither required nor optional for unified order."""

    def __init__(self, field: str):
        super().__init__(
            f"no need {field} param",
            field=field,
            error_code="wxpay:params:unknown_field"
        )


class InvalidFieldValueError(ParamsValidationError):
    def __init__(self, field: str, value: Any):
        message = f"unsupported value type {type(value).__name__} for {field}"
        if isinstance(value, float):
            message = f"{field} must be a whole number (amounts are integer fen), got {value}"
        super().__init__(
            message,
            field=field,
            error_code="wxpay:params:invalid_value"
        )


# ============================================================================
# Signing
# ============================================================================

class SigningError(WxPayError):
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("wxpay:sign:error", message, details)


class InvalidAlgorithmError(SigningError):
    """sign_type is not MD5 or HMAC-SHA256."""

    def __init__(self, sign_type: Any):
        super().__init__(f"invalid sign type: {sign_type}", {"sign_type": sign_type})
        self.error_code = "wxpay:sign:invalid_algorithm"


# ============================================================================
# Transport and response
# ============================================================================

class TransportError(WxPayError):
    """
    The HTTP exchange itself failed.

    Examples:
    - Connection refused or TLS failure
    - Gateway answered with a non-2xx status code
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        details = {"status_code": status_code} if status_code is not None else {}
        super().__init__("wxpay:transport:error", message, details)
        self.status_code = status_code


class DecodeError(WxPayError):
    def __init__(self, message: str):
        super().__init__("wxpay:response:decode_error", message)


class GatewayProtocolError(WxPayError):
    """
    Gateway rejected the request envelope (return_code != SUCCESS).

    Example:
    - Signature error, missing parameter, wrong merchant id
    """

    def __init__(self, return_msg: str):
        super().__init__(
            "wxpay:gateway:protocol_failure",
            return_msg or "gateway returned FAIL",
            {"return_msg": return_msg}
        )
        self.return_msg = return_msg


class BusinessFailureError(WxPayError):
    """
    Gateway accepted the envelope but the order was refused
    (result_code != SUCCESS).

    Examples:
    - ORDERPAID: order already paid
    - OUT_TRADE_NO_USED: merchant order number reused
    """

    def __init__(self, err_code: str, err_code_des: str):
        super().__init__(
            "wxpay:gateway:business_failure",
            err_code_des or err_code or "gateway returned business FAIL",
            {"err_code": err_code, "err_code_des": err_code_des}
        )
        self.err_code = err_code
        self.err_code_des = err_code_des


class SignatureMismatchError(WxPayError):
    """Response signature does not match the recomputed one."""

    def __init__(self, message: str = "response signature mismatch"):
        super().__init__("wxpay:response:signature_mismatch", message)


class MissingSignatureError(SignatureMismatchError):
    def __init__(self):
        super().__init__("response carries no sign field")
        self.error_code = "wxpay:response:missing_signature"
