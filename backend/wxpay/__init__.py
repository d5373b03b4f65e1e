"""
WeChat Pay Unified Order

Request construction, signing and response verification for the
/pay/unifiedorder gateway operation.
"""
from .config import Credentials, Settings
from .models import ParamSet, TradeType, UnifiedOrderResult, new_nonce_str
from .services import (
    OrderRequestBuilder,
    RequestsTransport,
    ResponseVerifier,
    SignType,
    UnifiedOrderClient,
)

__version__ = "0.1.0"
__all__ = [
    "Credentials",
    "Settings",
    "ParamSet",
    "TradeType",
    "UnifiedOrderResult",
    "new_nonce_str",
    "OrderRequestBuilder",
    "RequestsTransport",
    "ResponseVerifier",
    "SignType",
    "UnifiedOrderClient",
]
