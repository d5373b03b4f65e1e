from .order_service import OrderRequestBuilder, PreparedOrder, UnifiedOrderClient
from .response_service import ResponseVerifier
from .signature_service import SignType, sign_params, verify_params
from .transport import RequestsTransport, TransportResponse

__all__ = [
    "OrderRequestBuilder",
    "PreparedOrder",
    "UnifiedOrderClient",
    "ResponseVerifier",
    "SignType",
    "sign_params",
    "verify_params",
    "RequestsTransport",
    "TransportResponse",
]
