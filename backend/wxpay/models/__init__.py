from .params import ParamSet, TradeType, new_nonce_str
from .results import UnifiedOrderResult, RESULT_FIELDS, SUCCESS

__all__ = [
    "ParamSet",
    "TradeType",
    "new_nonce_str",
    "UnifiedOrderResult",
    "RESULT_FIELDS",
    "SUCCESS",
]
