"""
Pydantic Unified Order Result Model

Fixed-shape record decoded from the gateway's unified order reply.
"""
from typing import Tuple

from pydantic import BaseModel

from .params import ParamSet


SUCCESS = "SUCCESS"

# Wire names of every field the reply may carry, in declaration order
RESULT_FIELDS: Tuple[str, ...] = (
    "return_code",
    "return_msg",
    "appid",
    "mch_id",
    "device_info",
    "nonce_str",
    "sign",
    "result_code",
    "err_code",
    "err_code_des",
    "trade_type",
    "prepay_id",
    "code_url",
    "mweb_url",
)


class UnifiedOrderResult(BaseModel):
    """
    Gateway reply for a unified order call.

    Created once from the response body and never mutated.
    Field names are the wire names.
    """
    return_code: str = ""
    return_msg: str = ""
    appid: str = ""
    mch_id: str = ""
    device_info: str = ""
    nonce_str: str = ""
    sign: str = ""
    result_code: str = ""
    err_code: str = ""
    err_code_des: str = ""
    trade_type: str = ""
    prepay_id: str = ""
    code_url: str = ""  # NATIVE only
    mweb_url: str = ""  # MWEB only

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "json_schema_extra": {
            "example": {
                "return_code": "SUCCESS",
                "return_msg": "OK",
                "appid": "wx2421b1c4370ec43b",
                "mch_id": "10000100",
                "nonce_str": "IITRi8Iabbblz1Jc",
                "sign": "7921E432F65EB8ED0CE9755F0E86D72F",
                "result_code": "SUCCESS",
                "trade_type": "NATIVE",
                "prepay_id": "wx201411101639507cbf6ffd8b0779950874",
                "code_url": "weixin://wxpay/bizpayurl/up?pr=NwY5Mz9&groupid=00"
            }
        }
    }

    @classmethod
    def from_params(cls, params: ParamSet) -> "UnifiedOrderResult":
        """Keep only the declared fields; anything else is dropped."""
        values = params.as_dict()
        return cls(**{name: values[name] for name in RESULT_FIELDS if name in values})

    def to_params(self) -> ParamSet:
        """Non-empty declared fields, as signed by the gateway."""
        params = ParamSet()
        for name in RESULT_FIELDS:
            value = getattr(self, name)
            if value:
                params.add(name, value)
        return params

    @property
    def is_return_success(self) -> bool:
        return self.return_code == SUCCESS

    @property
    def is_result_success(self) -> bool:
        return self.result_code == SUCCESS
