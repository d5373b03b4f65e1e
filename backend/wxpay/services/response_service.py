"""
Response Verification Service

Interprets and authenticates the gateway's unified order reply.

Gates are evaluated strictly in order:
1. Transport: HTTP status must be 2xx
2. Decode: body must be well-formed XML
3. Protocol: return_code must be SUCCESS
4. Business: result_code must be SUCCESS
5. Signature: recomputed sign must match the received one
"""
import logging
from typing import Optional, Union

from ..config import Credentials
from ..exceptions import (
    BusinessFailureError,
    GatewayProtocolError,
    PayerNotConfiguredError,
    SignatureMismatchError,
    TransportError,
)
from ..models.params import ParamSet
from ..models.results import UnifiedOrderResult
from .signature_service import SignType, verify_params
from .transport import TransportResponse

logger = logging.getLogger(__name__)


class ResponseVerifier:
    """
    Checks a unified order reply against the merchant's credentials.

    Stateless apart from the injected credentials; safe to share between
    threads.
    """

    def __init__(self, credentials: Optional[Credentials]):
        self.credentials = credentials

    def decode(self, body: Union[bytes, str]) -> UnifiedOrderResult:
        """
        Parse the reply body into the fixed result shape.

        Raises:
            DecodeError: malformed XML
        """
        return UnifiedOrderResult.from_params(ParamSet.from_xml(body))

    def verify_signature(self, result: UnifiedOrderResult, sign_type: Union[str, SignType, None]) -> bool:
        """
        Recompute the reply signature.

        Raises:
            PayerNotConfiguredError: no credentials
            MissingSignatureError: reply carries no sign
        """
        if self.credentials is None:
            raise PayerNotConfiguredError()
        return verify_params(result.to_params(), sign_type, self.credentials.api_key)

    def check(
        self,
        response: TransportResponse,
        sign_type: Union[str, SignType, None] = SignType.MD5
    ) -> UnifiedOrderResult:
        """
        Run the full gate and return the verified result.

        Args:
            response: Status code and raw body from the transport
            sign_type: Algorithm the request was signed with

        Returns:
            UnifiedOrderResult that passed every gate

        Raises:
            TransportError: non-2xx status
            DecodeError: malformed XML
            GatewayProtocolError: return_code != SUCCESS
            BusinessFailureError: result_code != SUCCESS
            SignatureMismatchError: signature absent or wrong
        """
        if not response.ok:
            raise TransportError(f"http StatusCode: {response.status_code}", status_code=response.status_code)

        result = self.decode(response.body)

        if not result.is_return_success:
            logger.warning(f"Gateway rejected request: return_code={result.return_code} return_msg={result.return_msg}")
            raise GatewayProtocolError(result.return_msg)

        if not result.is_result_success:
            logger.warning(f"Order refused: err_code={result.err_code} err_code_des={result.err_code_des}")
            raise BusinessFailureError(result.err_code, result.err_code_des)

        # MissingSignatureError is a SignatureMismatchError and propagates as is
        if not self.verify_signature(result, sign_type):
            logger.warning("Response signature mismatch")
            raise SignatureMismatchError()

        logger.info(f"Verified unified order result: trade_type={result.trade_type} prepay_id={result.prepay_id}")
        return result
