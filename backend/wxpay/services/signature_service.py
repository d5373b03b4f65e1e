"""
Signature Service for Unified Order Signing

Implements the gateway's MD5 and HMAC-SHA256 signatures over a ParamSet.

Canonical string:
- Non-empty fields in byte-lexicographic key order, excluding sign
- Joined as key=value pairs with &
- Followed by &key=<api key>
The digest is rendered as uppercase hex.
"""
import hashlib
import hmac
import logging
from enum import Enum
from typing import Optional, Union

from ..exceptions import InvalidAlgorithmError, MissingSignatureError
from ..models.params import ParamSet, format_value

logger = logging.getLogger(__name__)

SIGN_FIELD = "sign"


class SignType(str, Enum):
    MD5 = "MD5"
    HMAC_SHA256 = "HMAC-SHA256"


def parse_sign_type(value: Union[str, SignType, None]) -> SignType:
    """
    Resolve the sign_type field value.

    Absent or empty means MD5.

    Raises:
        InvalidAlgorithmError: any other value
    """
    if value is None or value == "":
        return SignType.MD5
    try:
        return SignType(value)
    except ValueError:
        raise InvalidAlgorithmError(value) from None


def create_canonical_string(params: ParamSet, api_key: str) -> str:
    """
    Build the exact string that is hashed.

    Args:
        params: Fields to sign (sign itself is skipped)
        api_key: Merchant API key appended as &key=

    Returns:
        Canonical string
    """
    keys = [k for k in params.sorted_keys() if k != SIGN_FIELD]
    logger.debug(f"Signing fields: {','.join(keys)}")
    pairs = [f"{k}={format_value(params.get(k))}" for k in keys]
    pairs.append(f"key={api_key}")
    return "&".join(pairs)


def sign_params(
    params: ParamSet,
    sign_type: Union[str, SignType, None],
    api_key: str
) -> str:
    """
    Compute the signature for a ParamSet.

    Args:
        params: Fields to sign
        sign_type: MD5 or HMAC-SHA256 (None means MD5)
        api_key: Merchant API key (shared secret)

    Returns:
        Uppercase hex digest

    Raises:
        InvalidAlgorithmError: sign_type is not supported
    """
    sign_type = parse_sign_type(sign_type)
    message = create_canonical_string(params, api_key).encode("utf-8")

    if sign_type is SignType.MD5:
        digest = hashlib.md5(message).hexdigest()
    else:
        digest = hmac.new(api_key.encode("utf-8"), message, hashlib.sha256).hexdigest()

    return digest.upper()


def verify_params(
    params: ParamSet,
    sign_type: Union[str, SignType, None],
    api_key: str
) -> bool:
    """
    Recompute the signature of a received ParamSet and compare it with
    the value carried in its sign field.

    Returns:
        True if signature matches, False otherwise

    Raises:
        MissingSignatureError: no sign field at all
        InvalidAlgorithmError: sign_type is not supported
    """
    received: Optional[str] = params.get(SIGN_FIELD)
    if not received:
        raise MissingSignatureError()

    expected = sign_params(params, sign_type, api_key)
    return hmac.compare_digest(expected, format_value(received))
