"""
HTTP Transport for the Unified Order Gateway

Single blocking POST per call, no retry. The response body is read fully
and the connection released before returning.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import requests

from ..exceptions import TransportError

logger = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml;charset=utf-8"


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class Transport(Protocol):
    def send(self, url: str, content_type: str, body: bytes) -> TransportResponse:
        ...


class RequestsTransport:
    """
    requests-based transport.

    Without an injected session every send() is a standalone
    requests.post, so no connection outlives the call.

    Args:
        session: Optional caller-owned requests.Session (caller closes it)
        timeout: Seconds to wait for the gateway; None waits indefinitely
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[float] = None):
        self.session = session
        self.timeout = timeout

    def send(self, url: str, content_type: str, body: bytes) -> TransportResponse:
        """
        POST body to url.

        Raises:
            TransportError: connection-level failure
        """
        logger.info(f"POST {url} ({len(body)} bytes)")
        post = self.session.post if self.session is not None else requests.post
        try:
            with post(
                url,
                data=body,
                headers={"Content-Type": content_type},
                timeout=self.timeout,
            ) as response:
                return TransportResponse(status_code=response.status_code, body=response.content)
        except requests.RequestException as e:
            logger.error(f"Gateway request failed: {e}")
            raise TransportError(f"gateway request failed: {e}") from e
