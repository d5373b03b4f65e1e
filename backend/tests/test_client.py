from unittest.mock import MagicMock

import pytest
import requests

from wxpay.config import Settings
from wxpay.exceptions import (
    BusinessFailureError,
    DecodeError,
    GatewayProtocolError,
    MissingSignatureError,
    PayerNotConfiguredError,
    SignatureMismatchError,
    TransportError,
    UnknownFieldError,
)
from wxpay.mocks.gateway import MockUnifiedOrderGateway
from wxpay.models.params import ParamSet
from wxpay.services.order_service import UnifiedOrderClient
from wxpay.services.transport import RequestsTransport, XML_CONTENT_TYPE


def _mock_http_response(body: bytes, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    resp.content = body
    resp.__enter__.return_value = resp
    return resp


def test_native_order_end_to_end(credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials)
    client = UnifiedOrderClient(credentials, transport=gateway)

    result = client.unified_order(order_fields)

    assert result.prepay_id.startswith("wx")
    assert result.code_url.startswith("weixin://")
    assert len(gateway.calls) == 1
    assert gateway.calls[0]["content_type"] == "application/xml;charset=utf-8"
    assert gateway.calls[0]["url"] == "https://api.mch.weixin.qq.com/pay/unifiedorder"


def test_jsapi_hmac_order_end_to_end(credentials, order_fields):
    order_fields.update(trade_type="JSAPI", openid="o1", sign_type="HMAC-SHA256")
    client = UnifiedOrderClient(credentials, transport=MockUnifiedOrderGateway(credentials))
    result = client.unified_order(order_fields)
    assert result.trade_type == "JSAPI"
    assert len(result.sign) == 64


def test_mweb_order_returns_redirect(credentials, order_fields):
    order_fields["trade_type"] = "MWEB"
    client = UnifiedOrderClient(credentials, transport=MockUnifiedOrderGateway(credentials))
    assert client.unified_order(order_fields).mweb_url.startswith("https://")


def test_validation_failure_sends_nothing(credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials)
    order_fields["bogus"] = "1"
    with pytest.raises(UnknownFieldError):
        UnifiedOrderClient(credentials, transport=gateway).unified_order(order_fields)
    assert gateway.calls == []


def test_gateway_rejects_foreign_key(credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials.model_copy(update={"api_key": "other"}))
    with pytest.raises(GatewayProtocolError) as exc:
        UnifiedOrderClient(credentials, transport=gateway).unified_order(order_fields)
    assert exc.value.return_msg == "SIGNERROR"


def test_duplicate_trade_no_is_business_failure(credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials, used_trade_nos={"1001"})
    with pytest.raises(BusinessFailureError) as exc:
        UnifiedOrderClient(credentials, transport=gateway).unified_order(order_fields)
    assert exc.value.err_code == "OUT_TRADE_NO_USED"


@pytest.mark.parametrize(
    "mode, error",
    [
        ("return_fail", GatewayProtocolError),
        ("tampered_sign", SignatureMismatchError),
        ("unsigned", MissingSignatureError),
        ("http_error", TransportError),
        ("garbage", DecodeError),
    ],
)
def test_broken_gateway_replies(credentials, order_fields, mode, error):
    client = UnifiedOrderClient(credentials, transport=MockUnifiedOrderGateway(credentials, mode=mode))
    with pytest.raises(error):
        client.unified_order(order_fields)


def test_unconfigured_client(order_fields):
    with pytest.raises(PayerNotConfiguredError):
        UnifiedOrderClient(None, transport=MagicMock()).unified_order(order_fields)


def test_requests_transport_posts_xml(credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials)
    session = MagicMock()

    def fake_post(url, data, headers, timeout):
        reply = gateway.send(url, headers["Content-Type"], data)
        return _mock_http_response(reply.body, reply.status_code)

    session.post.side_effect = fake_post
    client = UnifiedOrderClient(credentials, transport=RequestsTransport(session=session, timeout=5))

    result = client.unified_order(order_fields)

    assert result.is_result_success
    _, kwargs = session.post.call_args
    assert kwargs["headers"] == {"Content-Type": XML_CONTENT_TYPE}
    assert kwargs["timeout"] == 5
    assert ParamSet.from_xml(kwargs["data"]).get("appid") == "wx1"


def test_requests_transport_connection_error():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")
    with pytest.raises(TransportError) as exc:
        RequestsTransport(session=session).send("https://x", XML_CONTENT_TYPE, b"<xml/>")
    assert isinstance(exc.value.__cause__, requests.ConnectionError)


def test_requests_transport_returns_status_untouched():
    session = MagicMock()
    session.post.return_value = _mock_http_response(b"Bad Gateway", 502)
    response = RequestsTransport(session=session).send("https://x", XML_CONTENT_TYPE, b"<xml/>")
    assert response.status_code == 502
    assert not response.ok


def test_from_settings(credentials, order_fields):
    settings = Settings(app_id="wx1", mch_id="m1", api_key="secret", unified_order_url="https://sandbox/pay")
    gateway = MockUnifiedOrderGateway(credentials)
    client = UnifiedOrderClient.from_settings(settings, transport=gateway)
    client.unified_order(order_fields)
    assert gateway.calls[0]["url"] == "https://sandbox/pay"


def test_default_transport_holds_no_session(monkeypatch, credentials, order_fields):
    gateway = MockUnifiedOrderGateway(credentials)
    session_factory = MagicMock()
    post = MagicMock(
        side_effect=lambda url, data, headers, timeout: _mock_http_response(
            gateway.send(url, headers["Content-Type"], data).body
        )
    )
    monkeypatch.setattr("wxpay.services.transport.requests.Session", session_factory)
    monkeypatch.setattr("wxpay.services.transport.requests.post", post)

    client = UnifiedOrderClient(credentials)
    assert client.transport.session is None

    assert client.unified_order(order_fields).is_result_success
    session_factory.assert_not_called()
    post.assert_called_once()


def test_response_released_on_error_status(monkeypatch):
    resp = _mock_http_response(b"Bad Gateway", 502)
    monkeypatch.setattr("wxpay.services.transport.requests.post", MagicMock(return_value=resp))

    response = RequestsTransport().send("https://x", XML_CONTENT_TYPE, b"<xml/>")

    assert response.status_code == 502
    resp.__exit__.assert_called_once()


def test_from_settings_defaults_to_process_settings(monkeypatch, credentials, order_fields):
    process_settings = Settings(_env_file=None, app_id="wx1", mch_id="m1", api_key="secret")
    monkeypatch.setattr("wxpay.services.order_service.default_settings", process_settings)
    gateway = MockUnifiedOrderGateway(credentials)

    UnifiedOrderClient.from_settings(transport=gateway).unified_order(order_fields)

    assert gateway.calls[0]["url"] == process_settings.unified_order_url
