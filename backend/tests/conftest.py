"""Pytest fixtures for unified order tests."""

import pytest

from wxpay.config import Credentials
from wxpay.models.params import ParamSet


@pytest.fixture
def credentials():
    return Credentials(app_id="wx1", mch_id="m1", api_key="secret")


@pytest.fixture
def order_fields():
    """Caller supplied fields for a NATIVE order (appid/mch_id are injected)."""
    return {
        "nonce_str": "n1",
        "body": "order",
        "out_trade_no": "1001",
        "total_fee": "100",
        "spbill_create_ip": "1.2.3.4",
        "notify_url": "https://x/y",
        "trade_type": "NATIVE",
    }


@pytest.fixture
def signed_fields():
    """All nine required fields with identity values filled in."""
    return ParamSet({
        "appid": "wx1",
        "mch_id": "m1",
        "nonce_str": "n1",
        "body": "order",
        "out_trade_no": "1001",
        "total_fee": "100",
        "spbill_create_ip": "1.2.3.4",
        "notify_url": "https://x/y",
        "trade_type": "NATIVE",
    })
