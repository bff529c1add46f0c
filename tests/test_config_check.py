import pytest

from mpgs_bridge.error_handler import ConfigValidationError
from mpgs_bridge.integrations.policy.config_check import validate_gateway_config


def _bundle(**overrides):
    bundle = {
        "merchantId": "TESTMERCHANT01",
        "username": "merchant.TESTMERCHANT01",
        "password": "twelve-chars",
        "apiBaseUrl": "https://mtf.gateway.mastercard.com",
    }
    bundle.update(overrides)
    return bundle


def test_valid_bundle_is_echoed_with_password_hidden():
    result = validate_gateway_config(_bundle())

    assert result["success"] is True
    assert result["message"] == "Configuration validated successfully"
    assert result["config"] == {
        "merchantId": "TESTMERCHANT01",
        "username": "merchant.TESTMERCHANT01",
        "password": "✓ Provided (hidden)",
        "apiBaseUrl": "https://mtf.gateway.mastercard.com",
        "apiVersion": "73",
    }
    assert result["testUrl"] == (
        "https://mtf.gateway.mastercard.com/api/rest/version/73/merchant/TESTMERCHANT01"
        "/order/TEST_ORDER/transaction/TEST_TXN"
    )
    assert "twelve-chars" not in str(result)


def test_explicit_api_version_is_used():
    result = validate_gateway_config(_bundle(apiVersion="78"))

    assert "/version/78/" in result["testUrl"]


def test_short_password_cites_length_rule():
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_gateway_config(_bundle(password="short"))

    assert exc_info.value.status_code == 400
    assert exc_info.value.details.startswith("password:")
    assert "at least 8 characters" in exc_info.value.details
    assert exc_info.value.to_envelope()["error"] == "Validation Error"


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"merchantId": "M" * 41}, "merchantId"),
        ({"merchantId": ""}, "merchantId"),
        ({"username": None}, "username"),
        ({"apiBaseUrl": "not a url"}, "apiBaseUrl"),
        ({"apiBaseUrl": "mtf.gateway.mastercard.com"}, "apiBaseUrl"),
        ({"unexpected": "value"}, "unexpected"),
    ],
)
def test_invalid_bundles_report_offending_field(overrides, field):
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_gateway_config(_bundle(**overrides))

    assert exc_info.value.details.startswith(f"{field}:")


def test_first_violated_rule_wins():
    with pytest.raises(ConfigValidationError) as exc_info:
        validate_gateway_config(_bundle(merchantId="M" * 41, password="short"))

    assert exc_info.value.details.startswith("merchantId:")


def test_missing_payload_is_a_validation_error():
    with pytest.raises(ConfigValidationError):
        validate_gateway_config(None)
