from urllib.parse import parse_qs, urlsplit

import pytest
import requests

from textwave_client import ConfigurationError, TextWaveClient, TextWaveError, DEFAULT_BASE_URL


SEND_RESPONSE = {
    "status": "complete",
    "message": "Messages sent",
    "data": {
        "totalSent": 1,
        "totalFailed": 0,
        "creditsUsed": 1,
        "results": [{"phone": "254712345678", "status": "sent", "messageId": "msg_1"}],
    },
}


@pytest.mark.parametrize("api_key", ["", None])
def test_empty_api_key_is_rejected(api_key):
    with pytest.raises(ConfigurationError):
        TextWaveClient(api_key)


def test_any_non_empty_api_key_is_accepted():
    client = TextWaveClient("x")
    assert client.api_key == "x"
    assert client.base_url == DEFAULT_BASE_URL


def test_trailing_slash_stripped_once():
    assert TextWaveClient("k", "https://example.test/v1/").base_url == "https://example.test/v1"
    assert TextWaveClient("k", "https://example.test/v1//").base_url == "https://example.test/v1/"
    assert TextWaveClient("k", "https://example.test/v1").base_url == "https://example.test/v1"


def test_credential_and_base_url_are_read_only():
    client = TextWaveClient("k")
    with pytest.raises(AttributeError):
        client.api_key = "other"
    with pytest.raises(AttributeError):
        client.base_url = "https://elsewhere.test"


def test_repr_hides_api_key():
    assert "secret" not in repr(TextWaveClient("secret"))


def test_send_sms_request(transport):
    transport.respond(200, SEND_RESPONSE)
    client = TextWaveClient("tw_key", "https://api.example.test/v1/")

    result = client.send_sms("254712345678", "Hello!", "MyBrand")

    assert result == SEND_RESPONSE
    call = transport.last
    assert call.method == "POST"
    assert call.url == "https://api.example.test/v1/sms/send"
    assert call.headers["Authorization"] == "ApiKey tw_key"
    assert call.headers["Content-Type"] == "application/json"
    assert call.body == {"to": "254712345678", "message": "Hello!", "senderId": "MyBrand"}
    assert call.timeout is None


def test_send_sms_single_and_list_recipient_differ_only_in_to(transport):
    client = TextWaveClient("k")
    client.send_sms("254712345678", "Hi")
    client.send_sms(["254712345678"], "Hi")

    single, listed = transport.calls[0].body, transport.calls[1].body
    assert single["to"] == "254712345678"
    assert listed["to"] == ["254712345678"]
    single.pop("to")
    listed.pop("to")
    assert single == listed


def test_send_sms_keeps_recipient_order(transport):
    client = TextWaveClient("k")
    client.send_sms(("254723456789", "254712345678"), "Bulk")
    assert transport.last.body["to"] == ["254723456789", "254712345678"]


@pytest.mark.parametrize("sender_id", [None, ""])
def test_send_sms_omits_sender_id(transport, sender_id):
    client = TextWaveClient("k")
    client.send_sms("254712345678", "Hi", sender_id)
    assert "senderId" not in transport.last.body


def test_send_sms_does_not_validate_locally(transport):
    client = TextWaveClient("k")
    client.send_sms("not-a-number", "x" * 2000, "WAYTOOLONGSENDER")
    assert transport.last.body["message"] == "x" * 2000


def test_get_history_without_options_has_no_query(transport):
    client = TextWaveClient("k", "https://api.example.test/v1")
    client.get_history()
    assert transport.last.method == "GET"
    assert transport.last.url == "https://api.example.test/v1/sms/history"
    assert transport.last.data is None


def test_get_history_with_all_options(transport):
    client = TextWaveClient("k")
    client.get_history(page=2, limit=50, status="delivered")

    parts = urlsplit(transport.last.url)
    assert parts.path.endswith("/sms/history")
    assert parse_qs(parts.query) == {"page": ["2"], "limit": ["50"], "status": ["delivered"]}


def test_get_history_only_supplied_options(transport):
    client = TextWaveClient("k")
    client.get_history(status="failed")
    assert urlsplit(transport.last.url).query == "status=failed"


def test_get_balance(transport):
    body = {"status": "success", "data": {"smsCredits": 120, "totalCreditsUsed": 880}}
    transport.respond(200, body)
    client = TextWaveClient("k", "https://api.example.test/v1")

    assert client.get_balance() == body
    assert transport.last.method == "GET"
    assert transport.last.url == "https://api.example.test/v1/wallet/balance"


def test_get_transactions_defaults(transport):
    client = TextWaveClient("k", "https://api.example.test/v1")
    client.get_transactions()
    assert transport.last.url == "https://api.example.test/v1/wallet/transactions?page=1&limit=20"


def test_get_transactions_custom_page(transport):
    client = TextWaveClient("k")
    client.get_transactions(3, 10)
    assert urlsplit(transport.last.url).query == "page=3&limit=10"


def test_error_response_carries_code_and_status(transport):
    transport.respond(401, {"code": "UNAUTHORIZED", "message": "Invalid API key"})
    client = TextWaveClient("bad")

    with pytest.raises(TextWaveError) as excinfo:
        client.get_balance()

    err = excinfo.value
    assert err.code == "UNAUTHORIZED"
    assert err.status == 401
    assert err.message == "Invalid API key"
    assert str(err) == "Invalid API key"


def test_error_response_without_message(transport):
    transport.respond(402, {"code": "INSUFFICIENT_CREDITS"})
    client = TextWaveClient("k")

    with pytest.raises(TextWaveError) as excinfo:
        client.send_sms("254712345678", "Hi")

    assert excinfo.value.message == "API request failed"
    assert excinfo.value.code == "INSUFFICIENT_CREDITS"
    assert excinfo.value.status == 402


def test_error_response_with_non_object_body(transport):
    transport.respond(500, ["unexpected"])
    client = TextWaveClient("k")

    with pytest.raises(TextWaveError) as excinfo:
        client.get_balance()

    assert excinfo.value.code is None
    assert excinfo.value.status == 500


def test_invalid_json_propagates(transport):
    transport.respond(502, content=b"<html>Bad Gateway</html>")
    client = TextWaveClient("k")

    with pytest.raises(requests.exceptions.JSONDecodeError):
        client.get_balance()


def test_transport_errors_propagate_unmodified(transport):
    transport.error = requests.exceptions.ConnectionError("connection refused")
    client = TextWaveClient("k")

    with pytest.raises(requests.exceptions.ConnectionError):
        client.get_history()
    assert len(transport.calls) == 1


def test_malformed_success_payload_returned_as_is(transport):
    transport.respond(200, {"unexpected": True})
    client = TextWaveClient("k")
    assert client.get_balance() == {"unexpected": True}


def test_caller_headers_override_defaults(transport):
    client = TextWaveClient("k")
    client._request("GET", "/wallet/balance", headers={"Content-Type": "text/plain", "X-Trace": "1"})

    headers = transport.last.headers
    assert headers["Content-Type"] == "text/plain"
    assert headers["X-Trace"] == "1"
    assert headers["Authorization"] == "ApiKey k"


def test_timeout_is_passed_through(transport):
    client = TextWaveClient("k", timeout=5)
    client.get_balance()
    assert transport.last.timeout == 5
