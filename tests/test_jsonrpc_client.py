"""
Tests for JsonRpcClient — canned HTTP replies, no network.

Uses a FakeTransport that returns pre-built HttpReply objects,
exercising the envelope building and classification in jsonrpc_client.py.

Test plan:
- Submit: result → Ok(signature), error → RPC_PAYLOAD_ERROR, HTTP 500 →
  HTTP_ERROR with status and body, invalid JSON → MALFORMED_RESPONSE,
  neither result nor error → MALFORMED_RESPONSE
- Transport: TransportError / ConnectionError → NETWORK_ERROR
- Envelopes: sendTransaction base64 + encoding option, DAS id "test",
  ids list, endpoint taken from the connection
- Batch lookups: decoded body returned unmodified, even with an error member
- Uninitialized connection → NOT_INITIALIZED, no transport call
"""

import base64
import json
from typing import Any

import pytest

from bubblegum_client.connection import ConnectionContext
from bubblegum_client.errors import ErrorKind
from bubblegum_client.outcome import Err, Ok
from bubblegum_client.rpc.jsonrpc_client import JsonRpcClient
from bubblegum_client.rpc.transport import HttpReply, TransportError

ENDPOINT = "https://rpc.example.com"
CREDENTIAL = "credential"
TX_BYTES = b"\x01\x02signed-transaction\xff"

# ---------------------------------------------------------------------------
# Fake transports
# ---------------------------------------------------------------------------


class FakeTransport:
    """Returns a canned HttpReply for every request."""

    def __init__(self, reply: HttpReply) -> None:
        self._reply = reply
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def post_json(self, url: str, payload: dict[str, Any]) -> HttpReply:
        self.calls.append((url, payload))
        return self._reply


class ErrorTransport:
    """Raises an exception on post_json to simulate transport failures."""

    def __init__(self, exc: Exception) -> None:
        self._exc = exc
        self.calls = 0

    def post_json(self, url: str, payload: dict[str, Any]) -> HttpReply:
        self.calls += 1
        raise self._exc


def _json_reply(body: Any, status: int = 200) -> HttpReply:
    return HttpReply(status_code=status, text=json.dumps(body))


def _connected() -> ConnectionContext:
    ctx = ConnectionContext()
    ctx.initialize(CREDENTIAL, ENDPOINT)
    return ctx


def _client(reply: HttpReply) -> tuple[JsonRpcClient, FakeTransport]:
    transport = FakeTransport(reply)
    return JsonRpcClient(_connected(), transport), transport


# ---------------------------------------------------------------------------
# Canned responses
# ---------------------------------------------------------------------------

SUBMIT_SUCCESS = {"jsonrpc": "2.0", "id": 1, "result": "SIG123"}

SUBMIT_REJECTED = {
    "jsonrpc": "2.0",
    "id": 1,
    "error": {
        "code": -32002,
        "message": (
            "Transaction simulation failed: Error processing Instruction 0: "
            "custom program error: 0x1"
        ),
        "data": {"logs": []},
    },
}

ASSET_BATCH = {
    "jsonrpc": "2.0",
    "id": "test",
    "result": [{"id": "asset1", "ownership": {"owner": "owner1"}}],
}


# ---------------------------------------------------------------------------
# Submit classification
# ---------------------------------------------------------------------------


class TestSubmitSuccess:
    def test_result_is_ok(self) -> None:
        client, _ = _client(_json_reply(SUBMIT_SUCCESS))
        assert client.submit(TX_BYTES) == Ok("SIG123")


class TestSubmitRejected:
    def test_error_member_is_payload_error(self) -> None:
        client, _ = _client(_json_reply(SUBMIT_REJECTED))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.RPC_PAYLOAD_ERROR

    def test_payload_is_error_object(self) -> None:
        client, _ = _client(_json_reply(SUBMIT_REJECTED))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.payload == SUBMIT_REJECTED["error"]

    def test_detail_includes_message(self) -> None:
        client, _ = _client(_json_reply(SUBMIT_REJECTED))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert "0x1" in (result.error.detail or "")


class TestSubmitHttpError:
    def test_500_is_http_error(self) -> None:
        client, _ = _client(HttpReply(status_code=500, text="internal error"))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.HTTP_ERROR
        assert result.error.status == 500
        assert result.error.payload == "internal error"

    def test_429_is_http_error(self) -> None:
        client, _ = _client(HttpReply(status_code=429, text="rate limited"))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.status == 429

    def test_long_body_truncated(self) -> None:
        client, _ = _client(HttpReply(status_code=502, text="x" * 10_000))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert len(result.error.payload) < 10_000


class TestSubmitMalformed:
    def test_invalid_json(self) -> None:
        client, _ = _client(HttpReply(status_code=200, text="<html>oops</html>"))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.MALFORMED_RESPONSE

    def test_neither_result_nor_error(self) -> None:
        client, _ = _client(_json_reply({"jsonrpc": "2.0", "id": 1}))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.MALFORMED_RESPONSE

    def test_body_not_object(self) -> None:
        client, _ = _client(_json_reply(["SIG123"]))
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.MALFORMED_RESPONSE


class TestSubmitTransportError:
    def test_connection_refused(self) -> None:
        transport = ErrorTransport(ConnectionRefusedError("refused"))
        client = JsonRpcClient(_connected(), transport)
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.NETWORK_ERROR
        assert "refused" in (result.error.detail or "")

    def test_transport_error_timeout(self) -> None:
        transport = ErrorTransport(
            TransportError("request timed out after 1.0s", url=ENDPOINT, timed_out=True)
        )
        client = JsonRpcClient(_connected(), transport)
        result = client.submit(TX_BYTES)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.NETWORK_ERROR
        assert result.error.context["timed_out"] is True


class TestSubmitPayload:
    def test_sends_to_connection_endpoint(self) -> None:
        client, transport = _client(_json_reply(SUBMIT_SUCCESS))
        client.submit(TX_BYTES)
        assert len(transport.calls) == 1
        url, _ = transport.calls[0]
        assert url == ENDPOINT

    def test_envelope(self) -> None:
        client, transport = _client(_json_reply(SUBMIT_SUCCESS))
        client.submit(TX_BYTES)
        _, payload = transport.calls[0]
        assert payload["jsonrpc"] == "2.0"
        assert payload["id"] == 1
        assert payload["method"] == "sendTransaction"

    def test_transaction_is_base64(self) -> None:
        client, transport = _client(_json_reply(SUBMIT_SUCCESS))
        client.submit(TX_BYTES)
        _, payload = transport.calls[0]
        encoded, options = payload["params"]
        assert base64.b64decode(encoded) == TX_BYTES
        assert options == {"encoding": "base64"}


# ---------------------------------------------------------------------------
# DAS lookups
# ---------------------------------------------------------------------------


class TestAssetBatch:
    def test_returns_body_unmodified(self) -> None:
        client, _ = _client(_json_reply(ASSET_BATCH))
        assert client.get_asset_batch(["asset1"]) == Ok(ASSET_BATCH)

    def test_error_member_passed_through(self) -> None:
        body = {"jsonrpc": "2.0", "id": "test", "error": {"code": -32601}}
        client, _ = _client(_json_reply(body))
        assert client.get_asset_batch(["asset1"]) == Ok(body)

    def test_envelope(self) -> None:
        client, transport = _client(_json_reply(ASSET_BATCH))
        client.get_asset_batch(["asset1"])
        _, payload = transport.calls[0]
        assert payload == {
            "jsonrpc": "2.0",
            "id": "test",
            "method": "getAssetBatch",
            "params": {"ids": ["asset1"]},
        }

    def test_http_error(self) -> None:
        client, _ = _client(HttpReply(status_code=503, text="unavailable"))
        result = client.get_asset_batch(["asset1"])
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.HTTP_ERROR
        assert result.error.status == 503

    def test_invalid_json(self) -> None:
        client, _ = _client(HttpReply(status_code=200, text="{"))
        result = client.get_asset_batch(["asset1"])
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.MALFORMED_RESPONSE


class TestAssetProofBatch:
    def test_envelope(self) -> None:
        body = {"result": {"asset1": {"proof": ["a"], "root": "r"}}}
        client, transport = _client(_json_reply(body))
        assert client.get_asset_proof_batch(("asset1",)) == Ok(body)
        _, payload = transport.calls[0]
        assert payload["method"] == "getAssetProofBatch"
        assert payload["id"] == "test"
        assert payload["params"] == {"ids": ["asset1"]}

    def test_network_error(self) -> None:
        client = JsonRpcClient(_connected(), ErrorTransport(OSError("dns failure")))
        result = client.get_asset_proof_batch(["asset1"])
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Connection
# ---------------------------------------------------------------------------


class TestUninitialized:
    @pytest.mark.parametrize(
        "call",
        [
            lambda c: c.submit(TX_BYTES),
            lambda c: c.get_asset_batch(["asset1"]),
            lambda c: c.get_asset_proof_batch(["asset1"]),
        ],
    )
    def test_not_initialized_without_io(self, call: Any) -> None:
        transport = FakeTransport(_json_reply(SUBMIT_SUCCESS))
        client = JsonRpcClient(ConnectionContext(), transport)
        result = call(client)
        assert isinstance(result, Err)
        assert result.error.kind == ErrorKind.NOT_INITIALIZED
        assert transport.calls == []

    def test_endpoint_read_per_call(self) -> None:
        ctx = ConnectionContext()
        transport = FakeTransport(_json_reply(SUBMIT_SUCCESS))
        client = JsonRpcClient(ctx, transport)
        assert client.submit(TX_BYTES).is_err
        ctx.initialize(CREDENTIAL, ENDPOINT)
        assert client.submit(TX_BYTES) == Ok("SIG123")
