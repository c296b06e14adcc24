"""Tests for response envelope building."""

import json

from ggmcp.rpc.envelope import (
    Protocol,
    build_envelope,
    legacy_envelope,
    mcp_content,
    stringify,
)
from ggmcp.tools.base import ToolResult


class TestStringify:
    def test_strings_pass_through(self):
        assert stringify("plain text") == "plain text"

    def test_sorted_keys(self):
        assert stringify({"b": 1, "a": [2, 3]}) == '{"a": [2, 3], "b": 1}'

    def test_deterministic_for_equal_payloads(self):
        first = {"z": {"y": 1, "x": 2}, "a": None}
        second = {"a": None, "z": {"x": 2, "y": 1}}
        assert stringify(first) == stringify(second)

    def test_unicode_kept(self):
        assert stringify(["é"]) == '["é"]'


class TestLegacyEnvelope:
    def test_success(self):
        assert legacy_envelope(ToolResult.success([1, 2])) == {"status": [1, 2], "error": None}

    def test_success_keeps_payload_structured(self):
        envelope = legacy_envelope(ToolResult.success({"k": "v"}))
        assert envelope["status"] == {"k": "v"}

    def test_failure(self):
        assert legacy_envelope(ToolResult.error("nope")) == {"status": None, "error": "nope"}

    def test_null_payload_still_has_status(self):
        for result in (ToolResult.success(None), ToolResult.success()):
            envelope = legacy_envelope(result)
            assert envelope == {"status": "", "error": None}

    def test_null_payload_agrees_with_mcp_text(self):
        result = ToolResult.success(None)
        assert mcp_content(result)["content"][0]["text"] == legacy_envelope(result)["status"]


class TestMcpContent:
    def test_success(self):
        assert mcp_content(ToolResult.success({"b": 2, "a": 1})) == {
            "content": [{"type": "text", "text": '{"a": 1, "b": 2}'}],
            "isError": False,
        }

    def test_failure(self):
        assert mcp_content(ToolResult.error("bad")) == {
            "content": [{"type": "text", "text": "bad"}],
            "isError": True,
        }


class TestBuildEnvelope:
    def test_outcome_agrees_across_protocols(self):
        for result in (ToolResult.success("ok"), ToolResult.error("fail")):
            legacy = build_envelope(Protocol.LEGACY, result)
            rpc = build_envelope(Protocol.RPC, result, id=7)
            assert (legacy["error"] is not None) == rpc["result"]["isError"]

    def test_rpc_shape(self):
        envelope = build_envelope(Protocol.RPC, ToolResult.success(["x"]), id="abc")
        assert envelope == {
            "jsonrpc": "2.0",
            "id": "abc",
            "result": {"content": [{"type": "text", "text": '["x"]'}], "isError": False},
        }
        assert "error" not in envelope

    def test_payload_text_parses_back(self):
        payload = {"files": [{"path": "a"}]}
        envelope = build_envelope(Protocol.RPC, ToolResult.success(payload), id=1)
        assert json.loads(envelope["result"]["content"][0]["text"]) == payload
