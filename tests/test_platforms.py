"""Tests for the Telex platform adapter and the platform registry."""

import re

import pytest

from eunoia.core_application.a2a_protocol import A2AMessage, A2APart, A2ARequest, ChatResponse
from eunoia.core_application.platforms import (
    PlatformError,
    PlatformRegistry,
    TelexPlatform,
    create_default_registry,
    strip_markup,
)


@pytest.fixture
def platform() -> TelexPlatform:
    return TelexPlatform(agent_name="eunoia")


def _data_part(*texts: str) -> A2APart:
    return A2APart(kind="data", data=[A2APart(kind="text", text=t) for t in texts])


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class TestExtractUserId:
    def test_prefers_platform_user_id(self, platform: TelexPlatform) -> None:
        metadata = {"platform_user_id": "p-1", "telex_user_id": "t-1", "user_id": "u-1"}
        assert platform.extract_user_id(metadata) == "p-1"

    def test_falls_back_through_keys(self, platform: TelexPlatform) -> None:
        assert platform.extract_user_id({"telex_user_id": "t-1", "user_id": "u-1"}) == "t-1"
        assert platform.extract_user_id({"user_id": "u-1"}) == "u-1"

    def test_skips_non_string_and_empty_values(self, platform: TelexPlatform) -> None:
        assert platform.extract_user_id({"platform_user_id": 42, "telex_user_id": "", "user_id": "u-1"}) == "u-1"

    @pytest.mark.parametrize("metadata", [None, {}, {"channel_id": "c-1"}])
    def test_missing_identity_raises(self, platform: TelexPlatform, metadata) -> None:
        with pytest.raises(PlatformError):
            platform.extract_user_id(metadata)

    def test_channel_id_is_optional(self, platform: TelexPlatform) -> None:
        assert platform.extract_channel_id({"telex_channel_id": "c-9"}) == "c-9"
        assert platform.extract_channel_id(None) == ""


# ---------------------------------------------------------------------------
# Message text
# ---------------------------------------------------------------------------


class TestExtractMessage:
    def test_last_text_part_wins(self, platform: TelexPlatform) -> None:
        parts = [A2APart(kind="text", text="A"), A2APart(kind="text", text="B")]
        assert platform.extract_message(parts) == "B"

    def test_nested_text_is_stripped_of_markup(self, platform: TelexPlatform) -> None:
        assert platform.extract_message([_data_part("<p>hello</p>")]) == "hello"

    def test_nested_text_after_top_level_text_wins(self, platform: TelexPlatform) -> None:
        parts = [A2APart(kind="text", text="current"), _data_part("first", "<p>second</p>")]
        assert platform.extract_message(parts) == "second"

    def test_empty_nested_text_does_not_override(self, platform: TelexPlatform) -> None:
        parts = [A2APart(kind="text", text="keep me"), _data_part("<p> </p>")]
        assert platform.extract_message(parts) == "keep me"

    def test_no_text_returns_empty_string(self, platform: TelexPlatform) -> None:
        parts = [A2APart(kind="file"), A2APart(kind="data", data={"k": "v"})]
        assert platform.extract_message(parts) == ""

    def test_strip_markup(self) -> None:
        assert strip_markup("  <p>hi</p>  ") == "hi"
        assert strip_markup(None) == ""


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


class TestExtractHistory:
    def test_roles_alternate_by_nested_index(self, platform: TelexPlatform) -> None:
        history = platform.extract_history([_data_part("<p>hi</p>", "<p>hello!</p>", "how are you")], "msg-1")

        assert [m.role for m in history] == ["user", "agent", "user"]
        assert [m.parts[0].text for m in history] == ["hi", "hello!", "how are you"]
        assert all(m.message_id == "msg-1" for m in history)
        assert len({m.task_id for m in history}) == 3

    def test_empty_entries_are_skipped_but_keep_parity(self, platform: TelexPlatform) -> None:
        history = platform.extract_history([_data_part("<p></p>", "agent reply")], "msg-1")

        assert len(history) == 1
        assert history[0].role == "agent"

    def test_top_level_text_is_not_history(self, platform: TelexPlatform) -> None:
        assert platform.extract_history([A2APart(kind="text", text="now")], "msg-1") == []


# ---------------------------------------------------------------------------
# Request validation and response building
# ---------------------------------------------------------------------------


def test_validate_request_rejects_other_methods(platform: TelexPlatform) -> None:
    platform.validate_request(A2ARequest(jsonrpc="2.0", method="message/send"))
    with pytest.raises(PlatformError):
        platform.validate_request(A2ARequest(jsonrpc="2.0", method="tasks/get"))


def test_build_response_appends_agent_message(platform: TelexPlatform) -> None:
    prior = A2AMessage(role="user", parts=[A2APart(kind="text", text="hi")], message_id="msg-1", task_id="t-0")

    prior_history = [prior]
    response = platform.build_response("req-1", "msg-1", prior_history, ChatResponse(response="Hello there", message_id="msg-1"))

    assert response.id == "req-1"
    assert response.error is None
    result = response.result
    assert result.kind == "task"
    assert result.status.state == "completed"
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", result.status.timestamp)
    assert result.history[0] == prior
    assert result.history[-1] == result.status.message
    assert result.status.message.role == "agent"
    assert result.status.message.parts[0].text == "Hello there"
    assert result.status.message.metadata == {"agent": "eunoia"}
    assert result.status.message.task_id == result.id
    assert result.context_id and result.context_id != result.id
    assert result.artifacts == []
    assert len(result.history) == 2
    assert prior_history == [prior]


def test_build_response_generates_fresh_identifiers(platform: TelexPlatform) -> None:
    chat = ChatResponse(response="ok")
    first = platform.build_response(1, "m", [], chat)
    second = platform.build_response(1, "m", [], chat)

    assert first.result.id != second.result.id
    assert first.result.context_id != second.result.context_id


def test_registry_lookup() -> None:
    registry = create_default_registry(agent_name="eunoia")

    assert registry.names() == ["telex"]
    assert isinstance(registry.get("telex"), TelexPlatform)
    assert registry.get("slack") is None


def test_registry_replaces_duplicate_names() -> None:
    registry = PlatformRegistry()
    first, second = TelexPlatform(), TelexPlatform()
    registry.register(first)
    registry.register(second)

    assert registry.get("telex") is second
