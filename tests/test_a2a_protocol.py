"""Tests for the A2A envelope models and JSON-RPC helpers."""

from eunoia.core_application.a2a_protocol import (
    A2AErrorCode,
    A2AMessage,
    A2APart,
    A2ARequest,
    A2ATaskResult,
    A2ATaskStatus,
    create_jsonrpc_error,
    create_jsonrpc_response,
)


def test_request_decodes_camel_case_fields() -> None:
    request = A2ARequest.model_validate({
        "jsonrpc": "2.0",
        "id": "req-1",
        "method": "message/send",
        "params": {
            "message": {
                "kind": "message",
                "role": "user",
                "messageId": "msg-1",
                "parts": [{"kind": "text", "text": "hello"}],
                "metadata": {"telex_user_id": "u-1"},
            },
            "configuration": {"acceptedOutputModes": ["text/plain"], "blocking": True},
        },
    })

    assert request.id == "req-1"
    assert request.params.message.message_id == "msg-1"
    assert request.params.message.parts[0].text == "hello"
    assert request.params.configuration.accepted_output_modes == ["text/plain"]
    assert request.params.configuration.blocking is True


def test_request_accepts_numeric_id_and_nested_data_parts() -> None:
    request = A2ARequest.model_validate({
        "jsonrpc": "2.0",
        "id": 7,
        "method": "message/send",
        "params": {
            "message": {
                "parts": [
                    {"kind": "data", "data": [{"kind": "text", "text": "<p>earlier</p>"}]},
                ],
            },
        },
    })

    assert request.id == 7
    nested = request.params.message.parts[0].data
    assert isinstance(nested, list)
    assert nested[0].text == "<p>earlier</p>"


def test_object_valued_data_part_is_accepted() -> None:
    part = A2APart.model_validate({"kind": "data", "data": {"mood": 7}})

    assert part.data == {"mood": 7}


def test_error_envelope_uses_standard_code_and_message() -> None:
    wire = create_jsonrpc_error(A2AErrorCode.INVALID_PARAMS, "user_id is required", "req-9").to_wire()

    assert wire == {
        "jsonrpc": "2.0",
        "id": "req-9",
        "error": {"code": -32602, "message": "Invalid params", "data": "user_id is required"},
    }


def test_error_envelope_keeps_null_id() -> None:
    wire = create_jsonrpc_error(A2AErrorCode.PARSE_ERROR, "invalid JSON").to_wire()

    assert "id" in wire
    assert wire["id"] is None
    assert wire["error"]["code"] == -32700
    assert "result" not in wire


def test_success_envelope_serializes_camel_case() -> None:
    message = A2AMessage(role="agent", parts=[A2APart(kind="text", text="hi")], message_id="m-1", task_id="t-1")
    result = A2ATaskResult(
        id="t-1",
        context_id="c-1",
        status=A2ATaskStatus(state="completed", timestamp="2026-01-01T00:00:00Z", message=message),
        history=[message],
    )

    wire = create_jsonrpc_response(result, "req-2").to_wire()

    assert wire["id"] == "req-2"
    assert "error" not in wire
    assert wire["result"]["contextId"] == "c-1"
    assert wire["result"]["kind"] == "task"
    assert wire["result"]["artifacts"] == []
    assert wire["result"]["status"]["message"]["messageId"] == "m-1"
    assert wire["result"]["status"]["message"]["taskId"] == "t-1"


def test_null_fields_fall_back_to_defaults() -> None:
    request = A2ARequest.model_validate({
        "jsonrpc": "2.0",
        "id": None,
        "method": "message/send",
        "params": {
            "message": {"role": None, "messageId": None, "parts": None, "metadata": None},
            "configuration": {"acceptedOutputModes": None, "historyLength": None, "blocking": None},
        },
    })

    assert request.id is None
    assert request.params.message.parts == []
    assert request.params.message.message_id == ""
    assert request.params.configuration.accepted_output_modes == []
    assert request.params.configuration.history_length == 0
    assert request.params.configuration.blocking is False


def test_null_configuration_becomes_empty_configuration() -> None:
    request = A2ARequest.model_validate({"jsonrpc": "2.0", "method": "message/send", "params": {"configuration": None}})

    assert request.params.configuration.history_length == 0
    assert request.params.configuration.push_notification_config is None
