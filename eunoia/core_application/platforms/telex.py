"""
Telex平台适配器
Telex resends the visible transcript as nested data parts alongside the new
message, so only the last non-empty text is novel.
"""
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from eunoia.core_application.a2a_protocol import (
    A2AMessage, A2APart, A2ARequest, A2AResponse, A2ATaskResult, A2ATaskStatus,
    ChatResponse, ROLE_AGENT, ROLE_USER, SEND_MESSAGE_METHOD, TASK_STATE_COMPLETED,
    create_jsonrpc_response
)
from .base import Platform, PlatformError

USER_ID_KEYS = ("platform_user_id", "telex_user_id", "user_id")
CHANNEL_ID_KEYS = ("platform_channel_id", "telex_channel_id", "channel_id")

_PARAGRAPH_TAG = re.compile(r"</?p>")


def strip_markup(text: Optional[str]) -> str:
    """去掉 <p></p> 包装标签并去除首尾空白"""
    if not text:
        return ""
    return _PARAGRAPH_TAG.sub("", text).strip()


def _first_string(metadata: Optional[Dict[str, Any]], keys: Tuple[str, ...]) -> str:
    for key in keys:
        value = (metadata or {}).get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _nested_text_parts(parts: List[A2APart]) -> Iterator[Tuple[int, str]]:
    """遍历 data 片段中嵌套的 text 片段，产出 (嵌套索引, 清理后的文本)"""
    for part in parts:
        if part.kind != "data" or not isinstance(part.data, list):
            continue
        for index, nested in enumerate(part.data):
            if nested.kind == "text" and nested.text:
                yield index, strip_markup(nested.text)


class TelexPlatform(Platform):
    """Telex平台适配器"""

    def __init__(self, name: str = "telex", agent_name: str = "eunoia"):
        self._name = name
        self.agent_name = agent_name

    @property
    def name(self) -> str:
        return self._name

    def extract_user_id(self, metadata: Optional[Dict[str, Any]]) -> str:
        user_id = _first_string(metadata, USER_ID_KEYS)
        if not user_id:
            raise PlatformError("user_id is required in metadata")
        return user_id

    def extract_channel_id(self, metadata: Optional[Dict[str, Any]]) -> str:
        return _first_string(metadata, CHANNEL_ID_KEYS)

    def extract_message(self, parts: List[A2APart]) -> str:
        last_text = ""
        for part in parts:
            if part.kind == "text" and part.text:
                last_text = part.text
            elif part.kind == "data" and isinstance(part.data, list):
                for nested in part.data:
                    if nested.kind == "text" and nested.text:
                        text = strip_markup(nested.text)
                        if text:
                            last_text = text
        return last_text.strip()

    def extract_history(self, parts: List[A2APart], current_message_id: str) -> List[A2AMessage]:
        # 角色按嵌套索引的奇偶推断（偶数为用户，奇数为agent），载荷本身并不携带角色
        history = []
        for index, text in _nested_text_parts(parts):
            if not text:
                continue
            history.append(A2AMessage(
                kind="message",
                role=ROLE_USER if index % 2 == 0 else ROLE_AGENT,
                parts=[A2APart(kind="text", text=text)],
                message_id=current_message_id,
                task_id=str(uuid.uuid4()),
            ))
        return history

    def validate_request(self, request: A2ARequest) -> None:
        if request.method != SEND_MESSAGE_METHOD:
            raise PlatformError(f"method not supported: {request.method}")

    def build_response(
        self,
        request_id: Optional[Union[str, int]],
        message_id: str,
        history: List[A2AMessage],
        chat_response: ChatResponse
    ) -> A2AResponse:
        task_id = str(uuid.uuid4())
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

        new_message = A2AMessage(
            kind="message",
            role=ROLE_AGENT,
            parts=[A2APart(kind="text", text=chat_response.response)],
            metadata={"agent": self.agent_name},
            message_id=message_id,
            task_id=task_id,
        )

        result = A2ATaskResult(
            id=task_id,
            context_id=str(uuid.uuid4()),
            status=A2ATaskStatus(state=TASK_STATE_COMPLETED, timestamp=timestamp, message=new_message),
            artifacts=[],
            history=[*history, new_message],
            kind="task",
        )
        return create_jsonrpc_response(result, request_id=request_id)
