"""
A2A协议消息结构与JSON-RPC 2.0错误码
A2A protocol envelope, task result and error taxonomy.

所有结果（成功或失败）都以HTTP 200返回，失败通过信封中的 error 字段表示。
"""
from enum import IntEnum
from typing import Any, Dict, List, Optional, Union

from a2a.types import Role, TaskState
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

JSONRPC_VERSION = "2.0"
SEND_MESSAGE_METHOD = "message/send"

ROLE_USER = Role.user.value
ROLE_AGENT = Role.agent.value
TASK_STATE_COMPLETED = TaskState.completed.value


class A2AErrorCode(IntEnum):
    """JSON-RPC 2.0 保留错误码（不得重新编号或新增）"""
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


ERROR_MESSAGES = {
    A2AErrorCode.PARSE_ERROR: "Parse error",
    A2AErrorCode.INVALID_REQUEST: "Invalid Request",
    A2AErrorCode.METHOD_NOT_FOUND: "Method not found",
    A2AErrorCode.INVALID_PARAMS: "Invalid params",
    A2AErrorCode.INTERNAL_ERROR: "Internal error",
}


class A2ABaseModel(BaseModel):
    """线上格式使用驼峰字段名，Python侧使用下划线字段名"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _null_means_default(cls, data: Any) -> Any:
        # JSON null 等同于字段缺省（空列表、0、False、空对象）
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class A2APart(A2ABaseModel):
    """消息片段：text 片段携带文本；data 片段携带嵌套的片段列表"""
    kind: str = ""
    text: Optional[str] = None
    # 部分平台把之前的对话以嵌套片段放在 data 中；标准A2A的对象型 data 也可接受
    data: Optional[Union[List["A2APart"], Dict[str, Any]]] = None


A2APart.model_rebuild()


class A2AMessage(A2ABaseModel):
    kind: str = "message"
    role: str = ""
    parts: List[A2APart] = Field(default_factory=list)
    metadata: Optional[Dict[str, Any]] = None
    message_id: str = ""
    task_id: Optional[str] = None


class A2APushNotificationConfig(A2ABaseModel):
    url: Optional[str] = None
    token: Optional[str] = None
    authentication: Optional[Dict[str, Any]] = None


class A2AConfiguration(A2ABaseModel):
    """请求配置 - 仅透传，不参与处理逻辑"""
    accepted_output_modes: List[str] = Field(default_factory=list)
    history_length: int = 0
    push_notification_config: Optional[A2APushNotificationConfig] = None
    blocking: bool = False


class A2AParams(A2ABaseModel):
    message: A2AMessage = Field(default_factory=A2AMessage)
    configuration: A2AConfiguration = Field(default_factory=A2AConfiguration)


class A2ARequest(A2ABaseModel):
    jsonrpc: str = ""
    id: Optional[Union[str, int]] = None
    method: str = ""
    params: A2AParams = Field(default_factory=A2AParams)


class A2ATaskStatus(A2ABaseModel):
    state: str
    timestamp: str
    message: A2AMessage


class A2ATaskResult(A2ABaseModel):
    id: str
    context_id: str
    status: A2ATaskStatus
    artifacts: List[Dict[str, Any]] = Field(default_factory=list)
    history: List[A2AMessage] = Field(default_factory=list)
    kind: str = "task"


class A2AError(A2ABaseModel):
    code: int
    message: str
    data: Optional[Any] = None


class A2AResponse(A2ABaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: Optional[Union[str, int]] = None
    result: Optional[A2ATaskResult] = None
    error: Optional[A2AError] = None

    def to_wire(self) -> Dict[str, Any]:
        body = super().to_wire()
        # JSON-RPC 要求始终返回 id（未知时为 null）
        body["id"] = self.id
        return body


class ChatResponse(BaseModel):
    """会话编排器返回给平台适配器的回复"""
    response: str
    message_id: str = ""


def create_jsonrpc_response(result: A2ATaskResult, request_id: Optional[Union[str, int]] = None) -> A2AResponse:
    """创建标准的JSON-RPC 2.0响应"""
    return A2AResponse(id=request_id, result=result)


def create_jsonrpc_error(
    code: A2AErrorCode,
    data: Any = None,
    request_id: Optional[Union[str, int]] = None
) -> A2AResponse:
    """创建JSON-RPC 2.0错误响应"""
    code = A2AErrorCode(code)
    return A2AResponse(
        id=request_id,
        error=A2AError(code=int(code), message=ERROR_MESSAGES[code], data=data)
    )
