"""
A2A消息处理器 - HTTP入口
A2A message handler: decode → validate → adapter dispatch → orchestrator →
response encode.

所有结果都以HTTP 200返回；失败通过JSON-RPC error 字段在信封内表示。
"""
import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from eunoia.config.settings import settings
from eunoia.core_application.a2a_protocol import (
    A2AErrorCode, A2ARequest, A2AResponse, JSONRPC_VERSION, create_jsonrpc_error
)
from eunoia.core_application.conversation_service import ConversationService
from eunoia.core_application.platforms import PlatformError, PlatformRegistry
from .dependencies import get_conversation_service, get_platform_registry

router = APIRouter(tags=["A2A"])


class A2AMessageHandler:
    """A2A message/send 请求处理器"""

    def __init__(self, registry: PlatformRegistry, platform_name: str, logger: Optional[logging.Logger] = None):
        self.registry = registry
        self.platform_name = platform_name
        self.logger = logger or logging.getLogger(__name__)

    async def handle(self, http_method: str, body: bytes, service: ConversationService) -> A2AResponse:
        """处理一次请求，任何一步失败都直接返回对应错误码的信封"""
        if http_method.upper() != "POST":
            return self._error(A2AErrorCode.INVALID_REQUEST, "method not allowed")

        try:
            payload = json.loads(body)
        except ValueError as e:
            self.logger.error(f"Failed to decode A2A request: {e}")
            return self._error(A2AErrorCode.PARSE_ERROR, "invalid JSON")

        request_id = payload.get("id") if isinstance(payload, dict) else None
        try:
            request = A2ARequest.model_validate(payload)
        except ValidationError as e:
            self.logger.error(f"A2A request does not match the envelope structure: {e}")
            return self._error(A2AErrorCode.PARSE_ERROR, "invalid JSON", request_id)

        request_id = request.id
        if request.jsonrpc != JSONRPC_VERSION:
            return self._error(A2AErrorCode.INVALID_REQUEST, "jsonrpc version must be 2.0", request_id)

        platform = self.registry.get(self.platform_name)
        if platform is None:
            return self._error(A2AErrorCode.INVALID_REQUEST, f"platform not supported: {self.platform_name}", request_id)

        # 内容为空时无论方法是否受支持都返回 InvalidParams
        message = request.params.message
        message_text = platform.extract_message(message.parts)
        if not message_text:
            return self._error(A2AErrorCode.INVALID_PARAMS, "message content is required", request_id)

        try:
            platform.validate_request(request)
        except PlatformError as e:
            return self._error(A2AErrorCode.METHOD_NOT_FOUND, str(e), request_id)

        try:
            user_id = platform.extract_user_id(message.metadata)
        except PlatformError as e:
            return self._error(A2AErrorCode.INVALID_PARAMS, str(e), request_id)

        self.logger.info(
            f"Processing A2A message: user_id={user_id}, "
            f"channel_id={platform.extract_channel_id(message.metadata)}, message_id={message.message_id}"
        )

        try:
            chat_response = await service.process_message(user_id, message_text, message.message_id)
        except Exception as e:
            self.logger.error(f"Failed to process message: {e}")
            return self._error(A2AErrorCode.INTERNAL_ERROR, "failed to process message", request_id)

        history = platform.extract_history(message.parts, message.message_id)
        response = platform.build_response(request_id, message.message_id, history, chat_response)
        self.logger.info(f"✅ A2A message processed successfully: task_id={response.result.id}")
        return response

    def _error(self, code: A2AErrorCode, data: Any, request_id=None) -> A2AResponse:
        self.logger.error(f"Sending A2A error response: code={int(code)}, data={data}")
        return create_jsonrpc_error(code, data, request_id)


def get_message_handler(registry: PlatformRegistry = Depends(get_platform_registry)) -> A2AMessageHandler:
    return A2AMessageHandler(registry, settings.platform_name)


@router.api_route(settings.a2a_endpoint_path, methods=["POST", "GET", "PUT", "PATCH", "DELETE"])
async def a2a_message_endpoint(
    request: Request,
    handler: A2AMessageHandler = Depends(get_message_handler),
    service: ConversationService = Depends(get_conversation_service)
):
    """A2A协议主端点"""
    body = await request.body()
    response = await handler.handle(request.method, body, service)
    return JSONResponse(status_code=200, content=response.to_wire())
