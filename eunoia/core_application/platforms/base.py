"""
平台适配器接口
Platform adapter contract: translates the generic A2A envelope into and out of
one external messaging platform's conventions.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Union

from eunoia.core_application.a2a_protocol import (
    A2AMessage, A2APart, A2ARequest, A2AResponse, ChatResponse
)


class PlatformError(ValueError):
    """平台适配器拒绝请求（缺少身份信息、方法不支持等）"""


class Platform(ABC):
    """平台适配器抽象基类"""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def extract_user_id(self, metadata: Optional[Dict[str, Any]]) -> str:
        """提取平台用户ID，找不到时抛出PlatformError"""

    @abstractmethod
    def extract_channel_id(self, metadata: Optional[Dict[str, Any]]) -> str:
        """提取频道ID，找不到时返回空字符串"""

    @abstractmethod
    def extract_message(self, parts: List[A2APart]) -> str:
        pass

    @abstractmethod
    def extract_history(self, parts: List[A2APart], current_message_id: str) -> List[A2AMessage]:
        pass

    @abstractmethod
    def validate_request(self, request: A2ARequest) -> None:
        """请求不被支持时抛出PlatformError"""

    @abstractmethod
    def build_response(
        self,
        request_id: Optional[Union[str, int]],
        message_id: str,
        history: List[A2AMessage],
        chat_response: ChatResponse
    ) -> A2AResponse:
        pass
