"""
Agent Card加载器
Loads the Eunoia Agent Card published at /.well-known/agent-card.json.

agent_card.json 使用A2A线上格式（驼峰字段），直接交给 a2a-sdk 的 AgentCard 校验。
"""
import json
import logging
import os
from typing import Any, Dict, Optional

from a2a.types import AgentCard
from pydantic import ValidationError

DEFAULT_AGENT_CARD_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "agent_card.json")


class AgentCardManager:
    """读取并缓存Agent Card，文件修改后自动重新加载"""

    REQUIRED_FIELDS = (
        "name", "description", "version", "protocolVersion", "url",
        "preferredTransport", "defaultInputModes", "defaultOutputModes",
        "capabilities", "skills",
    )

    def __init__(self, config_file: str = DEFAULT_AGENT_CARD_PATH, logger: Optional[logging.Logger] = None):
        self.config_file = config_file
        self.logger = logger or logging.getLogger(__name__)
        self._raw: Optional[Dict[str, Any]] = None
        self._loaded_mtime: Optional[float] = None

    def load_config(self, force_reload: bool = False) -> Dict[str, Any]:
        """读取原始JSON；文件mtime未变化时复用上次结果"""
        if not os.path.exists(self.config_file):
            raise FileNotFoundError(f"Agent Card file not found: {self.config_file}")

        mtime = os.path.getmtime(self.config_file)
        if not force_reload and self._raw is not None and mtime == self._loaded_mtime:
            return self._raw

        self.logger.info(f"Loading Agent Card from: {self.config_file}")
        with open(self.config_file, "r", encoding="utf-8") as f:
            self._raw = json.load(f)
        self._loaded_mtime = mtime
        return self._raw

    def load_a2a_agent_card(self, force_reload: bool = False) -> AgentCard:
        card_data = self.load_config(force_reload)

        missing = [name for name in self.REQUIRED_FIELDS if name not in card_data]
        if missing:
            raise ValueError(f"Agent Card is missing required fields: {', '.join(missing)}")
        if not card_data["skills"]:
            raise ValueError("Agent Card must declare at least one skill")

        try:
            return AgentCard.model_validate(card_data)
        except ValidationError as e:
            self.logger.error(f"❌ Invalid Agent Card {self.config_file}: {e}")
            raise ValueError(f"invalid Agent Card: {e}") from e

    def get_agent_card(self, base_url: Optional[str] = None, endpoint_path: Optional[str] = None) -> Dict[str, Any]:
        """返回线上格式的Agent Card；提供请求地址时用它覆盖 url"""
        card = self.load_a2a_agent_card()
        if base_url and endpoint_path:
            card = card.model_copy(update={"url": f"{base_url.rstrip('/')}{endpoint_path}"})
        return card.model_dump(mode="json", by_alias=True, exclude_none=True)


_agent_card_manager: Optional[AgentCardManager] = None


def get_agent_card_manager() -> AgentCardManager:
    global _agent_card_manager
    if _agent_card_manager is None:
        _agent_card_manager = AgentCardManager()
    return _agent_card_manager
