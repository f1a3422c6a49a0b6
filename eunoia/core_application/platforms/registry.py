"""
平台注册表 - 名称到适配器实例的映射
"""
import logging
from typing import Dict, List, Optional

from .base import Platform
from .telex import TelexPlatform


class PlatformRegistry:
    """平台适配器注册表（目前只接入一个平台）"""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._platforms: Dict[str, Platform] = {}
        self.logger = logger or logging.getLogger(__name__)

    def register(self, platform: Platform) -> None:
        if platform.name in self._platforms:
            self.logger.warning(f"Platform '{platform.name}' already registered, replacing")
        self._platforms[platform.name] = platform
        self.logger.info(f"✅ Platform registered: {platform.name}")

    def get(self, name: str) -> Optional[Platform]:
        return self._platforms.get(name)

    def names(self) -> List[str]:
        return list(self._platforms.keys())


def create_default_registry(agent_name: str = "eunoia", logger: Optional[logging.Logger] = None) -> PlatformRegistry:
    """创建已注册Telex平台的注册表"""
    registry = PlatformRegistry(logger=logger)
    registry.register(TelexPlatform(name="telex", agent_name=agent_name))
    return registry
