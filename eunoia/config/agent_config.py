"""
Agent specific configuration settings
会话编排相关的参数集中管理
"""
from pydantic_settings import BaseSettings
from pydantic import Field


class AgentConfig(BaseSettings):
    """Agent配置类 - 管理会话编排与上下文构建的参数"""

    # ==================== 会话历史配置 ====================

    conversation_window_minutes: int = Field(
        default=30,
        description="提示词历史所取的最近消息时间窗口(分钟)"
    )
    prompt_history_limit: int = Field(
        default=10,
        description="传给生成模型的历史消息最大条数"
    )

    # ==================== 用户上下文配置 ====================

    context_check_in_limit: int = Field(
        default=5,
        description="上下文中包含的最近情绪打卡条数"
    )
    context_reflection_limit: int = Field(
        default=3,
        description="上下文中包含的最近反思条数"
    )
    mood_stats_days: int = Field(
        default=7,
        description="情绪趋势统计的天数"
    )

    # ==================== 超时配置 ====================

    generation_timeout_seconds: float = Field(
        default=45.0,
        description="单次生成调用的截止时间(秒)"
    )

    class Config:
        env_prefix = "EUNOIA_"
        case_sensitive = False


# 全局配置实例
agent_config = AgentConfig()
