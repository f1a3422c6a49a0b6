"""
Conversation Service - 会话编排器
Resolves identity, persists messages, runs intent detectors, assembles user
context, windows history and drives the generative collaborator.

只有生成回复是硬性保证；消息持久化、自动打卡/反思、上下文的各个来源都是尽力而为，
失败时记录日志后继续。
"""
import asyncio
import logging
from typing import List, Optional

from eunoia.config.agent_config import AgentConfig, agent_config as default_agent_config
from eunoia.data_persistence.models import ConversationMessage, MessageRole
from eunoia.data_persistence.repositories import (
    CheckInRepository, ConversationRepository, ReflectionRepository, UserRepository
)
from eunoia.external_services.llm_service import GenerationError, LLMService
from .a2a_protocol import ChatResponse
from .checkin_service import CheckInService
from .intent_detectors import detect_mood, is_reflection
from .reflection_service import ReflectionService

NO_HISTORY_CONTEXT = "New user - no previous history"

USER_LABEL = "User"
ASSISTANT_LABEL = "Assistant"

SYSTEM_PROMPT = """You are Eunoia, a warm and empathetic companion supporting mental wellbeing.

Your approach:
- Listen with genuine curiosity and without judgment
- Acknowledge emotions as valid, whatever they are
- Gently explore what's beneath the surface
- Notice patterns while honoring the present moment
- Celebrate progress, no matter how small
- Validate struggle without offering quick fixes

When responding:
- Speak naturally, as a caring friend would
- Ask thoughtful follow-up questions when appropriate
- Reflect back what you hear to show understanding
- Offer perspective when helpful, never prescribe
- Keep responses concise (under 120 words)
- If detecting crisis language, warmly encourage professional support

Remember: You're here to support, not to solve. Sometimes the most helpful thing is simply being present.
"""


def build_system_prompt(user_context: str) -> str:
    """固定人设 + 用户上下文"""
    prompt = SYSTEM_PROMPT
    if user_context:
        prompt += (
            "\nContext about this person:\n" + user_context +
            "\n\nUse this context wisely to personalize your support, but focus on their current message."
        )
    return prompt


def build_prompt_history(messages: List[ConversationMessage], limit: int = 10) -> List[str]:
    """只保留最后 limit 条消息，渲染为 "<角色>: <内容>"，保持时间顺序"""
    window = messages[-limit:] if limit > 0 else []
    history = []
    for message in window:
        label = ASSISTANT_LABEL if message.message_role == MessageRole.ASSISTANT.value else USER_LABEL
        history.append(f"{label}: {message.message_content}")
    return history


class ConversationService:
    """会话编排服务"""

    def __init__(
        self,
        conversation_repo: ConversationRepository,
        user_repo: UserRepository,
        check_in_repo: CheckInRepository,
        reflection_repo: ReflectionRepository,
        llm_service: LLMService,
        config: Optional[AgentConfig] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.conversation_repo = conversation_repo
        self.user_repo = user_repo
        self.check_in_repo = check_in_repo
        self.reflection_repo = reflection_repo
        self.llm_service = llm_service
        self.config = config or default_agent_config
        self.logger = logger or logging.getLogger(__name__)

        self.check_in_service = CheckInService(check_in_repo, user_repo, logger=self.logger)
        self.reflection_service = ReflectionService(reflection_repo, user_repo, llm_service, logger=self.logger)

    async def process_message(self, platform_user_id: str, message: str, message_id: str = "") -> ChatResponse:
        """处理一条用户消息并返回生成的回复"""
        if not message.strip():
            raise ValueError("message cannot be empty")

        user = self.user_repo.get_or_create_user(platform_user_id)

        self._save_message(user.id, MessageRole.USER, message, message_id)

        await self.detect_and_handle_intents(platform_user_id, message)

        user_context = self.build_user_context(user.id)

        try:
            recent_messages = self.conversation_repo.get_recent_messages(
                user.id, self.config.conversation_window_minutes
            )
        except Exception as e:
            self.logger.warning(f"Failed to get conversation history: {e}")
            recent_messages = []

        prompt_history = build_prompt_history(recent_messages, self.config.prompt_history_limit)
        system_prompt = build_system_prompt(user_context)

        try:
            response_text = await asyncio.wait_for(
                self.llm_service.generate(system_prompt, message, prompt_history),
                timeout=self.config.generation_timeout_seconds
            )
        except asyncio.TimeoutError as e:
            self.logger.error(f"❌ Response generation timed out after {self.config.generation_timeout_seconds}s")
            raise GenerationError("response generation timed out") from e
        except GenerationError as e:
            self.logger.error(f"❌ Failed to generate response: {e}")
            raise
        except Exception as e:
            self.logger.error(f"❌ Failed to generate response: {e}")
            raise GenerationError(f"failed to generate response: {e}") from e

        self._save_message(user.id, MessageRole.ASSISTANT, response_text, message_id, context_data=user_context)

        return ChatResponse(response=response_text, message_id=message_id)

    def get_conversation_history(self, platform_user_id: str, limit: int) -> List[ConversationMessage]:
        """获取会话历史（时间正序）；用户不存在时抛出UserNotFoundError"""
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        messages = self.conversation_repo.get_conversation_history(user.id, limit)
        return list(reversed(messages))

    async def detect_and_handle_intents(self, platform_user_id: str, message: str) -> None:
        """检测情绪与反思意图并自动记录，失败不影响主流程"""
        mood = detect_mood(message)
        if mood.detected:
            try:
                self.check_in_service.create_check_in(
                    platform_user_id, mood.score, mood.label, description=message
                )
                self.logger.info(f"Auto-created check-in from conversation (mood={mood.label})")
            except Exception as e:
                self.logger.warning(f"Failed to auto-create check-in: {e}")

        if is_reflection(message):
            try:
                await self.reflection_service.create_reflection(platform_user_id, message)
                self.logger.info("Auto-created reflection from conversation")
            except Exception as e:
                self.logger.warning(f"Failed to auto-create reflection: {e}")

    def build_user_context(self, user_id: str) -> str:
        """汇总最近打卡、反思和情绪趋势；各来源独立，失败或为空时省略"""
        context_parts = []

        try:
            check_ins = self.check_in_repo.get_check_ins_by_user_id(user_id, self.config.context_check_in_limit)
            if check_ins:
                latest = check_ins[0]
                context_parts.append(f"Recent check-ins: {len(check_ins)} entries")
                context_parts.append(f"Latest mood: {latest.mood_score}/10 ({latest.mood_label})")
        except Exception as e:
            self.logger.warning(f"Failed to load check-ins for context: {e}")

        try:
            reflections = self.reflection_repo.get_reflections_by_user_id(
                user_id, self.config.context_reflection_limit
            )
            if reflections:
                context_parts.append(f"Recent reflections: {len(reflections)} entries")
                if reflections[0].sentiment:
                    context_parts.append(f"Latest sentiment: {reflections[0].sentiment}")
        except Exception as e:
            self.logger.warning(f"Failed to load reflections for context: {e}")

        try:
            stats = self.check_in_repo.get_check_in_stats(user_id, self.config.mood_stats_days)
            if stats.total_check_ins > 0:
                context_parts.append(
                    f"{self.config.mood_stats_days}-day mood average: {stats.average_mood_score:.1f}/10"
                )
                if stats.mood_trend and stats.mood_trend != "new":
                    context_parts.append(f"Mood trend: {stats.mood_trend}")
        except Exception as e:
            self.logger.warning(f"Failed to load mood stats for context: {e}")

        if not context_parts:
            return NO_HISTORY_CONTEXT
        return "\n".join(context_parts)

    def _save_message(
        self,
        user_id: str,
        role: MessageRole,
        content: str,
        message_id: str,
        context_data: Optional[str] = None
    ) -> None:
        try:
            self.conversation_repo.save_message(
                user_id=user_id,
                role=role.value,
                content=content,
                message_id=message_id or None,
                context_data=context_data
            )
        except Exception as e:
            self.logger.warning(f"Failed to save {role.value} message: {e}")
