"""
Reflection Service
反思记录：情感分析与主题提取交给生成式服务，失败时使用默认值
"""
import logging
from typing import List, Optional

from eunoia.data_persistence.models import Reflection
from eunoia.data_persistence.repositories import ReflectionRepository, UserRepository
from eunoia.external_services.llm_service import LLMService

ANALYSIS_UNAVAILABLE = "Analysis unavailable at this time."

REFLECTION_ANALYSIS_PROMPT = """You are a thoughtful companion helping someone process their inner experience.

Respond with warmth and insight:
- Acknowledge what stands out in their reflection
- Notice patterns or connections they might not see
- Validate the complexity of their feelings
- Offer a gentle perspective or question for further reflection
- Keep it brief (under 80 words) and genuine"""


class ReflectionService:
    """反思记录服务"""

    def __init__(
        self,
        reflection_repo: ReflectionRepository,
        user_repo: UserRepository,
        llm_service: LLMService,
        logger: Optional[logging.Logger] = None
    ):
        self.reflection_repo = reflection_repo
        self.user_repo = user_repo
        self.llm_service = llm_service
        self.logger = logger or logging.getLogger(__name__)

    async def create_reflection(self, platform_user_id: str, content: str) -> Reflection:
        if not content.strip():
            raise ValueError("reflection content cannot be empty")

        user = self.user_repo.get_or_create_user(platform_user_id)

        try:
            sentiment = await self.llm_service.analyze_sentiment(content)
        except Exception as e:
            self.logger.warning(f"Failed to analyze sentiment: {e}")
            sentiment = "unknown"

        try:
            key_themes = await self.llm_service.extract_themes(content)
        except Exception as e:
            self.logger.warning(f"Failed to extract key themes: {e}")
            key_themes = ""

        try:
            ai_analysis = await self._generate_analysis(content, sentiment, key_themes)
        except Exception as e:
            self.logger.warning(f"Failed to generate reflection analysis: {e}")
            ai_analysis = ANALYSIS_UNAVAILABLE

        return self.reflection_repo.create_reflection(
            user_id=user.id,
            content=content,
            sentiment=sentiment.strip(),
            key_themes=key_themes.strip(),
            ai_analysis=ai_analysis
        )

    def get_reflection_history(self, platform_user_id: str, limit: int) -> List[Reflection]:
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        return self.reflection_repo.get_reflections_by_user_id(user.id, limit)

    def get_recent_reflections(self, platform_user_id: str, days: int) -> List[Reflection]:
        """最近N天内的反思（按时间倒序）"""
        user = self.user_repo.get_user_by_platform_id(platform_user_id)
        return self.reflection_repo.get_recent_reflections(user.id, days)

    async def _generate_analysis(self, content: str, sentiment: str, themes: str) -> str:
        user_prompt = (
            f'They reflected: "{content}"\n\n'
            f"The emotional tone seems {sentiment}, touching on: {themes}\n\n"
            "Offer a brief, supportive response that honors their experience:"
        )
        return await self.llm_service.generate(REFLECTION_ANALYSIS_PROMPT, user_prompt, [])
