"""
LLM Service Integration
生成式内容服务：对话回复、情感分析、主题提取（OpenAI兼容接口）
"""
from typing import Dict, Any, Optional, List
from abc import ABC, abstractmethod
import openai
import logging

from eunoia.config.settings import settings


class GenerationError(RuntimeError):
    """生成式服务调用失败（不提供降级文本）"""


class LLMProvider(ABC):
    """LLM提供者抽象基类"""

    @abstractmethod
    async def generate(self, system_prompt: str, user_message: str, history: Optional[List[str]] = None) -> str:
        pass

    async def analyze_sentiment(self, text: str) -> str:
        """情感分析，只返回一个小写单词"""
        prompt = (
            'Analyze the sentiment of the following text and respond with only one word: '
            '"positive", "negative", "neutral", or "mixed".\n\n'
            f"Text: {text}\n\nSentiment:"
        )
        sentiment = await self.generate("You are a sentiment analysis assistant.", prompt, [])
        return sentiment.strip().lower()

    async def extract_themes(self, text: str) -> str:
        """提取3-5个关键主题，返回逗号分隔的列表"""
        prompt = (
            "Extract 3-5 key themes or topics from the following text. "
            "Return them as a comma-separated list.\n\n"
            f"Text: {text}\n\nKey themes:"
        )
        themes = await self.generate("You are a text analysis assistant.", prompt, [])
        return themes.strip()

    @staticmethod
    def build_prompt(user_message: str, history: Optional[List[str]] = None) -> str:
        """将已带角色标签的历史与当前消息拼接为一条用户提示"""
        sections = []
        if history:
            sections.append("Previous conversation:\n" + "\n".join(history))
        sections.append("Current message:\n" + user_message)
        return "\n\n".join(sections)


class OpenAIProvider(LLMProvider):
    """OpenAI GPT服务提供者"""

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        client: Optional[openai.AsyncOpenAI] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.client = client or openai.AsyncOpenAI(
            api_key=api_key or settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.llm_request_timeout,
            max_retries=settings.llm_max_retries,
        )
        self.chat_model = model or settings.openai_chat_model
        self.logger.info(f"OpenAI model configured - chat: {self.chat_model}")

    async def generate(self, system_prompt: str, user_message: str, history: Optional[List[str]] = None) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": self.build_prompt(user_message, history)},
        ]
        try:
            response = await self.client.chat.completions.create(
                model=self.chat_model,
                messages=messages,
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature,
            )
        except openai.OpenAIError as e:
            self.logger.error(f"OpenAI API error: {e}")
            raise GenerationError(f"failed to generate content: {e}") from e

        if not response or not response.choices:
            self.logger.error("OpenAI returned no choices in response")
            raise GenerationError("no candidates in response - content may have been blocked")

        content = response.choices[0].message.content
        if not content or not content.strip():
            self.logger.error(f"OpenAI returned empty content (finish_reason={response.choices[0].finish_reason})")
            raise GenerationError("no content in response")

        return content.strip()


class LLMService:
    """LLM服务管理器"""

    def __init__(self, providers: Optional[Dict[str, LLMProvider]] = None, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

        if providers is not None:
            self.providers = dict(providers)
        else:
            self.providers = {}
            self.logger.info("🔧 Initializing LLM Service...")
            self.logger.info(f"📊 OpenAI API Key: {'✅ Set' if settings.openai_api_key else '❌ Not Set'}")
            if settings.openai_api_key:
                try:
                    self.providers['openai'] = OpenAIProvider(logger=self.logger)
                    self.logger.info("✅ OpenAI Provider initialized")
                except Exception as e:
                    self.logger.error(f"❌ OpenAI Provider initialization failed: {e}")
            else:
                self.logger.warning("⚠️ OpenAI API key not set")

        if not self.providers:
            self.logger.warning("⚠️ No LLM providers available - message generation will fail")
        else:
            self.logger.info(f"✅ LLM Service initialized with providers: {list(self.providers.keys())}")

    def get_provider(self, provider_name: str = None) -> LLMProvider:
        """获取LLM提供者"""
        if provider_name and provider_name in self.providers:
            return self.providers[provider_name]
        for provider in self.providers.values():
            return provider
        raise GenerationError("No LLM provider available")

    async def generate(self, system_prompt: str, user_message: str, history: Optional[List[str]] = None) -> str:
        """生成回复，失败时抛出GenerationError"""
        provider = self.get_provider()
        self.logger.info(f"🤖 LLM generating response for: '{user_message[:50]}...'")
        result = await provider.generate(system_prompt, user_message, history or [])
        self.logger.info(f"✅ LLM response generated ({len(result)} chars)")
        return result

    async def analyze_sentiment(self, text: str) -> str:
        return await self.get_provider().analyze_sentiment(text)

    async def extract_themes(self, text: str) -> str:
        return await self.get_provider().extract_themes(text)

    def get_status(self) -> Dict[str, Any]:
        """获取服务状态"""
        return {
            "available_providers": list(self.providers.keys()),
            "provider_count": len(self.providers)
        }
