"""
FastAPI依赖 - 每个请求独立的数据库会话，进程级共享的LLM客户端与平台注册表
"""
from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from eunoia.config.settings import settings
from eunoia.core_application.checkin_service import CheckInService
from eunoia.core_application.conversation_service import ConversationService
from eunoia.core_application.platforms import PlatformRegistry, create_default_registry
from eunoia.core_application.reflection_service import ReflectionService
from eunoia.data_persistence.database import get_db
from eunoia.data_persistence.repositories import (
    CheckInRepository, ConversationRepository, ReflectionRepository, UserRepository
)
from eunoia.external_services.llm_service import LLMService


@lru_cache
def get_llm_service() -> LLMService:
    return LLMService()


@lru_cache
def get_platform_registry() -> PlatformRegistry:
    return create_default_registry(agent_name=settings.agent_name)


def get_conversation_service(
    db: Session = Depends(get_db),
    llm_service: LLMService = Depends(get_llm_service)
) -> ConversationService:
    return ConversationService(
        conversation_repo=ConversationRepository(db),
        user_repo=UserRepository(db),
        check_in_repo=CheckInRepository(db),
        reflection_repo=ReflectionRepository(db),
        llm_service=llm_service
    )


def get_check_in_service(db: Session = Depends(get_db)) -> CheckInService:
    return CheckInService(CheckInRepository(db), UserRepository(db))


def get_reflection_service(
    db: Session = Depends(get_db),
    llm_service: LLMService = Depends(get_llm_service)
) -> ReflectionService:
    return ReflectionService(ReflectionRepository(db), UserRepository(db), llm_service)
