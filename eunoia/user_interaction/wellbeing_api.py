"""
Wellbeing API
用户会话历史、情绪打卡与反思记录的查询/创建接口
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
import logging

from eunoia.core_application.checkin_service import CheckInService
from eunoia.core_application.conversation_service import ConversationService
from eunoia.core_application.reflection_service import ReflectionService
from eunoia.data_persistence.repositories import UserNotFoundError
from .dependencies import get_check_in_service, get_conversation_service, get_reflection_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users/{platform_user_id}", tags=["Wellbeing"])


# === Pydantic模型定义 ===

class ConversationMessageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    message_role: str
    message_content: str
    message_id: Optional[str] = None
    created_at: datetime


class CheckInCreate(BaseModel):
    """情绪打卡请求"""
    mood_score: int = Field(..., description="情绪分数(1-10)")
    mood_label: str = Field("", description="情绪标签")
    description: str = Field("", description="描述")


class CheckInResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    mood_score: int
    mood_label: str
    description: str
    check_in_date: datetime


class CheckInStatsResponse(BaseModel):
    average_mood_score: float
    total_check_ins: int
    mood_trend: str
    last_check_in: Optional[CheckInResponse] = None
    insight: str


class ReflectionCreate(BaseModel):
    content: str = Field(..., description="反思内容")


class ReflectionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    sentiment: str
    key_themes: str
    ai_analysis: str
    created_at: datetime


def _not_found(e: UserNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


# === 会话历史 ===

@router.get("/conversation", response_model=List[ConversationMessageResponse])
async def get_conversation(
    platform_user_id: str,
    limit: int = Query(20, ge=1, le=200),
    service: ConversationService = Depends(get_conversation_service)
):
    """获取会话历史（时间正序）"""
    try:
        return service.get_conversation_history(platform_user_id, limit)
    except UserNotFoundError as e:
        raise _not_found(e)


# === 情绪打卡 ===

@router.get("/check-ins", response_model=List[CheckInResponse])
async def list_check_ins(
    platform_user_id: str,
    limit: int = Query(10, ge=1, le=100),
    service: CheckInService = Depends(get_check_in_service)
):
    try:
        return service.get_check_in_history(platform_user_id, limit)
    except UserNotFoundError as e:
        raise _not_found(e)


@router.post("/check-ins", response_model=CheckInResponse, status_code=status.HTTP_201_CREATED)
async def create_check_in(
    platform_user_id: str,
    payload: CheckInCreate,
    service: CheckInService = Depends(get_check_in_service)
):
    try:
        return service.create_check_in(
            platform_user_id, payload.mood_score, payload.mood_label, payload.description
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/check-ins/stats", response_model=CheckInStatsResponse)
async def get_check_in_stats(
    platform_user_id: str,
    days: int = Query(7, ge=1, le=365),
    service: CheckInService = Depends(get_check_in_service)
):
    """获取情绪统计与洞察"""
    try:
        stats = service.get_check_in_stats(platform_user_id, days)
    except UserNotFoundError as e:
        raise _not_found(e)

    return CheckInStatsResponse(
        average_mood_score=stats.average_mood_score,
        total_check_ins=stats.total_check_ins,
        mood_trend=stats.mood_trend,
        last_check_in=CheckInResponse.model_validate(stats.last_check_in) if stats.last_check_in else None,
        insight=service.generate_mood_insight(stats)
    )


@router.get("/check-ins/today", response_model=Optional[CheckInResponse])
async def get_today_check_in(
    platform_user_id: str,
    service: CheckInService = Depends(get_check_in_service)
):
    try:
        return service.get_today_check_in(platform_user_id)
    except UserNotFoundError as e:
        raise _not_found(e)


# === 反思记录 ===

@router.get("/reflections", response_model=List[ReflectionResponse])
async def list_reflections(
    platform_user_id: str,
    limit: int = Query(10, ge=1, le=100),
    service: ReflectionService = Depends(get_reflection_service)
):
    try:
        return service.get_reflection_history(platform_user_id, limit)
    except UserNotFoundError as e:
        raise _not_found(e)


@router.get("/reflections/recent", response_model=List[ReflectionResponse])
async def list_recent_reflections(
    platform_user_id: str,
    days: int = Query(7, ge=1, le=365),
    service: ReflectionService = Depends(get_reflection_service)
):
    """获取最近N天内的反思"""
    try:
        return service.get_recent_reflections(platform_user_id, days)
    except UserNotFoundError as e:
        raise _not_found(e)


@router.post("/reflections", response_model=ReflectionResponse, status_code=status.HTTP_201_CREATED)
async def create_reflection(
    platform_user_id: str,
    payload: ReflectionCreate,
    service: ReflectionService = Depends(get_reflection_service)
):
    try:
        reflection = await service.create_reflection(platform_user_id, payload.content)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info(f"Reflection created via API for {platform_user_id}: {reflection.id}")
    return reflection
