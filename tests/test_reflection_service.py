"""Tests for ReflectionService."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from eunoia.core_application.reflection_service import ANALYSIS_UNAVAILABLE, ReflectionService
from eunoia.data_persistence.models import utc_now
from eunoia.data_persistence.repositories import UserNotFoundError
from eunoia.external_services.llm_service import GenerationError


def _async(outcome) -> AsyncMock:
    if isinstance(outcome, Exception):
        return AsyncMock(side_effect=outcome)
    return AsyncMock(return_value=outcome)


def _mock_llm(sentiment="Positive\n", themes=" growth, rest ", analysis="That sounds meaningful."):
    llm = MagicMock()
    llm.analyze_sentiment = _async(sentiment)
    llm.extract_themes = _async(themes)
    llm.generate = _async(analysis)
    return llm


def test_create_reflection_stores_analysis(reflection_repo, user_repo) -> None:
    llm = _mock_llm()
    service = ReflectionService(reflection_repo, user_repo, llm)

    reflection = asyncio.run(service.create_reflection("telex-1", "I realized I need more rest"))

    assert reflection.content == "I realized I need more rest"
    assert reflection.sentiment == "Positive"
    assert reflection.key_themes == "growth, rest"
    assert reflection.ai_analysis == "That sounds meaningful."
    system_prompt, user_prompt, history = llm.generate.await_args.args
    assert "I realized I need more rest" in user_prompt
    assert history == []


def test_analysis_failures_fall_back_to_defaults(reflection_repo, user_repo) -> None:
    failure = GenerationError("down")
    service = ReflectionService(reflection_repo, user_repo, _mock_llm(failure, failure, failure))

    reflection = asyncio.run(service.create_reflection("telex-1", "thinking about my week"))

    assert reflection.sentiment == "unknown"
    assert reflection.key_themes == ""
    assert reflection.ai_analysis == ANALYSIS_UNAVAILABLE


def test_empty_content_is_rejected(reflection_repo, user_repo) -> None:
    llm = _mock_llm()
    service = ReflectionService(reflection_repo, user_repo, llm)

    with pytest.raises(ValueError):
        asyncio.run(service.create_reflection("telex-1", "   "))
    llm.analyze_sentiment.assert_not_awaited()


def test_history_requires_existing_user(reflection_repo, user_repo) -> None:
    service = ReflectionService(reflection_repo, user_repo, _mock_llm())

    with pytest.raises(UserNotFoundError):
        service.get_reflection_history("ghost", 5)

    asyncio.run(service.create_reflection("telex-1", "grateful for my friends"))
    assert len(service.get_reflection_history("telex-1", 5)) == 1


def test_recent_reflections_for_known_user(db, reflection_repo, user_repo) -> None:
    service = ReflectionService(reflection_repo, user_repo, _mock_llm())
    old = asyncio.run(service.create_reflection("telex-1", "an old entry"))
    old.created_at = utc_now() - timedelta(days=20)
    db.commit()
    asyncio.run(service.create_reflection("telex-1", "a new entry"))

    assert [r.content for r in service.get_recent_reflections("telex-1", 7)] == ["a new entry"]
    with pytest.raises(UserNotFoundError):
        service.get_recent_reflections("ghost", 7)
