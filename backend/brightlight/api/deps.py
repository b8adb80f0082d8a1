"""Service objects built once at startup and handed to routes as dependencies."""
from __future__ import annotations

from dataclasses import dataclass

from fastapi import Depends, Query, Request
from sqlalchemy.orm import Session

from brightlight.core.config import Settings
from brightlight.db.deps import get_db
from brightlight.services.chat_service import ChatService
from brightlight.services.completion_client import OpenAIChatTransport, TextCompletionClient
from brightlight.services.emotion_classifier import EmotionClassifier
from brightlight.services.local_cache import LocalCache
from brightlight.services.plan.generator import PlanGenerator
from brightlight.services.plan.store import PlanStore


@dataclass
class ServiceRegistry:
    completion_client: TextCompletionClient
    plan_generator: PlanGenerator
    emotion_classifier: EmotionClassifier
    chat_service: ChatService
    local_cache: LocalCache


def build_services(settings: Settings) -> ServiceRegistry:
    completion_client = TextCompletionClient(
        OpenAIChatTransport(
            settings.openai_api_key,
            base_url=settings.openai_base_url,
            timeout=settings.openai_timeout_seconds,
        ),
        model=settings.openai_model,
        max_retries=settings.completion_max_retries,
        retry_delay=settings.completion_retry_delay_seconds,
        cache_enabled=settings.completion_cache_enabled,
    )
    return ServiceRegistry(
        completion_client=completion_client,
        plan_generator=PlanGenerator(completion_client, chunk_size=settings.plan_chunk_size),
        emotion_classifier=EmotionClassifier(
            settings.emotion_model_url,
            settings.huggingface_api_key,
            max_retries=settings.emotion_max_retries,
            retry_delay=settings.emotion_retry_delay_seconds,
        ),
        chat_service=ChatService(completion_client),
        local_cache=LocalCache(settings.local_cache_path),
    )


def get_services(request: Request) -> ServiceRegistry:
    return request.app.state.services


def get_plan_generator(services: ServiceRegistry = Depends(get_services)) -> PlanGenerator:
    return services.plan_generator


def get_emotion_classifier(services: ServiceRegistry = Depends(get_services)) -> EmotionClassifier:
    return services.emotion_classifier


def get_chat_service(services: ServiceRegistry = Depends(get_services)) -> ChatService:
    return services.chat_service


def get_local_cache(services: ServiceRegistry = Depends(get_services)) -> LocalCache:
    return services.local_cache


def get_plan_store(
    user_id: str = Query(..., min_length=1, description="User ID"),
    db: Session = Depends(get_db),
    cache: LocalCache = Depends(get_local_cache),
) -> PlanStore:
    return PlanStore(db, user_id, cache)
