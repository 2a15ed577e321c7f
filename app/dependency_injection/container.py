from __future__ import annotations

import punq
from fastapi import Request

from app.agents.base import AgentQuery
from app.agents.factory import build_agent_query, default_agent_options
from app.core.settings import Settings
from app.services.auth_service import AuthService
from app.services.chat_service import ChatService
from app.services.contracts import (
    AuthServiceProtocol,
    BlobStoreProtocol,
    ChatServiceProtocol,
    DatabaseServiceProtocol,
    PresentationServiceProtocol,
    SessionStoreProtocol,
)
from app.services.database_service import DatabaseService
from app.services.presentation_service import PresentationService
from app.services.session_store import RedisSessionStore
from app.services.storage_client import SupabaseStorageClient


def build_container(settings: Settings, agent: AgentQuery | None = None) -> punq.Container:
    container = punq.Container()
    container.register(Settings, instance=settings)

    container.register(
        DatabaseServiceProtocol,
        factory=lambda: DatabaseService(
            dsn=settings.database_dsn,
            min_pool_size=settings.database_pool_min_size,
            max_pool_size=settings.database_pool_max_size,
        ),
        scope=punq.Scope.singleton,
    )
    container.register(
        BlobStoreProtocol,
        factory=lambda: SupabaseStorageClient(
            base_url=settings.supabase_url,
            service_key=settings.supabase_service_key,
            bucket=settings.storage_bucket,
            timeout_seconds=settings.storage_timeout_seconds,
        ),
        scope=punq.Scope.singleton,
    )
    container.register(
        SessionStoreProtocol,
        factory=lambda: RedisSessionStore(
            redis_url=settings.session_redis_url,
            key_prefix=settings.session_key_prefix,
        ),
        scope=punq.Scope.singleton,
    )
    if agent is not None:
        container.register(AgentQuery, instance=agent)
    else:
        container.register(AgentQuery, factory=lambda: build_agent_query(settings), scope=punq.Scope.singleton)
    container.register(AuthServiceProtocol, factory=AuthService, scope=punq.Scope.singleton)
    container.register(PresentationServiceProtocol, factory=PresentationService, scope=punq.Scope.singleton)
    container.register(
        ChatServiceProtocol,
        factory=lambda: ChatService(
            agent=container.resolve(AgentQuery),
            default_options=default_agent_options(settings),
            max_duration_seconds=settings.chat_max_duration_seconds,
            buffer_size=settings.chat_stream_buffer_size,
        ),
        scope=punq.Scope.singleton,
    )

    return container


def get_container(request: Request) -> punq.Container:
    return request.app.state.container
