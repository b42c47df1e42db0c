"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from plant_tracker.adapters.continuation_client import HttpxContinuationClient
from plant_tracker.adapters.openai_structured_client import OpenAIStructuredClient
from plant_tracker.adapters.supabase_auth_gateway import SupabaseAuthGateway
from plant_tracker.adapters.supabase_import_session_repository import (
    SupabaseImportSessionRepository,
)
from plant_tracker.adapters.tavily_search_client import HttpxTavilySearchClient
from plant_tracker.adapters.web_page_fetcher import HttpxWebPageFetcher
from plant_tracker.config import Settings
from plant_tracker.services.auth import AuthService
from plant_tracker.services.identification import IdentificationService
from plant_tracker.services.import_sessions import ImportSessionService
from plant_tracker.services.research import CareResearchService
from plant_tracker.services.selection import SelectionService
from plant_tracker.services.workflow import IdentificationWorkflow


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    auth_service: AuthService
    import_session_service: ImportSessionService
    selection_service: SelectionService
    identification_workflow: IdentificationWorkflow
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    auth_service = AuthService(SupabaseAuthGateway(supabase_client))
    import_session_service = ImportSessionService(
        SupabaseImportSessionRepository(supabase_client)
    )
    continuation_client = HttpxContinuationClient.create(
        base_url=resolved_settings.app_base_url,
        timeout_seconds=resolved_settings.continuation_timeout_seconds,
    )
    selection_service = SelectionService(
        sessions=import_session_service,
        continuation_client=continuation_client,
    )
    llm_client = OpenAIStructuredClient.create(resolved_settings.openai_api_key)
    search_client = HttpxTavilySearchClient.create(
        api_key=resolved_settings.tavily_api_key,
        base_url=resolved_settings.tavily_base_url,
    )
    page_fetcher = HttpxWebPageFetcher.create()
    identification_workflow = IdentificationWorkflow(
        sessions=import_session_service,
        identification_service=IdentificationService(
            client=llm_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        ),
        research_service=CareResearchService(
            search_client=search_client,
            page_fetcher=page_fetcher,
            client=llm_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        ),
        confidence_threshold=resolved_settings.identification_confidence_threshold,
    )

    async def close_resources() -> None:
        await continuation_client.close()
        await search_client.close()
        await page_fetcher.close()
        await llm_client.client.close()

    return AppContainer(
        settings=resolved_settings,
        auth_service=auth_service,
        import_session_service=import_session_service,
        selection_service=selection_service,
        identification_workflow=identification_workflow,
        close_resources=close_resources,
    )
