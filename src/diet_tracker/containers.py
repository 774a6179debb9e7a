"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from diet_tracker.adapters.fdc_client import HttpxFdcClient
from diet_tracker.adapters.gemini_text_client import GeminiTextClient
from diet_tracker.adapters.openai_text_client import OpenAITextClient
from diet_tracker.adapters.supabase_diet_plan_repository import (
    SupabaseDietPlanRepository,
)
from diet_tracker.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from diet_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from diet_tracker.adapters.websocket_event_sink import WebSocketEventSink
from diet_tracker.config import Settings
from diet_tracker.services.ai import (
    StructuredGenerator,
    TextGenerationClient,
    UnavailableTextClient,
)
from diet_tracker.services.diet_plans import DietPlanService
from diet_tracker.services.estimation import NutritionEstimator
from diet_tracker.services.food_logs import FoodLogService
from diet_tracker.services.notifications import RateLimitedNotifier
from diet_tracker.services.planner import PlanningService
from diet_tracker.services.security import TokenService
from diet_tracker.services.users import UserService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    token_service: TokenService
    user_service: UserService
    planning_service: PlanningService
    diet_plan_service: DietPlanService
    food_log_service: FoodLogService
    event_sink: WebSocketEventSink
    notifier: RateLimitedNotifier
    close_resources: Callable[[], Awaitable[None]]


def build_text_generator(settings: Settings) -> StructuredGenerator:
    """Pick the configured text generation provider."""
    provider = settings.ai_provider.strip().lower()
    client: TextGenerationClient
    if provider == "openai" and settings.openai_api_key:
        client = OpenAITextClient.create(settings.openai_api_key)
        model = settings.openai_model
    elif provider == "gemini" and settings.gemini_api_key:
        client = GeminiTextClient.create(settings.gemini_api_key)
        model = settings.gemini_model
    else:
        _logger.warning(
            "No API key for AI provider %s; using fallback calculations only",
            provider,
        )
        client = UnavailableTextClient(provider)
        model = ""
    return StructuredGenerator(client=client, model=model)


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    user_repository = SupabaseUserRepository(supabase_client)
    diet_plan_repository = SupabaseDietPlanRepository(supabase_client)
    food_log_repository = SupabaseFoodLogRepository(supabase_client)

    token_service = TokenService(
        secret=resolved_settings.jwt_secret,
        ttl_days=resolved_settings.jwt_ttl_days,
    )
    event_sink = WebSocketEventSink()
    notifier = RateLimitedNotifier(
        sink=event_sink,
        min_interval_seconds=resolved_settings.notification_min_interval_seconds,
    )
    generator = build_text_generator(resolved_settings)
    fdc_client = None
    if resolved_settings.fdc_api_key:
        fdc_client = HttpxFdcClient.create(
            api_key=resolved_settings.fdc_api_key,
            base_url=resolved_settings.fdc_base_url,
        )

    planning_service = PlanningService(
        users=user_repository,
        diet_plans=diet_plan_repository,
        generator=generator,
        notifier=notifier,
    )
    food_log_service = FoodLogService(
        repository=food_log_repository,
        users=user_repository,
        estimator=NutritionEstimator(generator=generator, fdc_client=fdc_client),
        notifier=notifier,
        default_timezone=resolved_settings.default_timezone,
    )

    async def close_resources() -> None:
        await event_sink.close()
        if fdc_client is not None:
            await fdc_client.close()
        if isinstance(generator.client, OpenAITextClient):
            await generator.client.close()

    return AppContainer(
        settings=resolved_settings,
        token_service=token_service,
        user_service=UserService(user_repository, token_service),
        planning_service=planning_service,
        diet_plan_service=DietPlanService(diet_plan_repository),
        food_log_service=food_log_service,
        event_sink=event_sink,
        notifier=notifier,
        close_resources=close_resources,
    )
