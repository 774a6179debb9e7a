"""Shared test fixtures."""

import dataclasses
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from diet_tracker.adapters.fdc_client import FdcClient
from diet_tracker.adapters.websocket_event_sink import WebSocketEventSink
from diet_tracker.config import Settings
from diet_tracker.containers import AppContainer
from diet_tracker.domain.diet_plans import DietPlanContent, DietPlanRecord
from diet_tracker.domain.food_logs import (
    FoodLogDraft,
    FoodLogEntry,
    MealType,
    NutritionSource,
)
from diet_tracker.domain.profile import (
    ActivityLevel,
    Gender,
    NutritionGoals,
    UserProfile,
    UserRecord,
)
from diet_tracker.services.ai import StructuredGenerator, TextGenerationClient
from diet_tracker.services.diet_plans import DietPlanRepository, DietPlanService
from diet_tracker.services.estimation import NutritionEstimator
from diet_tracker.services.food_logs import FoodLogRepository, FoodLogService
from diet_tracker.services.notifications import RateLimitedNotifier
from diet_tracker.services.planner import PlanningService
from diet_tracker.services.security import TokenService
from diet_tracker.services.users import UserRepository, UserService

_ACCOUNT_FIELDS = {"name", "email", "password_hash"}


def complete_profile(**overrides: object) -> UserProfile:
    """Profile with every field needed for goals and plans."""
    values: dict[str, object] = {
        "age": 30,
        "weight_kg": 70.0,
        "height_cm": 175.0,
        "gender": Gender.MALE,
        "activity_level": ActivityLevel.MODERATE,
        "diet_type": ("vegan",),
    }
    values.update(overrides)
    return UserProfile(**values)


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory user repository for tests."""

    users: dict[UUID, UserRecord] = field(default_factory=dict)
    goal_updates: list[tuple[UUID, NutritionGoals]] = field(default_factory=list)

    def add(self, profile: UserProfile | None = None, **account: str) -> UserRecord:
        user = UserRecord(
            id=uuid4(),
            name=account.get("name", "Test User"),
            email=account.get("email", f"{uuid4().hex}@example.com"),
            password_hash=account.get("password_hash", ""),
            profile=profile or UserProfile(),
        )
        self.users[user.id] = user
        return user

    def get_user(self, user_id: UUID) -> UserRecord | None:
        return self.users.get(user_id)

    def get_by_email(self, email: str) -> UserRecord | None:
        return next((user for user in self.users.values() if user.email == email), None)

    def create_user(self, name: str, email: str, password_hash: str) -> UserRecord:
        return self.add(name=name, email=email, password_hash=password_hash)

    def update_user(self, user_id: UUID, changes: dict[str, object]) -> UserRecord:
        user = self.users[user_id]
        account = {k: v for k, v in changes.items() if k in _ACCOUNT_FIELDS}
        profile = {k: v for k, v in changes.items() if k not in _ACCOUNT_FIELDS}
        updated = dataclasses.replace(
            user, profile=dataclasses.replace(user.profile, **profile), **account
        )
        self.users[user_id] = updated
        return updated

    def update_nutrition_goals(self, user_id: UUID, goals: NutritionGoals) -> None:
        self.goal_updates.append((user_id, goals))
        user = self.users[user_id]
        self.users[user_id] = dataclasses.replace(
            user,
            profile=dataclasses.replace(user.profile, daily_nutrition_goals=goals),
        )


@dataclass
class InMemoryDietPlanRepository(DietPlanRepository):
    """In-memory diet plan repository for tests."""

    plans: dict[UUID, DietPlanRecord] = field(default_factory=dict)
    tick: int = 0

    def _now(self) -> datetime:
        self.tick += 1
        return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(seconds=self.tick)

    def list_plans(self, user_id: UUID) -> list[DietPlanRecord]:
        owned = [plan for plan in self.plans.values() if plan.user_id == user_id]
        return sorted(owned, key=lambda plan: plan.updated_at, reverse=True)

    def get_plan(self, plan_id: UUID) -> DietPlanRecord | None:
        return self.plans.get(plan_id)

    def create_plan(
        self, user_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        now = self._now()
        plan = DietPlanRecord(
            id=uuid4(),
            user_id=user_id,
            title=content.title,
            description=content.description,
            days=list(content.days),
            source=source,
            created_at=now,
            updated_at=now,
        )
        self.plans[plan.id] = plan
        return plan

    def update_plan(
        self, plan_id: UUID, content: DietPlanContent, source: str
    ) -> DietPlanRecord:
        plan = dataclasses.replace(
            self.plans[plan_id],
            title=content.title,
            description=content.description,
            days=list(content.days),
            source=source,
            updated_at=self._now(),
        )
        self.plans[plan_id] = plan
        return plan

    def delete_plan(self, plan_id: UUID) -> None:
        self.plans.pop(plan_id, None)


@dataclass
class InMemoryFoodLogRepository(FoodLogRepository):
    """In-memory food log repository for tests."""

    logs: dict[UUID, FoodLogEntry] = field(default_factory=dict)

    def create_log(
        self, user_id: UUID, draft: FoodLogDraft, source: NutritionSource
    ) -> FoodLogEntry:
        entry = FoodLogEntry(
            id=uuid4(),
            user_id=user_id,
            logged_at=draft.logged_at,
            meal_type=draft.meal_type,
            food_name=draft.food_name,
            quantity=draft.quantity,
            unit=draft.unit,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            notes=draft.notes,
            nutrition_source=source,
        )
        self.logs[entry.id] = entry
        return entry

    def get_log(self, log_id: UUID) -> FoodLogEntry | None:
        return self.logs.get(log_id)

    def list_logs(
        self,
        user_id: UUID,
        start: datetime | None = None,
        end: datetime | None = None,
        meal_type: MealType | None = None,
    ) -> list[FoodLogEntry]:
        entries = [
            entry
            for entry in self.logs.values()
            if entry.user_id == user_id
            and (start is None or entry.logged_at >= start)
            and (end is None or entry.logged_at < end)
            and (meal_type is None or entry.meal_type == meal_type)
        ]
        return sorted(entries, key=lambda entry: entry.logged_at, reverse=True)

    def update_log(self, log_id: UUID, changes: dict[str, object]) -> FoodLogEntry:
        entry = dataclasses.replace(self.logs[log_id], **changes)
        self.logs[log_id] = entry
        return entry

    def delete_log(self, log_id: UUID) -> None:
        self.logs.pop(log_id, None)


@dataclass
class FakeTextClient(TextGenerationClient):
    """Returns queued responses; queued exceptions are raised."""

    responses: list[str | Exception] = field(default_factory=list)
    prompts: list[str] = field(default_factory=list)

    async def generate(self, *, model: str, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.responses:
            raise ConnectionError("no response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@dataclass
class FakeFdcClient(FdcClient):
    """Fake FDC client with an in-memory search result."""

    search_payload: dict[str, object] = field(
        default_factory=lambda: {
            "foods": [
                {
                    "fdcId": 171077,
                    "description": "Chicken, broiler, breast, roasted",
                    "dataType": "SR Legacy",
                    "foodNutrients": [
                        {"nutrientId": 1008, "value": 165},
                        {"nutrientId": 1003, "value": 31},
                        {"nutrientId": 1004, "value": 3.6},
                        {"nutrientId": 1005, "value": 0},
                    ],
                }
            ]
        }
    )
    queries: list[str] = field(default_factory=list)
    error: Exception | None = None

    async def search_foods(self, query: str, page_size: int = 5) -> dict[str, object]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return self.search_payload


@dataclass
class RecordingSink:
    """Event sink that records what it was asked to deliver."""

    events: list[tuple[str, str, dict[str, object]]] = field(default_factory=list)

    async def publish(
        self, user_id: str, event: str, payload: dict[str, object]
    ) -> None:
        self.events.append((user_id, event, payload))

    def names(self) -> list[str]:
        return [event for _, event, _ in self.events]


@dataclass
class FakeClock:
    now: float = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        jwt_secret="test-secret",
        gemini_api_key="gemini-key",
        fdc_api_key="fdc-key",
    )


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def diet_plan_repository() -> InMemoryDietPlanRepository:
    return InMemoryDietPlanRepository()


@pytest.fixture
def food_log_repository() -> InMemoryFoodLogRepository:
    return InMemoryFoodLogRepository()


@pytest.fixture
def text_client() -> FakeTextClient:
    return FakeTextClient()


@pytest.fixture
def fdc_client() -> FakeFdcClient:
    return FakeFdcClient()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def notifier(sink: RecordingSink, clock: FakeClock) -> RateLimitedNotifier:
    return RateLimitedNotifier(sink=sink, min_interval_seconds=30.0, clock=clock)


@pytest.fixture
def generator(text_client: FakeTextClient) -> StructuredGenerator:
    return StructuredGenerator(client=text_client, model="test-model")


@pytest.fixture
def planning_service(
    user_repository: InMemoryUserRepository,
    diet_plan_repository: InMemoryDietPlanRepository,
    generator: StructuredGenerator,
    notifier: RateLimitedNotifier,
) -> PlanningService:
    return PlanningService(
        users=user_repository,
        diet_plans=diet_plan_repository,
        generator=generator,
        notifier=notifier,
    )


@pytest.fixture
def food_log_service(
    food_log_repository: InMemoryFoodLogRepository,
    user_repository: InMemoryUserRepository,
    generator: StructuredGenerator,
    fdc_client: FakeFdcClient,
    notifier: RateLimitedNotifier,
) -> FoodLogService:
    return FoodLogService(
        repository=food_log_repository,
        users=user_repository,
        estimator=NutritionEstimator(generator=generator, fdc_client=fdc_client),
        notifier=notifier,
    )


@pytest.fixture
def container(
    settings: Settings,
    user_repository: InMemoryUserRepository,
    diet_plan_repository: InMemoryDietPlanRepository,
    planning_service: PlanningService,
    food_log_service: FoodLogService,
) -> AppContainer:
    token_service = TokenService(secret=settings.jwt_secret)
    event_sink = WebSocketEventSink()

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        token_service=token_service,
        user_service=UserService(user_repository, token_service),
        planning_service=planning_service,
        diet_plan_service=DietPlanService(diet_plan_repository),
        food_log_service=food_log_service,
        event_sink=event_sink,
        notifier=RateLimitedNotifier(sink=event_sink),
        close_resources=close_resources,
    )


def register(
    client: TestClient, email: str = "ana@example.com", **profile: object
) -> dict[str, str]:
    """Register through the API and return bearer headers for the new user."""
    response = client.post(
        "/api/auth/register",
        json={"name": "Ana", "email": email, "password": "hunter22"},
    )
    assert response.status_code == 201
    headers = {"Authorization": f"Bearer {response.json()['token']}"}
    if profile:
        update = client.put("/api/auth/profile", json=profile, headers=headers)
        assert update.status_code == 200
    return headers


COMPLETE_PROFILE_BODY = {
    "age": 30,
    "weight": 70,
    "height": 175,
    "gender": "male",
    "activityLevel": "moderate",
    "dietType": ["vegan"],
}
