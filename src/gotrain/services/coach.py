"""
Coach service: orchestrates plan generation, activity refresh and chat.

Each of the three operation classes has its own busy flag. Re-triggering
an operation while it is still running raises OperationInProgressError;
different classes may overlap, and the last write to the plan store wins.
"""

import logging
from contextlib import contextmanager
from datetime import date
from enum import Enum
from typing import Callable, Dict, List, Optional

import httpx

from ..analysis.strength import ExerciseStat, aggregate_exercise_stats
from ..config import Settings
from ..db.storage import SessionStorage, StorageKey
from ..exceptions import (
    ConfigurationError,
    DataFetchError,
    GoalsNotSetError,
    NotConnectedError,
    OperationInProgressError,
)
from ..integrations.base import AuthenticationError, IntegrationError
from ..integrations.hevy import HevyClient
from ..integrations.strava import StravaActivity, StravaClient, StravaOAuthFlow
from ..llm.context_builder import build_coach_system_prompt, build_initial_prompt
from ..llm.prompts import PLAN_GENERATION_SYSTEM
from ..llm.providers import LLMClient, RetryConfig
from ..models.chat import ChatMessage, ChatRole
from ..models.goals import UnitPreferences, UserGoals, normalize_goals
from ..models.plan import WeeklyPlan
from ..plans.parser import PlanParseResult
from ..plans.revision import CoachReply, RevisionState, handle_coach_reply
from ..plans.store import PlanStore
from ..plans.transcript import ChatTranscript
from .token_provider import TokenProvider


logger = logging.getLogger(__name__)


class OperationKind(str, Enum):
    """Independent operation classes, each with its own busy flag."""
    GENERATE_PLAN = "generate_plan"
    REFRESH_ACTIVITIES = "refresh_activities"
    SEND_MESSAGE = "send_message"


StravaClientFactory = Callable[[str], StravaClient]


class CoachService:
    """
    Single-user coaching session.

    Usage:
        service = CoachService.from_settings(get_settings())
        result = await service.generate_plan()
        reply = await service.send_message("Swap day 2 and day 3")
    """

    def __init__(
        self,
        storage: SessionStorage,
        token_provider: TokenProvider,
        llm_client: Optional[LLMClient] = None,
        units: Optional[UnitPreferences] = None,
        strava_client_factory: StravaClientFactory = StravaClient,
        hevy_client: Optional[HevyClient] = None,
        hevy_page_size: int = 5,
    ):
        self.storage = storage
        self.llm_client = llm_client
        self.token_provider = token_provider
        self.units = units or UnitPreferences()
        self._strava_client_factory = strava_client_factory
        self.hevy_client = hevy_client
        self.hevy_page_size = hevy_page_size

        self.plan_store = PlanStore(storage)
        self.transcript = ChatTranscript(storage)
        self.revision_state = RevisionState.IDLE
        self._busy: Dict[OperationKind, bool] = {kind: False for kind in OperationKind}

        if self.token_provider.on_disconnect is None:
            self.token_provider.on_disconnect = self.plan_store.load

    @classmethod
    def from_settings(cls, settings: Settings) -> "CoachService":
        """Wire a service from configuration."""
        storage = SessionStorage(settings.db_path)
        oauth_flow = StravaOAuthFlow(
            client_id=settings.strava_client_id,
            client_secret=settings.strava_client_secret,
            redirect_uri=settings.strava_redirect_uri,
        )
        llm_client = None
        if settings.openai_api_key:
            llm_client = LLMClient(
                api_key=settings.openai_api_key,
                model=settings.llm_model,
                temperature=settings.llm_temperature,
                retry_config=RetryConfig(max_retries=settings.llm_max_retries),
            )
        hevy_client = HevyClient(settings.hevy_api_key) if settings.has_hevy else None
        return cls(
            storage=storage,
            llm_client=llm_client,
            token_provider=TokenProvider(storage, oauth_flow),
            units=settings.units,
            hevy_client=hevy_client,
            hevy_page_size=settings.hevy_page_size,
        )

    def _require_llm(self) -> LLMClient:
        if self.llm_client is None:
            raise ConfigurationError("openai_api_key")
        return self.llm_client

    # -------------------------------------------------------------------------
    # Busy flags
    # -------------------------------------------------------------------------

    def is_busy(self, kind: OperationKind) -> bool:
        return self._busy[kind]

    @contextmanager
    def _operation(self, kind: OperationKind):
        if self._busy[kind]:
            raise OperationInProgressError(kind.value)
        self._busy[kind] = True
        try:
            yield
        finally:
            self._busy[kind] = False

    # -------------------------------------------------------------------------
    # Goals
    # -------------------------------------------------------------------------

    def get_goals(self) -> Optional[UserGoals]:
        return normalize_goals(self.storage.get_json(StorageKey.USER_GOALS))

    def save_goals(self, goals: UserGoals) -> None:
        self.storage.set_json(StorageKey.USER_GOALS, goals.to_dict())
        logger.info("Saved training goals")

    def reset_goals(self) -> None:
        self.storage.delete(StorageKey.USER_GOALS)

    # -------------------------------------------------------------------------
    # Cached data
    # -------------------------------------------------------------------------

    def get_cached_activities(self) -> List[StravaActivity]:
        raw = self.storage.get_json(StorageKey.ACTIVITIES, default=[])
        return [StravaActivity.from_api_response(a) for a in raw]

    def get_cached_strength_stats(self) -> List[ExerciseStat]:
        raw = self.storage.get_json(StorageKey.STRENGTH_STATS, default=[])
        return [ExerciseStat.from_dict(s) for s in raw]

    def get_plan(self) -> Optional[WeeklyPlan]:
        return self.plan_store.get()

    def get_messages(self) -> List[ChatMessage]:
        return self.transcript.messages()

    def export_plan_text(self) -> Optional[str]:
        """Plan text for copying elsewhere: pretty JSON, or the raw text."""
        plan = self.plan_store.get()
        if plan is not None:
            return plan.to_json(indent=2)
        return self.plan_store.raw_text

    # -------------------------------------------------------------------------
    # Upstream data
    # -------------------------------------------------------------------------

    async def _require_token(self) -> str:
        token = await self.token_provider.get_valid_token()
        if token is None:
            raise NotConnectedError()
        return token

    async def _fetch_activities(self, token: str) -> List[StravaActivity]:
        """Fetch and cache the last week of activities; the cache survives failures."""
        try:
            async with self._strava_client_factory(token) as client:
                activities = await client.get_recent_activities()
        except AuthenticationError as e:
            logger.error(f"Strava rejected the access token: {e}")
            self.token_provider.disconnect()
            raise NotConnectedError("Strava authorization expired. Please reconnect.")
        except (IntegrationError, httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            raise DataFetchError(f"Failed to refresh activities: {e}", source="strava")

        self.storage.set_json(StorageKey.ACTIVITIES, [a.to_dict() for a in activities])
        return activities

    async def _fetch_strength_stats(self) -> List[ExerciseStat]:
        if self.hevy_client is None:
            return []
        try:
            sessions = await self.hevy_client.fetch_workouts(page=1, page_size=self.hevy_page_size)
        except (IntegrationError, httpx.HTTPError, KeyError, TypeError, ValueError) as e:
            raise DataFetchError(f"Failed to fetch strength history: {e}", source="hevy")

        stats = aggregate_exercise_stats(sessions)
        self.storage.set_json(StorageKey.STRENGTH_STATS, [s.to_dict() for s in stats])
        return stats

    async def refresh_activities(self) -> List[StravaActivity]:
        """
        Replace the cached activity list with the last 7 days from Strava.

        Raises:
            NotConnectedError: No valid token
            DataFetchError: Strava unavailable (cache left in place)
            OperationInProgressError: A refresh is already running
        """
        with self._operation(OperationKind.REFRESH_ACTIVITIES):
            token = await self._require_token()
            activities = await self._fetch_activities(token)
            logger.info(f"Refreshed {len(activities)} activities")
            return activities

    async def refresh_strength_stats(self) -> List[ExerciseStat]:
        """Recompute strength stats from Hevy; a no-op without a Hevy key."""
        with self._operation(OperationKind.REFRESH_ACTIVITIES):
            return await self._fetch_strength_stats()

    # -------------------------------------------------------------------------
    # Plan generation
    # -------------------------------------------------------------------------

    async def generate_plan(self, current_date: Optional[date] = None) -> PlanParseResult:
        """
        Generate a fresh weekly plan and make it current.

        A plan that does not parse is not an error: the raw text becomes
        the current plan text and the result is a ParseFailure.

        Raises:
            GoalsNotSetError: No saved goals
            NotConnectedError: No valid token
            DataFetchError: Activity or strength data unavailable
            LLMError: The generation call failed
            OperationInProgressError: Generation is already running
        """
        with self._operation(OperationKind.GENERATE_PLAN):
            goals = self.get_goals()
            if goals is None:
                raise GoalsNotSetError()

            token = await self._require_token()
            activities = await self._fetch_activities(token)
            stats = await self._fetch_strength_stats()

            prompt = build_initial_prompt(
                goals=goals,
                activities=activities,
                stats=stats,
                units=self.units,
                current_date=current_date or date.today(),
            )
            raw_text = await self._require_llm().completion_json(PLAN_GENERATION_SYSTEM, prompt)
            return self.plan_store.set_raw(raw_text)

    # -------------------------------------------------------------------------
    # Coach chat
    # -------------------------------------------------------------------------

    async def send_message(self, content: str) -> CoachReply:
        """
        Send a chat message and apply any revised plan in the reply.

        The user message stays in the transcript even when the model call
        fails. A replacement plan is committed only after the reply has been
        fully handled.

        Raises:
            LLMError: The chat call failed
            OperationInProgressError: A message is already being sent
        """
        with self._operation(OperationKind.SEND_MESSAGE):
            self.transcript.append(ChatRole.USER, content)
            system = build_coach_system_prompt(
                goals=self.get_goals(),
                activities=self.get_cached_activities(),
                current_plan=self.plan_store.get(),
                units=self.units,
            )

            self.revision_state = RevisionState.AWAITING_RESPONSE
            try:
                raw_reply = await self._require_llm().chat(system, self.transcript.messages())
            except Exception:
                self.revision_state = RevisionState.IDLE
                raise

            reply = handle_coach_reply(raw_reply)
            if reply.replacement_plan is not None:
                self.plan_store.set(reply.replacement_plan, reply.replacement_text)

            self.transcript.append(ChatRole.ASSISTANT, reply.display_message)
            self.revision_state = reply.outcome
            return reply

    # -------------------------------------------------------------------------
    # Session
    # -------------------------------------------------------------------------

    async def connect(self, code: str) -> None:
        await self.token_provider.connect(code)

    def disconnect(self) -> None:
        """Forget credentials and clear plan, transcript and cached data."""
        self.token_provider.disconnect()

    async def close(self) -> None:
        if self.hevy_client is not None:
            await self.hevy_client.close()
