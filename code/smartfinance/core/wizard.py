"""Three-step advice wizard: profile -> topics -> results.

The wizard owns one session's profile, topic selection and analysis result.
Entering LOADING happens before the advisor is awaited, so a second
``handle_next`` issued while a request is in flight is ignored instead of
starting another request.
"""
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Set

from pydantic import ValidationError as PydanticValidationError

from smartfinance.ai.advice_client import generate_advice
from .errors import (
    AdviceGenerationFailed,
    InvalidTransitionError,
    ValidationError,
    WizardBusyError,
)
from .models import AnalysisResult, ChartSlice, FinancialField, UserProfile
from .tools import cash_flow_breakdown, context_breakdown, parse_topic, savings_capacity

logger = logging.getLogger(__name__)

Advisor = Callable[[UserProfile, Set[FinancialField]], Awaitable[AnalysisResult]]

INCOME_REQUIRED_MESSAGE = "Please enter a valid monthly income."
TOPIC_REQUIRED_MESSAGE = "Please select at least one field for advice."
ADVICE_FAILED_MESSAGE = "Something went wrong generating advice."


class WizardStep(Enum):
    COLLECTING_PROFILE = 1
    SELECTING_TOPICS = 2
    SHOWING_RESULTS = 3
    LOADING = "loading"


def validate_profile_step(profile: UserProfile) -> None:
    if profile.monthly_income <= 0:
        raise ValidationError(INCOME_REQUIRED_MESSAGE)


def validate_topic_step(topics: Iterable[FinancialField]) -> None:
    if not set(topics):
        raise ValidationError(TOPIC_REQUIRED_MESSAGE)


class FinancialWizard:
    def __init__(self, advisor: Advisor = generate_advice, profile: Optional[UserProfile] = None):
        self._advisor = advisor
        self.step = WizardStep.COLLECTING_PROFILE
        self.profile = profile if profile is not None else UserProfile()
        self.topics: Set[FinancialField] = set()
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.step is WizardStep.LOADING

    def _ensure_not_loading(self, action: str) -> None:
        if self.loading:
            raise WizardBusyError(f"Cannot {action} while advice is being generated")

    def update_profile(self, field: str, value: Any) -> None:
        self._ensure_not_loading("edit the profile")
        if self.step is not WizardStep.COLLECTING_PROFILE:
            raise InvalidTransitionError("The profile can only be edited on step 1")
        if field not in UserProfile.model_fields:
            raise ValidationError(f"Unknown profile field: {field}")
        try:
            setattr(self.profile, field, value)
        except PydanticValidationError as exc:
            raise ValidationError(f"Invalid value for {field}: {value!r}") from exc

    def toggle_topic(self, topic: FinancialField | str) -> None:
        self._ensure_not_loading("change topics")
        if self.step is not WizardStep.SELECTING_TOPICS:
            raise InvalidTransitionError("Topics can only be selected on step 2")
        try:
            field = parse_topic(topic)
        except ValueError as exc:
            raise ValidationError(str(exc)) from exc
        if field in self.topics:
            self.topics.discard(field)
        else:
            self.topics.add(field)

    async def handle_next(self) -> WizardStep:
        if self.loading:
            logger.warning("Ignoring next while an advice request is in flight")
            return self.step

        if self.step is WizardStep.COLLECTING_PROFILE:
            try:
                validate_profile_step(self.profile)
            except ValidationError as exc:
                logger.warning("Profile step rejected: %s", exc)
                self.error = str(exc)
                return self.step
            self.error = None
            self.step = WizardStep.SELECTING_TOPICS
            logger.info("Profile collected, selecting topics")
            return self.step

        if self.step is WizardStep.SELECTING_TOPICS:
            try:
                validate_topic_step(self.topics)
            except ValidationError as exc:
                logger.warning("Topic step rejected: %s", exc)
                self.error = str(exc)
                return self.step
            return await self._analyze()

        return self.step

    async def _analyze(self) -> WizardStep:
        self.error = None
        self.step = WizardStep.LOADING
        logger.info("Generating advice for %d topic(s)", len(self.topics))
        try:
            result = await self._advisor(self.profile.model_copy(), set(self.topics))
        except AdviceGenerationFailed as exc:
            logger.error("Advice generation failed: %s", exc)
            self.error = ADVICE_FAILED_MESSAGE
            self.step = WizardStep.SELECTING_TOPICS
            return self.step
        except Exception:
            logger.exception("Advisor raised an unexpected error")
            self.error = ADVICE_FAILED_MESSAGE
            self.step = WizardStep.SELECTING_TOPICS
            return self.step
        except BaseException:
            # Cancellation and interrupts still propagate, but never leave LOADING behind.
            self.step = WizardStep.SELECTING_TOPICS
            raise
        self.result = result
        self.step = WizardStep.SHOWING_RESULTS
        logger.info("Showing %d suggestion(s)", len(result.suggestions))
        return self.step

    def back(self) -> WizardStep:
        self._ensure_not_loading("go back")
        if self.step is not WizardStep.SELECTING_TOPICS:
            raise InvalidTransitionError(f"No previous step from {self.step.name}")
        self.error = None
        self.step = WizardStep.COLLECTING_PROFILE
        return self.step

    def restart(self) -> WizardStep:
        """Return to step 1, dropping topics and result but keeping the profile."""
        self._ensure_not_loading("restart")
        self.step = WizardStep.COLLECTING_PROFILE
        self.topics = set()
        self.result = None
        self.error = None
        logger.info("Wizard restarted")
        return self.step

    @property
    def savings_capacity(self) -> float:
        return savings_capacity(self.profile)

    @property
    def cash_flow_breakdown(self) -> List[ChartSlice]:
        return cash_flow_breakdown(self.profile)

    @property
    def context_breakdown(self) -> List[ChartSlice]:
        return context_breakdown(self.profile)
