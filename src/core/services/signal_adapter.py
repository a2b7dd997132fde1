"""
Enhancement/fallback adapter.

Wraps one signal (weather, financial, growth) so that an inference-backed
analysis is attempted first and a deterministic rule-based analysis is used
whenever the inference tier is unavailable, too slow, malformed or not
confident enough. Failures are captured on the returned SignalOutcome and
never propagate to the caller.
"""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from src.config import get_logger
from src.core.entities.farm import FarmContext
from src.core.entities.insight import Insight, InsightSource

logger = get_logger(__name__)

InputsT = TypeVar("InputsT")

ENHANCED_TAG = "ai"
FALLBACK_TAG = "fallback"


class OutcomeKind(str, Enum):
    """How a signal pipeline produced (or failed to produce) its insights."""

    ENHANCED = "enhanced"
    BASIC = "basic"
    DIRECT = "direct"
    EMPTY = "empty"


@dataclass
class SignalOutcome:
    """Tagged result of one signal pipeline."""

    kind: OutcomeKind
    source: str
    insights: list[Insight] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def empty(cls, source: str, error: str | None = None) -> "SignalOutcome":
        return cls(kind=OutcomeKind.EMPTY, source=source, error=error)

    @classmethod
    def direct(cls, source: str, insights: list[Insight]) -> "SignalOutcome":
        if not insights:
            return cls.empty(source)
        return cls(kind=OutcomeKind.DIRECT, source=source, insights=insights)


@dataclass
class AnalysisResult:
    """Enhanced analysis output with its overall confidence."""

    insights: list[Insight]
    confidence: float


class EnhancedAnalyzer(ABC, Generic[InputsT]):
    """Inference-backed analysis of one signal."""

    @abstractmethod
    async def analyze(self, farm: FarmContext, inputs: InputsT) -> AnalysisResult:
        """
        Analyze signal inputs.

        Raises:
            LLMError: Inference service unavailable or failing
            MalformedPayloadError: Inference answer failed validation
        """
        pass


class BasicAnalyzer(ABC, Generic[InputsT]):
    """Deterministic rule-based analysis of one signal."""

    @abstractmethod
    def analyze(self, farm: FarmContext, inputs: InputsT) -> list[Insight]:
        """Apply fixed rules to signal inputs."""
        pass


def describe_error(error: BaseException) -> str:
    """Short, log-safe description of an error."""
    message = str(error)
    return f"{type(error).__name__}: {message}" if message else type(error).__name__


class SignalAdapter(Generic[InputsT]):
    """
    Runs the enhanced tier of a signal and falls back to the basic tier.

    Stateless between runs; one instance may be shared across farms.
    """

    def __init__(
        self,
        name: str,
        loader: Callable[[FarmContext], Awaitable[InputsT | None]],
        basic: BasicAnalyzer[InputsT],
        enhanced: EnhancedAnalyzer[InputsT] | None = None,
        min_confidence: float = 0.6,
        timeout: float = 5.0,
        fallback_confidence: float = 0.6,
        load_timeout: float | None = None,
    ) -> None:
        """
        Args:
            name: Signal name used for logging and on outcomes
            loader: Gathers the signal inputs; returns None when there is
                not enough data to analyze
            basic: Rule-based analyzer
            enhanced: Inference-backed analyzer, None to always use rules
            min_confidence: Enhanced results below this confidence fall back
            timeout: Seconds allowed for the enhanced call
            fallback_confidence: Confidence assigned to rule-based insights
            load_timeout: Seconds allowed for the loader; defaults to timeout
        """
        self.name = name
        self._loader = loader
        self._basic = basic
        self._enhanced = enhanced
        self._min_confidence = min_confidence
        self._timeout = timeout
        self._load_timeout = load_timeout if load_timeout is not None else timeout
        self._fallback_confidence = fallback_confidence

    async def run(self, farm: FarmContext) -> SignalOutcome:
        """Produce this signal's insights for a farm. Never raises."""
        try:
            inputs = await asyncio.wait_for(self._loader(farm), timeout=self._load_timeout)
        except Exception as e:
            logger.warning(
                "signal_load_failed",
                signal=self.name,
                farm_id=farm.id,
                error=describe_error(e),
                exc_info=True,
            )
            return SignalOutcome.empty(self.name, error=describe_error(e))

        if inputs is None:
            logger.debug("signal_no_data", signal=self.name, farm_id=farm.id)
            return SignalOutcome.empty(self.name)

        enhanced_error: str | None = None
        if self._enhanced is not None:
            try:
                result = await asyncio.wait_for(
                    self._enhanced.analyze(farm, inputs), timeout=self._timeout
                )
            except Exception as e:
                enhanced_error = describe_error(e)
                logger.warning(
                    "signal_enhanced_failed",
                    signal=self.name,
                    farm_id=farm.id,
                    error=enhanced_error,
                )
            else:
                if result.insights and result.confidence >= self._min_confidence:
                    logger.debug(
                        "signal_enhanced",
                        signal=self.name,
                        confidence=result.confidence,
                        count=len(result.insights),
                    )
                    return SignalOutcome(
                        kind=OutcomeKind.ENHANCED,
                        source=self.name,
                        insights=[self._stamp_enhanced(i) for i in result.insights],
                    )
                logger.info(
                    "signal_enhanced_low_confidence",
                    signal=self.name,
                    farm_id=farm.id,
                    confidence=result.confidence,
                    threshold=self._min_confidence,
                )

        try:
            insights = self._basic.analyze(farm, inputs)
        except Exception as e:
            logger.warning(
                "signal_basic_failed",
                signal=self.name,
                farm_id=farm.id,
                error=describe_error(e),
                exc_info=True,
            )
            return SignalOutcome.empty(self.name, error=describe_error(e))

        if not insights:
            return SignalOutcome.empty(self.name, error=enhanced_error)

        return SignalOutcome(
            kind=OutcomeKind.BASIC,
            source=self.name,
            insights=[self._stamp_fallback(i) for i in insights],
            error=enhanced_error,
        )

    def _stamp_enhanced(self, insight: Insight) -> Insight:
        return insight.model_copy(
            update={
                "source": InsightSource.ENHANCED,
                "tags": insight.tags | {ENHANCED_TAG},
            }
        )

    def _stamp_fallback(self, insight: Insight) -> Insight:
        update: dict[str, Any] = {
            "source": InsightSource.BASIC,
            "confidence": self._fallback_confidence,
            "tags": insight.tags | {FALLBACK_TAG},
        }
        return insight.model_copy(update=update)
