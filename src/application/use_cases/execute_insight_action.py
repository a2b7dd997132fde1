"""
Execute Insight Action Use Case.

Accepts an insight (entity or the JSON shape clients post back) and runs
its action through the dispatcher. Never raises.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.config import get_logger
from src.core.entities.insight import ActionType, Insight
from src.core.services.insight_actions import ActionResult, InsightActionDispatcher
from src.core.services.insight_normalizer import normalize_confidence

logger = get_logger(__name__)

UNKNOWN_ACTION = ActionResult(success=False, message="Unknown action type")

# Display fields clients may omit when posting an insight back
_DISPLAY_DEFAULTS: dict[str, Any] = {
    "priority": "medium",
    "title": "",
    "subtitle": "",
    "action_label": "",
}


class ExecuteInsightActionUseCase:
    """Use case for pressing an insight's action button."""

    def __init__(self, dispatcher: InsightActionDispatcher | None = None) -> None:
        self._dispatcher = dispatcher

    async def _get_dispatcher(self) -> InsightActionDispatcher:
        if self._dispatcher is None:
            from src.application.services import get_action_dispatcher

            self._dispatcher = await get_action_dispatcher()
        return self._dispatcher

    async def execute(self, insight: Insight | Mapping[str, Any]) -> ActionResult:
        """Run the insight's action."""
        if not isinstance(insight, Insight):
            coerced = self._coerce(insight)
            if isinstance(coerced, ActionResult):
                return coerced
            insight = coerced

        try:
            dispatcher = await self._get_dispatcher()
        except Exception:
            logger.error("insight_action_setup_failed", insight_id=insight.id, exc_info=True)
            return ActionResult(success=False, message="Action failed")

        result = await dispatcher.execute(insight)
        logger.info(
            "insight_action_executed",
            insight_id=insight.id,
            action_type=insight.action_type.value,
            success=result.success,
        )
        return result

    def _coerce(self, payload: Mapping[str, Any]) -> Insight | ActionResult:
        """Validate a posted insight; unknown action types short-circuit."""
        try:
            ActionType(payload.get("action_type"))
        except ValueError:
            logger.warning(
                "insight_action_unknown_type",
                insight_id=payload.get("id"),
                action_type=payload.get("action_type"),
            )
            return UNKNOWN_ACTION

        data = {**_DISPLAY_DEFAULTS, **{k: v for k, v in payload.items() if v is not None}}
        data["confidence"] = normalize_confidence(data.get("confidence", 0.0))

        try:
            return Insight.model_validate(data)
        except PydanticValidationError as e:
            logger.warning("insight_action_invalid", insight_id=payload.get("id"), error=str(e))
            return ActionResult(success=False, message="Invalid insight")
