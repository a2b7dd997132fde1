"""
Insight action dispatcher.

Routes an insight's action button to its handler: navigation and view
actions are acknowledged, task execution is delegated to the scheduler.
"""

from dataclasses import dataclass

from src.config import get_logger
from src.core.entities.insight import ActionType, Insight, InsightType
from src.core.interfaces.providers import ITaskScheduler

logger = get_logger(__name__)


@dataclass
class ActionResult:
    """Outcome of an insight action."""

    success: bool
    message: str


class InsightActionDispatcher:
    """
    Executes insight actions. Never raises.

    With `strict` on, an execute action on an insight that is not a
    schedulable task is reported as a failure instead of a generic success.
    """

    def __init__(self, task_scheduler: ITaskScheduler | None = None, strict: bool = True) -> None:
        self._scheduler = task_scheduler
        self._strict = strict

    async def execute(self, insight: Insight) -> ActionResult:
        """Dispatch on the insight's action type."""
        try:
            if insight.action_type == ActionType.NAVIGATE:
                return ActionResult(success=True, message="Navigating to details")
            if insight.action_type == ActionType.VIEW:
                return ActionResult(success=True, message="Opening insight details")
            if insight.action_type == ActionType.EXECUTE:
                return await self._execute(insight)
        except Exception:
            logger.warning("insight_action_failed", insight_id=insight.id, exc_info=True)
            return ActionResult(success=False, message="Action failed")

        return ActionResult(success=False, message="Unknown action type")

    async def _execute(self, insight: Insight) -> ActionResult:
        task_id = insight.action_data.get("task_id")

        if insight.type == InsightType.TASK_RECOMMENDATION and task_id:
            if self._scheduler is None:
                return ActionResult(success=False, message="Task scheduling is not available")

            await self._scheduler.schedule_task(str(task_id))
            logger.info("insight_task_scheduled", insight_id=insight.id, task_id=task_id)
            return ActionResult(success=True, message="Task scheduled for execution")

        if self._strict:
            return ActionResult(
                success=False,
                message=f"Execute action is not supported for {insight.type.value} insights",
            )
        return ActionResult(success=True, message="Action executed")
