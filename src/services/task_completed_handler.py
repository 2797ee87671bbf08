"""
Task-Completed Handler.

The subscriber to task.completed. On each event it:
1. Awaits the score recomputation for the assignee. Failures are logged,
   never raised, so a completed task is never failed by scoring.
2. Spawns the on-chain log as a background task. Its outcome only reaches
   the log.
"""

import asyncio
import logging
from typing import Set

from domain.events import TaskCompleted
from services.chain_logger import ChainLogger
from services.scoring_engine import ScoringEngine

logger = logging.getLogger(__name__)


class TaskCompletedHandler:
    """Reacts to task completions with rescoring and on-chain logging."""

    def __init__(self, scoring_engine: ScoringEngine, chain_logger: ChainLogger):
        self._scoring_engine = scoring_engine
        self._chain_logger = chain_logger
        # Strong references until done; the event loop only keeps weak ones
        self._background: Set[asyncio.Task] = set()

    async def handle(self, event: TaskCompleted) -> None:
        """
        Handle one task.completed event.

        Args:
            event: The completion, always carrying an employee_id.
        """
        logger.info(
            f"[TaskCompletedHandler] Task {event.task_id} completed by {event.employee_id}"
        )

        try:
            await self._scoring_engine.recompute_score(event.employee_id, event.org_id)
        except Exception:
            logger.exception(
                f"[TaskCompletedHandler] Score recompute failed for employee {event.employee_id}"
            )

        self._spawn_chain_log(event)

    def _spawn_chain_log(self, event: TaskCompleted) -> None:
        task = asyncio.create_task(
            self._chain_logger.log_task_completion(
                event.task_id, event.employee_id, event.org_id
            ),
            name=f"chain-log-{event.task_id}",
        )
        self._background.add(task)
        task.add_done_callback(self._on_chain_log_done)

    def _on_chain_log_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            logger.warning(f"[TaskCompletedHandler] {task.get_name()} cancelled")
            return

        error = task.exception()
        if error is not None:
            logger.error(
                f"[TaskCompletedHandler] {task.get_name()} failed: {error}",
                exc_info=error,
            )

    @property
    def pending(self) -> int:
        """Number of background chain logs still running."""
        return len(self._background)

    async def drain(self) -> None:
        """Wait for all outstanding background chain logs."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
