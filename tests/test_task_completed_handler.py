"""Tests for TaskCompletedHandler."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from domain.events import TaskCompleted
from services.scoring_engine import ScoringEngine
from services.task_completed_handler import TaskCompletedHandler


@pytest.fixture
def scoring_engine():
    engine = MagicMock(spec=ScoringEngine)
    engine.recompute_score = AsyncMock(return_value=None)
    return engine


@pytest.fixture
def event():
    return TaskCompleted(task_id="task-1", org_id="org-1", employee_id="emp-1")


class TestTaskCompletedHandler:
    """Tests for rescoring and background chain logging."""

    @pytest.mark.asyncio
    async def test_recompute_awaited_before_returning(self, scoring_engine, mock_chain_logger, event):
        handler = TaskCompletedHandler(scoring_engine, mock_chain_logger)

        await handler.handle(event)

        scoring_engine.recompute_score.assert_awaited_once_with("emp-1", "org-1")
        await handler.drain()

    @pytest.mark.asyncio
    async def test_chain_log_runs_in_background(self, scoring_engine, mock_chain_logger, event):
        release = asyncio.Event()

        async def slow_log(*args):
            await release.wait()
            return "0xabc"

        mock_chain_logger.log_task_completion = AsyncMock(side_effect=slow_log)
        handler = TaskCompletedHandler(scoring_engine, mock_chain_logger)

        await handler.handle(event)
        assert handler.pending == 1

        release.set()
        await handler.drain()

        assert handler.pending == 0
        mock_chain_logger.log_task_completion.assert_awaited_once_with(
            "task-1", "emp-1", "org-1"
        )

    @pytest.mark.asyncio
    async def test_scoring_failure_is_logged_not_raised(
        self, scoring_engine, mock_chain_logger, event, caplog
    ):
        scoring_engine.recompute_score.side_effect = RuntimeError("db down")
        handler = TaskCompletedHandler(scoring_engine, mock_chain_logger)

        with caplog.at_level(logging.ERROR, logger="services.task_completed_handler"):
            await handler.handle(event)
            await handler.drain()

        assert "Score recompute failed for employee emp-1" in caplog.text
        # Chain logging still happens
        mock_chain_logger.log_task_completion.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_chain_failure_is_logged(self, scoring_engine, mock_chain_logger, event, caplog):
        mock_chain_logger.log_task_completion = AsyncMock(side_effect=RuntimeError("rpc gone"))
        handler = TaskCompletedHandler(scoring_engine, mock_chain_logger)

        with caplog.at_level(logging.ERROR, logger="services.task_completed_handler"):
            await handler.handle(event)
            await handler.drain()

        assert "chain-log-task-1 failed: rpc gone" in caplog.text
        assert handler.pending == 0

    @pytest.mark.asyncio
    async def test_drain_with_nothing_pending(self, scoring_engine, mock_chain_logger):
        handler = TaskCompletedHandler(scoring_engine, mock_chain_logger)
        await handler.drain()
        assert handler.pending == 0
