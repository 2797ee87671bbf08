"""Tests for the in-process EventBus."""

import asyncio
import logging

import pytest
from pydantic import ValidationError

from domain.event_bus import EventBus
from domain.events import EmployeeAdded, EventName, TaskCompleted, TaskCreated


def _completed():
    return TaskCompleted(task_id="t1", org_id="o1", employee_id="e1")


class TestEventBus:
    """Tests for EventBus dispatch."""

    def setup_method(self):
        self.bus = EventBus()

    @pytest.mark.asyncio
    async def test_handlers_run_in_registration_order(self):
        calls = []

        async def first(event):
            calls.append("first")

        def second(event):
            calls.append("second")

        async def third(event):
            calls.append("third")

        self.bus.subscribe(EventName.TASK_COMPLETED, first)
        self.bus.subscribe(EventName.TASK_COMPLETED, second)
        self.bus.subscribe(EventName.TASK_COMPLETED, third)

        await self.bus.publish(_completed())

        assert calls == ["first", "second", "third"]

    @pytest.mark.asyncio
    async def test_async_handler_finishes_before_next_starts(self):
        calls = []

        async def slow(event):
            calls.append("slow:start")
            for _ in range(3):
                await asyncio.sleep(0)
            calls.append("slow:end")

        def fast(event):
            calls.append("fast")

        self.bus.subscribe(EventName.TASK_COMPLETED, slow)
        self.bus.subscribe(EventName.TASK_COMPLETED, fast)

        await self.bus.publish(_completed())

        assert calls == ["slow:start", "slow:end", "fast"]

    @pytest.mark.asyncio
    async def test_handler_receives_event(self):
        received = []
        self.bus.subscribe(EventName.TASK_CREATED, received.append)

        event = TaskCreated(task_id="t9", org_id="o1")
        await self.bus.publish(event)

        assert received == [event]

    @pytest.mark.asyncio
    async def test_only_matching_name_is_delivered(self):
        created, added = [], []
        self.bus.subscribe(EventName.TASK_CREATED, created.append)
        self.bus.subscribe(EventName.EMPLOYEE_ADDED, added.append)

        await self.bus.publish(EmployeeAdded(employee_id="e1", org_id="o1"))

        assert created == []
        assert len(added) == 1

    @pytest.mark.asyncio
    async def test_publish_without_subscribers_is_noop(self):
        await self.bus.publish(_completed())

    @pytest.mark.asyncio
    async def test_handler_exception_propagates_and_stops_dispatch(self):
        calls = []

        def boom(event):
            raise RuntimeError("handler failed")

        self.bus.subscribe(EventName.TASK_COMPLETED, boom)
        self.bus.subscribe(EventName.TASK_COMPLETED, lambda e: calls.append(e))

        with pytest.raises(RuntimeError, match="handler failed"):
            await self.bus.publish(_completed())

        assert calls == []

    def test_subscribe_accepts_string_name(self):
        self.bus.subscribe("task.completed", lambda e: None)
        assert self.bus.subscriber_count(EventName.TASK_COMPLETED) == 1

    def test_subscribe_rejects_unknown_name(self):
        with pytest.raises(ValueError):
            self.bus.subscribe("task.archived", lambda e: None)

    def test_warns_above_max_subscribers(self, caplog):
        bus = EventBus(max_subscribers=2)

        with caplog.at_level(logging.WARNING, logger="domain.event_bus"):
            bus.subscribe(EventName.TASK_CREATED, lambda e: None)
            bus.subscribe(EventName.TASK_CREATED, lambda e: None)
            assert "possible leak" not in caplog.text

            bus.subscribe(EventName.TASK_CREATED, lambda e: None)

        assert "possible leak" in caplog.text
        # Still registered; the limit only warns
        assert bus.subscriber_count(EventName.TASK_CREATED) == 3

    def test_clear(self):
        self.bus.subscribe(EventName.TASK_CREATED, lambda e: None)
        self.bus.clear()
        assert self.bus.subscriber_count(EventName.TASK_CREATED) == 0


class TestDomainEvents:

    def test_task_completed_payload(self):
        assert _completed().to_payload() == {
            "taskId": "t1",
            "orgId": "o1",
            "employeeId": "e1",
        }

    def test_task_created_payload_without_assignee(self):
        payload = TaskCreated(task_id="t1", org_id="o1").to_payload()
        assert payload["employeeId"] is None

    def test_events_are_immutable(self):
        event = _completed()
        with pytest.raises(ValidationError):
            event.task_id = "other"
