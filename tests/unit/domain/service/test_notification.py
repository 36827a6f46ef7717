"""Unit tests for NotificationDispatcher."""

import asyncio

import pytest

from coachlink.domain.service import NotificationDispatcher, NotificationResult, Notifier


async def succeed() -> NotificationResult:
    return NotificationResult(success=True, message_id="msg_1")


async def fail() -> NotificationResult:
    return NotificationResult(success=False, error="mailbox full")


async def explode() -> NotificationResult:
    raise RuntimeError("smtp on fire")


class TestDeliver:
    """Tests for awaited delivery."""

    @pytest.mark.asyncio
    async def test_success_is_passed_through(self):
        result = await NotificationDispatcher().deliver("invitation", succeed())
        assert result.success is True
        assert result.message_id == "msg_1"

    @pytest.mark.asyncio
    async def test_failure_is_passed_through(self):
        result = await NotificationDispatcher().deliver("invitation", fail())
        assert result.success is False
        assert result.error == "mailbox full"

    @pytest.mark.asyncio
    async def test_exception_becomes_failed_result(self):
        result = await NotificationDispatcher().deliver("invitation", explode())
        assert result.success is False
        assert result.error == "smtp on fire"


class TestDispatch:
    """Tests for background delivery."""

    @pytest.mark.asyncio
    async def test_dispatch_tracks_until_done(self):
        # Arrange
        dispatcher = NotificationDispatcher()
        release = asyncio.Event()

        async def slow() -> NotificationResult:
            await release.wait()
            return NotificationResult(success=True)

        # Act
        task = dispatcher.dispatch("acceptance_notice", slow())
        await asyncio.sleep(0)

        # Assert
        assert dispatcher.in_flight == 1
        release.set()
        result = await task
        await asyncio.sleep(0)
        assert result.success is True
        assert dispatcher.in_flight == 0

    @pytest.mark.asyncio
    async def test_drain_waits_for_all(self):
        # Arrange
        dispatcher = NotificationDispatcher()
        tasks = [
            dispatcher.dispatch("acceptance_notice", succeed()),
            dispatcher.dispatch("acceptance_notice", explode()),
        ]

        # Act
        await dispatcher.drain()

        # Assert
        assert all(task.done() for task in tasks)
        assert [task.result().success for task in tasks] == [True, False]

    @pytest.mark.asyncio
    async def test_drain_with_nothing_in_flight(self):
        await NotificationDispatcher().drain()


def test_notifier_is_abstract():
    with pytest.raises(TypeError):
        Notifier()
