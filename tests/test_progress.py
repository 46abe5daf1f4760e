"""
Tests for the periodic progress message.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from bot.progress import ProgressTicker


class TestProgressTicker:
    """Ticking and guaranteed cancellation"""

    def test_render_cycles_dots(self):
        ticker = ProgressTicker(AsyncMock(), 1, 10, "Working", interval=0.5)

        assert [ticker.render(i) for i in range(1, 6)] == [
            "Working.", "Working..", "Working...", "Working", "Working.",
        ]

    @pytest.mark.asyncio
    async def test_edits_message_while_running(self):
        transport = AsyncMock()

        async with ProgressTicker(transport, 1, 10, "Working", interval=0.01) as ticker:
            await asyncio.sleep(0.1)
            assert ticker.running

        assert not ticker.running
        assert transport.edit_text.await_count >= 1
        transport.edit_text.assert_any_await(1, 10, "Working.")

    @pytest.mark.asyncio
    async def test_cancelled_when_body_raises(self):
        transport = AsyncMock()
        ticker = ProgressTicker(transport, 1, 10, "Working", interval=0.01)

        with pytest.raises(RuntimeError):
            async with ticker:
                raise RuntimeError("harvest failed")

        assert not ticker.running
        count = transport.edit_text.await_count
        await asyncio.sleep(0.03)
        assert transport.edit_text.await_count == count

    @pytest.mark.asyncio
    async def test_edit_errors_do_not_stop_ticker(self):
        transport = AsyncMock()
        transport.edit_text.side_effect = RuntimeError("telegram down")

        async with ProgressTicker(transport, 1, 10, "Working", interval=0.01) as ticker:
            await asyncio.sleep(0.1)
            assert ticker.running

        assert transport.edit_text.await_count >= 2
