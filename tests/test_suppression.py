"""Tests for the suppression gate and the positioning state."""

import asyncio

import pytest

from presetcue.core.state import PositioningState, SuppressionGate
from presetcue.models.selection import MANUAL, UNKNOWN, PresetSelection


class TestSuppressionGate:
    """Test SuppressionGate."""

    def test_starts_inactive(self):
        gate = SuppressionGate()

        assert not gate.is_active()
        assert not gate.close_pending

    @pytest.mark.asyncio
    async def test_scheduled_close(self):
        gate = SuppressionGate()
        gate.open()
        gate.schedule_close(0.02)

        assert gate.is_active()
        assert gate.close_pending

        await asyncio.sleep(0.05)

        assert not gate.is_active()
        assert not gate.close_pending

    @pytest.mark.asyncio
    async def test_open_cancels_pending_close(self):
        gate = SuppressionGate()
        gate.open()
        gate.schedule_close(0.02)
        gate.open()

        await asyncio.sleep(0.05)

        assert gate.is_active()
        assert not gate.close_pending

    @pytest.mark.asyncio
    async def test_schedule_close_replaces_timer(self):
        gate = SuppressionGate()
        gate.open()
        gate.schedule_close(0.02)
        gate.schedule_close(0.1)

        await asyncio.sleep(0.05)
        assert gate.is_active()

        await asyncio.sleep(0.1)
        assert not gate.is_active()

    @pytest.mark.asyncio
    async def test_cancel(self):
        gate = SuppressionGate()
        gate.open()
        gate.schedule_close(1.0)
        gate.cancel()

        assert not gate.is_active()
        assert not gate.close_pending


class TestPositioningState:
    """Test PositioningState."""

    def test_remember_and_invalidate(self):
        state = PositioningState()
        assert state.last_selection is UNKNOWN

        state.remember_selection(PresetSelection(1, 2, "Wide"))
        assert state.last_selection == PresetSelection(1, 2, "Wide")

        state.remember_selection(MANUAL)
        state.invalidate()
        assert state.last_selection is UNKNOWN

    def test_shared_gate(self):
        gate = SuppressionGate()

        assert PositioningState(gate).gate is gate
