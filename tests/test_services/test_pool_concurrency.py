"""Tests for concurrent use of the session pool."""

import asyncio
import time

import pytest

from conftest import FakeSwitch
from switch_mcp.models import TargetIdentity
from switch_mcp.services.commands import run_commands
from switch_mcp.services.pool import SessionPool


class TestPoolConcurrency:
    """Per-identity locking: serial per switch, parallel across switches."""

    @pytest.mark.asyncio
    async def test_different_switches_connect_in_parallel(
        self,
        fake_switch: FakeSwitch,
        pool: SessionPool,
    ) -> None:
        """Slow connects to distinct switches overlap instead of queueing."""
        fake_switch.connect_delay = 0.3

        start = time.perf_counter()
        results = await asyncio.gather(
            *(
                run_commands(pool, "admin", "secret", f"10.0.0.{i}:22", "dis clock")
                for i in range(1, 5)
            )
        )
        elapsed = time.perf_counter() - start

        assert fake_switch.connect_count == 4
        assert all("2024-01-01 10:00:00" in result for result in results)
        # Serial connects alone would take 1.2s
        assert elapsed < 0.9, f"Expected parallel connects, took {elapsed:.2f}s"

    @pytest.mark.asyncio
    async def test_same_switch_commands_do_not_interleave(
        self,
        fake_switch: FakeSwitch,
        pool: SessionPool,
    ) -> None:
        """Two callers on one target share a session but take turns."""
        result_a, result_b = await asyncio.gather(
            run_commands(pool, "admin", "secret", "10.0.0.1:22", "a1", "a2"),
            run_commands(pool, "admin", "secret", "10.0.0.1:22", "b1", "b2"),
        )

        lines = fake_switch.lines()
        assert fake_switch.connect_count == 1
        assert lines.index("a2") == lines.index("a1") + 1
        assert lines.index("b2") == lines.index("b1") + 1

        assert "a1" in result_a and "a2" in result_a
        assert "b1" not in result_a
        assert "b1" in result_b and "b2" in result_b
        assert "a1" not in result_b

    @pytest.mark.asyncio
    async def test_one_connect_for_concurrent_first_use(
        self,
        fake_switch: FakeSwitch,
        pool: SessionPool,
    ) -> None:
        """Callers racing to open the same target reuse the first session."""
        fake_switch.connect_delay = 0.05

        results = await asyncio.gather(
            *(
                run_commands(pool, "admin", "secret", "10.0.0.1:22", "dis clock")
                for _ in range(3)
            )
        )

        assert fake_switch.connect_count == 1
        assert pool.pool_size == 1
        assert all(result.startswith("dis clock") for result in results)

    @pytest.mark.asyncio
    async def test_held_lock_does_not_block_other_switch(
        self,
        fake_switch: FakeSwitch,
        pool: SessionPool,
    ) -> None:
        """A lock held on one target leaves other targets usable."""
        busy = TargetIdentity(user="admin", password="secret", address="10.0.0.9:22")
        held = asyncio.Event()
        release = asyncio.Event()

        async def hold_busy_target() -> None:
            async with pool.lock(busy):
                held.set()
                await release.wait()

        holder = asyncio.create_task(hold_busy_target())
        await held.wait()

        result = await asyncio.wait_for(
            run_commands(pool, "admin", "secret", "10.0.0.1:22", "dis clock"),
            timeout=2.0,
        )

        release.set()
        await holder

        assert "2024-01-01 10:00:00" in result
