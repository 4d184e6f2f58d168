"""Tests for quiescence based output framing."""

import asyncio
from collections.abc import Iterable

import pytest

from switch_mcp.protocols import OutputFramer
from switch_mcp.services.framing import QuiescenceFramer


class ScriptedDrain:
    """Returns one scripted chunk per call, then the default forever."""

    def __init__(self, chunks: Iterable[str], default: str = "") -> None:
        self._chunks = list(chunks)
        self.default = default
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self._chunks:
            return self._chunks.pop(0)
        return self.default


@pytest.fixture
def framer() -> QuiescenceFramer:
    return QuiescenceFramer(poll_interval=0.001, max_polls=50, extra_waits=1)


def test_framer_satisfies_protocol(framer: QuiescenceFramer) -> None:
    assert isinstance(framer, OutputFramer)


@pytest.mark.asyncio
async def test_returns_on_expected_substring(framer: QuiescenceFramer) -> None:
    """A prompt in the output ends the read at the first pause."""
    drain = ScriptedDrain(["output\r\n", "sw1#"])

    result = await framer.read(drain, 0.5, ["#", ">"])

    assert result == "output\r\nsw1#"
    assert drain.calls == 3


@pytest.mark.asyncio
async def test_tolerates_one_extra_wait(framer: QuiescenceFramer) -> None:
    """A burst arriving after the first quiet window is still collected."""
    drain = ScriptedDrain(["line1", "", "late burst"])

    result = await framer.read(drain, 0.01, ())

    assert result == "line1late burst"
    assert drain.calls == 5


@pytest.mark.asyncio
async def test_returns_after_second_silence() -> None:
    """Output that stays quiet through the extra window is returned."""
    framer = QuiescenceFramer(poll_interval=0.001, max_polls=50, extra_waits=1)
    drain = ScriptedDrain(["partial"])

    result = await framer.read(drain, 0.01, ["#"])

    assert result == "partial"
    assert drain.calls == 3


@pytest.mark.asyncio
async def test_zero_extra_waits_returns_on_first_silence() -> None:
    framer = QuiescenceFramer(poll_interval=0.001, max_polls=50, extra_waits=0)
    drain = ScriptedDrain(["data"])

    result = await framer.read(drain, 10.0, ())

    assert result == "data"
    assert drain.calls == 2


@pytest.mark.asyncio
async def test_more_extra_waits_absorb_longer_gaps() -> None:
    framer = QuiescenceFramer(poll_interval=0.001, max_polls=50, extra_waits=2)
    drain = ScriptedDrain(["a", "", "", "b"])

    result = await framer.read(drain, 0.005, ())

    assert result == "ab"


@pytest.mark.asyncio
async def test_stops_at_poll_limit() -> None:
    """A device that never stops talking cannot hold the read forever."""
    framer = QuiescenceFramer(poll_interval=0.001, max_polls=10, extra_waits=1)
    drain = ScriptedDrain([], default="x")

    result = await framer.read(drain, 0.01, ())

    assert result == "x" * 10
    assert drain.calls == 10


@pytest.mark.asyncio
async def test_deadline_caps_read() -> None:
    """A hard deadline ends the read even while data keeps arriving."""
    framer = QuiescenceFramer(
        poll_interval=0.01, max_polls=1000, extra_waits=1, deadline=0.05
    )
    drain = ScriptedDrain([], default="x")

    start = asyncio.get_running_loop().time()
    result = await framer.read(drain, 1.0, ())
    elapsed = asyncio.get_running_loop().time() - start

    assert result
    assert elapsed < 0.5


@pytest.mark.asyncio
async def test_deadline_shortens_quiescence_wait() -> None:
    framer = QuiescenceFramer(
        poll_interval=0.001, max_polls=100, extra_waits=1, deadline=0.05
    )
    drain = ScriptedDrain(["data"])

    start = asyncio.get_running_loop().time()
    result = await framer.read(drain, 5.0, ())
    elapsed = asyncio.get_running_loop().time() - start

    assert result == "data"
    assert elapsed < 1.0


def test_invalid_arguments_rejected() -> None:
    with pytest.raises(ValueError, match="max_polls"):
        QuiescenceFramer(max_polls=0)
    with pytest.raises(ValueError, match="extra_waits"):
        QuiescenceFramer(extra_waits=-1)
