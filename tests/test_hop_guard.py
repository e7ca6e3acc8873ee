"""Tests for HopCounter bounded walks."""

import pytest
from hypothesis import event, given
from hypothesis import strategies as st

from ldmlengine.core import HopCounter
from ldmlengine.diagnostics import AliasCycleError, ErrorTemplate, LdmlError


def _raise_cycle(trail: tuple[str, ...]) -> LdmlError:
    return AliasCycleError(ErrorTemplate.alias_hops_exceeded("de", "//ldml/a", 3, trail))


class TestHopCounter:
    def test_start_does_not_count(self) -> None:
        counter = HopCounter(max_hops=1, on_exceeded=_raise_cycle)
        counter.start("de|a")
        assert counter.hops == 0
        assert counter.trail == ["de|a"]

    def test_bound_allows_max_hops(self) -> None:
        counter = HopCounter(max_hops=3, on_exceeded=_raise_cycle)
        for label in ("b", "c", "d"):
            counter.step(label)
        assert counter.hops == 3
        assert counter.exhausted

    def test_exceeding_raises_with_trail(self) -> None:
        counter = HopCounter(max_hops=2, on_exceeded=_raise_cycle)
        counter.start("a")
        counter.step("b")
        counter.step("a")
        with pytest.raises(AliasCycleError) as exc_info:
            counter.step("b")
        assert exc_info.value.chain == ("a", "b", "a", "b")

    @pytest.mark.parametrize("max_hops", [0, -1])
    def test_rejects_non_positive_bound(self, max_hops: int) -> None:
        with pytest.raises(ValueError, match=f"max_hops must be positive, got {max_hops}"):
            HopCounter(max_hops=max_hops, on_exceeded=_raise_cycle)

    @given(st.integers(min_value=1, max_value=50))
    def test_fails_exactly_after_bound(self, max_hops: int) -> None:
        """Property: max_hops steps succeed, the next one fails."""
        event(f"max_hops={'small' if max_hops < 10 else 'large'}")
        counter = HopCounter(max_hops=max_hops, on_exceeded=_raise_cycle)
        counter.start("start")
        for index in range(max_hops):
            assert not counter.exhausted
            counter.step(str(index))
        assert counter.exhausted
        with pytest.raises(AliasCycleError) as exc_info:
            counter.step("over")
        assert len(exc_info.value.chain) == max_hops + 2
