"""Tests for the fallback chain."""

import pytest

from socialcut.errors import EncodeFailedError, FallbackExhaustedError
from socialcut.executor.fallback import Strategy, run_fallback_chain


def _fail(description: str):
    def attempt():
        raise EncodeFailedError(description, 1, "boom")

    return attempt


class TestRunFallbackChain:
    """Tests for run_fallback_chain."""

    def test_first_strategy_wins(self):
        calls = []

        def second():
            calls.append("second")
            return 2

        result = run_fallback_chain(
            [Strategy("first", lambda: 1), Strategy("second", second)], "thing"
        )

        assert result.strategy == "first"
        assert result.value == 1
        assert result.failures == ()
        assert calls == []

    def test_failure_escalates(self):
        result = run_fallback_chain(
            [Strategy("copy", _fail("copy")), Strategy("re-encode", lambda: "ok")],
            "chunk 1",
        )

        assert result.strategy == "re-encode"
        assert result.failures[0][0] == "copy"

    def test_rejected_result_escalates(self):
        result = run_fallback_chain(
            [
                Strategy(
                    "as-is",
                    lambda: 60,
                    verify=lambda size: size <= 50,
                    describe_rejection=lambda size: f"{size} too big",
                ),
                Strategy("tighten", lambda: 40, verify=lambda size: size <= 50),
            ],
            "ceiling",
        )

        assert result.value == 40
        assert result.failures == (("as-is", "60 too big"),)

    def test_exhaustion_carries_failures(self):
        with pytest.raises(FallbackExhaustedError) as exc_info:
            run_fallback_chain(
                [Strategy("a", _fail("a")), Strategy("b", _fail("b"))], "job"
            )

        error = exc_info.value
        assert [name for name, _ in error.failures] == ["a", "b"]
        assert isinstance(error.__cause__, EncodeFailedError)
        assert error.__cause__.description == "b"

    def test_exhaustion_after_rejection_has_no_engine_cause(self):
        with pytest.raises(FallbackExhaustedError) as exc_info:
            run_fallback_chain(
                [
                    Strategy("a", _fail("a")),
                    Strategy("b", lambda: 1, verify=lambda value: False),
                ],
                "job",
            )

        assert exc_info.value.__cause__ is None
        assert exc_info.value.failures[1] == ("b", "result rejected")

    def test_other_exceptions_propagate(self):
        def broken():
            raise RuntimeError("bug")

        with pytest.raises(RuntimeError):
            run_fallback_chain([Strategy("a", broken), Strategy("b", lambda: 1)], "x")

    def test_empty_chain(self):
        with pytest.raises(ValueError):
            run_fallback_chain([], "nothing")
