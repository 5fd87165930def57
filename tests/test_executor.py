"""Unit tests for the bounded retry executor."""

import asyncio

import pytest

from splitaudit.executor import run_bounded
from splitaudit.models import Failure, Success


def _always_fails(counter, key, message="ETIMEDOUT"):
    async def unit():
        counter[key] = counter.get(key, 0) + 1
        await asyncio.sleep(0)
        raise ConnectionError(message)
    return unit


def _succeeds_with(value):
    async def unit():
        await asyncio.sleep(0)
        return value
    return unit


class TestFailureIsolation:
    """One exhausted unit never affects the others."""

    def test_failure_and_success_recorded_independently(self):
        attempts = {}
        units = {
            "a": _always_fails(attempts, "a"),
            "b": _succeeds_with({"actions": [], "advisories": {}}),
        }
        results = asyncio.run(run_bounded(units, concurrency=2, retries=2, retry_delay=0.01))

        assert results["a"] == Failure("ETIMEDOUT")
        assert results["b"] == Success({"actions": [], "advisories": {}})

    def test_success_completes_before_failing_unit_finishes_retrying(self):
        events = []

        async def always_failing():
            raise RuntimeError("boom")

        async def fast_success():
            await asyncio.sleep(0)
            events.append(("b", "done"))
            return {"ok": True}

        units = {"a": always_failing, "b": fast_success}
        results = asyncio.run(
            run_bounded(
                units,
                concurrency=2,
                retries=2,
                retry_delay=0.05,
                on_failure=lambda key, err, attempt: events.append((key, attempt)),
            )
        )

        assert isinstance(results["b"], Success)
        assert results["a"] == Failure("boom")
        # b finished while a was still backing off between attempts
        assert events.index(("a", 1)) < events.index(("b", "done")) < events.index(("a", 2))
        assert events[-1] == ("a", 3)

    def test_result_has_exactly_one_entry_per_unit(self):
        attempts = {}
        units = {f"dep{i}": _succeeds_with({"i": i}) for i in range(5)}
        units["bad"] = _always_fails(attempts, "bad")
        results = asyncio.run(run_bounded(units, concurrency=3, retries=0, retry_delay=0))
        assert set(results) == set(units)


class TestRetryBound:
    """A unit is attempted at most retries + 1 times."""

    @pytest.mark.parametrize("retries", [0, 1, 2, 4])
    def test_always_failing_unit_attempted_retries_plus_one(self, retries):
        attempts = {}
        units = {"a": _always_fails(attempts, "a")}
        results = asyncio.run(run_bounded(units, concurrency=1, retries=retries, retry_delay=0))

        assert attempts["a"] == retries + 1
        assert isinstance(results["a"], Failure)

    def test_transient_failure_recovers(self):
        calls = {"n": 0}

        async def flaky():
            calls["n"] += 1
            if calls["n"] < 3:
                raise ConnectionError("ECONNRESET")
            return {"actions": []}

        results = asyncio.run(run_bounded({"a": flaky}, retries=2, retry_delay=0))
        assert results["a"] == Success({"actions": []})
        assert calls["n"] == 3

    def test_failure_callback_called_per_attempt(self):
        seen = []
        attempts = {}
        units = {"a": _always_fails(attempts, "a")}
        asyncio.run(
            run_bounded(
                units,
                retries=2,
                retry_delay=0,
                on_failure=lambda key, err, attempt: seen.append((key, str(err), attempt)),
            )
        )
        assert seen == [("a", "ETIMEDOUT", 1), ("a", "ETIMEDOUT", 2), ("a", "ETIMEDOUT", 3)]

    def test_empty_error_message_falls_back_to_type_name(self):
        async def unit():
            raise TimeoutError()

        results = asyncio.run(run_bounded({"a": unit}, retries=0, retry_delay=0))
        assert results["a"] == Failure("TimeoutError")


class TestConcurrencyBound:
    """Never more than `concurrency` units active at once."""

    @pytest.mark.parametrize("ceiling", [1, 3, 7])
    def test_active_count_never_exceeds_ceiling(self, ceiling):
        state = {"active": 0, "peak": 0}

        def make_unit(i):
            async def unit():
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
                await asyncio.sleep(0.001 * (i % 4))
                state["active"] -= 1
                return {"i": i}
            return unit

        units = {f"dep{i}": make_unit(i) for i in range(25)}
        results = asyncio.run(run_bounded(units, concurrency=ceiling, retries=0))

        assert state["peak"] <= ceiling
        assert state["peak"] == ceiling
        assert len(results) == 25

    def test_retry_backoff_holds_its_slot(self):
        state = {"active": 0, "peak": 0}

        def make_unit(fail_first):
            tries = {"n": 0}

            async def unit():
                state["active"] += 1
                state["peak"] = max(state["peak"], state["active"])
                tries["n"] += 1
                await asyncio.sleep(0)
                state["active"] -= 1
                if fail_first and tries["n"] == 1:
                    raise ConnectionError("retry me")
                return {}
            return unit

        units = {f"dep{i}": make_unit(i % 2 == 0) for i in range(10)}
        asyncio.run(run_bounded(units, concurrency=2, retries=1, retry_delay=0.001))
        assert state["peak"] <= 2


class TestProgress:
    """Progress observer sees every terminal unit once."""

    def test_progress_reports_each_completion(self):
        calls = []
        attempts = {}
        units = {
            "a": _succeeds_with({}),
            "b": _always_fails(attempts, "b"),
            "c": _succeeds_with({}),
        }
        asyncio.run(
            run_bounded(units, retries=1, retry_delay=0, on_progress=lambda d, t: calls.append((d, t)))
        )
        assert sorted(calls) == [(1, 3), (2, 3), (3, 3)]

    def test_no_units_returns_empty_map(self):
        assert asyncio.run(run_bounded({})) == {}


class TestValidation:
    def test_zero_concurrency_rejected(self):
        with pytest.raises(ValueError, match="concurrency"):
            asyncio.run(run_bounded({}, concurrency=0))

    def test_negative_retries_rejected(self):
        with pytest.raises(ValueError, match="retries"):
            asyncio.run(run_bounded({}, retries=-1))
