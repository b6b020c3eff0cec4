from __future__ import annotations

import asyncio

import pytest

from saga_wire import BoundActions, bind_action_creators, settle_after


class TestSettleAfter:
    @pytest.mark.asyncio
    async def test_trigger_runs_synchronously(self) -> None:
        state = {"value": 0}

        def trigger():
            state["value"] += 1

        pending = settle_after(trigger, lambda: dict(state), delay=0)

        assert state["value"] == 1
        assert await pending == {"value": 1}

    @pytest.mark.asyncio
    async def test_projection_happens_after_delay(self) -> None:
        state = {"value": "before"}

        async def later_update():
            await asyncio.sleep(0)
            state["value"] = "after"

        def trigger():
            asyncio.get_running_loop().create_task(later_update())

        assert await settle_after(trigger, lambda: state["value"], delay=0.01) == "after"

    @pytest.mark.asyncio
    async def test_trigger_errors_propagate_synchronously(self) -> None:
        def trigger():
            raise ValueError("bad dispatch")

        with pytest.raises(ValueError, match="bad dispatch"):
            settle_after(trigger, lambda: None)

    @pytest.mark.asyncio
    async def test_recorded_errors_reject(self) -> None:
        errors: list[BaseException] = [RuntimeError("earlier")]

        def trigger():
            errors.append(KeyError("saga failed"))

        with pytest.raises(KeyError, match="saga failed"):
            await settle_after(trigger, lambda: None, delay=0, errors=errors)

    def test_requires_running_loop(self) -> None:
        triggered = []

        with pytest.raises(RuntimeError):
            settle_after(lambda: triggered.append(True), lambda: None)

        assert triggered == []


class TestBindActionCreators:
    def test_wraps_nested_leaves(self) -> None:
        calls = []

        def settle(trigger):
            trigger()
            return "settled"

        bound = bind_action_creators(
            {
                "load": lambda url: calls.append(("load", url)),
                "group": {"save": lambda item, force=False: calls.append(("save", item, force))},
            },
            settle,
        )

        assert bound.load("/a") == "settled"
        assert bound["group"].save("x", force=True) == "settled"
        assert calls == [("load", "/a"), ("save", "x", True)]
        assert isinstance(bound.group, BoundActions)
        assert set(bound) == {"load", "group"}

    def test_rejects_non_callable_leaves(self) -> None:
        with pytest.raises(TypeError, match="'count' must be callable or a nested mapping"):
            bind_action_creators({"count": 3}, lambda trigger: None)

    def test_missing_attribute(self) -> None:
        bound = bind_action_creators({}, lambda trigger: None)

        with pytest.raises(AttributeError, match="No action creator named 'load'"):
            bound.load
