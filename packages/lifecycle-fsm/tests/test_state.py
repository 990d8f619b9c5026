"""Tests for State and StateEncoder."""
import asyncio
import json

import pytest

from lifecycle_fsm import State, StateEncoder


class TestState:
    """Test cases for State hooks and representation."""

    def test_stringify(self):
        pending = State("pending")
        active = State("active")

        assert str(pending) == "pending"
        assert ",".join(map(str, [pending, active])) == "pending,active"
        assert repr(pending) == "State('pending')"

    def test_json_encoding(self):
        pending = State("pending")

        assert json.dumps({"pending": pending}, cls=StateEncoder) == '{"pending": "pending"}'
        assert json.dumps([pending, State("active")], cls=StateEncoder) == '["pending", "active"]'

    def test_encoder_rejects_other_objects(self):
        with pytest.raises(TypeError):
            json.dumps({"x": object()}, cls=StateEncoder)

    def test_identity_semantics(self):
        """Two States with the same name are distinct."""
        a = State("pending")
        b = State("pending")

        assert a != b
        assert len({a, b}) == 2

    def test_exit_without_hook_permits(self):
        state = State("pending")

        assert state.exit(state, State("active"), None) is True

    def test_exit_returns_hook_verdict(self):
        state = State("pending", {"before_exit": lambda f, t, ctx: ctx["ok"]})
        other = State("active")

        assert state.exit(state, other, {"ok": True}) is True
        assert state.exit(state, other, {"ok": False}) is False

    def test_entry_without_hook_is_noop(self):
        state = State("active")

        assert asyncio.run(state.entry(State("pending"), state, None)) is None

    def test_entry_calls_sync_hook(self):
        calls = []
        state = State("active", {"on_entry": lambda f, t, ctx: calls.append((f.name, t.name, ctx))})
        pending = State("pending")

        asyncio.run(state.entry(pending, state, "ctx"))

        assert calls == [("pending", "active", "ctx")]

    def test_entry_awaits_async_hook(self):
        calls = []

        async def on_entry(from_state, to_state, ctx):
            await asyncio.sleep(0)
            calls.append(to_state.name)

        state = State("active", {"on_entry": on_entry})

        asyncio.run(state.entry(State("pending"), state, None))

        assert calls == ["active"]

    def test_entry_propagates_hook_error(self):
        async def on_entry(from_state, to_state, ctx):
            raise LookupError("missing row")

        state = State("active", {"on_entry": on_entry})

        with pytest.raises(LookupError, match="missing row"):
            asyncio.run(state.entry(State("pending"), state, None))

    def test_hooks_property_is_a_copy(self):
        hook = lambda f, t, ctx: True  # noqa: E731
        state = State("pending", {"before_exit": hook})

        hooks = state.hooks
        hooks.pop("before_exit")

        assert state.hooks == {"before_exit": hook}

    def test_name_is_read_only(self):
        state = State("pending")

        with pytest.raises(AttributeError):
            state.name = "active"
