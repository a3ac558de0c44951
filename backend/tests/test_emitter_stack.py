"""
Switchyard — Emitter Stack Unit Tests
======================================

What:  Tests for EmitterStack iteration and mutation.

Test Strategy:
    ✅ First non-declining emitter short-circuits (call-count assertions)
    ✅ All-declining and empty stacks decline
    ✅ Any result other than EmitResult.DECLINED counts as handled
    ✅ Non-emitters are rejected by every mutation, stack unchanged
"""

import pytest
from starlette.responses import Response

from switchyard.emitter.base import EmitResult
from switchyard.emitter.stack import EmitterStack
from switchyard.exceptions import InvalidArgumentError


class TestEmit:
    """Tests for EmitterStack.emit()."""

    @pytest.mark.asyncio
    async def test_empty_stack_declines(self):
        assert await EmitterStack().emit(Response()) is EmitResult.DECLINED

    @pytest.mark.asyncio
    async def test_first_handler_short_circuits(self, make_emitter):
        """Emitters after the first success must never be invoked."""
        declining = make_emitter(EmitResult.DECLINED)
        handling = make_emitter(EmitResult.HANDLED)
        never = make_emitter(EmitResult.HANDLED)
        stack = EmitterStack([declining, handling, never])
        response = Response("hello")

        assert await stack.emit(response) is EmitResult.HANDLED

        declining.emit.assert_awaited_once_with(response)
        handling.emit.assert_awaited_once_with(response)
        never.emit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_all_declining_emitters_decline(self, make_emitter):
        emitters = [make_emitter(EmitResult.DECLINED) for _ in range(3)]
        stack = EmitterStack(emitters)

        assert await stack.emit(Response()) is EmitResult.DECLINED
        for emitter in emitters:
            emitter.emit.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("result", [None, False, 0, "", EmitResult.HANDLED])
    async def test_anything_but_declined_counts_as_handled(self, make_emitter, result):
        """Only the DECLINED member declines; falsy values do not."""
        first = make_emitter(result)
        second = make_emitter(EmitResult.HANDLED)
        stack = EmitterStack([first, second])

        assert await stack.emit(Response()) is EmitResult.HANDLED
        second.emit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_insertion_order_is_try_order(self, make_emitter):
        calls = []
        back = make_emitter(EmitResult.DECLINED)
        front = make_emitter(EmitResult.DECLINED)
        back.emit.side_effect = lambda response: calls.append("back") or EmitResult.DECLINED
        front.emit.side_effect = lambda response: calls.append("front") or EmitResult.DECLINED

        stack = EmitterStack()
        stack.push(back)
        stack.unshift(front)
        await stack.emit(Response())

        assert calls == ["front", "back"]

    @pytest.mark.asyncio
    async def test_stack_nests_inside_stack(self, make_emitter):
        inner_handler = make_emitter(EmitResult.HANDLED)
        outer = EmitterStack([EmitterStack([make_emitter(EmitResult.DECLINED)]), EmitterStack([inner_handler])])

        assert await outer.emit(Response()) is EmitResult.HANDLED
        inner_handler.emit.assert_awaited_once()


class TestMutation:
    """Every mutation validates before it mutates."""

    def setup_method(self):
        self.stack = EmitterStack()

    def test_push_appends(self, make_emitter):
        first, second = make_emitter(), make_emitter()
        self.stack.push(first)
        self.stack.append(second)
        assert list(self.stack) == [first, second]

    def test_unshift_prepends(self, make_emitter):
        first, second = make_emitter(), make_emitter()
        self.stack.push(first)
        self.stack.unshift(second)
        assert list(self.stack) == [second, first]

    def test_set_by_index_replaces(self, make_emitter):
        original, replacement = make_emitter(), make_emitter()
        self.stack.push(original)
        self.stack[0] = replacement
        assert self.stack[0] is replacement
        assert len(self.stack) == 1

    def test_delete_and_len(self, make_emitter):
        self.stack.extend([make_emitter(), make_emitter()])
        del self.stack[0]
        assert len(self.stack) == 1

    @pytest.mark.parametrize("value", [None, "emitter", object(), Response()])
    def test_push_rejects_non_emitter(self, make_emitter, value):
        self.stack.push(make_emitter())
        with pytest.raises(InvalidArgumentError, match="expects a ResponseEmitter"):
            self.stack.push(value)
        assert len(self.stack) == 1

    def test_unshift_rejects_non_emitter(self, make_emitter):
        self.stack.push(make_emitter())
        with pytest.raises(InvalidArgumentError):
            self.stack.unshift(object())
        assert len(self.stack) == 1

    def test_set_by_index_rejects_non_emitter(self, make_emitter):
        original = make_emitter()
        self.stack.push(original)
        with pytest.raises(InvalidArgumentError):
            self.stack[0] = object()
        assert self.stack[0] is original

    def test_insert_rejects_non_emitter(self):
        with pytest.raises(InvalidArgumentError):
            self.stack.insert(0, lambda response: None)
        assert len(self.stack) == 0

    def test_extend_is_all_or_nothing(self, make_emitter):
        with pytest.raises(InvalidArgumentError):
            self.stack.extend([make_emitter(), "not an emitter", make_emitter()])
        assert len(self.stack) == 0

    def test_slice_assignment_is_all_or_nothing(self, make_emitter):
        self.stack.extend([make_emitter(), make_emitter()])
        before = list(self.stack)
        with pytest.raises(InvalidArgumentError):
            self.stack[0:2] = [make_emitter(), 42]
        assert list(self.stack) == before

    def test_constructor_rejects_non_emitter(self):
        with pytest.raises(InvalidArgumentError):
            EmitterStack([object()])

    def test_error_names_the_argument(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            self.stack.push(None)
        assert exc_info.value.context["argument"] == "emitter"
