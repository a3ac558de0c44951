"""
Switchyard — Emitter Stack
===========================

What:  An ordered collection of response emitters that is itself an emitter.
How:   emit() tries each emitter front-to-back. The first one that does not
       answer EmitResult.DECLINED short-circuits the iteration; later
       emitters are never invoked. If all of them decline (or the stack is
       empty), the stack declines too and the caller must fall back.

Mutation:
    push()/append() add to the back, unshift() adds to the front, insert()
    and item assignment work as on a list. Every mutation validates its
    value(s) first and raises InvalidArgumentError without touching the
    stack when a value is not a ResponseEmitter.

    The stack is meant to be filled while wiring the application. Mutating
    it while requests are being emitted needs external synchronization.
"""

from collections.abc import MutableSequence
from typing import Iterable, List, Optional

from starlette.responses import Response

from switchyard.emitter.base import EmitResult, ResponseEmitter
from switchyard.exceptions import InvalidArgumentError


class EmitterStack(ResponseEmitter, MutableSequence):
    def __init__(self, emitters: Optional[Iterable[ResponseEmitter]] = None):
        self._emitters: List[ResponseEmitter] = []
        if emitters is not None:
            self.extend(emitters)

    async def emit(self, response: Response) -> EmitResult:
        """
        Emit a response through the first emitter willing to handle it.

        Returns:
            EmitResult.HANDLED as soon as one emitter returns anything other
            than EmitResult.DECLINED; EmitResult.DECLINED when none did.
        """
        for emitter in self._emitters:
            if await emitter.emit(response) is not EmitResult.DECLINED:
                return EmitResult.HANDLED
        return EmitResult.DECLINED

    # ── Sequence protocol ────────────────────────────────────────────────

    def __getitem__(self, index):
        if isinstance(index, slice):
            return EmitterStack(self._emitters[index])
        return self._emitters[index]

    def __setitem__(self, index, value) -> None:
        if isinstance(index, slice):
            value = list(value)
            for emitter in value:
                self._validate_emitter(emitter)
        else:
            self._validate_emitter(value)
        self._emitters[index] = value

    def __delitem__(self, index) -> None:
        del self._emitters[index]

    def __len__(self) -> int:
        return len(self._emitters)

    def __iter__(self):
        return iter(list(self._emitters))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._emitters!r})"

    def insert(self, index: int, value: ResponseEmitter) -> None:
        self._validate_emitter(value)
        self._emitters.insert(index, value)

    def extend(self, values: Iterable[ResponseEmitter]) -> None:
        values = list(values)
        for emitter in values:
            self._validate_emitter(emitter)
        self._emitters.extend(values)

    # ── Stack vocabulary ─────────────────────────────────────────────────

    def push(self, emitter: ResponseEmitter) -> None:
        """Add an emitter to the back of the stack (tried last)."""
        self._validate_emitter(emitter)
        self._emitters.append(emitter)

    append = push

    def unshift(self, emitter: ResponseEmitter) -> None:
        """Add an emitter to the front of the stack (tried first)."""
        self._validate_emitter(emitter)
        self._emitters.insert(0, emitter)

    def _validate_emitter(self, emitter) -> None:
        if not isinstance(emitter, ResponseEmitter):
            raise InvalidArgumentError(
                f"{type(self).__name__} expects a ResponseEmitter implementation, "
                f"got {type(emitter).__name__}",
                argument="emitter",
            )
