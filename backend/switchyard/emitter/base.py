"""
Switchyard — Response Emitter Interface
========================================

What:  Abstract contract for anything that can send a prepared response to
       a transport.
How:   Concrete emitters implement `emit()` and return EmitResult.DECLINED
       when they cannot handle the response. Any other return value,
       including None, means the response was emitted.
Who:   AsgiEmitter (ASGI transport); EmitterStack composes several emitters.
"""

import enum
from abc import ABC, abstractmethod
from typing import Optional

from starlette.responses import Response


class EmitResult(enum.Enum):
    HANDLED = "handled"
    DECLINED = "declined"


class ResponseEmitter(ABC):
    """
    Sends a single response to a transport.

    Contract:
        - Return EmitResult.DECLINED to let the next emitter try
        - Return anything else to stop the stack; the response is considered sent
        - Never write partial output before declining
    """

    @abstractmethod
    async def emit(self, response: Response) -> Optional[EmitResult]:
        ...
