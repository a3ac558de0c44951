# Emitter package init
"""
Switchyard — Response Emitters
===============================

What:  Getting a finished response onto the wire.

Module Inventory:
    - base.py:   EmitResult and the abstract ResponseEmitter
    - stack.py:  EmitterStack, first-emitter-wins composition
    - asgi.py:   AsgiEmitter plus per-request transport binding
"""

from switchyard.emitter.asgi import AsgiEmitter, AsgiTransport, bind_transport, current_transport
from switchyard.emitter.base import EmitResult, ResponseEmitter
from switchyard.emitter.stack import EmitterStack
