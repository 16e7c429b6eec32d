"""
ResolutionContext

Tracks the singleton names currently being created on this thread, so the
container can detect a bean whose creation re-enters its own resolution.

The context is stored in a ContextVar for thread-safety and is managed by
SpringletContainer during singleton creation.
"""

from contextvars import ContextVar
from typing import Tuple


class ResolutionContext:
    """Immutable stack of bean names being created.

    Each nested creation pushes a new context rather than mutating the
    parent, so resetting the ContextVar token restores the caller's view.

    Example (internal usage)::

        ctx = _resolution_context.get()
        if ctx.is_resolving("userService"):
            raise CircularDependencyError(ctx.describe_cycle("userService"))
        token = _resolution_context.set(ctx.push("userService"))
    """

    def __init__(self, resolving: Tuple[str, ...] = ()):
        self.resolving: Tuple[str, ...] = resolving

    def push(self, name: str) -> 'ResolutionContext':
        return ResolutionContext(self.resolving + (name,))

    def is_resolving(self, name: str) -> bool:
        return name in self.resolving

    def describe_cycle(self, name: str) -> str:
        return " -> ".join(self.resolving + (name,))


_resolution_context: ContextVar[ResolutionContext] = ContextVar(
    '_SPRINGLET_RESOLUTION_CONTEXT',
    default=ResolutionContext()
)
