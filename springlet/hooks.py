"""
Lifecycle hooks

A LifecycleHook observes every bean the container creates, once before
and once after the init callback, and may hand back a replacement object
(typically a proxy). Returning None suppresses the rest of the bean's
processing; that outcome is modelled explicitly by HookChainResult rather
than by an exception.
"""

from abc import ABC
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from loguru import logger

from .exceptions import HookError, SpringletError


class HookPhase(Enum):
    """Which side of the init callback a hook chain runs on"""
    BEFORE_INIT = "before_init"
    AFTER_INIT = "after_init"


class LifecycleHook(ABC):
    """Base class for container-wide bean hooks.

    Both methods pass the bean through unchanged by default, so a
    subclass only overrides the phase it cares about. Hooks apply to every
    bean; any filtering by name or type is up to the hook itself.

    Example::

        class TimestampHook(LifecycleHook):
            def after_init(self, bean, name):
                bean.created_at = time.time()
                return bean

        container.register_hook(TimestampHook())
    """

    def before_init(self, bean: Any, name: str) -> Optional[Any]:
        """Called before the init callback. May return a replacement."""
        return bean

    def after_init(self, bean: Any, name: str) -> Optional[Any]:
        """Called after the init callback. May return a replacement."""
        return bean


@dataclass(frozen=True)
class HookChainResult:
    """Outcome of folding a bean through a hook chain.

    Attributes:
        bean: The (possibly replaced) bean, or None when suppressed
        suppressed: True when a hook returned None
        suppressed_by: The hook that returned None, if any
    """
    bean: Any
    suppressed: bool = False
    suppressed_by: Optional[LifecycleHook] = None


def apply_hook_chain(
    hooks: Iterable[LifecycleHook],
    bean: Any,
    name: str,
    phase: HookPhase,
) -> HookChainResult:
    """Thread ``bean`` through ``hooks`` in order.

    Stops at the first hook that returns None.

    Raises:
        HookError: When a hook raises anything other than a SpringletError
    """
    current = bean
    for hook in hooks:
        callback = getattr(hook, phase.value)
        try:
            current = callback(current, name)
        except SpringletError:
            raise
        except Exception as e:
            raise HookError(
                f"{type(hook).__name__}.{phase.value} failed on bean '{name}': {e}"
            ) from e
        if current is None:
            logger.debug(
                "{}.{} returned None for '{}'; skipping remaining processing",
                type(hook).__name__, phase.value, name,
            )
            return HookChainResult(bean=None, suppressed=True, suppressed_by=hook)
    return HookChainResult(bean=current)
