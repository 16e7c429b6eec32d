"""
SpringletContainer

This module provides the core IoC container implementation: the bean
lifecycle engine. It is the heart of the Springlet framework, responsible
for:

- Storing bean definitions (via DefinitionRegistry)
- Instantiating beans from their target type
- Threading each bean through the pre-init and post-init hook chains
- Invoking init and destroy callbacks
- Caching singletons with a single-flight guarantee

The container is usually driven through an ApplicationContext, but it is
fully usable on its own.
"""

import threading
from typing import Any, Dict, List, NamedTuple, Optional

from loguru import logger

from .definition import Definition
from .exceptions import (
    CircularDependencyError,
    ContainerClosedError,
    DefinitionNotFoundError,
    InstantiationError,
    LifecycleCallbackError,
    SpringletError,
)
from .hooks import HookPhase, LifecycleHook, apply_hook_chain
from .introspection import default_construct
from .lifecycle import BeanState
from .registry import DefinitionRegistry
from .resolution_context import _resolution_context

_MISSING = object()


class _CreatedBean(NamedTuple):
    exposed: Any      # what callers receive (may be a proxy)
    initialized: Any  # the object the init callback ran on


class SpringletContainer:
    """Core IoC container with bean lifecycle management.

    Resolution of a bean runs the following pipeline:

    1. Return the cached singleton, if any (no hooks re-run)
    2. Default-construct the target type
    3. Run every hook's ``before_init`` in registration order
    4. Invoke the definition's init callback
    5. Run every hook's ``after_init`` in registration order
    6. Cache the result for singletons

    A hook returning None ends the pipeline early and None becomes the
    bean. A failure at any step leaves nothing in the cache.

    Singleton creation is serialized by a re-entrant lock with a
    double-checked cache read, so concurrent first-time resolutions of the
    same name construct the bean exactly once.

    The lock is container-wide, so first-time creation of different
    singletons is serialized as well. An init callback must not hand the
    resolution of another uncached singleton to a second thread and then
    wait for it: that thread blocks on the lock the caller holds.
    Resolving other beans on the calling thread is fine.

    Attributes:
        _registry: The DefinitionRegistry holding bean definitions
        _hooks: Ordered list of registered LifecycleHook instances
        _singletons: Cache of exposed singleton beans by name

    Example::

        container = SpringletContainer()
        container.register("database", Definition("database", Database))
        db = container.resolve("database")
        assert db is container.resolve("database")
    """

    def __init__(self, registry: Optional[DefinitionRegistry] = None):
        """Initialize an empty container.

        Args:
            registry: Registry to read definitions from. A fresh one is
                created when omitted; registries are never shared
                implicitly between containers.
        """
        self._registry: DefinitionRegistry = registry if registry is not None else DefinitionRegistry()
        self._hooks: List[LifecycleHook] = []
        self._hooks_lock = threading.Lock()
        self._singletons: Dict[str, Any] = {}
        self._disposables: Dict[str, Any] = {}
        self._creation_order: List[str] = []
        self._states: Dict[str, BeanState] = {}
        self._singleton_lock = threading.RLock()
        self._closed: bool = False

    @property
    def registry(self) -> DefinitionRegistry:
        return self._registry

    def _ensure_not_closed(self) -> None:
        if self._closed:
            raise ContainerClosedError("This container is already closed")

    # -- definitions --------------------------------------------------

    def register(self, name: str, definition: Definition) -> None:
        """Register (or overwrite) the definition for ``name``.

        Raises:
            ContainerClosedError: When the container has been closed
            ValueError: When ``name`` is empty
        """
        self._ensure_not_closed()
        self._registry.register(name, definition)

    register_definition = register

    def contains_definition(self, name: str) -> bool:
        return self._registry.contains(name)

    def get_definition(self, name: str) -> Definition:
        """Return the definition for ``name``.

        Raises:
            DefinitionNotFoundError: When the name is not registered
        """
        definition = self._registry.get(name)
        if definition is None:
            raise self._not_found(name)
        return definition

    def definition_names(self) -> List[str]:
        return self._registry.names()

    def definition_count(self) -> int:
        return self._registry.count()

    def _not_found(self, name: str) -> DefinitionNotFoundError:
        registered = ", ".join(self._registry.names()) or "None"
        return DefinitionNotFoundError(
            f"No bean named '{name}' is registered.\n"
            f"Registered names: {registered}"
        )

    # -- hooks ----------------------------------------------------------

    def register_hook(self, hook: LifecycleHook) -> None:
        """Append ``hook`` to the global hook chain.

        The hook applies to every bean resolved afterwards. Beans that are
        already cached are not re-processed.
        """
        self._ensure_not_closed()
        with self._hooks_lock:
            self._hooks.append(hook)
        logger.debug("Registered lifecycle hook {}", type(hook).__name__)

    add_hook = register_hook

    @property
    def hooks(self) -> List[LifecycleHook]:
        with self._hooks_lock:
            return list(self._hooks)

    # -- resolution -------------------------------------------------

    def resolve(self, name: str) -> Any:
        """Resolve a bean by name, creating it if necessary.

        Args:
            name: The bean name

        Returns:
            The bean instance (or its proxy), or None when a hook
            suppressed processing

        Raises:
            DefinitionNotFoundError: When the name is not registered
            InstantiationError: When the target type cannot be constructed
            LifecycleCallbackError: When the init callback is missing or raises
            HookError: When a lifecycle hook raises
            CircularDependencyError: When creation re-enters itself
            ContainerClosedError: When the container has been closed
        """
        self._ensure_not_closed()
        definition = self._registry.get(name)
        if definition is None:
            raise self._not_found(name)

        if not definition.is_singleton:
            return self._create_bean(name, definition).exposed

        cached = self._singletons.get(name, _MISSING)
        if cached is not _MISSING:
            return cached

        with self._singleton_lock:
            # Another thread may have finished while we waited
            cached = self._singletons.get(name, _MISSING)
            if cached is not _MISSING:
                return cached

            self._ensure_not_closed()
            try:
                created = self._create_bean(name, definition)
            except Exception:
                self._states[name] = BeanState.DEFINED
                raise

            self._singletons[name] = created.exposed
            self._disposables[name] = created.initialized
            self._creation_order.append(name)
            self._states[name] = BeanState.CACHED
            logger.debug("Created singleton '{}'", name)
            return created.exposed

    def _create_bean(self, name: str, definition: Definition) -> _CreatedBean:
        ctx = _resolution_context.get()
        if ctx.is_resolving(name):
            raise CircularDependencyError(
                f"Circular dependency detected: {ctx.describe_cycle(name)}"
            )

        track = definition.is_singleton
        token = _resolution_context.set(ctx.push(name))
        try:
            if track:
                self._states[name] = BeanState.INSTANTIATING
            bean = self._instantiate(name, definition)

            if track:
                self._states[name] = BeanState.PRE_INIT
            hooks = self.hooks
            before = apply_hook_chain(hooks, bean, name, HookPhase.BEFORE_INIT)
            if before.suppressed:
                return _CreatedBean(None, None)
            bean = before.bean

            self._invoke_callback(bean, definition.init_method_name, name, "init")
            if track:
                self._states[name] = BeanState.INITIALIZED_RAW
                self._states[name] = BeanState.POST_INIT
            after = apply_hook_chain(hooks, bean, name, HookPhase.AFTER_INIT)
            return _CreatedBean(after.bean, bean)
        finally:
            _resolution_context.reset(token)

    def _instantiate(self, name: str, definition: Definition) -> Any:
        target_type = definition.target_type
        try:
            return default_construct(target_type)
        except SpringletError:
            # Errors from nested resolutions keep their own type
            raise
        except Exception as e:
            type_name = getattr(target_type, "__name__", repr(target_type))
            raise InstantiationError(
                f"Failed to instantiate bean '{name}' of type {type_name}: {e}\n"
                f"Hint: the target type needs a zero-argument constructor."
            ) from e

    def _invoke_callback(
        self,
        bean: Any,
        method_name: Optional[str],
        name: str,
        kind: str,
    ) -> None:
        if not method_name:
            return
        method = getattr(bean, method_name, _MISSING)
        if method is _MISSING:
            raise LifecycleCallbackError(
                f"{kind.capitalize()} method '{method_name}' not found on bean "
                f"'{name}' ({type(bean).__name__})"
            )
        if not callable(method):
            raise LifecycleCallbackError(
                f"{kind.capitalize()} method '{method_name}' on bean '{name}' is not callable"
            )
        try:
            method()
        except SpringletError:
            raise
        except Exception as e:
            raise LifecycleCallbackError(
                f"Failed to invoke {kind} method '{method_name}' on bean '{name}': {e}"
            ) from e

    # -- cache inspection ------------------------------------------------

    def state_of(self, name: str) -> BeanState:
        """Return the lifecycle state of ``name``.

        Prototype beans never leave DEFINED since nothing is retained.
        """
        if not self._registry.contains(name):
            return BeanState.UNREGISTERED
        return self._states.get(name, BeanState.DEFINED)

    def is_singleton_cached(self, name: str) -> bool:
        return name in self._singletons

    def get_cached_singleton(self, name: str) -> Optional[Any]:
        """Return the cached singleton for ``name`` without creating it."""
        return self._singletons.get(name)

    def cached_singleton_names(self) -> List[str]:
        with self._singleton_lock:
            return list(self._creation_order)

    # -- shutdown ---------------------------------------------------------

    def close(self) -> None:
        """Close the container, running destroy callbacks.

        Destroy callbacks run on the initialized (unproxied) beans in
        reverse creation order. Every callback is attempted; the first
        failure is raised once all of them have run.

        This method is idempotent.

        Raises:
            LifecycleCallbackError: When a destroy callback is missing or raises
        """
        with self._singleton_lock:
            if self._closed:
                return
            self._closed = True
            first_error: Optional[SpringletError] = None
            for name in reversed(self._creation_order):
                bean = self._disposables.get(name)
                definition = self._registry.get(name)
                if bean is None or definition is None:
                    continue
                try:
                    self._invoke_callback(bean, definition.destroy_method_name, name, "destroy")
                except SpringletError as e:
                    logger.warning("Destroy callback failed for '{}': {}", name, e)
                    if first_error is None:
                        first_error = e
            self._singletons.clear()
            self._disposables.clear()
            self._creation_order.clear()
            self._states.clear()

        if first_error is not None:
            raise first_error

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'SpringletContainer':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
