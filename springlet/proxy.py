"""
ProxyEngine

Builds stand-in objects that forward calls to a target instance and route
matched operations through a single interception point.

Two strategies are available, selected purely by the shape of the target
type:

- DISPATCH: the proxy class derives only from the abstract interfaces the
  target implements and forwards each contract operation. Requires a
  non-empty contract.
- SUBCLASS: the proxy class derives from the target's concrete type and
  overrides every overridable method. Requires the type to be extensible.

There is no fallback between strategies here; callers that want one (such
as AutoProxyHook) decide for themselves.

Example::

    engine = ProxyEngine()
    proxy = engine.create_proxy(GreeterImpl(), InterceptionSpec(MATCH_ALL))
    proxy.greet("bob")   # logs "Before method: greet" / "After method: greet"
"""

import functools
import inspect
import threading
import types
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Type

from loguru import logger

from .exceptions import NoContractError, ProxyConstructionError
from .introspection import (
    declared_contract,
    invoke_named,
    is_extensible,
    overridable_operations,
)
from .matching import InterceptionSpec, MatchPredicate

_TARGET_ATTR = "_springlet_target"
_STRATEGY_ATTR = "__springlet_proxy_strategy__"


class ProxyStrategy(Enum):
    """How a proxy class is generated"""
    DISPATCH = "dispatch"
    SUBCLASS = "subclass"


def select_strategy(target_type: Type) -> ProxyStrategy:
    """DISPATCH when ``target_type`` declares an abstract contract, else SUBCLASS."""
    if declared_contract(target_type):
        return ProxyStrategy.DISPATCH
    return ProxyStrategy.SUBCLASS


def is_proxy(obj: Any) -> bool:
    return getattr(type(obj), _STRATEGY_ATTR, None) is not None


def proxy_target(proxy: Any) -> Any:
    """Return the instance a proxy delegates to.

    Raises:
        TypeError: When ``proxy`` was not built by ProxyEngine
    """
    if not is_proxy(proxy):
        raise TypeError(f"{type(proxy).__name__} is not a Springlet proxy")
    return _target_of(proxy)


def _target_of(proxy: Any) -> Any:
    return object.__getattribute__(proxy, _TARGET_ATTR)


def invoke_with_interception(target: Any, operation: str, args: Tuple, kwargs: Dict[str, Any]) -> Any:
    """The interception point shared by both strategies.

    Wraps exactly one real invocation. Exceptions propagate unchanged and
    skip the "after" marker.
    """
    logger.info("Before method: {}", operation)
    result = invoke_named(target, operation, args, kwargs)
    logger.info("After method: {}", operation)
    return result


async def invoke_with_interception_async(target: Any, operation: str, args: Tuple, kwargs: Dict[str, Any]) -> Any:
    """Coroutine counterpart of invoke_with_interception.

    The markers surround the awaited body, not the creation of the
    coroutine.
    """
    logger.info("Before method: {}", operation)
    result = await invoke_named(target, operation, args, kwargs)
    logger.info("After method: {}", operation)
    return result


def _forwarder(operation: str, original: Optional[Callable], intercept: bool) -> Callable:
    if inspect.iscoroutinefunction(original):
        if intercept:
            async def forward(self, *args, **kwargs):
                return await invoke_with_interception_async(_target_of(self), operation, args, kwargs)
        else:
            async def forward(self, *args, **kwargs):
                return await getattr(_target_of(self), operation)(*args, **kwargs)
    elif intercept:
        def forward(self, *args, **kwargs):
            return invoke_with_interception(_target_of(self), operation, args, kwargs)
    else:
        def forward(self, *args, **kwargs):
            return getattr(_target_of(self), operation)(*args, **kwargs)

    if original is not None:
        # updated=() keeps __isabstractmethod__ from being copied onto the forwarder
        forward = functools.wraps(original, updated=())(forward)
    else:
        forward.__name__ = operation
        forward.__qualname__ = operation
    return forward


def _forwarding_property(name: str, declared: Optional[property] = None) -> property:
    fset = fdel = None
    # Setters and deleters are forwarded only where the interface declares them
    if declared is not None and declared.fset is not None:
        def fset(self, value):
            setattr(_target_of(self), name, value)
    if declared is not None and declared.fdel is not None:
        def fdel(self):
            delattr(_target_of(self), name)
    return property(
        lambda self: getattr(_target_of(self), name), fset, fdel, doc=f"Forwarded '{name}'"
    )


def _proxy_repr(self) -> str:
    return f"<{type(self).__name__} for {_target_of(self)!r}>"


class ProxyEngine:
    """Creates dispatch or subclass proxies around target instances.

    Generated proxy classes are cached per (target type, strategy,
    predicate), so wrapping many prototypes of the same type builds the
    class once.
    """

    def __init__(self):
        self._class_cache: Dict[Tuple[Type, ProxyStrategy, MatchPredicate], type] = {}
        self._lock = threading.Lock()

    def create_proxy(self, instance: Any, spec: Optional[InterceptionSpec] = None) -> Any:
        """Wrap ``instance`` using the strategy its type calls for.

        Raises:
            ProxyConstructionError: When the SUBCLASS strategy applies and
                the type cannot be extended
        """
        spec = spec or InterceptionSpec()
        strategy = select_strategy(type(instance))
        if strategy is ProxyStrategy.DISPATCH:
            return self.create_dispatch_proxy(instance, spec)
        return self.create_subclass_proxy(instance, spec)

    def create_dispatch_proxy(self, instance: Any, spec: Optional[InterceptionSpec] = None) -> Any:
        """Build a proxy implementing only the target's abstract contract.

        Raises:
            NoContractError: When the target type declares no abstract operations
            ProxyConstructionError: When the interfaces cannot be combined
        """
        spec = spec or InterceptionSpec()
        target_type = type(instance)
        proxy_cls = self._proxy_class(target_type, ProxyStrategy.DISPATCH, spec.predicate)
        try:
            return proxy_cls(instance)
        except Exception as e:
            raise ProxyConstructionError(
                f"Cannot instantiate dispatch proxy for {target_type.__name__}: {e}"
            ) from e

    def create_subclass_proxy(self, instance: Any, spec: Optional[InterceptionSpec] = None) -> Any:
        """Build a proxy that subclasses the target's concrete type.

        The target's ``__init__`` is not run again; the proxy only
        delegates to ``instance``.

        Raises:
            ProxyConstructionError: When the type is sealed or the
                subclass cannot be created
        """
        spec = spec or InterceptionSpec()
        target_type = type(instance)
        proxy_cls = self._proxy_class(target_type, ProxyStrategy.SUBCLASS, spec.predicate)
        try:
            proxy = proxy_cls.__new__(proxy_cls)
        except Exception as e:
            raise ProxyConstructionError(
                f"Cannot allocate subclass proxy for {target_type.__name__}: {e}"
            ) from e
        object.__setattr__(proxy, _TARGET_ATTR, instance)
        return proxy

    def _proxy_class(self, target_type: Type, strategy: ProxyStrategy, predicate: MatchPredicate) -> type:
        key = (target_type, strategy, predicate)
        try:
            hash(key)
        except TypeError:
            # Unhashable user matchers still work, the class is just rebuilt each time
            logger.debug("Predicate {!r} is unhashable; building uncached proxy class", predicate)
            return self._build_class(target_type, strategy, predicate)
        with self._lock:
            cached = self._class_cache.get(key)
            if cached is not None:
                return cached
            proxy_cls = self._build_class(target_type, strategy, predicate)
            self._class_cache[key] = proxy_cls
            return proxy_cls

    def _build_class(self, target_type: Type, strategy: ProxyStrategy, predicate: MatchPredicate) -> type:
        if strategy is ProxyStrategy.DISPATCH:
            return self._build_dispatch_class(target_type, predicate)
        return self._build_subclass_class(target_type, predicate)

    def _build_dispatch_class(self, target_type: Type, predicate: MatchPredicate) -> type:
        contract = declared_contract(target_type)
        if not contract:
            raise NoContractError(
                f"{target_type.__name__} declares no abstract operations; "
                f"a dispatch proxy needs at least one interface method"
            )

        namespace: Dict[str, Any] = {
            "__init__": _dispatch_init,
            "__repr__": _proxy_repr,
            "__module__": target_type.__module__,
            _STRATEGY_ATTR: ProxyStrategy.DISPATCH,
        }
        for operation in contract.operations:
            original = _find_declaration(contract.interfaces, operation)
            namespace[operation] = _forwarder(
                operation, original, predicate.matches(operation, target_type)
            )
        for name in contract.properties:
            declared = _find_declaration(contract.interfaces, name)
            namespace[name] = _forwarding_property(
                name, declared if isinstance(declared, property) else None
            )

        return self._new_class(
            f"{target_type.__name__}DispatchProxy", contract.interfaces, namespace, target_type
        )

    def _build_subclass_class(self, target_type: Type, predicate: MatchPredicate) -> type:
        if not is_extensible(target_type):
            raise ProxyConstructionError(
                f"{getattr(target_type, '__name__', target_type)} is sealed against "
                f"extension; a subclass proxy cannot be generated"
            )

        namespace: Dict[str, Any] = {
            "__getattribute__": _subclass_getattribute,
            "__setattr__": _subclass_setattr,
            "__delattr__": _subclass_delattr,
            "__repr__": _proxy_repr,
            "__module__": target_type.__module__,
            _STRATEGY_ATTR: ProxyStrategy.SUBCLASS,
        }
        for operation in overridable_operations(target_type):
            namespace[operation] = _forwarder(
                operation,
                getattr(target_type, operation),
                predicate.matches(operation, target_type),
            )

        return self._new_class(
            f"{target_type.__name__}SubclassProxy", (target_type,), namespace, target_type
        )

    @staticmethod
    def _new_class(name: str, bases: Tuple[type, ...], namespace: Dict[str, Any], target_type: Type) -> type:
        try:
            proxy_cls = types.new_class(name, bases, exec_body=lambda ns: ns.update(namespace))
        except Exception as e:
            raise ProxyConstructionError(
                f"Cannot generate proxy class for {target_type.__name__}: {e}"
            ) from e
        if getattr(proxy_cls, "__abstractmethods__", None):
            raise ProxyConstructionError(
                f"Proxy class for {target_type.__name__} is still abstract: "
                f"{', '.join(sorted(proxy_cls.__abstractmethods__))}"
            )
        logger.debug("Generated {} for {}", name, target_type.__name__)
        return proxy_cls


def _find_declaration(interfaces: Tuple[type, ...], operation: str) -> Optional[Callable]:
    for iface in interfaces:
        member = getattr(iface, operation, None)
        if member is not None:
            return member
    return None


def _dispatch_init(self, target: Any) -> None:
    object.__setattr__(self, _TARGET_ATTR, target)


def _subclass_getattribute(self, item: str) -> Any:
    # Forwarders and dunders live on the proxy class, everything else on the target
    if item.startswith("__") or item in vars(type(self)):
        return object.__getattribute__(self, item)
    return getattr(_target_of(self), item)


def _subclass_setattr(self, key: str, value: Any) -> None:
    setattr(_target_of(self), key, value)


def _subclass_delattr(self, key: str) -> None:
    delattr(_target_of(self), key)
