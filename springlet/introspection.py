"""
Type introspection helpers

The container and the proxy engine only inspect types through this module:

- declared_contract(): the abstract interfaces a type implements
- is_extensible(): whether a type may be subclassed
- overridable_operations(): the plain methods a subclass proxy overrides
- default_construct() / invoke_named(): reflective construction and calls
"""

import inspect
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

# Py_TPFLAGS_BASETYPE: set on every type that allows subclassing
_TPFLAGS_BASETYPE = 1 << 10


@dataclass(frozen=True)
class Contract:
    """Abstract contract declared by a type.

    Attributes:
        interfaces: Abstract bases that declare abstract members, most
            derived first, with redundant ancestors removed
        operations: Sorted names of abstract methods
        properties: Sorted names of abstract properties
    """
    interfaces: Tuple[type, ...] = ()
    operations: Tuple[str, ...] = ()
    properties: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.operations or self.properties)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def declared_contract(target_type: Type) -> Contract:
    """Collect the abstract contract ``target_type`` inherits.

    A class counts as an interface when it declares at least one abstract
    member in its own namespace. Abstract members are collected from
    every interface in the MRO, including ones a concrete subclass has
    since implemented.
    """
    interfaces: List[type] = []
    operations = set()
    properties = set()

    for klass in inspect.getmro(target_type):
        if klass is object:
            continue
        declared = False
        for name, value in vars(klass).items():
            if not getattr(value, "__isabstractmethod__", False):
                continue
            declared = True
            if isinstance(value, property):
                properties.add(name)
            else:
                operations.add(name)
        if declared:
            interfaces.append(klass)

    # (Repo, BaseRepo) is redundant when Repo already extends BaseRepo
    most_derived = tuple(
        iface for iface in interfaces
        if not any(other is not iface and issubclass(other, iface) for other in interfaces)
    )
    return Contract(
        interfaces=most_derived,
        operations=tuple(sorted(operations)),
        properties=tuple(sorted(properties - operations)),
    )


def is_extensible(target_type: Type) -> bool:
    """Return True when ``target_type`` can be used as a base class."""
    if not isinstance(target_type, type):
        return False
    if getattr(target_type, "__final__", False):
        return False
    return bool(target_type.__flags__ & _TPFLAGS_BASETYPE)


def overridable_operations(target_type: Type) -> List[str]:
    """List the plain methods a subclass of ``target_type`` may override.

    Dunder methods, static methods, class methods and properties are left
    alone. A name shadowed by a non-function in a more derived class is
    skipped.
    """
    seen = set()
    operations = []
    for klass in inspect.getmro(target_type):
        if klass is object:
            continue
        for name, value in vars(klass).items():
            if name in seen:
                continue
            seen.add(name)
            if _is_dunder(name) or not inspect.isfunction(value):
                continue
            operations.append(name)
    return operations


def default_construct(target_type: Type) -> Any:
    """Create an instance via the type's zero-argument constructor."""
    return target_type()


def invoke_named(
    instance: Any,
    name: str,
    args: Tuple = (),
    kwargs: Optional[Dict[str, Any]] = None,
) -> Any:
    """Look up ``name`` on ``instance`` and call it.

    Raises:
        AttributeError: When the attribute does not exist
        TypeError: When the attribute exists but is not callable
    """
    member = getattr(instance, name)
    if not callable(member):
        raise TypeError(
            f"'{type(instance).__name__}.{name}' is not callable"
        )
    return member(*args, **(kwargs or {}))
