"""
Component marker and definition reader

The ``@component`` decorator attaches bean metadata to a class, and
ComponentDefinitionReader turns marked classes into Definitions.

Example::

    @component
    class UserService:
        pass

    @component("repo", scope=BeanScope.PROTOTYPE, init_method="connect")
    class UserRepository:
        def connect(self):
            ...

    reader = ComponentDefinitionReader(container)
    reader.register(UserService, UserRepository)
    # -> "userService" and "repo" are now registered
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Type, TypeVar, Union, overload

from loguru import logger

from .definition import Definition
from .lifecycle import BeanScope

C = TypeVar('C', bound=type)

_COMPONENT_ATTR = "__springlet_component__"


@dataclass(frozen=True)
class ComponentMetadata:
    """Metadata recorded by ``@component``"""
    name: Optional[str] = None
    scope: BeanScope = BeanScope.SINGLETON
    lazy: bool = False
    init_method: Optional[str] = None
    destroy_method: Optional[str] = None


@overload
def component(cls: C) -> C: ...


@overload
def component(
    name: Optional[str] = None,
    *,
    scope: BeanScope = BeanScope.SINGLETON,
    lazy: bool = False,
    init_method: Optional[str] = None,
    destroy_method: Optional[str] = None,
) -> Callable[[C], C]: ...


def component(
    name: Union[C, Optional[str]] = None,
    *,
    scope: BeanScope = BeanScope.SINGLETON,
    lazy: bool = False,
    init_method: Optional[str] = None,
    destroy_method: Optional[str] = None,
):
    """Mark a class as a component.

    Usable bare (``@component``) or with arguments
    (``@component("name", scope=BeanScope.PROTOTYPE)``).
    """
    if isinstance(name, type):
        setattr(name, _COMPONENT_ATTR, ComponentMetadata())
        return name

    metadata = ComponentMetadata(
        name=name,
        scope=scope,
        lazy=lazy,
        init_method=init_method,
        destroy_method=destroy_method,
    )

    def decorator(cls: C) -> C:
        setattr(cls, _COMPONENT_ATTR, metadata)
        return cls

    return decorator


def get_component_metadata(cls: Type) -> Optional[ComponentMetadata]:
    """Return the class's own component metadata.

    Metadata is not inherited: a subclass of a component is not a
    component unless it is marked itself.
    """
    return vars(cls).get(_COMPONENT_ATTR) if isinstance(cls, type) else None


def derive_bean_name(cls: Type) -> str:
    """``UserService`` -> ``userService``; the rest of the name is unchanged."""
    simple_name = cls.__name__
    return simple_name[:1].lower() + simple_name[1:]


class DefinitionSink(Protocol):
    """Anything definitions can be registered into"""

    def register(self, name: str, definition: Definition) -> None: ...


class ComponentDefinitionReader:
    """Registers ``@component`` classes into a container or registry."""

    def __init__(self, sink: DefinitionSink):
        self._sink = sink

    def register(self, *classes: Type) -> None:
        for cls in classes:
            self.register_component(cls)

    def register_component(self, cls: Type) -> Optional[Definition]:
        """Register one class.

        Returns:
            The registered Definition, or None when the class is not
            marked with ``@component``
        """
        metadata = get_component_metadata(cls)
        if metadata is None:
            logger.debug("Skipping {}: not marked with @component", getattr(cls, "__name__", cls))
            return None

        name = metadata.name or derive_bean_name(cls)
        definition = Definition(
            name=name,
            target_type=cls,
            scope=metadata.scope,
            lazy=metadata.lazy,
            init_method_name=metadata.init_method,
            destroy_method_name=metadata.destroy_method,
        )
        self._sink.register(name, definition)
        return definition
