"""
Context Module

This module provides the ApplicationContext facade: typed bean lookup
and the multi-phase ``refresh()`` bootstrap on top of SpringletContainer.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type, TypeVar, Union, overload

from loguru import logger

from .container import SpringletContainer
from .definition import Definition
from .exceptions import AmbiguousOrNotFoundError, ContainerClosedError, TypeMismatchError
from .hooks import LifecycleHook

T = TypeVar('T')


class ApplicationContext(ABC):
    """Abstract application context.

    ``refresh()`` bootstraps the context in four ordered phases:

    1. ``prepare()``: customization point, no-op by default
    2. ``load_definitions(container)``: pull definitions from the source
    3. ``register_hooks()``: realize LifecycleHook beans and register them
    4. ``realize_singletons()``: eagerly resolve non-lazy singletons

    Subclasses supply the definition source by implementing
    ``load_definitions``.

    Attributes:
        _container: Internal SpringletContainer instance
        _closed: Flag indicating if the context has been closed

    Example::

        class ListContext(ApplicationContext):
            def __init__(self, definitions):
                super().__init__()
                self._pending = definitions

            def load_definitions(self, container):
                for definition in self._pending:
                    container.register(definition.name, definition)

        with ListContext([Definition("db", Database)]) as context:
            context.refresh()
            db = context.get_bean("db")
    """

    def __init__(self, container: Optional[SpringletContainer] = None):
        self._container: SpringletContainer = container if container is not None else SpringletContainer()
        self._closed: bool = False

    def _ensure_not_closed(self) -> None:
        """Raises ContainerClosedError when the context has been closed."""
        if self._closed:
            raise ContainerClosedError("This context is already closed")

    @property
    def container(self) -> SpringletContainer:
        return self._container

    # -- lookup ------------------------------------------------------------

    @overload
    def get_bean(self, name: str) -> Any: ...

    @overload
    def get_bean(self, required_type: Type[T]) -> T: ...

    @overload
    def get_bean(self, name: str, required_type: Type[T]) -> T: ...

    def get_bean(self, name_or_type: Union[str, Type], required_type: Optional[Type] = None) -> Any:
        """Look a bean up by name, by type, or by name with a type check.

        Raises:
            DefinitionNotFoundError: When the name is not registered
            AmbiguousOrNotFoundError: When a type lookup matches zero or
                several beans
            TypeMismatchError: When the bean is not an instance of the
                required type
        """
        self._ensure_not_closed()
        if isinstance(name_or_type, str):
            bean = self._container.resolve(name_or_type)
            if required_type is not None and not isinstance(bean, required_type):
                raise TypeMismatchError(
                    f"Bean '{name_or_type}' is a {type(bean).__name__}, "
                    f"not a {required_type.__name__}"
                )
            return bean

        if required_type is not None:
            raise TypeError("get_bean() takes either a name and a type, or a type alone")
        return self._get_bean_by_type(name_or_type)

    def _get_bean_by_type(self, required_type: Type[T]) -> T:
        candidates = self.bean_names_for_type(required_type)
        if len(candidates) != 1:
            found = ", ".join(candidates) if candidates else "none"
            raise AmbiguousOrNotFoundError(
                f"Expected exactly one bean of type {required_type.__name__}, "
                f"found {len(candidates)}: {found}"
            )
        return self.get_bean(candidates[0], required_type)

    def bean_names_for_type(self, required_type: Type) -> List[str]:
        """Names of beans assignable to ``required_type``, without creating any.

        A bean qualifies when its definition's target type subclasses
        ``required_type`` or when its cached singleton is an instance of it.
        """
        names = []
        for name in self._container.definition_names():
            definition = self._container.registry.get(name)
            if definition is None:
                continue
            target_type = definition.target_type
            if isinstance(target_type, type) and issubclass(target_type, required_type):
                names.append(name)
            elif (self._container.is_singleton_cached(name)
                    and isinstance(self._container.get_cached_singleton(name), required_type)):
                names.append(name)
        return names

    def contains_bean(self, name: str) -> bool:
        return self._container.contains_definition(name)

    def register_definition(self, name: str, definition: Definition) -> None:
        self._ensure_not_closed()
        self._container.register(name, definition)

    # -- bootstrap -----------------------------------------------------------

    def refresh(self) -> None:
        """Run the four bootstrap phases in order.

        Eager realization is fail-fast: the first bean that fails aborts
        the refresh with that bean's error.
        """
        self._ensure_not_closed()
        logger.info("Refreshing {}", type(self).__name__)
        self.prepare()
        self.load_definitions(self._container)
        logger.info("Loaded {} bean definitions", self._container.definition_count())
        self.register_hooks()
        self.realize_singletons()

    def prepare(self) -> None:
        """Customization point run before definitions are loaded."""
        pass

    @abstractmethod
    def load_definitions(self, container: SpringletContainer) -> None:
        """Register definitions from this context's source into ``container``."""
        pass

    def register_hooks(self) -> None:
        """Realize every LifecycleHook bean and register it.

        All hook beans are created before any of them is registered, so
        hooks found in the same pass never process each other.
        """
        registered = self._container.hooks
        discovered = []
        for name in self._container.definition_names():
            target_type = self._container.get_definition(name).target_type
            if not (isinstance(target_type, type) and issubclass(target_type, LifecycleHook)):
                continue
            hook = self._container.resolve(name)
            if hook is None or any(hook is existing for existing in registered):
                continue
            discovered.append(hook)

        for hook in discovered:
            self._container.register_hook(hook)
        if discovered:
            logger.info("Registered {} lifecycle hooks", len(discovered))

    def realize_singletons(self) -> None:
        """Resolve every non-lazy singleton in registration order."""
        count = 0
        for name in self._container.definition_names():
            definition = self._container.get_definition(name)
            if definition.is_singleton and not definition.lazy:
                self._container.resolve(name)
                count += 1
        logger.info("Realized {} singletons", count)

    # -- shutdown ------------------------------------------------------------

    def close(self) -> None:
        """Close the context and its container, running destroy callbacks.

        This method is idempotent.
        """
        if not self._closed:
            self._closed = True
            self._container.close()

    @property
    def is_closed(self) -> bool:
        return self._closed

    def __enter__(self) -> 'ApplicationContext':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
