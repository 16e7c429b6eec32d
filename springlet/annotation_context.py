"""
AnnotationConfigContext

Application context fed by ``@component`` classes.

Example::

    @component
    class Database:
        pass

    with AnnotationConfigContext(Database) as context:
        db = context.get_bean(Database)
"""

from typing import Type

from .component import ComponentDefinitionReader
from .container import SpringletContainer
from .context import ApplicationContext


class AnnotationConfigContext(ApplicationContext):
    """Context that registers ``@component`` classes through a reader.

    When classes are passed to the constructor the context refreshes
    immediately. Otherwise call ``register()`` and then ``refresh()``.
    """

    def __init__(self, *component_classes: Type):
        super().__init__()
        self._reader = ComponentDefinitionReader(self._container)
        if component_classes:
            self.register(*component_classes)
            self.refresh()

    def register(self, *component_classes: Type) -> None:
        self._ensure_not_closed()
        self._reader.register(*component_classes)

    def load_definitions(self, container: SpringletContainer) -> None:
        # The reader registers definitions as soon as register() is called
        pass
