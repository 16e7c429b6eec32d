"""
DefinitionRegistry

Thread-safe store of bean definitions keyed by name.
"""

import threading
from typing import Dict, List, Optional

from loguru import logger

from .definition import Definition


class DefinitionRegistry:
    """Holds exactly one Definition per bean name.

    Every read and write takes an internal lock, so a definition being
    registered is never observed half-written. Names are kept in
    insertion order; re-registering an existing name overwrites the
    definition but keeps its original position.

    Example::

        registry = DefinitionRegistry()
        registry.register("database", Definition("database", Database))
        registry.get("database")   # -> Definition(...)
        registry.get("missing")    # -> None
    """

    def __init__(self):
        self._definitions: Dict[str, Definition] = {}
        self._lock = threading.Lock()

    def register(self, name: str, definition: Definition) -> None:
        """Store or overwrite the definition for ``name``.

        Raises:
            ValueError: When ``name`` is None or empty
        """
        if not name:
            raise ValueError("Bean name must be a non-empty string")
        with self._lock:
            replaced = name in self._definitions
            self._definitions[name] = definition
        logger.debug(
            "{} definition '{}' -> {}",
            "Replaced" if replaced else "Registered",
            name,
            getattr(definition.target_type, "__name__", definition.target_type),
        )

    def get(self, name: str) -> Optional[Definition]:
        with self._lock:
            return self._definitions.get(name)

    def contains(self, name: str) -> bool:
        with self._lock:
            return name in self._definitions

    def names(self) -> List[str]:
        with self._lock:
            return list(self._definitions)

    def count(self) -> int:
        with self._lock:
            return len(self._definitions)

    def __contains__(self, name: object) -> bool:
        return self.contains(name)  # type: ignore[arg-type]

    def __len__(self) -> int:
        return self.count()
