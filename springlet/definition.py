"""
Definition

Data class representing a named bean recipe
"""

from dataclasses import dataclass
from typing import Optional, Type

from .lifecycle import BeanScope


@dataclass(frozen=True)
class Definition:
    """Bean definition"""
    name: str
    target_type: Type
    scope: BeanScope = BeanScope.SINGLETON
    lazy: bool = False
    init_method_name: Optional[str] = None
    destroy_method_name: Optional[str] = None

    @property
    def is_singleton(self) -> bool:
        return self.scope == BeanScope.SINGLETON

    @property
    def is_prototype(self) -> bool:
        return self.scope == BeanScope.PROTOTYPE
