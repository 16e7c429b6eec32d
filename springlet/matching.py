"""
Match predicates

Decide *where* interception applies: a MatchPredicate pairs a TypeFilter
(which owner types qualify) with an OperationMatcher (which operations on
them qualify). Predicates are evaluated once per operation when a proxy is
built, never per call.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from fnmatch import fnmatchcase
from typing import Tuple, Type


class TypeFilter(ABC):
    """Restricts matching to a set of owner types."""

    @abstractmethod
    def matches(self, owner_type: Type) -> bool:
        pass


class OperationMatcher(ABC):
    """Restricts matching to a set of operations."""

    @abstractmethod
    def matches(self, operation: str, owner_type: Type) -> bool:
        pass


class _AlwaysTrueTypeFilter(TypeFilter):

    def matches(self, owner_type: Type) -> bool:
        return True

    def __repr__(self) -> str:
        return "TYPE_FILTER_TRUE"


class _AlwaysTrueOperationMatcher(OperationMatcher):

    def matches(self, operation: str, owner_type: Type) -> bool:
        return True

    def __repr__(self) -> str:
        return "OPERATION_MATCHER_TRUE"


TYPE_FILTER_TRUE: TypeFilter = _AlwaysTrueTypeFilter()
OPERATION_MATCHER_TRUE: OperationMatcher = _AlwaysTrueOperationMatcher()


class SubclassTypeFilter(TypeFilter):
    """Accepts owner types that subclass any of ``bases``.

    Example::

        SubclassTypeFilter(Repository).matches(UserRepository)  # True
    """

    def __init__(self, *bases: Type):
        if not bases:
            raise ValueError("SubclassTypeFilter requires at least one base type")
        self.bases: Tuple[Type, ...] = bases

    def matches(self, owner_type: Type) -> bool:
        return isinstance(owner_type, type) and issubclass(owner_type, self.bases)

    def __repr__(self) -> str:
        return f"SubclassTypeFilter({', '.join(b.__name__ for b in self.bases)})"


class NamePatternMatcher(OperationMatcher):
    """Accepts operations whose name matches any glob pattern.

    Matching is case-sensitive (``fnmatchcase``).

    Example::

        matcher = NamePatternMatcher("save*", "delete")
        matcher.matches("save_user", UserRepository)  # True
        matcher.matches("find", UserRepository)       # False
    """

    def __init__(self, *patterns: str):
        if not patterns:
            raise ValueError("NamePatternMatcher requires at least one pattern")
        self.patterns: Tuple[str, ...] = patterns

    def matches(self, operation: str, owner_type: Type) -> bool:
        return any(fnmatchcase(operation, pattern) for pattern in self.patterns)

    def __repr__(self) -> str:
        return f"NamePatternMatcher({', '.join(map(repr, self.patterns))})"


@dataclass(frozen=True)
class MatchPredicate:
    """Static test over (operation, owner type).

    Both the type filter and the operation matcher must accept.
    """
    type_filter: TypeFilter = TYPE_FILTER_TRUE
    operation_matcher: OperationMatcher = OPERATION_MATCHER_TRUE

    def matches(self, operation: str, owner_type: Type) -> bool:
        return (
            self.type_filter.matches(owner_type)
            and self.operation_matcher.matches(operation, owner_type)
        )


MATCH_ALL = MatchPredicate(TYPE_FILTER_TRUE, OPERATION_MATCHER_TRUE)


@dataclass(frozen=True)
class InterceptionSpec:
    """Records where a proxy intercepts calls."""
    predicate: MatchPredicate = field(default=MATCH_ALL)
