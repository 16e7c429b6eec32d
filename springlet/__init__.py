# Public API
from .annotation_context import AnnotationConfigContext
from .auto_proxy import AutoProxyHook
from .component import ComponentDefinitionReader, component, derive_bean_name
from .container import SpringletContainer
from .context import ApplicationContext
from .definition import Definition
from .exceptions import (
    AmbiguousOrNotFoundError,
    CircularDependencyError,
    ContainerClosedError,
    DefinitionNotFoundError,
    HookError,
    InstantiationError,
    LifecycleCallbackError,
    NoContractError,
    ProxyConstructionError,
    SpringletError,
    TypeMismatchError,
)
from .hooks import HookChainResult, HookPhase, LifecycleHook
from .lifecycle import BeanScope, BeanState
from .matching import (
    MATCH_ALL,
    OPERATION_MATCHER_TRUE,
    TYPE_FILTER_TRUE,
    InterceptionSpec,
    MatchPredicate,
    NamePatternMatcher,
    OperationMatcher,
    SubclassTypeFilter,
    TypeFilter,
)
from .proxy import ProxyEngine, ProxyStrategy, is_proxy, proxy_target, select_strategy
from .registry import DefinitionRegistry

__all__ = [
    "SpringletContainer",
    "DefinitionRegistry",
    "Definition",
    "BeanScope",
    "BeanState",
    # Hooks
    "LifecycleHook",
    "HookPhase",
    "HookChainResult",
    "AutoProxyHook",
    # Context
    "ApplicationContext",
    "AnnotationConfigContext",
    "ComponentDefinitionReader",
    "component",
    "derive_bean_name",
    # Proxying
    "ProxyEngine",
    "ProxyStrategy",
    "select_strategy",
    "is_proxy",
    "proxy_target",
    "InterceptionSpec",
    "MatchPredicate",
    "MATCH_ALL",
    "TypeFilter",
    "OperationMatcher",
    "TYPE_FILTER_TRUE",
    "OPERATION_MATCHER_TRUE",
    "SubclassTypeFilter",
    "NamePatternMatcher",
    # Exceptions
    "SpringletError",
    "DefinitionNotFoundError",
    "InstantiationError",
    "LifecycleCallbackError",
    "HookError",
    "NoContractError",
    "ProxyConstructionError",
    "AmbiguousOrNotFoundError",
    "TypeMismatchError",
    "CircularDependencyError",
    "ContainerClosedError",
]

# Version comes from the installed distribution metadata
from importlib.metadata import PackageNotFoundError, version as _dist_version

try:
    __version__ = _dist_version("springlet")
except PackageNotFoundError:
    # Fallback for development
    __version__ = '0.0.0'
