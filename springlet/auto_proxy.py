"""
AutoProxyHook

A LifecycleHook that swaps each bean for a proxy after initialization.
"""

from typing import Any, Optional

from loguru import logger

from .hooks import LifecycleHook
from .introspection import declared_contract, is_extensible
from .matching import InterceptionSpec
from .proxy import ProxyEngine


class AutoProxyHook(LifecycleHook):
    """Wrap every bean whose type passes the interception type filter.

    Strategy choice per bean:

    - the bean's type declares an abstract contract -> dispatch proxy
    - otherwise, the type is extensible -> subclass proxy
    - otherwise -> the bean is left unwrapped

    Because it has a zero-argument constructor (defaulting to MATCH_ALL),
    the hook can itself be registered as a bean and picked up by
    ``ApplicationContext.refresh()``.

    Example::

        spec = InterceptionSpec(MatchPredicate(operation_matcher=NamePatternMatcher("save*")))
        container.register_hook(AutoProxyHook(spec))
    """

    def __init__(self, spec: Optional[InterceptionSpec] = None, engine: Optional[ProxyEngine] = None):
        self.spec = spec or InterceptionSpec()
        self.engine = engine or ProxyEngine()

    def after_init(self, bean: Any, name: str) -> Any:
        target_type = type(bean)
        if not self.spec.predicate.type_filter.matches(target_type):
            return bean

        if declared_contract(target_type):
            return self.engine.create_dispatch_proxy(bean, self.spec)
        if is_extensible(target_type):
            return self.engine.create_subclass_proxy(bean, self.spec)

        logger.debug("Leaving '{}' unproxied: {} is sealed and has no contract", name, target_type.__name__)
        return bean
