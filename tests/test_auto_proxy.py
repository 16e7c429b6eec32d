"""
AutoProxyHook Tests

Tests for proxy substitution during the post-init hook chain.
"""

import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from springlet import (
    AutoProxyHook,
    BeanScope,
    InterceptionSpec,
    MatchPredicate,
    ProxyEngine,
    SubclassTypeFilter,
    is_proxy,
    proxy_target,
)
from conftest import LogCapture, SpringletTestCase
from fixtures import Counter, Greeter, GreeterImpl, StatefulBean


class TestAutoProxyHook(SpringletTestCase):

    def test_contract_bean_gets_dispatch_proxy(self):
        """A MATCH_ALL hook wraps contract calls in exactly one marker pair."""
        self.container.register_hook(AutoProxyHook())
        self.register("greeter", GreeterImpl)

        greeter = self.container.resolve("greeter")

        self.assertTrue(is_proxy(greeter))
        self.assertIsInstance(greeter, Greeter)
        self.assertNotIsInstance(greeter, GreeterImpl)
        with LogCapture() as logs:
            self.assertEqual(greeter.greet("bob"), "Hello, bob!")
        self.assertEqual(logs.markers(), ["Before method: greet", "After method: greet"])

    def test_concrete_bean_gets_subclass_proxy(self):
        self.container.register_hook(AutoProxyHook())
        self.register("counter", Counter)

        counter = self.container.resolve("counter")

        self.assertTrue(is_proxy(counter))
        self.assertIsInstance(counter, Counter)
        self.assertEqual(counter.increment(), 1)

    def test_proxy_is_the_cached_singleton(self):
        self.container.register_hook(AutoProxyHook())
        self.register("counter", Counter)

        self.assertIs(self.container.resolve("counter"), self.container.resolve("counter"))

    def test_prototypes_get_their_own_proxies(self):
        self.container.register_hook(AutoProxyHook())
        self.register("counter", Counter, scope=BeanScope.PROTOTYPE)

        first = self.container.resolve("counter")
        second = self.container.resolve("counter")

        self.assertIsNot(first, second)
        self.assertIsNot(proxy_target(first), proxy_target(second))
        self.assertIs(type(first), type(second))

    def test_proxy_wraps_initialized_bean(self):
        self.container.register_hook(AutoProxyHook())
        self.register("stateful", StatefulBean, init_method_name="init")

        bean = self.container.resolve("stateful")

        self.assertEqual(proxy_target(bean).state, "B")
        self.assertEqual(bean.state, "B")

    def test_type_filter_limits_proxying(self):
        spec = InterceptionSpec(MatchPredicate(type_filter=SubclassTypeFilter(Greeter)))
        self.container.register_hook(AutoProxyHook(spec))
        self.register("greeter", GreeterImpl)
        self.register("counter", Counter)

        self.assertTrue(is_proxy(self.container.resolve("greeter")))
        self.assertFalse(is_proxy(self.container.resolve("counter")))

    def test_sealed_bean_left_unwrapped(self):
        self.container.register_hook(AutoProxyHook())
        self.register("flag", bool)

        flag = self.container.resolve("flag")

        self.assertIs(flag, False)

    def test_shared_engine(self):
        engine = ProxyEngine()
        hook = AutoProxyHook(engine=engine)

        self.assertIs(hook.engine, engine)
        self.assertEqual(hook.spec, InterceptionSpec())

    def test_before_init_passes_through(self):
        bean = Counter()

        self.assertIs(AutoProxyHook().before_init(bean, "counter"), bean)


if __name__ == '__main__':
    unittest.main()
