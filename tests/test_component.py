"""
Component Registration Tests

Tests for the @component marker, bean name derivation, the
ComponentDefinitionReader and AnnotationConfigContext.
"""

import sys
import os
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from springlet import (
    AnnotationConfigContext,
    AutoProxyHook,
    BeanScope,
    ComponentDefinitionReader,
    DefinitionRegistry,
    component,
    derive_bean_name,
    is_proxy,
)
from springlet.component import get_component_metadata
from conftest import LogCapture
from fixtures import Greeter


@component
class UserService:
    def __init__(self):
        self.state = "A"

    def init(self):
        self.state = "B"


@component("repo", scope=BeanScope.PROTOTYPE)
class UserRepository:
    pass


@component(lazy=True, init_method="init", destroy_method="close")
class ConnectionPool:
    closed = []

    def init(self):
        self.open = True

    def close(self):
        ConnectionPool.closed.append(self)


@component
class GreetingService(Greeter):
    def greet(self, name, punctuation="!"):
        return f"Hi, {name}{punctuation}"

    def fail(self, message):
        raise ValueError(message)


@component
class ProxyingHook(AutoProxyHook):
    pass


class PlainClass:
    pass


class URLResolver:
    pass


class TestNameDerivation(unittest.TestCase):

    def test_first_character_lowercased(self):
        self.assertEqual(derive_bean_name(UserService), "userService")
        self.assertEqual(derive_bean_name(PlainClass), "plainClass")

    def test_remainder_unchanged(self):
        self.assertEqual(derive_bean_name(URLResolver), "uRLResolver")


class TestComponentMarker(unittest.TestCase):

    def test_bare_decorator(self):
        metadata = get_component_metadata(UserService)

        self.assertIsNone(metadata.name)
        self.assertEqual(metadata.scope, BeanScope.SINGLETON)
        self.assertFalse(metadata.lazy)

    def test_decorator_with_arguments(self):
        metadata = get_component_metadata(ConnectionPool)

        self.assertTrue(metadata.lazy)
        self.assertEqual(metadata.init_method, "init")
        self.assertEqual(metadata.destroy_method, "close")

    def test_metadata_is_not_inherited(self):
        class SubService(UserService):
            pass

        self.assertIsNone(get_component_metadata(SubService))
        self.assertIsNone(get_component_metadata(PlainClass))


class TestComponentDefinitionReader(unittest.TestCase):

    def setUp(self):
        self.registry = DefinitionRegistry()
        self.reader = ComponentDefinitionReader(self.registry)

    def test_registers_with_derived_name(self):
        definition = self.reader.register_component(UserService)

        self.assertEqual(definition.name, "userService")
        self.assertIs(self.registry.get("userService"), definition)

    def test_registers_with_explicit_name_and_scope(self):
        self.reader.register(UserRepository)

        definition = self.registry.get("repo")
        self.assertEqual(definition.scope, BeanScope.PROTOTYPE)
        self.assertIs(definition.target_type, UserRepository)

    def test_callbacks_carried_over(self):
        definition = self.reader.register_component(ConnectionPool)

        self.assertTrue(definition.lazy)
        self.assertEqual(definition.init_method_name, "init")
        self.assertEqual(definition.destroy_method_name, "close")

    def test_unmarked_classes_are_skipped(self):
        with LogCapture() as logs:
            self.assertIsNone(self.reader.register_component(PlainClass))

        self.assertEqual(self.registry.count(), 0)
        self.assertTrue(any("PlainClass" in m for m in logs.messages))


class TestAnnotationConfigContext(unittest.TestCase):

    def setUp(self):
        ConnectionPool.closed = []

    def test_constructor_refreshes(self):
        with AnnotationConfigContext(UserService, UserRepository) as context:
            self.assertTrue(context.container.is_singleton_cached("userService"))
            self.assertIsInstance(context.get_bean("repo"), UserRepository)
            self.assertIsNot(context.get_bean("repo"), context.get_bean("repo"))

    def test_register_then_refresh(self):
        context = AnnotationConfigContext()
        context.register(ConnectionPool, PlainClass)
        context.refresh()

        self.assertEqual(context.container.definition_names(), ["connectionPool"])
        self.assertFalse(context.container.is_singleton_cached("connectionPool"))

        pool = context.get_bean(ConnectionPool)
        self.assertTrue(pool.open)

        context.close()
        self.assertEqual(ConnectionPool.closed, [pool])

    def test_component_hook_proxies_components(self):
        with AnnotationConfigContext(ProxyingHook, GreetingService, UserService) as context:
            greeter = context.get_bean(Greeter)

            self.assertTrue(is_proxy(greeter))
            self.assertFalse(is_proxy(context.get_bean("proxyingHook")))
            with LogCapture() as logs:
                self.assertEqual(greeter.greet("ann"), "Hi, ann!")
            self.assertEqual(logs.markers(), ["Before method: greet", "After method: greet"])


if __name__ == '__main__':
    unittest.main()
