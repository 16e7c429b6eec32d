"""
Registry Tests

Tests for DefinitionRegistry storage, ordering and thread safety.
"""

import threading
import unittest

from springlet import Definition, DefinitionRegistry


class Database:
    pass


class CacheService:
    pass


class TestDefinitionRegistry(unittest.TestCase):

    def setUp(self):
        self.registry = DefinitionRegistry()

    def test_register_and_get(self):
        """A registered definition is returned by get()."""
        definition = Definition("database", Database)
        self.registry.register("database", definition)

        self.assertIs(self.registry.get("database"), definition)
        self.assertTrue(self.registry.contains("database"))
        self.assertIn("database", self.registry)

    def test_get_missing_returns_none(self):
        """get() signals a miss with None instead of raising."""
        self.assertIsNone(self.registry.get("missing"))
        self.assertFalse(self.registry.contains("missing"))

    def test_names_in_insertion_order(self):
        """names() preserves insertion order."""
        for name in ("zeta", "alpha", "mid"):
            self.registry.register(name, Definition(name, Database))

        self.assertEqual(self.registry.names(), ["zeta", "alpha", "mid"])
        self.assertEqual(self.registry.count(), 3)
        self.assertEqual(len(self.registry), 3)

    def test_register_overwrites(self):
        """Registering an existing name replaces the definition in place."""
        self.registry.register("first", Definition("first", Database))
        self.registry.register("service", Definition("service", Database))
        replacement = Definition("service", CacheService)
        self.registry.register("service", replacement)

        self.assertIs(self.registry.get("service"), replacement)
        self.assertEqual(self.registry.names(), ["first", "service"])

    def test_empty_name_rejected(self):
        """Names must be non-empty."""
        with self.assertRaises(ValueError):
            self.registry.register("", Definition("", Database))
        with self.assertRaises(ValueError):
            self.registry.register(None, Definition("x", Database))  # type: ignore[arg-type]

    def test_concurrent_registration(self):
        """Concurrent writers never lose a definition."""
        def register_many(prefix):
            for i in range(100):
                name = f"{prefix}-{i}"
                self.registry.register(name, Definition(name, Database))

        threads = [threading.Thread(target=register_many, args=(f"t{n}",)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(self.registry.count(), 800)


if __name__ == '__main__':
    unittest.main()
