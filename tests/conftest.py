"""
Test Configuration and Utilities

Common base classes and helper functions for Springlet tests
"""

import unittest
from typing import List, Optional, Type

from loguru import logger

from springlet import BeanScope, Definition, SpringletContainer


class LogCapture:
    """
    Collects loguru messages emitted inside a ``with`` block.

    Example:
        >>> with LogCapture() as logs:
        ...     proxy.greet("bob")
        >>> logs.markers()
        ['Before method: greet', 'After method: greet']
    """

    def __init__(self, level: str = "DEBUG"):
        self.level = level
        self.messages: List[str] = []
        self._handler_id: Optional[int] = None

    def __enter__(self) -> 'LogCapture':
        self._handler_id = logger.add(
            lambda message: self.messages.append(message.record["message"]),
            level=self.level,
            format="{message}",
        )
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        logger.remove(self._handler_id)
        return False

    def markers(self) -> List[str]:
        """Only the interception markers, in emission order."""
        return [
            m for m in self.messages
            if m.startswith("Before method: ") or m.startswith("After method: ")
        ]


class SpringletTestCase(unittest.TestCase):
    """
    Base test case class for Springlet tests.

    Creates a fresh container before each test and closes it afterwards.
    """

    def setUp(self):
        """Create an isolated container for each test"""
        self.container = SpringletContainer()

    def tearDown(self):
        """Close the container after each test"""
        if not self.container.is_closed:
            self.container.close()

    def register(
        self,
        name: str,
        target_type: Type,
        scope: BeanScope = BeanScope.SINGLETON,
        **kwargs,
    ) -> Definition:
        """Register a definition on the test container and return it."""
        definition = Definition(name, target_type, scope=scope, **kwargs)
        self.container.register(name, definition)
        return definition
