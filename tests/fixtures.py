"""
Test Fixtures

Common test classes used across test modules
"""

import threading
from abc import ABC, abstractmethod

from springlet import LifecycleHook


class Greeter(ABC):
    """Interface with two contract operations"""

    @abstractmethod
    def greet(self, name: str, punctuation: str = "!") -> str:
        pass

    @abstractmethod
    def fail(self, message: str) -> None:
        pass


class GreeterImpl(Greeter):
    """Implementation with an extra method outside the contract"""

    def __init__(self):
        self.calls = 0

    def greet(self, name: str, punctuation: str = "!") -> str:
        self.calls += 1
        return f"Hello, {name}{punctuation}"

    def fail(self, message: str) -> None:
        raise ValueError(message)

    def shout(self, name: str) -> str:
        return self.greet(name).upper()


class Counter:
    """Concrete type without an abstract contract"""

    def __init__(self):
        self.count = 0

    def increment(self, by: int = 1) -> int:
        self.count += by
        return self.count

    def boom(self) -> None:
        raise RuntimeError("boom")

    def _internal(self) -> str:
        return "internal"


class StatefulBean:
    """Bean whose init callback flips its state from A to B"""

    def __init__(self):
        self.state = "A"

    def init(self):
        self.state = "B"


class DisposableBean:
    """Bean that records its destroy callback in a shared journal"""

    journal: list = []

    def __init__(self):
        self.closed = False

    def shutdown(self):
        self.closed = True
        DisposableBean.journal.append(type(self).__name__)


class OtherDisposableBean(DisposableBean):
    pass


class NeedsArguments:
    """Cannot be default-constructed"""

    def __init__(self, url: str):
        self.url = url


class InstrumentedBean:
    """Counts constructor invocations across threads"""

    instances = 0
    _lock = threading.Lock()

    def __init__(self):
        with InstrumentedBean._lock:
            InstrumentedBean.instances += 1

    @classmethod
    def reset(cls):
        with cls._lock:
            cls.instances = 0


class RecordingHook(LifecycleHook):
    """Records every call it receives into a shared journal"""

    def __init__(self, label: str = "hook", journal: list = None):
        self.label = label
        self.journal = journal if journal is not None else []

    def before_init(self, bean, name):
        self.journal.append((self.label, "before", name))
        return bean

    def after_init(self, bean, name):
        self.journal.append((self.label, "after", name))
        return bean
