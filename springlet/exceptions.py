"""
Springlet Exceptions

Custom exception hierarchy for the Springlet IoC container
"""


class SpringletError(Exception):
    """
    Base exception for all Springlet errors.

    All Springlet-specific exceptions inherit from this class.
    You can catch this to handle any container or proxy error generically.

    Example:
        >>> try:
        ...     service = context.get_bean("userService")
        ... except SpringletError as e:
        ...     print(f"IoC error: {e}")
    """

    pass


class DefinitionNotFoundError(SpringletError):
    """
    Raised when a requested bean name is not registered in the container.

    Common causes:
        - Forgetting to register the definition
        - Typo in the bean name
        - Relying on a derived name that differs from the expected one
          (``UserService`` is registered as ``userService``)

    Solution:
        Register the definition before resolving it::

            container.register("database", Definition("database", Database))
            db = container.resolve("database")

    Note:
        The error message includes the registered names to help
        identify available beans.
    """

    pass


class InstantiationError(SpringletError):
    """
    Raised when a bean's target type cannot be default-constructed.

    Common causes:
        - ``__init__`` requires positional arguments
        - The target is abstract (unimplemented abstract methods)
        - The constructor itself raised

    Solution:
        Give the target type a zero-argument constructor and move
        collaborator wiring into an init callback::

            class Repository:
                def __init__(self):
                    self.db = None

                def init(self):
                    self.db = connect()

    Note:
        The original exception is chained as ``__cause__``.
    """

    pass


class LifecycleCallbackError(SpringletError):
    """
    Raised when a named init or destroy callback is missing or raises.

    Common causes:
        - ``init_method_name`` does not match a method on the bean
        - The named attribute is not callable
        - The callback itself raised an exception

    Solution:
        Make sure the callback exists and takes no arguments::

            Definition("cache", Cache, init_method_name="warm_up")
    """

    pass


class HookError(SpringletError):
    """
    Raised when a lifecycle hook fails while processing a bean.

    Both ``before_init`` and ``after_init`` failures are wrapped in this
    error. Springlet's own errors raised inside a hook (for example a
    ``ProxyConstructionError``) propagate unchanged.

    Note:
        A hook returning ``None`` is not an error. It deliberately
        suppresses the remaining processing for that bean.
    """

    pass


class NoContractError(SpringletError):
    """
    Raised when a dispatch proxy is requested for a type without an
    abstract contract.

    Dispatch proxies are built purely from the abstract methods that the
    target type inherits from its interfaces. A plain concrete class has
    none.

    Solution:
        Declare an interface for the bean::

            class Greeter(ABC):
                @abstractmethod
                def greet(self, name): ...

            class GreeterImpl(Greeter):
                def greet(self, name):
                    return f"hello {name}"

        Or use the subclass strategy for concrete types.
    """

    pass


class ProxyConstructionError(SpringletError):
    """
    Raised when a subclass proxy cannot be generated for the target type.

    Common causes:
        - The class is marked with ``@typing.final``
        - The type is a builtin that forbids subclassing (``bool``, ``NoneType``)
        - The type's metaclass rejects the generated subclass

    Note:
        No half-built proxy is ever returned. The caller decides whether
        to fall back to the raw instance.
    """

    pass


class AmbiguousOrNotFoundError(SpringletError):
    """
    Raised when a lookup by type matches zero beans or more than one.

    Solution:
        Look the bean up by name, optionally with a type check::

            repo = context.get_bean("userRepository", Repository)
    """

    pass


class TypeMismatchError(SpringletError):
    """
    Raised when a bean resolved by name is not an instance of the required
    type.

    Common causes:
        - Asking for the implementation class of a bean that was wrapped in
          a dispatch proxy (which only implements the interfaces)
        - Wrong bean name
    """

    pass


class CircularDependencyError(SpringletError):
    """
    Raised when a singleton's creation re-enters its own resolution.

    This happens when an init callback or a hook resolves (directly or
    indirectly) the bean that is currently being created on the same
    thread.

    Example of circular dependency::

        class ServiceA:
            def init(self):
                self.b = container.resolve("serviceB")

        class ServiceB:
            def init(self):
                self.a = container.resolve("serviceA")  # Circular!

    Solution:
        Break the cycle by resolving lazily at call time instead of
        during initialization.
    """

    pass


class ContainerClosedError(SpringletError):
    """
    Raised when attempting to use a closed container or context.

    Solution:
        Create a new container instead of reusing a closed one::

            with AnnotationConfigContext(Database) as context:
                db = context.get_bean("database")
            # Context is now closed
    """

    pass
