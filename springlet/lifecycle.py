"""
Bean scope and lifecycle state enums
"""

from enum import Enum


class BeanScope(Enum):
    """Scope of a bean definition"""
    SINGLETON = "singleton"
    PROTOTYPE = "prototype"


class BeanState(Enum):
    """Lifecycle state of a singleton bean inside one container"""
    UNREGISTERED = "UNREGISTERED"
    DEFINED = "DEFINED"
    INSTANTIATING = "INSTANTIATING"
    PRE_INIT = "PRE_INIT"
    INITIALIZED_RAW = "INITIALIZED_RAW"
    POST_INIT = "POST_INIT"
    CACHED = "CACHED"
