from .base import Indexable
from .buffer import Buffer
from .delayed import DelayedArray, delay, immediate, make_delayed
from .immediate import ImmediateArray
from .storage import Storage, StorageType

__all__ = [
    "Buffer",
    "DelayedArray",
    "ImmediateArray",
    "Indexable",
    "Storage",
    "StorageType",
    "delay",
    "immediate",
    "make_delayed",
]
