from __future__ import annotations

import os
from multiprocessing.shared_memory import SharedMemory as MpSharedMem
from typing import Literal
from weakref import WeakMethod, finalize

import numpy as np

import ndlattice.logger as logger

StorageType = Literal["local", "shared"]


class Storage:
    """A fixed block of `size` elements of a single dtype, exposed as a flat
    ndarray. Storage never moves or resizes, so views into it stay valid
    until it is closed.
    """

    _subclasses: dict[str, type[Storage]] = {}
    kind: StorageType
    _size: int
    _dtype: np.dtype

    def __init_subclass__(cls, *, kind: str, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls._subclasses[kind] = cls

    def __new__(cls, *args, kind: str | None = None, **kwargs) -> Storage:
        if kind is None:
            if cls is Storage:
                # forbidden to instantiate parent class directly
                raise TypeError("Storage requires kind to be specified.")
            subcls = cls
        else:
            try:
                subcls = cls._subclasses[kind]
            except KeyError:
                raise ValueError(f"No storage registered under {kind=}")
        return super().__new__(subcls)

    def __init__(self, *, kind: str, size: int, dtype: np.dtype) -> None:
        raise NotImplementedError

    @property
    def size(self) -> int:
        return self._size

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def closed(self) -> bool:
        return self._closed

    def get_numpy(self) -> np.ndarray:
        raise NotImplementedError

    def close(self, force: bool = False) -> None:
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(size={self._size}, dtype={self._dtype})"


class LocalMemory(Storage, kind="local"):
    kind = "local"

    def __init__(self, *, kind: str = "local", size: int, dtype: np.dtype) -> None:
        self._size = size
        self._dtype = np.dtype(dtype)
        self._memory = np.empty(size, self._dtype)
        self._closed = False
        logger.debug(f"Allocated local storage of {size} elements of {self._dtype}")

    def get_numpy(self) -> np.ndarray:
        return self._memory

    def close(self, force: bool = False) -> None:
        if self._closed:
            return
        self._closed = True
        # let the garbage collector reclaim the memory once no numpy views
        # reference it any more
        del self._memory
        logger.debug(f"Released local storage of {self._size} elements")


def call_weakmethod(weakmethod: WeakMethod, *args, **kwargs) -> None:
    method = weakmethod()
    if method is not None:
        return method(*args, **kwargs)


class SharedMemory(Storage, kind="shared"):
    """Storage in OS shared memory, unlinked when closed by the process that
    created it (or when garbage collected).
    """

    kind = "shared"
    _shmem: MpSharedMem

    def __init__(self, *, kind: str = "shared", size: int, dtype: np.dtype) -> None:
        dtype = np.dtype(dtype)
        if dtype.hasobject:
            raise ValueError(f"Cannot place elements of {dtype} in shared memory.")
        self._size = size
        self._dtype = dtype
        self._closed = False

        # SharedMemory refuses to create a segment of 0 bytes
        nbytes = max(size * dtype.itemsize, 1)
        self._shmem = MpSharedMem(create=True, size=nbytes)
        self._ndarray = np.ndarray(shape=(size,), dtype=dtype, buffer=self._shmem.buf)

        logger.debug(
            f"Process {os.getpid()} allocated {self._shmem.size} bytes of shared "
            f"memory with name {self._shmem.name}"
        )

        # keep track of which process created this (presumably the main process)
        self._spawning_pid = os.getpid()

        # create a finalizer to ensure that shared memory is cleaned up
        self._finalizer = finalize(self, call_weakmethod, WeakMethod(self.close))

    def get_numpy(self) -> np.ndarray:
        return self._ndarray

    def close(self, force: bool = False) -> None:
        if self._closed:
            return
        self._closed = True
        # the segment cannot be closed while an ndarray still exports its
        # buffer
        del self._ndarray
        try:
            self._shmem.close()
        except BufferError:
            logger.warn(
                f"Shared memory {self._shmem.name} is still referenced by a "
                f"numpy array and will be closed when that array is deleted."
            )
        pid = os.getpid()
        if force or pid == self._spawning_pid:
            # unlink must be called once and only once to release shared memory
            self._shmem.unlink()
            # this debug statement may not print if the finalizer is called during
            # process shutdown
            logger.debug(f"Process {pid} unlinked shared memory {self._shmem.name}")
