from __future__ import annotations

import numpy as np

from .storage import Storage, StorageType


class _Holders:
    """Holder count of a Storage, shared by every Buffer handle on it."""

    __slots__ = ("storage", "count")

    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.count = 1


class Buffer:
    """A handle on a block of Storage. Handles are created with `allocate`
    (the first holder) or `share` (one more holder of the same block). The
    Storage is closed once every handle has been released, either explicitly
    with `release` or by garbage collection of the handle.
    """

    __slots__ = ("_holders", "__weakref__")

    def __init__(self, holders: _Holders) -> None:
        self._holders = holders

    @classmethod
    def allocate(
        cls,
        size: int,
        dtype: np.dtype = np.float64,
        kind: StorageType = "local",
    ) -> Buffer:
        storage = Storage(kind=kind, size=int(size), dtype=dtype)
        return cls(_Holders(storage))

    def _check_open(self) -> _Holders:
        if self._holders is None:
            raise RuntimeError("Cannot use a buffer handle after it was released.")
        return self._holders

    def share(self) -> Buffer:
        holders = self._check_open()
        holders.count += 1
        return Buffer(holders)

    def release(self) -> None:
        """Give up this handle. Releasing twice is an error."""
        holders = self._check_open()
        self._holders = None
        holders.count -= 1
        if holders.count == 0:
            holders.storage.close()

    @property
    def closed(self) -> bool:
        return self._holders is None

    @property
    def holders(self) -> int:
        return self._check_open().count

    @property
    def storage(self) -> Storage:
        return self._check_open().storage

    @property
    def memory(self) -> np.ndarray:
        """Flat ndarray over every element of the storage."""
        return self._check_open().storage.get_numpy()

    @property
    def size(self) -> int:
        return self.storage.size

    @property
    def dtype(self) -> np.dtype:
        return self.storage.dtype

    @property
    def kind(self) -> str:
        return self.storage.kind

    def shares_storage(self, other: Buffer) -> bool:
        return (
            self._holders is not None
            and other._holders is not None
            and self._holders.storage is other._holders.storage
        )

    def __del__(self) -> None:
        if getattr(self, "_holders", None) is not None:
            self.release()

    def __repr__(self) -> str:
        if self._holders is None:
            return "Buffer(released)"
        return f"Buffer({self._holders.storage!r}, holders={self._holders.count})"
