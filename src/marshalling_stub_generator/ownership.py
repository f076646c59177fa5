"""Reference model of the ownership protocol of transfer-policy opaque types.

A real-type instance whose opaque definition uses the transfer policy holds at most one
intermediate pointer. `OpaqueSlot` follows the contract that the generated
`from_intermediate` and `release` declarations document, and reports violations with
`OwnershipError`. Like the generated functions, it does no locking.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class OwnershipError(RuntimeError):
    """Raised when the ownership protocol of a slot is violated."""

    pass


class OwnershipState(Enum):
    """Whether a slot currently owns an intermediate pointer."""

    UNOWNED = "unowned"
    OWNED = "owned"


@dataclass(eq=False)
class OwnedHandle:
    """Proof of a successful `from_intermediate`, consumed by the matching `release`."""

    slot: OpaqueSlot
    consumed: bool = False


class OpaqueSlot(Generic[T]):
    """The intermediate pointer held by one real-type instance."""

    def __init__(self) -> None:
        self._pointer: T | None = None
        self._handle: OwnedHandle | None = None

    @property
    def state(self) -> OwnershipState:
        return OwnershipState.OWNED if self._handle is not None else OwnershipState.UNOWNED

    @property
    def owned(self) -> bool:
        return self._handle is not None

    def to_intermediate(self) -> T:
        """Return the stored intermediate without changing ownership.

        Raises:
            OwnershipError: If the slot owns no intermediate.
        """
        if self._handle is None:
            raise OwnershipError("to_intermediate called on a slot that owns no intermediate")
        return self._pointer  # type: ignore[return-value]

    def from_intermediate(self, pointer: T) -> OwnedHandle | None:
        """Take ownership of an intermediate pointer.

        Args:
            pointer (T): The intermediate to store.

        Returns:
            OwnedHandle | None: A handle for the new ownership, or None if the slot already
            owns a pointer. In that case the caller keeps ownership of `pointer`.
        """
        if self._handle is not None:
            return None

        self._pointer = pointer
        self._handle = OwnedHandle(slot=self)
        return self._handle

    def release(self, handle: OwnedHandle | None = None) -> T:
        """Give ownership of the stored pointer back to the caller.

        Args:
            handle (OwnedHandle | None): The handle returned by `from_intermediate`. When
                given, it must be the handle of the current ownership.

        Returns:
            T: The pointer the caller is now responsible for.

        Raises:
            OwnershipError: If the slot owns nothing, or the handle is stale or foreign.
        """
        if handle is not None:
            if handle.slot is not self:
                raise OwnershipError("release called with a handle of another slot")
            if handle.consumed or handle is not self._handle:
                raise OwnershipError("release called with a handle that was already released")

        if self._handle is None:
            raise OwnershipError("release called on a slot that owns no intermediate")

        pointer = self._pointer
        self._handle.consumed = True
        self._handle = None
        self._pointer = None
        return pointer  # type: ignore[return-value]
