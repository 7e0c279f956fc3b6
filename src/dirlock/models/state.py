"""Lock lifecycle states."""

from enum import Enum


class LockState(str, Enum):
    """States a Lock instance moves through during one do-invocation.

    CREATED -> TAKING -> OWNED -> RELEASING -> CREATED. A failed take
    returns straight to CREATED.
    """

    CREATED = "created"
    TAKING = "taking"
    OWNED = "owned"
    RELEASING = "releasing"
