"""
Edit Session

The single source of truth for where the next submit goes:

    Idle          -> submit creates a new transaction
    Editing(id)   -> submit updates transaction ``id``

Transitions:
    begin(id)     any        -> Editing(id)
    complete()    Editing    -> Idle
    cancel()      any        -> Idle
    discard(id)   Editing(id) -> Idle   (the edited transaction was deleted)
"""

from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict


class Idle(BaseModel):
    """Next submit creates a new transaction."""
    model_config = ConfigDict(frozen=True)

    state: Literal["idle"] = "idle"


class Editing(BaseModel):
    """Next submit updates ``transaction_id``."""
    model_config = ConfigDict(frozen=True)

    state: Literal["editing"] = "editing"
    transaction_id: int


EditState = Union[Idle, Editing]

IDLE = Idle()


class EditSession:
    """Holds the current EditState. One per LedgerService."""

    def __init__(self):
        self._state: EditState = IDLE

    @property
    def state(self) -> EditState:
        return self._state

    @property
    def is_editing(self) -> bool:
        return isinstance(self._state, Editing)

    @property
    def editing_id(self) -> Optional[int]:
        if isinstance(self._state, Editing):
            return self._state.transaction_id
        return None

    def begin(self, transaction_id: int) -> Editing:
        self._state = Editing(transaction_id=transaction_id)
        return self._state

    def complete(self) -> None:
        """Called after a successful update."""
        if not self.is_editing:
            raise RuntimeError("No edit in progress")
        self._state = IDLE

    def cancel(self) -> Optional[int]:
        """Drop any edit in progress. Returns the id that was being edited."""
        previous = self.editing_id
        self._state = IDLE
        return previous

    def discard(self, transaction_id: int) -> bool:
        """Leave edit mode if ``transaction_id`` is the one being edited."""
        if self.editing_id == transaction_id:
            self._state = IDLE
            return True
        return False

    def __repr__(self) -> str:
        return f"EditSession({self._state!r})"
