"""Exception hierarchy shared by the store, services and routers."""

from typing import Optional, Sequence


class DeviceDeskError(Exception):
    """Base class for application errors."""


class StoreWriteError(DeviceDeskError):
    """A backend write failed; the initiating action must report it."""

    def __init__(self, operation: str, detail: Optional[str] = None):
        self.operation = operation
        self.detail = detail
        message = f"Failed to {operation}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class IntegrityViolation(StoreWriteError):
    """The backing store rejected a write that breaks a reference."""


class EntityNotFound(DeviceDeskError):
    def __init__(self, kind: str, entity_id: str):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class TicketValidationError(DeviceDeskError):
    """Mandatory fields are missing; raised before any store call."""

    def __init__(self, message: str, fields: Sequence[str] = ()):
        self.message = message
        self.fields = list(fields)
        super().__init__(message)
