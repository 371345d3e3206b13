"""Typed errors raised by the order, table and request services.

Every error carries an HTTP status and a stable code; the application turns
them into ``{"error": ..., "code": ...}`` responses.
"""


class TablesideError(Exception):
    """Base class for domain errors."""

    status_code = 400
    code = "Error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class NotFoundError(TablesideError):
    """Raised when a referenced entity does not exist."""

    status_code = 404
    code = "NotFound"

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class InvalidTransitionError(TablesideError):
    """Raised for an illegal state change."""

    status_code = 409
    code = "InvalidTransition"

    def __init__(self, entity: str, current: str, requested: str):
        self.entity = entity
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move {entity} from '{current}' to '{requested}'")


class AlreadyFinalizedError(TablesideError):
    """Raised when mutating an entity that reached its terminal state."""

    status_code = 409
    code = "AlreadyFinalized"

    def __init__(self, entity: str, identifier, state: str):
        self.entity = entity
        self.identifier = identifier
        self.state = state
        super().__init__(f"{entity} {identifier} is already {state}")


class DuplicateTableNumberError(TablesideError):
    status_code = 409
    code = "DuplicateTableNumber"

    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Table number {number} already exists")


class TableNotAvailableError(TablesideError):
    status_code = 409
    code = "TableNotAvailable"

    def __init__(self, number: int, status: str):
        self.number = number
        self.status = status
        super().__init__(f"Table {number} is not available (status: {status})")


class TableOccupiedError(TablesideError):
    status_code = 409
    code = "TableOccupied"

    def __init__(self, number: int):
        self.number = number
        super().__init__(f"Table {number} is occupied with an active order")


class InsufficientPointsError(TablesideError):
    status_code = 400
    code = "InsufficientPoints"

    def __init__(self, customer_id: str, available: int, needed: int):
        self.customer_id = customer_id
        self.available = available
        self.needed = needed
        super().__init__(
            f"Insufficient points for '{customer_id}': need {needed}, have {available}"
        )


class ValidationError(TablesideError, ValueError):
    """Malformed input. Also a ValueError so ORM validators can raise it."""

    status_code = 400
    code = "ValidationError"


class ConflictError(TablesideError):
    """Raised when a write carries a stale version number or breaks a unique key."""

    status_code = 409
    code = "Conflict"

    @classmethod
    def stale_version(cls, entity: str, identifier, expected: int, current: int) -> "ConflictError":
        return cls(f"Version conflict on {entity} {identifier}: expected {expected}, current {current}")
