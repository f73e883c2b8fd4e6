from __future__ import annotations


class ReservationError(Exception):
    """Base class for every failure the engine reports to its caller."""

    code = "RESERVATION_ERROR"


class ValidationError(ReservationError):
    code = "VALIDATION_ERROR"


class ConflictError(ReservationError):
    code = "CONFLICT"


class InvalidTransitionError(ReservationError):
    code = "INVALID_TRANSITION"


class NotFoundError(ReservationError):
    code = "NOT_FOUND"


class PersistenceError(ReservationError):
    code = "PERSISTENCE_ERROR"


class InvalidStatusError(PersistenceError):
    """A stored status value does not name any known status."""

    code = "INVALID_STORED_STATUS"
