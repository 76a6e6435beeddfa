"""
Typed failures raised by the services.

Every error carries a human-readable ``detail`` that the web client shows
as-is; ``status_code`` is only used when the error crosses the HTTP layer.
"""


class RoomlyError(Exception):
    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class ValidationError(RoomlyError):
    """Malformed or missing input, rejected before touching the store."""

    status_code = 400


class ForbiddenError(RoomlyError):
    status_code = 403


class NotFoundError(RoomlyError):
    status_code = 404


class ConflictError(RoomlyError):
    """Slot already taken, booking window not elapsed, duplicate like..."""

    status_code = 409


class StateError(RoomlyError):
    """The record is not in a state that allows the transition."""

    status_code = 409


class StoreError(RoomlyError):
    status_code = 503
