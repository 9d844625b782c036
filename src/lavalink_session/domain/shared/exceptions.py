"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


# === Construction ===


class ConstructionError(DomainError):
    """Raised when a session cannot be constructed at all."""


class NoNodeAvailableError(ConstructionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="NO_NODE_AVAILABLE")


# === Validation ===


class ValidationError(DomainError):
    """Raised when an argument to a player operation is invalid.

    Nothing is dispatched to the node when this is raised.
    """

    def __init__(self, message: str, field: str | None = None, code: str | None = None) -> None:
        super().__init__(message, code=code or "VALIDATION_ERROR")
        self.field = field


class InvalidPlayOptionError(ValidationError):
    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, field=field, code="INVALID_PLAY_OPTION")


class InvalidVolumeError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message, field="volume", code="INVALID_VOLUME")


class InvalidPositionError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message, field="position", code="INVALID_POSITION")


class InvalidRepeatModeError(ValidationError):
    def __init__(self, message: str) -> None:
        super().__init__(message, field="repeat_mode", code="INVALID_REPEAT_MODE")


# === State conflicts ===


class StateConflictError(DomainError):
    """Raised when an operation conflicts with the current player state."""

    def __init__(self, operation: str, message: str, code: str | None = None) -> None:
        super().__init__(message, code=code or "STATE_CONFLICT")
        self.operation = operation


class AlreadyPausedError(StateConflictError):
    def __init__(self, message: str) -> None:
        super().__init__("pause", message, code="ALREADY_PAUSED")


class NotPausedError(StateConflictError):
    def __init__(self, message: str) -> None:
        super().__init__("resume", message, code="NOT_PAUSED")


class QueueEmptyError(StateConflictError):
    def __init__(self, message: str) -> None:
        super().__init__("skip", message, code="QUEUE_EMPTY")


class SkipOutOfRangeError(StateConflictError):
    def __init__(self, message: str, skip_to: int, queue_size: int) -> None:
        super().__init__("skip", message, code="SKIP_OUT_OF_RANGE")
        self.skip_to = skip_to
        self.queue_size = queue_size


class PlayerDestroyedError(StateConflictError):
    def __init__(self, operation: str, message: str) -> None:
        super().__init__(operation, message, code="PLAYER_DESTROYED")


# === Preconditions ===


class PreconditionError(DomainError):
    """Raised when a required precondition of an operation is not met."""


class NoVoiceChannelError(PreconditionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="NO_VOICE_CHANNEL")


class NoTrackError(PreconditionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="NO_TRACK")


class NotSeekableError(PreconditionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="NOT_SEEKABLE")


class TrackNotResolvedError(PreconditionError):
    def __init__(self, message: str) -> None:
        super().__init__(message, code="TRACK_NOT_RESOLVED")


# === Transport ===


class TransportError(DomainError):
    """Raised when delivering a request to a node or the gateway fails."""


class NodeRequestError(TransportError):
    """Raised by the node REST client for failed or rejected requests."""

    def __init__(
        self, node_id: str, message: str, status_code: int | None = None
    ) -> None:
        super().__init__(message, code="NODE_REQUEST_FAILED")
        self.node_id = node_id
        self.status_code = status_code
