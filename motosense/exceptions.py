"""Domain exceptions.

Every error carries the HTTP status and a stable ``code`` so the API layer
can render it without knowing the concrete type.
"""

from fastapi import status


class MotoSenseError(Exception):
    """Base class for domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(MotoSenseError):
    """Missing or invalid bearer credential."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"


class ValidationError(MotoSenseError):
    """Malformed input record."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, entity_id: str | None = None):
        super().__init__(message)
        self.entity_id = entity_id


class NotFoundError(MotoSenseError):
    """Referenced race, rider, prediction or source does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: str | int):
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class SourceInactive(MotoSenseError):
    """Data source exists but is disabled."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "SOURCE_INACTIVE"


class RateLimitExceeded(MotoSenseError):
    """Too many requests against a data source."""

    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMIT_EXCEEDED"

    def __init__(self, source_id: str, retry_after: int = 60):
        super().__init__(f"Rate limit exceeded for source {source_id}")
        self.source_id = source_id
        self.retry_after = retry_after


class DuplicatePrediction(MotoSenseError):
    """User already predicted this race."""

    status_code = status.HTTP_409_CONFLICT
    code = "DUPLICATE_PREDICTION"

    def __init__(self, user_id: str, race_id: str):
        super().__init__(f"User {user_id} already submitted a prediction for race {race_id}")
        self.user_id = user_id
        self.race_id = race_id


class PredictionLocked(MotoSenseError):
    """Race no longer (or not yet) accepts predictions."""

    status_code = status.HTTP_423_LOCKED
    code = "PREDICTION_LOCKED"


class RoundStateError(MotoSenseError):
    """Round state machine precondition failure."""

    status_code = status.HTTP_409_CONFLICT
    code = "ROUND_STATE_ERROR"


class NoRoundOpen(RoundStateError):
    code = "NO_ROUND_OPEN"

    def __init__(self, message: str = "No round is currently open"):
        super().__init__(message)


class NoMoreRounds(RoundStateError):
    code = "NO_MORE_ROUNDS"

    def __init__(self, message: str = "No upcoming round left to open", closed_race_id: str | None = None):
        super().__init__(message)
        self.closed_race_id = closed_race_id


class NoPreviousRound(RoundStateError):
    code = "NO_PREVIOUS_ROUND"

    def __init__(self, message: str = "No completed round before the open one"):
        super().__init__(message)


class RoundConflict(RoundStateError):
    """Round state changed between read and write."""

    code = "ROUND_CONFLICT"


class SyncFetchError(MotoSenseError):
    """Fetching a source failed after all retries."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "SYNC_FETCH_ERROR"

    def __init__(self, url: str, reason: str, attempts: int = 0):
        super().__init__(f"Fetching {url} failed after {attempts} attempt(s): {reason}")
        self.url = url
        self.reason = reason
        self.attempts = attempts
