"""Exception hierarchy for FinCoach."""


class FinCoachError(Exception):
    """Base class for all FinCoach errors."""


class SnapshotNotFoundError(FinCoachError):
    """The snapshot file does not exist."""


class SnapshotFormatError(FinCoachError):
    """The snapshot file is not valid JSON or fails validation."""


class InsightUnavailableError(FinCoachError):
    """The text-generation collaborator could not produce a usable reply.

    Raised for missing configuration, transport failures and unparsable
    replies. Never escapes fincoach.insights: callers get fallback values.
    """
