class TaskboardError(Exception):
    """Base class for errors that map to a client-facing HTTP status."""

    status_code = 500


class NotFoundError(TaskboardError):
    status_code = 404


class BusinessRuleViolation(TaskboardError):
    """A well-formed request that domain policy forbids."""

    status_code = 400
