"""Error types recovered at the view boundary.

Form validation errors are WTForms' own and never reach this module.
"""


class EventPlannerError(Exception):
    """Base class for errors raised by the store and session layers."""


class RemoteError(EventPlannerError):
    """A store or authentication operation failed. Not retried."""


class DecodeError(EventPlannerError):
    """Data read back from the store does not match the event schema."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or []
