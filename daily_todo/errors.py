"""Errors raised by the task and snapshot stores."""


class NotFoundError(LookupError):
    """No task or snapshot matches the requested id or date."""

    def __init__(self, kind: str, key: str) -> None:
        super().__init__(f"{kind} not found: {key}")
        self.kind = kind
        self.key = key


class TaskValidationError(ValueError):
    """A task would end up with invalid fields (e.g. an empty title)."""
