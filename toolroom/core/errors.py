# toolroom/core/errors.py


class NotFoundError(LookupError):
    """A referenced row or reference-table entry does not exist."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DuplicateError(ValueError):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
