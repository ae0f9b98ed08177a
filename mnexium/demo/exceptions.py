"""Demo server exceptions.

The global exception handler renders every DemoError as
`{"error": message}` with the class's status code.
"""


class DemoError(Exception):
    """Base exception for demo route errors."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingParameterError(DemoError):
    """Raised when a required query parameter is absent or blank."""

    status_code = 400

    def __init__(self, name: str) -> None:
        super().__init__(f"{name} required")
        self.parameter = name


class PageNotFoundError(DemoError):
    """Raised for unknown pages and static files."""

    status_code = 404

    def __init__(self) -> None:
        super().__init__("Not found")
