"""Domain errors raised by services and repositories.

The HTTP layer translates these into responses; nothing below the router
knows about status codes.
"""


class ProductsError(Exception):
    """Base class for errors raised by the products module."""


class UnprocessableEntityError(ProductsError):
    """A business rule rejected the request.

    ``errors`` maps the offending field to a stable, machine-readable reason
    code such as ``{"email": "emailAlreadyExists"}``.
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__(", ".join(f"{field}: {code}" for field, code in errors.items()))


class ConflictError(ProductsError):
    """The storage layer rejected a write because of a uniqueness constraint."""

    def __init__(self, message: str = "Uniqueness constraint violated") -> None:
        self.message = message
        super().__init__(message)
