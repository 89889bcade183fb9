from enum import Enum


class ErrorKind(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    DUPLICATE_NAME = "DUPLICATE_NAME"
    NOT_FOUND = "NOT_FOUND"
    TRANSPORT_FAILURE = "TRANSPORT_FAILURE"


class PantryError(Exception):
    """Raised by the image asset client; store operations return results instead."""

    def __init__(self, kind: ErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return f"PantryError({self.kind.value}, {self.detail!r})"


HTTP_STATUS_BY_KIND = {
    ErrorKind.INVALID_INPUT: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.DUPLICATE_NAME: 409,
    ErrorKind.TRANSPORT_FAILURE: 503,
}
