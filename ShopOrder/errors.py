"""Failure kinds raised by the service layer.

Every error carries the HTTP status it is reported with; ``main`` turns them
into ``{"detail": message}`` responses.
"""
from fastapi import status


class ShopError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFound(ShopError):
    status_code = status.HTTP_404_NOT_FOUND


class Conflict(ShopError):
    status_code = status.HTTP_409_CONFLICT


class InvalidCredentials(ShopError):
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message)


class Unauthorized(ShopError):
    status_code = status.HTTP_403_FORBIDDEN


class InvalidQuantity(ShopError):
    pass


class InvalidPrice(ShopError):
    pass


class UploadRejected(ShopError):
    pass


class UploadFailed(ShopError):
    status_code = status.HTTP_502_BAD_GATEWAY
