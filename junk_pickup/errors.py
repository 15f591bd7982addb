"""
This module contains the errors raised by the junk pickup services.
"""


class BookingError(Exception):
    """
    Base class for errors that are reported to API clients.

    Attributes:
        message (str): The message returned to the client.
        status_code (int): The HTTP status used for the response.
    """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(BookingError):
    """Missing or malformed input, detected before the store is touched."""
    status_code = 400


class ItemNotFound(BookingError):
    """A cart line references an item that is not in the catalog."""
    status_code = 400

    def __init__(self, item_id: str):
        super().__init__("Item not found")
        self.item_id = item_id


class NotFound(BookingError):
    """The requested booking does not exist."""
    status_code = 404


class InternalFailure(BookingError):
    """Unexpected persistence failure. Details are logged, never returned."""
    status_code = 500

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
