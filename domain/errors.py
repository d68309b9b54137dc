"""Domain Errors"""
from typing import Optional


class BookingError(Exception):
    """Base error for the booking workflow"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BookingValidationError(BookingError):
    """User input that must never reach the network"""


class ApiError(BookingError):
    """Transport failure or non-2xx response from the AirHotel service"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
