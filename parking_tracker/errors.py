# parking_tracker/errors.py
"""
Error taxonomy for the parking lot.

Every error is recoverable by user action. Registry operations raise them
before touching any state; the HTTP layer maps `status_code` onto the
response (see the handler in main.py).
"""


class ParkingError(Exception):
    """Base error for every registry and persistence failure."""
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def name(self) -> str:
        return type(self).__name__


class CapacityReached(ParkingError):
    """The lot already holds as many spots as its capacity allows."""
    status_code = 409


class EmptyRegistry(ParkingError):
    """There is no spot left to remove."""
    status_code = 409


class InvalidCapacity(ParkingError):
    """Capacity input is not a positive integer."""
    status_code = 422


class IndexOutOfRange(ParkingError):
    """No spot exists at the requested index."""
    status_code = 404


class InvalidVehicleNumber(ParkingError):
    """Vehicle number is empty after trimming whitespace."""
    status_code = 422


class PersistenceUnavailable(ParkingError):
    """The snapshot slot could not be read or written."""
    status_code = 503
