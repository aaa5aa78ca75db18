class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class InvalidRangeError(ValueError):
    pass


class InvalidArgumentError(ValueError):
    pass


class RoomUnavailableError(Exception):
    def __init__(self, room_id: str, message: str = None):
        self.room_id = room_id
        super().__init__(message or f"room '{room_id}' is not available for the selected dates")


class InvalidStateError(Exception):
    pass


class StorageError(Exception):
    pass


class PaymentProviderError(Exception):
    pass
