class NotFoundError(LookupError):
    """Raised when a referenced record does not exist."""
    pass


class BookingNotFoundError(NotFoundError):
    def __init__(self, booking_id: str) -> None:
        super().__init__(f"Booking not found: {booking_id}")
        self.booking_id = booking_id


class ProviderNotFoundError(NotFoundError):
    def __init__(self, provider_id: str) -> None:
        super().__init__(f"Provider not found: {provider_id}")
        self.provider_id = provider_id


class DispatchError(RuntimeError):
    """Raised when auto-dispatch has no provider to choose from."""
    pass
