class TicketingError(Exception):
    """Base class for every business rule failure raised by the services.

    The message always names the precondition that failed, routes send it
    back to the client as is.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(TicketingError):
    pass


class AlreadyUsedError(TicketingError):
    pass


class InactiveError(TicketingError):
    pass


class ConstraintViolationError(TicketingError):
    pass


class DuplicateCodeError(ConstraintViolationError):
    pass


class InvalidQuantityError(TicketingError):
    pass


class InvalidPaginationError(TicketingError):
    pass


class ExhaustedRetriesError(TicketingError):
    pass


class BatchCreateFailedError(TicketingError):
    pass
