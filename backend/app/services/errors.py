"""
Domain errors raised by services

Routes catch these and answer 400 with the message.
"""


class ServiceError(Exception):
    """Base error for business rule violations"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class StockError(ServiceError):
    pass


class CheckoutError(ServiceError):
    pass


class PaymentError(ServiceError):
    pass


class StatusTransitionError(ServiceError):
    pass
