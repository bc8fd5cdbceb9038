"""
Errors raised by the reservation workflow.

Blueprints translate them into HTTP responses: validation errors go back to
the form, not-found errors become 404, the rest surface as 500.
"""

EMPTY_SELECTION_MESSAGE = (
    "At least one product must have a quantity greater than zero."
)
AMOUNT_TOO_LARGE_MESSAGE = "The reservation total is too large."


class ReservationError(Exception):
    """Base class for reservation workflow failures."""


class ReservationValidationError(ReservationError):
    def __init__(self, errors):
        self.errors = errors
        super().__init__(
            "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())
        )


class EmptySelectionError(ReservationValidationError):
    def __init__(self):
        super().__init__({"products": [EMPTY_SELECTION_MESSAGE]})


class AmountTooLargeError(ReservationValidationError):
    def __init__(self):
        super().__init__({"products": [AMOUNT_TOO_LARGE_MESSAGE]})


class ProductNotFoundError(ReservationError):
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product ID {product_id} not found")


class TransactionKeyExhaustedError(ReservationError):
    def __init__(self, attempts):
        self.attempts = attempts
        super().__init__(
            f"Could not generate a unique transaction key after {attempts} attempts"
        )


class InvalidStatusTransitionError(ReservationError):
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(
            f"Cannot move order from '{current.value}' to '{target.value}'"
        )
