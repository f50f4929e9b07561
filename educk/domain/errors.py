# educk/domain/errors.py


class EduckError(Exception):
    """Base of all domain errors. Routers map ``status_code`` onto the HTTP response."""

    status_code = 400
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class NotFoundError(EduckError):
    status_code = 404
    default_message = "Resource not found"


class EmptyCartError(EduckError):
    default_message = "Your cart is empty"


class InvalidCouponError(EduckError):
    default_message = "Invalid or expired coupon"


class InvalidPaymentMethodError(EduckError):
    default_message = "Invalid payment method"


class AlreadyEnrolledError(EduckError):
    default_message = "You are already enrolled in this course"


class CourseAlreadyInCartError(EduckError):
    default_message = "This course is already in your cart"


class CourseNotInCartError(EduckError):
    default_message = "This course is not in your cart"


class InvalidStatusTransitionError(EduckError):
    default_message = "Status transition not allowed"


class ReviewAlreadyExistsError(EduckError):
    default_message = "You have already reviewed this course"


class CategoryAlreadyExistsError(EduckError):
    default_message = "A category with this name already exists"


class ForbiddenError(EduckError):
    status_code = 403
    default_message = "Access denied"


class CheckoutInProgressError(EduckError):
    status_code = 409
    default_message = "A checkout for this cart is already in progress"


class PersistenceError(EduckError):
    status_code = 500
    default_message = "Storage failure"
