# educk/domain/enums.py
from enum import Enum

from educk.domain.errors import InvalidStatusTransitionError


class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class CourseLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"


class PaymentMethod(str, Enum):
    CREDIT_CARD = "credit_card"
    PIX = "pix"
    BOLETO = "boleto"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


ORDER_STATUS_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

PAYMENT_STATUS_TRANSITIONS = {
    PaymentStatus.PENDING: {PaymentStatus.COMPLETED, PaymentStatus.FAILED},
    PaymentStatus.FAILED: {PaymentStatus.COMPLETED},
    PaymentStatus.COMPLETED: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}

COURSE_STATUS_TRANSITIONS = {
    CourseStatus.DRAFT: {CourseStatus.PENDING},
    CourseStatus.PENDING: {CourseStatus.PUBLISHED, CourseStatus.REJECTED},
    CourseStatus.REJECTED: {CourseStatus.PENDING},
    CourseStatus.PUBLISHED: {CourseStatus.REJECTED},
}


def check_transition(transitions: dict, current: Enum, new: Enum) -> bool:
    """
    Validates ``current -> new`` against a transition table.

    Returns False for a same-value update (nothing to do) and True for a real
    transition. Raises InvalidStatusTransitionError for anything else.
    """
    if current == new:
        return False
    if new not in transitions[current]:
        raise InvalidStatusTransitionError(
            f"Cannot change status from '{current.value}' to '{new.value}'"
        )
    return True
