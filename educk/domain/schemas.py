# educk/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, model_validator
from pydantic.alias_generators import to_camel

from educk.domain.enums import CourseLevel, CourseStatus, OrderStatus, PaymentStatus, Role

# money goes out as a JSON number
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(CamelModel):
    message: str


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    pages: int


# ---------- users ----------

class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=255)
    role: Role = Role.STUDENT
    bio: str = ""


class UserRead(CamelModel):
    id: int
    name: str
    email: str
    role: Role
    bio: str
    created_at: datetime


class NotificationOut(CamelModel):
    id: int
    message: str
    read: bool
    created_at: datetime


# ---------- courses ----------

class CourseCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    short_description: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    level: CourseLevel = CourseLevel.BEGINNER
    language: str = "pt-BR"
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    discount_price: Decimal = Field(Decimal("0"), ge=0, max_digits=10, decimal_places=2)

    @model_validator(mode="after")
    def discount_within_price(self):
        if self.discount_price > self.price:
            raise ValueError("discountPrice cannot exceed price")
        return self


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, min_length=1)
    short_description: Optional[str] = Field(None, min_length=1, max_length=200)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[CourseLevel] = None
    language: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    discount_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)


class CourseStatusIn(CamelModel):
    status: CourseStatus


class CourseOut(CamelModel):
    id: int
    title: str
    short_description: str
    description: str
    category: str
    level: CourseLevel
    language: str
    instructor_id: int
    instructor_name: str
    price: Money
    discount_price: Money
    final_price: Money
    status: CourseStatus
    is_published: bool
    published_at: Optional[datetime] = None
    sales_count: int
    student_count: int
    average_rating: float = 0.0
    total_reviews: int = 0
    created_at: datetime


class CourseListOut(CamelModel):
    courses: List[CourseOut]
    pagination: Pagination


# ---------- cart ----------

class AddToCartIn(CamelModel):
    course_id: int = Field(..., gt=0)


class CartItemOut(CamelModel):
    course_id: int
    title: str
    price: Money
    discount_price: Money
    final_price: Money
    instructor: str
    added_at: datetime


class CartOut(CamelModel):
    items: List[CartItemOut]
    subtotal: Money
    discount: Money
    total: Money
    item_count: int


class ApplyCouponIn(CamelModel):
    coupon_code: str = Field(..., min_length=1, max_length=50)


class CouponOut(CamelModel):
    code: str
    percentage: int
    discount: Money
    total: Money


class CheckoutIn(CamelModel):
    # plain str: an unknown method is a domain error (400), not a schema error
    payment_method: str = Field(..., min_length=1)
    coupon_code: Optional[str] = Field(None, max_length=50)


# ---------- orders ----------

class OrderSummaryOut(CamelModel):
    id: int
    total_amount: Money
    discount_amount: Money
    final_amount: Money
    payment_method: str
    payment_status: PaymentStatus
    status: OrderStatus
    payment_details: Dict[str, Any]


class CheckoutOut(CamelModel):
    message: str
    order: OrderSummaryOut


class OrderItemOut(CamelModel):
    course_id: int
    title: str
    price: Money
    discount_price: Money
    final_price: Money


class OrderOut(CamelModel):
    id: int
    user_id: int
    items: List[OrderItemOut]
    total_amount: Money
    discount_amount: Money
    final_amount: Money
    coupon_code: Optional[str] = None
    coupon_percentage: Optional[int] = None
    payment_method: str
    payment_status: PaymentStatus
    status: OrderStatus
    payment_details: Dict[str, Any]
    created_at: datetime


class OrderListOut(CamelModel):
    orders: List[OrderOut]
    pagination: Pagination


class PaymentStatusOut(CamelModel):
    order_id: int
    payment_status: PaymentStatus
    payment_method: str
    payment_details: Dict[str, Any]


class ReceiptCustomer(CamelModel):
    name: str
    email: str


class ReceiptOut(CamelModel):
    receipt_number: str
    order_date: datetime
    customer: ReceiptCustomer
    items: List[OrderItemOut]
    payment_method: str
    total_amount: Money
    discount_amount: Money
    final_amount: Money
    status: OrderStatus


class OrderStatusIn(CamelModel):
    status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None


class OrderStatusBrief(CamelModel):
    id: int
    status: OrderStatus
    payment_status: PaymentStatus


class OrderStatusOut(CamelModel):
    message: str
    order: OrderStatusBrief


# ---------- categories ----------

class CategoryCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = ""
    icon: str = Field("", max_length=100)
    color: str = Field("#6C63FF", pattern=r"^#[0-9A-Fa-f]{6}$")
    parent_id: Optional[int] = Field(None, gt=0)
    position: int = 0


class CategoryUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    icon: Optional[str] = Field(None, max_length=100)
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    parent_id: Optional[int] = Field(None, gt=0)
    position: Optional[int] = None
    is_active: Optional[bool] = None


class CategoryOut(CamelModel):
    id: int
    name: str
    slug: str
    description: str
    icon: str
    color: str
    parent_id: Optional[int] = None
    is_active: bool
    position: int
    created_at: datetime


class CategoryChangeOut(CamelModel):
    message: str
    category: Optional[CategoryOut] = None


# ---------- reviews ----------

class ReviewIn(CamelModel):
    course_id: int = Field(..., gt=0)
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)


class ReviewUpdate(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: str = Field("", max_length=2000)


class ReviewAuthor(CamelModel):
    id: int
    name: str


class ReviewOut(CamelModel):
    id: int
    course_id: int
    course_title: str
    user: ReviewAuthor
    rating: int
    comment: str
    created_at: datetime


class ReviewChangeOut(CamelModel):
    message: str
    review: ReviewOut


class CourseReviewsOut(CamelModel):
    reviews: List[ReviewOut]
    pagination: Pagination
    average_rating: float
    total_reviews: int


class ReviewListOut(CamelModel):
    reviews: List[ReviewOut]
    pagination: Pagination


# ---------- teacher dashboard ----------

class DashboardCustomer(CamelModel):
    id: int
    name: str
    email: str


class DashboardOrder(CamelModel):
    id: int
    user: DashboardCustomer
    amount: Money
    date: datetime


class DashboardCourse(CamelModel):
    id: int
    title: str
    status: CourseStatus
    sales_count: int
    students_count: int
    average_rating: float
    total_reviews: int


class TeacherDashboardOut(CamelModel):
    courses_count: int
    total_sales: int
    total_students: int
    total_reviews: int
    average_rating: float
    revenue: Money
    recent_orders: List[DashboardOrder]
    courses: List[DashboardCourse]
