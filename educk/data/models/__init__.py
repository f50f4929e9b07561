# import all models so SQLAlchemy registers them in Base.metadata

from educk.data.models.user import UserModel
from educk.data.models.course import CourseModel
from educk.data.models.cart_item import CartItemModel
from educk.data.models.enrollment import EnrollmentModel
from educk.data.models.order import OrderModel, OrderItemModel
from educk.data.models.notification import NotificationModel
from educk.data.models.category import CategoryModel
from educk.data.models.review import ReviewModel

__all__ = [
    "UserModel",
    "CourseModel",
    "CartItemModel",
    "EnrollmentModel",
    "OrderModel",
    "OrderItemModel",
    "NotificationModel",
    "CategoryModel",
    "ReviewModel",
]
