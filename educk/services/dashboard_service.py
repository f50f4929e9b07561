# educk/services/dashboard_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from educk.domain.pricing import to_money
from educk.repos.course_repo import CourseRepo
from educk.repos.order_repo import OrderRepo
from educk.repos.review_repo import ReviewRepo


class DashboardService:
    def __init__(self, db: Session):
        self.courses = CourseRepo(db)
        self.orders = OrderRepo(db)
        self.reviews = ReviewRepo(db)

    def teacher_dashboard(self, instructor_id: int) -> Dict[str, Any]:
        """
        Sales overview of an instructor's courses.

        totalSales sums the courses' sales counters; revenue sums the line
        prices of paid orders. The average rating is weighted by review count.
        """
        courses = self.courses.list_by_instructor(instructor_id)
        ids = [c.id for c in courses]

        students = self.courses.student_counts(ids)
        ratings = self.reviews.rating_summaries(ids)

        total_reviews = sum(count for _, count in ratings.values())
        rating_sum = sum(avg * count for avg, count in ratings.values())

        return {
            "courses_count": len(courses),
            "total_sales": sum(c.sales_count for c in courses),
            "total_students": sum(students.values()),
            "total_reviews": total_reviews,
            "average_rating": round(rating_sum / total_reviews, 2) if total_reviews else 0.0,
            "revenue": to_money(self.orders.revenue_for_courses(ids)),
            "recent_orders": [
                {
                    "id": order.id,
                    "user": {"id": order.user.id, "name": order.user.name, "email": order.user.email},
                    "amount": order.final_amount,
                    "date": order.created_at,
                }
                for order in self.orders.recent_completed_orders(ids)
            ],
            "courses": [
                {
                    "id": course.id,
                    "title": course.title,
                    "status": course.status,
                    "sales_count": course.sales_count,
                    "students_count": students.get(course.id, 0),
                    "average_rating": round(ratings.get(course.id, (0.0, 0))[0], 2),
                    "total_reviews": ratings.get(course.id, (0.0, 0))[1],
                }
                for course in courses
            ],
        }
