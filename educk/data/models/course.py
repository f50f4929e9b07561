from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship

from educk.data.database import Base


class CourseModel(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    short_description = Column(String(200), nullable=False)
    category = Column(String(100), nullable=False, index=True)  # category slug
    level = Column(String(20), nullable=False, default="beginner")
    language = Column(String(10), nullable=False, default="pt-BR")

    instructor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    price = Column(Numeric(10, 2), nullable=False)
    # markdown amount, 0 means no discount
    discount_price = Column(Numeric(10, 2), nullable=False, default=0)

    status = Column(String(20), nullable=False, default="draft")  # draft, pending, published, rejected
    is_published = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    sales_count = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    instructor = relationship("UserModel")
    students = relationship(
        "UserModel",
        secondary="enrollments",
        viewonly=True,
    )
