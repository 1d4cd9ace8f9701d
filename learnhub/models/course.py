from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from learnhub.core.database import Base
from learnhub.core.constants import DEFAULT_COURSE_DURATION

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String, index=True, nullable=False)
    duration = Column(String, nullable=False, default=DEFAULT_COURSE_DURATION)
    icon = Column(String, nullable=True)
    cover_image = Column(String, nullable=True)
    is_published = Column(Boolean, nullable=False, default=False)
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    teacher = relationship("User", back_populates="courses")
    lessons = relationship("Lesson", back_populates="course", cascade="all, delete-orphan", order_by="Lesson.order")
    enrollments = relationship("Enrollment", back_populates="course", cascade="all, delete-orphan")
    certificates = relationship("Certificate", back_populates="course", cascade="all, delete-orphan")

    @property
    def lesson_count(self):
        return len(self.lessons)

    @property
    def enrollment_count(self):
        return len(self.enrollments)
