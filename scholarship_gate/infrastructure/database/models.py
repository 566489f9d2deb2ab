# scholarship_gate/infrastructure/database/models.py

from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
)
from sqlalchemy.sql import func

from scholarship_gate.domain.validators import MAX_ACTOR_LENGTH, MAX_CORRELATION_ID_LENGTH
from scholarship_gate.infrastructure.database.session import Base

# SQLite only autoincrements INTEGER PRIMARY KEY
_AuditId = BigInteger().with_variant(Integer, "sqlite")

APPLICATION_STATUSES = ("Pending", "Under Review", "Approved", "Rejected")


class Student(Base):
    __tablename__ = "students"
    __table_args__ = (CheckConstraint("gpa >= 0 AND gpa <= 4", name="ck_students_gpa"),)

    student_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    gpa = Column(Numeric(3, 2, asdecimal=False), nullable=False)
    major = Column(String(100), nullable=True)
    enrollment_year = Column(Integer, nullable=True)


class Scholarship(Base):
    __tablename__ = "scholarships"
    __table_args__ = (CheckConstraint("amount > 0", name="ck_scholarships_amount"),)

    scholarship_id = Column(Integer, primary_key=True)
    name = Column(String(150), nullable=False, unique=True)
    amount = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    min_gpa = Column(Numeric(3, 2, asdecimal=False), nullable=False, default=0)
    deadline = Column(Date, nullable=True)


class Reviewer(Base):
    __tablename__ = "reviewers"

    reviewer_id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    department = Column(String(100), nullable=True)


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{s}'" for s in APPLICATION_STATUSES) + ")",
            name="ck_applications_status",
        ),
    )

    application_id = Column(Integer, primary_key=True)
    student_id = Column(Integer, ForeignKey("students.student_id"), nullable=False, index=True)
    scholarship_id = Column(
        Integer, ForeignKey("scholarships.scholarship_id"), nullable=False, index=True
    )
    reviewer_id = Column(Integer, ForeignKey("reviewers.reviewer_id"), nullable=True)
    status = Column(String(20), nullable=False, default="Pending")
    submitted_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class RestrictedDate(Base):
    """Holiday calendar rows; loaded into the CalendarStore at start-up."""

    __tablename__ = "restricted_dates"

    restricted_date = Column(Date, primary_key=True)
    description = Column(String(200), nullable=True)


class AuditLog(Base):
    """
    Append-only audit trail. No foreign keys: history outlives schema changes
    to the protected tables. The repository exposes insert and select only.
    """

    __tablename__ = "audit_log"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(_AuditId, primary_key=True, autoincrement=True)
    actor = Column(String(MAX_ACTOR_LENGTH), nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    operation = Column(String(100), nullable=False)
    status = Column(String(4000), nullable=False)
    correlation_id = Column(String(MAX_CORRELATION_ID_LENGTH), nullable=True)


# Tables the mutation gateway can write to, by name.
RESOURCE_MODELS = {
    model.__tablename__: model for model in (Student, Scholarship, Reviewer, Application)
}
