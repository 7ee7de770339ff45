"""Database models for the placement eligibility engine."""
from __future__ import annotations

from datetime import date, datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Student(Base):
    __tablename__ = "students"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    full_name: Mapped[str | None] = mapped_column(String(300))
    email: Mapped[str | None] = mapped_column(String(200))
    branch: Mapped[str | None] = mapped_column(String(100))
    graduation_year: Mapped[int | None] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    academics: Mapped[StudentAcademics | None] = relationship(
        "StudentAcademics", back_populates="student", uselist=False, cascade="all, delete-orphan"
    )
    internships: Mapped[list[StudentInternship]] = relationship(
        "StudentInternship", back_populates="student", cascade="all, delete-orphan"
    )


class StudentAcademics(Base):
    __tablename__ = "student_academics"

    student_id: Mapped[str] = mapped_column(ForeignKey("students.id", ondelete="CASCADE"), primary_key=True)
    tenth_percent: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    twelfth_percent: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    ug_cgpa: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False))
    pg_cgpa: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False))
    history_of_backs: Mapped[int] = mapped_column(Integer, default=0)

    student: Mapped[Student] = relationship("Student", back_populates="academics")


class StudentInternship(Base):
    __tablename__ = "student_internships"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    organization: Mapped[str | None] = mapped_column(String(200))
    # Free text as entered by the student; only bare integers count as months.
    duration: Mapped[str | None] = mapped_column(String(50))

    student: Mapped[Student] = relationship("Student", back_populates="internships")


class Job(Base):
    __tablename__ = "jobs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    company_name: Mapped[str | None] = mapped_column(String(200))
    job_title: Mapped[str] = mapped_column(String(200))
    application_deadline: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    requirement: Mapped[JobRequirement | None] = relationship(
        "JobRequirement", back_populates="job", uselist=False, cascade="all, delete-orphan"
    )


class JobRequirement(Base):
    __tablename__ = "job_requirements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, unique=True)
    tenth_percent: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    twelfth_percent: Mapped[float | None] = mapped_column(Numeric(5, 2, asdecimal=False))
    ug_cgpa: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False))
    pg_cgpa: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False))
    min_experience_yrs: Mapped[float | None] = mapped_column(Numeric(4, 2, asdecimal=False))
    allowed_branches: Mapped[list[str] | None] = mapped_column(JSON)
    skills_required: Mapped[str | None] = mapped_column(Text)
    additional_notes: Mapped[str | None] = mapped_column(Text)
    backlogs_allowed: Mapped[int | None] = mapped_column(Integer)

    job: Mapped[Job] = relationship("Job", back_populates="requirement")


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("student_id", "job_id", name="uq_applications_student_job"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    student_id: Mapped[str] = mapped_column(ForeignKey("students.id"), nullable=False)
    job_id: Mapped[int] = mapped_column(ForeignKey("jobs.id"), nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="submitted")
    applied_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    eligibility_status: Mapped[str] = mapped_column(String(20), default="pending")
    eligibility_checked_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    eligibility_comments: Mapped[str | None] = mapped_column(Text)
    tenth_percent_meets: Mapped[bool | None] = mapped_column(Boolean)
    twelfth_percent_meets: Mapped[bool | None] = mapped_column(Boolean)
    ug_cgpa_meets: Mapped[bool | None] = mapped_column(Boolean)
    pg_cgpa_meets: Mapped[bool | None] = mapped_column(Boolean)
    experience_meets: Mapped[bool | None] = mapped_column(Boolean)
    branch_meets: Mapped[bool | None] = mapped_column(Boolean)
    skills_match_score: Mapped[float] = mapped_column(Float, default=0.0)

    offer_type: Mapped[str | None] = mapped_column(String(50))
    offer_ctc: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    offer_stipend: Mapped[float | None] = mapped_column(Numeric(12, 2, asdecimal=False))
    placement_date: Mapped[date | None] = mapped_column(Date)
    remarks: Mapped[str | None] = mapped_column(Text)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
