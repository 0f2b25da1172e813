import enum

from sqlalchemy import Boolean, Column, Date, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from jobtracker.core.base import Base


class JobStatus(str, enum.Enum):
    TO_APPLY = "TO_APPLY"
    APPLIED = "APPLIED"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    ARCHIVED = "ARCHIVED"


class JobApplication(Base):
    __tablename__ = "job_applications"

    id = Column(Integer, primary_key=True, index=True)

    company_name = Column(String(255), nullable=False)
    job_title = Column(String(255), nullable=False)
    job_description = Column(Text, nullable=True)
    job_url = Column(String(500), nullable=True)

    # One of JobStatus; stored as plain text
    status = Column(String(50), nullable=False, default=JobStatus.TO_APPLY.value)

    has_been_contacted = Column(Boolean, nullable=False, default=False)
    date_submitted = Column(Date, nullable=True)
    date_of_interview = Column(Date, nullable=True)
    confirmation_received = Column(Boolean, nullable=False, default=False)
    rejection_received = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        index=True,
    )

    files = relationship(
        "JobFile",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="asc(JobFile.id)",
        lazy="selectin",
    )
