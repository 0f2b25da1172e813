from sqlalchemy import BigInteger, Column, DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship

from jobtracker.core.base import Base


class JobFile(Base):
    __tablename__ = "job_files"

    id = Column(Integer, primary_key=True, index=True)

    job_application_id = Column(
        Integer,
        ForeignKey("job_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    file_name = Column(String(512), nullable=False)
    file_type = Column(String(255), nullable=True)
    size_bytes = Column(BigInteger, nullable=True)

    # /job-tracker/{job_id}/{file_name}
    nextcloud_path = Column(String(1024), nullable=False, unique=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    application = relationship("JobApplication", back_populates="files")
