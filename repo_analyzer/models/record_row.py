"""SQLAlchemy row holding one serialized repository record."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Column, DateTime, String

from repo_analyzer.config.database import Base


class RepositoryRecordRow(Base):
    """Repository record mapped to `repository_records` table."""

    __tablename__ = "repository_records"

    id = Column(String(64), primary_key=True)
    full_name_key = Column(String(200), unique=True, nullable=False, index=True)
    full_name = Column(String(200), nullable=False)
    payload = Column(JSON, nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(UTC))

    def __repr__(self):
        return f"<RepositoryRecordRow {self.full_name}>"
