import enum
from sqlalchemy import CheckConstraint, Column, Integer, String, Text, ForeignKey, Index
from models.base import Base, TimestampMixin


class SnagStatus(str, enum.Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


_STATUS_VALUES = ", ".join(f"'{s.value}'" for s in SnagStatus)


class Snag(Base, TimestampMixin):
    __tablename__ = "snags"
    __table_args__ = (
        CheckConstraint(f"status IN ({_STATUS_VALUES})", name="ck_snags_status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(50), nullable=False, default=SnagStatus.OPEN.value, server_default=SnagStatus.OPEN.value)
    assigned_to = Column(String(100), nullable=True)
    image_url = Column(Text, nullable=True)

Index("idx_snags_project_id_created_at", Snag.project_id, Snag.created_at.desc())
