from sqlalchemy import Column, Integer, String, Text, ForeignKey, Index
from models.base import Base, TimestampMixin

class Project(Base, TimestampMixin):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String(255), nullable=False)
    number = Column(String(100), nullable=True)
    location = Column(Text, nullable=True)

Index("idx_projects_user_id_created_at", Project.user_id, Project.created_at.desc())
