from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from models.project import Project
from schemas.project_schema import ProjectCreate, ProjectUpdate
from core.exceptions import StorageError
from core.logging_config import get_logger

logger = get_logger(__name__)


def _commit(db: Session, operation: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Project {operation} failed")
        raise StorageError(operation=f"project.{operation}")


def get_project(db: Session, project_id: int, owner_id: int):
    return (
        db.query(Project)
        .filter(Project.id == project_id, Project.user_id == owner_id)
        .first()
    )


def list_projects(db: Session, owner_id: int):
    return (
        db.query(Project)
        .filter(Project.user_id == owner_id)
        .order_by(desc(Project.created_at), desc(Project.id))
        .all()
    )


def create_project(db: Session, payload: ProjectCreate, owner_id: int):
    proj = Project(
        user_id=owner_id,
        name=payload.name,
        number=payload.number,
        location=payload.location,
    )
    db.add(proj)
    _commit(db, "create")
    db.refresh(proj)
    logger.info(f"Created project {proj.id} for user {owner_id}")
    return proj


def update_project(db: Session, project_id: int, owner_id: int, payload: ProjectUpdate):
    proj = get_project(db, project_id, owner_id)
    if not proj:
        return None
    for k, v in payload.model_dump(exclude_unset=True).items():
        # name is NOT NULL; an explicit null leaves it unchanged
        if k == "name" and v is None:
            continue
        setattr(proj, k, v)
    _commit(db, "update")
    db.refresh(proj)
    return proj


def delete_project(db: Session, project_id: int, owner_id: int) -> bool:
    """Delete an owned project. Its snags go with it via ON DELETE CASCADE."""
    proj = get_project(db, project_id, owner_id)
    if not proj:
        return False
    db.delete(proj)
    _commit(db, "delete")
    logger.info(f"Deleted project {project_id} for user {owner_id}")
    return True
