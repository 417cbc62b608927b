from sqlalchemy.orm import Session
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from models.snag import Snag, SnagStatus
from schemas.snag_schema import SnagCreate, SnagUpdate
from core.exceptions import StorageError, ValidationError
from core.logging_config import get_logger

logger = get_logger(__name__)

# Snag queries are scoped to a project only. Whether the caller owns that
# project is checked by the router before any of these run.


def _commit(db: Session, operation: str):
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        if operation == "create":
            # FK on snags.project_id is the only constraint reachable past schema validation
            raise ValidationError("Project does not exist", field="project_id")
        logger.exception(f"Snag {operation} failed")
        raise StorageError(operation=f"snag.{operation}")
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Snag {operation} failed")
        raise StorageError(operation=f"snag.{operation}")


def get_snag(db: Session, project_id: int, snag_id: int):
    return (
        db.query(Snag)
        .filter(Snag.id == snag_id, Snag.project_id == project_id)
        .first()
    )


def list_snags(db: Session, project_id: int):
    return (
        db.query(Snag)
        .filter(Snag.project_id == project_id)
        .order_by(desc(Snag.created_at), desc(Snag.id))
        .all()
    )


def create_snag(db: Session, project_id: int, payload: SnagCreate):
    status = payload.status or SnagStatus.OPEN
    snag = Snag(
        project_id=project_id,
        title=payload.title,
        description=payload.description,
        assigned_to=payload.assigned_to,
        status=status.value,
        image_url=payload.image_url,
    )
    db.add(snag)
    _commit(db, "create")
    db.refresh(snag)
    logger.info(f"Created snag {snag.id} in project {project_id}")
    return snag


def update_snag(db: Session, project_id: int, snag_id: int, payload: SnagUpdate):
    snag = get_snag(db, project_id, snag_id)
    if not snag:
        return None
    for k, v in payload.model_dump(exclude_unset=True).items():
        if k in ("title", "status") and v is None:
            continue
        if isinstance(v, SnagStatus):
            v = v.value
        setattr(snag, k, v)
    _commit(db, "update")
    db.refresh(snag)
    return snag


def delete_snag(db: Session, project_id: int, snag_id: int) -> bool:
    snag = get_snag(db, project_id, snag_id)
    if not snag:
        return False
    db.delete(snag)
    _commit(db, "delete")
    return True
