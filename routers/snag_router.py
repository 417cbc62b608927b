from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from models.base import MAX_ID
from core.database import get_db
from core.auth import get_current_identity
from core.exceptions import ProjectNotFoundError, SnagNotFoundError
from crud.project_crud import get_project
from crud.snag_crud import list_snags, get_snag, create_snag, update_snag, delete_snag
from models.project import Project
from schemas.auth_schema import IdentityClaim
from schemas.snag_schema import SnagCreate, SnagResponse, SnagUpdate


ProjectId = Annotated[int, Path(ge=1, le=MAX_ID)]
SnagId = Annotated[int, Path(ge=1, le=MAX_ID)]

router = APIRouter(prefix="/api/projects/{project_id}/snags", tags=["Snags"])


def get_owned_project(
    project_id: ProjectId,
    db: Session = Depends(get_db),
    identity: IdentityClaim = Depends(get_current_identity),
) -> Project:
    """Parent project of the snag route, if the caller owns it.

    Someone else's project answers exactly like a missing one.
    """
    proj = get_project(db, project_id, owner_id=identity.id)
    if not proj:
        raise ProjectNotFoundError(project_id)
    return proj


@router.get("", response_model=list[SnagResponse])
def list_all(project: Project = Depends(get_owned_project), db: Session = Depends(get_db)):
    return list_snags(db, project.id)


@router.post("", response_model=SnagResponse, status_code=201)
def create(payload: SnagCreate, project: Project = Depends(get_owned_project), db: Session = Depends(get_db)):
    return create_snag(db, project.id, payload)


@router.get("/{snag_id}", response_model=SnagResponse)
def read_one(snag_id: SnagId, project: Project = Depends(get_owned_project), db: Session = Depends(get_db)):
    snag = get_snag(db, project.id, snag_id)
    if not snag:
        raise SnagNotFoundError(snag_id)
    return snag


@router.patch("/{snag_id}", response_model=SnagResponse)
def update(
    snag_id: SnagId,
    payload: SnagUpdate,
    project: Project = Depends(get_owned_project),
    db: Session = Depends(get_db),
):
    snag = update_snag(db, project.id, snag_id, payload)
    if not snag:
        raise SnagNotFoundError(snag_id)
    return snag


@router.delete("/{snag_id}", status_code=204)
def delete(snag_id: SnagId, project: Project = Depends(get_owned_project), db: Session = Depends(get_db)):
    ok = delete_snag(db, project.id, snag_id)
    if not ok:
        raise SnagNotFoundError(snag_id)
    return None
