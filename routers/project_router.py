from typing import Annotated

from fastapi import APIRouter, Depends, Path
from sqlalchemy.orm import Session
from models.base import MAX_ID
from core.database import get_db
from core.auth import get_current_identity
from core.exceptions import ProjectNotFoundError
from crud.project_crud import list_projects, get_project, create_project, update_project, delete_project
from schemas.auth_schema import IdentityClaim
from schemas.project_schema import ProjectCreate, ProjectResponse, ProjectUpdate


ProjectId = Annotated[int, Path(ge=1, le=MAX_ID)]

router = APIRouter(prefix="/api/projects", tags=["Projects"])


@router.get("", response_model=list[ProjectResponse])
def list_all(db: Session = Depends(get_db), identity: IdentityClaim = Depends(get_current_identity)):
    return list_projects(db, owner_id=identity.id)


@router.post("", response_model=ProjectResponse, status_code=201)
def create(
    payload: ProjectCreate,
    db: Session = Depends(get_db),
    identity: IdentityClaim = Depends(get_current_identity),
):
    return create_project(db, payload, owner_id=identity.id)


@router.get("/{project_id}", response_model=ProjectResponse)
def read_one(project_id: ProjectId, db: Session = Depends(get_db), identity: IdentityClaim = Depends(get_current_identity)):
    proj = get_project(db, project_id, owner_id=identity.id)
    if not proj:
        raise ProjectNotFoundError(project_id)
    return proj


@router.patch("/{project_id}", response_model=ProjectResponse)
def update(
    project_id: ProjectId,
    payload: ProjectUpdate,
    db: Session = Depends(get_db),
    identity: IdentityClaim = Depends(get_current_identity),
):
    proj = update_project(db, project_id, identity.id, payload)
    if not proj:
        raise ProjectNotFoundError(project_id)
    return proj


@router.delete("/{project_id}", status_code=204)
def delete(project_id: ProjectId, db: Session = Depends(get_db), identity: IdentityClaim = Depends(get_current_identity)):
    ok = delete_project(db, project_id, identity.id)
    if not ok:
        raise ProjectNotFoundError(project_id)
    return None
