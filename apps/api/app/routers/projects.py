"""Project and category endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from sqlalchemy.orm import Session

from app.core.deps import get_current_session, get_db, require_csrf_header, require_roles
from app.db.enums import ROLES_CAN_MANAGE_PROJECTS, ProjectStatus
from app.schemas.auth import UserSession
from app.schemas.project import (
    CategoryCreate,
    CategoryRead,
    CategoryStatusCreate,
    CategoryStatusRead,
    ProjectCreate,
    ProjectRead,
    ProjectStatusChange,
)
from app.services import export_service, project_service

router = APIRouter(prefix="/projects", tags=["projects"])
categories_router = APIRouter(prefix="/categories", tags=["categories"])

require_manager = require_roles(list(ROLES_CAN_MANAGE_PROJECTS))


def _raise_http(e: project_service.ProjectServiceError):
    if isinstance(e, (project_service.ProjectNotFoundError, project_service.CategoryNotFoundError)):
        raise HTTPException(status_code=404, detail=str(e))
    if isinstance(e, project_service.NotProjectOwnerError):
        raise HTTPException(status_code=403, detail=str(e))
    raise HTTPException(status_code=400, detail=str(e))


# =============================================================================
# Projects
# =============================================================================


@router.get("", response_model=list[ProjectRead])
def list_projects(
    status: ProjectStatus | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Managers see their own projects; freelancers see the open marketplace."""
    return project_service.list_projects(db, session, status)


@router.get("/export")
def export_projects(
    status: ProjectStatus | None = None,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    """Download the caller's project list as CSV."""
    projects = project_service.list_projects(db, session, status)
    filename = export_service.export_filename("projects")
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(
        content=export_service.projects_csv(projects),
        media_type="text/csv",
        headers=headers,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_project(
    body: ProjectCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    try:
        project = project_service.create_project(db, session, body)
    except project_service.ProjectServiceError as e:
        _raise_http(e)
    db.commit()
    db.refresh(project)
    return project


@router.get("/{project_id}", response_model=ProjectRead)
def get_project(
    project_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(get_current_session),
):
    try:
        return project_service.get_project(db, session, project_id)
    except project_service.ProjectServiceError as e:
        _raise_http(e)


@router.patch(
    "/{project_id}/status",
    response_model=ProjectRead,
    dependencies=[Depends(require_csrf_header)],
)
def update_project_status(
    project_id: str,
    body: ProjectStatusChange,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    try:
        project = project_service.update_project_status(db, session, project_id, body.status)
    except project_service.ProjectServiceError as e:
        _raise_http(e)
    db.commit()
    db.refresh(project)
    return project


@router.delete(
    "/{project_id}",
    status_code=204,
    dependencies=[Depends(require_csrf_header)],
)
def delete_project(
    project_id: str,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    try:
        project_service.delete_project(db, session, project_id)
    except project_service.ProjectServiceError as e:
        _raise_http(e)
    db.commit()


# =============================================================================
# Categories
# =============================================================================


@categories_router.get("", response_model=list[CategoryRead])
def list_categories(
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    return project_service.list_categories(db, session)


@categories_router.post(
    "",
    response_model=CategoryRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    try:
        category = project_service.create_category(db, session, body)
    except project_service.ProjectServiceError as e:
        _raise_http(e)
    db.commit()
    db.refresh(category)
    return category


@categories_router.post(
    "/{category_id}/statuses",
    response_model=CategoryStatusRead,
    status_code=201,
    dependencies=[Depends(require_csrf_header)],
)
def add_category_status(
    category_id: str,
    body: CategoryStatusCreate,
    db: Session = Depends(get_db),
    session: UserSession = Depends(require_manager),
):
    """Append a status column to one of the caller's categories."""
    try:
        status = project_service.add_category_status(db, session, category_id, body)
    except project_service.ProjectServiceError as e:
        _raise_http(e)
    db.commit()
    db.refresh(status)
    return status
