"""Project and category management with owner scoping."""

import logging

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.db.enums import OfferStatus, ProjectStatus, UserRole
from app.db.models import CategoryStatus, Offer, Project, ProjectCategory
from app.db.types import utc_now
from app.schemas.auth import UserSession
from app.schemas.project import CategoryCreate, CategoryStatusCreate, ProjectCreate

logger = logging.getLogger(__name__)


class ProjectServiceError(Exception):
    """Base exception for project service errors."""

    pass


class ProjectNotFoundError(ProjectServiceError):
    """Project not found (or not visible to the caller)."""

    pass


class CategoryNotFoundError(ProjectServiceError):
    pass


class NotProjectOwnerError(ProjectServiceError):
    """Caller is not the manager who owns the project."""

    pass


class InvalidCategoryError(ProjectServiceError):
    """Category/status pair does not belong to the manager."""

    pass


def _require_manager(session: UserSession) -> None:
    if session.role != UserRole.MANAGER and not session.is_superadmin:
        raise NotProjectOwnerError("Only managers can manage projects")


def can_manage(session: UserSession, project: Project) -> bool:
    """Owner manager or superadmin."""
    return session.is_superadmin or project.manager_id == session.user_id


# =============================================================================
# Categories
# =============================================================================


def create_category(db: Session, session: UserSession, data: CategoryCreate) -> ProjectCategory:
    _require_manager(session)
    category = ProjectCategory(
        title=data.title.strip(),
        description=data.description,
        color=data.color,
        manager_id=session.user_id,
    )
    db.add(category)
    db.flush()
    return category


def list_categories(db: Session, session: UserSession) -> list[ProjectCategory]:
    """Categories owned by the caller, alphabetical."""
    return (
        db.query(ProjectCategory)
        .filter(ProjectCategory.manager_id == session.user_id)
        .order_by(ProjectCategory.title.asc())
        .all()
    )


def get_owned_category(db: Session, session: UserSession, category_id: str) -> ProjectCategory:
    category = db.get(ProjectCategory, category_id)
    if not category or (category.manager_id != session.user_id and not session.is_superadmin):
        raise CategoryNotFoundError("Category not found")
    return category


def add_category_status(
    db: Session,
    session: UserSession,
    category_id: str,
    data: CategoryStatusCreate,
) -> CategoryStatus:
    """Append a status column; order defaults to the end of the board."""
    category = get_owned_category(db, session, category_id)

    order = data.order
    if order is None:
        current_max = (
            db.query(func.max(CategoryStatus.order))
            .filter(CategoryStatus.category_id == category.id)
            .scalar()
        )
        order = 0 if current_max is None else current_max + 1

    status = CategoryStatus(
        category_id=category.id,
        title=data.title.strip(),
        description=data.description,
        color=data.color,
        order=order,
    )
    db.add(status)
    db.flush()
    return status


def _validate_category(
    db: Session,
    session: UserSession,
    category_id: str | None,
    status_id: str | None,
) -> None:
    if status_id and not category_id:
        raise InvalidCategoryError("statusId requires categoryId")
    if not category_id:
        return
    try:
        get_owned_category(db, session, category_id)
    except CategoryNotFoundError:
        raise InvalidCategoryError("Unknown category")
    if status_id:
        status = db.get(CategoryStatus, status_id)
        if not status or status.category_id != category_id:
            raise InvalidCategoryError("Status does not belong to category")


# =============================================================================
# Projects
# =============================================================================


def create_project(db: Session, session: UserSession, data: ProjectCreate) -> Project:
    """Post a new OPEN project owned by the calling manager."""
    _require_manager(session)
    _validate_category(db, session, data.category_id, data.status_id)

    project = Project(
        title=data.title.strip(),
        description=data.description.strip(),
        budget=data.budget,
        deadline=data.deadline,
        status=ProjectStatus.OPEN.value,
        manager_id=session.user_id,
        category_id=data.category_id,
        status_id=data.status_id,
    )
    db.add(project)
    db.flush()
    logger.info("Project %s created by %s", project.id, session.user_id)
    return project


def list_projects(
    db: Session,
    session: UserSession,
    status: ProjectStatus | None = None,
) -> list[Project]:
    """
    Projects visible to the caller, newest first.

    - Manager: own projects
    - Freelancer: OPEN marketplace plus projects they won
    - Superadmin: everything
    """
    query = db.query(Project)
    if session.is_superadmin:
        pass
    elif session.role == UserRole.MANAGER:
        query = query.filter(Project.manager_id == session.user_id)
    else:
        won = db.query(Offer.project_id).filter(
            Offer.freelancer_id == session.user_id,
            Offer.status == OfferStatus.ACCEPTED.value,
        )
        query = query.filter(
            or_(Project.status == ProjectStatus.OPEN.value, Project.id.in_(won))
        )

    if status:
        query = query.filter(Project.status == status.value)
    return query.order_by(Project.created_at.desc()).all()


def get_project(db: Session, session: UserSession, project_id: str) -> Project:
    """Fetch a project the caller can see."""
    project = db.get(Project, project_id)
    if not project:
        raise ProjectNotFoundError("Project not found")
    if can_manage(session, project):
        return project
    if session.role == UserRole.FREELANCER:
        if project.status == ProjectStatus.OPEN.value:
            return project
        won = (
            db.query(Offer.id)
            .filter(
                Offer.project_id == project.id,
                Offer.freelancer_id == session.user_id,
                Offer.status == OfferStatus.ACCEPTED.value,
            )
            .first()
        )
        if won:
            return project
    raise ProjectNotFoundError("Project not found")


def get_managed_project(db: Session, session: UserSession, project_id: str) -> Project:
    """Fetch a project the caller owns, for mutations."""
    project = db.get(Project, project_id)
    if not project:
        raise ProjectNotFoundError("Project not found")
    if not can_manage(session, project):
        raise NotProjectOwnerError("Only the project's manager can change it")
    return project


def update_project_status(
    db: Session,
    session: UserSession,
    project_id: str,
    status: ProjectStatus,
) -> Project:
    """Manual status change by the owning manager."""
    project = get_managed_project(db, session, project_id)
    previous = project.status
    project.status = status.value
    project.updated_at = utc_now()
    db.flush()
    logger.info("Project %s status %s -> %s", project.id, previous, status.value)
    return project


def delete_project(db: Session, session: UserSession, project_id: str) -> None:
    """Hard delete; offers and the ledger go with it."""
    project = get_managed_project(db, session, project_id)
    db.delete(project)
    db.flush()
    logger.info("Project %s deleted by %s", project_id, session.user_id)
