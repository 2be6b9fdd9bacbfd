"""Tests for CSV exports of offers and projects."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest


def _rows(payload: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(payload)))


def test_export_filename():
    from app.services.export_service import export_filename

    assert export_filename("offers", date(2026, 3, 7)) == "offers-2026-03-07.csv"
    assert export_filename("projects", date(2026, 11, 30)) == "projects-2026-11-30.csv"


def test_csv_safe_prefixes_formulas():
    from app.services.export_service import _csv_safe

    assert _csv_safe("=SUM(A1:A2)") == "'=SUM(A1:A2)"
    assert _csv_safe("+1") == "'+1"
    assert _csv_safe("@cmd") == "'@cmd"
    assert _csv_safe("plain") == "plain"
    assert _csv_safe("") == ""


def test_projects_csv_sanitizes_titles(db, manager_session):
    from app.schemas.project import ProjectCreate
    from app.services import export_service, project_service

    project_service.create_project(
        db,
        manager_session,
        ProjectCreate(title="=HYPERLINK(\"x\")", description="d", budget=Decimal("10.50")),
    )
    db.commit()

    rows = _rows(export_service.projects_csv(project_service.list_projects(db, manager_session)))
    assert rows[0] == export_service.PROJECT_HEADERS
    assert rows[1][1] == "'=HYPERLINK(\"x\")"
    assert rows[1][2] == "OPEN"
    assert rows[1][3] == "10.50"


@pytest.mark.asyncio
async def test_offers_export_endpoint(db, manager_client, manager_session, freelancer_session, freelancer):
    from app.schemas.offer import OfferCreate
    from app.schemas.project import ProjectCreate
    from app.services import offer_service, project_service

    project = project_service.create_project(
        db, manager_session, ProjectCreate(title="Shop", description="Store")
    )
    offer_service.create_offer(
        db,
        freelancer_session,
        OfferCreate(project_id=project.id, price=Decimal("75"), delivery_time=4),
    )
    db.commit()

    response = await manager_client.get("/offers/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="offers-')
    assert disposition.endswith('.csv"')

    rows = _rows(response.text)
    assert rows[0][0] == "id"
    assert len(rows) == 2
    assert rows[1][1] == "Shop"
    assert rows[1][3] == freelancer.email
    assert rows[1][4] == "75.00"


@pytest.mark.asyncio
async def test_projects_export_endpoint(manager_client):
    response = await manager_client.get("/projects/export")
    assert response.status_code == 200
    assert 'filename="projects-' in response.headers["content-disposition"]
    assert _rows(response.text) == [
        ["id", "title", "status", "budget", "deadline", "manager_id", "category_id", "created_at", "updated_at"]
    ]
