"""CSV exports for the offers and projects pages."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable, Sequence

from app.db.models import Offer, Project


CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@", "\t", "\r")

OFFER_HEADERS = [
    "id",
    "project",
    "freelancer",
    "freelancer_email",
    "price",
    "delivery_time_days",
    "status",
    "created_at",
]

PROJECT_HEADERS = [
    "id",
    "title",
    "status",
    "budget",
    "deadline",
    "manager_id",
    "category_id",
    "created_at",
    "updated_at",
]


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES):
        return f"'{value}"
    return value


def _serialize_csv_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value, "f")
    return str(value)


def _write_csv(headers: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(headers)
    for row in rows:
        writer.writerow([_csv_safe(_serialize_csv_value(value)) for value in row])
    return output.getvalue()


def export_filename(prefix: str, today: date | None = None) -> str:
    """<prefix>-<yyyy-MM-dd>.csv"""
    today = today or date.today()
    return f"{prefix}-{today.isoformat()}.csv"


def offers_csv(offers: Iterable[Offer]) -> str:
    rows = (
        [
            offer.id,
            offer.project.title if offer.project else "",
            offer.freelancer.name if offer.freelancer else "",
            offer.freelancer.email if offer.freelancer else "",
            offer.price,
            offer.delivery_time,
            offer.status,
            offer.created_at,
        ]
        for offer in offers
    )
    return _write_csv(OFFER_HEADERS, rows)


def projects_csv(projects: Iterable[Project]) -> str:
    rows = (
        [
            project.id,
            project.title,
            project.status,
            project.budget,
            project.deadline,
            project.manager_id,
            project.category_id,
            project.created_at,
            project.updated_at,
        ]
        for project in projects
    )
    return _write_csv(PROJECT_HEADERS, rows)
