# ================================================================
# services/package_service.py — Public package catalog
# ================================================================
from typing import Any, Dict, List, Mapping, Optional
import json
import logging

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from core.errors import AlreadySeeded, DuplicateEntry, NotFound
from core.updates import apply_updates
from models.models import Package

logger = logging.getLogger(__name__)

DUPLICATE_NAME_MESSAGE = "A package with this name already exists"
PACKAGE_FIELDS = ("name", "description", "price", "currency", "features", "active", "display_order")


DEFAULT_PACKAGES: List[Dict[str, Any]] = [
    {
        "name": "Desktop Software",
        "description": "Manage Yourself - Desktop Software for DIY traders with Community Access",
        "price": 4999,
        "currency": "₹",
        "features": [
            "Desktop Software",
            "DIY",
            "Community Access",
            "Manage Yourself",
            "Local Execution",
        ],
        "display_order": 0,
        "active": True,
    },
    {
        "name": "Auto Server",
        "description": "Fully Automated Server based execution for hands-free trading",
        "price": 5999,
        "currency": "₹",
        "features": [
            "Fully Automated",
            "Server based Execution",
            "Priority Support",
            "24/7 Monitoring",
            "Execution Management",
        ],
        "display_order": 1,
        "active": True,
    },
    {
        "name": "Hybrid Plan",
        "description": "Combination of Desktop Software and Server Execution",
        "price": 7999,
        "currency": "₹",
        "features": [
            "Desktop Software",
            "Server Execution",
            "Advanced Analytics",
            "Priority Support",
            "API Access",
            "Custom Strategies",
        ],
        "display_order": 2,
        "active": True,
    },
]


# ------------------------------------------------------------
# Feature list (de)serialization
# ------------------------------------------------------------
def serialize_features(features: Optional[List[str]]) -> str:
    return json.dumps(list(features or []), ensure_ascii=False)


def parse_features(raw: Optional[str]) -> List[str]:
    """
    Decode the stored feature list.
    Malformed data degrades to a one-element list holding the raw value.
    """
    if not raw:
        return []
    try:
        value = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"⚠️ Malformed package features, returning raw value: {raw!r}")
        return [raw]
    if isinstance(value, list):
        return [str(item) for item in value]
    logger.warning(f"⚠️ Package features are not a list, returning raw value: {raw!r}")
    return [raw]


def to_public_dict(package: Package) -> Dict[str, Any]:
    """Package row with its feature list decoded, ready for PackageRead."""
    data = package.model_dump()
    data["features"] = parse_features(package.features)
    return data


# ------------------------------------------------------------
# CRUD
# ------------------------------------------------------------
def _commit(session: Session) -> None:
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        logger.info(f"Package write rejected: {e.orig}")
        raise DuplicateEntry(DUPLICATE_NAME_MESSAGE)


def get_package(session: Session, package_id: str) -> Package:
    package = session.get(Package, package_id)
    if not package:
        raise NotFound("Package not found")
    return package


def list_packages(session: Session, include_inactive: bool = False) -> List[Package]:
    stmt = select(Package)
    if not include_inactive:
        stmt = stmt.where(Package.active == True)  # noqa: E712
    stmt = stmt.order_by(Package.display_order.asc(), Package.created_at.desc())
    return list(session.exec(stmt).all())


def create_package(session: Session, data: Mapping[str, Any], created_by: Optional[str] = None) -> Package:
    fields = dict(data)
    fields["features"] = serialize_features(fields.get("features"))
    package = Package(**fields, created_by=created_by)
    session.add(package)
    _commit(session)
    session.refresh(package)
    return package


def update_package(session: Session, package_id: str, updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Apply a field update set; returns the applied changes (features as a list)."""
    package = get_package(session, package_id)
    updates = dict(updates)
    if "features" in updates:
        updates["features"] = serialize_features(updates["features"])

    changes = apply_updates(package, updates, PACKAGE_FIELDS)
    if changes:
        session.add(package)
        _commit(session)
        session.refresh(package)
    if "features" in changes:
        changes["features"] = parse_features(changes["features"])
    return changes


def delete_package(session: Session, package_id: str) -> Dict[str, Any]:
    """Delete a package and return a snapshot of it."""
    package = get_package(session, package_id)
    snapshot = to_public_dict(package)
    session.delete(package)
    session.commit()
    return snapshot


def count_packages(session: Session) -> int:
    return session.exec(select(func.count()).select_from(Package)).one()


def seed_default_packages(session: Session, packages: Optional[List[Dict[str, Any]]] = None) -> List[Package]:
    """
    Insert the default catalog into an empty packages table.
    A non-empty catalog raises AlreadySeeded and nothing is written.
    """
    existing = count_packages(session)
    if existing > 0:
        raise AlreadySeeded(f"Database already has {existing} package(s). Skipping seed.")

    created = []
    for pkg in packages or DEFAULT_PACKAGES:
        fields = dict(pkg)
        fields["features"] = serialize_features(fields.get("features"))
        package = Package(**fields)
        session.add(package)
        created.append(package)
    _commit(session)
    for package in created:
        session.refresh(package)
    logger.info(f"🌱 Seeded {len(created)} default package(s)")
    return created
