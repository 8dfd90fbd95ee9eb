# routes/packages.py
from typing import List

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from core.database import get_session
from core.errors import NotFound
from core.request_utils import get_client_ip
from core.security import get_current_admin
from schemas.auth_schema import TokenPayload
from schemas.package_schema import PackageCreate, PackageRead, PackageUpdate
from services import audit_service, package_service

router = APIRouter(prefix="/packages", tags=["Packages"])


# ==================================================================
#  ✅  Public catalog
# ==================================================================
@router.get("/", response_model=List[PackageRead])
def list_active_packages(session: Session = Depends(get_session)):
    """Active packages in display order."""
    return [package_service.to_public_dict(p) for p in package_service.list_packages(session)]


@router.get("/all", response_model=List[PackageRead])
def list_all_packages(
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    packages = package_service.list_packages(session, include_inactive=True)
    return [package_service.to_public_dict(p) for p in packages]


@router.get("/{package_id}", response_model=PackageRead)
def get_package(package_id: str, session: Session = Depends(get_session)):
    """Public read; inactive packages are hidden like in the list."""
    package = package_service.get_package(session, package_id)
    if not package.active:
        raise NotFound("Package not found")
    return package_service.to_public_dict(package)


# ==================================================================
#  ✅  Admin CRUD
# ==================================================================
@router.post("/", response_model=PackageRead, status_code=status.HTTP_201_CREATED)
def create_package(
    data: PackageCreate,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    package = package_service.create_package(session, data.model_dump(), created_by=admin.user_id)
    result = package_service.to_public_dict(package)
    audit_service.record(
        session,
        "package_created",
        actor_id=admin.user_id,
        entity_type="package",
        entity_id=result["id"],
        changes={"name": result["name"], "price": result["price"]},
        ip_address=get_client_ip(request),
    )
    return result


@router.put("/{package_id}", response_model=PackageRead)
def update_package(
    package_id: str,
    data: PackageUpdate,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    changes = package_service.update_package(
        session,
        package_id,
        data.model_dump(exclude_unset=True, exclude_none=True),
    )
    if changes:
        audit_service.record(
            session,
            "package_updated",
            actor_id=admin.user_id,
            entity_type="package",
            entity_id=package_id,
            changes=changes,
            ip_address=get_client_ip(request),
        )
    return package_service.to_public_dict(package_service.get_package(session, package_id))


@router.delete("/{package_id}")
def delete_package(
    package_id: str,
    request: Request,
    admin: TokenPayload = Depends(get_current_admin),
    session: Session = Depends(get_session),
):
    deleted = package_service.delete_package(session, package_id)
    audit_service.record(
        session,
        "package_deleted",
        actor_id=admin.user_id,
        entity_type="package",
        entity_id=package_id,
        changes={"name": deleted["name"]},
        ip_address=get_client_ip(request),
    )
    return {"success": True, "message": f"Package {deleted['name']} deleted."}
