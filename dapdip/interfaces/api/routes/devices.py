"""Routes for registering push notification devices."""

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from dapdip.application.use_cases.notifications import (
    list_push_devices as list_push_devices_uc,
    register_push_device as register_push_device_uc,
    unregister_push_device as unregister_push_device_uc,
)
from dapdip.domain.entities import User
from dapdip.infrastructure.database import get_db
from dapdip.interfaces.api.dependencies import get_current_active_user
from dapdip.interfaces.api.schemas import PushDeviceCreate, PushDeviceRead

router = APIRouter(prefix="/notifications/devices", tags=["devices"])


@router.get("/", response_model=list[PushDeviceRead])
def list_devices(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    return [PushDeviceRead.model_validate(d) for d in list_push_devices_uc(db, current_user.id)]


@router.post("/", response_model=PushDeviceRead, status_code=status.HTTP_201_CREATED)
def register_device(
    payload: PushDeviceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
):
    """Register a push token, refreshing it when it is already known."""

    try:
        device = register_push_device_uc(
            db,
            current_user.id,
            token=payload.token,
            platform=payload.platform,
            name=payload.name,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return PushDeviceRead.model_validate(device)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def unregister_device(
    device_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Response:
    try:
        unregister_push_device_uc(db, current_user.id, device_id)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
