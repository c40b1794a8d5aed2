from fastapi import APIRouter, Depends, Query, status

from salon_booking.api.deps import get_store
from salon_booking.api.schemas.time_off import TimeOffCreate, TimeOffPublic
from salon_booking.core.clock import to_local_naive
from salon_booking.models.time_off import TimeOff
from salon_booking.repositories.sql import SqlStore
from salon_booking.services import time_off_service

router = APIRouter(prefix="/time-off", tags=["time-off"])


def _to_public(t: TimeOff) -> TimeOffPublic:
    return TimeOffPublic(
        id=t.id,
        business_id=t.business_id,
        staff_id=t.staff_id,
        start_at=t.start_at,
        end_at=t.end_at,
        reason=t.reason,
    )


@router.post("", response_model=TimeOffPublic, status_code=status.HTTP_201_CREATED)
async def create(body: TimeOffCreate, store: SqlStore = Depends(get_store)) -> TimeOffPublic:
    entry = TimeOff(
        business_id=body.business_id,
        staff_id=body.staff_id,
        start_at=to_local_naive(body.start_at),
        end_at=to_local_naive(body.end_at),
        reason=body.reason,
    )
    return _to_public(await time_off_service.create_time_off(store, entry))


@router.get("", response_model=list[TimeOffPublic])
async def list_for_business(
    business_id: str = Query(...),
    store: SqlStore = Depends(get_store),
) -> list[TimeOffPublic]:
    return [_to_public(t) for t in await time_off_service.list_time_off(store, business_id)]


@router.delete("/{time_off_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(time_off_id: str, store: SqlStore = Depends(get_store)) -> None:
    await time_off_service.delete_time_off(store, time_off_id)
