from fastapi import APIRouter, Depends, Query

from salon_booking.api.deps import get_availability_service, get_schedule_resolver
from salon_booking.api.schemas.availability import (
    BreakInfo,
    CombinedAvailabilityResponse,
    ScheduleResponse,
    StaffSlotsResponse,
)
from salon_booking.scheduling.availability import AvailabilityService, parse_day
from salon_booking.scheduling.resolver import Closed, ScheduleResolver

router = APIRouter(tags=["availability"])

ANY_STAFF = "any"


@router.get("/availability/staff/{staff_id}", response_model=StaffSlotsResponse)
async def staff_slots(
    staff_id: str,
    service_id: str = Query(...),
    date_param: str = Query(..., alias="date"),
    availability: AvailabilityService = Depends(get_availability_service),
) -> StaffSlotsResponse:
    """Bookable start times ("HH:MM") for one staff member."""
    slots = await availability.get_available_slots(staff_id, service_id, date_param)
    return StaffSlotsResponse(
        date=parse_day(date_param).isoformat(),
        staff_id=staff_id,
        service_id=service_id,
        slots=slots,
    )


@router.get("/availability", response_model=CombinedAvailabilityResponse)
async def combined_availability(
    service_id: str = Query(...),
    date_param: str = Query(..., alias="date"),
    staff_id: str = Query(ANY_STAFF),
    availability: AvailabilityService = Depends(get_availability_service),
) -> CombinedAvailabilityResponse:
    """Slots per staff member; staff_id=any covers everyone who offers the service."""
    if staff_id == ANY_STAFF:
        by_staff = await availability.get_combined_availability(service_id, date_param)
    else:
        slots = await availability.get_available_slots(staff_id, service_id, date_param)
        by_staff = {staff_id: slots} if slots else {}
    return CombinedAvailabilityResponse(
        date=parse_day(date_param).isoformat(),
        service_id=service_id,
        availability=by_staff,
    )


@router.get("/staff/{staff_id}/schedule", response_model=ScheduleResponse)
async def staff_schedule(
    staff_id: str,
    date_param: str = Query(..., alias="date"),
    resolver: ScheduleResolver = Depends(get_schedule_resolver),
) -> ScheduleResponse:
    target = parse_day(date_param)
    resolution = await resolver.resolve_schedule(staff_id, target)
    if isinstance(resolution, Closed):
        return ScheduleResponse(date=target.isoformat(), staff_id=staff_id, is_open=False, reason=resolution.reason)
    return ScheduleResponse(
        date=target.isoformat(),
        staff_id=staff_id,
        is_open=True,
        start=resolution.start,
        end=resolution.end,
        breaks=[BreakInfo(start=b.start, end=b.end) for b in resolution.breaks],
    )
