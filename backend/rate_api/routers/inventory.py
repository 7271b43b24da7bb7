"""
Inventory feed routes - relay named feed events to the event bus
"""
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, status
from rate_api.dependencies import get_event_bus, get_ledger
from rate_api.schemas import FeedEventRequest, FeedEventResponse
from rate_core.event_bus import Event, EventBus
from rate_core.inventory import InventoryLedger

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("/events", response_model=FeedEventResponse)
def publish_feed_event(data: FeedEventRequest, bus: EventBus = Depends(get_event_bus)):
    """Relay a feed event (inventory:updated, booking:created) to subscribers"""
    event = Event(event_type=data.event, data=data.data, source=data.source)
    result = bus.publish(event)

    response = FeedEventResponse(
        event_id=event.event_id,
        event_type=result.event_type,
        subscriber_count=result.subscriber_count,
        success_count=result.success_count,
        failure_count=result.failure_count,
        errors=[f"{failure.handler_name}: {failure.error}" for failure in result.errors],
    )
    if result.failure_count:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=response.model_dump(mode="json", by_alias=True),
        )
    return response


@router.get("/{property_id}/{on_date}")
def get_inventory(property_id: str, on_date: date, ledger: InventoryLedger = Depends(get_ledger)):
    """Aggregated inventory of a property on a date"""
    snapshot = ledger.snapshot_for(property_id, on_date)
    if snapshot is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No inventory recorded")
    return {
        "propertyId": property_id,
        "date": on_date.isoformat(),
        "totalRooms": snapshot.total_rooms,
        "availableRooms": snapshot.available_rooms,
        "bookedRooms": snapshot.booked_rooms,
        "occupancy": snapshot.occupancy_pct,
    }
