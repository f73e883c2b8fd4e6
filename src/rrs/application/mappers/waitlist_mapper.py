from __future__ import annotations

from rrs.application.dto.responses import WaitlistEntryResponse
from rrs.domain.waitlist.entities import WaitlistEntry


def to_waitlist_response(entry: WaitlistEntry) -> WaitlistEntryResponse:
    return WaitlistEntryResponse(
        waitlistId=str(entry.waitlist_id),
        customerId=str(entry.customer_id),
        requestedDate=entry.requested_date,
        requestedTime=entry.requested_time,
        partySize=entry.party_size,
        status=entry.status.value,
        queuePosition=entry.queue_position,
        waitTimeMinutes=entry.wait_time_minutes,
        createdAt=entry.created_at,
    )
