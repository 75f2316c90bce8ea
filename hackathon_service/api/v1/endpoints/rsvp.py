# hackathon_service/api/v1/endpoints/rsvp.py
import asyncio
import json
import logging
from typing import Callable

from fastapi import APIRouter, Depends, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from hackathon_service import crud
from hackathon_service.api import deps
from hackathon_service.core.exceptions import UpstreamFailure
from hackathon_service.core.limiter import limiter
from hackathon_service.schemas.common import ApiResponse
from hackathon_service.schemas.rsvp import DeclineRequest, LiveCount, RsvpState
from hackathon_service.schemas.token import TokenPayload
from hackathon_service.services.live_values import (
    CONFIRMED_COUNT_CHANNEL,
    LiveValueHub,
    status_channel,
)
from hackathon_service.services.rsvp_service import RsvpService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rsvp", tags=["RSVP"])

KEEP_ALIVE_SECONDS = 15


@router.get("", response_model=ApiResponse[RsvpState])
def get_rsvp_state(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RsvpService = Depends(deps.get_rsvp_service),
):
    """What the RSVP panel should show for the signed-in participant."""
    return ApiResponse(data=service.get_state(db, user_id=current_user.sub))


@router.get("/count", response_model=ApiResponse[LiveCount])
def get_confirmed_count(
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RsvpService = Depends(deps.get_rsvp_service),
):
    return ApiResponse(data=service.get_live_count(db))


@router.post("/confirm", response_model=ApiResponse[RsvpState])
@limiter.limit("10/minute")
def confirm_rsvp(
    request: Request,
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RsvpService = Depends(deps.get_rsvp_service),
):
    """
    Confirm attendance.

    **Errors**:
    - 409: The event is full, or the participant's RSVP can no longer change
    """
    state = service.confirm(db, user_id=current_user.sub)
    return ApiResponse(data=state, message=state.message)


@router.post("/decline", response_model=ApiResponse[RsvpState])
@limiter.limit("10/minute")
def decline_rsvp(
    body: DeclineRequest,
    request: Request,
    db: Session = Depends(deps.get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: RsvpService = Depends(deps.get_rsvp_service),
):
    """Give up a spot. This cannot be undone."""
    state = service.decline(
        db,
        user_id=current_user.sub,
        acknowledge_irreversible=body.acknowledge_irreversible,
    )
    return ApiResponse(data=state, message="Your RSVP has been declined")


def _sse(event: str, payload: dict) -> str:
    return f"event: {event}\ndata: {json.dumps(payload)}\n\n"


@router.get("/live")
async def follow_rsvp(
    request: Request,
    current_user: TokenPayload = Depends(deps.get_current_user),
    hub: LiveValueHub = Depends(deps.get_live_hub),
    session_factory: Callable[[], Session] = Depends(deps.get_session_factory),
    service: RsvpService = Depends(deps.get_rsvp_service),
):
    """
    Server-sent events for the confirmed count and the caller's own status.
    All open streams share one Redis subscription per value.
    """
    user_id = current_user.sub
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue = asyncio.Queue()

    def forward(event: str):
        def on_value(value):
            loop.call_soon_threadsafe(queue.put_nowait, (event, value))

        return on_value

    def read_count() -> int:
        with session_factory() as db:
            return crud.rsvp.get_confirmed_count(db)

    def read_status():
        with session_factory() as db:
            user = crud.user.get(db, id=user_id)
            return user.status if user else None

    unsubscribers = []
    try:
        unsubscribers.append(
            await run_in_threadpool(
                hub.subscribe, CONFIRMED_COUNT_CHANNEL, forward("count"), read_count
            )
        )
        unsubscribers.append(
            await run_in_threadpool(
                hub.subscribe, status_channel(user_id), forward("status"), read_status
            )
        )
    except Exception as e:
        for unsubscribe in unsubscribers:
            await run_in_threadpool(unsubscribe)
        logger.error(f"Failed to open live RSVP stream for user {user_id}: {str(e)}")
        raise UpstreamFailure("open the live RSVP stream", status_code=503) from e

    async def event_stream():
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    event, value = await asyncio.wait_for(
                        queue.get(), timeout=KEEP_ALIVE_SECONDS
                    )
                except asyncio.TimeoutError:
                    yield ": ping\n\n"
                    continue
                if event == "count":
                    payload = service.live_count(int(value)).model_dump(by_alias=True)
                else:
                    payload = {"status": value}
                yield _sse(event, payload)
        finally:
            for unsubscribe in unsubscribers:
                await run_in_threadpool(unsubscribe)
            logger.info(f"Live RSVP stream closed for user {user_id}")

    return StreamingResponse(
        event_stream(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
