"""
Ride endpoints
==============

GET  /api/v1/ride                              -- current snapshot
POST /api/v1/ride/offer                        -- offer a ride
POST /api/v1/ride/advance                      -- move to the next event
POST /api/v1/ride/confirm-pickup               -- all accepted passengers on board
POST /api/v1/ride/passengers/{id}/no-show      -- passenger did not show up
POST /api/v1/ride/reset                        -- back to IDLE
POST /api/v1/ride/simulate                     -- run the whole lifecycle (202)
POST /api/v1/ride/new-trip                     -- reset, then simulate (202)
WS   /api/v1/ride/stream                       -- snapshot stream
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect

from ride_lifecycle.api.dependencies import get_controller
from ride_lifecycle.api.schemas import CommandResponse, ErrorResponse, RideStateResponse
from ride_lifecycle.domain.entities import RideState
from ride_lifecycle.infrastructure.store import Subscription
from ride_lifecycle.services.controller import CommandResult, RideLifecycleController

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ride", tags=["ride"])

_REJECTIONS = {
    404: {"model": ErrorResponse, "description": "Unknown passenger"},
    409: {"model": ErrorResponse, "description": "Command not allowed in current state"},
}


def _to_response(state: RideState) -> RideStateResponse:
    return RideStateResponse.model_validate(state, from_attributes=True)


def _respond(result: CommandResult, controller: RideLifecycleController) -> CommandResponse:
    if not result.accepted:
        raise HTTPException(
            status_code=404 if result.unknown_passenger else 409,
            detail=result.reason,
        )
    return CommandResponse(
        command=result.command,
        accepted=result.accepted,
        event=result.event,
        state=_to_response(controller.current()),
    )


@router.get("", response_model=RideStateResponse, summary="Get the current ride snapshot")
async def get_ride(controller: RideLifecycleController = Depends(get_controller)):
    return _to_response(controller.current())


@router.post("/offer", response_model=CommandResponse, responses=_REJECTIONS, summary="Offer a ride")
async def offer_ride(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.offer_ride(), controller)


@router.post(
    "/advance",
    response_model=CommandResponse,
    responses=_REJECTIONS,
    summary="Advance to the next lifecycle event",
)
async def advance(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.advance(), controller)


@router.post(
    "/confirm-pickup",
    response_model=CommandResponse,
    responses=_REJECTIONS,
    summary="Confirm pickup of all accepted passengers",
)
async def confirm_pickup(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.confirm_pickup(), controller)


@router.post(
    "/passengers/{passenger_id}/no-show",
    response_model=CommandResponse,
    responses=_REJECTIONS,
    summary="Report a passenger no-show",
    description=(
        "Marks the passenger NO_SHOW, picks up the other accepted passengers "
        "and frees one vehicle seat."
    ),
)
async def report_no_show(
    passenger_id: str,
    controller: RideLifecycleController = Depends(get_controller),
):
    return _respond(await controller.report_no_show(passenger_id), controller)


@router.post("/reset", response_model=CommandResponse, responses=_REJECTIONS, summary="Reset to idle")
async def reset(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.reset(), controller)


@router.post(
    "/simulate",
    status_code=202,
    response_model=CommandResponse,
    responses={409: _REJECTIONS[409]},
    summary="Run the full lifecycle in the background",
)
async def start_full_simulation(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.start_full_simulation(), controller)


@router.post(
    "/new-trip",
    status_code=202,
    response_model=CommandResponse,
    summary="Reset and run a fresh full simulation",
)
async def start_new_trip(controller: RideLifecycleController = Depends(get_controller)):
    return _respond(await controller.start_new_trip(), controller)


# ── Stream ────────────────────────────────────────────────────────────


async def _pump(websocket: WebSocket, sub: Subscription) -> None:
    async for state in sub:
        await websocket.send_json(_to_response(state).model_dump(mode="json"))


@router.websocket("/stream")
async def stream_ride_state(
    websocket: WebSocket,
    controller: RideLifecycleController = Depends(get_controller),
):
    await websocket.accept()

    sub = controller.subscribe()
    pump = asyncio.create_task(_pump(websocket, sub))
    try:
        # Inbound messages are ignored; the loop only watches for disconnect.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        sub.close()
        pump.cancel()
        try:
            await pump
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.debug("Stream closed while sending", exc_info=True)
