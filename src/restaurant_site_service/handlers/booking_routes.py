"""Reservation and contact message endpoints."""

import logging
from collections.abc import Callable
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.responses import HTMLResponse, JSONResponse

from restaurant_site_service.handlers.route_helpers import data_response, ensure_record_id, to_json
from restaurant_site_service.models.booking_models import (
    MessageCreate,
    MessageReadUpdate,
    ReservationCreate,
    ReservationStatus,
    ReservationStatusUpdate,
)

logger = logging.getLogger(__name__)

INVALID_DECISION_MESSAGE = "Invalid status. Must be 'approved' or 'rejected'"


def register_booking_routes(app: FastAPI, require_admin: Callable[..., Any]) -> None:
    """Register reservation and contact routes on the application.

    Args:
        app: FastAPI application whose state holds the site services
        require_admin: Dependency rejecting non-admin callers
    """

    @app.post("/api/reservations", tags=["Reservations"])
    async def submit_reservation(payload: ReservationCreate) -> JSONResponse:
        """Public reservation form. The reservation is stored as pending."""
        result = await app.state.services.reservation_service.submit(payload)
        return data_response(to_json(result.reservation), status_code=201)

    @app.get("/api/reservations-admin", tags=["Reservations"])
    async def list_reservations(_session: Any = Depends(require_admin)) -> JSONResponse:
        reservations = await app.state.services.reservation_service.list_reservations()
        return data_response([to_json(r) for r in reservations])

    @app.patch("/api/reservations-admin/{reservation_id}", tags=["Reservations"])
    async def decide_reservation(
        reservation_id: str,
        payload: ReservationStatusUpdate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Approve or reject a reservation from the dashboard.

        The response carries ``emailSent`` so the dashboard can warn when the
        guest could not be notified.
        """
        ensure_record_id(reservation_id, "reservation")

        if not payload.is_decision():
            raise HTTPException(status_code=400, detail=INVALID_DECISION_MESSAGE)

        decision = await app.state.services.reservation_service.decide(reservation_id, payload.status)
        if decision is None:
            raise HTTPException(status_code=404, detail="Reservation not found.")

        return data_response(to_json(decision))

    @app.get("/api/reservations-admin/{reservation_id}", tags=["Reservations"])
    async def follow_reservation_link(
        reservation_id: str,
        action: str | None = Query(None),
        token: str | None = Query(None),
    ) -> HTMLResponse:
        """Apply a decision from a signed email link and show a confirmation page."""
        try:
            status = ReservationStatus(action or "")
        except ValueError:
            raise HTTPException(status_code=400, detail=INVALID_DECISION_MESSAGE) from None

        if status is ReservationStatus.PENDING:
            raise HTTPException(status_code=400, detail=INVALID_DECISION_MESSAGE)

        services = app.state.services
        if not services.reservation_service.link_signer.verify(token, reservation_id, status):
            raise HTTPException(status_code=403, detail="This link is invalid or has expired.")

        decision = await services.reservation_service.decide(reservation_id, status)
        if decision is None:
            raise HTTPException(status_code=404, detail="Reservation not found.")

        html = await services.reservation_service.render_action_result(decision)
        return HTMLResponse(content=html)

    @app.post("/api/contact", tags=["Contact"])
    async def submit_message(payload: MessageCreate) -> JSONResponse:
        message = await app.state.services.message_service.submit(payload)
        return data_response(to_json(message), status_code=201)

    @app.get("/api/contact", tags=["Contact"])
    async def list_messages(_session: Any = Depends(require_admin)) -> JSONResponse:
        messages = await app.state.services.message_service.list_messages()
        return data_response([to_json(m) for m in messages])

    @app.get("/api/contact/{message_id}", tags=["Contact"])
    async def get_message(message_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        ensure_record_id(message_id, "message")

        message = await app.state.services.message_service.get(message_id)
        if message is None:
            raise HTTPException(status_code=404, detail="Message not found.")

        return data_response(to_json(message))

    @app.patch("/api/contact/{message_id}", tags=["Contact"])
    async def update_message(
        message_id: str,
        payload: MessageReadUpdate,
        _session: Any = Depends(require_admin),
    ) -> JSONResponse:
        """Mark a message read or unread."""
        ensure_record_id(message_id, "message")

        message = await app.state.services.message_service.mark_read(message_id, payload.read)
        if message is None:
            raise HTTPException(status_code=404, detail="Message not found.")

        return data_response(to_json(message))

    @app.delete("/api/contact/{message_id}", tags=["Contact"])
    async def delete_message(message_id: str, _session: Any = Depends(require_admin)) -> JSONResponse:
        ensure_record_id(message_id, "message")

        if not await app.state.services.message_service.delete(message_id):
            raise HTTPException(status_code=404, detail="Message not found.")

        return JSONResponse(content={"success": True})
