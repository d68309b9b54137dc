"""API Dependencies - wiring the workflow together"""
import webbrowser
from typing import Any, Callable, Optional, Tuple

import httpx
from fastapi import Request

from application.notifications import NotificationQueue
from application.services import AvailabilitySearchService, ReservationLifecycleService, RoomTypeSelector
from application.session import SessionGate
from application.workflow import WorkflowOrchestrator
from domain.repositories import HotelRepository, ReservationRepository, SessionRepository
from domain.temporal import today_local
from infrastructure.api_client import AirHotelApiClient
from infrastructure.config import Settings
from infrastructure.repositories.http_repositories import (
    HttpHotelRepository, HttpReservationRepository, HttpSessionRepository,
)


def build_orchestrator(
    settings: Settings,
    hotel_repo: HotelRepository,
    reservation_repo: ReservationRepository,
    session_repo: SessionRepository,
    clock=today_local,
    opener: Callable[[str], Any] = webbrowser.open,
) -> WorkflowOrchestrator:
    notifications = NotificationQueue(duration=settings.toast_duration)
    session = SessionGate(session_repo, notifications, opener=opener)
    return WorkflowOrchestrator(
        session=session,
        notifications=notifications,
        search=AvailabilitySearchService(hotel_repo, session, clock=clock),
        room_types=RoomTypeSelector(
            hotel_repo, session, clock=clock, page_size=settings.room_type_page_size
        ),
        lifecycle=ReservationLifecycleService(
            reservation_repo, session, notifications, clock=clock, currency=settings.default_currency
        ),
        clock=clock,
    )


def build_http_orchestrator(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    clock=today_local,
) -> Tuple[WorkflowOrchestrator, AirHotelApiClient]:
    """Orchestrator talking to the AirHotel service; the caller closes the client"""
    client = AirHotelApiClient(settings, transport=transport)
    orchestrator = build_orchestrator(
        settings,
        HttpHotelRepository(client),
        HttpReservationRepository(client),
        HttpSessionRepository(client),
        clock=clock,
    )
    return orchestrator, client


def get_orchestrator(request: Request) -> WorkflowOrchestrator:
    return request.app.state.orchestrator
