"""Workflow Orchestrator

One ``WorkflowState`` value describes what the user is looking at: the
active view, at most one modal (a tagged variant carrying its own target
and submit state) and the search form. It is changed only by the named
operations on ``WorkflowOrchestrator``.
"""
import logging
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from domain.entities import Hotel, Reservation, RoomType
from domain.enums import ActiveView, ModalKind
from domain.errors import BookingValidationError
from domain.temporal import today_local
from domain.value_objects import DateRange, Toast
from application.notifications import NotificationQueue
from application.partitioner import ReservationPartition, partition_reservations
from application.services import (
    AvailabilitySearchService, Clock, MutationInteraction, ReservationLifecycleService, RoomTypeSelector,
)
from application.session import SessionGate

logger = logging.getLogger(__name__)


class NoModal(BaseModel):
    kind: Literal[ModalKind.NONE] = ModalKind.NONE


class EditModal(BaseModel):
    kind: Literal[ModalKind.EDIT] = ModalKind.EDIT
    reservation: Reservation
    date_range: DateRange = Field(default_factory=DateRange)
    interaction: MutationInteraction = Field(default_factory=MutationInteraction)


class CancelConfirmModal(BaseModel):
    kind: Literal[ModalKind.CANCEL_CONFIRM] = ModalKind.CANCEL_CONFIRM
    reservation: Reservation
    interaction: MutationInteraction = Field(default_factory=MutationInteraction)


class RoomTypeModal(BaseModel):
    kind: Literal[ModalKind.ROOM_TYPE] = ModalKind.ROOM_TYPE
    hotel: Hotel
    interaction: MutationInteraction = Field(default_factory=MutationInteraction)


Modal = Union[NoModal, EditModal, CancelConfirmModal, RoomTypeModal]


class WorkflowState(BaseModel):
    view: ActiveView = ActiveView.SEARCH
    modal: Modal = Field(default_factory=NoModal, discriminator="kind")
    search_city: str = ""
    date_range: DateRange = Field(default_factory=DateRange)


class RoomTypePanel(BaseModel):
    hotel: Hotel
    num_guests: int
    room_types: List[RoomType]
    page_items: List[RoomType]
    page: int
    total_pages: int
    selected_room_type_id: Optional[int] = None
    loading: bool = False
    error: str = ""


class WorkflowSnapshot(BaseModel):
    """Everything a page needs to render the current state"""
    has_session: bool
    view: ActiveView
    modal: ModalKind
    modal_target_id: Optional[int] = None
    modal_error: str = ""
    submitting: bool = False
    search_city: str
    check_in: str
    check_out: str
    hotels: List[Hotel]
    has_searched: bool
    search_loading: bool
    search_error: str
    room_type_panel: Optional[RoomTypePanel] = None
    edit_check_in: str = ""
    edit_check_out: str = ""
    reservations: ReservationPartition
    reservations_loading: bool
    reservations_error: str
    toasts: List[Toast]


def _initial_edit_range(reservation: Reservation) -> DateRange:
    try:
        return DateRange(check_in=reservation.check_in_date or "",
                         check_out=reservation.check_out_date or "")
    except ValidationError:
        return DateRange(check_in=reservation.check_in_date or "")


class WorkflowOrchestrator:
    """Top-level controller composing session, search, room types and reservations"""

    def __init__(
        self,
        session: SessionGate,
        notifications: NotificationQueue,
        search: AvailabilitySearchService,
        room_types: RoomTypeSelector,
        lifecycle: ReservationLifecycleService,
        clock: Clock = today_local,
    ):
        self.session = session
        self.notifications = notifications
        self.search_service = search
        self.room_types = room_types
        self.lifecycle = lifecycle
        self.clock = clock
        self.state = WorkflowState()

    async def start(self) -> None:
        await self.session.initialize()

    # ==================== VIEWS ====================

    async def switch_view(self, view: ActiveView) -> None:
        """Entering the reservations view fetches once for that activation"""
        if view == self.state.view:
            return
        self.close_modal()
        self.state.view = view
        if view == ActiveView.RESERVATIONS:
            await self.lifecycle.fetch_all()

    # ==================== SEARCH FORM ====================

    def set_search_city(self, city: str) -> None:
        self.state.search_city = city or ""

    def set_check_in(self, value: Optional[str]) -> bool:
        try:
            self.state.date_range = self.state.date_range.with_check_in(value)
        except BookingValidationError as e:
            self.search_service.error = e.message
            return False
        return True

    def set_check_out(self, value: Optional[str]) -> bool:
        try:
            self.state.date_range = self.state.date_range.with_check_out(value)
        except BookingValidationError as e:
            self.search_service.error = e.message
            return False
        return True

    def set_dates(self, check_in: Optional[str], check_out: Optional[str]) -> bool:
        return self.set_check_in(check_in) and self.set_check_out(check_out)

    async def search(self) -> List[Hotel]:
        await self.search_service.search(self.state.search_city, self.state.date_range)
        return self.filtered_hotels

    async def list_hotels(self) -> List[Hotel]:
        """Every hotel, for a first listing before the user has searched"""
        await self.search_service.list_all()
        return self.filtered_hotels

    @property
    def filtered_hotels(self) -> List[Hotel]:
        return self.search_service.filter(self.state.search_city)

    # ==================== ROOM TYPE MODAL ====================

    async def open_room_types(self, hotel_id: int) -> bool:
        hotel = next((h for h in self.search_service.hotels if h.id == hotel_id), None)
        if hotel is None or not self.session.require_session():
            return False
        self.state.modal = RoomTypeModal(hotel=hotel)
        self.room_types.reset(hotel, self.state.date_range)
        await self.room_types.load(hotel, self.state.date_range, 1)
        return True

    async def reload_room_types(self, num_guests: int) -> List[RoomType]:
        if not isinstance(self.state.modal, RoomTypeModal):
            return []
        return await self.room_types.reload(num_guests)

    def room_type_next_page(self) -> int:
        return self.room_types.next_page()

    def room_type_prev_page(self) -> int:
        return self.room_types.prev_page()

    def select_room_type(self, room_type_id: int) -> bool:
        if not isinstance(self.state.modal, RoomTypeModal):
            return False
        return self.room_types.select(room_type_id)

    async def submit_room_type(self, notes: str = "") -> bool:
        modal = self.state.modal
        if not isinstance(modal, RoomTypeModal):
            return False
        result = await self.room_types.submit(self.lifecycle, modal.interaction, notes)
        if result is None:
            return False
        if self._close_if_current(modal):
            self.state.view = ActiveView.RESERVATIONS
        await self.lifecycle.fetch_all()
        return True

    # ==================== EDIT MODAL ====================

    def open_edit(self, reservation_id: int) -> bool:
        reservation = self._find_reservation(reservation_id)
        if reservation is None:
            return False
        self.state.modal = EditModal(reservation=reservation, date_range=_initial_edit_range(reservation))
        return True

    def set_edit_check_in(self, value: Optional[str]) -> bool:
        modal = self.state.modal
        if not isinstance(modal, EditModal):
            return False
        try:
            modal.date_range = modal.date_range.with_check_in(value)
        except BookingValidationError as e:
            modal.interaction.reject(e.message)
            return False
        return True

    def set_edit_check_out(self, value: Optional[str]) -> bool:
        modal = self.state.modal
        if not isinstance(modal, EditModal):
            return False
        try:
            modal.date_range = modal.date_range.with_check_out(value)
        except BookingValidationError as e:
            modal.interaction.reject(e.message)
            return False
        return True

    async def submit_edit(self) -> bool:
        modal = self.state.modal
        if not isinstance(modal, EditModal):
            return False
        result = await self.lifecycle.modify(
            modal.interaction, modal.reservation.id,
            modal.date_range.check_in, modal.date_range.check_out,
        )
        if result is None:
            return False
        self._close_if_current(modal)
        await self.lifecycle.fetch_all()
        return True

    # ==================== CANCEL MODAL ====================

    def open_cancel(self, reservation_id: int) -> bool:
        reservation = self._find_reservation(reservation_id)
        if reservation is None:
            return False
        self.state.modal = CancelConfirmModal(reservation=reservation)
        return True

    async def confirm_cancel(self) -> bool:
        modal = self.state.modal
        if not isinstance(modal, CancelConfirmModal):
            return False
        result = await self.lifecycle.cancel(modal.interaction, modal.reservation.id)
        if result is None:
            return False
        self._close_if_current(modal)
        await self.lifecycle.fetch_all()
        return True

    def close_modal(self) -> None:
        # Target, submit state and inline error all live on the modal value
        self.state.modal = NoModal()

    def _close_if_current(self, modal: Modal) -> bool:
        # The user may have closed this modal and opened another while the call ran
        if self.state.modal is not modal:
            return False
        self.close_modal()
        return True

    # ==================== SESSION & TOASTS ====================

    async def logout(self) -> bool:
        if not await self.session.logout():
            return False
        self.search_service.clear()
        self.lifecycle.clear()
        self.room_types.reset()
        self.state = WorkflowState()
        return True

    def login_url(self) -> str:
        return self.session.login_url()

    def login(self) -> str:
        return self.session.login()

    def dismiss_toast(self, toast_id: str) -> bool:
        return self.notifications.dismiss(toast_id)

    # ==================== READ MODEL ====================

    def partition(self) -> ReservationPartition:
        return partition_reservations(self.lifecycle.reservations, self.clock())

    def snapshot(self) -> WorkflowSnapshot:
        modal = self.state.modal
        target_id = None
        modal_error = ""
        submitting = False
        panel = None
        edit_range = DateRange()

        if isinstance(modal, RoomTypeModal):
            target_id = modal.hotel.id
            panel = RoomTypePanel(
                hotel=modal.hotel,
                num_guests=self.room_types.num_guests,
                room_types=self.room_types.room_types,
                page_items=self.room_types.current_page_items,
                page=self.room_types.page,
                total_pages=self.room_types.total_pages,
                selected_room_type_id=self.room_types.selected_room_type_id,
                loading=self.room_types.loading,
                error=self.room_types.error,
            )
        elif isinstance(modal, EditModal):
            target_id = modal.reservation.id
            edit_range = modal.date_range
        elif isinstance(modal, CancelConfirmModal):
            target_id = modal.reservation.id
        if not isinstance(modal, NoModal):
            modal_error = modal.interaction.error
            submitting = modal.interaction.submitting

        return WorkflowSnapshot(
            has_session=self.session.has_session,
            view=self.state.view,
            modal=modal.kind,
            modal_target_id=target_id,
            modal_error=modal_error,
            submitting=submitting,
            search_city=self.state.search_city,
            check_in=self.state.date_range.check_in,
            check_out=self.state.date_range.check_out,
            hotels=self.filtered_hotels,
            has_searched=self.search_service.has_fetched,
            search_loading=self.search_service.loading,
            search_error=self.search_service.error,
            room_type_panel=panel,
            edit_check_in=edit_range.check_in,
            edit_check_out=edit_range.check_out,
            reservations=self.partition(),
            reservations_loading=self.lifecycle.loading,
            reservations_error=self.lifecycle.error,
            toasts=self.notifications.toasts,
        )

    def _find_reservation(self, reservation_id: int) -> Optional[Reservation]:
        return next((r for r in self.lifecycle.reservations if r.id == reservation_id), None)
