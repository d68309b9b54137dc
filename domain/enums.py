"""Domain Enums"""
from enum import Enum


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELED = "CANCELED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    NO_SHOW = "NO_SHOW"


class ActiveView(str, Enum):
    SEARCH = "search"
    RESERVATIONS = "reservations"


class ModalKind(str, Enum):
    NONE = "none"
    EDIT = "edit"
    CANCEL_CONFIRM = "cancel-confirm"
    ROOM_TYPE = "room-type"


class ToastSeverity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class MutationState(str, Enum):
    IDLE = "IDLE"
    SUBMITTING = "SUBMITTING"
    SUCCESS = "SUCCESS"
