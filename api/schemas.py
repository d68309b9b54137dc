"""API Schemas - Request and Response DTOs for the browser page"""
from pydantic import BaseModel, Field
from typing import Optional

from domain.enums import ActiveView


class SearchFormRequest(BaseModel):
    """Search form fields as the page holds them"""
    city: str = ""
    check_in: Optional[str] = Field(None, description="YYYY-MM-DD; empty clears check-in and check-out")
    check_out: Optional[str] = Field(None, description="YYYY-MM-DD")


class ViewRequest(BaseModel):
    view: ActiveView


class RefreshRoomTypesRequest(BaseModel):
    num_guests: int = 1


class SubmitRoomTypeRequest(BaseModel):
    notes: str = ""


class EditDatesRequest(BaseModel):
    check_in: Optional[str] = None
    check_out: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    message: str
