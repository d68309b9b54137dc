from contextlib import asynccontextmanager
from typing import Literal

from fastapi import FastAPI, HTTPException, Depends
from fastapi.responses import RedirectResponse

from api.dependencies import build_http_orchestrator, get_orchestrator
from api.schemas import (
    SearchFormRequest, ViewRequest, RefreshRoomTypesRequest, SubmitRoomTypeRequest,
    EditDatesRequest, HealthResponse,
)
from application.workflow import WorkflowOrchestrator, WorkflowSnapshot
from infrastructure.config import get_settings
from infrastructure.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level)
    orchestrator, client = build_http_orchestrator(settings)
    app.state.orchestrator = orchestrator
    await orchestrator.start()
    try:
        yield
    finally:
        await client.aclose()


app = FastAPI(
    title="AirHotel Booking Client",
    description="Booking workflow for the AirHotel search and reservation service",
    version="1.0.0",
    lifespan=lifespan,
)


# ============================================================================
# HEALTH & STATE
# ============================================================================

@app.get("/api/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "Client is running"}

@app.get("/api/state", response_model=WorkflowSnapshot, tags=["Workflow"])
async def get_state(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    """Current view, modal, search results, reservations and toasts"""
    return workflow.snapshot()

@app.post("/api/view", response_model=WorkflowSnapshot, tags=["Workflow"])
async def switch_view(request: ViewRequest, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.switch_view(request.view)
    return workflow.snapshot()

# ============================================================================
# SESSION ENDPOINTS
# ============================================================================

@app.get("/api/login", tags=["Session"])
async def login(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    """Redirect the browser to the identity provider"""
    return RedirectResponse(workflow.login_url())

@app.post("/api/logout", response_model=WorkflowSnapshot, tags=["Session"])
async def logout(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.logout()
    return workflow.snapshot()

# ============================================================================
# SEARCH ENDPOINTS
# ============================================================================

@app.put("/api/search", response_model=WorkflowSnapshot, tags=["Search"])
async def update_search_form(request: SearchFormRequest, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    """Update the search form; changing check-in may clear check-out"""
    workflow.set_search_city(request.city)
    if request.check_in is not None:
        workflow.set_check_in(request.check_in)
    if request.check_out is not None:
        workflow.set_check_out(request.check_out)
    return workflow.snapshot()

@app.get("/api/hotels", response_model=WorkflowSnapshot, tags=["Search"])
async def list_hotels(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.list_hotels()
    return workflow.snapshot()

@app.post("/api/search", response_model=WorkflowSnapshot, tags=["Search"])
async def run_search(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.search()
    return workflow.snapshot()

# ============================================================================
# ROOM TYPE ENDPOINTS
# ============================================================================

@app.post("/api/hotels/{hotel_id}/room-types", response_model=WorkflowSnapshot, tags=["Room Types"])
async def open_room_types(hotel_id: int, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    """Open the room type modal for a hotel from the current results"""
    if not await workflow.open_room_types(hotel_id) and workflow.session.has_session:
        raise HTTPException(status_code=404, detail="Hotel not found in current results")
    return workflow.snapshot()

@app.post("/api/room-types/refresh", response_model=WorkflowSnapshot, tags=["Room Types"])
async def refresh_room_types(request: RefreshRoomTypesRequest, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.reload_room_types(request.num_guests)
    return workflow.snapshot()

@app.post("/api/room-types/page/{direction}", response_model=WorkflowSnapshot, tags=["Room Types"])
async def change_room_type_page(
    direction: Literal["next", "prev"], workflow: WorkflowOrchestrator = Depends(get_orchestrator)
):
    if direction == "next":
        workflow.room_type_next_page()
    else:
        workflow.room_type_prev_page()
    return workflow.snapshot()

@app.post("/api/room-types/{room_type_id}/select", response_model=WorkflowSnapshot, tags=["Room Types"])
async def select_room_type(room_type_id: int, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    if not workflow.select_room_type(room_type_id):
        raise HTTPException(status_code=404, detail="Room type not found")
    return workflow.snapshot()

@app.post("/api/room-types/submit", response_model=WorkflowSnapshot, tags=["Room Types"])
async def submit_room_type(request: SubmitRoomTypeRequest, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    """Reserve the selected room type"""
    await workflow.submit_room_type(request.notes)
    return workflow.snapshot()

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.post("/api/reservations/{reservation_id}/edit", response_model=WorkflowSnapshot, tags=["Reservations"])
async def open_edit(reservation_id: int, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    if not workflow.open_edit(reservation_id):
        raise HTTPException(status_code=404, detail="Reservation not found")
    return workflow.snapshot()

@app.put("/api/edit/dates", response_model=WorkflowSnapshot, tags=["Reservations"])
async def update_edit_dates(request: EditDatesRequest, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    if request.check_in is not None:
        workflow.set_edit_check_in(request.check_in)
    if request.check_out is not None:
        workflow.set_edit_check_out(request.check_out)
    return workflow.snapshot()

@app.post("/api/edit/submit", response_model=WorkflowSnapshot, tags=["Reservations"])
async def submit_edit(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.submit_edit()
    return workflow.snapshot()

@app.post("/api/reservations/{reservation_id}/cancel", response_model=WorkflowSnapshot, tags=["Reservations"])
async def open_cancel(reservation_id: int, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    if not workflow.open_cancel(reservation_id):
        raise HTTPException(status_code=404, detail="Reservation not found")
    return workflow.snapshot()

@app.post("/api/cancel/confirm", response_model=WorkflowSnapshot, tags=["Reservations"])
async def confirm_cancel(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    await workflow.confirm_cancel()
    return workflow.snapshot()

@app.delete("/api/modal", response_model=WorkflowSnapshot, tags=["Workflow"])
async def close_modal(workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    workflow.close_modal()
    return workflow.snapshot()

# ============================================================================
# TOAST ENDPOINTS
# ============================================================================

@app.delete("/api/toasts/{toast_id}", response_model=WorkflowSnapshot, tags=["Toasts"])
async def dismiss_toast(toast_id: str, workflow: WorkflowOrchestrator = Depends(get_orchestrator)):
    if not workflow.dismiss_toast(toast_id):
        raise HTTPException(status_code=404, detail="Toast not found")
    return workflow.snapshot()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8000)
