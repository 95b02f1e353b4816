from fastapi import HTTPException, Request

from app.services.dashboard import Dashboard
from app.services.file_intake import WorkingSet
from app.services.result_store import ResultStore


def get_working_set(request: Request) -> WorkingSet:
    return request.app.state.working_set


def get_store(request: Request) -> ResultStore:
    return request.app.state.store


def get_dashboard(request: Request) -> Dashboard:
    """Dashboard view state for the stored result, rebuilt when the result changes."""
    store: ResultStore = request.app.state.store
    if store.result is None:
        raise HTTPException(status_code=409, detail="No analysis result yet")

    dashboard = getattr(request.app.state, "dashboard", None)
    if dashboard is None or dashboard.result is not store.result:
        dashboard = Dashboard(store.result)
        request.app.state.dashboard = dashboard
    return dashboard
