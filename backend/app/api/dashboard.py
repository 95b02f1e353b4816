from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_dashboard
from app.services.dashboard import Dashboard

router = APIRouter()
study_router = APIRouter()


@router.get("/")
def get_dashboard_view(dashboard: Dashboard = Depends(get_dashboard)):
    return dashboard.render()


@router.post("/page/next")
def next_page(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.paginator.next_page()
    return dashboard.deep_dive_page()


@router.post("/page/prev")
def prev_page(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.paginator.prev_page()
    return dashboard.deep_dive_page()


@router.post("/page/{page}")
def change_page(page: int, dashboard: Dashboard = Depends(get_dashboard)):
    # Out-of-range pages leave the current page as it is.
    dashboard.paginator.go_to(page)
    return dashboard.deep_dive_page()


@router.get("/solution")
def get_solution(dashboard: Dashboard = Depends(get_dashboard)):
    return {"solution": dashboard.solution_view()}


@router.post("/solution/{concept_index}/{occurrence_index}")
def open_solution(
    concept_index: int,
    occurrence_index: int,
    dashboard: Dashboard = Depends(get_dashboard),
):
    if not dashboard.select_solution(concept_index, occurrence_index):
        raise HTTPException(status_code=404, detail="Question not found")
    return {"solution": dashboard.solution_view()}


@router.delete("/solution")
def close_solution(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.close_solution()
    return {"solution": None}


@study_router.get("/")
def get_study(dashboard: Dashboard = Depends(get_dashboard)):
    return dashboard.study.view()


@study_router.post("/start/{index}")
def start_study(index: int, dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.study.start(index)
    return dashboard.study.view()


@study_router.post("/next")
def next_question(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.study.next()
    return dashboard.study.view()


@study_router.post("/prev")
def prev_question(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.study.prev()
    return dashboard.study.view()


@study_router.post("/reveal")
def reveal_answer(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.study.reveal()
    return dashboard.study.view()


@study_router.post("/exit")
def exit_study(dashboard: Dashboard = Depends(get_dashboard)):
    dashboard.study.exit()
    return dashboard.study.view()
