from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_store, get_working_set
from app.models.schemas import AnalysisStateResponse
from app.services.analyzer import analyze
from app.services.file_intake import WorkingSet
from app.services.result_store import ResultStore
from app.utils.logger import logger

router = APIRouter()


@router.get("/", response_model=AnalysisStateResponse)
def get_analysis(store: ResultStore = Depends(get_store)):
    return store.snapshot()


@router.post("/", response_model=AnalysisStateResponse)
async def run_analysis(
    working_set: WorkingSet = Depends(get_working_set),
    store: ResultStore = Depends(get_store),
):
    # The analyzer is not reentrant; refuse overlapping runs here.
    if store.is_busy:
        logger.warning("Analysis requested while another one is running")
        raise HTTPException(status_code=409, detail="Analysis already in progress")

    await analyze(working_set.files, store)
    return store.snapshot()


@router.post("/reset", response_model=AnalysisStateResponse)
def reset_analysis(store: ResultStore = Depends(get_store)):
    if store.is_busy:
        raise HTTPException(status_code=409, detail="Analysis already in progress")
    store.reset()
    return store.snapshot()
