from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.analysis import router as analysis_router
from app.api.dashboard import router as dashboard_router
from app.api.dashboard import study_router
from app.api.files import router as files_router
from app.core.errors import ExamStrategistError
from app.middleware.error import exam_error_handler, exception_middleware
from app.services.file_intake import WorkingSet
from app.services.result_store import ResultStore


def create_app() -> FastAPI:
    app = FastAPI(title="Exam Strategist Backend")

    # Allow frontend to call the backend from a different origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # tighten in production if needed
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.middleware("http")(exception_middleware)
    app.add_exception_handler(ExamStrategistError, exam_error_handler)

    app.include_router(files_router, prefix="/files", tags=["files"])
    app.include_router(analysis_router, prefix="/analysis", tags=["analysis"])
    app.include_router(dashboard_router, prefix="/dashboard", tags=["dashboard"])
    app.include_router(study_router, prefix="/study", tags=["study"])

    # Application state starts Idle with an empty working set.
    app.state.working_set = WorkingSet()
    app.state.store = ResultStore()
    app.state.dashboard = None

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/live")
    def live():
        return {"status": "alive"}

    @app.get("/ready")
    def ready():
        return {"status": "ready"}

    return app


app = create_app()
