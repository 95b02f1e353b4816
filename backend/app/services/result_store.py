from typing import Optional

from app.models.schemas import AnalysisResult, AnalysisStateResponse, AnalysisStatus
from app.utils.logger import logger


class ResultStore:
    """Current analysis status and the last successfully parsed result.

    Written only by the analyzer (and the reset action); the dashboard reads.
    A failed analysis never replaces a previous result.
    """

    def __init__(self):
        self.status = AnalysisStatus.IDLE
        self.result: Optional[AnalysisResult] = None
        self.error: Optional[str] = None

    @property
    def is_busy(self) -> bool:
        return self.status == AnalysisStatus.ANALYZING

    def begin(self):
        logger.info(f"Analysis status: {self.status.value} -> {AnalysisStatus.ANALYZING.value}")
        self.status = AnalysisStatus.ANALYZING
        self.error = None

    def complete(self, result: AnalysisResult):
        self.result = result
        self.status = AnalysisStatus.COMPLETED
        self.error = None

    def fail(self, message: str):
        self.status = AnalysisStatus.ERROR
        self.error = message

    def reset(self):
        self.status = AnalysisStatus.IDLE
        self.error = None

    def snapshot(self) -> AnalysisStateResponse:
        return AnalysisStateResponse(
            status=self.status,
            error=self.error,
            result=self.result.to_document() if self.result is not None else None,
        )
