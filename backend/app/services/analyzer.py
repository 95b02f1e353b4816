"""Analysis client: validate the working set, call the model, parse the answer."""

import asyncio
import json
import re
import time
from typing import Sequence

import openai
import pydantic

from app.core.errors import (
    AnalysisFailedError,
    ExamStrategistError,
    MalformedResponseError,
    PayloadTooLargeError,
    ValidationError,
)
from app.models.schemas import AnalysisResult, FileCategory
from app.services import request_builder
from app.services.file_intake import UploadedFile
from app.services.result_store import ResultStore
from app.utils.llm_client import call_llm, strip_code_fences
from app.utils.logger import (
    log_error_with_trace,
    log_operation_end,
    log_operation_start,
    log_performance,
    logger,
)


def check_working_set(files: Sequence[UploadedFile]):
    categories = {f.category for f in files}
    if FileCategory.SYLLABUS not in categories or FileCategory.PAST_PAPER not in categories:
        raise ValidationError(
            "Please upload at least one Syllabus and one Previous Year Question paper."
        )


def parse_response(raw_text: str) -> AnalysisResult:
    cleaned = strip_code_fences(raw_text)
    try:
        document = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"JSON parse error: {e}; raw text: {raw_text[:500]!r}")
        raise MalformedResponseError(
            "Failed to parse the analysis results. "
            "The model output might be too large or malformed.",
            raw_text=raw_text,
        ) from e

    if not isinstance(document, dict):
        raise MalformedResponseError(
            "The analysis result is not a JSON object.", raw_text=raw_text
        )

    try:
        return AnalysisResult.model_validate(document)
    except pydantic.ValidationError as e:
        logger.error(f"Analysis result failed schema validation: {e}")
        raise MalformedResponseError(
            f"The analysis result does not match the expected format "
            f"({e.error_count()} problem(s)).",
            raw_text=raw_text,
        ) from e


_STATUS_413 = re.compile(r"\b(?:error code|status(?: code)?)\s*[:=]?\s*413\b", re.IGNORECASE)


def _is_payload_too_large(error: Exception) -> bool:
    if isinstance(error, openai.APIStatusError):
        return error.status_code == 413
    return getattr(error, "status_code", None) == 413 or bool(_STATUS_413.search(str(error)))


async def _request_analysis(request: request_builder.AnalysisRequest) -> str:
    try:
        raw_text = await asyncio.to_thread(call_llm, request)
    except Exception as e:
        if _is_payload_too_large(e):
            raise PayloadTooLargeError() from e
        raise AnalysisFailedError(f"Failed to analyze data. {e}") from e

    if not raw_text:
        raise AnalysisFailedError(
            "Failed to analyze data. No response generated from the model."
        )
    return raw_text


async def analyze(files: Sequence[UploadedFile], store: ResultStore) -> AnalysisResult:
    """Run one analysis over a copy of the working set.

    A missing syllabus or past paper raises ValidationError without any
    outbound call. Every failure, cancellation included, moves the store to
    Error and is re-raised. Not reentrant: callers must not start a second
    run while the store is busy.
    """
    files = tuple(files)
    try:
        check_working_set(files)
    except ValidationError as e:
        logger.warning(f"Analysis rejected: {e.message}")
        store.fail(e.message)
        raise

    start_time = time.time()
    request = request_builder.build(files)
    counts = {c.value: n for c, n in request.counts.items()}
    log_operation_start(
        "analyze",
        metadata={"counts": counts, "prompt_version": request.prompt_version},
    )
    store.begin()

    try:
        raw_text = await _request_analysis(request)
        result = parse_response(raw_text)
    except ExamStrategistError as e:
        duration = (time.time() - start_time) * 1000
        log_error_with_trace("analyze", e, metadata={"counts": counts})
        log_performance("analyze", duration, success=False, error=type(e).__name__)
        store.fail(e.message)
        raise
    except Exception as e:
        log_error_with_trace("analyze", e, metadata={"counts": counts})
        store.fail(f"Failed to analyze data. {e}")
        raise AnalysisFailedError(f"Failed to analyze data. {e}") from e
    except BaseException:
        # Cancelled (client disconnect) or interrupted; the store must not stay busy.
        logger.warning("Analysis interrupted before completion")
        store.fail("Analysis was interrupted before it finished. Please try again.")
        raise

    store.complete(result)
    duration = (time.time() - start_time) * 1000
    log_performance(
        "analyze",
        duration,
        success=True,
        metadata={
            "concepts": len(result.deep_dive),
            "topics": len(result.weightage),
            "sample_questions": len(result.sample_paper),
        },
    )
    log_operation_end("analyze", duration, metadata={"counts": counts})
    return result
