"""OpenAI-compatible client for the exam analysis call."""

from typing import Any, Dict, List
import re
import time

import openai

from app.core.config import settings
from app.services.request_builder import AnalysisRequest, FilePart
from app.utils.logger import log_llm_call, logger

PROVIDER = "OpenAI"


_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```\s*$")


def strip_code_fences(text: str) -> str:
    """Remove the markdown code-block markers the model may wrap around JSON.

    Only a leading and a trailing fence are removed; backticks inside JSON
    string values are left alone.
    """
    if not text:
        return text
    text = _LEADING_FENCE.sub("", text, count=1)
    return _TRAILING_FENCE.sub("", text, count=1).strip()


def _file_content(part: FilePart) -> Dict[str, Any]:
    data_url = f"data:{part.mime_type};base64,{part.data}"
    if part.mime_type.startswith("image/"):
        return {"type": "image_url", "image_url": {"url": data_url}}
    return {
        "type": "file",
        "file": {"filename": part.filename, "file_data": data_url},
    }


def to_messages(request: AnalysisRequest) -> List[Dict[str, Any]]:
    content = [_file_content(p) for p in request.file_parts]
    content.append({"type": "text", "text": request.instruction})
    return [
        {"role": "system", "content": "You are a helpful assistant designed to output JSON."},
        {"role": "user", "content": content},
    ]


def _get_client() -> openai.OpenAI:
    return openai.OpenAI(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
    )


def call_llm(request: AnalysisRequest, model: str | None = None) -> str:
    """Issue the single analysis round trip and return the raw response text.

    Transport errors are logged and re-raised untouched; mapping them onto
    the analysis error taxonomy is the analyzer's job.
    """
    model = model or settings.ANALYSIS_MODEL
    start_time = time.time()
    try:
        client = _get_client()
        resp = client.chat.completions.create(
            model=model,
            messages=to_messages(request),
            max_tokens=settings.ANALYSIS_MAX_TOKENS,
            temperature=settings.ANALYSIS_TEMPERATURE,
            response_format={"type": "json_object"},
        )
    except Exception as e:
        latency_ms = (time.time() - start_time) * 1000
        logger.error(f"{PROVIDER} analysis call failed: {e}")
        log_llm_call(
            provider=PROVIDER,
            model=model,
            prompt_tokens=0,
            completion_tokens=0,
            success=False,
            error=str(e),
            latency_ms=latency_ms,
            file_parts=len(request.file_parts),
        )
        raise

    latency_ms = (time.time() - start_time) * 1000
    text = resp.choices[0].message.content if resp.choices else None
    usage = getattr(resp, "usage", None)

    log_llm_call(
        provider=PROVIDER,
        model=model,
        prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
        completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
        success=bool(text),
        latency_ms=latency_ms,
        file_parts=len(request.file_parts),
    )
    return text or ""
