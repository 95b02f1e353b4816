"""Working set of uploaded exam material.

Files are validated by content type, read and base64-encoded one by one.
A bad file never aborts the batch: it is dropped and reported as a notice.
"""

import asyncio
import base64
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from app.core.errors import EncodingError, ExamStrategistError, UnsupportedFileError
from app.models.schemas import FileCategory, FileNotice, UploadedFileInfo
from app.utils.logger import log_file_operation, logger

CATEGORY_TITLES = {
    FileCategory.SYLLABUS: "Syllabus",
    FileCategory.PAST_PAPER: "Previous Year Papers (PYQ)",
    FileCategory.REFERENCE: "Books/Notes (Optional)",
}


def is_supported_type(content_type: Optional[str]) -> bool:
    if not content_type:
        return False
    return content_type == "application/pdf" or content_type.startswith("image/")


def allows_multiple(category: FileCategory) -> bool:
    """Only past papers may be selected several at a time."""
    return category == FileCategory.PAST_PAPER


@dataclass(frozen=True)
class UploadedFile:
    id: str
    filename: str
    content_type: str
    category: FileCategory
    raw: bytes = field(repr=False)
    encoded: Optional[str] = field(default=None, repr=False)

    @property
    def size(self) -> int:
        return len(self.raw)

    def info(self) -> UploadedFileInfo:
        return UploadedFileInfo(
            id=self.id,
            filename=self.filename,
            content_type=self.content_type,
            size=self.size,
            category=self.category,
        )


@dataclass
class IntakeReport:
    added: List[UploadedFile] = field(default_factory=list)
    rejected: List[ExamStrategistError] = field(default_factory=list)

    def notices(self) -> List[FileNotice]:
        return [
            FileNotice(
                filename=getattr(err, "filename", ""),
                kind=type(err).__name__,
                message=err.message,
            )
            for err in self.rejected
        ]


def _encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class WorkingSet:
    """Files the user has added but not yet submitted for analysis.

    ``selection`` items follow the ``UploadFile`` shape: ``filename``,
    ``content_type`` and an awaitable ``read()``.
    """

    def __init__(self):
        self._files: List[UploadedFile] = []

    @property
    def files(self) -> Tuple[UploadedFile, ...]:
        return tuple(self._files)

    def by_category(self, category: FileCategory) -> List[UploadedFile]:
        return [f for f in self._files if f.category == category]

    def counts(self) -> Dict[FileCategory, int]:
        return {c: len(self.by_category(c)) for c in FileCategory}

    def __len__(self) -> int:
        return len(self._files)

    async def _accept(self, item, category: FileCategory) -> UploadedFile:
        filename = item.filename or "unnamed"
        try:
            data = await item.read()
            if not data:
                raise ValueError("file is empty")
            encoded = await asyncio.to_thread(_encode, data)
        except Exception as e:
            log_file_operation("encode", filename, success=False, error=str(e))
            raise EncodingError(filename, str(e)) from e

        log_file_operation("encode", filename, success=True, file_size_bytes=len(data))
        return UploadedFile(
            id=uuid.uuid4().hex[:9],
            filename=filename,
            content_type=item.content_type,
            category=category,
            raw=data,
            encoded=encoded,
        )

    async def add_files(self, selection: Iterable, category: FileCategory) -> IntakeReport:
        category = FileCategory(category)
        report = IntakeReport()

        for item in selection:
            if not is_supported_type(item.content_type):
                logger.warning(
                    f"Invalid file type: {item.content_type} for file {item.filename}"
                )
                report.rejected.append(
                    UnsupportedFileError(item.filename or "unnamed", item.content_type)
                )
                continue

            try:
                uploaded = await self._accept(item, category)
            except EncodingError as e:
                report.rejected.append(e)
                continue
            report.added.append(uploaded)

        self._files.extend(report.added)
        logger.info(
            f"Intake ({category.value}): {len(report.added)} added, "
            f"{len(report.rejected)} rejected, {len(self._files)} in working set"
        )
        return report

    def remove_file(self, file_id: str) -> bool:
        for i, f in enumerate(self._files):
            if f.id == file_id:
                del self._files[i]
                logger.info(f"Removed {f.filename} ({f.category.value}) from working set")
                return True
        return False

    def clear(self):
        self._files.clear()
