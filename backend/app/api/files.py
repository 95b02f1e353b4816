import time
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from app.models.schemas import FileCategory, FileListSection, IntakeResponse
from app.services.file_intake import CATEGORY_TITLES, WorkingSet, allows_multiple
from app.api.deps import get_working_set
from app.utils.logger import (
    log_operation_end,
    log_operation_start,
    log_performance,
    logger,
)

router = APIRouter()


def file_list_section(working_set: WorkingSet, category: FileCategory) -> FileListSection:
    return FileListSection(
        category=category,
        title=CATEGORY_TITLES[category],
        multiple=allows_multiple(category),
        files=[f.info() for f in working_set.by_category(category)],
    )


@router.get("/", response_model=List[FileListSection])
def list_files(working_set: WorkingSet = Depends(get_working_set)):
    return [file_list_section(working_set, c) for c in FileCategory]


@router.post("/{category}", response_model=IntakeResponse)
async def upload_files(
    category: FileCategory,
    files: List[UploadFile] = File(...),
    working_set: WorkingSet = Depends(get_working_set),
):
    start_time = time.time()
    log_operation_start(
        "upload_files",
        metadata={"category": category.value, "files": [f.filename for f in files]},
    )

    if len(files) > 1 and not allows_multiple(category):
        logger.warning(f"Rejected {len(files)}-file selection for {category.value}")
        raise HTTPException(
            status_code=400,
            detail=f"Only one {CATEGORY_TITLES[category]} file can be selected at a time",
        )

    report = await working_set.add_files(files, category)

    duration = (time.time() - start_time) * 1000
    log_performance(
        "upload_files",
        duration,
        success=True,
        metadata={
            "category": category.value,
            "added": len(report.added),
            "rejected": len(report.rejected),
        },
    )
    log_operation_end("upload_files", duration, metadata={"category": category.value})

    return IntakeResponse(
        added=[f.info() for f in report.added],
        notices=report.notices(),
    )


@router.delete("/")
def clear_files(working_set: WorkingSet = Depends(get_working_set)):
    removed = len(working_set)
    working_set.clear()
    logger.info(f"Working set cleared ({removed} files)")
    return {"removed": removed}


@router.delete("/{file_id}")
def remove_file(file_id: str, working_set: WorkingSet = Depends(get_working_set)):
    if not working_set.remove_file(file_id):
        raise HTTPException(status_code=404, detail="File not found")
    return {"removed": file_id}
