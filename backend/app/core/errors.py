"""Error taxonomy for the analysis pipeline.

Every error carries a human-readable message and the HTTP status the API
answers with. None of them is fatal: the analyzer turns them into the Error
status and the user retries from Idle.
"""

from typing import Optional


class ExamStrategistError(Exception):
    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(ExamStrategistError):
    """Required file categories are missing from the working set."""

    status_code = 400


class UnsupportedFileError(ExamStrategistError):
    """The file is neither a PDF nor an image."""

    status_code = 415

    def __init__(self, filename: str, content_type: Optional[str]):
        super().__init__(
            f"File {filename} is not supported. Please upload PDFs or Images."
        )
        self.filename = filename
        self.content_type = content_type


class EncodingError(ExamStrategistError):
    """A single file could not be read or base64-encoded."""

    status_code = 422

    def __init__(self, filename: str, reason: str):
        super().__init__(f"Error processing file {filename}: {reason}")
        self.filename = filename
        self.reason = reason


class PayloadTooLargeError(ExamStrategistError):
    status_code = 413

    def __init__(self, message: Optional[str] = None):
        super().__init__(
            message
            or "The files are too large. Please try uploading fewer or smaller files."
        )


class MalformedResponseError(ExamStrategistError):
    """The model answered, but not with a valid analysis document."""

    status_code = 502

    def __init__(self, message: str, raw_text: str):
        super().__init__(message)
        self.raw_text = raw_text


class AnalysisFailedError(ExamStrategistError):
    status_code = 502
