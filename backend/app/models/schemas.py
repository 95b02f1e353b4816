from enum import Enum
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class FileCategory(str, Enum):
    SYLLABUS = "syllabus"
    PAST_PAPER = "past_paper"
    REFERENCE = "reference"


class AnalysisStatus(str, Enum):
    IDLE = "Idle"
    ANALYZING = "Analyzing"
    COMPLETED = "Completed"
    ERROR = "Error"


Trend = Literal["rising", "falling", "stable"]
Probability = Literal["High", "Medium", "Low"]
Difficulty = Literal["Easy", "Medium", "Hard"]


# --- Analysis result contract -------------------------------------------
#
# Field names follow the JSON keys the model is instructed to emit (see
# request_builder.ANALYSIS_INSTRUCTION). Validation is strict: a value of
# the wrong type is rejected instead of coerced.


class _ResultModel(BaseModel):
    model_config = ConfigDict(strict=True, populate_by_name=True)


class TopicWeightage(_ResultModel):
    topic: str
    frequency: int = Field(ge=0, le=100)
    trend: Trend


class HistoricalOccurrence(_ResultModel):
    year: str
    question_snippet: str = Field(alias="questionSnippet")
    solution: str
    easy_trick: str = Field(alias="easyTrick")


class DeepDiveConcept(_ResultModel):
    concept_name: str = Field(alias="conceptName")
    occurrences: List[HistoricalOccurrence]
    examiner_psychology: str = Field(alias="examinerPsychology")
    current_year_prediction: str = Field(alias="currentYearPrediction")
    probability: Probability


class QuestionTwist(_ResultModel):
    original_concept: str = Field(alias="originalConcept")
    standard_question: str = Field(alias="standardQuestion")
    twisted_variation: str = Field(alias="twistedVariation")
    explanation: str


class SampleQuestion(_ResultModel):
    q_no: int = Field(alias="qNo")
    text: str
    marks: int
    difficulty: Difficulty
    topic: str


class PredictedQuestion(_ResultModel):
    question: str
    topic: str
    probability: Probability
    reasoning: str


class AnalysisResult(_ResultModel):
    overview: str
    weightage: List[TopicWeightage]
    deep_dive: List[DeepDiveConcept] = Field(alias="deepDive")
    twists: List[QuestionTwist] = Field(default_factory=list)
    sample_paper: List[SampleQuestion] = Field(default_factory=list, alias="samplePaper")
    predictions: List[PredictedQuestion] = Field(default_factory=list)
    strategy: str

    def to_document(self) -> Dict[str, Any]:
        """Wire form, limited to the fields the model actually sent."""
        return self.model_dump(by_alias=True, exclude_unset=True)


# --- API payloads --------------------------------------------------------


class UploadedFileInfo(BaseModel):
    id: str
    filename: str
    content_type: str
    size: int
    category: FileCategory


class FileNotice(BaseModel):
    filename: str
    kind: str
    message: str


class IntakeResponse(BaseModel):
    added: List[UploadedFileInfo]
    notices: List[FileNotice]


class FileListSection(BaseModel):
    category: FileCategory
    title: str
    multiple: bool
    files: List[UploadedFileInfo]


class AnalysisStateResponse(BaseModel):
    status: AnalysisStatus
    error: Optional[str] = None
    result: Optional[Dict[str, Any]] = None
