"""Builds the multi-part request sent to the generative model.

The instruction text is the model's only source of truth for the
AnalysisResult schema in app.models.schemas. Any change to that schema must
be mirrored in ANALYSIS_INSTRUCTION and PROMPT_VERSION bumped.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from app.models.schemas import FileCategory
from app.services.file_intake import UploadedFile

PROMPT_VERSION = "3"

ANALYSIS_INSTRUCTION = """\
You are an expert Indian Exam Strategist and Academic Psychologist.
I have provided the following documents:
1. Syllabus ({syllabus} file(s))
2. Previous Year Question (PYQ) Papers ({past_papers} file(s))
{reference_line}
Your task is to perform a "Deep Dive Pattern Analysis" to predict this year's exam.

CRITICAL INSTRUCTION: Extract SPECIFIC YEARS (e.g., 2018, 2019) from the papers. If not visible, estimate based on context.

Output a valid JSON object with the following structure:

1. "overview": string. Summary of exam difficulty trend (Markdown, paragraphs separated by newlines).
2. "weightage": Array of {{ "topic": string, "frequency": integer (0-100), "trend": "rising"|"falling"|"stable" }}.
3. "deepDive": Array of detailed concept analyses (Top 5-7 most important concepts).
   - "conceptName": string. The core topic.
   - "occurrences": Array of {{
        "year": string,
        "questionSnippet": string,
        "solution": string. Concise step-by-step solution (max 60 words). Focus on key steps.,
        "easyTrick": string. A short mental shortcut or 'jugaad' to solve it fast.
     }}.
   - "examinerPsychology": string. Why do they ask this? (e.g., "Tests linkage between topics", "Trap for rote learners").
   - "currentYearPrediction": string. The specific question predicted for THIS year.
   - "probability": "High"|"Medium"|"Low".
4. "twists": Array of {{ "originalConcept": string, "standardQuestion": string, "twistedVariation": string, "explanation": string }}. How they change the question to trick students.
5. "samplePaper": Predicted question paper for this year based on the patterns. Array of {{ "qNo": integer, "text": string, "marks": integer, "difficulty": "Easy"|"Medium"|"Hard", "topic": string }}. Generate at least 5-8 questions.
6. "predictions": Array of {{ "question": string, "topic": string, "probability": "High"|"Medium"|"Low", "reasoning": string }}.
7. "strategy": string. Detailed markdown strategy guide.

"overview", "weightage", "deepDive" and "strategy" are mandatory.
Use exactly the field names and enum values above; numbers must be JSON integers.
Focus on the "Indian Context" (JEE, NEET, UPSC, University Exams).
Keep the JSON clean and valid. Do not output excessive text that might break the JSON parser.
"""


@dataclass(frozen=True)
class FilePart:
    mime_type: str
    data: str
    filename: str


@dataclass(frozen=True)
class AnalysisRequest:
    file_parts: Tuple[FilePart, ...]
    instruction: str
    counts: Dict[FileCategory, int]
    prompt_version: str = PROMPT_VERSION

    @property
    def parts(self) -> Tuple:
        """File payloads in working-set order, instruction last."""
        return self.file_parts + (self.instruction,)


def build_instruction(syllabus: int, past_papers: int, references: int) -> str:
    reference_line = (
        f"3. Reference Books/Notes ({references} file(s))\n" if references > 0 else ""
    )
    return ANALYSIS_INSTRUCTION.format(
        syllabus=syllabus,
        past_papers=past_papers,
        reference_line=reference_line,
    )


def build(files: Sequence[UploadedFile]) -> AnalysisRequest:
    files = tuple(files)
    counts = {c: sum(1 for f in files if f.category == c) for c in FileCategory}

    file_parts = tuple(
        FilePart(mime_type=f.content_type, data=f.encoded, filename=f.filename)
        for f in files
        if f.encoded
    )
    instruction = build_instruction(
        counts[FileCategory.SYLLABUS],
        counts[FileCategory.PAST_PAPER],
        counts[FileCategory.REFERENCE],
    )
    return AnalysisRequest(file_parts=file_parts, instruction=instruction, counts=counts)
