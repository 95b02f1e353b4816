"""View state for the analysis dashboard.

Holds everything the dashboard renders from one AnalysisResult: summary
sections, the weightage chart series, paginated deep-dive cards, the
solution viewer and the study-mode walk over every historical question.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from app.models.schemas import AnalysisResult, DeepDiveConcept, HistoricalOccurrence

PAGE_SIZE = 3

CHART_COLORS = ["#4f46e5", "#10b981", "#f59e0b", "#ef4444", "#6366f1", "#8b5cf6"]

NEUTRAL_BADGE = "slate"
PROBABILITY_BADGES = {"High": "red", "Medium": "amber", "Low": "green"}
DIFFICULTY_BADGES = {"Easy": "green", "Medium": "amber", "Hard": "red"}
TREND_BADGES = {"rising": "emerald", "falling": "red", "stable": "slate"}

DEFAULT_TRICK = "Focus on the core concept definition."


def badge(mapping: Dict[str, str], value: Any) -> str:
    return mapping.get(value, NEUTRAL_BADGE)


def paragraphs(text: str) -> List[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


class Paginator:
    """1-based page cursor over the deep-dive concepts."""

    def __init__(self, items: Sequence, page_size: int = PAGE_SIZE):
        self.items = list(items)
        self.page_size = page_size
        self.current_page = 1

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.items) / self.page_size)

    @property
    def has_prev(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages

    def go_to(self, page: int) -> bool:
        if 1 <= page <= self.total_pages:
            self.current_page = page
            return True
        return False

    def next_page(self) -> bool:
        return self.go_to(self.current_page + 1)

    def prev_page(self) -> bool:
        return self.go_to(self.current_page - 1)

    def current_items(self) -> List:
        start = (self.current_page - 1) * self.page_size
        return self.items[start:start + self.page_size]


@dataclass(frozen=True)
class StudyItem:
    concept_name: str
    examiner_psychology: str
    occurrence: HistoricalOccurrence


def build_study_queue(concepts: Sequence[DeepDiveConcept]) -> List[StudyItem]:
    return [
        StudyItem(
            concept_name=concept.concept_name,
            examiner_psychology=concept.examiner_psychology,
            occurrence=occ,
        )
        for concept in concepts
        for occ in concept.occurrences
    ]


class StudyMode(str, Enum):
    BROWSING = "Browsing"
    STUDYING = "Studying"


class StudySession:
    """Linear walk over the study queue with a reveal-the-answer gate.

    Navigation never wraps: at either end the move is a no-op. Entering any
    question hides the answer again.
    """

    def __init__(self, queue: Sequence[StudyItem]):
        self.queue = list(queue)
        self.mode = StudyMode.BROWSING
        self.index = 0
        self.answer_revealed = False

    @property
    def studying(self) -> bool:
        return self.mode == StudyMode.STUDYING

    @property
    def can_prev(self) -> bool:
        return self.studying and self.index - 1 >= 0

    @property
    def can_next(self) -> bool:
        return self.studying and self.index + 1 < len(self.queue)

    def _enter(self, index: int):
        self.mode = StudyMode.STUDYING
        self.index = index
        self.answer_revealed = False

    def start(self, index: int = 0) -> bool:
        if not 0 <= index < len(self.queue):
            return False
        self._enter(index)
        return True

    def next(self) -> bool:
        if not self.can_next:
            return False
        self._enter(self.index + 1)
        return True

    def prev(self) -> bool:
        if not self.can_prev:
            return False
        self._enter(self.index - 1)
        return True

    def reveal(self) -> bool:
        if not self.studying:
            return False
        self.answer_revealed = True
        return True

    def exit(self):
        self.mode = StudyMode.BROWSING
        self.answer_revealed = False

    @property
    def current(self) -> Optional[StudyItem]:
        return self.queue[self.index] if self.studying else None

    def view(self) -> Dict[str, Any]:
        view: Dict[str, Any] = {
            "mode": self.mode.value,
            "queue_length": len(self.queue),
        }
        item = self.current
        if item is None:
            return view

        occ = item.occurrence
        view.update(
            index=self.index,
            position=f"{self.index + 1} / {len(self.queue)}",
            answer="AnswerRevealed" if self.answer_revealed else "AnswerHidden",
            can_prev=self.can_prev,
            can_next=self.can_next,
            concept_name=item.concept_name,
            examiner_psychology=item.examiner_psychology,
            year=occ.year,
            question=occ.question_snippet,
        )
        if self.answer_revealed:
            view.update(solution=occ.solution, easy_trick=occ.easy_trick or DEFAULT_TRICK)
        return view


def _concept_card(concept: DeepDiveConcept) -> Dict[str, Any]:
    return {
        "concept_name": concept.concept_name,
        "probability": concept.probability,
        "badge": badge(PROBABILITY_BADGES, concept.probability),
        "timeline": [
            {"year": occ.year, "question_snippet": occ.question_snippet}
            for occ in concept.occurrences
        ],
        "examiner_psychology": concept.examiner_psychology,
        "current_year_prediction": concept.current_year_prediction,
    }


class Dashboard:
    def __init__(self, result: AnalysisResult):
        self.result = result
        self.paginator = Paginator(result.deep_dive)
        self.study = StudySession(build_study_queue(result.deep_dive))
        self.selected_solution: Optional[HistoricalOccurrence] = None

    def select_solution(self, concept_index: int, occurrence_index: int) -> bool:
        concepts = self.result.deep_dive
        if not 0 <= concept_index < len(concepts):
            return False
        occurrences = concepts[concept_index].occurrences
        if not 0 <= occurrence_index < len(occurrences):
            return False
        self.selected_solution = occurrences[occurrence_index]
        return True

    def close_solution(self):
        self.selected_solution = None

    def solution_view(self) -> Optional[Dict[str, Any]]:
        occ = self.selected_solution
        if occ is None:
            return None
        return {
            "year": occ.year,
            "question_snippet": occ.question_snippet,
            "solution": occ.solution,
            "easy_trick": occ.easy_trick or DEFAULT_TRICK,
        }

    def weightage_chart(self) -> List[Dict[str, Any]]:
        return [
            {
                "topic": w.topic,
                "frequency": w.frequency,
                "trend": w.trend,
                "trend_badge": badge(TREND_BADGES, w.trend),
                "color": CHART_COLORS[i % len(CHART_COLORS)],
            }
            for i, w in enumerate(self.result.weightage)
        ]

    def deep_dive_page(self) -> Dict[str, Any]:
        p = self.paginator
        return {
            "page": p.current_page,
            "total_pages": p.total_pages,
            "has_prev": p.has_prev,
            "has_next": p.has_next,
            "concepts": [_concept_card(c) for c in p.current_items()],
        }

    def sample_paper(self) -> Optional[Dict[str, Any]]:
        questions = self.result.sample_paper
        if not questions:
            return None
        return {
            "max_marks": sum(q.marks for q in questions),
            "questions": [
                {
                    "q_no": q.q_no,
                    "text": q.text,
                    "marks": q.marks,
                    "topic": q.topic,
                    "difficulty": q.difficulty,
                    "badge": badge(DIFFICULTY_BADGES, q.difficulty),
                }
                for q in questions
            ],
        }

    def twists(self) -> Optional[List[Dict[str, Any]]]:
        if not self.result.twists:
            return None
        return [t.model_dump() for t in self.result.twists]

    def predictions(self) -> Optional[List[Dict[str, Any]]]:
        if not self.result.predictions:
            return None
        return [
            dict(p.model_dump(), badge=badge(PROBABILITY_BADGES, p.probability))
            for p in self.result.predictions
        ]

    def render(self) -> Dict[str, Any]:
        view = {
            "overview": paragraphs(self.result.overview),
            "deep_dive": self.deep_dive_page(),
            "weightage": self.weightage_chart(),
            "sample_paper": self.sample_paper(),
            "twists": self.twists(),
            "predictions": self.predictions(),
            "strategy": paragraphs(self.result.strategy),
            "solution": self.solution_view(),
            "study": self.study.view(),
        }
        # Optional sections the model left out are not rendered at all.
        return {k: v for k, v in view.items() if v is not None}
