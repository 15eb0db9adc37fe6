"""
Study Material Services

Modules:
- content: Explanations, flashcards, quizzes, summaries and PYQ-style questions
- plans: Study plan generation, retrieval and progress-based adjustment
- notes: Saved notes
"""

from examprep.services.study.content import StudyContentService
from examprep.services.study.notes import NoteService
from examprep.services.study.plans import StudyPlanService, build_adjustments

__all__ = [
    "StudyContentService",
    "NoteService",
    "StudyPlanService",
    "build_adjustments",
]
