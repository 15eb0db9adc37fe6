"""
Learning System Enums

Defines enums for topic strength classification, study recommendations
and AI-generated study content.
"""

from enum import Enum


class StrengthLabel(str, Enum):
    """
    Three-way mastery classification of a topic.

    Derived from the strength score via fixed thresholds:
    - STRONG: score >= 70
    - MEDIUM: 40 <= score < 70
    - WEAK: score < 40 (also used for topics that were never scored)
    """

    STRONG = "strong"
    MEDIUM = "medium"
    WEAK = "weak"


class RecommendationPriority(str, Enum):
    """
    Priority of a study recommendation.

    Weak topics get HIGH priority, medium topics MEDIUM, strong topics LOW.
    """

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        """Sort rank, lower comes first."""
        return _PRIORITY_RANK[self]


_PRIORITY_RANK = {
    RecommendationPriority.HIGH: 0,
    RecommendationPriority.MEDIUM: 1,
    RecommendationPriority.LOW: 2,
}


class StudyContentType(str, Enum):
    """
    Kinds of study material the assistant can generate for a topic.
    """

    EXPLANATION = "explanation"  # Key concepts, formulas and exam tips
    FLASHCARDS = "flashcards"  # 5 Q/A cards
    QUIZ = "quiz"  # 5 multiple choice questions with answers
    SUMMARY = "summary"  # Quick revision sheet
    PYQ_STYLE = "pyq_style"  # Previous-year-paper style questions with solutions


class StudyPlanStatus(str, Enum):
    """Lifecycle of a stored study plan."""

    ACTIVE = "active"
    SUPERSEDED = "superseded"


class LearningTag(str, Enum):
    """
    Sections a learner can pick in the smart learning room.

    Each selected tag becomes one section of a single generated lesson.
    """

    BRIEF = "brief"  # 3-4 sentence overview
    DETAILED = "detailed"  # Step-by-step explanation
    QUESTIONS = "questions"  # 10 practice questions, easy to hard
    ANALOGY = "analogy"  # Real-life examples
    DOS_DONTS = "dosdonts"
    EXAM_POINTS = "exampoints"  # Frequently asked concepts and must-know facts
    QUICK_REVISION = "quickrevision"
    MISTAKES = "mistakes"  # Common mistakes and how to avoid them
