"""
Study Assistant Prompts

LLM prompts for the exam-prep assistant:
1. System prompt (exam tutor persona)
2. Study content (explanations, flashcards, quizzes, summaries, PYQs)
3. Smart learning room lessons, doubts, question and topic suggestions
4. Study plans (JSON output, parsed by parse_model_output)
5. Streak motivation messages

Templates use str.format placeholders; literal braces are doubled.
"""

from datetime import date
from typing import Optional

from examprep.enums.learning import LearningTag, StudyContentType
from examprep.models.streak import StreakContext


# =============================================================================
# System Prompt
# =============================================================================

SYSTEM_PROMPT = """You are an AI study companion for students preparing for competitive and board exams (JEE, NEET, UPSC, CAT, GATE, SSC, Banking, CBSE, ICSE, State Boards).

Language style:
- Use simple, clear English
- Write like a friendly senior explaining to a younger student
- Avoid complex vocabulary and use everyday words

Exam-focused approach:
- Always connect concepts to how they appear in exams
- Mention typical weightage and how often a topic is asked
- Include shortcuts and tricks wherever possible
- Point out common mistakes students make in exams

Response guidelines:
1. Start with a brief, encouraging intro
2. Break complex topics into numbered steps
3. Use bullet points for key facts
4. Highlight formulas in a clear format
5. End with quick revision points or exam tips
6. Keep it concise, students have limited time

Your goal is to help students score maximum marks in minimum time."""


# =============================================================================
# Study Content
# =============================================================================

STUDY_CONTENT_PROMPTS: dict[StudyContentType, str] = {
    StudyContentType.EXPLANATION: (
        'Explain the topic "{topic}" in {subject} for exam preparation. '
        "Include key concepts, important formulas (if any), and exam tips."
    ),
    StudyContentType.FLASHCARDS: """Create 5 flashcards for the topic "{topic}" in {subject}. Format each flashcard as:
Q: [Question]
A: [Answer]
Make questions exam-focused and answers concise but complete.""",
    StudyContentType.QUIZ: """Create 5 multiple choice questions on "{topic}" in {subject} for exam practice. Format:
Q1: [Question]
a) [Option]
b) [Option]
c) [Option]
d) [Option]
Answer: [Correct option with brief explanation]""",
    StudyContentType.SUMMARY: """Provide a quick revision summary of "{topic}" in {subject}. Include:
- Key points (bullet points)
- Important formulas/facts
- Common exam patterns
- Memory tricks if any""",
    StudyContentType.PYQ_STYLE: (
        'Create 3 previous year exam style questions on "{topic}" in {subject}. '
        "Include variety: one easy, one medium, one hard. Provide solutions."
    ),
}


def resolve_content_type(content_type: Optional[str]) -> StudyContentType:
    """Map a requested content type onto a known one, defaulting to explanation."""
    if not content_type:
        return StudyContentType.EXPLANATION
    try:
        return StudyContentType(content_type.lower())
    except ValueError:
        return StudyContentType.EXPLANATION


def build_study_content_prompt(
    subject: str,
    topic: str,
    content_type: StudyContentType,
) -> str:
    return STUDY_CONTENT_PROMPTS[content_type].format(subject=subject, topic=topic)


# =============================================================================
# Smart Learning Room
# =============================================================================

LEARNING_SECTION_PROMPTS: dict[LearningTag, str] = {
    LearningTag.BRIEF: """BRIEF EXPLANATION:
Explain "{topic}" in 3-4 simple sentences. Keep it short and easy to understand.""",
    LearningTag.DETAILED: """DETAILED EXPLANATION:
Explain "{topic}" in depth with:
- Core concept and definition
- How it works (step by step)
- Key components/parts
- Why it's important
Keep language simple but thorough.""",
    LearningTag.QUESTIONS: """10 PRACTICE QUESTIONS:
Create 10 exam-style questions on "{topic}":
- 3 Easy (direct concept)
- 4 Medium (application based)
- 3 Hard (analytical/tricky)
Format: Q1, Q2... with answers at the end.""",
    LearningTag.ANALOGY: """REAL-LIFE ANALOGY:
Explain "{topic}" using 2-3 relatable real-life examples from everyday situations, sports, movies or common experiences.""",
    LearningTag.DOS_DONTS: """DO'S & DON'TS:
List important Do's and Don'ts for "{topic}":
✅ DO's (5-6 points) - What to remember, correct approaches
❌ DON'Ts (5-6 points) - Common wrong approaches, what to avoid""",
    LearningTag.EXAM_POINTS: """EXAM IMPORTANT POINTS:
For "{topic}", list:
- Most frequently asked concepts (mark with ⭐)
- Formulas/facts that MUST be memorized
- Types of questions asked in exams
- Marks weightage (if applicable)
- Previous year pattern insights""",
    LearningTag.QUICK_REVISION: """QUICK REVISION NOTES:
Create bullet-point revision notes for "{topic}":
- Key definitions (one line each)
- Important formulas/facts
- Memory tricks/mnemonics
- Quick summary in 5 points
Perfect for last-minute revision.""",
    LearningTag.MISTAKES: """COMMON MISTAKES:
List common mistakes students make in "{topic}":
- Conceptual errors
- Calculation mistakes
- Silly mistakes in exams
- How to avoid each mistake
- Correct approach for each""",
}

SMART_LEARNING_PROMPT = """You are helping a student learn "{topic}"{subject_part}{exam_part}.

Generate content for the following sections:

{sections}

IMPORTANT GUIDELINES:
- Use simple English
- Be exam-focused and practical
- Include tips wherever relevant
- Make it easy to understand and remember

Return the response in this JSON format:
{{
  "topic": "{topic}",
  "sections": {{
    {section_keys}
  }}
}}"""


def resolve_learning_tags(tags: list[str]) -> list[LearningTag]:
    """Keep the known tags, in request order and without repeats."""
    resolved: list[LearningTag] = []
    for tag in tags:
        try:
            learning_tag = LearningTag(tag.strip().lower())
        except ValueError:
            continue
        if learning_tag not in resolved:
            resolved.append(learning_tag)
    return resolved


def build_smart_learning_prompt(
    topic: str,
    tags: list[LearningTag],
    subject: str = "",
    exam_type: str = "",
) -> str:
    sections = "\n\n---\n\n".join(
        LEARNING_SECTION_PROMPTS[tag].format(topic=topic) for tag in tags
    )
    return SMART_LEARNING_PROMPT.format(
        topic=topic,
        subject_part=f" in {subject}" if subject else "",
        exam_part=f" for {exam_type} exam" if exam_type else "",
        sections=sections,
        section_keys=",\n    ".join(f'"{tag.value}": "content here"' for tag in tags),
    )


# =============================================================================
# Doubts
# =============================================================================

DOUBT_PROMPT = """Context: {context}

Student's doubt: {question}

Please explain in simple terms with exam focus."""


def build_doubt_prompt(
    question: str,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
    exam_type: Optional[str] = None,
) -> str:
    """Wrap the question with its context; a bare question is sent as is."""
    context = []
    if exam_type:
        context.append(f"Exam: {exam_type}")
    if subject:
        context.append(f"Subject: {subject}")
    if topic:
        context.append(f"Topic: {topic}")

    if not context:
        return question
    return DOUBT_PROMPT.format(context=", ".join(context), question=question)


# =============================================================================
# Suggestions
# =============================================================================

QUESTION_SUGGESTIONS_PROMPT = """Generate {count} smart, exam-focused questions that a student preparing for {exam_name} would want to ask.

STUDENT PROFILE:
{profile}

GENERATE {count} QUESTIONS:
- 2 questions about weak/difficult concepts (conceptual doubts)
- 2 questions about exam strategies/tips
- 2 questions about specific topics from their syllabus

REQUIREMENTS:
- Questions should be specific, not generic
- Focus on what students actually struggle with
- Include subject name in question where relevant
- Make them sound natural (like a student would ask)
- Keep questions concise (under 15 words each)

Return ONLY a JSON array of {count} question strings:
["question1", "question2", ...]"""

TOPIC_SUGGESTIONS_PROMPT = """You are helping a student preparing for {exam_name}.

STUDENT PROFILE:
{profile}

Generate {count} topic suggestions for the student to study next. Include:
- 3 high-weightage/important topics for their exam
- 2 topics they haven't studied recently (if recent topics provided)
- 3 foundational topics that are prerequisites for advanced concepts

REQUIREMENTS:
- Topics must be from their subjects: {subjects}
- Be specific (e.g., "Newton's Laws of Motion" not just "Physics")
- Focus on exam-relevant topics
- Each topic should be 2-5 words
- Don't repeat recently studied topics

Return ONLY a JSON array of {count} topic strings:
["topic1", "topic2", ...]"""

QUESTION_SUGGESTION_COUNT = 6
TOPIC_SUGGESTION_COUNT = 8
WEAK_SUBJECT_MAX_CONFIDENCE = 2


def _syllabus_line(topics: dict[str, str]) -> str:
    return "; ".join(f"{subject}: {text}" for subject, text in topics.items())


def build_question_suggestions_prompt(
    exam_name: Optional[str],
    subjects: list[str],
    topics: dict[str, str],
    weak_subjects: dict[str, int],
    recent_topics: list[str],
) -> str:
    """
    Prompt for questions the learner is likely to ask.

    Subjects rated at or below WEAK_SUBJECT_MAX_CONFIDENCE are listed as
    weak areas.
    """
    weak = [
        subject
        for subject, confidence in weak_subjects.items()
        if confidence <= WEAK_SUBJECT_MAX_CONFIDENCE
    ]
    profile = [
        f"- Exam: {exam_name or 'Competitive Exam'}",
        f"- Subjects: {', '.join(subjects) or 'General subjects'}",
        f"- Topics being studied: {_syllabus_line(topics) or 'Various topics'}",
    ]
    if weak:
        profile.append(f"- Weak areas: {', '.join(weak)}")
    if recent_topics:
        profile.append(f"- Recently studied: {', '.join(recent_topics)}")

    return QUESTION_SUGGESTIONS_PROMPT.format(
        count=QUESTION_SUGGESTION_COUNT,
        exam_name=exam_name or "competitive exams",
        profile="\n".join(profile),
    )


def build_topic_suggestions_prompt(
    exam_name: Optional[str],
    subjects: list[str],
    topics: dict[str, str],
    recent_topics: list[str],
) -> str:
    subjects_list = ", ".join(subjects) or "General subjects"
    profile = [
        f"- Exam: {exam_name or 'Competitive Exam'}",
        f"- Subjects: {subjects_list}",
        f"- Syllabus topics: {_syllabus_line(topics) or 'Not specified'}",
    ]
    if recent_topics:
        profile.append(f"- Recently studied: {', '.join(recent_topics)}")

    return TOPIC_SUGGESTIONS_PROMPT.format(
        count=TOPIC_SUGGESTION_COUNT,
        exam_name=exam_name or "competitive exams",
        profile="\n".join(profile),
        subjects=subjects_list,
    )


# =============================================================================
# Study Plans
# =============================================================================

STUDY_PLAN_PROMPT = """Create a detailed study plan for a student preparing for {exam_name}.

STUDENT DETAILS:
- Exam Date: {exam_date} ({days_left} days left, ~{weeks_left} weeks)
- Daily Study Hours Available: {daily_hours} hours
- Subjects & Topics:
{syllabus}

GENERATE A COMPLETE STUDY PLAN WITH:

1. DAILY TIMETABLE (for a typical day):
   - Create hour-by-hour schedule for {daily_hours} hours
   - Include short breaks (5-10 min after every 45-50 min)
   - Allocate more time to weak subjects
   - Include revision slots

2. WEEKLY PLAN ({plan_weeks} weeks):
   - Week-wise breakdown of topics to cover
   - Focus more on weak subjects in early weeks
   - Keep last 1-2 weeks for revision and mock tests

3. REVISION STRATEGY:
   - Daily quick revision (15-20 min)
   - Weekly revision schedule
   - Formula/fact sheets to prepare

4. EXAM TIPS:
   - Subject-wise scoring strategies
   - Time management in exam
   - Common mistakes to avoid

IMPORTANT:
- Give more weightage to weak subjects (low confidence scores)
- Be realistic with the time available
- Include buffer time for unexpected delays
- Suggest a mock test schedule

Return the response in this JSON format:
{{
  "dailyTimetable": [
    {{"time": "6:00 AM - 7:00 AM", "subject": "Physics", "activity": "Theory + Notes", "duration": "60 min"}}
  ],
  "weeklyPlan": [
    {{"week": 1, "focus": "Foundation Building", "subjects": [{{"name": "Physics", "topics": ["Mechanics basics"], "hours": 10}}]}}
  ],
  "revisionStrategy": {{
    "daily": "description",
    "weekly": "description",
    "sheets": ["list of sheets to prepare"]
  }},
  "examTips": ["tip1", "tip2"],
  "summary": "Brief motivational summary"
}}"""

MAX_PLAN_WEEKS = 8
DEFAULT_SUBJECT_CONFIDENCE = 3


def subject_priority(confidence: int) -> str:
    """Describe how much attention a subject needs given its 1-5 confidence."""
    if confidence <= 2:
        return "HIGH PRIORITY (Weak)"
    if confidence >= 4:
        return "Low priority (Strong)"
    return "Medium priority"


def build_study_plan_prompt(
    exam_name: str,
    exam_date: date,
    days_left: int,
    weeks_left: int,
    daily_hours: float,
    subjects: list[str],
    topics: dict[str, str],
    subject_confidence: dict[str, int],
) -> str:
    lines = []
    for subject in subjects:
        confidence = subject_confidence.get(subject, DEFAULT_SUBJECT_CONFIDENCE)
        lines.append(
            f"- {subject}: {topics.get(subject) or 'General topics'} "
            f"[Confidence: {confidence}/5, {subject_priority(confidence)}]"
        )

    return STUDY_PLAN_PROMPT.format(
        exam_name=exam_name,
        exam_date=exam_date.isoformat(),
        days_left=days_left,
        weeks_left=weeks_left,
        daily_hours=f"{daily_hours:g}",
        syllabus="\n".join(lines),
        plan_weeks=max(1, min(weeks_left, MAX_PLAN_WEEKS)),
    )


# =============================================================================
# Streak Motivation
# =============================================================================

MOTIVATION_PROMPT = """Generate a short, motivational message (2-3 sentences max) for a student preparing for {exam_name}.

Context: {context}
{name_line}Current streak: {current_streak} days
Longest streak: {longest_streak} days

Guidelines:
- Use simple English
- Be warm and encouraging like a supportive elder sibling
- Include a relevant emoji
- If the streak is broken, be understanding not harsh
- Reference their progress or exam if relevant
- Keep it SHORT and impactful

Return ONLY the message, nothing else."""

FALLBACK_MESSAGES = [
    "🌟 Every day you study brings you closer to your dreams. Keep going!",
    "💪 Consistency is key! Your dedication will pay off.",
    "🎯 Focus on progress, not perfection. You're doing great!",
    "📚 Small steps daily lead to big achievements. Keep it up!",
]


def streak_situation(current_streak: int) -> str:
    """Describe the streak for the prompt, bucketed by length."""
    if current_streak == 0:
        return "Student missed yesterday. Encourage them to start fresh today."
    if current_streak == 1:
        return "Student just started their streak. Motivate them to keep going."
    if current_streak < 7:
        return f"Student has a {current_streak}-day streak. Encourage consistency."
    if current_streak < 30:
        return f"Amazing {current_streak}-day streak! Celebrate their dedication."
    return f"Incredible {current_streak}-day streak! They are a champion."


def build_motivation_prompt(context: StreakContext, urgency_days: int = 30) -> str:
    situation = streak_situation(context.current_streak)
    days = context.days_to_exam
    if days is not None and 0 < days < urgency_days:
        situation += f" Exam is in {days} days - add urgency but stay positive."

    return MOTIVATION_PROMPT.format(
        exam_name=context.exam_name or "competitive exams",
        context=situation,
        name_line=f"Student name: {context.user_name}\n" if context.user_name else "",
        current_streak=context.current_streak,
        longest_streak=context.longest_streak,
    )
