"""Deterministic local content generators.

Used directly when no usable API key is configured, and embedded as the
`fallback` payload whenever an AI generation fails. Output depends only on
the arguments: fixed phrase templates, sequential numbering, no randomness.
"""
from typing import Any, Dict, List

from adaptive_learning.schemas import (
    AiQuiz,
    Assignment,
    BasicConcept,
    Concept,
    ConceptMapEntry,
    FlowStep,
    ImportantTopic,
    KnowledgeGraphPayload,
    LearningModule,
    Milestone,
    Phase,
    QuizAssignments,
    QuizQuestion,
    StudyPlan,
)

WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


def _dump(model) -> Dict[str, Any]:
    return model.model_dump(exclude_none=True)


def _quiz_models(subject: str, topic: str, num_questions: int) -> List[QuizQuestion]:
    return [
        QuizQuestion(
            id=i + 1,
            question=f"Diagnostic {subject} question: Regarding {topic}, which of these is a key foundational principle?",
            options=[
                f"Standard {topic} practice",
                f"Advanced {subject} methodology",
                f"Fundamental {topic} theory",
                "None of the above",
            ],
            correctIndex=2,
            explanation=f"Understanding the foundational theory of {topic} is critical for mastering {subject}.",
            targetConcept=topic,
            prerequisiteGap="Basic understanding",
        )
        for i in range(num_questions)
    ]


def _important_topics(topic: str) -> List[ImportantTopic]:
    return [ImportantTopic(name=topic, priority="high", prerequisites=["Foundation"])]


def generate_knowledge_graph(subject: str = "Mathematics", num_concepts: int = 12) -> Dict[str, Any]:
    """
    Build a linear prerequisite chain of numbered concepts.

    Levels spread evenly over 1..6 across the chain and difficulty cycles
    through 1..5; every concept depends on the one before it.
    """
    concepts = [
        Concept(
            name=f"{subject} concept {i + 1}",
            level=min(6, max(1, (i * 6) // num_concepts + 1)),
            description=f"Auto-generated concept {i + 1} for {subject}",
            difficulty=min(5, i % 5 + 1),
        )
        for i in range(num_concepts)
    ]
    dependencies = {
        concepts[i].name: [concepts[i - 1].name]
        for i in range(1, len(concepts))
    }
    return _dump(KnowledgeGraphPayload(concepts=concepts, dependencies=dependencies))


def generate_quiz_questions(
    subject: str = "Mathematics",
    topic: str = "basics",
    difficulty: str = "medium",
    num_questions: int = 3,
) -> List[Dict[str, Any]]:
    """Numbered diagnostic questions; the correct answer is always option 2."""
    # difficulty only shapes the AI prompt; local questions are the same at every tier
    return [_dump(q) for q in _quiz_models(subject, topic, num_questions)]


def generate_study_plan(subject: str = "Mathematics", duration: int = 4, duration_unit: str = "weeks") -> Dict[str, Any]:
    plan = StudyPlan(
        subject=subject,
        totalDuration=f"{duration} {duration_unit}",
        dailyStudyTime="1-2 hours",
        phases=[
            Phase(name="Fundamentals", duration="1 week", topics=["Basics"],
                  objectives=["Learn core concepts"], activities=["Read, practice"], resources=["Videos"]),
            Phase(name="Practice", duration=f"{max(1, duration - 2)} {duration_unit}", topics=["Problems"],
                  objectives=["Apply knowledge"], activities=["Exercises"], resources=["Practice sets"]),
            Phase(name="Assessment", duration="1 week", topics=["Review"],
                  objectives=["Solidify understanding"], activities=["Mock tests"], resources=["Tests"]),
        ],
        milestones=[
            Milestone(week=1, milestone="Learn foundations", metrics="70%+ on basics"),
            Milestone(week=max(2, duration - 1), milestone="Apply knowledge", metrics="80%+ on practice"),
            Milestone(week=max(3, duration), milestone="Achieve mastery", metrics="90%+ on assessment"),
        ],
        dailySchedule={
            "Monday": ["Concept review", "Practice"],
            "Tuesday": ["New concept", "Examples"],
        },
        resources=["YouTube", "Khan Academy"],
        tips=["Study consistently daily", "Take breaks every 45 mins", "Review previous concepts",
              "Practice actively, not passively"],
    )
    return _dump(plan)


def generate_learning_module(subject: str = "Mathematics", topic: str = "basics") -> Dict[str, Any]:
    module = LearningModule(
        basics=[
            BasicConcept(concept="Foundation", definition="Basic principles and definitions"),
            BasicConcept(concept="Core Concept", definition="Essential understanding of the topic"),
            BasicConcept(concept="Application", definition="How to use this knowledge"),
        ],
        flowchart=[
            FlowStep(step=1, title="Learn Basics", description="Understand fundamental concepts"),
            FlowStep(step=2, title="Practice", description="Apply knowledge through problems"),
            FlowStep(step=3, title="Master", description="Achieve mastery through assessment"),
        ],
        quiz=_quiz_models(subject, topic, 3),
        youtubeTopics=[
            f"{subject} {topic} {suffix}"
            for suffix in ("basics", "tutorial", "explained", "practice problems", "advanced")
        ],
        recapTimetable={
            "Monday": ["09:00 - Learn basics (60 min)", "10:00 - Understand concepts (30 min)"],
            "Tuesday": ["09:00 - Watch tutorial (45 min)", "09:45 - Practice problems (45 min)"],
            "Wednesday": ["10:00 - Concept review (60 min)", "11:00 - Self-assessment (30 min)"],
            "Thursday": ["09:00 - Problem solving (90 min)", "10:30 - Review mistakes (30 min)"],
            "Friday": ["10:00 - Practice test (60 min)", "11:00 - Week recap (30 min)"],
            "Saturday": ["10:00 - Extra practice (90 min)", "11:30 - Resource exploration (30 min)"],
            "Sunday": ["10:00 - Light review (30 min)", "10:30 - Plan next week (30 min)"],
        },
        conceptMap=[
            ConceptMapEntry(name="Foundation", type="foundational"),
            ConceptMapEntry(name="Core Concept", type="intermediate"),
            ConceptMapEntry(name="Application", type="intermediate"),
            ConceptMapEntry(name="Advanced Topic", type="advanced"),
        ],
    )
    return _dump(module)


def generate_quiz_assignments(subject: str = "Mathematics", topic: str = "basics", num_assignments: int = 3) -> Dict[str, Any]:
    assignments = [
        Assignment(
            id=i + 1,
            title=f"{topic} assignment {i + 1}",
            dueInDays=3 + i,
            quiz=_quiz_models(subject, topic, 3),
        )
        for i in range(num_assignments)
    ]
    return _dump(QuizAssignments(importantTopics=_important_topics(topic), assignments=assignments))


def generate_ai_quiz(
    subject: str = "General",
    topic: str = "basics",
    difficulty: str = "medium",
    num_questions: int = 5,
) -> Dict[str, Any]:
    quiz = AiQuiz(importantTopics=_important_topics(topic), quiz=_quiz_models(subject, topic, num_questions))
    return _dump(quiz)
