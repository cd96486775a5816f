"""Pydantic shapes for the content the server hands to the client.

Upstream output is passed through untouched once its required top-level
fields are present; these models describe what the local generator
produces and what the renderer expects to find.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Concept(BaseModel):
    name: str
    level: int = Field(1, ge=1, le=6)
    description: str = ""
    difficulty: int = Field(1, ge=1, le=5)


class KnowledgeGraphPayload(BaseModel):
    concepts: List[Concept]
    dependencies: Dict[str, List[str]] = {}


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: List[str]
    correctIndex: int = 0
    explanation: str = ""
    targetConcept: Optional[str] = None
    prerequisiteGap: Optional[str] = None


class Phase(BaseModel):
    name: str
    duration: str
    topics: List[str] = []
    objectives: List[str] = []
    activities: List[str] = []
    resources: List[str] = []


class Milestone(BaseModel):
    week: int
    milestone: str
    metrics: str = ""


class StudyPlan(BaseModel):
    subject: str
    totalDuration: str
    dailyStudyTime: str
    phases: List[Phase]
    milestones: List[Milestone] = []
    dailySchedule: Dict[str, List[str]] = {}
    resources: List[str] = []
    tips: List[str] = []


class BasicConcept(BaseModel):
    concept: str
    definition: str


class FlowStep(BaseModel):
    step: int
    title: str
    description: str


class ConceptMapEntry(BaseModel):
    name: str
    type: str  # foundational / intermediate / advanced


class LearningModule(BaseModel):
    basics: List[BasicConcept]
    flowchart: List[FlowStep] = []
    quiz: List[QuizQuestion] = []
    youtubeTopics: List[str] = []
    recapTimetable: Dict[str, List[str]] = {}
    conceptMap: List[ConceptMapEntry] = []


class ImportantTopic(BaseModel):
    name: str
    priority: str = "high"
    prerequisites: List[str] = []


class Assignment(BaseModel):
    id: int
    title: str
    dueInDays: int
    quiz: List[QuizQuestion] = []


class QuizAssignments(BaseModel):
    importantTopics: List[ImportantTopic]
    assignments: List[Assignment] = []


class AiQuiz(BaseModel):
    importantTopics: List[ImportantTopic] = []
    quiz: List[QuizQuestion] = []
