"""
Client side of the adaptive learning flow.

AdaptiveLearningClient wraps the HTTP API and always hands back usable
content: when a route answers with {"error", "fallback"} the fallback is
returned instead. LearningSession is the one store object holding every
piece of client state (topic, history, graph, charts, profile); its
operations never raise, they report failures through `status`.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence
import logging
import os

import requests

from adaptive_learning import rendering
from adaptive_learning.learner import (
    GapAnalyzer,
    LearnerProfile,
    SessionHistoryEntry,
    analyze_learner_profile,
    round_half_up,
    ui_color,
)
from adaptive_learning.persistence import SessionHistoryStore

logger = logging.getLogger(__name__)

BACKEND_URL = os.getenv("BACKEND_URL", "http://localhost:3000")


class AdaptiveLearningClient:
    """Thin wrapper over the backend routes."""

    def __init__(self, base_url: str = BACKEND_URL, session=None, timeout: float = 60):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def _post(self, path: str, payload: Dict[str, Any]) -> Any:
        response = self.session.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
        data = response.json()
        if response.status_code >= 400:
            logger.warning("%s answered %s: %s", path, response.status_code,
                           data.get("error") if isinstance(data, dict) else data)
        return data

    @staticmethod
    def _resolve(data: Any, primary: str) -> Any:
        """Pick the primary payload, or the embedded fallback when the route failed."""
        if isinstance(data, dict) and data.get(primary):
            return data
        if isinstance(data, dict) and "fallback" in data:
            return data["fallback"]
        return data

    def knowledge_graph(self, subject: str, num_concepts: int = 10) -> Dict[str, Any]:
        data = self._post("/api/knowledge-graph", {"subject": subject, "numConcepts": num_concepts})
        return self._resolve(data, "concepts")

    def quiz_questions(self, subject: str, topic: str, difficulty: str = "medium", num_questions: int = 4) -> List[Dict[str, Any]]:
        data = self._post("/api/quiz-questions", {
            "subject": subject,
            "topic": topic,
            "difficulty": difficulty,
            "numQuestions": num_questions,
        })
        if isinstance(data, list):
            return data
        return (data.get("fallback") if isinstance(data, dict) else None) or []

    def study_plan(self, subject: str, duration: int = 4, duration_unit: str = "weeks") -> Dict[str, Any]:
        data = self._post("/api/study-plan", {"subject": subject, "duration": duration, "durationUnit": duration_unit})
        return self._resolve(data, "phases")

    def learning_module(self, subject: str, topic: str) -> Dict[str, Any]:
        data = self._post("/api/complete-learning-module", {"subject": subject, "topic": topic})
        return self._resolve(data, "basics")

    def quiz_assignments(self, subject: str, topic: str, num_assignments: int = 3) -> Dict[str, Any]:
        data = self._post("/api/quiz-assignments", {
            "subject": subject,
            "topic": topic,
            "numAssignments": num_assignments,
        })
        return self._resolve(data, "importantTopics")

    def ai_quiz(self, subject: str, topic: str, profile: Mapping[str, Any], num_questions: int = 5) -> Dict[str, Any]:
        data = self._post("/api/ai-quiz", {
            "subject": subject,
            "topic": topic,
            "userProfile": dict(profile),
            "numQuestions": num_questions,
        })
        return self._resolve(data, "quiz")


def grade_answers(questions: Sequence[Mapping[str, Any]], answers: Mapping[Any, int]) -> List[Dict[str, Any]]:
    """
    Mark each question against the selected option index.

    `answers` maps question id to the chosen option; unanswered questions
    count as wrong.
    """
    results = []
    for idx, q in enumerate(questions):
        qid = q.get("id", idx + 1)
        selected = answers.get(qid, answers.get(str(qid)))
        correct = selected is not None and str(selected) == str(q.get("correctIndex"))
        results.append({"id": qid, "correct": correct, "concept": q.get("targetConcept") or ""})
    return results


class LearningSession:
    """Single store for all client state, replaced piecewise by its operations."""

    def __init__(self, client: Optional[AdaptiveLearningClient] = None, history: Optional[SessionHistoryStore] = None):
        self.client = client or AdaptiveLearningClient()
        self.history = history or SessionHistoryStore()
        self._reset()

    def _reset(self) -> None:
        self.current_topic = ""
        self.current_subject = ""
        self.session_start = datetime.now(timezone.utc)
        self.status = ""

        self.graph = rendering.KnowledgeGraph()
        self.network: Optional[Dict[str, Any]] = rendering.welcome_network()
        self.charts = rendering.initial_charts()
        self.gap_analyzer = GapAnalyzer()
        self.profile = LearnerProfile()
        self.theme_color = ui_color(self.profile.skillLevel)

        self.assessment: List[Dict[str, Any]] = []
        self.assessment_html = ""
        self.module: Optional[Dict[str, Any]] = None
        self.module_html: Dict[str, str] = {}
        self.study_plan: Optional[Dict[str, Any]] = None
        self.study_plan_html: Dict[str, str] = {}
        self.premium_quiz: Optional[Dict[str, Any]] = None
        self.premium_quiz_html = ""

    # --- core flow ---

    def generate_learning_path(self, topic: str) -> bool:
        topic = (topic or "").strip()
        if not topic:
            self.status = "Please enter a topic!"
            return False

        self.current_topic = topic
        self.current_subject = topic
        self.status = "🧠 AI is designing your personalized knowledge graph..."
        try:
            self.graph = rendering.KnowledgeGraph().set_data(self.client.knowledge_graph(topic, 10))
            self.network = {**rendering.network_data(self.graph), "options": rendering.network_options()}
            self.refresh_assessment(topic)
            self.status = "📚 Curating YouTube channels & study timetable..."
            self.generate_learning_module()
            self.analyze_and_personalize()
        except Exception as e:
            logger.error("learning path generation failed: %s", e)
            self.status = "❌ Error generating complete path. Please try again."
            return False
        self.status = ""
        return True

    def refresh_assessment(self, topic: Optional[str] = None) -> List[Dict[str, Any]]:
        topic = topic or self.current_topic
        try:
            self.assessment = self.client.quiz_questions(topic, topic, "medium", 4)
            self.assessment_html = rendering.render_assessment(self.assessment)
        except Exception as e:
            logger.warning("assessment fetch failed: %s", e)
            self.assessment = []
            self.assessment_html = "<p>Failed to load questions.</p>"
        return self.assessment

    def submit_assessment(self, answers: Mapping[Any, int]) -> int:
        """
        Score the current assessment, record it in history and refresh the
        learning module, charts and profile.

        Returns:
            int: The score as a percentage
        """
        results = grade_answers(self.assessment, answers)
        for result in results:
            if result["concept"]:
                self.gap_analyzer.assess_concept(result["concept"], result["correct"])

        correct = sum(1 for r in results if r["correct"])
        percentage = round_half_up(correct / len(results) * 100) if results else 0
        self.status = f"Assessment Complete! Score: {percentage}%"

        now = datetime.now(timezone.utc)
        try:
            self.history.append(SessionHistoryEntry(
                topic=self.current_topic,
                score=percentage,
                duration=(now - self.session_start).total_seconds(),
                timestamp=now.isoformat(),
            ))
        except OSError as e:
            logger.error("could not save session history: %s", e)
            self.status += " (history not saved)"

        self.generate_learning_module()
        self.charts = rendering.updated_charts(self.charts, self.history.entries())
        self.analyze_and_personalize()
        return percentage

    def generate_learning_module(self) -> Optional[Dict[str, Any]]:
        try:
            self.module = self.client.learning_module(self.current_subject, self.current_topic)
            self.module_html = rendering.render_learning_module(self.module)
        except Exception as e:
            logger.warning("Failed module generation: %s", e)
            return None
        self.generate_study_plan()
        return self.module

    def generate_study_plan(self) -> Optional[Dict[str, Any]]:
        try:
            self.study_plan = self.client.study_plan(self.current_topic, 4, "weeks")
            self.study_plan_html = rendering.render_study_plan(self.study_plan)
        except Exception as e:
            logger.warning("Failed plan generation: %s", e)
            return None
        return self.study_plan

    # --- personalization hub ---

    def analyze_and_personalize(self) -> LearnerProfile:
        self.profile = analyze_learner_profile(self.history.entries())
        self.theme_color = ui_color(self.profile.skillLevel)
        return self.profile

    def refresh_personalized_quiz(self) -> Optional[Dict[str, Any]]:
        try:
            self.premium_quiz = self.client.ai_quiz(
                self.current_subject,
                self.current_topic,
                self.profile.to_dict(),
                5,
            )
            self.premium_quiz_html = rendering.render_premium_quiz(self.premium_quiz)
        except Exception as e:
            logger.warning("mastery quiz fetch failed: %s", e)
            self.premium_quiz = None
            self.premium_quiz_html = "<p>Failed to load master quiz.</p>"
        return self.premium_quiz

    def logout(self) -> None:
        """Forget everything stored locally, like clearing browser storage."""
        cleared = True
        try:
            self.history.clear()
        except OSError as e:
            logger.error("could not clear session history: %s", e)
            cleared = False
        self._reset()
        if not cleared:
            self.status = "Logged out (history not cleared)"
