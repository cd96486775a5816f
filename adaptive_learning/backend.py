# adaptive_learning/backend.py

# 1️⃣ Imports
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import logging
import os
import time

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from starlette.exceptions import HTTPException as StarletteHTTPException

# 2️⃣ Local imports
from adaptive_learning import generation, llm_client
from adaptive_learning.generation import GenerationResult
from adaptive_learning.learner import derive_difficulty

# 3️⃣ Configuration
load_dotenv()

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# 4️⃣ FastAPI app
@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    if llm_client.is_fallback_mode():
        logger.warning("No valid GOOGLE_API_KEY found, using local AI fallback.")
    yield


app = FastAPI(title="Adaptive Learning Backend API", lifespan=lifespan)

# 5️⃣ CORS - configured from environment
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=ALLOWED_ORIGINS != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms)
    return response


# 6️⃣ Models
class LenientRequest(BaseModel):
    """Request body whose missing or malformed fields fall back to their defaults."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _object_body(cls, data: Any) -> Any:
        return data if isinstance(data, dict) else {}

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_invalid(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Ignoring invalid %s=%r", info.field_name, value)
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class KnowledgeGraphRequest(LenientRequest):
    subject: str = "Mathematics"
    num_concepts: int = Field(12, ge=1, le=50, alias="numConcepts")


class QuizQuestionsRequest(LenientRequest):
    subject: str = "Mathematics"
    topic: str = "basics"
    difficulty: str = "medium"
    num_questions: int = Field(3, ge=1, le=50, alias="numQuestions")


class StudyPlanRequest(LenientRequest):
    subject: str = "Mathematics"
    duration: int = Field(4, ge=1, le=104)
    duration_unit: str = Field("weeks", alias="durationUnit")


class LearningModuleRequest(LenientRequest):
    subject: str = "Mathematics"
    topic: str = "basics"


class QuizAssignmentsRequest(LenientRequest):
    subject: str = "Mathematics"
    topic: str = "basics"
    num_assignments: int = Field(3, ge=1, le=20, alias="numAssignments")


class AiQuizRequest(LenientRequest):
    subject: str = "General"
    topic: str = "basics"
    user_profile: Dict[str, Any] = Field(default_factory=dict, alias="userProfile")
    num_questions: int = Field(5, ge=1, le=50, alias="numQuestions")


# 7️⃣ Helpers
def _respond(result: GenerationResult) -> JSONResponse:
    logger.info("Serving %s content (status %s)", result.source, result.status_code)
    return JSONResponse(status_code=result.status_code, content=result.body())


# 8️⃣ Content endpoints
@app.post("/api/knowledge-graph")
def knowledge_graph(req: Optional[KnowledgeGraphRequest] = None):
    req = req or KnowledgeGraphRequest()
    return _respond(generation.generate(
        generation.KNOWLEDGE_GRAPH,
        {"subject": req.subject, "num_concepts": req.num_concepts},
    ))


@app.post("/api/quiz-questions")
def quiz_questions(req: Optional[QuizQuestionsRequest] = None):
    """Generate an assessment that probes learning gaps and names likely missing prerequisites."""
    req = req or QuizQuestionsRequest()
    return _respond(generation.generate(
        generation.QUIZ_QUESTIONS,
        {
            "subject": req.subject,
            "topic": req.topic,
            "difficulty": req.difficulty,
            "num_questions": req.num_questions,
        },
    ))


@app.post("/api/study-plan")
def study_plan(req: Optional[StudyPlanRequest] = None):
    req = req or StudyPlanRequest()
    return _respond(generation.generate(
        generation.STUDY_PLAN,
        {"subject": req.subject, "duration": req.duration, "duration_unit": req.duration_unit},
    ))


@app.post("/api/complete-learning-module")
def complete_learning_module(req: Optional[LearningModuleRequest] = None):
    """Basics, flowchart, quiz, YouTube searches, recap timetable and concept map for one topic."""
    req = req or LearningModuleRequest()
    return _respond(generation.generate(
        generation.LEARNING_MODULE,
        {"subject": req.subject, "topic": req.topic},
    ))


@app.post("/api/quiz-assignments")
def quiz_assignments(req: Optional[QuizAssignmentsRequest] = None):
    req = req or QuizAssignmentsRequest()
    return _respond(generation.generate(
        generation.QUIZ_ASSIGNMENTS,
        {"subject": req.subject, "topic": req.topic, "num_assignments": req.num_assignments},
    ))


@app.post("/api/ai-quiz")
def ai_quiz(req: Optional[AiQuizRequest] = None):
    """
    Generate a quiz plus important topics, adapted to the learner profile.

    The difficulty tier comes from userProfile.successRate, or from
    userProfile.skillLevel when no success rate is given.
    """
    req = req or AiQuizRequest()
    difficulty = derive_difficulty(req.user_profile)
    return _respond(generation.generate(
        generation.AI_QUIZ,
        {
            "subject": req.subject,
            "topic": req.topic,
            "difficulty": difficulty,
            "num_questions": req.num_questions,
        },
    ))


# 9️⃣ Diagnostics
@app.get("/api/health")
def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "OK", "timestamp": timestamp}


@app.get("/api")
def api_index():
    return {
        "message": "Adaptive Learning Backend API",
        "endpoints": {
            "health": "GET /api/health",
            "knowledgeGraph": "POST /api/knowledge-graph { subject, numConcepts }",
            "quizQuestions": "POST /api/quiz-questions { subject, topic, difficulty, numQuestions }",
            "studyPlan": "POST /api/study-plan { subject, duration, durationUnit }",
            "learningModule": "POST /api/complete-learning-module { subject, topic }",
            "quizAssignments": "POST /api/quiz-assignments { subject, topic, numAssignments }",
            "aiQuiz": "POST /api/ai-quiz { subject, topic, userProfile, numQuestions }",
        },
    }


# 🔟 Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # a known path with the wrong method counts as unknown too
    if exc.status_code in (404, 405):
        return JSONResponse(status_code=404, content={"error": "Endpoint not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "message": str(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal Server Error", "message": str(exc)})


def main() -> None:
    import uvicorn

    configure_logging()
    logger.info("Backend server running on http://localhost:%s", PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
