"""
Generation pipeline shared by every content route.

generate() never returns an error on its own: the result either carries
the primary content or an error reason paired with locally generated
fallback content.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple
import logging

from adaptive_learning import fallbacks, llm_client, prompts
from adaptive_learning.llm_parsing import check_shape, extract_json

logger = logging.getLogger(__name__)

INVALID_RESPONSE = "Invalid response from AI"


@dataclass(frozen=True)
class ContentType:
    """How one kind of content is prompted for, validated and faked locally."""

    name: str
    build_prompt: Callable[..., str]
    fallback: Callable[..., Any]
    expected: str = "object"
    required: Tuple[str, ...] = ()
    any_of: bool = False


@dataclass
class GenerationResult:
    content: Any = None
    error: Optional[str] = None
    fallback: Any = None
    status_code: int = 200
    # "ai", "local" in fallback mode, or "fallback" when paired with an error
    source: str = "ai"

    @property
    def ok(self) -> bool:
        return self.error is None

    def body(self) -> Any:
        """JSON body for the HTTP response."""
        if self.ok:
            return self.content
        return {"error": self.error, "fallback": self.fallback}


KNOWLEDGE_GRAPH = ContentType(
    name="knowledge-graph",
    build_prompt=prompts.knowledge_graph_prompt,
    fallback=fallbacks.generate_knowledge_graph,
    required=("concepts",),
)

QUIZ_QUESTIONS = ContentType(
    name="quiz-questions",
    build_prompt=prompts.quiz_questions_prompt,
    fallback=fallbacks.generate_quiz_questions,
    expected="array",
)

STUDY_PLAN = ContentType(
    name="study-plan",
    build_prompt=prompts.study_plan_prompt,
    fallback=fallbacks.generate_study_plan,
    required=("phases",),
)

LEARNING_MODULE = ContentType(
    name="complete-learning-module",
    build_prompt=prompts.learning_module_prompt,
    fallback=fallbacks.generate_learning_module,
    required=("basics",),
)

QUIZ_ASSIGNMENTS = ContentType(
    name="quiz-assignments",
    build_prompt=prompts.quiz_assignments_prompt,
    fallback=fallbacks.generate_quiz_assignments,
    required=("importantTopics",),
)

AI_QUIZ = ContentType(
    name="ai-quiz",
    build_prompt=prompts.ai_quiz_prompt,
    fallback=fallbacks.generate_ai_quiz,
    required=("quiz", "importantTopics"),
    any_of=True,
)


def generate(content_type: ContentType, params: Dict[str, Any]) -> GenerationResult:
    """
    Produce content of the given type for already-defaulted parameters.

    Args:
        content_type (ContentType): What to generate
        params (dict): Keyword arguments shared by the prompt builder and the fallback

    Returns:
        GenerationResult: 200 with AI or local content, 400 when the model
        output is unusable, 500 when the call itself failed; the last two
        carry a fallback payload.
    """
    if llm_client.is_fallback_mode():
        return GenerationResult(content=content_type.fallback(**params), source="local")

    try:
        prompt = content_type.build_prompt(**params)
        text = llm_client.send_prompt(prompt)
        extracted = extract_json(text, content_type.expected)
        reason = extracted.error or check_shape(
            extracted.value,
            content_type.expected,
            content_type.required,
            content_type.any_of,
        )
        if reason is not None:
            logger.warning("%s: unusable AI output (%s)", content_type.name, reason)
            return GenerationResult(
                error=INVALID_RESPONSE,
                fallback=content_type.fallback(**params),
                status_code=400,
                source="fallback",
            )
        return GenerationResult(content=extracted.value)
    except Exception as e:
        logger.error("%s generation failed: %s", content_type.name, e)
        return GenerationResult(
            error=str(e),
            fallback=content_type.fallback(**params),
            status_code=500,
            source="fallback",
        )
