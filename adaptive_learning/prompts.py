"""
Prompt templates for each kind of generated learning content.
Every prompt asks the model for one specific JSON shape and embeds an example of it.
"""

KNOWLEDGE_GRAPH_TEMPLATE = """You are an expert educator and graph theorist. Generate a detailed Knowledge Graph for "{subject}" with exactly {num_concepts} interconnected concepts.
Return ONLY valid JSON with this structure:
{{
  "concepts": [
    {{ "name": "concept name", "level": 1-6, "description": "brief explanation", "difficulty": 1-5 }}
  ],
  "dependencies": {{
    "conceptB": ["conceptA"], // means conceptA is a prerequisite for conceptB
    ...
  }}
}}
Ensure the graph has a logical flow (Prerequisites -> Advanced Topics). No cycles. Focus on "{subject}"."""

QUIZ_QUESTIONS_TEMPLATE = """Create a curated assessment of {num_questions} multiple-choice questions for "{subject}" on the specific topic: "{topic}".
Difficulty level: {difficulty}.
For each question, also identify:
1. "targetConcept": the specific concept being tested.
2. "prerequisiteGap": if the student gets this wrong, what specific foundational knowledge are they likely missing?

Return ONLY a JSON array:
[
  {{
    "id": 1,
    "question": "...",
    "options": ["A", "B", "C", "D"],
    "correctIndex": 0,
    "explanation": "...",
    "targetConcept": "...",
    "prerequisiteGap": "..."
  }}
]"""

STUDY_PLAN_TEMPLATE = """Create a detailed {duration}-{duration_unit} study plan for mastering "{subject}". Return ONLY valid JSON with this exact structure:
{{
  "subject": "{subject}",
  "totalDuration": "{duration} {duration_unit}",
  "dailyStudyTime": "X hours",
  "phases": [
    {{
      "name": "Phase name",
      "duration": "X days/weeks",
      "topics": ["topic1", "topic2"],
      "objectives": ["objective1", "objective2"],
      "activities": ["activity1", "activity2"],
      "resources": ["resource1", "resource2"]
    }}
  ],
  "milestones": [
    {{
      "week": 1,
      "milestone": "Understand foundations",
      "metrics": "Score 70%+ on fundamentals quiz"
    }}
  ],
  "dailySchedule": {{
    "Monday": ["09:00 - Concept review", "10:30 - Practice problems", "12:00 - Lunch break"],
    "Tuesday": ["09:00 - New concept", "10:30 - Examples and exercises"]
  }},
  "resources": ["YouTube", "Khan Academy", "Practice sets", "Discussion forums"],
  "tips": ["tip1", "tip2", "tip3"]
}}"""

LEARNING_MODULE_TEMPLATE = """You are an expert educator. For the subject "{subject}" and topic "{topic}", generate a COMPLETE JSON response with:

1. "basics": Array of 5-7 fundamental concepts and definitions
2. "flowchart": Step-by-step learning progression (array of steps with descriptions)
3. "quiz": Array of 3 MCQs (with id, question, options array of 4, correctIndex, explanation)
4. "youtubeTopics": Array of 5 specific YouTube search queries for learning this topic
5. "recapTimetable": Object with days (Mon-Sun) containing 2-3 learning activities each
6. "conceptMap": Array of 5-8 key concepts with their relationships

Return ONLY valid JSON. Example structure:
{{
  "basics": [{{"concept": "name", "definition": "explanation"}}],
  "flowchart": [{{"step": 1, "title": "title", "description": "desc"}}],
  "quiz": [{{"id": 1, "question": "?", "options": ["a","b","c","d"], "correctIndex": 0, "explanation": "ex"}}],
  "youtubeTopics": ["topic 1", "topic 2", ...],
  "recapTimetable": {{"Monday": ["activity1", "activity2"], ...}},
  "conceptMap": [{{"name": "concept", "type": "foundational/intermediate/advanced"}}]
}}"""

QUIZ_ASSIGNMENTS_TEMPLATE = """You are an expert educator. For the subject "{subject}" and topic "{topic}", return ONLY valid JSON with the following structure:
{{
  "importantTopics": [ {{"name":"topic name","priority":"high|medium|low","prerequisites":["prereq1","prereq2"]}} ],
  "assignments": [ {{"id":1,"title":"Assignment title","dueInDays":3,"quiz":[{{"id":1,"question":"?","options":["a","b","c","d"],"correctIndex":0,"explanation":""}}]}} ]
}}
Make sure to include {num_assignments} assignments (if applicable), and each assignment should contain 3-5 quiz questions at appropriate difficulties. Keep JSON strictly valid."""

AI_QUIZ_TEMPLATE = """You are an expert educator. For the subject "{subject}" and topic "{topic}", produce a JSON object containing:
1) importantTopics: an array of objects {{ name, priority: high|medium|low, prerequisites: [..] }}
2) quiz: an array of {num_questions} multiple-choice questions suitable for {difficulty} difficulty, each with id, question, options (4), correctIndex, explanation
Return ONLY valid JSON. Keep answers concise and ensure JSON parses cleanly."""


def knowledge_graph_prompt(subject: str = "Mathematics", num_concepts: int = 12) -> str:
    """
    Build the prompt for a prerequisite-ordered knowledge graph.

    Args:
        subject (str): Subject the graph should cover
        num_concepts (int): Exact number of concepts to request

    Returns:
        str: Prompt asking for {"concepts": [...], "dependencies": {...}}
    """
    return KNOWLEDGE_GRAPH_TEMPLATE.format(subject=subject, num_concepts=num_concepts)


def quiz_questions_prompt(
    subject: str = "Mathematics",
    topic: str = "basics",
    difficulty: str = "medium",
    num_questions: int = 3,
) -> str:
    """Build the prompt for a diagnostic multiple-choice assessment (JSON array)."""
    return QUIZ_QUESTIONS_TEMPLATE.format(
        subject=subject,
        topic=topic,
        difficulty=difficulty,
        num_questions=num_questions,
    )


def study_plan_prompt(subject: str = "Mathematics", duration: int = 4, duration_unit: str = "weeks") -> str:
    return STUDY_PLAN_TEMPLATE.format(subject=subject, duration=duration, duration_unit=duration_unit)


def learning_module_prompt(subject: str = "Mathematics", topic: str = "basics") -> str:
    return LEARNING_MODULE_TEMPLATE.format(subject=subject, topic=topic)


def quiz_assignments_prompt(subject: str = "Mathematics", topic: str = "basics", num_assignments: int = 3) -> str:
    return QUIZ_ASSIGNMENTS_TEMPLATE.format(subject=subject, topic=topic, num_assignments=num_assignments)


def ai_quiz_prompt(
    subject: str = "General",
    topic: str = "basics",
    difficulty: str = "medium",
    num_questions: int = 5,
) -> str:
    """
    Build the prompt for a profile-adapted quiz with important topics.

    The difficulty tier is expected to be derived from the learner profile
    beforehand (see learner.derive_difficulty).
    """
    return AI_QUIZ_TEMPLATE.format(
        subject=subject,
        topic=topic,
        difficulty=difficulty,
        num_questions=num_questions,
    )
