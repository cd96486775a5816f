"""
Turns server payloads into what the browser widgets consume.

Graph data is shaped for vis-network, chart configs for Chart.js, and the
remaining sections as HTML fragments. Every string that came from a
request or a model is HTML-escaped before it lands in a fragment.
"""

from html import escape
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence
from urllib.parse import quote
import copy

DIFFICULTY_COLORS = ["#10b981", "#3b82f6", "#f59e0b", "#ef4444", "#7c3aed"]
DEFAULT_COLOR = "#6366f1"
CHART_WINDOW = 10

NETWORK_OPTIONS = {
    "nodes": {"shape": "dot", "font": {"color": "#ffffff"}},
    "edges": {"arrows": "to", "color": "#6366f1"},
    "physics": {
        "enabled": True,
        "stabilization": {"iterations": 200, "updateInterval": 50},
    },
    "groups": {
        "level1": {"color": "#818cf8"},
        "level6": {"color": "#4338ca"},
    },
}

CHART_LAYOUT = {
    "gap": ("radar", "gapChart", ["Understanding", "Foundations", "Prerequisites", "Advanced", "Application"]),
    "perf": ("line", "performanceChart", []),
    "timeline": ("line", "progressTimelineChart", []),
    "mastery": ("bar", "masteryChart", []),
    "velocity": ("line", "velocityChart", []),
    "difficulty": ("scatter", "difficultyChart", []),
    "timeDist": ("doughnut", "timeDistributionChart", ["Reading", "Quizzes", "Videos", "Practice"]),
    "skill": ("line", "skillLevelChart", []),
    "comparative": ("radar", "comparativeChart", ["Topic A", "Topic B", "Topic C", "Topic D"]),
}

# No activity tracking exists yet, so the split is a fixed estimate.
TIME_DISTRIBUTION = [30, 20, 25, 25]


class KnowledgeGraph:
    """Concepts plus the directed prerequisite edges derived from the dependency map."""

    def __init__(self):
        self.nodes: List[Dict[str, Any]] = []
        self.edges: List[Dict[str, str]] = []
        self.dependencies: Dict[str, List[str]] = {}

    def set_data(self, data: Optional[Mapping[str, Any]]) -> "KnowledgeGraph":
        data = data or {}
        self.nodes = list(data.get("concepts") or [])
        self.dependencies = dict(data.get("dependencies") or {})
        self.edges = [
            {"from": source, "to": target}
            for target, sources in self.dependencies.items()
            for source in (sources or [])
        ]
        return self

    def concept_names(self) -> List[str]:
        return [node.get("name") for node in self.nodes]


def difficulty_color(difficulty: Any) -> str:
    try:
        index = int(difficulty) - 1
    except (TypeError, ValueError):
        return DEFAULT_COLOR
    if 0 <= index < len(DIFFICULTY_COLORS):
        return DIFFICULTY_COLORS[index]
    return DEFAULT_COLOR


def network_data(graph: KnowledgeGraph) -> Dict[str, List[Dict[str, Any]]]:
    """vis-network nodes (sized by level, colored by difficulty) and edges."""
    nodes = [
        {
            "id": concept.get("name"),
            "label": concept.get("name"),
            "title": concept.get("description", ""),
            "value": concept.get("level"),
            "group": f"level{concept.get('level')}",
            "color": difficulty_color(concept.get("difficulty")),
        }
        for concept in graph.nodes
    ]
    return {"nodes": nodes, "edges": [dict(edge) for edge in graph.edges]}


def network_options() -> Dict[str, Any]:
    return copy.deepcopy(NETWORK_OPTIONS)


def welcome_network() -> Dict[str, Any]:
    """The static decorative graph shown before any topic is chosen."""
    nodes = [
        {"id": 1, "label": "You", "color": "#6366f1", "size": 30, "font": {"color": "#fff", "size": 16}, "x": 0, "y": 0},
        {"id": 2, "label": "Science", "color": "#a855f7", "x": -100, "y": -100},
        {"id": 3, "label": "History", "color": "#ec4899", "x": 100, "y": -100},
        {"id": 4, "label": "Math", "color": "#3b82f6", "x": 100, "y": 100},
        {"id": 5, "label": "Coding", "color": "#10b981", "x": -100, "y": 100},
        {"id": 6, "label": "Art", "color": "#f59e0b", "x": 0, "y": -150},
        {"id": 7, "label": "Future", "color": "#ef4444", "x": 0, "y": 150},
    ]
    edges = [
        {"from": 1, "to": 2}, {"from": 1, "to": 3}, {"from": 1, "to": 4},
        {"from": 1, "to": 5}, {"from": 1, "to": 6}, {"from": 2, "to": 7},
        {"from": 5, "to": 7}, {"from": 3, "to": 6},
    ]
    options = {
        "nodes": {"shape": "dot", "size": 20, "font": {"face": "Inter", "color": "#1e293b"}, "borderWidth": 2},
        "edges": {"width": 1, "color": {"color": "rgba(99, 102, 241, 0.3)", "highlight": "#6366f1"},
                  "smooth": {"type": "continuous"}},
        "physics": {"enabled": False},
        "interaction": {"dragNodes": True, "zoomView": True, "dragView": True},
    }
    return {"nodes": nodes, "edges": edges, "options": options}


# --- Charts ---

def _chart(chart_type: str, element_id: str, labels: Sequence[str]) -> Dict[str, Any]:
    return {
        "elementId": element_id,
        "type": chart_type,
        "data": {
            "labels": list(labels),
            "datasets": [{
                "label": element_id.replace("Chart", ""),
                "data": [0] * len(labels) if chart_type == "radar" else [],
                "backgroundColor": "rgba(99, 102, 241, 0.2)",
                "borderColor": "#6366f1",
                "borderWidth": 2,
                "tension": 0.4,
            }],
        },
        "options": {
            "responsive": True,
            "maintainAspectRatio": False,
            "plugins": {"legend": {"display": False}},
        },
    }


def initial_charts() -> Dict[str, Dict[str, Any]]:
    return {key: _chart(*layout) for key, layout in CHART_LAYOUT.items()}


def _set_series(chart: Dict[str, Any], labels: Optional[List[str]], values: List[float]) -> None:
    if labels is not None:
        chart["data"]["labels"] = labels
    chart["data"]["datasets"][0]["data"] = values


def updated_charts(charts: Mapping[str, Dict[str, Any]], history: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
    """
    Return a fresh chart set reflecting the last sessions of the history.

    The input set is left untouched; the caller swaps the whole set in.
    History items may be SessionHistoryEntry objects or plain dicts.
    """
    charts = copy.deepcopy(dict(charts))
    if "perf" not in charts:
        return charts

    recent = [_as_mapping(entry) for entry in list(history)[-CHART_WINDOW:]]
    labels = [f"Session {i + 1}" for i in range(len(recent))]
    scores = [entry.get("score") or 0 for entry in recent]

    _set_series(charts["perf"], labels, scores)
    if "timeline" in charts:
        _set_series(charts["timeline"], list(labels), list(scores))
    if "mastery" in charts:
        topics = [(entry.get("topic") or "General")[:10] for entry in recent]
        _set_series(charts["mastery"], topics, list(scores))
    if "gap" in charts:
        avg = sum(scores) / len(scores) if scores else 50
        _set_series(charts["gap"], None, [avg, avg * 0.9, avg * 1.1, avg * 0.7, avg * 0.85])
    if "timeDist" in charts:
        _set_series(charts["timeDist"], None, list(TIME_DISTRIBUTION))
    return charts


def _as_mapping(entry: Any) -> Mapping[str, Any]:
    if isinstance(entry, Mapping):
        return entry
    return vars(entry)


# --- HTML fragments ---

def render_assessment(questions: Iterable[Mapping[str, Any]]) -> str:
    parts = []
    for idx, q in enumerate(questions):
        qid = escape(str(q.get("id", idx + 1)))
        options = "".join(
            f'<label class="option-item"><input type="radio" name="q_{qid}" value="{i}">'
            f"<span>{escape(str(opt))}</span></label>"
            for i, opt in enumerate(q.get("options") or [])
        )
        parts.append(
            '<div class="quiz-item">'
            f"<p><strong>Q{idx + 1}:</strong> {escape(str(q.get('question', '')))}</p>"
            f'<div class="options-grid">{options}</div>'
            f'<input type="hidden" id="correct_{qid}" value="{escape(str(q.get("correctIndex", 0)))}">'
            f'<input type="hidden" id="concept_{qid}" value="{escape(str(q.get("targetConcept") or ""))}">'
            "</div>"
        )
    return "".join(parts)


def youtube_search_url(query: str) -> str:
    return "https://www.youtube.com/results?search_query=" + quote(query, safe="-_.!~*'()")


def render_learning_module(module: Mapping[str, Any]) -> Dict[str, str]:
    """HTML for the basics, flowchart and YouTube sections of a learning module."""
    basics = "".join(
        f'<div class="basic-card"><h4>{escape(str(b.get("concept", "")))}</h4>'
        f'<p>{escape(str(b.get("definition", "")))}</p></div>'
        for b in module.get("basics") or []
    )
    flowchart = "".join(
        f'<div class="flow-step"><div class="step-num">{escape(str(s.get("step", "")))}</div>'
        f'<div class="step-content"><strong>{escape(str(s.get("title", "")))}</strong>'
        f'<p>{escape(str(s.get("description", "")))}</p></div></div>'
        for s in module.get("flowchart") or []
    )
    youtube = "".join(
        f'<a href="{escape(youtube_search_url(str(t)))}" target="_blank" class="yt-link">📺 {escape(str(t))}</a>'
        for t in module.get("youtubeTopics") or []
    )
    return {"basics": basics, "flowchart": flowchart, "youtube": youtube}


def render_study_plan(plan: Mapping[str, Any]) -> Dict[str, str]:
    phases = "".join(
        f'<div class="phase-card"><h4>{escape(str(p.get("name", "")))} ({escape(str(p.get("duration", "")))})</h4>'
        "<ul>" + "".join(f"<li>{escape(str(t))}</li>" for t in p.get("topics") or []) + "</ul></div>"
        for p in plan.get("phases") or []
    )
    return {
        "duration": str(plan.get("totalDuration", "")),
        "studyTime": str(plan.get("dailyStudyTime", "")),
        "phases": phases,
    }


def render_premium_quiz(data: Mapping[str, Any]) -> str:
    cards = []
    for idx, q in enumerate(data.get("quiz") or []):
        qid = escape(str(q.get("id", idx + 1)))
        options = "".join(
            f'<label class="hub-option-btn"><input type="radio" name="hubq_{qid}" value="{i}" required>'
            f"<span>{escape(str(opt))}</span></label>"
            for i, opt in enumerate(q.get("options") or [])
        )
        cards.append(
            '<div class="hub-quiz-q-card">'
            f'<div class="hub-q-text">{idx + 1}. {escape(str(q.get("question", "")))}</div>'
            f'<div class="hub-options-grid">{options}</div>'
            f'<input type="hidden" name="hubq_{qid}_correct" value="{escape(str(q.get("correctIndex") or 0))}">'
            "</div>"
        )
    return (
        '<form id="hubQuizForm" class="hub-quiz-form">'
        + "".join(cards)
        + '<button type="submit" class="btn-primary btn-glow" style="margin-top:20px">Submit Mastery Check</button>'
        "</form>"
    )
