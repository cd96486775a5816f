import unittest

from adaptive_learning import rendering
from adaptive_learning.fallbacks import generate_knowledge_graph, generate_learning_module, generate_study_plan
from adaptive_learning.learner import SessionHistoryEntry


class TestKnowledgeGraph(unittest.TestCase):
    def test_edges_point_from_prerequisite(self):
        graph = rendering.KnowledgeGraph().set_data({
            "concepts": [{"name": "A", "level": 1}, {"name": "B", "level": 2}, {"name": "C", "level": 2}],
            "dependencies": {"B": ["A"], "C": ["A", "B"]},
        })

        self.assertEqual(graph.concept_names(), ["A", "B", "C"])
        self.assertEqual(
            graph.edges,
            [{"from": "A", "to": "B"}, {"from": "A", "to": "C"}, {"from": "B", "to": "C"}],
        )

    def test_missing_data(self):
        graph = rendering.KnowledgeGraph().set_data(None)
        self.assertEqual(graph.nodes, [])
        self.assertEqual(graph.edges, [])

    def test_network_data(self):
        graph = rendering.KnowledgeGraph().set_data(generate_knowledge_graph("Physics", 3))
        data = rendering.network_data(graph)

        first = data["nodes"][0]
        self.assertEqual(first["id"], "Physics concept 1")
        self.assertEqual(first["group"], "level1")
        self.assertEqual(first["color"], "#10b981")
        self.assertEqual(len(data["edges"]), 2)

    def test_difficulty_color(self):
        self.assertEqual(rendering.difficulty_color(5), "#7c3aed")
        self.assertEqual(rendering.difficulty_color(9), rendering.DEFAULT_COLOR)
        self.assertEqual(rendering.difficulty_color(None), rendering.DEFAULT_COLOR)

    def test_network_options_are_copies(self):
        options = rendering.network_options()
        options["physics"]["enabled"] = False
        self.assertTrue(rendering.NETWORK_OPTIONS["physics"]["enabled"])

    def test_welcome_network(self):
        welcome = rendering.welcome_network()
        self.assertEqual(len(welcome["nodes"]), 7)
        self.assertEqual(welcome["nodes"][0]["label"], "You")
        self.assertFalse(welcome["options"]["physics"]["enabled"])


class TestCharts(unittest.TestCase):
    def test_initial_charts(self):
        charts = rendering.initial_charts()
        self.assertEqual(set(charts), set(rendering.CHART_LAYOUT))
        self.assertEqual(charts["gap"]["data"]["datasets"][0]["data"], [0, 0, 0, 0, 0])
        self.assertEqual(charts["perf"]["data"]["datasets"][0]["data"], [])

    def test_updated_charts_uses_last_ten_sessions(self):
        history = [SessionHistoryEntry(f"Topic number {i}", i * 5, 60) for i in range(12)]
        charts = rendering.initial_charts()

        updated = rendering.updated_charts(charts, history)

        perf = updated["perf"]["data"]
        self.assertEqual(perf["labels"], [f"Session {i}" for i in range(1, 11)])
        self.assertEqual(perf["datasets"][0]["data"], [i * 5 for i in range(2, 12)])
        self.assertEqual(updated["mastery"]["data"]["labels"][0], "Topic numb")
        self.assertEqual(updated["timeDist"]["data"]["datasets"][0]["data"], [30, 20, 25, 25])
        self.assertEqual(charts["perf"]["data"]["datasets"][0]["data"], [])

    def test_gap_chart_from_average(self):
        updated = rendering.updated_charts(rendering.initial_charts(), [{"topic": "x", "score": 80}])
        values = updated["gap"]["data"]["datasets"][0]["data"]
        for actual, expected in zip(values, [80, 72, 88, 56, 68]):
            self.assertAlmostEqual(actual, expected)

    def test_missing_perf_chart_is_a_no_op(self):
        self.assertEqual(rendering.updated_charts({}, [{"score": 10}]), {})


class TestFragments(unittest.TestCase):
    def test_assessment_escapes_model_text(self):
        html = rendering.render_assessment([{
            "id": 1, "question": "<script>alert(1)</script>", "options": ["a & b", "c"],
            "correctIndex": 1, "targetConcept": "Sets",
        }])

        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)
        self.assertIn("a &amp; b", html)
        self.assertIn('id="correct_1" value="1"', html)
        self.assertIn('id="concept_1" value="Sets"', html)

    def test_learning_module(self):
        sections = rendering.render_learning_module(generate_learning_module("Music", "Scales"))

        self.assertEqual(sections["basics"].count("basic-card"), 3)
        self.assertEqual(sections["flowchart"].count("flow-step"), 3)
        self.assertIn("search_query=Music%20Scales%20basics", sections["youtube"])

    def test_study_plan(self):
        sections = rendering.render_study_plan(generate_study_plan("Algebra", 4, "weeks"))
        self.assertEqual(sections["duration"], "4 weeks")
        self.assertEqual(sections["phases"].count("phase-card"), 3)

    def test_premium_quiz(self):
        html = rendering.render_premium_quiz({"quiz": [{"id": 7, "question": "Q?", "options": ["x", "y"], "correctIndex": 1}]})
        self.assertIn('name="hubq_7_correct" value="1"', html)
        self.assertIn("Submit Mastery Check", html)

    def test_youtube_search_url(self):
        self.assertEqual(
            rendering.youtube_search_url("a b/c"),
            "https://www.youtube.com/results?search_query=a%20b%2Fc",
        )
