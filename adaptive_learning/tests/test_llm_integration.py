"""Route tests with a configured API key and a mocked Gemini endpoint."""

import json
import unittest
from unittest.mock import patch

import requests
from fastapi.testclient import TestClient

from adaptive_learning import llm_client
from adaptive_learning.backend import app
from adaptive_learning.tests.test_helpers import mock_gemini_response, mock_http_response


@patch.object(llm_client, "API_KEY", "test-api-key")
class TestLLMIntegration(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)
        self.mock_graph = {
            "concepts": [
                {"name": "Numbers", "level": 1, "description": "Counting", "difficulty": 1},
                {"name": "Addition", "level": 2, "description": "Sums", "difficulty": 2},
            ],
            "dependencies": {"Addition": ["Numbers"]},
        }

    @patch("adaptive_learning.llm_client.requests.post")
    def test_knowledge_graph_from_ai(self, mock_post):
        mock_post.return_value = mock_gemini_response(self.mock_graph)

        response = self.client.post("/api/knowledge-graph", json={"subject": "Arithmetic", "numConcepts": 2})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), self.mock_graph)
        prompt = mock_post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        self.assertIn('"Arithmetic"', prompt)
        self.assertIn("exactly 2 interconnected concepts", prompt)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_fenced_and_malformed_output_is_repaired(self, mock_post):
        mock_post.return_value = mock_gemini_response(
            "```json\n{basics: [{concept: 'Cell', definition: 'Unit of life'},], flowchart: []}\n```"
        )

        response = self.client.post("/api/complete-learning-module", json={"subject": "Biology", "topic": "Cells"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["basics"], [{"concept": "Cell", "definition": "Unit of life"}])

    @patch("adaptive_learning.llm_client.requests.post")
    def test_quiz_questions_array(self, mock_post):
        questions = [{
            "id": 1, "question": "What is a cell?", "options": ["a", "b", "c", "d"],
            "correctIndex": 0, "explanation": "", "targetConcept": "Cells", "prerequisiteGap": "Biology basics",
        }]
        mock_post.return_value = mock_gemini_response("Here you go:\n" + json.dumps(questions))

        response = self.client.post("/api/quiz-questions", json={"subject": "Biology", "topic": "Cells"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), questions)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_missing_required_field_returns_400_with_fallback(self, mock_post):
        mock_post.return_value = mock_gemini_response({"subject": "Algebra", "tips": []})

        response = self.client.post("/api/study-plan", json={"subject": "Algebra", "duration": 2})

        self.assertEqual(response.status_code, 400)
        data = response.json()
        self.assertEqual(data["error"], "Invalid response from AI")
        self.assertEqual(len(data["fallback"]["phases"]), 3)
        self.assertEqual(data["fallback"]["totalDuration"], "2 weeks")

    @patch("adaptive_learning.llm_client.requests.post")
    def test_unparseable_output_returns_400_with_fallback(self, mock_post):
        mock_post.return_value = mock_gemini_response("Sorry, I can't produce that right now.")

        response = self.client.post("/api/knowledge-graph", json={"subject": "Art", "numConcepts": 4})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(response.json()["fallback"]["concepts"]), 4)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_source_logged_for_ai_and_fallback_content(self, mock_post):
        mock_post.return_value = mock_gemini_response(self.mock_graph)
        with self.assertLogs("adaptive_learning.backend", level="INFO") as logs:
            self.client.post("/api/knowledge-graph", json={})
            mock_post.return_value = mock_gemini_response("no json here")
            self.client.post("/api/knowledge-graph", json={})

        output = "\n".join(logs.output)
        self.assertIn("Serving ai content (status 200)", output)
        self.assertIn("Serving fallback content (status 400)", output)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_object_where_array_expected(self, mock_post):
        mock_post.return_value = mock_gemini_response({"message": "no questions today"})

        response = self.client.post("/api/quiz-questions", json={"numQuestions": 2})

        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(response.json()["fallback"]), 2)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_upstream_http_error_returns_500_with_fallback(self, mock_post):
        mock_post.return_value = mock_http_response({"error": {"code": 403}}, status_code=403, text="forbidden")

        response = self.client.post("/api/quiz-assignments", json={"topic": "Loops", "numAssignments": 2})

        self.assertEqual(response.status_code, 500)
        data = response.json()
        self.assertIn("403", data["error"])
        self.assertEqual(len(data["fallback"]["assignments"]), 2)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_transport_error_returns_500_with_fallback(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("LLM service unavailable")

        response = self.client.post("/api/ai-quiz", json={"topic": "Graphs"})

        self.assertEqual(response.status_code, 500)
        data = response.json()
        self.assertIn("LLM service unavailable", data["error"])
        self.assertEqual(data["fallback"]["importantTopics"][0]["name"], "Graphs")
        self.assertEqual(len(data["fallback"]["quiz"]), 5)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_ai_quiz_accepts_either_field(self, mock_post):
        mock_post.return_value = mock_gemini_response({"importantTopics": [{"name": "Sets"}]})

        response = self.client.post("/api/ai-quiz", json={"topic": "Sets"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"importantTopics": [{"name": "Sets"}]})

    @patch("adaptive_learning.llm_client.requests.post")
    def test_ai_quiz_prompt_uses_derived_difficulty(self, mock_post):
        mock_post.return_value = mock_gemini_response({"quiz": [{"id": 1}]})

        for profile, tier in (
            ({"successRate": 0}, "easy"),
            ({"successRate": 72}, "hard"),
            ({"successRate": 85}, "expert"),
            ({"successRate": "n/a", "skillLevel": "Intermediate"}, "medium"),
            ({}, "easy"),
        ):
            self.client.post("/api/ai-quiz", json={"userProfile": profile})
            prompt = mock_post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
            self.assertIn(f"suitable for {tier} difficulty", prompt)

    @patch("adaptive_learning.llm_client.requests.post")
    def test_no_retry_after_failure(self, mock_post):
        mock_post.side_effect = requests.Timeout("timed out")

        self.client.post("/api/study-plan", json={})

        mock_post.assert_called_once()


if __name__ == '__main__':
    unittest.main()
