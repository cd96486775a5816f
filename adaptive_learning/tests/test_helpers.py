"""Test helpers for faking Gemini HTTP responses"""

import json
from typing import Any, Optional
from unittest.mock import Mock


def gemini_body(text: str) -> dict:
    """Decoded generateContent body carrying one candidate"""
    return {
        "candidates": [
            {"content": {"parts": [{"text": text}]}, "finishReason": "STOP"}
        ]
    }


def mock_http_response(body: Any = None, status_code: int = 200, text: Optional[str] = None) -> Mock:
    """Stand-in for requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = body
    response.text = text if text is not None else json.dumps(body)
    return response


def mock_gemini_response(data: Any) -> Mock:
    """Successful response whose completion text is `data` (serialized unless already a string)"""
    text = data if isinstance(data, str) else json.dumps(data)
    return mock_http_response(gemini_body(text))
