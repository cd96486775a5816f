from typing import Any, Dict, List, Mapping, Optional, Union
import json
import logging
import os

from adaptive_learning.learner import SessionHistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_PATH = os.path.join(os.path.expanduser("~"), ".adaptive_learning", "session_history.json")


class SessionHistoryStore:
    """
    Local, unbounded array of past assessment sessions.

    Plays the role browser local storage plays for the web client: a single
    JSON file holding every entry, loaded once and rewritten on each change.
    """

    def __init__(self, json_path: Optional[str] = None):
        self.json_path = json_path or os.getenv("SESSION_HISTORY_PATH") or DEFAULT_HISTORY_PATH
        self._entries: List[Dict[str, Any]] = []
        self._load_json()

    def _load_json(self):
        """Load history from the JSON file if it exists"""
        self._entries = []
        if not os.path.exists(self.json_path):
            return
        try:
            with open(self.json_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("failed to load session history from %s: %s", self.json_path, e)
            return
        if isinstance(data, list):
            self._entries = [entry for entry in data if isinstance(entry, dict)]
        else:
            logger.warning("ignoring session history in %s: not a list", self.json_path)

    def _save_json(self):
        """Save history to the JSON file"""
        directory = os.path.dirname(self.json_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.json_path, "w", encoding="utf-8") as f:
            json.dump(self._entries, f, ensure_ascii=False, indent=2)

    def entries(self) -> List[SessionHistoryEntry]:
        return [SessionHistoryEntry.from_dict(entry) for entry in self._entries]

    def append(self, entry: Union[SessionHistoryEntry, Mapping[str, Any]]) -> SessionHistoryEntry:
        if not isinstance(entry, SessionHistoryEntry):
            entry = SessionHistoryEntry.from_dict(entry)
        self._entries.append(entry.to_dict())
        self._save_json()
        return entry

    def clear(self) -> None:
        self._entries = []
        if os.path.exists(self.json_path):
            os.remove(self.json_path)

    def reload(self) -> None:
        self._load_json()

    def __len__(self) -> int:
        return len(self._entries)
