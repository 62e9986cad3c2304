"""
Results module - handles quiz attempt persistence in a flat JSON array file.
"""

import json
import logging
import threading
from datetime import datetime, timezone
from pathlib import Path

import pydantic

from quiz import ValidationError
from schemas import QuizResult


class ResultLogError(Exception):
    """Raised when the results file can't be read or written."""


def validate_result(data) -> dict:
    """
    Check a submitted result and return a clean copy of its fields.
    Raises ValidationError describing the first problem found.
    """
    if not isinstance(data, dict):
        raise ValidationError("Result must be a JSON object")

    try:
        result = QuizResult.model_validate(data)
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc'])
        raise ValidationError(f"{field}: {error['msg']}" if field else error['msg']) from e

    return result.model_dump()


class ResultLog:
    """Append-only history of quiz attempts stored as one JSON array."""

    # Serializes appends within this process only
    _lock = threading.Lock()

    def __init__(self, path, logger: logging.Logger = None):
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)

    def load(self) -> list:
        """Load every stored result, oldest first."""
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                results = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            self.logger.error("Error reading results from %s: %s", self.path, e)
            raise ResultLogError(f"Could not read results file: {e}") from e

        if not isinstance(results, list):
            self.logger.error("Results file %s does not hold a list", self.path)
            raise ResultLogError("Results file is corrupt")
        return results

    def save(self, results: list) -> None:
        """Rewrite the whole results file."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(results, f, indent=2, ensure_ascii=False)
        except OSError as e:
            self.logger.error("Error saving results to %s: %s", self.path, e)
            raise ResultLogError(f"Could not save result: {e}") from e

    def append(self, result: dict) -> dict:
        """
        Validate a result, stamp it with the current time and append it.
        Returns the stored record.
        """
        entry = validate_result(result)
        entry['date'] = datetime.now(timezone.utc).isoformat()

        with self._lock:
            results = self.load()
            results.append(entry)
            self.save(results)

        self.logger.info("Saved result '%s' (%s/%s)", entry['title'], entry['score'], entry['total'])
        return entry
