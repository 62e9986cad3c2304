"""
Quiz catalog module - handles module discovery, quiz file loading, and combined quiz sampling.
"""

import json
import logging
import math
import random
from pathlib import Path


MAX_COMBINED_COUNT = 1000
QUIZ_EXTENSION = '.json'

_random = random.Random()


class ValidationError(ValueError):
    """Raised when client input is rejected before touching the catalog."""


class QuizError(Exception):
    """Base error for a quiz file that could not be served."""

    def __init__(self, filename, message):
        super().__init__(message)
        self.filename = filename


class QuizNotFoundError(QuizError):
    def __init__(self, filename, module=None):
        where = f" in module '{module}'" if module else ""
        super().__init__(filename, f"Quiz file not found: {filename}{where}")
        self.module = module


class QuizLoadError(QuizError):
    def __init__(self, filename, reason):
        super().__init__(filename, f"Failed to load quiz file: {filename} ({reason})")


def validate_filename(filename: str) -> str:
    """Reject quiz names that are not .json files."""
    if not filename or not filename.endswith(QUIZ_EXTENSION):
        raise ValidationError("Invalid filename. Must be a .json file")
    return filename


def parse_count(raw) -> int:
    """Parse the requested combined quiz size (1..MAX_COMBINED_COUNT)."""
    text = str(raw).strip() if raw is not None else ''
    if not (text.isascii() and text.isdigit()):
        raise ValidationError("Count must be a positive number")

    count = int(text)
    if count <= 0:
        raise ValidationError("Count must be a positive number")
    if count > MAX_COMBINED_COUNT:
        raise ValidationError(f"Count cannot exceed {MAX_COMBINED_COUNT}")
    return count


def shuffle(items, rng: random.Random = None) -> list:
    """
    Return a uniformly shuffled copy of items.
    Backward Fisher-Yates sweep; the input sequence is left untouched.
    """
    rng = rng or _random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def normalize_question(question: dict) -> dict:
    """
    Ensure a question carries its correct labels as a `correct_answers` list.
    Raises ValueError for entries that aren't usable questions.
    """
    if not isinstance(question, dict):
        raise ValueError("question must be an object")

    normalized = dict(question)
    correct = normalized.get('correct_answers')
    if correct is None:
        correct = normalized.get('correctAnswer')
    if correct is None:
        correct = []
    if isinstance(correct, (str, int)) and not isinstance(correct, bool):
        correct = [correct]
    if not isinstance(correct, list) or not all(
            isinstance(label, (str, int)) and not isinstance(label, bool) for label in correct):
        raise ValueError("correct answers must be option labels")

    normalized['correct_answers'] = [str(label) for label in correct]
    return normalized


class QuizCatalog:
    """Read-only view over a directory tree of quiz files."""

    def __init__(self, root, logger: logging.Logger = None, rng: random.Random = None):
        self.root = Path(root)
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng or _random

    def _resolve(self, *parts):
        """Join parts under the root; None if the result escapes it."""
        path = self.root.joinpath(*parts)
        try:
            path.resolve().relative_to(self.root.resolve())
        except ValueError:
            return None
        return path

    def list_modules(self) -> list:
        """Names of the module directories directly under the root, in listing order."""
        try:
            return [
                item.name for item in self.root.iterdir()
                if item.is_dir() and not item.name.startswith('.')
            ]
        except OSError as e:
            self.logger.warning("Could not list quiz modules in %s: %s", self.root, e)
            return []

    def list_quiz_files(self, module: str = None) -> list:
        """Names of .json files in a module (or in the root when no module is given)."""
        directory = self._resolve(module) if module else self.root
        if directory is None:
            self.logger.warning("Rejected module outside quiz root: %s", module)
            return []

        try:
            return [
                item.name for item in directory.iterdir()
                if item.is_file() and item.name.endswith(QUIZ_EXTENSION)
            ]
        except OSError as e:
            self.logger.warning("Could not list quiz files in %s: %s", directory, e)
            return []

    def _find_file(self, filename, module=None):
        if module:
            path = self._resolve(module, filename)
            if path is not None and path.is_file():
                return path
            raise QuizNotFoundError(filename, module)

        # First module in listing order wins when names collide
        for candidate in self.list_modules():
            path = self._resolve(candidate, filename)
            if path is not None and path.is_file():
                return path

        path = self._resolve(filename)
        if path is not None and path.is_file():
            return path
        raise QuizNotFoundError(filename)

    def load_quiz_file(self, filename: str, module: str = None) -> list:
        """
        Load and parse a quiz file.
        Raises QuizNotFoundError if it doesn't exist, QuizLoadError if it can't be used.
        """
        path = self._find_file(filename, module)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                questions = json.load(f)
        except json.JSONDecodeError as e:
            raise QuizLoadError(filename, f"invalid JSON: {e}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise QuizLoadError(filename, str(e)) from e

        if not isinstance(questions, list):
            raise QuizLoadError(filename, "expected a list of questions")

        normalized = []
        for index, question in enumerate(questions):
            try:
                normalized.append(normalize_question(question))
            except ValueError as e:
                raise QuizLoadError(filename, f"question {index}: {e}") from e
        return normalized

    def _module_pool(self, module: str) -> list:
        """All questions of every file in a module; unloadable files are skipped."""
        pool = []
        for filename in self.list_quiz_files(module):
            try:
                pool.extend(self.load_quiz_file(filename, module))
            except QuizError as e:
                self.logger.warning("Skipping %s/%s in combined quiz: %s", module, filename, e)
        return pool

    def get_combined_quiz(self, count: int, module: str = None) -> list:
        """
        Assemble a shuffled quiz of at most `count` questions.

        With a module, questions are drawn from that module alone. Without
        one, every module contributes up to ceil(count / modules) questions
        before the aggregate is shuffled and truncated, so a large module
        cannot crowd out the small ones.
        """
        try:
            if module:
                return shuffle(self._module_pool(module), self.rng)[:count]

            modules = self.list_modules()
            if not modules:
                return []

            per_module = math.ceil(count / len(modules))
            aggregate = []
            for name in modules:
                pool = self._module_pool(name)
                aggregate.extend(shuffle(pool, self.rng)[:per_module])

            return shuffle(aggregate, self.rng)[:count]
        except Exception:
            self.logger.exception("Failed to assemble combined quiz (count=%s, module=%s)", count, module)
            return []
