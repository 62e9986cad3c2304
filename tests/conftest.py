from __future__ import annotations

import json
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from quiz import QuizCatalog  # noqa: E402


def make_questions(prefix: str, n: int) -> list:
    return [
        {
            "question": f"{prefix} question {i}",
            "options": {"A": "yes", "B": "no", "C": "maybe"},
            "correct_answers": ["A"],
        }
        for i in range(n)
    ]


def write_quiz(path: Path, questions) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(questions), encoding="utf-8")
    return path


@pytest.fixture
def quiz_root(tmp_path: Path) -> Path:
    """math: 8 questions over two files, history: 3 questions, plus one root-level quiz."""
    root = tmp_path / "quizzes"
    write_quiz(root / "math" / "algebra.json", make_questions("algebra", 5))
    write_quiz(root / "math" / "geometry.json", make_questions("geometry", 3))
    write_quiz(root / "history" / "ancient.json", make_questions("ancient", 3))
    (root / "history" / "notes.txt").write_text("not a quiz", encoding="utf-8")
    write_quiz(root / "general.json", make_questions("general", 2))
    return root


@pytest.fixture
def catalog(quiz_root: Path) -> QuizCatalog:
    return QuizCatalog(quiz_root, rng=random.Random(1234))


@pytest.fixture
def flask_app(quiz_root: Path, tmp_path: Path):
    import app as app_module

    app_module.app.config.update(
        TESTING=True,
        QUIZ_DIR=quiz_root,
        RESULTS_FILE=tmp_path / "results.json",
    )
    return app_module.app


@pytest.fixture
def client(flask_app):
    return flask_app.test_client()
