"""Shared pytest fixtures for erwindb tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest

from erwindb.database import Database, create_schema
from erwindb.models import Answer, Comment, Document, Question

DISTINGUISHED = "Erwin Brandstetter"

QUESTIONS = [
    # id, title, body, score, view_count, answer_count, creation_date, accepted, author
    (
        100,
        "How to use &quot;JSONB&quot; indexes?",
        '<p>Hello <a href="http://example.com">world</a></p>'
        '<p>See <a href="https://stackoverflow.com/questions/200/slow">this question</a>.</p>',
        10,
        1500,
        5,
        1609459200,
        1002,
        "alice",
    ),
    (200, "Why is my query slow?", "<p>It is slow.</p>", 3, 50, 1, 1612137600, None, "bob"),
    (300, "Empty question", "", 0, 7, 0, 1614556800, None, "carol"),
]

ANSWERS = [
    # id, question_id, text, score, is_accepted, author, reputation, order
    (1001, 100, "<p>First answer</p>", 2, 0, "alice", 120, 0),
    (
        1002,
        100,
        '<p>Use <a href="https://www.postgresql.org/docs/">the docs</a></p>',
        15,
        1,
        DISTINGUISHED,
        650000,
        1,
    ),
    (1003, 100, '<pre class="lang-sql"><code>SELECT 1;</code></pre>', 0, 0, "bob", 10, 2),
    (1004, 100, "<p>Second take</p>", 4, 0, DISTINGUISHED, 650000, 3),
    (1005, 100, "<p>Last</p>", -1, 0, "carol", 5, 4),
    (2001, 200, "<p>Add an index</p>", 1, 0, "dave", 42, 0),
]

QUESTION_COMMENTS = [
    (100, "Nice question", 3, "bob"),
    (100, "<b>Agreed</b>", 0, DISTINGUISHED),
]

ANSWER_COMMENTS = [
    (1002, "Thanks!", 1, "alice"),
]


def insert_sample_data(db: Database) -> None:
    """Fill a database with the sample questions, answers and comments."""
    create_schema(db.conn)
    db.conn.executemany(
        """INSERT INTO questions (id, title, body, score, view_count, answer_count,
           creation_date, accepted_answer_id, author_name)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        QUESTIONS,
    )
    db.conn.executemany(
        """INSERT INTO answers (id, question_id, answer_id, answer_text, score,
           is_accepted, author_name, author_reputation, answer_order)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        [(a[0], a[1], a[0], *a[2:]) for a in ANSWERS],
    )
    db.conn.executemany(
        """INSERT INTO question_comments (question_id, comment_text, score, author_name)
           VALUES (?, ?, ?, ?)""",
        QUESTION_COMMENTS,
    )
    db.conn.executemany(
        """INSERT INTO answer_comments (answer_id, comment_text, score, author_name)
           VALUES (?, ?, ?, ?)""",
        ANSWER_COMMENTS,
    )
    db.conn.commit()


@pytest.fixture
def memory_db() -> Iterator[Database]:
    """An in-memory database holding the sample data."""
    db = Database(":memory:")
    insert_sample_data(db)
    yield db
    db.close()


@pytest.fixture
def db_file(tmp_path: Path) -> Path:
    """A database file on disk holding the sample data."""
    path = tmp_path / "sqlite.db"
    db = Database(path)
    insert_sample_data(db)
    db.close()
    return path


class FakeStorage:
    """Dictionary-backed storage; names in ``failing`` raise when called."""

    def __init__(
        self,
        questions: dict[int, Question],
        answers: dict[int, list[Answer]] | None = None,
        question_comments: dict[int, list[Comment]] | None = None,
        answer_comments: dict[int, list[Comment]] | None = None,
        failing: set[str] | None = None,
    ) -> None:
        self.questions = questions
        self.answers = answers or {}
        self.question_comments = question_comments or {}
        self.answer_comments = answer_comments or {}
        self.failing = failing or set()

    def _check(self, name: str) -> None:
        if name in self.failing:
            raise OSError(f"{name} failed")

    def get_question(self, question_id: int) -> Question | None:
        self._check("get_question")
        return self.questions.get(question_id)

    def get_answers(self, question_id: int) -> list[Answer]:
        self._check("get_answers")
        return self.answers.get(question_id, [])

    def get_question_comments(self, question_id: int) -> list[Comment]:
        self._check("get_question_comments")
        return self.question_comments.get(question_id, [])

    def get_answer_comments(self, answer_id: int) -> list[Comment]:
        self._check("get_answer_comments")
        return self.answer_comments.get(answer_id, [])


def make_question(question_id: int = 1, body: str = "<p>Body</p>", **kwargs) -> Question:
    """Build a question with sensible defaults."""
    values = {
        "title": f"Question {question_id}",
        "score": 1,
        "view_count": 10,
        "answer_count": 0,
        "creation_date": 1609459200,
        "author_name": "asker",
    }
    values.update(kwargs)
    return Question(id=question_id, body=body, **values)


def make_answer(answer_id: int, text: str, author: str = "someone", **kwargs) -> Answer:
    """Build an answer with sensible defaults."""
    return Answer(id=answer_id, answer_text=text, author_name=author, **kwargs)


@pytest.fixture
def mixed_document() -> Document:
    """A question with two distinguished and three ordinary answers."""
    answers = [
        make_answer(1, '<p>One <a href="http://one.example">link</a></p>'),
        make_answer(2, '<p>Two <a href="http://two.example">link</a></p>', author=DISTINGUISHED),
        make_answer(3, '<p>Three <a href="http://three.example">link</a></p>'),
        make_answer(4, "<p>Four</p>", author=DISTINGUISHED, score=7, is_accepted=True),
        make_answer(5, "<p>Five</p>"),
    ]
    return Document(
        question_id=1,
        question=make_question(1, answer_count=len(answers)),
        answers=answers,
        question_comments=[Comment(comment_text="Good one", score=2, author_name="reader")],
        answer_comments=[
            [],
            [Comment(comment_text="Indeed", author_name=DISTINGUISHED)],
            [],
            [],
            [],
        ],
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test."""
    import logging

    logger = logging.getLogger()

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    logger.setLevel(logging.WARNING)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
