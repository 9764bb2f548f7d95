"""SQLite storage for scraped questions, answers and comments."""

import logging
import sqlite3
import struct
from collections.abc import Sequence
from pathlib import Path
from typing import Protocol

import sqlite_vec

from .exceptions import SearchUnavailableError, StorageError
from .models import Answer, Comment, Document, Question

logger: logging.Logger = logging.getLogger(name=__name__)

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY,
    title TEXT NOT NULL,
    body TEXT NOT NULL DEFAULT '',
    score INTEGER NOT NULL DEFAULT 0,
    view_count INTEGER NOT NULL DEFAULT 0,
    answer_count INTEGER NOT NULL DEFAULT 0,
    creation_date INTEGER NOT NULL DEFAULT 0,
    accepted_answer_id INTEGER,
    author_name TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS answers (
    id INTEGER PRIMARY KEY,
    question_id INTEGER NOT NULL,
    answer_id INTEGER NOT NULL,
    answer_text TEXT NOT NULL DEFAULT '',
    score INTEGER NOT NULL DEFAULT 0,
    is_accepted INTEGER NOT NULL DEFAULT 0,
    author_name TEXT NOT NULL DEFAULT '',
    author_reputation INTEGER NOT NULL DEFAULT 0,
    answer_order INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY (question_id) REFERENCES questions(id)
);

CREATE TABLE IF NOT EXISTS question_comments (
    question_id INTEGER NOT NULL,
    comment_text TEXT NOT NULL DEFAULT '',
    score INTEGER NOT NULL DEFAULT 0,
    author_name TEXT NOT NULL DEFAULT '',
    FOREIGN KEY (question_id) REFERENCES questions(id)
);

CREATE TABLE IF NOT EXISTS answer_comments (
    answer_id INTEGER NOT NULL,
    comment_text TEXT NOT NULL DEFAULT '',
    score INTEGER NOT NULL DEFAULT 0,
    author_name TEXT NOT NULL DEFAULT '',
    FOREIGN KEY (answer_id) REFERENCES answers(id)
);

CREATE TABLE IF NOT EXISTS question_embeddings (
    question_id INTEGER PRIMARY KEY,
    embedding BLOB NOT NULL,
    FOREIGN KEY (question_id) REFERENCES questions(id)
);

CREATE INDEX IF NOT EXISTS idx_answers_question ON answers(question_id, answer_order);
CREATE INDEX IF NOT EXISTS idx_question_comments ON question_comments(question_id);
CREATE INDEX IF NOT EXISTS idx_answer_comments ON answer_comments(answer_id);
"""

_QUESTION_COLUMNS = """id, title, body, score, view_count, answer_count,
    creation_date, accepted_answer_id, author_name"""


class Storage(Protocol):
    """Read-only source of questions, answers and comments."""

    def get_question(self, question_id: int) -> Question | None: ...

    def get_answers(self, question_id: int) -> list[Answer]: ...

    def get_question_comments(self, question_id: int) -> list[Comment]: ...

    def get_answer_comments(self, answer_id: int) -> list[Comment]: ...


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes."""
    conn.executescript(_SCHEMA_SQL)


def pack_embedding(vector: Sequence[float]) -> bytes:
    """Serialize a vector as little-endian float32, the sqlite-vec blob layout."""
    return struct.pack(f"<{len(vector)}f", *vector)


def _row_to_question(row: sqlite3.Row) -> Question:
    return Question(
        id=row["id"],
        title=row["title"],
        body=row["body"],
        score=row["score"],
        view_count=row["view_count"],
        answer_count=row["answer_count"],
        creation_date=row["creation_date"],
        accepted_answer_id=row["accepted_answer_id"],
        author_name=row["author_name"],
    )


def _row_to_comment(row: sqlite3.Row) -> Comment:
    return Comment(
        comment_text=row["comment_text"],
        score=row["score"],
        author_name=row["author_name"],
    )


class Database:
    """SQLite-backed question store."""

    def __init__(self, path: str | Path) -> None:
        """Open a connection to the database.

        Args:
            path: Path of the SQLite file, or ":memory:"
        """
        self.path = str(path)
        # semantic queries run in a worker thread, one at a time
        self.conn: sqlite3.Connection = sqlite3.connect(self.path, check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.vector_search_enabled = self._load_vector_extension()

    def _load_vector_extension(self) -> bool:
        """Load sqlite-vec into the connection, returning whether it worked."""
        try:
            self.conn.enable_load_extension(True)
            sqlite_vec.load(self.conn)
            self.conn.enable_load_extension(False)
        except (AttributeError, sqlite3.Error) as e:
            logger.warning(msg=f"sqlite-vec could not be loaded, semantic search disabled: {e}")
            return False
        return True

    @classmethod
    def open_existing(cls, path: str | Path) -> "Database":
        """Open a database file that must already exist.

        Args:
            path: Path of the SQLite file

        Returns:
            Database instance

        Raises:
            StorageError: If the file is missing or cannot be opened
        """
        db_path = Path(path).expanduser()
        if not db_path.is_file():
            raise StorageError(f"Database not found: {db_path}", path=str(db_path))
        try:
            return cls(db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open database: {e}", path=str(db_path)) from e

    def get_questions(self) -> list[Question]:
        """Return every question, newest id first."""
        rows = self.conn.execute(
            f"SELECT {_QUESTION_COLUMNS} FROM questions ORDER BY id DESC"
        ).fetchall()
        return [_row_to_question(row) for row in rows]

    def get_question(self, question_id: int) -> Question | None:
        row = self.conn.execute(
            f"SELECT {_QUESTION_COLUMNS} FROM questions WHERE id = ?", (question_id,)
        ).fetchone()
        return _row_to_question(row) if row else None

    def get_answers(self, question_id: int) -> list[Answer]:
        rows = self.conn.execute(
            """SELECT id, answer_text, score, is_accepted, author_name, author_reputation
               FROM answers WHERE question_id = ? ORDER BY answer_order""",
            (question_id,),
        ).fetchall()
        return [
            Answer(
                id=row["id"],
                answer_text=row["answer_text"],
                score=row["score"],
                is_accepted=bool(row["is_accepted"]),
                author_name=row["author_name"],
                author_reputation=row["author_reputation"],
            )
            for row in rows
        ]

    def get_question_comments(self, question_id: int) -> list[Comment]:
        rows = self.conn.execute(
            """SELECT comment_text, score, author_name
               FROM question_comments WHERE question_id = ?""",
            (question_id,),
        ).fetchall()
        return [_row_to_comment(row) for row in rows]

    def get_answer_comments(self, answer_id: int) -> list[Comment]:
        rows = self.conn.execute(
            """SELECT comment_text, score, author_name
               FROM answer_comments WHERE answer_id = ?""",
            (answer_id,),
        ).fetchall()
        return [_row_to_comment(row) for row in rows]

    def semantic_search(self, query_embedding: Sequence[float], limit: int) -> list[int]:
        """Return question ids ordered by cosine distance to the query embedding.

        Raises:
            SearchUnavailableError: If sqlite-vec failed to load
        """
        if not self.vector_search_enabled:
            raise SearchUnavailableError("sqlite-vec extension is not loaded")
        rows = self.conn.execute(
            """SELECT qe.question_id,
                      vec_distance_cosine(qe.embedding, ?) AS distance
               FROM question_embeddings qe
               ORDER BY distance ASC
               LIMIT ?""",
            (pack_embedding(query_embedding), limit),
        ).fetchall()
        return [row["question_id"] for row in rows]

    def close(self) -> None:
        """Close the underlying connection."""
        self.conn.close()


def load_document(storage: Storage, question_id: int) -> Document:
    """Fetch a question and everything hanging off it.

    Any failing read is logged and treated as an empty result, so a broken
    or partial database yields a placeholder document rather than an error.

    Args:
        storage: Data source to read from
        question_id: Id of the question to load

    Returns:
        The assembled Document (``question`` is None when absent)
    """
    try:
        question = storage.get_question(question_id)
    except Exception as e:
        logger.error(msg=f"Error loading question {question_id}: {e}")
        question = None

    try:
        answers = list(storage.get_answers(question_id))
    except Exception as e:
        logger.error(msg=f"Error loading answers for question {question_id}: {e}")
        answers = []

    try:
        question_comments = list(storage.get_question_comments(question_id))
    except Exception as e:
        logger.error(msg=f"Error loading comments for question {question_id}: {e}")
        question_comments = []

    answer_comments: list[list[Comment]] = []
    for answer in answers:
        try:
            answer_comments.append(list(storage.get_answer_comments(answer.id)))
        except Exception as e:
            logger.error(msg=f"Error loading comments for answer {answer.id}: {e}")
            answer_comments.append([])

    if question is None:
        logger.warning(msg=f"Question {question_id} not found in database")

    return Document(
        question_id=question_id,
        question=question,
        answers=answers,
        question_comments=question_comments,
        answer_comments=answer_comments,
    )
