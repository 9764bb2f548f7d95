"""Tests for the database module."""

import logging
import sqlite3
import struct
from pathlib import Path

import pytest
from conftest import FakeStorage, make_answer, make_question

from erwindb.database import Database, load_document, pack_embedding
from erwindb.exceptions import SearchUnavailableError, StorageError
from erwindb.models import Comment
from erwindb.search.semantic import SemanticSearch


class TestDatabase:
    """Test cases for Database class."""

    def test_get_questions_newest_first(self, memory_db: Database) -> None:
        """Test every question is returned, highest id first."""
        assert [q.id for q in memory_db.get_questions()] == [300, 200, 100]

    def test_get_question(self, memory_db: Database) -> None:
        """Test reading one question."""
        question = memory_db.get_question(100)

        assert question is not None
        assert question.title == "How to use &quot;JSONB&quot; indexes?"
        assert question.score == 10
        assert question.view_count == 1500
        assert question.accepted_answer_id == 1002
        assert question.author_name == "alice"

    def test_get_missing_question(self, memory_db: Database) -> None:
        """Test an unknown id returns None."""
        assert memory_db.get_question(999) is None

    def test_get_answers_in_order(self, memory_db: Database) -> None:
        """Test answers come back in stored order."""
        answers = memory_db.get_answers(100)

        assert [a.id for a in answers] == [1001, 1002, 1003, 1004, 1005]
        assert answers[1].is_accepted is True
        assert answers[0].is_accepted is False
        assert answers[1].author_reputation == 650000

    def test_get_answers_none(self, memory_db: Database) -> None:
        """Test a question without answers."""
        assert memory_db.get_answers(300) == []

    def test_comments(self, memory_db: Database) -> None:
        """Test question and answer comments."""
        question_comments = memory_db.get_question_comments(100)
        assert [c.comment_text for c in question_comments] == ["Nice question", "<b>Agreed</b>"]
        assert memory_db.get_answer_comments(1002) == [
            Comment(comment_text="Thanks!", score=1, author_name="alice")
        ]
        assert memory_db.get_answer_comments(1001) == []

    def test_open_existing(self, db_file: Path) -> None:
        """Test opening a database file from disk."""
        db = Database.open_existing(db_file)
        try:
            assert len(db.get_questions()) == 3
        finally:
            db.close()

    def test_open_missing_file(self, tmp_path: Path) -> None:
        """Test opening a missing file raises StorageError."""
        missing = tmp_path / "nope.db"

        with pytest.raises(StorageError) as exc_info:
            Database.open_existing(missing)

        assert exc_info.value.path == str(missing)
        assert "not found" in str(exc_info.value)


class TestVectorSearch:
    """Test cases for Database.semantic_search."""

    def test_closest_first(self, memory_db: Database) -> None:
        """Test stored embeddings are ranked by cosine distance."""
        memory_db.conn.executemany(
            "INSERT INTO question_embeddings (question_id, embedding) VALUES (?, ?)",
            [(100, pack_embedding([0.0, 1.0])), (200, pack_embedding([1.0, 0.0]))],
        )

        assert memory_db.vector_search_enabled
        assert memory_db.semantic_search([1.0, 0.1], limit=5) == [200, 100]
        assert memory_db.semantic_search([1.0, 0.1], limit=1) == [200]

    def test_through_semantic_search(self, memory_db: Database) -> None:
        """Test a query embedding reaches the stored vectors."""
        memory_db.conn.execute(
            "INSERT INTO question_embeddings (question_id, embedding) VALUES (?, ?)",
            (300, pack_embedding([1.0, 0.0])),
        )
        search = SemanticSearch(embedder=lambda text: [1.0, 0.0], index=memory_db)

        assert search.search("anything") == [300]

    def test_extension_load_failure(
        self, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a database still opens when sqlite-vec cannot be loaded."""

        def broken_load(conn: sqlite3.Connection) -> None:
            raise sqlite3.OperationalError("cannot load extension")

        monkeypatch.setattr("erwindb.database.sqlite_vec.load", broken_load)

        with caplog.at_level(logging.WARNING):
            db = Database(":memory:")
        try:
            assert not db.vector_search_enabled
            assert "sqlite-vec could not be loaded" in caplog.text
            with pytest.raises(SearchUnavailableError):
                db.semantic_search([1.0], limit=1)
        finally:
            db.close()


class TestPackEmbedding:
    """Test cases for pack_embedding function."""

    def test_little_endian_float32(self) -> None:
        """Test vectors are packed as little-endian float32."""
        packed = pack_embedding([1.0, -2.5])

        assert len(packed) == 8
        assert struct.unpack("<2f", packed) == (1.0, -2.5)


class TestLoadDocument:
    """Test cases for load_document function."""

    def test_full_document(self, memory_db: Database) -> None:
        """Test a question with answers and comments."""
        document = load_document(memory_db, 100)

        assert document.question_id == 100
        assert document.question is not None
        assert len(document.answers) == 5
        assert len(document.question_comments) == 2
        assert len(document.answer_comments) == 5
        assert document.comments_for(1)[0].comment_text == "Thanks!"
        assert document.comments_for(7) == []

    def test_missing_question(self, memory_db: Database, caplog: pytest.LogCaptureFixture) -> None:
        """Test a missing question yields an empty document."""
        with caplog.at_level(logging.WARNING):
            document = load_document(memory_db, 999)

        assert document.question is None
        assert document.answers == []
        assert "999" in caplog.text

    def test_failing_reads_are_empty(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test every failing read degrades to an empty result."""
        storage = FakeStorage(
            questions={1: make_question(1)},
            answers={1: [make_answer(1, "<p>a</p>"), make_answer(2, "<p>b</p>")]},
            question_comments={1: [Comment(comment_text="hi")]},
            failing={"get_question_comments", "get_answer_comments"},
        )

        with caplog.at_level(logging.ERROR):
            document = load_document(storage, 1)

        assert document.question is not None
        assert len(document.answers) == 2
        assert document.question_comments == []
        assert document.answer_comments == [[], []]
        assert "get_answer_comments failed" in caplog.text

    def test_failing_question_read(self) -> None:
        """Test a failing question read behaves like a missing question."""
        storage = FakeStorage(questions={1: make_question(1)}, failing={"get_question"})

        document = load_document(storage, 1)

        assert document.question is None
