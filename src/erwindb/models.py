"""Data model for questions, answers and comments."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Question:
    """A question as stored in the local database."""

    id: int
    title: str
    body: str
    score: int = 0
    view_count: int = 0
    answer_count: int = 0
    creation_date: int = 0
    accepted_answer_id: int | None = None
    author_name: str = ""


@dataclass(frozen=True)
class Answer:
    """An answer belonging to a question."""

    id: int
    answer_text: str
    score: int = 0
    is_accepted: bool = False
    author_name: str = ""
    author_reputation: int = 0


@dataclass(frozen=True)
class Comment:
    """A comment on a question or an answer."""

    comment_text: str
    score: int = 0
    author_name: str = ""


@dataclass(frozen=True)
class Document:
    """A question together with its answers and all comments.

    ``answer_comments`` holds one list per answer, in answer order. A
    ``question`` of None marks an id that is not in the database.
    """

    question_id: int
    question: Question | None = None
    answers: list[Answer] = field(default_factory=list)
    question_comments: list[Comment] = field(default_factory=list)
    answer_comments: list[list[Comment]] = field(default_factory=list)

    def comments_for(self, answer_index: int) -> list[Comment]:
        """Return the comments of the answer at answer_index."""
        if 0 <= answer_index < len(self.answer_comments):
            return self.answer_comments[answer_index]
        return []
