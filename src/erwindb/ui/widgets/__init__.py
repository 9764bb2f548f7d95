"""Widgets for erwindb."""

from .document_pane import DocumentPane
from .question_table import QuestionTable

__all__: list[str] = ["DocumentPane", "QuestionTable"]
