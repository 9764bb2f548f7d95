"""Screen modules for erwindb."""

from .help import HelpScreen
from .question_list import QuestionListScreen
from .question_view import QuestionScreen
from .semantic_search import SemanticSearchScreen

__all__: list[str] = [
    "HelpScreen",
    "QuestionListScreen",
    "QuestionScreen",
    "SemanticSearchScreen",
]
