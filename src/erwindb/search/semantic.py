"""Best-effort semantic search over question embeddings."""

import logging
from collections.abc import Callable, Sequence
from typing import Protocol

from ..exceptions import SearchUnavailableError

logger: logging.Logger = logging.getLogger(name=__name__)

Embedder = Callable[[str], Sequence[float]]


class VectorIndex(Protocol):
    """Nearest-neighbour lookup returning question ids, closest first."""

    def semantic_search(self, query_embedding: Sequence[float], limit: int) -> list[int]: ...


class SemanticSearch:
    """Embeds a query and looks up the closest questions.

    Both collaborators are optional. Without them, or when either fails,
    searches report no results instead of raising.
    """

    def __init__(
        self, embedder: Embedder | None = None, index: VectorIndex | None = None
    ) -> None:
        self.embedder = embedder
        self.index = index

    @property
    def is_available(self) -> bool:
        return self.embedder is not None and self.index is not None

    def embed(self, text: str) -> list[float]:
        """Embed text into a vector.

        Raises:
            SearchUnavailableError: If no embedder is configured
        """
        if self.embedder is None:
            raise SearchUnavailableError()
        return [float(value) for value in self.embedder(text)]

    def search(self, query: str, limit: int = 20) -> list[int]:
        """Return ids of the questions closest to the query.

        Args:
            query: Free-text query
            limit: Maximum number of ids

        Returns:
            Question ids, most similar first; empty on any failure
        """
        if not query.strip():
            return []
        if self.index is None:
            logger.warning(msg="Semantic search requested but no vector index is configured")
            return []
        try:
            vector = self.embed(text=query)
            return list(self.index.semantic_search(query_embedding=vector, limit=limit))
        except SearchUnavailableError as e:
            logger.warning(msg=f"Semantic search unavailable: {e}")
        except Exception as e:
            logger.error(msg=f"Semantic search failed for '{query}': {e}")
        return []
