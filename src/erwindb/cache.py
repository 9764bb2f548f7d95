"""Cache module for erwindb."""

import logging
from collections import OrderedDict
from typing import Any

logger: logging.Logger = logging.getLogger(name=__name__)


class LimitedSizeDict(OrderedDict):
    """A dictionary that holds at most 'max_size' items and evicts the least recently used."""

    def __init__(self, max_size: int) -> None:
        """Initialize the LimitedSizeDict.

        Args:
            max_size: Maximum number of items to store in the dictionary
        """
        self.max_size: int = max_size
        super().__init__()

    def __setitem__(self, key: Any, value: Any) -> None:
        """Set an item in the dictionary, removing the oldest if full.

        Args:
            key: Dictionary key
            value: Value to store
        """
        if key in self:
            self.move_to_end(key=key)
        super().__setitem__(key, value)
        if len(self) > self.max_size:
            oldest, _ = self.popitem(last=False)
            logger.debug(msg=f"Evicted cache entry: {oldest!r:.60}")

    def lookup(self, key: Any) -> Any:
        """Return the value for key and mark it as recently used.

        Args:
            key: Dictionary key

        Returns:
            The cached value, or None when the key is absent
        """
        if key not in self:
            return None
        self.move_to_end(key=key)
        return self[key]
