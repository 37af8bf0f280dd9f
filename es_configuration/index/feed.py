"""
Pull-based document source adapter
"""

import logging
from itertools import islice
from typing import Callable, Iterable, Iterator, List

from .models import Document, DocumentBatch, DocumentOptions

logger = logging.getLogger(__name__)


def iterable_source(documents: Iterable[Document], batch_size: int = 100) -> Callable[[], List[Document]]:
    """Turn an iterable into a next() source returning batches of batch_size"""
    if batch_size < 1:
        raise ValueError("batch_size must be >= 1")
    iterator = iter(documents)
    return lambda: list(islice(iterator, batch_size))


class DocumentFeed:
    """
    Drains a caller supplied ``next()`` source batch by batch.

    A call may return one document, a list of documents, or None / an
    empty list to signal the end. ``next()`` is not called again until the
    previous batch has been handled, so only one batch is in memory.
    """

    def __init__(self, next: Callable[[], DocumentBatch]):
        self._next = next

    @classmethod
    def from_iterable(cls, documents: Iterable[Document], batch_size: int = 100) -> "DocumentFeed":
        """Feed documents from any iterable in batches of batch_size"""
        return cls(iterable_source(documents, batch_size))

    def batches(self) -> Iterator[List[Document]]:
        while True:
            docs = self._next()
            if docs is None:
                return
            if not isinstance(docs, (list, tuple)):
                docs = [docs]
            if not docs:
                return
            yield list(docs)

    def drain(self, index_ops, target: str, options: DocumentOptions = None) -> int:
        """
        Index every document of the source into target

        Returns:
            Number of documents indexed
        """
        options = options or DocumentOptions()
        total = 0
        for batch in self.batches():
            index_ops.index_documents(batch, options, name=target)
            total += len(batch)
            logger.debug("Indexed batch of %d documents into %s (%d so far)", len(batch), target, total)
        logger.info("Indexed %d documents into %s", total, target)
        return total
