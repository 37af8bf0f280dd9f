"""
Document indexing options
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from ..errors import DocumentIdError

Document = Dict[str, Any]

# What a document source returns per call: one document, a batch, or None at the end
DocumentBatch = Union[Document, List[Document], None]


@dataclass
class DocumentOptions:
    """
    How to turn a source document into an indexed one.

    get_id extracts the identifier from the original document (default: its
    ``id`` field). denormalize transforms the document before it is sent
    (default: unchanged).
    """
    get_id: Optional[Callable[[Document], Any]] = None
    denormalize: Optional[Callable[[Document], Document]] = None

    def prepare(self, document: Document) -> tuple:
        """Return (id, body) ready for indexing"""
        body = self.denormalize(document) if self.denormalize else document
        if self.get_id:
            doc_id = self.get_id(document)
        else:
            doc_id = document.get("id") if isinstance(document, dict) else None

        if doc_id is None:
            raise DocumentIdError(f"Cannot determine id of document: {document!r}")
        return str(doc_id), body


@dataclass
class IndexOptions(DocumentOptions):
    """A single document to index into a named index"""
    name: str = None
    document: Document = None

    @classmethod
    def for_document(cls, name: str, document: Document, options: DocumentOptions = None) -> "IndexOptions":
        options = options or DocumentOptions()
        return cls(name=name, document=document, get_id=options.get_id, denormalize=options.denormalize)


@dataclass
class ReindexAllOptions(DocumentOptions):
    """
    Full replay of documents behind an alias.

    next is called repeatedly and returns one document, a list of documents,
    or None / an empty list once the source is exhausted.
    """
    alias: str = None
    type: str = None
    next: Callable[[], DocumentBatch] = None

    def document_options(self) -> DocumentOptions:
        return DocumentOptions(get_id=self.get_id, denormalize=self.denormalize)
