"""
Index operations: existence, create, delete, reindex and document upserts
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from contextlib import contextmanager
from typing import List

from elasticsearch import ApiError

from ..errors import RemoteOperationError
from ..es_client import ClientGateway
from ..metrics import inc_documents_indexed, inc_remote_operation, observe_remote_latency, track_latency
from .models import Document, DocumentOptions, IndexOptions
from .schema import SchemaLoader

logger = logging.getLogger(__name__)


@contextmanager
def remote_call(operation: str, target: str):
    """Count and time the call, turning Elasticsearch API errors into RemoteOperationError"""
    with track_latency(lambda seconds: observe_remote_latency(operation, seconds)):
        try:
            yield
        except ApiError as e:
            inc_remote_operation(operation, "error")
            raise RemoteOperationError(operation, target, e.status_code, e.info) from e
        except Exception:
            inc_remote_operation(operation, "error")
            raise
    inc_remote_operation(operation, "success")


class IndexOperations:
    """
    Single-call index primitives.

    Every method asks the gateway for a (health-checked) client; nothing
    about remote state is cached.
    """

    def __init__(self, gateway: ClientGateway, schema_loader: SchemaLoader = None, max_workers: int = None):
        self.gateway = gateway
        self.schema = schema_loader or SchemaLoader(gateway.get_version, gateway.options.path)
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or gateway.options.index_concurrency,
            thread_name_prefix="es_index_"
        )

    def index_exists(self, name: str) -> bool:
        es = self.gateway.get_client()
        return bool(es.indices.exists(index=name))

    def create_index(self, name: str, type: str) -> bool:
        """
        Create an index from the configuration of a type

        Returns:
            True if the index was created, False if it already existed
        """
        if self.index_exists(name):
            logger.debug("Index %s already exists", name)
            return False

        body = self.schema.load(type)
        es = self.gateway.get_client()
        with remote_call("create_index", name):
            es.indices.create(index=name, body=body)
        logger.info("Created index %s with %s configuration", name, type)
        return True

    def delete_index(self, name: str):
        """Delete an index; callers check existence when a missing index is fine"""
        es = self.gateway.get_client()
        with remote_call("delete_index", name):
            es.indices.delete(index=name)
        logger.info("Deleted index %s", name)

    def reindex(self, source: str, dest: str):
        """Copy all documents from source to dest, visible in dest on return"""
        es = self.gateway.get_client()
        with remote_call("reindex", f"{source} -> {dest}"):
            response = es.reindex(
                source={"index": source},
                dest={"index": dest},
                refresh=True,
                wait_for_completion=True
            )

        result = response.body
        failures = result.get("failures") or []
        if failures:
            raise RemoteOperationError("reindex", f"{source} -> {dest}", info=failures)
        logger.info("Reindexed %s documents from %s to %s", result.get("total", 0), source, dest)
        return result

    def index_document(self, options: IndexOptions):
        """Upsert one document, visible to searches on return"""
        doc_id, body = options.prepare(options.document)

        es = self.gateway.get_client()
        with remote_call("index", options.name):
            response = es.index(index=options.name, id=doc_id, document=body, refresh=True)
        inc_documents_indexed()
        logger.info("Successfully indexed document %s", doc_id)
        return response.body

    def index_documents(self, documents: List[Document], options: DocumentOptions, name: str = None) -> list:
        """
        Upsert documents in parallel.

        Fails with the first error raised; upserts already dispatched keep
        running on the executor.
        """
        name = name or getattr(options, "name", None)
        futures = [
            self._executor.submit(self.index_document, IndexOptions.for_document(name, document, options))
            for document in documents
        ]
        return [future.result() for future in as_completed(futures)]

    def close(self):
        self._executor.shutdown(wait=True)
