"""
Alias-backed index configuration - Facade layer

Consumers always query an alias ``A``. The alias points at the concrete
index ``real.A``; schema changes go through a temporary ``tmp.real.A``
index so the alias never resolves to a missing index:

    A -> real.A                        (steady state)
    A -> tmp.real.A                    (real.A is dropped and recreated)
    A -> real.A                        (tmp.real.A is dropped)

Nothing is cached locally: every decision is taken from a fresh query
against Elasticsearch.
"""

import logging
import time
from contextlib import contextmanager
from typing import List

from .errors import WorkflowError
from .es_client import ClientGateway
from .index import (
    AliasOperations,
    DocumentFeed,
    IndexOperations,
    IndexOptions,
    ReindexAllOptions,
)
from .metrics import inc_cleanup_failure, observe_workflow_duration
from .settings import ElasticsearchOptions

logger = logging.getLogger(__name__)

REAL_INDEX_PREFIX = "real."
TMP_INDEX_PREFIX = "tmp."


def real_index_name(alias: str) -> str:
    """Name of the concrete index backing an alias"""
    return REAL_INDEX_PREFIX + alias


def tmp_index_name(alias: str) -> str:
    """Name of the temporary index used while an alias is rebuilt"""
    return TMP_INDEX_PREFIX + real_index_name(alias)


class _Workflow:
    """Runs named steps in order and reports where a failure happened"""

    def __init__(self, name: str, alias: str):
        self.name = name
        self.alias = alias
        self.completed: List[str] = []

    @contextmanager
    def step(self, step: str):
        logger.info("[%s %s] %s", self.name, self.alias, step)
        try:
            yield
        except Exception as e:
            logger.error("[%s %s] step '%s' failed: %s", self.name, self.alias, step, e)
            raise WorkflowError(self.name, self.alias, step, self.completed) from e
        self.completed.append(step)


@contextmanager
def _timed(workflow: str):
    start = time.time()
    status = "error"
    try:
        yield
        status = "success"
    finally:
        observe_workflow_duration(workflow, status, time.time() - start)


class ElasticsearchConfiguration:
    """
    Elasticsearch index configuration service
    Composes: client gateway, index operations, alias operations
    """

    def __init__(self, options: ElasticsearchOptions = None, gateway: ClientGateway = None):
        self.options = options or ElasticsearchOptions.from_env()
        self.gateway = gateway or ClientGateway(self.options)
        self.indices = IndexOperations(self.gateway)
        self.aliases = AliasOperations(self.gateway)

    def __enter__(self) -> "ElasticsearchConfiguration":
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        """Release the executor and the client handle"""
        self.indices.close()
        self.gateway.close()

    # Primitives

    def index_exists(self, name: str) -> bool:
        return self.indices.index_exists(name)

    def alias_exists(self, name: str, index: str = None) -> bool:
        return self.aliases.alias_exists(name, index)

    def create_index(self, name: str, type: str) -> bool:
        return self.indices.create_index(name, type)

    def delete_index(self, name: str):
        return self.indices.delete_index(name)

    def reindex(self, source: str, dest: str):
        return self.indices.reindex(source, dest)

    def index(self, options: IndexOptions):
        return self.indices.index_document(options)

    def index_docs(self, documents: list, options: IndexOptions):
        return self.indices.index_documents(documents, options, name=options.name)

    # Workflows

    def setup(self, alias: str, type: str):
        """
        Create the alias together with its backing index

        Args:
            alias: The alias name
            type: Index type (users, contacts, ...)
        """
        index = real_index_name(alias)
        with _timed("setup"):
            workflow = _Workflow("setup", alias)
            with workflow.step(f"create index {index}"):
                self.indices.create_index(index, type)
            with workflow.step(f"bind alias to {index}"):
                self.aliases.bind_alias(alias, index)

    def ensure_healthy(self, alias: str, type: str):
        """
        Repair an alias so it points at its backing index.

        - alias exists: (re)bind it to real.<alias>
        - an index is named like the alias: move its documents to
          real.<alias>, drop it and bind the alias in its place; this is how
          deployments that used plain index names get migrated
        - neither exists: real.<alias> is created but the alias is left
          unbound; use setup() to create an alias for the first time
        """
        with _timed("ensure_healthy"):
            self._ensure_healthy(_Workflow("ensure_healthy", alias), alias, type)

    def _ensure_healthy(self, workflow: _Workflow, alias: str, type: str):
        index = real_index_name(alias)

        with workflow.step(f"create index {index}"):
            self.indices.create_index(index, type)

        with workflow.step(f"check alias {alias}"):
            alias_exists = self.aliases.alias_exists(alias)
        if alias_exists:
            with workflow.step(f"bind alias to {index}"):
                self.aliases.bind_alias(alias, index)
            return

        # An alias cannot have the same name as an index
        with workflow.step(f"check index {alias}"):
            index_exists = self.indices.index_exists(alias)
        if index_exists:
            with workflow.step(f"copy index {alias} to {index}"):
                self.indices.reindex(alias, index)
            with workflow.step(f"delete index {alias}"):
                self.indices.delete_index(alias)
            with workflow.step(f"bind alias to {index}"):
                self.aliases.bind_alias(alias, index)
            return

        logger.warning("Alias %s does not exist and was not bound to %s; call setup() to create it", alias, index)

    def reconfigure(self, alias: str, type: str):
        """
        Apply the current configuration of type to the index behind alias,
        keeping its documents and without read downtime
        """
        index = real_index_name(alias)
        tmp_index = tmp_index_name(alias)

        with _timed("reconfigure"):
            workflow = _Workflow("reconfigure", alias)
            try:
                self._ensure_healthy(workflow, alias, type)
                with workflow.step(f"create index {tmp_index}"):
                    self._create_tmp_index(tmp_index, type)
                with workflow.step(f"copy {index} to {tmp_index}"):
                    self.indices.reindex(index, tmp_index)
                self._rebuild(workflow, alias, type)
            finally:
                self._delete_tmp_index(tmp_index)

    def reindex_all(self, options: ReindexAllOptions) -> int:
        """
        Apply the current configuration of type and reload every document
        from options.next into the index behind options.alias

        Returns:
            Number of documents loaded from the source
        """
        alias = options.alias
        tmp_index = tmp_index_name(alias)
        feed = DocumentFeed(options.next)
        document_options = options.document_options()
        total = 0

        with _timed("reindex_all"):
            workflow = _Workflow("reindex_all", alias)
            try:
                self._ensure_healthy(workflow, alias, options.type)
                with workflow.step(f"create index {tmp_index}"):
                    self._create_tmp_index(tmp_index, options.type)
                # The alias keeps serving reads from real.<alias> while documents load
                with workflow.step(f"load documents into {tmp_index}"):
                    total = feed.drain(self.indices, tmp_index, document_options)
                self._rebuild(workflow, alias, options.type)
            finally:
                self._delete_tmp_index(tmp_index)

        return total

    def _rebuild(self, workflow: _Workflow, alias: str, type: str):
        """Swap alias to tmp, recreate real.<alias> from tmp, swap back"""
        index = real_index_name(alias)
        tmp_index = tmp_index_name(alias)

        # The swap must happen before the delete: the alias never points at a deleted index
        with workflow.step(f"switch alias to {tmp_index}"):
            self.aliases.swap_alias(alias, index, tmp_index)
        with workflow.step(f"delete index {index}"):
            self.indices.delete_index(index)
        with workflow.step(f"create index {index}"):
            self.indices.create_index(index, type)
        with workflow.step(f"copy {tmp_index} to {index}"):
            self.indices.reindex(tmp_index, index)
        with workflow.step(f"switch alias to {index}"):
            self.aliases.swap_alias(alias, tmp_index, index)

    def _create_tmp_index(self, tmp_index: str, type: str):
        if not self.indices.create_index(tmp_index, type):
            # Left behind by a run whose cleanup failed; its mapping and documents are reused as is
            logger.warning("Temporary index %s already exists and was not recreated", tmp_index)

    def _delete_tmp_index(self, tmp_index: str):
        """Best-effort removal of the temporary index; never raises"""
        try:
            if self.indices.index_exists(tmp_index):
                self.indices.delete_index(tmp_index)
        except Exception as e:
            inc_cleanup_failure()
            logger.error("Failed to delete temporary index %s: %s", tmp_index, e)
