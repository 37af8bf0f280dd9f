"""
Shared fixtures: an in-memory Elasticsearch stand-in
"""

import copy
import threading
from types import SimpleNamespace

import pytest
from elasticsearch import ApiError, BadRequestError, NotFoundError

from es_configuration import ElasticsearchConfiguration, ElasticsearchOptions
from es_configuration.es_client import ClientGateway


def api_error(cls, status: int, error_type: str):
    """Build an elasticsearch-py API error without a real transport response"""
    body = {"error": {"type": error_type, "reason": error_type}, "status": status}
    return cls(error_type, SimpleNamespace(status=status), body)


class FakeResponse:
    def __init__(self, body):
        self.body = body

    def __getitem__(self, key):
        return self.body[key]


class FakeIndices:
    def __init__(self, es: "FakeElasticsearch"):
        self.es = es

    def exists(self, index):
        self.es._record("exists", index)
        return index in self.es.docs or index in self.es.aliases

    def create(self, index, body=None):
        self.es._record("create", index, body=body)
        if index in self.es.docs or index in self.es.aliases:
            raise api_error(BadRequestError, 400, "resource_already_exists_exception")
        self.es.docs[index] = {}
        self.es.mappings[index] = body

    def delete(self, index):
        self.es._record("delete", index)
        if index not in self.es.docs:
            raise api_error(NotFoundError, 404, "index_not_found_exception")
        del self.es.docs[index]
        del self.es.mappings[index]
        for alias in list(self.es.aliases):
            self.es.aliases[alias].discard(index)
            if not self.es.aliases[alias]:
                del self.es.aliases[alias]

    def exists_alias(self, name, index=None):
        self.es._record("exists_alias", name, index=index)
        bound = self.es.aliases.get(name, set())
        return bool(bound) if index is None else index in bound

    def get_alias(self, name):
        self.es._record("get_alias", name)
        if name not in self.es.aliases:
            raise api_error(NotFoundError, 404, "aliases_not_found_exception")
        return FakeResponse({index: {"aliases": {name: {}}} for index in self.es.aliases[name]})

    def put_alias(self, index, name):
        self.es._record("put_alias", name, index=index)
        if index not in self.es.docs:
            raise api_error(NotFoundError, 404, "index_not_found_exception")
        if name in self.es.docs:
            raise api_error(BadRequestError, 400, "invalid_alias_name_exception")
        self.es.aliases.setdefault(name, set()).add(index)

    def update_aliases(self, actions):
        self.es._record("update_aliases", None, actions=actions)
        aliases = copy.deepcopy(self.es.aliases)
        for action in actions:
            (kind, target), = action.items()
            alias, index = target["alias"], target["index"]
            if index not in self.es.docs:
                raise api_error(NotFoundError, 404, "index_not_found_exception")
            if kind == "add":
                aliases.setdefault(alias, set()).add(index)
            elif index not in aliases.get(alias, set()):
                raise api_error(NotFoundError, 404, "aliases_not_found_exception")
            else:
                aliases[alias].discard(index)
        self.es.aliases = {name: bound for name, bound in aliases.items() if bound}


class FakeElasticsearch:
    """
    Keeps indices, aliases and documents in dicts and records every call.

    ``fail(operation, target)`` makes the next matching call raise; ``skip``
    lets that many matching calls through first.
    """

    def __init__(self, version: str = "7.17.9"):
        self.version = version
        self.docs = {}
        self.mappings = {}
        self.aliases = {}
        self.calls = []
        self.alive = True
        self.closed = False
        self.ping_options = None
        self.snapshots = []
        self._failures = {}
        self._lock = threading.Lock()
        self.indices = FakeIndices(self)
        self.cluster = SimpleNamespace(
            health=lambda: FakeResponse({"status": "green", "number_of_nodes": 1})
        )

    # Test helpers

    def fail(self, operation: str, target: str = None, error: Exception = None, skip: int = 0):
        self._failures[(operation, target)] = [error or api_error(ApiError, 500, "internal_error"), skip]

    def add_index(self, name: str, documents: list = ()):
        self.docs[name] = {str(d["id"]): dict(d) for d in documents}
        self.mappings[name] = {}

    def calls_of(self, operation: str) -> list:
        return [call for call in self.calls if call[0] == operation]

    def _record(self, operation, target, **kwargs):
        with self._lock:
            self.calls.append((operation, target, kwargs))
            for key in dict.fromkeys(((operation, target), (operation, None))):
                if key not in self._failures:
                    continue
                failure = self._failures[key]
                if failure[1] > 0:
                    failure[1] -= 1
                    continue
                del self._failures[key]
                raise failure[0]

    def _snapshot(self):
        self.snapshots.append({
            alias: {index: index in self.docs for index in bound}
            for alias, bound in self.aliases.items()
        })

    # Client API

    def options(self, **kwargs):
        self.ping_options = kwargs
        return self

    def ping(self):
        return self.alive

    def close(self):
        self.closed = True

    def info(self):
        return FakeResponse({"cluster_name": "test", "version": {"number": self.version}})

    def reindex(self, source, dest, refresh=False, wait_for_completion=True):
        self._record("reindex", dest["index"], source=source["index"], refresh=refresh)
        if source["index"] not in self.docs:
            raise api_error(NotFoundError, 404, "index_not_found_exception")
        documents = copy.deepcopy(self.docs[source["index"]])
        self.docs.setdefault(dest["index"], {}).update(documents)
        return FakeResponse({"total": len(documents), "created": len(documents), "failures": []})

    def index(self, index, id, document, refresh=False):
        self._record("index", index, id=id, document=document, refresh=refresh)
        targets = self.aliases.get(index, {index})
        for target in targets:
            self.docs.setdefault(target, {})[id] = document
        return FakeResponse({"_index": index, "_id": id, "result": "created"})


class ObservedFakeElasticsearch(FakeElasticsearch):
    """Snapshots aliases at every call (the state left by the previous call) to check what readers could observe"""

    def _record(self, operation, target, **kwargs):
        super()._record(operation, target, **kwargs)
        self._snapshot()


@pytest.fixture
def fake_es():
    return FakeElasticsearch()


@pytest.fixture
def options():
    return ElasticsearchOptions(host="es.test", port=9201, index_concurrency=2)


@pytest.fixture
def gateway(fake_es, options):
    return ClientGateway(options, client_factory=lambda url: fake_es)


@pytest.fixture
def config(options, gateway):
    configuration = ElasticsearchConfiguration(options, gateway=gateway)
    yield configuration
    configuration.close()


@pytest.fixture
def make_config(options):
    """Build a configuration service around a given fake client"""
    created = []

    def _make(es):
        gateway = ClientGateway(options, client_factory=lambda url: es)
        configuration = ElasticsearchConfiguration(options, gateway=gateway)
        created.append(configuration)
        return configuration

    yield _make
    for configuration in created:
        configuration.close()
