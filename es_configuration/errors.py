"""
Exception types raised by index, alias and workflow operations
"""

from typing import Any, List, Optional


class ElasticsearchConfigurationError(Exception):
    """Base class for all errors raised by this package"""


class ClientConnectionError(ElasticsearchConfigurationError, ConnectionError):
    """Elasticsearch could not be reached; the client handle was discarded"""

    def __init__(self, url: str, cause: Optional[BaseException] = None):
        self.url = url
        self.cause = cause
        message = f"Cannot connect to Elasticsearch at {url}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigurationNotFoundError(ElasticsearchConfigurationError, LookupError):
    """No mapping configuration exists for an index type"""

    def __init__(self, type: str, version: str):
        self.type = type
        self.version = version
        super().__init__(
            f'No "{type}" mapping configuration found for Elasticsearch version {version}'
        )


class RemoteOperationError(ElasticsearchConfigurationError):
    """
    Elasticsearch rejected an operation.

    ``info`` carries the error payload returned by the engine.
    """

    def __init__(self, operation: str, target: str, status: Optional[int] = None, info: Any = None):
        self.operation = operation
        self.target = target
        self.status = status
        self.info = info
        super().__init__(
            f"Elasticsearch {operation} failed for '{target}' (status={status}): {info}"
        )


class WorkflowError(ElasticsearchConfigurationError):
    """
    A multi-step workflow stopped at a failing step.

    Steps completed before the failure are not rolled back; the original
    error is available as ``__cause__``.
    """

    def __init__(self, workflow: str, alias: str, step: str, completed_steps: List[str]):
        self.workflow = workflow
        self.alias = alias
        self.step = step
        self.completed_steps = list(completed_steps)
        super().__init__(
            f"{workflow} of alias '{alias}' failed at step '{step}' "
            f"after {len(self.completed_steps)} completed step(s)"
        )


class DocumentIdError(ElasticsearchConfigurationError, ValueError):
    """A document has no identifier to index it under"""
