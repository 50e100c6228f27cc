"""
External collaborator contracts and built-in adapters.

- interfaces: ClassificationService, PersistenceService and their errors
- classification: Response parsing and a text-transport classifier
- render: RenderAdapter and the recording / JSON-lines backends
"""

from .interfaces import (
    Classification,
    ClassificationError,
    ClassificationService,
    PersistenceError,
    PersistenceService,
    InMemoryPersistence,
)
from .classification import (
    parse_classification,
    strip_code_fence,
    validate_classification,
    ResponseClassifier,
    keyword_transport,
)
from .render import RenderAdapter, RecordingRenderAdapter, JsonLinesRenderAdapter

__all__ = [
    'Classification',
    'ClassificationError',
    'ClassificationService',
    'PersistenceError',
    'PersistenceService',
    'InMemoryPersistence',
    'parse_classification',
    'strip_code_fence',
    'validate_classification',
    'ResponseClassifier',
    'keyword_transport',
    'RenderAdapter',
    'RecordingRenderAdapter',
    'JsonLinesRenderAdapter',
]
