"""Python client for the Open Science Framework (OSF) JSON:API."""

from osfapi.client import OSFClient
from osfapi.codec import CollectionResult, EnvelopeCodec, SingleResult
from osfapi.config import Settings, get_settings
from osfapi.errors import (
    CancelledError,
    DecodeError,
    OSFError,
    ServiceError,
    TransportError,
    WorkflowStageError,
)
from osfapi.schemas.file import File, FileLinks
from osfapi.schemas.pagination import ListOptions, PaginationMeta
from osfapi.schemas.preprint import LinkAvailability, Preprint, PreprintRequest
from osfapi.schemas.provider import PreprintProvider, ProviderSubject
from osfapi.services.creation import CreationResult, CreationStage, CreationState
from osfapi.transport import Cancellation, HTTPXTransport, TransportAdapter

__all__ = [
    "Cancellation",
    "CancelledError",
    "CollectionResult",
    "CreationResult",
    "CreationStage",
    "CreationState",
    "DecodeError",
    "EnvelopeCodec",
    "File",
    "FileLinks",
    "HTTPXTransport",
    "LinkAvailability",
    "ListOptions",
    "OSFClient",
    "OSFError",
    "PaginationMeta",
    "Preprint",
    "PreprintProvider",
    "PreprintRequest",
    "ProviderSubject",
    "ServiceError",
    "Settings",
    "SingleResult",
    "TransportAdapter",
    "TransportError",
    "WorkflowStageError",
    "get_settings",
]
