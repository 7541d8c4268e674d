"""sheetcrm - Async client for an artist-outreach roster kept in a spreadsheet."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("sheetcrm")
except PackageNotFoundError:
    __version__ = "0+local"
from sheetcrm._api._common import Mutation, ScriptOp, SheetView
from sheetcrm.blobs import BlobStore, FileBlobStore, MemoryBlobStore
from sheetcrm.config import RetryPolicy, SyncConfig, load_config, save_config, validate_endpoint_url
from sheetcrm.exceptions import (
    AuthMisconfiguredError,
    ConfigError,
    EndpointNotFoundError,
    HtmlResponseError,
    MalformedResponseError,
    NetworkUnreachableError,
    RemoteLogicError,
    ServerBusyError,
    SheetCrmError,
    StorageError,
    TransportError,
)
from sheetcrm.models import (
    Artist,
    ArtType,
    DashboardStats,
    LifecycleStage,
    MetricCount,
    Persona,
    PlatformProfile,
    Touchpoint,
    TouchpointType,
)
from sheetcrm.session import Credential
from sheetcrm.store import ArtistStore

__all__ = [
    "__version__",
    "ArtType",
    "Artist",
    "ArtistStore",
    "AuthMisconfiguredError",
    "BlobStore",
    "ConfigError",
    "Credential",
    "DashboardStats",
    "EndpointNotFoundError",
    "FileBlobStore",
    "HtmlResponseError",
    "LifecycleStage",
    "MalformedResponseError",
    "MemoryBlobStore",
    "MetricCount",
    "Mutation",
    "NetworkUnreachableError",
    "Persona",
    "PlatformProfile",
    "RemoteLogicError",
    "RetryPolicy",
    "ScriptOp",
    "ServerBusyError",
    "SheetCrmError",
    "SheetView",
    "StorageError",
    "SyncConfig",
    "Touchpoint",
    "TouchpointType",
    "TransportError",
    "load_config",
    "save_config",
    "validate_endpoint_url",
]
