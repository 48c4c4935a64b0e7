"""Storage manifest definition for the backend plugin system."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import BaseModel

from trace_reports.storage.base import StorageAdapter

ConfigT = TypeVar("ConfigT", bound=BaseModel)


@dataclass(frozen=True, kw_only=True)
class StorageManifest(Generic[ConfigT]):
    """Manifest describing a storage backend plugin.

    Holds the backend's configuration class and the factory that opens an
    adapter for a validated configuration.
    """

    config_cls: type[ConfigT]
    adapter_factory: Callable[[ConfigT], AbstractAsyncContextManager[StorageAdapter]]
