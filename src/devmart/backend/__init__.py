"""Adapters for the backend subsystems (auth, storage, functions)."""

from .backend_base import AuthBackend, AuthUser, FunctionsBackend, StorageBackend
from .functions_client import HttpFunctionsClient
from .storage_backend import LocalStorageBackend

__all__ = [
    "AuthBackend",
    "AuthUser",
    "FunctionsBackend",
    "HttpFunctionsClient",
    "LocalStorageBackend",
    "StorageBackend",
]
