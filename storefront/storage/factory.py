# storefront/storage/factory.py
from storefront.core.config import Settings
from storefront.database import build_engine
from storefront.storage.base import StorageBackend
from storefront.storage.database import DatabaseBackend
from storefront.storage.memory import MemoryBackend


def build_backend(settings: Settings) -> StorageBackend:
    """
    Select the storage implementation configured by STORAGE_BACKEND.
    """
    if settings.STORAGE_BACKEND == "memory":
        return MemoryBackend()
    return DatabaseBackend(build_engine(settings))
