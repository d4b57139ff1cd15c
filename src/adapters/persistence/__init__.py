from .local_stop_catalog_repository import LocalStopCatalogRepository

__all__ = [
    "LocalStopCatalogRepository",
]
