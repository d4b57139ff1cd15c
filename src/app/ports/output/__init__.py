from .maneuver_text_compiler import IManeuverTextCompiler
from .routing_provider import IRoutingProvider
from .stop_catalog_repository import IStopCatalogRepository

__all__ = [
    "IManeuverTextCompiler",
    "IRoutingProvider",
    "IStopCatalogRepository",
]
