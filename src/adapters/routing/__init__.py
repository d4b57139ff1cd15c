from .osrm_http_routing_provider import OsrmHttpRoutingProvider, parse_routing_response

__all__ = [
    "OsrmHttpRoutingProvider",
    "parse_routing_response",
]
