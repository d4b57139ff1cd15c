from .routing import InvalidStopError, NoRouteFound, RoutingError, RoutingServiceError

__all__ = [
    "InvalidStopError",
    "NoRouteFound",
    "RoutingError",
    "RoutingServiceError",
]
