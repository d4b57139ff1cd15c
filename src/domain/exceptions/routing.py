class RoutingError(Exception):
    """Base exception for route calculation failures."""


class RoutingServiceError(RoutingError):
    """Raised when the external routing service fails or cannot be reached."""


class NoRouteFound(RoutingError):
    """Raised when the routing service answers without any candidate route."""


class InvalidStopError(ValueError):
    """Raised when a new stop payload is malformed."""
