"""Exception hierarchy for Fencedraw."""


class FencedrawError(Exception):
    """Base exception for all Fencedraw errors."""

    pass


class GeometryError(FencedrawError):
    """Errors in geometric data or calculations."""

    pass


class InvalidGeometryError(GeometryError):
    """Geometry data is malformed (wrong nesting, too few coordinates, ...)."""

    def __init__(self, geometry_type: str, reason: str) -> None:
        self.geometry_type = geometry_type
        self.reason = reason
        super().__init__(f"Invalid {geometry_type} geometry: {reason}")


class BoundaryError(FencedrawError):
    """Errors related to the drawing boundary."""

    pass


class BoundaryLoadError(BoundaryError):
    """Error loading a boundary polygon."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load boundary '{source}': {reason}")


class FeatureError(FencedrawError):
    """Errors related to drawn features."""

    pass


class FeatureLoadError(FeatureError):
    """Error loading a feature collection."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to load features '{source}': {reason}")


class UnsupportedGeometryError(FeatureError):
    """Geometry type is not handled by the requested operation."""

    def __init__(self, geometry_type: str) -> None:
        self.geometry_type = geometry_type
        super().__init__(f"Unsupported geometry type '{geometry_type}'")
