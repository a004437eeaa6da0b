"""Web Mercator pixel projection.

Snapping compares distances on screen, so it needs a function mapping
geographic positions to pixels. A host map view normally supplies its own;
WebMercatorProjector reproduces the projection slippy maps use, for
headless callers such as the CLI and the tests.
"""

import math

from pyproj import Transformer

from fencedraw.config.settings import DEFAULT_TILE_SIZE
from fencedraw.domain import Position

# Half the circumference of the Web Mercator world, in metres.
_HALF_WORLD_M = math.pi * 6378137.0


class WebMercatorProjector:
    """Projects (longitude, latitude) to pixels at a given zoom level.

    Pixel (0, 0) is the north-west corner of the world; x grows east and y
    grows south, as on screen.

    Example:
        projector = WebMercatorProjector(zoom=12)
        x, y = projector((-61.7, 16.1))
    """

    def __init__(self, zoom: float, tile_size: int = DEFAULT_TILE_SIZE) -> None:
        self.zoom = zoom
        self.tile_size = tile_size
        self._world_px = tile_size * (2.0 ** zoom)
        self._transformer = Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)

    def __call__(self, position: Position) -> tuple[float, float]:
        x_m, y_m = self._transformer.transform(position[0], position[1])
        x = (x_m + _HALF_WORLD_M) / (2 * _HALF_WORLD_M) * self._world_px
        y = (_HALF_WORLD_M - y_m) / (2 * _HALF_WORLD_M) * self._world_px
        return (x, y)

    def pixels_per_degree_longitude(self) -> float:
        """Horizontal pixels covered by one degree of longitude."""
        return self._world_px / 360.0
