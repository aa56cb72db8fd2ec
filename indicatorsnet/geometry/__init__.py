from .service import GeometryService, GeoPandasGeometryService, geometry_service
from .isochrones import (
    IsochroneService,
    BufferIsochrones,
    OpenRouteServiceIsochrones,
    calculate_isochrones,
    LOCATION_INDEX_COLUMN,
    SOURCE_INDEX_COLUMN,
)
