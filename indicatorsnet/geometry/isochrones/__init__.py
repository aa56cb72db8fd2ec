from .base import IsochroneService, LOCATION_INDEX_COLUMN
from .buffer import BufferIsochrones
from .openrouteservice import OpenRouteServiceIsochrones
from .batching import calculate_isochrones, SOURCE_INDEX_COLUMN
