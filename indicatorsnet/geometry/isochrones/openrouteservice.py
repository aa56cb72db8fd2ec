import httpx
import geopandas as gpd
from loguru import logger
from shapely.geometry import shape
from .base import IsochroneService, LOCATION_INDEX_COLUMN
from ...common.errors import CollaboratorFailure
from ...config import engine_config
from ...enums import TravelProfile

ORS_CRS = 4326
ORS_MAX_LOCATIONS = 200
DEFAULT_TIMEOUT = 60.0


class OpenRouteServiceIsochrones(IsochroneService):
    """Isochrones by distance from an openrouteservice instance.

    Parameters
    ----------
    url : str, optional
        Base URL of the instance. Defaults to ``engine_config.openrouteservice_url``.
    api_key : str, optional
        API key sent in the ``Authorization`` header. Defaults to
        ``engine_config.openrouteservice_api_key``.
    timeout : float, default=60.0
        Request timeout in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Custom transport of the HTTP client. A client is opened for every
        request and closes the transport when done, so the transport must be
        reusable after closing, as ``httpx.MockTransport`` is.
    """

    max_locations = ORS_MAX_LOCATIONS

    def __init__(
        self,
        url: str | None = None,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        url = url or engine_config.openrouteservice_url
        if url is None:
            raise ValueError("openrouteservice URL must be provided or configured")
        self.url = url.rstrip("/")
        self.api_key = api_key or engine_config.openrouteservice_api_key
        self.timeout = timeout
        self.transport = transport

    def _create_client(self) -> httpx.AsyncClient:
        headers = {"Accept": "application/geo+json"}
        if self.api_key is not None:
            headers["Authorization"] = self.api_key
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout), headers=headers, transport=self.transport)

    @staticmethod
    def _request_body(points: gpd.GeoSeries, distance: float) -> dict:
        locations = [[point.x, point.y] for point in points.to_crs(ORS_CRS)]
        return {
            "locations": locations,
            "range": [float(distance)],
            "range_type": "distance",
            "units": "m",
            "smoothing": 0,
        }

    @staticmethod
    def _parse_response(data: dict) -> gpd.GeoDataFrame:
        try:
            features = data["features"]
            records = [
                {LOCATION_INDEX_COLUMN: int(f["properties"]["group_index"]), "geometry": shape(f["geometry"])}
                for f in features
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise CollaboratorFailure(f"Malformed openrouteservice response: {e}") from e
        return gpd.GeoDataFrame(records, columns=[LOCATION_INDEX_COLUMN, "geometry"], geometry="geometry", crs=ORS_CRS)

    async def isochrones(self, points: gpd.GeoSeries, profile: TravelProfile, distance: float) -> gpd.GeoDataFrame:
        """Request isochrones for at most ``max_locations`` points.

        Raises
        ------
        CollaboratorFailure
            If the request fails, the service answers with an error status or
            the response cannot be parsed.
        """

        if len(points) > self.max_locations:
            raise ValueError(f"At most {self.max_locations} locations are allowed per request")
        url = f"{self.url}/v2/isochrones/{profile.ors_profile}"
        logger.info(f"Requesting {len(points)} {profile.value.lower()} isochrones of {distance} m")
        try:
            async with self._create_client() as client:
                response = await client.post(url, json=self._request_body(points, distance))
        except httpx.TimeoutException as e:
            raise CollaboratorFailure(f"openrouteservice timeout after {self.timeout}s") from e
        except httpx.RequestError as e:
            raise CollaboratorFailure(f"openrouteservice request failed: {e}") from e
        if response.status_code != 200:
            raise CollaboratorFailure(f"openrouteservice returned {response.status_code}: {response.text[:200]}")
        try:
            data = response.json()
        except ValueError as e:
            raise CollaboratorFailure("openrouteservice response is not JSON") from e
        return self._parse_response(data)
