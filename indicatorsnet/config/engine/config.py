import os
import re

DEFAULT_DATE_PREFIX = "DATE_"
DEFAULT_BBOX_OVERLAP_THRESHOLD = 0.9
DEFAULT_ISOCHRONE_BATCH_SIZE = 200
DEFAULT_ISOCHRONE_RETRIES = 3
DEFAULT_ISOCHRONE_BACKOFF = 1.0

OPEN_ROUTE_SERVICE_URL_ENV = "OPEN_ROUTE_SERVICE_URL"
OPEN_ROUTE_SERVICE_API_KEY_ENV = "OPEN_ROUTE_SERVICE_API_KEY"

DATE_PREFIX_REGEX = r"^[A-Za-z_]+$"


class EngineConfig:
    """Deployment-wide settings of the indicator engine.

    Parameters
    ----------
    date_prefix : str, default="DATE_"
        Prefix of the property carrying an indicator value for a date,
        e.g. ``DATE_2018-01-01``.
    bbox_overlap_threshold : float, default=0.9
        Minimal share of an indicator feature bounding box that must overlap
        the target bounding box to count as contained.
    isochrone_batch_size : int, default=200
        Maximal number of locations sent to the isochrone service per call.
    isochrone_retries : int, default=3
        Number of attempts per isochrone batch.
    isochrone_backoff : float, default=1.0
        Base delay in seconds between isochrone attempts, doubled each retry.
    openrouteservice_url : str, optional
        Base URL of an openrouteservice instance. Read from
        ``OPEN_ROUTE_SERVICE_URL`` when not provided.
    openrouteservice_api_key : str, optional
        API key of the openrouteservice instance. Read from
        ``OPEN_ROUTE_SERVICE_API_KEY`` when not provided.
    """

    def __init__(
        self,
        date_prefix: str = DEFAULT_DATE_PREFIX,
        bbox_overlap_threshold: float = DEFAULT_BBOX_OVERLAP_THRESHOLD,
        isochrone_batch_size: int = DEFAULT_ISOCHRONE_BATCH_SIZE,
        isochrone_retries: int = DEFAULT_ISOCHRONE_RETRIES,
        isochrone_backoff: float = DEFAULT_ISOCHRONE_BACKOFF,
        openrouteservice_url: str | None = None,
        openrouteservice_api_key: str | None = None,
    ):
        self.set_date_prefix(date_prefix)
        self.set_bbox_overlap_threshold(bbox_overlap_threshold)
        self.set_isochrone_batch_size(isochrone_batch_size)
        self.set_isochrone_retries(isochrone_retries, isochrone_backoff)
        self.openrouteservice_url = openrouteservice_url or os.environ.get(OPEN_ROUTE_SERVICE_URL_ENV)
        self.openrouteservice_api_key = openrouteservice_api_key or os.environ.get(OPEN_ROUTE_SERVICE_API_KEY_ENV)

    def set_date_prefix(self, prefix: str):
        """Set the prefix used to build date keys.

        Raises
        ------
        ValueError
            If *prefix* contains anything but letters and underscores.
        """

        if not re.match(DATE_PREFIX_REGEX, prefix):
            raise ValueError(f"Date prefix must match {DATE_PREFIX_REGEX}, got {prefix!r}")
        self.date_prefix = prefix

    def set_bbox_overlap_threshold(self, threshold: float):
        if not 0 < threshold <= 1:
            raise ValueError("Bounding box overlap threshold must be in (0, 1]")
        self.bbox_overlap_threshold = float(threshold)

    def set_isochrone_batch_size(self, batch_size: int):
        if batch_size < 1:
            raise ValueError("Isochrone batch size must be greater than 0")
        self.isochrone_batch_size = int(batch_size)

    def set_isochrone_retries(self, retries: int, backoff: float | None = None):
        """Configure the retry policy around isochrone service calls.

        Parameters
        ----------
        retries : int
            Number of attempts per batch, at least 1.
        backoff : float, optional
            Base delay in seconds. Keeps the current value if omitted.
        """

        if retries < 1:
            raise ValueError("Isochrone retries must be greater than 0")
        self.isochrone_retries = int(retries)
        if backoff is not None:
            if backoff < 0:
                raise ValueError("Isochrone backoff must be non-negative")
            self.isochrone_backoff = float(backoff)

    def set_openrouteservice(self, url: str, api_key: str | None = None):
        self.openrouteservice_url = url
        self.openrouteservice_api_key = api_key


engine_config = EngineConfig()
