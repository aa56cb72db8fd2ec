import asyncio
import pandas as pd
import geopandas as gpd
from loguru import logger
from .base import IsochroneService, LOCATION_INDEX_COLUMN
from ...common.errors import CollaboratorFailure
from ...config import engine_config, log_config
from ...enums import TravelProfile

SOURCE_INDEX_COLUMN = "source_index"


async def _request_batch(
    service: IsochroneService,
    points: gpd.GeoSeries,
    profile: TravelProfile,
    distance: float,
    retries: int,
    backoff: float,
) -> gpd.GeoDataFrame:
    for attempt in range(retries):
        try:
            return await service.isochrones(points, profile, distance)
        except CollaboratorFailure as e:
            if attempt + 1 == retries:
                logger.error(f"Isochrone request failed after {retries} attempts: {e}")
                raise
            delay = backoff * 2**attempt
            logger.warning(f"Isochrone request failed (attempt {attempt + 1}/{retries}): {e}. Retrying in {delay}s")
            await asyncio.sleep(delay)


def _attach_to_points(isochrones: gpd.GeoDataFrame, points: gpd.GeoSeries) -> gpd.GeoDataFrame:
    if LOCATION_INDEX_COLUMN not in isochrones.columns:
        raise CollaboratorFailure(f"Isochrones must carry the {LOCATION_INDEX_COLUMN} column")
    positions = isochrones[LOCATION_INDEX_COLUMN].astype(int)
    if ((positions < 0) | (positions >= len(points))).any():
        raise CollaboratorFailure("Isochrone location index is out of the requested batch")
    if isochrones.crs is not None and points.crs is not None:
        isochrones = isochrones.to_crs(points.crs)
    isochrones = isochrones.assign(**{SOURCE_INDEX_COLUMN: points.index[positions.to_numpy()]})
    isochrones = isochrones.iloc[positions.argsort(kind="stable")]
    return isochrones[[SOURCE_INDEX_COLUMN, "geometry"]]


async def calculate_isochrones(
    points: gpd.GeoSeries,
    service: IsochroneService,
    profile: TravelProfile = TravelProfile.PEDESTRIAN,
    distance: float = 500,
    batch_size: int | None = None,
) -> gpd.GeoDataFrame:
    """Isochrones of many points, requested in batches.

    Batches are sent one after another. A failing batch is retried with
    exponential backoff according to ``engine_config``.

    Parameters
    ----------
    points : geopandas.GeoSeries
        Start locations with a CRS.
    service : IsochroneService
        Isochrone provider.
    profile : TravelProfile, default=TravelProfile.PEDESTRIAN
        Travel mode.
    distance : float, default=500
        Maximal travel distance in metres.
    batch_size : int, optional
        Locations per request. Defaults to ``engine_config.isochrone_batch_size``
        and never exceeds the limit of *service*.

    Returns
    -------
    geopandas.GeoDataFrame
        Isochrones in the CRS of *points* in the order of *points*, with
        ``source_index`` holding the index label of the originating point.

    Raises
    ------
    CollaboratorFailure
        If a batch keeps failing after all retries.
    """

    batch_size = batch_size or engine_config.isochrone_batch_size
    if service.max_locations is not None:
        batch_size = min(batch_size, service.max_locations)
    if batch_size < 1:
        raise ValueError("Batch size must be greater than 0")

    starts = range(0, len(points), batch_size)
    logger.info(f"Calculating isochrones for {len(points)} points in {len(starts)} batches")
    results = []
    for start in log_config.progress(starts, desc="Isochrone batches"):
        batch = points.iloc[start : start + batch_size]
        isochrones = await _request_batch(
            service, batch, profile, distance, engine_config.isochrone_retries, engine_config.isochrone_backoff
        )
        results.append(_attach_to_points(isochrones, batch))

    if len(results) == 0:
        return gpd.GeoDataFrame({SOURCE_INDEX_COLUMN: []}, geometry=gpd.GeoSeries([], crs=points.crs), crs=points.crs)
    isochrones = gpd.GeoDataFrame(pd.concat(results, ignore_index=True), geometry="geometry", crs=points.crs)
    n_missing = len(points) - isochrones[SOURCE_INDEX_COLUMN].nunique()
    if n_missing > 0:
        logger.warning(f"{n_missing} points did not receive an isochrone")
    return isochrones
