import numpy as np
import geopandas as gpd
from loguru import logger
from ...config import engine_config, log_config
from ...enums import MatchingMethod
from ...geometry import GeometryService, geometry_service as default_geometry_service

UNMATCHED = -1


def _probes(indicators_gdf: gpd.GeoDataFrame, matching: MatchingMethod, service: GeometryService) -> gpd.GeoSeries:
    if matching == MatchingMethod.INTERIOR_POINT:
        return service.interior_point(indicators_gdf.geometry)
    return indicators_gdf.geometry


def _predicate(probes: gpd.GeoSeries, target_geometry, matching: MatchingMethod, service: GeometryService) -> np.ndarray:
    if matching == MatchingMethod.INTERIOR_POINT:
        return service.within(probes, target_geometry).to_numpy(dtype=bool)
    ratio = service.bbox_overlap_ratio(probes, target_geometry)
    return (ratio >= engine_config.bbox_overlap_threshold).to_numpy(dtype=bool)


def match_features(
    targets_gdf: gpd.GeoDataFrame,
    indicators_gdf: gpd.GeoDataFrame,
    matching: MatchingMethod = MatchingMethod.INTERIOR_POINT,
    geometry_service: GeometryService | None = None,
) -> np.ndarray:
    """Assign every indicator feature to at most one target feature.

    Targets are visited in order and each one claims the still unclaimed
    indicator features satisfying the matching predicate. Hence a feature
    belongs to the first target it matches, whatever the iteration details.

    Parameters
    ----------
    targets_gdf : geopandas.GeoDataFrame
        Target features. Their order decides ties.
    indicators_gdf : geopandas.GeoDataFrame
        Indicator features in the CRS of *targets_gdf*.
    matching : MatchingMethod, default=MatchingMethod.INTERIOR_POINT
        Containment predicate.
    geometry_service : GeometryService, optional
        Geometric primitives, geopandas based by default.

    Returns
    -------
    numpy.ndarray
        Position of the owning target for every indicator feature, ``-1``
        where no target matched.
    """

    service = geometry_service or default_geometry_service
    probes = _probes(indicators_gdf, matching, service)
    owners = np.full(len(probes), UNMATCHED, dtype=int)
    if len(probes) == 0:
        return owners

    sindex = probes.sindex
    targets = log_config.progress(targets_gdf.geometry, desc="Matching features", total=len(targets_gdf))
    for position, target_geometry in enumerate(targets):
        candidates = np.sort(sindex.query(target_geometry))
        candidates = candidates[owners[candidates] == UNMATCHED]
        if len(candidates) == 0:
            continue
        mask = _predicate(probes.iloc[candidates], target_geometry, matching, service)
        owners[candidates[mask]] = position

    n_matched = int((owners != UNMATCHED).sum())
    logger.info(f"Matched {n_matched} of {len(owners)} indicator features using {matching.value}")
    return owners

