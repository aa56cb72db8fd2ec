"""
Indicator stage entry points: computation on target spatial unit features,
aggregation onto coarser features and disaggregation onto finer ones.
"""
import asyncio
from typing import Iterable
import pandas as pd
import geopandas as gpd
from loguru import logger
from .base import BaseIndicator
from .registry import get_indicator
from ..common.values import NO_DATA, DateLike, date_key, set_indicator_values, set_aggregation_weights
from ..enums import MatchingMethod
from ..models import Dataset, Datasets, ProcessParameter
from ..utils.validation import FeatureSchema, IndicatorSchema, ensure_crs

DatasetsLike = Datasets | Iterable[Dataset] | dict[str, gpd.GeoDataFrame] | None
ParametersLike = Iterable[ProcessParameter | dict] | dict | None


def _to_datasets(datasets: DatasetsLike) -> Datasets:
    if isinstance(datasets, Datasets):
        return datasets
    return Datasets(datasets)


def to_indicator(indicator: BaseIndicator | str) -> BaseIndicator:
    if isinstance(indicator, str):
        return get_indicator(indicator)
    return indicator


def _preprocess_input(
    targets_gdf: gpd.GeoDataFrame, base_indicators: DatasetsLike, georesources: DatasetsLike
) -> tuple[gpd.GeoDataFrame, Datasets, Datasets]:
    logger.info("Preprocessing input")
    targets_gdf = IndicatorSchema(targets_gdf)

    def validate_base_indicator(gdf):
        (gdf,) = ensure_crs(targets_gdf, gdf)
        return IndicatorSchema(gdf, allow_empty=True)

    def validate_georesource(gdf):
        (gdf,) = ensure_crs(targets_gdf, gdf)
        return FeatureSchema(gdf, allow_empty=True)

    base_indicators = _to_datasets(base_indicators).map(validate_base_indicator)
    georesources = _to_datasets(georesources).map(validate_georesource)
    return targets_gdf, base_indicators, georesources


def _enforce_output(targets_gdf: gpd.GeoDataFrame, date: DateLike, values: pd.Series, weights: pd.Series):
    extra_ids = values.index.difference(targets_gdf.index)
    if len(extra_ids) > 0:
        raise ValueError(f"Indicator returned values for unknown features: {list(extra_ids[:10])}")
    set_indicator_values(targets_gdf, date, values)
    set_aggregation_weights(targets_gdf, weights)
    n_no_data = int((targets_gdf[date_key(date)] == NO_DATA).sum())
    if n_no_data > 0:
        logger.warning(f"{n_no_data} features have no computable value and are set to NoData")


async def acompute_indicator(
    indicator: BaseIndicator | str,
    date: DateLike,
    targets_gdf: gpd.GeoDataFrame,
    base_indicators: DatasetsLike = None,
    georesources: DatasetsLike = None,
    parameters: ParametersLike = None,
) -> gpd.GeoDataFrame:
    """Compute an indicator for every target spatial unit feature.

    Parameters
    ----------
    indicator : BaseIndicator or str
        Strategy instance or id of a registered strategy.
    date : DateLike
        Target date.
    targets_gdf : geopandas.GeoDataFrame
        Target spatial unit features indexed by feature id. Not modified.
    base_indicators : Datasets or dict, optional
        Base indicator datasets addressed by id or name.
    georesources : Datasets or dict, optional
        Georesource datasets addressed by id or name.
    parameters : list of ProcessParameter or dict, optional
        Process parameters, resolved before any computation.

    Returns
    -------
    geopandas.GeoDataFrame
        Copy of *targets_gdf* carrying the value (or NoData) of *date* and an
        ``aggregation_weight`` on every feature.

    Raises
    ------
    ParameterMissing
        If required process parameters are missing.
    ParameterInvalid
        If a process parameter value cannot be parsed.
    DatasetNotFound
        If a required dataset is not provided.
    """

    indicator = to_indicator(indicator)
    key = date_key(date)
    parameters = indicator.resolve_parameters(parameters)
    targets_gdf, base_indicators, georesources = _preprocess_input(targets_gdf, base_indicators, georesources)

    logger.info(f"Computing {indicator.id or type(indicator).__name__} for {key} on {len(targets_gdf)} features")
    values, weights = await indicator.compute(date, targets_gdf, base_indicators, georesources, parameters)
    _enforce_output(targets_gdf, date, values, weights)
    logger.success(f"Computed {key}")
    return targets_gdf


def compute_indicator(*args, **kwargs) -> gpd.GeoDataFrame:
    """Synchronous :func:`acompute_indicator`. Must not be called from a running event loop."""
    return asyncio.run(acompute_indicator(*args, **kwargs))


def aggregate_indicator(
    indicator: BaseIndicator | str,
    date: DateLike,
    targets_gdf: gpd.GeoDataFrame,
    indicators_gdf: gpd.GeoDataFrame,
    matching: MatchingMethod | str | None = None,
) -> gpd.GeoDataFrame:
    """Aggregate indicator values onto coarser target features using the rule of *indicator*."""
    return to_indicator(indicator).aggregate(date, targets_gdf, indicators_gdf, matching)


def disaggregate_indicator(
    indicator: BaseIndicator | str,
    date: DateLike,
    targets_gdf: gpd.GeoDataFrame,
    indicators_gdf: gpd.GeoDataFrame,
) -> gpd.GeoDataFrame:
    return to_indicator(indicator).disaggregate(date, targets_gdf, indicators_gdf)
