import asyncio
import geopandas as gpd
from loguru import logger
from ..common.values import DateLike, date_key
from ..enums import MatchingMethod
from ..indicators.base import BaseIndicator
from ..indicators.compute import acompute_indicator, DatasetsLike, ParametersLike, to_indicator


async def acompute_levels(
    indicator: BaseIndicator | str,
    date: DateLike,
    levels: dict[str, gpd.GeoDataFrame],
    base_indicators: DatasetsLike = None,
    georesources: DatasetsLike = None,
    parameters: ParametersLike = None,
    matching: MatchingMethod | str | None = None,
) -> dict[str, gpd.GeoDataFrame]:
    """Compute an indicator on the finest spatial unit and aggregate it onto every coarser one.

    Parameters
    ----------
    indicator : BaseIndicator or str
        Strategy instance or id of a registered strategy.
    date : DateLike
        Target date.
    levels : dict of str to geopandas.GeoDataFrame
        Spatial unit features by level name, ordered from the finest to the
        coarsest level.
    base_indicators, georesources : Datasets or dict, optional
        Inputs of the computation on the finest level.
    parameters : list of ProcessParameter or dict, optional
        Process parameters.
    matching : MatchingMethod or str, optional
        Matching method of aggregations, the indicator default otherwise.

    Returns
    -------
    dict of str to geopandas.GeoDataFrame
        Features of every level carrying the value of *date*.

    Raises
    ------
    AggregationIncomplete
        If features of a level are not contained in the next coarser level.
    """

    if len(levels) == 0:
        raise ValueError("At least one spatial unit level must be provided")
    indicator = to_indicator(indicator)
    names = list(levels.keys())

    logger.info(f"Computing {date_key(date)} on {names[0]}")
    results = {
        names[0]: await acompute_indicator(
            indicator, date, levels[names[0]], base_indicators, georesources, parameters
        )
    }
    for finer, coarser in zip(names[:-1], names[1:]):
        logger.info(f"Aggregating {finer} onto {coarser}")
        results[coarser] = indicator.aggregate(date, levels[coarser], results[finer], matching)
    logger.success(f"Indicator is available on {len(results)} levels")
    return results


def compute_levels(*args, **kwargs) -> dict[str, gpd.GeoDataFrame]:
    """Synchronous :func:`acompute_levels`."""
    return asyncio.run(acompute_levels(*args, **kwargs))
