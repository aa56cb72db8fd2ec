import pandas as pd
import geopandas as gpd
from loguru import logger
from .matching import match_features, UNMATCHED
from ...common.errors import AggregationIncomplete
from ...common.values import DateLike, date_key, get_indicator_values, get_aggregation_weights, set_indicator_values
from ...enums import AggregationType, MatchingMethod
from ...geometry import GeometryService
from ...utils.validation import IndicatorSchema, ensure_crs

OWNER_COLUMN = "owner"
VALUE_COLUMN = "value"
WEIGHT_COLUMN = "weight"


def _preprocess_input(targets_gdf: gpd.GeoDataFrame, indicators_gdf: gpd.GeoDataFrame):
    logger.info("Preprocessing input")
    targets_gdf = IndicatorSchema(targets_gdf)
    indicators_gdf = IndicatorSchema(indicators_gdf, allow_empty=True)
    (indicators_gdf,) = ensure_crs(targets_gdf, indicators_gdf)
    return targets_gdf, indicators_gdf


def _sum(df: pd.DataFrame, n_targets: int) -> pd.Series:
    result = pd.Series(0.0, index=range(n_targets))
    sums = df.groupby(OWNER_COLUMN)[VALUE_COLUMN].sum(min_count=1)
    result.loc[sums.index] = sums
    return result


def _average(df: pd.DataFrame, n_targets: int) -> pd.Series:
    df = df[df[VALUE_COLUMN].notna()]
    df = df.assign(**{VALUE_COLUMN: df[VALUE_COLUMN] * df[WEIGHT_COLUMN]})
    grouped = df.groupby(OWNER_COLUMN)[[VALUE_COLUMN, WEIGHT_COLUMN]].sum()
    averages = grouped[VALUE_COLUMN] / grouped[WEIGHT_COLUMN].where(grouped[WEIGHT_COLUMN] > 0)
    return averages.reindex(range(n_targets))


def aggregate(
    date: DateLike,
    targets_gdf: gpd.GeoDataFrame,
    indicators_gdf: gpd.GeoDataFrame,
    aggregation_type: AggregationType | str = AggregationType.AVERAGE,
    matching: MatchingMethod | str = MatchingMethod.INTERIOR_POINT,
    geometry_service: GeometryService | None = None,
) -> gpd.GeoDataFrame:
    """Aggregate indicator values of finer spatial unit features onto coarser target features.

    Parameters
    ----------
    date : DateLike
        Target date.
    targets_gdf : geopandas.GeoDataFrame
        Coarser spatial unit features indexed by id.
    indicators_gdf : geopandas.GeoDataFrame
        Finer spatial unit features carrying the indicator value of *date*
        and optionally ``aggregation_weight``.
    aggregation_type : AggregationType or str, default=AggregationType.AVERAGE
        ``SUM`` totals matched values, ``AVERAGE`` weights them by
        ``aggregation_weight``. Unknown values fall back to ``AVERAGE``.
    matching : MatchingMethod or str, default=MatchingMethod.INTERIOR_POINT
        Predicate deciding which target contains an indicator feature.
    geometry_service : GeometryService, optional
        Geometric primitives, geopandas based by default.

    Returns
    -------
    geopandas.GeoDataFrame
        Copy of *targets_gdf* with the date column set. Targets without a
        computable value carry NoData, SUM targets without matches carry 0.
        Existing target aggregation weights are kept.

    Raises
    ------
    AggregationIncomplete
        If any indicator feature is not contained in a target feature.
    """

    aggregation_type = AggregationType.parse(aggregation_type)
    matching = MatchingMethod(matching)
    targets_gdf, indicators_gdf = _preprocess_input(targets_gdf, indicators_gdf)

    logger.info(f"Aggregating {len(indicators_gdf)} features onto {len(targets_gdf)} targets for {date_key(date)}")
    owners = match_features(targets_gdf, indicators_gdf, matching, geometry_service)
    unmatched = owners == UNMATCHED
    if unmatched.any():
        ids = list(indicators_gdf.index[unmatched])
        logger.error(f"{len(ids)} indicator features are not contained in any target feature")
        raise AggregationIncomplete(ids)

    df = pd.DataFrame(
        {
            OWNER_COLUMN: owners,
            VALUE_COLUMN: get_indicator_values(indicators_gdf, date).to_numpy(),
            WEIGHT_COLUMN: get_aggregation_weights(indicators_gdf).to_numpy(),
        }
    )
    if aggregation_type == AggregationType.SUM:
        values = _sum(df, len(targets_gdf))
    else:
        values = _average(df, len(targets_gdf))

    targets_gdf = set_indicator_values(targets_gdf, date, values.to_numpy())
    n_no_data = int(values.isna().sum())
    if n_no_data > 0:
        logger.warning(f"{n_no_data} target features have no computable value")
    logger.success(f"Aggregated values with {aggregation_type.value}")
    return targets_gdf
