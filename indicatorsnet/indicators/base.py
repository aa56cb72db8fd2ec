from abc import ABC
from typing import Callable
import numpy as np
import pandas as pd
import geopandas as gpd
from loguru import logger
from ..common.errors import LocalComputeGap
from ..common.values import DateLike
from ..config import log_config
from ..enums import AggregationType, MatchingMethod
from ..geometry import GeometryService, IsochroneService, geometry_service as default_geometry_service
from ..models import BaseParameters, EmptyParameters, Datasets, ProcessParameter
from ..spatial_units import aggregate, disaggregate

IndicatorResult = tuple[pd.Series, pd.Series]


def calculate_per_feature(df: pd.DataFrame, func: Callable[[pd.Series], float]) -> pd.Series:
    """Apply *func* to every row, turning a ``LocalComputeGap`` into a NaN value.

    Parameters
    ----------
    df : pandas.DataFrame
        Inputs of every feature, indexed by feature id.
    func : callable
        Receives a row and returns the feature value or raises ``LocalComputeGap``.

    Returns
    -------
    pandas.Series
        Values indexed like *df*.
    """

    def _calculate(row: pd.Series) -> float:
        try:
            return func(row)
        except LocalComputeGap as e:
            logger.debug(str(e))
            return np.nan

    if len(df) == 0:
        return pd.Series(dtype=float, index=df.index)
    if log_config.disable_tqdm:
        return df.apply(_calculate, axis=1).astype(float)
    return df.progress_apply(_calculate, axis=1).astype(float)


class BaseIndicator(ABC):
    """Computation strategy of an indicator.

    Every indicator computes values for target spatial unit features and
    knows how its values combine onto coarser spatial units. Synchronous
    indicators override :meth:`calculate`, indicators awaiting collaborators
    override :meth:`compute`.

    Parameters
    ----------
    geometry_service : GeometryService, optional
        Geometric primitives, geopandas based by default.
    isochrone_service : IsochroneService, optional
        Isochrone provider for indicators relying on travel distances.
    """

    id: str | None = None
    """Id the indicator is registered with."""
    parameters_schema: type[BaseParameters] = EmptyParameters
    """Typed process parameters of the indicator."""
    aggregation_type: AggregationType = AggregationType.AVERAGE
    matching_method: MatchingMethod = MatchingMethod.INTERIOR_POINT

    def __init__(
        self, geometry_service: GeometryService | None = None, isochrone_service: IsochroneService | None = None
    ):
        self.geometry_service = geometry_service or default_geometry_service
        self.isochrone_service = isochrone_service

    def resolve_parameters(self, parameters: list[ProcessParameter] | dict | None) -> BaseParameters:
        return self.parameters_schema.from_process_parameters(parameters)

    def feature_areas(self, targets_gdf: gpd.GeoDataFrame) -> pd.Series:
        return self.geometry_service.area(targets_gdf.geometry)

    def calculate(
        self,
        date: DateLike,
        targets_gdf: gpd.GeoDataFrame,
        base_indicators: Datasets,
        georesources: Datasets,
        parameters: BaseParameters,
    ) -> IndicatorResult:
        """Values and aggregation weights of every target feature.

        Returns
        -------
        tuple of pandas.Series
            Values and weights indexed by target feature id. NaN values are
            stored as NoData.
        """

        raise NotImplementedError(f"{type(self).__name__} overrides compute only")

    async def compute(
        self,
        date: DateLike,
        targets_gdf: gpd.GeoDataFrame,
        base_indicators: Datasets,
        georesources: Datasets,
        parameters: BaseParameters,
    ) -> IndicatorResult:
        return self.calculate(date, targets_gdf, base_indicators, georesources, parameters)

    def aggregate(
        self,
        date: DateLike,
        targets_gdf: gpd.GeoDataFrame,
        indicators_gdf: gpd.GeoDataFrame,
        matching: MatchingMethod | str | None = None,
    ) -> gpd.GeoDataFrame:
        return aggregate(
            date,
            targets_gdf,
            indicators_gdf,
            self.aggregation_type,
            matching or self.matching_method,
            self.geometry_service,
        )

    def disaggregate(
        self, date: DateLike, targets_gdf: gpd.GeoDataFrame, indicators_gdf: gpd.GeoDataFrame
    ) -> gpd.GeoDataFrame:
        return disaggregate(date, targets_gdf, indicators_gdf)
