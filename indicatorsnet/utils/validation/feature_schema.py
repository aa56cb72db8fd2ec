import numpy as np
import pandas as pd
import geopandas as gpd
import shapely
from loguru import logger
from pandera import Field
from pandera.typing import Series
from .gdf_schema import GdfSchema
from ...common.values import (
    NO_DATA,
    AGGREGATION_WEIGHT_COLUMN,
    date_columns,
    is_no_data,
    to_feature_id,
    to_numeric_values,
)


class FeatureSchema(GdfSchema):
    """Features of a spatial unit or georesource indexed by canonical feature id."""

    @classmethod
    def _before_validate(cls, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        gdf.index = gdf.index.map(to_feature_id)
        return gdf

    @classmethod
    def _geometry_types(cls):
        return {
            shapely.Point,
            shapely.MultiPoint,
            shapely.LineString,
            shapely.MultiLineString,
            shapely.Polygon,
            shapely.MultiPolygon,
        }


class IndicatorSchema(FeatureSchema):
    """Spatial unit features carrying indicator values per date and an aggregation weight.

    Date columns keep numbers and the NoData sentinel. Any other content is
    reported and treated as an absent value.
    """

    aggregation_weight: Series[float] = Field(ge=0, nullable=True)

    @classmethod
    def _before_validate(cls, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        gdf = super()._before_validate(gdf)
        if AGGREGATION_WEIGHT_COLUMN not in gdf.columns:
            gdf[AGGREGATION_WEIGHT_COLUMN] = np.nan
        return gdf

    @classmethod
    def _normalize_values(cls, series: pd.Series) -> pd.Series:
        no_data = series.map(is_no_data)
        values = to_numeric_values(series)
        invalid = series.notna() & values.isna() & ~no_data
        if invalid.any():
            ids = list(series.index[invalid])
            logger.warning(f"{invalid.sum()} invalid values at {series.name} are treated as missing: {ids[:5]}")
        values = values.astype(object)
        values[no_data] = NO_DATA
        return values

    @classmethod
    def _after_validate(cls, gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
        for column in date_columns(gdf):
            gdf[column] = cls._normalize_values(gdf[column])
        return gdf
