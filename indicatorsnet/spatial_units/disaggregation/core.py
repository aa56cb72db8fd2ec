import geopandas as gpd
from ...common.errors import NotSupported
from ...common.values import DateLike


def disaggregate(date: DateLike, targets_gdf: gpd.GeoDataFrame, indicators_gdf: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Distribute indicator values of coarser features onto finer target features.

    Raises
    ------
    NotSupported
        Always. Disaggregation is part of the indicator contract but no rule is available.
    """

    raise NotSupported("Disaggregation of indicator values is not supported")
