import geopandas as gpd
from loguru import logger


def ensure_crs(gdf: gpd.GeoDataFrame, *args: gpd.GeoDataFrame) -> list[gpd.GeoDataFrame]:
    """Bring GeoDataFrames to the CRS of the first argument.

    Parameters
    ----------
    gdf : geopandas.GeoDataFrame
        Reference GeoDataFrame providing the target CRS.
    *args
        GeoDataFrames to compare and, if necessary, reproject.

    Returns
    -------
    list of geopandas.GeoDataFrame
        The GeoDataFrames of *args* in the reference CRS. Inputs are not modified.
    """

    result = []
    for arg in args:
        if arg.crs != gdf.crs:
            logger.warning("CRS of GeoDataFrame do not match first provided one. Reprojecting")
            arg = arg.to_crs(gdf.crs)
        result.append(arg)
    return result
