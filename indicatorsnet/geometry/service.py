"""
Geometric primitives used by indicator strategies and spatial matching.
"""
from abc import ABC, abstractmethod
import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry.base import BaseGeometry


class GeometryService(ABC):
    """Capability set of geometric operations.

    Operations are vectorized over a GeoSeries and, where a second operand is
    needed, evaluated against a single geometry.
    """

    @abstractmethod
    def area(self, geometries: gpd.GeoSeries) -> pd.Series:
        """Area of every geometry in CRS units."""

    @abstractmethod
    def interior_point(self, geometries: gpd.GeoSeries) -> gpd.GeoSeries:
        """A point guaranteed to lie inside every geometry."""

    @abstractmethod
    def within(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        """Whether every geometry lies within *geometry*."""

    @abstractmethod
    def intersects(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        """Whether every geometry intersects *geometry*."""

    @abstractmethod
    def bbox_overlap_ratio(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        """Share of every geometry bounding box covered by the bounding box of *geometry*."""

    @abstractmethod
    def buffer(self, geometries: gpd.GeoSeries, distance: float) -> gpd.GeoSeries:
        """Buffer of every geometry by *distance* CRS units."""


class GeoPandasGeometryService(GeometryService):
    """Geometry service backed by geopandas and shapely."""

    def area(self, geometries: gpd.GeoSeries) -> pd.Series:
        return geometries.area.astype(float)

    def interior_point(self, geometries: gpd.GeoSeries) -> gpd.GeoSeries:
        """Centroid when it lies inside the geometry, otherwise a representative point.

        Parameters
        ----------
        geometries : geopandas.GeoSeries
            Geometries of any type.

        Returns
        -------
        geopandas.GeoSeries
            Points indexed like *geometries*.
        """

        points = geometries.centroid
        outside = ~points.within(geometries)
        if outside.any():
            points[outside] = geometries[outside].representative_point()
        return points

    def within(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        return geometries.within(geometry)

    def intersects(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        return geometries.intersects(geometry)

    def bbox_overlap_ratio(self, geometries: gpd.GeoSeries, geometry: BaseGeometry) -> pd.Series:
        """Overlap of bounding boxes relative to the bounding box area of *geometries*.

        Degenerate bounding boxes (points, axis-parallel lines) have no area.
        Their ratio is 1 when they are covered by the bounding box of
        *geometry* and 0 otherwise.
        """

        bounds = geometries.bounds
        t_minx, t_miny, t_maxx, t_maxy = geometry.bounds
        width = (np.minimum(bounds["maxx"], t_maxx) - np.maximum(bounds["minx"], t_minx)).clip(lower=0)
        height = (np.minimum(bounds["maxy"], t_maxy) - np.maximum(bounds["miny"], t_miny)).clip(lower=0)
        bbox_area = (bounds["maxx"] - bounds["minx"]) * (bounds["maxy"] - bounds["miny"])
        covered = (
            (bounds["minx"] >= t_minx)
            & (bounds["miny"] >= t_miny)
            & (bounds["maxx"] <= t_maxx)
            & (bounds["maxy"] <= t_maxy)
        )
        ratio = (width * height) / bbox_area.where(bbox_area > 0)
        return ratio.where(bbox_area > 0, covered.astype(float)).astype(float)

    def buffer(self, geometries: gpd.GeoSeries, distance: float) -> gpd.GeoSeries:
        return geometries.buffer(distance)


geometry_service = GeoPandasGeometryService()
