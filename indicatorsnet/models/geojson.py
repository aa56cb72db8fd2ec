"""
GeoJSON interchange model of spatial unit and georesource features is defined here.
"""
from typing import Any, Literal

import numpy as np
import pandas as pd
import geopandas as gpd
from pydantic import BaseModel
from shapely.geometry import mapping, shape
from shapely.geometry.base import BaseGeometry
from ..common.values import AGGREGATION_WEIGHT_COLUMN, to_feature_id

DEFAULT_EPSG = 4326
FEATURE_ID_PROPERTY = "spatialUnitFeatureId"
AGGREGATION_WEIGHT_PROPERTY = "aggregationWeight"

GeometryType = Literal["Point", "MultiPoint", "LineString", "MultiLineString", "Polygon", "MultiPolygon"]


def _is_absent(value) -> bool:
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and np.isnan(value)


def _to_json_value(value):
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, pd.Timestamp):
        return value.isoformat()
    return value


class Geometry(BaseModel):
    """Geometry representation for GeoJSON model"""

    type: GeometryType
    """Geometry type"""
    coordinates: list[Any] = []
    """Geometry coordinates list"""

    @classmethod
    def from_shapely_geometry(cls, geom: BaseGeometry) -> "Geometry":
        """Construct geometry from shapely BaseGeometry"""
        tmp = mapping(geom)
        return cls(type=tmp["type"], coordinates=tmp["coordinates"])

    def to_shapely_geometry(self) -> BaseGeometry:
        return shape(self.to_dict())

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "coordinates": self.coordinates}


class Feature(BaseModel):
    """Feature representation for GeoJSON model.

    The ``NoData`` sentinel is kept as a string property, absent values are
    omitted from properties.
    """

    type: Literal["Feature"] = "Feature"
    id: str | int | float | None = None
    """Feature id, falls back to the ``spatialUnitFeatureId`` property"""
    geometry: Geometry
    """Feature geometry"""
    properties: dict[str, Any] = {}
    """Feature properties"""

    @classmethod
    def from_row(cls, feature_id: str, row: pd.Series) -> "Feature":
        """Construct Feature object from a GeoDataFrame row."""
        properties = {}
        for name, value in row.items():
            if name == "geometry" or _is_absent(value):
                continue
            if name == AGGREGATION_WEIGHT_COLUMN:
                name = AGGREGATION_WEIGHT_PROPERTY
            properties[name] = _to_json_value(value)
        properties.setdefault(FEATURE_ID_PROPERTY, feature_id)
        return cls(id=feature_id, geometry=Geometry.from_shapely_geometry(row.geometry), properties=properties)

    def feature_id(self, position: int) -> str:
        """Canonical id from ``id``, the ``spatialUnitFeatureId`` property or the feature position."""
        if not _is_absent(self.id):
            return to_feature_id(self.id)
        value = self.properties.get(FEATURE_ID_PROPERTY)
        if not _is_absent(value):
            return to_feature_id(value)
        return to_feature_id(position)

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Feature", "id": self.id, "geometry": self.geometry.to_dict(), "properties": self.properties}


class FeatureCollection(BaseModel):
    """GeoJSON FeatureCollection representation."""

    type: Literal["FeatureCollection"] = "FeatureCollection"
    epsg: int = DEFAULT_EPSG
    """EPSG value"""
    features: list[Feature] = []
    """GeoJSON features list"""

    @classmethod
    def from_gdf(cls, gdf: gpd.GeoDataFrame) -> "FeatureCollection":
        """Construct FeatureCollection model from geopandas GeoDataFrame indexed by feature id."""
        epsg = gdf.crs.to_epsg() if gdf.crs is not None else None
        if epsg is None:
            raise ValueError("GeoDataFrame CRS must be expressible as an EPSG code")
        features = [Feature.from_row(to_feature_id(i), row) for i, row in gdf.iterrows()]
        return cls(features=features, epsg=epsg)

    def to_gdf(self) -> gpd.GeoDataFrame:
        """Generate GeoDataFrame indexed by canonical feature id"""
        ids = [feature.feature_id(i) for i, feature in enumerate(self.features)]
        records = []
        for feature in self.features:
            properties = dict(feature.properties)
            if AGGREGATION_WEIGHT_PROPERTY in properties:
                properties[AGGREGATION_WEIGHT_COLUMN] = properties.pop(AGGREGATION_WEIGHT_PROPERTY)
            records.append(properties)
        geometries = [feature.geometry.to_shapely_geometry() for feature in self.features]
        df = pd.DataFrame(records, index=pd.Index(ids, dtype=object))
        return gpd.GeoDataFrame(df, geometry=geometries, crs=self.epsg)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "FeatureCollection",
            "epsg": self.epsg,
            "features": [feature.to_dict() for feature in self.features],
        }
