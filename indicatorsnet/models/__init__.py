from .geojson import Geometry, Feature, FeatureCollection
from .parameters import ProcessParameter, BaseParameters, EmptyParameters
from .datasets import Dataset, Datasets
