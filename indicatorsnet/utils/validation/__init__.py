from .df_schema import DfSchema
from .gdf_schema import GdfSchema
from .feature_schema import FeatureSchema, IndicatorSchema
from .utils import ensure_crs
