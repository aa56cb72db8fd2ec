from .validation import DfSchema, GdfSchema, FeatureSchema, IndicatorSchema, ensure_crs
