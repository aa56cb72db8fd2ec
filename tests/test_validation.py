"""Testing validation of spatial unit features"""

import numpy as np
import pandas as pd
import pytest
from indicatorsnet import NO_DATA
from indicatorsnet.utils.validation import IndicatorSchema, FeatureSchema


def test_canonical_ids(blocks_gdf):
    """Check float ids are coerced to integer text"""
    gdf = IndicatorSchema(blocks_gdf)
    assert list(gdf.index) == ["1", "2", "3", "4"]
    assert list(blocks_gdf.index) == [1.0, 2.0, 3.0, 4.0]


def test_unique_ids(blocks_gdf):
    blocks_gdf.index = [1, 1.0, 2, 3]
    with pytest.raises(ValueError):
        IndicatorSchema(blocks_gdf)


def test_weight_column(blocks_gdf):
    gdf = IndicatorSchema(blocks_gdf)
    assert gdf["aggregation_weight"].isna().all()
    blocks_gdf["aggregation_weight"] = [1, 2, -3, 4]
    with pytest.raises(ValueError):
        IndicatorSchema(blocks_gdf)


def test_date_values(blocks_gdf):
    """Check invalid values are treated as missing and NoData is kept"""
    blocks_gdf["DATE_2020-01-01"] = [1, NO_DATA, "abc", None]
    blocks_gdf["comment"] = ["a", "b", "c", "d"]
    gdf = IndicatorSchema(blocks_gdf)
    values = gdf["DATE_2020-01-01"]
    assert values["1"] == 1
    assert values["2"] == NO_DATA
    assert np.isnan(values["3"])
    assert np.isnan(values["4"])
    assert gdf["comment"].to_list() == ["a", "b", "c", "d"]


def test_instance():
    """Check plain DataFrames are rejected"""
    with pytest.raises(ValueError):
        FeatureSchema(pd.DataFrame({"value": [1]}))


def test_empty(blocks_gdf):
    with pytest.raises(ValueError):
        IndicatorSchema(blocks_gdf.iloc[:0])
    assert len(IndicatorSchema(blocks_gdf.iloc[:0], allow_empty=True)) == 0
