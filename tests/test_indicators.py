"""Testing indicator strategies and the compute stage"""

import numpy as np
import pandas as pd
import pytest
import geopandas as gpd
from shapely.geometry import Point, box
from indicatorsnet import (
    NO_DATA,
    Dataset,
    Datasets,
    ProcessParameter,
    compute_indicator,
    aggregate_indicator,
    disaggregate_indicator,
    get_indicator,
    register_indicator,
    calculate_per_feature,
    BaseIndicator,
    WeightedSumIndicator,
    TemporalChangeIndicator,
    ShareIndicator,
    CompositeScoreIndicator,
    OverlayAccumulationIndicator,
    ParameterMissing,
    ParameterInvalid,
    DatasetNotFound,
    LocalComputeGap,
    NotSupported,
)


@pytest.fixture
def base_indicators(targets_gdf, date):
    a_gdf = targets_gdf.copy()
    a_gdf[f"DATE_{date}"] = [10.0, 20.0]
    a_gdf["DATE_2018-12-31"] = [5.0, 0.0]
    b_gdf = targets_gdf.copy()
    b_gdf[f"DATE_{date}"] = [30.0, NO_DATA]
    c_gdf = targets_gdf.copy()
    c_gdf[f"DATE_{date}"] = [1.0, 3.0]
    return Datasets(
        [
            Dataset(id="1", name="a", data=a_gdf),
            Dataset(id=2, name="b", data=b_gdf),
            Dataset(id="3", name="c", data=c_gdf),
        ]
    )


@pytest.fixture
def weighted_sum():
    return WeightedSumIndicator({"a": "w_a", "b": "w_b"})


def _values(gdf, date):
    return gdf[f"DATE_{date}"].to_dict()


def test_weighted_sum(weighted_sum, targets_gdf, base_indicators, date):
    """Check weighted sum and NoData for a missing component"""
    parameters = [ProcessParameter(name="w_a", value="0.25"), {"name": "w_b", "value": 0.75}]
    result = compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters=parameters)
    assert _values(result, date) == {"A": 25, "B": NO_DATA}
    assert result["aggregation_weight"].to_list() == [10, 5]


def test_output_contract(weighted_sum, targets_gdf, base_indicators, date):
    result = compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters={"w_a": 1, "w_b": 1})
    assert set(result.index) == set(targets_gdf.index)
    assert result[f"DATE_{date}"].notna().all()
    assert (result["aggregation_weight"] >= 0).all()
    assert f"DATE_{date}" not in targets_gdf.columns


def test_weighted_sum_zero_weights(weighted_sum, targets_gdf, base_indicators, date):
    result = compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters={"w_a": 0, "w_b": 0})
    assert _values(result, date) == {"A": NO_DATA, "B": NO_DATA}


def test_dataset_by_id(targets_gdf, base_indicators, date):
    indicator = WeightedSumIndicator({"1": "w_a", "3": "w_c"})
    result = compute_indicator(indicator, date, targets_gdf, base_indicators, parameters={"w_a": 0.5, "w_c": 0.5})
    assert _values(result, date) == {"A": 5.5, "B": 11.5}


def test_parameter_missing(weighted_sum, targets_gdf, base_indicators, date):
    """Check all missing parameters are named before computing"""
    with pytest.raises(ParameterMissing) as e:
        compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters=[])
    assert e.value.names == ["w_a", "w_b"]


def test_parameter_invalid(weighted_sum, targets_gdf, base_indicators, date):
    with pytest.raises(ParameterInvalid) as e:
        compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters={"w_a": "abc", "w_b": 1})
    assert e.value.name == "w_a"


def test_dataset_not_found(targets_gdf, base_indicators, date):
    indicator = WeightedSumIndicator({"unknown": "w"})
    with pytest.raises(DatasetNotFound) as e:
        compute_indicator(indicator, date, targets_gdf, base_indicators, parameters={"w": 1})
    assert e.value.key == "unknown"


@pytest.mark.parametrize(
    "change_type,expected",
    [("absolute", {"A": 5, "B": 20}), ("RELATIVE", {"A": 100, "B": NO_DATA}), ("ratio", {"A": 2, "B": NO_DATA})],
)
def test_temporal_change(targets_gdf, base_indicators, date, change_type, expected):
    indicator = TemporalChangeIndicator("a")
    parameters = {"offset": "2", "change_type": change_type}
    result = compute_indicator(indicator, date, targets_gdf, base_indicators, parameters=parameters)
    assert _values(result, date) == expected


def test_temporal_change_missing_date(targets_gdf, base_indicators, date):
    """Check a missing earlier value gives NoData"""
    indicator = TemporalChangeIndicator("a")
    result = compute_indicator(indicator, date, targets_gdf, base_indicators, parameters={"offset": 1})
    assert _values(result, date) == {"A": NO_DATA, "B": NO_DATA}
    with pytest.raises(ParameterMissing):
        compute_indicator(indicator, date, targets_gdf, base_indicators, parameters={})


def test_share(targets_gdf, base_indicators, date):
    indicator = ShareIndicator(["a"], ["b"])
    result = compute_indicator(indicator, date, targets_gdf, base_indicators)
    assert result.loc["A", f"DATE_{date}"] == pytest.approx(100 / 3)
    assert result.loc["B", f"DATE_{date}"] == NO_DATA
    assert result["aggregation_weight"].to_list() == [30, 1]


def test_composite_score(targets_gdf, base_indicators, date):
    """Check z-scores are averaged and inverted components change sign"""
    indicator = CompositeScoreIndicator(["a", "c"])
    result = compute_indicator(indicator, date, targets_gdf, base_indicators)
    assert _values(result, date) == {"A": -1, "B": 1}
    indicator = CompositeScoreIndicator(["a", "c"], inverted=["c"], weight_indicator="c")
    result = compute_indicator(indicator, date, targets_gdf, base_indicators)
    assert _values(result, date) == {"A": 0, "B": 0}
    assert result["aggregation_weight"].to_list() == [1, 3]


def test_composite_score_no_variance(targets_gdf, base_indicators, date):
    base_indicators["c"][f"DATE_{date}"] = [2.0, 2.0]
    result = compute_indicator(CompositeScoreIndicator(["a", "c"]), date, targets_gdf, base_indicators)
    assert _values(result, date) == {"A": NO_DATA, "B": NO_DATA}


@pytest.fixture
def plants_gdf(targets_gdf):
    return gpd.GeoDataFrame(
        {"co2": [10.0, 5.0, 2.0], "year": [2018, 2021, "2020-06-01"]},
        geometry=[Point(1, 1), Point(3, 1), Point(7, 0.5)],
        crs=targets_gdf.crs,
    )


def test_overlay_accumulation(targets_gdf, plants_gdf, date):
    """Check values accumulate by years active and future points are skipped"""
    indicator = OverlayAccumulationIndicator("plants", "co2", "year")
    result = compute_indicator(indicator, date, targets_gdf, georesources={"plants": plants_gdf})
    assert _values(result, date) == {"A": 30, "B": 2}
    assert result["aggregation_weight"].to_list() == [1, 1]
    parameters = {"scale": 0.5}
    result = compute_indicator(indicator, date, targets_gdf, georesources={"plants": plants_gdf}, parameters=parameters)
    assert _values(result, date) == {"A": 15, "B": 1}


def test_overlay_decayed(targets_gdf, plants_gdf, date):
    indicator = OverlayAccumulationIndicator("plants", "co2", "year")
    parameters = {"time_weighting": "DECAYED", "decay_rate": 0.5}
    result = compute_indicator(indicator, date, targets_gdf, georesources={"plants": plants_gdf}, parameters=parameters)
    assert _values(result, date) == {"A": 2.5, "B": 2}


def test_overlay_without_points(targets_gdf, plants_gdf):
    indicator = OverlayAccumulationIndicator("plants", "co2", "year")
    result = compute_indicator(indicator, "2010-01-01", targets_gdf, georesources={"plants": plants_gdf})
    assert _values(result, "2010-01-01") == {"A": 0, "B": 0}


def test_overlay_overlapping_targets(targets_gdf, plants_gdf, date):
    """Check a point is accumulated into the first containing target only"""
    wide_gdf = gpd.GeoDataFrame(geometry=[box(0, 0, 10, 2)], index=["wide"], crs=targets_gdf.crs)
    targets_gdf = pd.concat([targets_gdf.loc[["A"]], wide_gdf])
    indicator = OverlayAccumulationIndicator("plants", "co2", "year")
    result = compute_indicator(indicator, date, targets_gdf, georesources={"plants": plants_gdf})
    assert _values(result, date) == {"A": 30, "wide": 2}


def test_registry(weighted_sum):
    indicator = get_indicator("weighted_sum", {"a": "w_a"})
    assert isinstance(indicator, WeightedSumIndicator)
    assert indicator.id == "weighted_sum"
    with pytest.raises(ValueError):
        get_indicator("unknown")
    with pytest.raises(ValueError):
        register_indicator("weighted_sum")(TemporalChangeIndicator)


def test_disaggregate(weighted_sum, blocks_gdf, districts_gdf, date):
    with pytest.raises(NotSupported):
        disaggregate_indicator(weighted_sum, date, blocks_gdf, districts_gdf)
    with pytest.raises(NotImplementedError):
        weighted_sum.disaggregate(date, blocks_gdf, districts_gdf)


def test_local_compute_gap():
    """Check a gap of one feature does not stop the others"""

    def divide(row):
        if row["b"] == 0:
            raise LocalComputeGap(row.name, "division by zero")
        return row["a"] / row["b"]

    df = pd.DataFrame({"a": [1.0, 2.0], "b": [2.0, 0.0]}, index=["x", "y"])
    values = calculate_per_feature(df, divide)
    assert values["x"] == 0.5
    assert np.isnan(values["y"])


def test_deterministic(weighted_sum, targets_gdf, base_indicators, date):
    parameters = {"w_a": 0.5, "w_b": 0.5}
    first = compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters=parameters)
    second = compute_indicator(weighted_sum, date, targets_gdf, base_indicators, parameters=parameters)
    assert first.equals(second)


def test_custom_indicator(targets_gdf, date):
    """Check a registered strategy is computed by id"""

    @register_indicator("constant")
    class ConstantIndicator(BaseIndicator):
        def calculate(self, date, targets_gdf, base_indicators, georesources, parameters):
            return pd.Series(1.0, index=targets_gdf.index), pd.Series(np.nan, index=targets_gdf.index)

    result = compute_indicator("constant", date, targets_gdf)
    assert _values(result, date) == {"A": 1, "B": 1}
    assert result["aggregation_weight"].to_list() == [1, 1]


def test_aggregate_indicator(weighted_sum, targets_gdf, points_gdf, date):
    """Aggregation follows the averaging rule of the strategy"""
    result = aggregate_indicator(weighted_sum, date, targets_gdf, points_gdf)
    assert _values(result, date) == pytest.approx({"A": 5.0, "B": 2.0})


def test_async_indicator(targets_gdf, date):
    """Check an indicator may override compute only"""

    class AsyncIndicator(BaseIndicator):
        async def compute(self, date, targets_gdf, base_indicators, georesources, parameters):
            return pd.Series(2.0, index=targets_gdf.index), pd.Series(1.0, index=targets_gdf.index)

    indicator = AsyncIndicator()
    result = compute_indicator(indicator, date, targets_gdf)
    assert _values(result, date) == {"A": 2, "B": 2}
    with pytest.raises(NotImplementedError):
        indicator.calculate(date, targets_gdf, None, None, None)
