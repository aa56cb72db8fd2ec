"""Testing engine and logging configuration"""

import pytest
from indicatorsnet import log_config, engine_config, AggregationType


def test_logger_level():
    with pytest.raises(ValueError):
        log_config.set_logger_level("VERBOSE")
    log_config.set_logger_level("warning")
    assert log_config.logger_level == "WARNING"
    log_config.set_logger_level("INFO")
    assert log_config.logger_level == "INFO"


def test_progress():
    """Check progress bars keep the wrapped items and honour the switch"""
    bar = log_config.progress(range(3), desc="Items")
    assert list(bar) == [0, 1, 2]
    assert bar.disable


@pytest.mark.parametrize("threshold", [0, 1.5])
def test_bbox_threshold(threshold):
    with pytest.raises(ValueError):
        engine_config.set_bbox_overlap_threshold(threshold)


def test_isochrones():
    with pytest.raises(ValueError):
        engine_config.set_isochrone_batch_size(0)
    with pytest.raises(ValueError):
        engine_config.set_isochrone_retries(0)
    engine_config.set_isochrone_retries(5, 0.5)
    assert engine_config.isochrone_retries == 5
    assert engine_config.isochrone_backoff == 0.5


@pytest.mark.parametrize(
    "value,expected",
    [("sum", AggregationType.SUM), (AggregationType.SUM, AggregationType.SUM), ("unknown", AggregationType.AVERAGE)],
)
def test_aggregation_type(value, expected):
    assert AggregationType.parse(value) == expected
