import pytest
import geopandas as gpd
from shapely.geometry import Point, box
from indicatorsnet import log_config, engine_config, NO_DATA

local_crs = 32637

log_config.set_disable_tqdm(True)


@pytest.fixture(autouse=True)
def default_engine_config():
    yield
    engine_config.set_date_prefix("DATE_")
    engine_config.set_bbox_overlap_threshold(0.9)
    engine_config.set_isochrone_batch_size(200)
    engine_config.set_isochrone_retries(3, 1.0)


@pytest.fixture
def date():
    return "2020-12-31"


@pytest.fixture
def targets_gdf():
    """Two districts: A of area 10 and B of area 5"""
    return gpd.GeoDataFrame(
        {"name": ["A", "B"]},
        geometry=[box(0, 0, 5, 2), box(5, 0, 10, 1)],
        index=["A", "B"],
        crs=local_crs,
    )


@pytest.fixture
def points_gdf(date):
    """Indicator points: two inside A, one inside B"""
    return gpd.GeoDataFrame(
        {f"DATE_{date}": [4.0, 6.0, 2.0]},
        geometry=[Point(1, 1), Point(3, 1), Point(7, 0.5)],
        index=["p1", "p2", "p3"],
        crs=local_crs,
    )


@pytest.fixture
def blocks_gdf():
    """Four unit blocks in a row, ids 1-4"""
    return gpd.GeoDataFrame(
        geometry=[box(i, 0, i + 1, 1) for i in range(4)],
        index=[1.0, 2.0, 3.0, 4.0],
        crs=local_crs,
    )


@pytest.fixture
def districts_gdf():
    """Two districts covering blocks 1-2 and 3-4"""
    return gpd.GeoDataFrame(geometry=[box(0, 0, 2, 1), box(2, 0, 4, 1)], index=["west", "east"], crs=local_crs)


@pytest.fixture
def no_data():
    return NO_DATA
