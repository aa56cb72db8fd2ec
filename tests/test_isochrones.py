"""Testing batched isochrone requests"""

import asyncio
import json
import threading
import warnings
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
import httpx
import pytest
import geopandas as gpd
from shapely.geometry import Point, mapping
from indicatorsnet import (
    engine_config,
    calculate_isochrones,
    IsochroneService,
    BufferIsochrones,
    OpenRouteServiceIsochrones,
    TravelProfile,
    CollaboratorFailure,
)


class FakeIsochrones(IsochroneService):
    """Buffers points and answers in reversed order"""

    max_locations = 2

    def __init__(self, failures: int = 0):
        self.calls = []
        self.failures = failures

    async def isochrones(self, points, profile, distance):
        self.calls.append(len(points))
        if self.failures > 0:
            self.failures -= 1
            raise CollaboratorFailure("Service unavailable")
        gdf = gpd.GeoDataFrame(
            {"location_index": range(len(points))}, geometry=[p.buffer(distance) for p in points], crs=points.crs
        )
        return gdf.iloc[::-1]


@pytest.fixture
def points():
    return gpd.GeoSeries(
        [Point(500000 + i * 1000, 6000000) for i in range(5)], index=list("abcde"), crs=32637
    )


@pytest.fixture(autouse=True)
def no_backoff():
    engine_config.set_isochrone_retries(3, 0)


def test_batches(points):
    """Check batches respect the location limit and results follow the points"""
    service = FakeIsochrones()
    isochrones = asyncio.run(calculate_isochrones(points, service, TravelProfile.CAR, 100))
    assert service.calls == [2, 2, 1]
    assert isochrones["source_index"].to_list() == list("abcde")
    for _, row in isochrones.iterrows():
        assert points[row["source_index"]].within(row.geometry)


def test_batch_size(points):
    service = FakeIsochrones()
    asyncio.run(calculate_isochrones(points, service, distance=100, batch_size=1))
    assert service.calls == [1, 1, 1, 1, 1]


def test_retries(points):
    service = FakeIsochrones(failures=2)
    isochrones = asyncio.run(calculate_isochrones(points, service, distance=100))
    assert len(isochrones) == 5
    assert service.calls == [2, 2, 2, 2, 1]


def test_failure(points):
    """Check the failure is raised once retries are exhausted"""
    service = FakeIsochrones(failures=3)
    with pytest.raises(CollaboratorFailure):
        asyncio.run(calculate_isochrones(points, service, distance=100))
    assert service.calls == [2, 2, 2]


def _ors_handler(request: httpx.Request) -> httpx.Response:
    assert request.url.path == "/v2/isochrones/foot-walking"
    assert request.headers["Authorization"] == "secret"
    body = json.loads(request.content)
    assert body["range"] == [500.0]
    assert body["range_type"] == "distance"
    features = [
        {"type": "Feature", "properties": {"group_index": i}, "geometry": mapping(Point(*location).buffer(0.01))}
        for i, location in enumerate(body["locations"])
    ]
    return httpx.Response(200, json={"type": "FeatureCollection", "features": features})


def test_openrouteservice(points):
    service = OpenRouteServiceIsochrones("http://ors.local/", "secret", transport=httpx.MockTransport(_ors_handler))
    isochrones = asyncio.run(calculate_isochrones(points, service, TravelProfile.PEDESTRIAN, 500))
    assert isochrones.crs == points.crs
    assert isochrones["source_index"].to_list() == list("abcde")
    for _, row in isochrones.iterrows():
        assert points[row["source_index"]].within(row.geometry)


@pytest.mark.parametrize(
    "response",
    [httpx.Response(500, text="Internal error"), httpx.Response(200, json={"type": "FeatureCollection"})],
)
def test_openrouteservice_failure(points, response):
    engine_config.set_isochrone_retries(1)
    service = OpenRouteServiceIsochrones("http://ors.local", transport=httpx.MockTransport(lambda request: response))
    with pytest.raises(CollaboratorFailure):
        asyncio.run(calculate_isochrones(points, service, distance=500))


class OrsRequestHandler(BaseHTTPRequestHandler):
    """Answers isochrone requests with small squares around the locations"""

    def do_POST(self):
        body = json.loads(self.rfile.read(int(self.headers["Content-Length"])))
        features = [
            {"type": "Feature", "properties": {"group_index": i}, "geometry": mapping(Point(*location).buffer(0.01))}
            for i, location in enumerate(body["locations"])
        ]
        data = json.dumps({"type": "FeatureCollection", "features": features}).encode()
        self.send_response(200)
        self.send_header("Content-Type", "application/geo+json")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        pass


@pytest.fixture
def ors_url():
    server = ThreadingHTTPServer(("127.0.0.1", 0), OrsRequestHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def test_openrouteservice_repeated_runs(points, ors_url):
    """Check one service serves runs on separate event loops"""
    service = OpenRouteServiceIsochrones(ors_url)
    for _ in range(2):
        isochrones = asyncio.run(calculate_isochrones(points, service, distance=500))
        assert isochrones["source_index"].to_list() == list("abcde")


def test_buffer_isochrones(points):
    """Check buffer isochrones follow the segment count without deprecation warnings"""
    with warnings.catch_warnings():
        warnings.simplefilter("error", DeprecationWarning)
        isochrones = asyncio.run(BufferIsochrones(quad_segs=4).isochrones(points, TravelProfile.PEDESTRIAN, 100))
    assert isochrones["location_index"].to_list() == [0, 1, 2, 3, 4]
    assert len(isochrones.geometry.iloc[0].exterior.coords) == 17
