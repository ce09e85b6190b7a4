"""
Tests for the NASA gateway API.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import SEARCH_PATH, search_by_topic, search_payload
from nasa_gateway.api.app import create_app
from nasa_gateway.errors import UpstreamError, UpstreamTimeout
from nasa_gateway.handlers.image_library_handler import RANDOM_TOPICS
from nasa_gateway.repositories import MemoryResponseCache

ROVERS_PATH = "/mars-photos/api/v1/rovers"


def assert_failure(response, status_code, message=None):
    assert response.status_code == status_code
    body = response.json()
    assert body["success"] is False
    if message is not None:
        assert body["error"] == message


def photos(*ids):
    return {"photos": [{"id": photo_id} for photo_id in ids]}


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "NASA Data Explorer API"
    assert data["endpoints"]["apod"] == "/api/apod"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "OK"
    assert data["uptime"] >= 0
    assert "timestamp" in data


def test_security_headers(client):
    response = client.get("/health")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_unknown_route(client):
    """Test unmatched routes use the failure envelope."""
    assert_failure(client.get("/api/nothing-here"), 404, "Route not found")


# APOD


def test_apod_today(client, upstream):
    upstream.routes["/planetary/apod"] = {"title": "Pillars of Creation"}

    response = client.get("/api/apod")

    assert response.status_code == 200
    assert response.json() == {"success": True, "data": {"title": "Pillars of Creation"}}
    assert upstream.calls_to("/planetary/apod") == [{}]


def test_apod_repeat_request_hits_cache(client, upstream):
    upstream.routes["/planetary/apod"] = {"title": "Moon"}

    first = client.get("/api/apod", params={"date": "2023-01-01"})
    second = client.get("/api/apod", params={"date": "2023-01-01"})

    assert first.json() == second.json()
    assert len(upstream.calls) == 1


def test_apod_rejects_ambiguous_parameters(client, upstream):
    response = client.get("/api/apod", params={"date": "2023-01-01", "count": "3"})

    assert_failure(response, 400)
    assert upstream.calls == []


def test_apod_invalid_date(client):
    assert_failure(client.get("/api/apod", params={"date": "2023/01/01"}), 400, "Date must be in YYYY-MM-DD format")


def test_apod_rejects_trailing_newline_in_date(client, upstream):
    response = client.get("/api/apod", params={"date": "2023-01-01\n"})

    assert_failure(response, 400, "Date must be in YYYY-MM-DD format")
    assert upstream.calls == []


def test_apod_random_clamps_count(client, upstream):
    upstream.routes["/planetary/apod"] = []

    assert client.get("/api/apod/random", params={"count": "50"}).status_code == 200
    assert client.get("/api/apod/random").status_code == 200

    assert upstream.calls_to("/planetary/apod") == [{"count": 10}, {"count": 5}]


def test_apod_random_rejects_non_integer(client):
    assert_failure(client.get("/api/apod/random", params={"count": "lots"}), 400, "Count must be a positive integer")


def test_apod_range_requires_both_dates(client):
    response = client.get("/api/apod/range", params={"start_date": "2023-01-01"})
    assert_failure(response, 400, "start_date and end_date are required")


def test_upstream_error_is_reported(client, upstream):
    """Test NASA errors surface as 500 with the upstream status and message."""
    upstream.routes["/planetary/apod"] = UpstreamError(403, "An invalid api_key was supplied")

    response = client.get("/api/apod")

    assert_failure(response, 500, "NASA API Error: 403 - An invalid api_key was supplied")


def test_upstream_timeout_is_reported(client, upstream):
    upstream.routes["/planetary/apod"] = UpstreamTimeout()

    response = client.get("/api/apod")

    assert_failure(response, 500, "NASA API is currently unavailable. Please try again later.")


# Mars Rover


def test_rover_photos(client, upstream):
    upstream.routes[f"{ROVERS_PATH}/curiosity/photos"] = photos(1, 2)

    response = client.get("/api/mars-rover/Curiosity/photos", params={"sol": "1000", "camera": "FHAZ"})

    assert response.status_code == 200
    assert response.json()["data"] == photos(1, 2)
    assert upstream.calls_to(f"{ROVERS_PATH}/curiosity/photos") == [{"page": 1, "sol": 1000, "camera": "FHAZ"}]


def test_rover_photos_invalid_rover(client, upstream):
    response = client.get("/api/mars-rover/sojourner/photos", params={"sol": "1"})

    assert_failure(response, 400, "Invalid rover. Valid options: curiosity, opportunity, spirit, perseverance, ingenuity")
    assert upstream.calls == []


@pytest.mark.parametrize(
    ("params", "message"),
    [
        ({}, "Either sol or earth_date parameter is required"),
        ({"sol": "1", "earth_date": "2020-01-01"}, "Provide either sol or earth_date, not both"),
        ({"sol": "abc"}, "Sol must be a non-negative integer"),
        ({"sol": "1", "page": "0"}, "Page must be a positive integer"),
    ],
)
def test_rover_photos_parameter_errors(client, params, message):
    assert_failure(client.get("/api/mars-rover/spirit/photos", params=params), 400, message)


def test_rover_cameras(client, upstream):
    upstream.routes[f"{ROVERS_PATH}/spirit"] = {
        "rover": {"name": "Spirit", "max_sol": 2208, "cameras": [{"name": "PANCAM"}]}
    }

    response = client.get("/api/mars-rover/spirit/cameras")

    assert response.json()["data"] == {"rover": "Spirit", "cameras": [{"name": "PANCAM"}]}


def test_latest_rover_photos_tolerates_failures(client, upstream):
    """Test one rover failing does not fail the whole response."""
    upstream.routes.update(
        {
            f"{ROVERS_PATH}/curiosity": {"rover": {"name": "Curiosity", "max_sol": 4000}},
            f"{ROVERS_PATH}/curiosity/photos": photos(1, 2, 3, 4, 5, 6, 7),
            f"{ROVERS_PATH}/perseverance": {"rover": {"name": "Perseverance", "max_sol": 900}},
            f"{ROVERS_PATH}/perseverance/photos": photos(),
            f"{ROVERS_PATH}/opportunity": UpstreamError(500, "Internal Server Error"),
        }
    )

    response = client.get("/api/mars-rover/latest")

    assert response.status_code == 200
    data = response.json()["data"]
    assert set(data) == {"curiosity", "opportunity", "spirit"}
    assert [photo["id"] for photo in data["curiosity"]["photos"]] == [1, 2, 3, 4, 5]
    assert data["curiosity"]["rover"]["max_sol"] == 4000
    assert data["opportunity"] == {"error": "Failed to fetch latest photos for opportunity"}
    assert data["spirit"] == {"error": "Failed to fetch latest photos for spirit"}
    assert upstream.calls_to(f"{ROVERS_PATH}/curiosity/photos") == [{"page": 1, "sol": 4000}]


# Near Earth Objects


def test_neo_feed(client, upstream):
    upstream.routes["/neo/rest/v1/feed"] = {"element_count": 12}

    response = client.get("/api/neo/feed", params={"start_date": "2023-01-01", "end_date": "2023-01-08"})

    assert response.json() == {"success": True, "data": {"element_count": 12}}


def test_neo_feed_rejects_long_span(client, upstream):
    response = client.get("/api/neo/feed", params={"start_date": "2023-01-01", "end_date": "2023-01-09"})

    assert_failure(response, 400, "Date range cannot exceed 7 days")
    assert upstream.calls == []


def test_neo_feed_requires_dates(client):
    assert_failure(client.get("/api/neo/feed"), 400, "start_date and end_date are required")


def test_neo_today_feed_uses_single_day(client, upstream):
    upstream.routes["/neo/rest/v1/feed"] = {"element_count": 3}

    assert client.get("/api/neo/today/feed").status_code == 200

    (params,) = upstream.calls_to("/neo/rest/v1/feed")
    assert params["start_date"] == params["end_date"]


def test_neo_browse_defaults_and_bounds(client, upstream):
    upstream.routes["/neo/rest/v1/neo/browse"] = {"near_earth_objects": []}

    assert client.get("/api/neo").status_code == 200
    assert upstream.calls_to("/neo/rest/v1/neo/browse") == [{"page": 0, "size": 20}]

    assert_failure(client.get("/api/neo", params={"size": "101"}), 400, "Size must be between 1 and 100")
    assert_failure(client.get("/api/neo", params={"page": "-1"}), 400, "Page must be a non-negative integer")


def test_neo_by_id(client, upstream):
    upstream.routes["/neo/rest/v1/neo/3542519"] = {"id": "3542519", "name": "(2010 PK9)"}

    response = client.get("/api/neo/3542519")

    assert response.json()["data"]["name"] == "(2010 PK9)"


def test_neo_stats(client, upstream):
    upstream.routes["/neo/rest/v1/neo/browse"] = {
        "page": {"total_elements": 40000},
        "near_earth_objects": [
            {
                "estimated_diameter": {"kilometers": {"estimated_diameter_min": 1.0, "estimated_diameter_max": 3.0}},
                "is_potentially_hazardous_asteroid": True,
                "close_approach_data": [{"miss_distance": {"kilometers": "12345.6"}}],
            }
        ],
    }

    response = client.get("/api/neo/stats/summary")

    data = response.json()["data"]
    assert data["total_count"] == 40000
    assert data["potentially_hazardous_count"] == 1
    assert data["average_diameter_km"] == 2.0
    assert data["average_miss_distance_km"] == 12346
    assert upstream.calls_to("/neo/rest/v1/neo/browse") == [{"page": 0, "size": 100}]


def test_neo_stats_without_objects(client, upstream):
    upstream.routes["/neo/rest/v1/neo/browse"] = {"page": {}}

    assert_failure(client.get("/api/neo/stats/summary"), 500, "Failed to fetch NEO data for statistics")


# Image and Video Library


def test_image_search(client, upstream):
    upstream.routes[SEARCH_PATH] = search_payload("PIA00001")

    response = client.get("/api/image-library/search", params={"q": "mars", "media_type": "VIDEO", "page": "2"})

    assert response.status_code == 200
    assert upstream.calls_to(SEARCH_PATH) == [{"q": "mars", "media_type": "video", "page": 2}]


def test_image_search_validation(client):
    assert_failure(client.get("/api/image-library/search"), 400, 'Query parameter "q" is required')
    assert_failure(
        client.get("/api/image-library/search", params={"q": "mars", "media_type": "hologram"}),
        400,
        "Invalid media_type. Valid options: image, video, audio",
    )


def test_popular_images(client, upstream):
    upstream.routes[SEARCH_PATH] = search_by_topic(
        {
            "mars": search_payload("m1", "m2", "m3", "m4", total_hits=400),
            "moon": search_payload(),
            "jupiter": search_payload("j1"),
            "saturn": search_payload("s1"),
        }
    )

    response = client.get("/api/image-library/popular")

    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["topics"]) == 10
    results = data["results"]
    assert set(results) == {"mars", "earth", "jupiter", "saturn"}
    assert results["mars"]["total_hits"] == 400
    assert len(results["mars"]["items"]) == 3
    assert results["earth"] == {"error": "Failed to fetch images for earth"}
    assert len(upstream.calls_to(SEARCH_PATH)) == 5


def test_featured_images(client, upstream):
    upstream.routes[SEARCH_PATH] = search_by_topic(
        {
            "hubble telescope": search_payload(*[f"h{i}" for i in range(8)]),
            "mars rover exploration": search_payload("r1"),
            "earth space view": search_payload(),
            "apollo mission moon": search_payload("a1"),
        }
    )

    response = client.get("/api/image-library/featured")

    data = response.json()["data"]
    assert len(data["Hubble Space Telescope"]["items"]) == 6
    assert data["Hubble Space Telescope"]["query"] == "hubble telescope"
    assert "Earth from Space" not in data
    assert data["Deep Space"] == {
        "description": "Stunning deep space imagery",
        "error": "Failed to fetch Deep Space collection",
    }


def test_random_images(client, upstream):
    upstream.routes[SEARCH_PATH] = lambda params: search_payload(f"{params['q']}-1", f"{params['q']}-2")

    response = client.get("/api/image-library/random", params={"count": "4"})

    data = response.json()["data"]
    assert data["count"] == 4
    topics = [image["search_topic"] for image in data["images"]]
    assert len(set(topics)) == 4
    assert set(topics) <= set(RANDOM_TOPICS)
    assert len(upstream.calls_to(SEARCH_PATH)) == 4


def test_random_images_skip_duplicates_and_stop_when_topics_run_out(client, upstream):
    upstream.routes[SEARCH_PATH] = search_payload("same-image")

    response = client.get("/api/image-library/random", params={"count": "50"})

    data = response.json()["data"]
    assert data["count"] == 1
    assert len(upstream.calls_to(SEARCH_PATH)) == len(RANDOM_TOPICS)


def test_random_images_all_failing_returns_empty(client, upstream):
    upstream.routes[SEARCH_PATH] = UpstreamError(503, "Service Unavailable")

    response = client.get("/api/image-library/random")

    assert response.status_code == 200
    assert response.json()["data"] == {"count": 0, "images": []}


# EPIC


def epic_image(name, date):
    return {"image": name, "date": date, "centroid_coordinates": {"lat": 0, "lon": 0}}


def test_epic_images_for_date_carry_urls(client, upstream):
    upstream.routes["/EPIC/api/enhanced/date/2023-01-01"] = [epic_image("epic_rgb_1", "2023-01-01 00:13:03")]

    response = client.get("/api/epic", params={"date": "2023-01-01", "type": "enhanced"})

    (image,) = response.json()["data"]
    assert image["image_url"].endswith("/EPIC/archive/enhanced/2023/01/01/png/epic_rgb_1.png?api_key=TEST_KEY")


def test_epic_invalid_type(client):
    assert_failure(client.get("/api/epic", params={"type": "infrared"}), 400, "Invalid type. Valid options: natural, enhanced")


def test_epic_available(client, upstream):
    upstream.routes["/EPIC/api/natural/available"] = ["2023-01-01", "2023-01-02"]

    assert client.get("/api/epic/available").json()["data"] == ["2023-01-01", "2023-01-02"]


def test_epic_latest(client, upstream):
    upstream.routes.update(
        {
            "/EPIC/api/natural/available": ["2023-01-01", "2023-01-03", "2023-01-02"],
            "/EPIC/api/natural/date/2023-01-03": [epic_image("epic_1b_1", "2023-01-03 01:00:00")],
        }
    )

    data = client.get("/api/epic/latest").json()["data"]

    assert data["date"] == "2023-01-03"
    assert data["type"] == "natural"
    assert data["images"][0]["image_url"].endswith("/2023/01/03/png/epic_1b_1.png?api_key=TEST_KEY")


def test_epic_latest_without_dates(client, upstream):
    upstream.routes["/EPIC/api/natural/available"] = []

    assert_failure(client.get("/api/epic/latest"), 404, "No EPIC images available")


def test_epic_metadata(client, upstream):
    upstream.routes["/EPIC/api/natural/date/2023-01-01"] = [
        epic_image("b", "2023-01-01 09:00:00"),
        epic_image("a", "2023-01-01 01:00:00"),
    ]

    data = client.get("/api/epic/metadata/2023-01-01").json()["data"]

    assert data["image_count"] == 2
    assert data["first_image_time"] == "2023-01-01 01:00:00"
    assert data["last_image_time"] == "2023-01-01 09:00:00"


def test_epic_metadata_not_found(client, upstream):
    upstream.routes["/EPIC/api/natural/date/2023-01-01"] = []

    assert_failure(client.get("/api/epic/metadata/2023-01-01"), 404, "No EPIC images found for date 2023-01-01")


def test_epic_metadata_invalid_date(client):
    assert_failure(client.get("/api/epic/metadata/yesterday"), 400, "Date must be in YYYY-MM-DD format")


# Response cache


def test_cache_stats_and_flush(client, upstream):
    """Test cache statistics and flushing."""
    upstream.routes["/planetary/apod"] = {"title": "Moon"}
    client.get("/api/apod")
    client.get("/api/apod")

    stats = client.get("/api/cache/stats").json()["data"]
    assert stats == {"hits": 1, "misses": 1, "keys": 1, "ttl_seconds": 60}

    cleared = client.delete("/api/cache").json()["data"]
    assert cleared["deleted_count"] == 1

    client.get("/api/apod")
    assert len(upstream.calls_to("/planetary/apod")) == 2


class BrokenStore(MemoryResponseCache):
    def stats(self) -> dict:
        raise RuntimeError("stats unavailable")


def test_unhandled_error_keeps_security_and_cors_headers(test_settings, upstream):
    """Test unexpected faults still get the envelope and response headers."""
    app = create_app(settings=test_settings, upstream_client=upstream, response_store=BrokenStore(ttl=60))

    with TestClient(app, raise_server_exceptions=False) as client:
        response = client.get("/api/cache/stats", headers={"Origin": "https://explorer.example"})

    assert_failure(response, 500, "Internal server error")
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Access-Control-Allow-Origin"] == "https://explorer.example"
