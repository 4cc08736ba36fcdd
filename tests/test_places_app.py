import json
import time

import jwt
import pytest
import requests

from piscine.places_app import (
    PlacesApp,
    Response,
    issue_token,
    render_page,
    validate_token,
)
from piscine.places_store import Place

SECRET = "secret"


def make_places(count):
    return [
        Place(
            id=str(i),
            name=f"Place {i}",
            address=f"Street {i}",
            phone="none",
            lat=55.5 + i,
            lon=37.25 + i,
        )
        for i in range(count)
    ]


class FakeStore:
    def __init__(self, places, fail=None):
        self.places = places
        self.fail = fail
        self.calls = []

    def get_places(self, limit, offset):
        if self.fail is not None:
            raise self.fail
        self.calls.append(("page", limit, offset))
        return self.places[offset : offset + limit], len(self.places)

    def get_closest_places(self, lat, lon, limit):
        if self.fail is not None:
            raise self.fail
        self.calls.append(("closest", lat, lon, limit))
        return self.places[:limit]


def test_index_default_page_lists_places():
    places = make_places(15)
    app = PlacesApp(FakeStore(places))
    response = app.index({})
    assert response.status == 200
    assert response.content_type.startswith("text/html")
    assert response.body.count("<li>") == 10
    assert "Total: 15" in response.body
    assert "Place 0" in response.body


def test_index_second_page_uses_offset():
    store = FakeStore(make_places(15))
    response = PlacesApp(store).index({"page": "2"})
    assert response.status == 200
    assert store.calls[-1] == ("page", 10, 10)
    assert response.body.count("<li>") == 5


def test_index_rejects_non_numeric_page():
    response = PlacesApp(FakeStore(make_places(3))).index({"page": "abc"})
    assert response.status == 400
    assert response.body == "Invalid 'page' value: abc\n"
    assert ("X-Content-Type-Options", "nosniff") in response.headers


def test_index_rejects_zero_page():
    response = PlacesApp(FakeStore(make_places(3))).index({"page": "0"})
    assert response.status == 400
    assert response.body.startswith("Invalid 'page' value: 0")


def test_index_rejects_page_past_the_end():
    response = PlacesApp(FakeStore(make_places(15))).index({"page": "3"})
    assert response.status == 400
    assert response.body == "Invalid 'page' value: 3. Total pages: 2.\n"


def test_index_reports_store_failure():
    store = FakeStore([], fail=requests.ConnectionError("down"))
    response = PlacesApp(store).index({"page": "1"})
    assert response.status == 500
    assert response.body == "down\n"


def test_render_page_escapes_html():
    place = Place(id="1", name="<b>Cafe & Co</b>", address="x", phone="y", lat=1.5, lon=2.5)
    html = render_page([place], 1, 1)
    assert "<b>Cafe" not in html
    assert "&lt;b&gt;Cafe &amp; Co&lt;/b&gt;" in html


def test_render_page_navigation_links():
    first = render_page([], 30, 1)
    assert "Previous" not in first
    assert '<a href="/?page=2">Next</a>' in first
    assert '<a href="/?page=1365">Last</a>' in first
    last = render_page([], 30, 1365)
    assert "Next" not in last
    assert '<a href="/?page=1364">Previous</a>' in last


def test_api_places_document():
    places = make_places(15)
    response = PlacesApp(FakeStore(places)).api_places({"page": "1"})
    assert response.status == 200
    assert response.content_type == "application/json"
    document = json.loads(response.body)
    assert document["name"] == "Places"
    assert document["total"] == len(places)
    assert document["places"] == [place.to_dict() for place in places[:10]]
    assert document["prev_page"] is None
    assert document["next_page"] == 2
    assert document["last_page"] == 2


def test_api_places_last_page_has_no_next():
    document = json.loads(PlacesApp(FakeStore(make_places(15))).api_places({"page": "2"}).body)
    assert document["prev_page"] == 1
    assert document["next_page"] is None


def test_api_places_requires_page():
    response = PlacesApp(FakeStore(make_places(3))).api_places({})
    assert response.status == 400
    assert response.body == "Invalid 'page' value\n"


def test_api_places_escapes_markup_in_json():
    place = Place(id="1", name="<a&b>", address="x", phone="y", lat=1.5, lon=2.5)
    response = PlacesApp(FakeStore([place])).api_places({"page": "1"})
    assert "<" not in response.body
    assert "\\u003ca\\u0026b\\u003e" in response.body
    assert json.loads(response.body)["places"][0]["name"] == "<a&b>"


def test_recommend_without_secret_is_open():
    places = make_places(5)
    store = FakeStore(places)
    response = PlacesApp(store).recommend({"lat": "55.674", "lon": "37.666"})
    assert response.status == 200
    document = json.loads(response.body)
    assert document["name"] == "Recommendation"
    assert document["places"] == [place.to_dict() for place in places[:3]]
    assert store.calls[-1] == ("closest", 55.674, 37.666, 3)


@pytest.mark.parametrize(
    "query, message",
    [
        ({"lon": "1"}, "Invalid 'lat' value\n"),
        ({"lat": "x", "lon": "1"}, "Invalid 'lat' value\n"),
        ({"lat": "1", "lon": ""}, "Invalid 'lon' value\n"),
    ],
)
def test_recommend_rejects_bad_coordinates(query, message):
    response = PlacesApp(FakeStore(make_places(3))).recommend(query)
    assert response.status == 400
    assert response.body == message


def test_recommend_with_secret_rejects_missing_token():
    app = PlacesApp(FakeStore(make_places(3)), SECRET)
    response = app.recommend({"lat": "1", "lon": "2"}, None)
    assert response.status == 401
    assert response.body == "Invalid token\n"


def test_recommend_with_secret_rejects_bad_token():
    app = PlacesApp(FakeStore(make_places(3)), SECRET)
    response = app.recommend({"lat": "1", "lon": "2"}, "Bearer token")
    assert response.status == 401


def test_recommend_accepts_issued_token():
    app = PlacesApp(FakeStore(make_places(3)), SECRET)
    token = json.loads(app.get_token().body)["token"]
    response = app.recommend({"lat": "1", "lon": "2"}, f"Bearer {token}")
    assert response.status == 200
    assert len(json.loads(response.body)["places"]) == 3


def test_get_token_needs_secret():
    with pytest.raises(ValueError):
        PlacesApp(FakeStore([])).get_token()


def test_issue_and_validate_round_trip():
    now = int(time.time())
    token = issue_token(SECRET, now)
    claims = validate_token(SECRET, token)
    assert claims["iss"] == "test"
    assert claims["exp"] == now + 30 * 60


def test_validate_token_accepts_any_case_of_bearer():
    token = issue_token(SECRET)
    assert validate_token(SECRET, "bearer " + token) == validate_token(SECRET, "BEARER " + token)


def test_validate_token_rejects_other_key():
    token = issue_token(SECRET)
    with pytest.raises(jwt.InvalidSignatureError):
        validate_token("placeholder", token)


def test_validate_token_rejects_expired():
    token = issue_token(SECRET, time.time() - 3 * 60 * 60)
    with pytest.raises(jwt.ExpiredSignatureError):
        validate_token(SECRET, token)


def test_response_status_line():
    assert Response(402, "application/json", "").status_line == "402 Payment Required"


def _call(app, path, query="", authorization=None):
    environ = {"PATH_INFO": path, "QUERY_STRING": query, "REQUEST_METHOD": "GET"}
    if authorization is not None:
        environ["HTTP_AUTHORIZATION"] = authorization
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def test_wsgi_api_places():
    status, headers, body = _call(PlacesApp(FakeStore(make_places(4))), "/api/places", "page=1")
    assert status == "200 OK"
    assert headers["Content-Type"] == "application/json"
    assert headers["Content-Length"] == str(len(body))
    assert json.loads(body)["total"] == 4


def test_wsgi_unknown_path_serves_index():
    status, headers, body = _call(PlacesApp(FakeStore(make_places(4))), "/anything", "page=zz")
    assert status == "400 Bad Request"
    assert body == b"Invalid 'page' value: zz\n"


def test_wsgi_token_then_recommend():
    app = PlacesApp(FakeStore(make_places(4)), SECRET)
    status, _, body = _call(app, "/api/get_token")
    assert status == "200 OK"
    token = json.loads(body)["token"]
    status, _, body = _call(app, "/api/recommend", "lat=1&lon=2", f"Bearer {token}")
    assert status == "200 OK"
    assert json.loads(body)["name"] == "Recommendation"


def test_wsgi_get_token_without_secret_falls_back_to_index():
    status, headers, _ = _call(PlacesApp(FakeStore(make_places(4))), "/api/get_token")
    assert status == "200 OK"
    assert headers["Content-Type"].startswith("text/html")