import json
import threading
import urllib.error
import urllib.request

import pytest
import requests

from piscine.places_store import (
    MAPPINGS,
    ElasticsearchStore,
    Place,
    _make_server,
    build_bulk_body,
    load_csv,
)


class FakeResponse:
    def __init__(self, status_code=200, payload=None, reason="OK"):
        self.status_code = status_code
        self.payload = payload
        self.reason = reason

    def json(self):
        if self.payload is None:
            raise ValueError("no JSON")
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self.responses.pop(0)


PLACE_A = Place("1", "Sushi", "Main street", "(495) 000", 55.5, 37.5)
PLACE_B = Place("2", "Pizza", "Side street", "(495) 111", 56.25, 38.75)


def _search_payload(places, total):
    return {
        "hits": {
            "total": {"value": total, "relation": "eq"},
            "hits": [{"_id": p.id, "_source": p.to_dict()} for p in places],
        }
    }


def test_place_round_trip():
    assert Place.from_source(PLACE_A.to_dict()) == PLACE_A


def test_place_document_layout():
    assert PLACE_A.to_dict() == {
        "id": "1",
        "name": "Sushi",
        "address": "Main street",
        "phone": "(495) 000",
        "location": {"lat": 55.5, "lon": 37.5},
    }


def test_place_from_bad_source():
    with pytest.raises(ValueError):
        Place.from_source({"id": 1, "name": "x", "address": "y", "phone": "z", "location": {}})


def test_build_bulk_body_exact():
    place = Place("1", "A", "B", "C", 1.5, 2.5)
    assert build_bulk_body([place]) == (
        '{"index":{"_id":"1"}}\n'
        '{"id":"1","name":"A","address":"B","phone":"C","location":{"lat":1.5,"lon":2.5}}\n'
    )


def test_build_bulk_body_pairs_round_trip():
    body = build_bulk_body([PLACE_A, PLACE_B])
    lines = body.splitlines()
    assert len(lines) == 4
    assert json.loads(lines[0]) == {"index": {"_id": "1"}}
    assert Place.from_source(json.loads(lines[1])) == PLACE_A
    assert json.loads(lines[2]) == {"index": {"_id": "2"}}
    assert Place.from_source(json.loads(lines[3])) == PLACE_B


def test_build_bulk_body_escapes_html():
    body = build_bulk_body([Place("1", "a<b", "x&y", "p", 0.5, 0.5)])
    assert "\\u003c" in body and "\\u0026" in body
    assert json.loads(body.splitlines()[1])["name"] == "a<b"


def test_build_bulk_body_empty():
    assert build_bulk_body([]) == ""


def test_load_csv(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(
        "ID\tName\tAddress\tPhone\tLongitude\tLatitude\n"
        "1\tSushi\tMain street\t(495) 000\t55.5\t37.5\n"
        "\tNo id\tNowhere\t-\t1.0\t2.0\n"
        "2\tPizza\tSide street\t(495) 111\t56.25\t38.75\n",
        encoding="utf-8",
    )
    assert load_csv(path) == [PLACE_A, PLACE_B]


def test_load_csv_bad_float(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a\tb\tc\td\te\tf\n1\tn\ta\tp\tnorth\t2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_csv(path)


def test_load_csv_wrong_field_count(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("a\tb\tc\td\te\tf\n1\tn\ta\tp\t1.0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_csv(path)


def test_load_csv_empty_file(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        load_csv(path)


def test_load_csv_missing_file(tmp_path):
    with pytest.raises(OSError):
        load_csv(tmp_path / "absent.csv")


def test_ensure_index_creates_missing():
    session = FakeSession([FakeResponse(404, reason="Not Found"), FakeResponse(200)])
    store = ElasticsearchStore("http://es.example.com:9200/", session=session)
    assert store.ensure_index() is True
    assert [call[0] for call in session.calls] == ["HEAD", "PUT"]
    method, url, kwargs = session.calls[1]
    assert url == "http://es.example.com:9200/places"
    assert kwargs["json"] == MAPPINGS


def test_ensure_index_existing():
    session = FakeSession([FakeResponse(200)])
    store = ElasticsearchStore(session=session)
    assert store.ensure_index() is False
    assert len(session.calls) == 1


def test_ensure_index_create_fails():
    session = FakeSession([FakeResponse(404), FakeResponse(400, reason="Bad Request")])
    store = ElasticsearchStore(session=session)
    assert store.ensure_index() is False
    assert len(session.calls) == 2


def test_get_places():
    session = FakeSession([FakeResponse(200, _search_payload([PLACE_A, PLACE_B], 13649))])
    store = ElasticsearchStore(session=session)
    places, total = store.get_places(10, 20)
    assert places == [PLACE_A, PLACE_B]
    assert total == 13649
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url.endswith("/places/_search")
    assert kwargs["params"] == {"from": 20, "size": 10}
    assert kwargs["json"] == {"track_total_hits": True}


def test_get_places_http_error():
    store = ElasticsearchStore(session=FakeSession([FakeResponse(500)]))
    with pytest.raises(requests.HTTPError):
        store.get_places(10, 0)


def test_get_places_malformed():
    store = ElasticsearchStore(session=FakeSession([FakeResponse(200, {"nothing": True})]))
    with pytest.raises(ValueError):
        store.get_places(10, 0)


def test_get_closest_places():
    session = FakeSession([FakeResponse(200, _search_payload([PLACE_B], 1))])
    store = ElasticsearchStore(session=session)
    assert store.get_closest_places(55.674, 37.666, 3) == [PLACE_B]
    body = session.calls[0][2]["json"]
    assert body["size"] == 3
    geo = body["sort"][0]["_geo_distance"]
    assert geo["location"] == {"lat": 55.674, "lon": 37.666}
    assert geo["order"] == "asc"
    assert geo["unit"] == "km"
    assert geo["distance_type"] == "arc"


def test_bulk_index():
    session = FakeSession([FakeResponse(200, {"errors": False})])
    store = ElasticsearchStore(session=session)
    store.bulk_index([PLACE_A])
    method, url, kwargs = session.calls[0]
    assert method == "POST"
    assert url.endswith("/_bulk")
    assert kwargs["params"] == {"refresh": "true"}
    assert kwargs["data"].decode("utf-8") == build_bulk_body([PLACE_A])


def test_bulk_index_error():
    store = ElasticsearchStore(session=FakeSession([FakeResponse(400)]))
    with pytest.raises(requests.HTTPError):
        store.bulk_index([PLACE_A])


class FakeStore:
    def __init__(self):
        self.requests = []

    def get_places(self, limit, offset):
        self.requests.append((limit, offset))
        return [PLACE_A], 1


@pytest.fixture
def listing_server():
    store = FakeStore()
    server = _make_server(store, "127.0.0.1", 0)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield store, f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()


def test_listing_page(listing_server):
    store, base = listing_server
    with urllib.request.urlopen(f"{base}/?page=3") as response:
        body = response.read().decode("utf-8")
    assert "<li><div>Sushi</div><div>Main street</div><div>(495) 000</div></li>" in body
    assert store.requests == [(10, 20)]


def test_listing_invalid_page(listing_server):
    _, base = listing_server
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(f"{base}/?page=abc")
    assert info.value.code == 400
    assert info.value.read().decode("utf-8") == "Invalid page number\n"