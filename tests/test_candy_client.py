import threading

import pytest

from piscine.candy import Order
from piscine.candy_client import format_response, main, send_order
from piscine.candy_server import make_server


@pytest.fixture(autouse=True)
def no_proxies(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def base_url():
    server = make_server("127.0.0.1", 0, None, None, False)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield f"http://127.0.0.1:{server.server_address[1]}"
    server.shutdown()
    server.server_close()
    thread.join(5)


def test_format_success():
    assert format_response({"thanks": "Thank you!", "change": 5}) == "Thank you! Your change is 5"


def test_format_success_without_change():
    assert format_response({"thanks": "Thank you!"}) == "Thank you! Your change is 0"


def test_format_error():
    assert format_response({"error": "Invalid candy type"}) == "Error: Invalid candy type"


def test_send_order(base_url):
    payload = send_order(f"{base_url}/buy_candy", Order(money=50, candy_type="CE", candy_count=3))
    assert payload == {"thanks": "Thank you!", "change": 20}


def test_send_order_error_reply(base_url):
    payload = send_order(f"{base_url}/buy_candy", Order(money=0, candy_type="XX", candy_count=1))
    assert payload == {"error": "Invalid candy type"}


def test_send_order_non_json_reply(base_url):
    with pytest.raises(ValueError, match="Failed to unmarshal response"):
        send_order(f"{base_url}/nowhere", Order(money=1, candy_type="CE", candy_count=1))


def test_main_prints_result(base_url, tmp_path, capsys):
    ca = tmp_path / "ca.pem"
    ca.write_text("placeholder")
    code = main(["-k", "CE", "-c", "3", "-m", "50", "--url", f"{base_url}/buy_candy", "--ca", str(ca)])
    assert code == 0
    assert capsys.readouterr().out.strip() == "Thank you! Your change is 20"


def test_main_missing_ca(tmp_path, capsys):
    assert main(["--ca", str(tmp_path / "missing.pem")]) == 1
    assert "Reading CA certificate failed" in capsys.readouterr().err