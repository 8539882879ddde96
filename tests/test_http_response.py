import io

from fiberweb.http_response import HttpResponse
from fiberweb.http_status import HttpStatus


def test_defaults_dump_minimal_response():
    res = HttpResponse()
    assert res.to_string() == "HTTP/1.1 200 OK\r\nconnection: close\r\n\r\n"


def test_keep_alive_and_reason_override():
    res = HttpResponse(close=False)
    res.status = HttpStatus.NOT_FOUND
    res.reason = "Gone Away"
    text = res.to_string()
    assert text.splitlines()[0] == "HTTP/1.1 404 Gone Away"
    assert "connection: keep-alive\r\n" in text


def test_default_reason_from_status():
    res = HttpResponse(status=HttpStatus.NOT_FOUND)
    assert res.to_string().startswith("HTTP/1.1 404 Not Found\r\n")


def test_headers_and_body():
    res = HttpResponse()
    res.set_header("Content-Type", "text/html")
    res.set_header("Connection", "ignored")
    res.body = "hello"
    text = res.to_string()
    assert "Content-Type: text/html\r\n" in text
    assert "ignored" not in text
    assert text.endswith(f"content-length: {len('hello')}\r\n\r\nhello")


def test_header_access_is_case_insensitive():
    res = HttpResponse()
    res.set_header("X-Count", "12")
    assert res.get_header("x-count") == "12"
    assert res.get_header("missing", "dflt") == "dflt"
    res.del_header("X-COUNT")
    assert res.get_header("X-Count") == ""


def test_typed_header_access():
    res = HttpResponse()
    res.set_header("content-length", "42")
    res.set_header("bad", "abc")
    assert res.get_header_as("Content-Length", 0) == 42
    assert res.get_header_as("bad", 7) == 7
    assert res.check_get_header_as("content-length", 0) == (True, 42)
    assert res.check_get_header_as("bad", 3) == (False, 3)


def test_dump_returns_stream():
    res = HttpResponse(version=0x10)
    buf = io.StringIO()
    assert res.dump(buf) is buf
    assert buf.getvalue() == str(res)
    assert buf.getvalue().startswith("HTTP/1.0 ")