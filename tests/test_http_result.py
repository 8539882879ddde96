from fiberweb.http_response import HttpResponse
from fiberweb.http_result import HttpResult, HttpResultError


def test_error_codes_match_table():
    assert HttpResult(HttpResultError.OK, None, "x").to_string().startswith(
        "[ HttpResult result = 0,"
    )
    assert HttpResult(HttpResultError.TIMEOUT, None, "x").to_string().startswith(
        "[ HttpResult result = 6,"
    )
    assert HttpResult(
        HttpResultError.POOL_INVALID_CONNECTION, None, "x"
    ).to_string().startswith("[ HttpResult result = 9,")


def test_to_string_without_response():
    result = HttpResult(HttpResultError.TIMEOUT, None, "recv response timeout")
    text = result.to_string()
    assert text.startswith(f"[ HttpResult result = {int(HttpResultError.TIMEOUT)}, ")
    assert "error = recv response timeout" in text
    assert text.endswith("response = None]")


def test_to_string_embeds_response():
    response = HttpResponse()
    result = HttpResult(HttpResultError.OK, response, "ok")
    assert result.to_string().endswith(f"response = {response.to_string()}]")
    assert str(result) == result.to_string()


def test_fields_are_mutable():
    result = HttpResult(HttpResultError.OK, None, "ok")
    result.result = HttpResultError.CONNECT_FAIL
    result.error = "connect failed"
    assert result.result == HttpResultError.CONNECT_FAIL
    assert "error = connect failed" in result.to_string()