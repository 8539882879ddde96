from fiberweb.fields import CaseInsensitiveDict, check_get_as, get_as


def test_lookup_ignores_case():
    fields = CaseInsensitiveDict()
    fields["Content-Type"] = "text/html"
    assert fields["content-type"] == "text/html"
    assert "CONTENT-TYPE" in fields
    assert fields.get("missing", "dflt") == "dflt"


def test_first_spelling_kept_value_replaced():
    fields = CaseInsensitiveDict()
    fields["Host"] = "a"
    fields["HOST"] = "b"
    assert list(fields.items()) == [("Host", "b")]
    assert len(fields) == 1


def test_iteration_order_is_case_insensitive():
    fields = CaseInsensitiveDict({"b": "1", "A": "2", "c": "3"})
    assert list(fields) == ["A", "b", "c"]


def test_delete_any_case():
    fields = CaseInsensitiveDict(Accept="x")
    del fields["ACCEPT"]
    assert len(fields) == 0
    assert "accept" not in fields


def test_copy_is_independent():
    fields = CaseInsensitiveDict(a="1")
    other = fields.copy()
    other["A"] = "2"
    assert fields["a"] == "1"
    assert other["a"] == "2"


def test_non_string_key_missing():
    fields = CaseInsensitiveDict(a="1")
    assert 5 not in fields
    assert fields.get(5) is None


def test_get_as_int():
    fields = CaseInsensitiveDict({"content-length": "42"})
    assert get_as(fields, "Content-Length", 0) == 42


def test_get_as_bad_value_gives_default():
    fields = CaseInsensitiveDict({"n": "4x", "s": " 7"})
    assert get_as(fields, "n", 3) == 3
    assert get_as(fields, "s", 3) == 3


def test_get_as_missing_gives_default():
    assert get_as(CaseInsensitiveDict(), "n", 9) == 9


def test_get_as_string_and_float_and_bool():
    fields = CaseInsensitiveDict({"a": "hello", "f": "1.5", "b": "1", "c": "yes"})
    assert get_as(fields, "a") == "hello"
    assert get_as(fields, "f", 0.0) == 1.5
    assert get_as(fields, "b", False) is True
    assert get_as(fields, "c", False) is False


def test_check_get_as():
    fields = CaseInsensitiveDict({"n": "12", "bad": "x"})
    assert check_get_as(fields, "N", 0) == (True, 12)
    assert check_get_as(fields, "bad", 5) == (False, 5)
    assert check_get_as(fields, "none", 5) == (False, 5)