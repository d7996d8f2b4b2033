from team_pulse.utils.misc_utils import clean_text, get_path


class TestGetPath:
    def test_reads_nested_value(self):
        data = {"a": [{"b": "value"}]}
        assert get_path(data, ("a", 0, "b")) == "value"

    def test_missing_key_returns_default(self):
        assert get_path({"a": []}, ("a", 0, "b"), "fallback") == "fallback"
        assert get_path({}, ("a",), "fallback") == "fallback"

    def test_wrong_shape_returns_default(self):
        assert get_path({"a": "text"}, ("a", 0), "fallback") == "fallback"
        assert get_path([1, 2], ("a",), "fallback") == "fallback"
        assert get_path(None, ("a",), "fallback") == "fallback"

    def test_null_value_returns_default(self):
        assert get_path({"a": None}, ("a",), "fallback") == "fallback"

    def test_empty_string_is_kept(self):
        assert get_path({"a": ""}, ("a",), "fallback") == ""


def test_clean_text():
    assert clean_text("  Ana  ") == "Ana"
    assert clean_text("   ") == ""
    assert clean_text(None) == ""
