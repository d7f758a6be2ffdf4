"""Unit tests for path and query percent-encoding."""

import pytest

from imgix_url.core.encoding import (
    encode_component,
    encode_path,
    encode_query,
    is_encodable,
    is_proxy_path,
)


class TestEncodePath:
    """Tests for encode_path."""

    def test_plain_path_unchanged(self):
        assert encode_path("images/cat.jpg") == "images/cat.jpg"

    def test_space_encoded(self):
        assert encode_path("my image.jpg") == "my%20image.jpg"

    def test_slashes_between_segments_kept(self):
        assert encode_path("a b/c d/e.png") == "a%20b/c%20d/e.png"

    @pytest.mark.parametrize(
        "raw, encoded",
        [
            ("what?.jpg", "what%3F.jpg"),
            ("tag#1.jpg", "tag%231.jpg"),
            ("100%.jpg", "100%25.jpg"),
            ("a&b=c+d.jpg", "a%26b%3Dc%2Bd.jpg"),
        ],
    )
    def test_reserved_characters_encoded(self, raw, encoded):
        assert encode_path(raw) == encoded

    def test_non_ascii_encoded_as_utf8(self):
        assert encode_path("café.jpg") == "caf%C3%A9.jpg"

    def test_segment_safe_characters_kept(self):
        assert encode_path("user@host:1/(a),b.jpg") == "user@host:1/(a),b.jpg"

    def test_unreserved_characters_kept(self):
        assert encode_path("a-b_c.d~e.jpg") == "a-b_c.d~e.jpg"

    def test_proxy_path_encoded_as_one_component(self):
        """An absolute URL path keeps none of its own delimiters."""
        encoded = encode_path("http://example.org/a b.jpg?x=1")

        assert encoded == "http%3A%2F%2Fexample.org%2Fa%20b.jpg%3Fx%3D1"
        assert "/" not in encoded

    def test_is_proxy_path(self):
        assert is_proxy_path("https://example.org/a.jpg") is True
        assert is_proxy_path("HTTP://example.org/a.jpg") is True
        assert is_proxy_path("images/http.jpg") is False


class TestEncodeQuery:
    """Tests for encode_component and encode_query."""

    def test_space_is_percent_20(self):
        assert encode_component("Hello World") == "Hello%20World"

    def test_ampersand_and_equals(self):
        assert encode_component("a&b=c") == "a%26b%3Dc"

    def test_plus_encoded(self):
        assert encode_component("a+b") == "a%2Bb"

    def test_comma_and_colon_encoded(self):
        assert encode_component("format,compress") == "format%2Ccompress"
        assert encode_component("16:9") == "16%3A9"

    def test_url_value(self):
        assert encode_component("https://x.org/a.png") == "https%3A%2F%2Fx.org%2Fa.png"

    def test_non_ascii(self):
        assert encode_component("ü") == "%C3%BC"

    def test_join_pairs(self):
        assert encode_query([("h", "50"), ("w", "100")]) == "h=50&w=100"

    def test_join_preserves_given_order(self):
        assert encode_query([("w", "100"), ("h", "50")]) == "w=100&h=50"

    def test_empty(self):
        assert encode_query([]) == ""

    def test_key_with_dash(self):
        assert encode_query([("fp-x", "0.5")]) == "fp-x=0.5"


class TestIsEncodable:
    """Tests for is_encodable."""

    def test_ascii_and_non_ascii(self):
        assert is_encodable("cat.jpg") is True
        assert is_encodable("café ü 猫") is True

    @pytest.mark.parametrize("text", ["\ud800", "a\udcffb"])
    def test_lone_surrogates(self, text):
        assert is_encodable(text) is False
