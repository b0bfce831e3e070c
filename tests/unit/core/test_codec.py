"""Tests for the JSON codec."""

import pytest

from composablestate.core.codec import Codec, JsonCodec


class TestJsonCodec:
    """Tests for JsonCodec."""

    def test_implements_codec_protocol(self):
        assert isinstance(JsonCodec(), Codec)

    def test_decode_object(self):
        assert JsonCodec().decode(b'{"count": 1}') == {"count": 1}

    def test_decode_accepts_bytearray(self):
        assert JsonCodec().decode(bytearray(b"[1,2]")) == [1, 2]

    def test_encode_is_canonical(self):
        codec = JsonCodec()
        assert codec.encode({"b": 1, "a": [1, 2]}) == b'{"a":[1,2],"b":1}'

    def test_equal_values_encode_equal(self):
        codec = JsonCodec()
        assert codec.encode({"x": 1, "y": 2}) == codec.encode({"y": 2, "x": 1})

    def test_encode_keeps_unicode(self):
        assert JsonCodec().encode({"name": "é"}) == '{"name":"é"}'.encode("utf-8")

    def test_malformed_json_raises_value_error(self):
        with pytest.raises(ValueError):
            JsonCodec().decode(b"{not json")

    def test_invalid_utf8_raises_value_error(self):
        with pytest.raises(ValueError):
            JsonCodec().decode(b"\xff\xfe")

    def test_empty_bytes_raise_value_error(self):
        with pytest.raises(ValueError):
            JsonCodec().decode(b"")

    def test_encode_rejects_nan(self):
        with pytest.raises(ValueError):
            JsonCodec().encode({"x": float("nan")})

    def test_encode_rejects_unknown_types(self):
        with pytest.raises(TypeError):
            JsonCodec().encode({"x": object()})

    @pytest.mark.parametrize("token", [b"NaN", b"Infinity", b"-Infinity"])
    def test_decode_rejects_non_standard_constants(self, token):
        with pytest.raises(ValueError, match="non-standard"):
            JsonCodec().decode(b'{"value":' + token + b"}")

    def test_every_decoded_value_re_encodes(self):
        codec = JsonCodec()
        data = b'{"value":1.5e300,"items":[null,true,-0.0]}'
        assert codec.decode(codec.encode(codec.decode(data))) == codec.decode(data)

    def test_deep_nesting_raises_value_error(self):
        with pytest.raises(ValueError, match="too deep"):
            JsonCodec().decode(b"[" * 200_000)
