"""
Unit tests for asa_metadata_codec.validation.

Tests cover:
- decode_metadata_json / encode_metadata_json
- ARC-3 schema checks
- ARC-3 properties checks for ARC-20 / ARC-62
"""

from typing import Any

import pytest

from asa_metadata_codec.errors import (
    InvalidArc3PropertiesError,
    MetadataArc3Error,
    MetadataEncodingError,
)
from asa_metadata_codec.validation import (
    decode_metadata_json,
    encode_metadata_json,
    is_arc3_metadata,
    is_positive_uint64,
    validate_arc3_properties,
    validate_arc3_schema,
)


class TestDecodeMetadataJson:
    """Tests for decode_metadata_json."""

    def test_empty_is_empty_object(self) -> None:
        """Test empty bytes decode to an empty dict."""
        assert decode_metadata_json(b"") == {}

    def test_object(self) -> None:
        """Test a JSON object decodes."""
        assert decode_metadata_json(b'{"name":"Test"}') == {"name": "Test"}

    def test_unicode(self) -> None:
        """Test non-ASCII UTF-8 content decodes."""
        assert decode_metadata_json('{"name":"café"}'.encode()) == {"name": "café"}

    def test_bom_rejected(self) -> None:
        """Test a leading UTF-8 BOM is rejected."""
        with pytest.raises(MetadataEncodingError, match="BOM"):
            decode_metadata_json(b"\xef\xbb\xbf{}")

    def test_invalid_utf8(self) -> None:
        """Test invalid UTF-8 is rejected."""
        with pytest.raises(MetadataEncodingError, match="not valid UTF-8"):
            decode_metadata_json(b"\xff\xfe\xfd")

    def test_invalid_json(self) -> None:
        """Test malformed JSON is rejected."""
        with pytest.raises(MetadataEncodingError, match="not valid JSON"):
            decode_metadata_json(b"{invalid json}")

    def test_nan_rejected(self) -> None:
        """Test non-standard NaN literals are rejected."""
        with pytest.raises(MetadataEncodingError, match="not valid JSON"):
            decode_metadata_json(b'{"x": NaN}')

    def test_deeply_nested_rejected(self) -> None:
        """Test nesting beyond the parser recursion limit is an encoding error."""
        data = b'{"a":' + b"[" * 100_000 + b"]" * 100_000 + b"}"
        with pytest.raises(MetadataEncodingError, match="not valid JSON"):
            decode_metadata_json(data)

    @pytest.mark.parametrize("data", [b"[]", b'"s"', b"42", b"null"])
    def test_non_object_rejected(self, data: bytes) -> None:
        """Test top-level values other than objects are rejected."""
        with pytest.raises(MetadataEncodingError, match="MUST be an object"):
            decode_metadata_json(data)

    def test_error_is_value_error(self) -> None:
        """Test encoding errors are ValueErrors."""
        with pytest.raises(ValueError):
            decode_metadata_json(b"[1]")


class TestEncodeMetadataJson:
    """Tests for encode_metadata_json."""

    def test_compact(self) -> None:
        """Test compact separators and key order."""
        assert encode_metadata_json({"name": "Test", "n": 1}) == b'{"name":"Test","n":1}'

    def test_non_ascii_kept(self) -> None:
        """Test non-ASCII characters are emitted as UTF-8."""
        assert encode_metadata_json({"name": "café"}) == '{"name":"café"}'.encode()

    def test_empty(self) -> None:
        """Test empty object encodes as {}."""
        assert encode_metadata_json({}) == b"{}"

    def test_not_serializable(self) -> None:
        """Test non-JSON values raise."""
        with pytest.raises(MetadataEncodingError, match="not JSON-serializable"):
            encode_metadata_json({"x": object()})

    def test_nan_rejected(self) -> None:
        """Test NaN floats raise."""
        with pytest.raises(MetadataEncodingError):
            encode_metadata_json({"x": float("nan")})

    def test_not_mapping(self) -> None:
        """Test non-mapping input raises."""
        with pytest.raises(MetadataEncodingError, match="MUST be an object"):
            encode_metadata_json([1, 2])  # type: ignore[arg-type]

    def test_decode_encode(self) -> None:
        """Test encoded bytes decode back to the same object."""
        obj = {"name": "Test", "properties": {"a": [1, 2, {"b": None}]}}
        assert decode_metadata_json(encode_metadata_json(obj)) == obj


class TestValidateArc3Schema:
    """Tests for validate_arc3_schema."""

    def test_valid(self) -> None:
        """Test a representative valid ARC-3 document."""
        validate_arc3_schema(
            {
                "name": "My NFT",
                "decimals": 0,
                "description": "desc",
                "image": "ipfs://x",
                "properties": {"k": "v"},
                "localization": {
                    "uri": "ipfs://x/{locale}.json",
                    "default": "en",
                    "locales": ["en", "es"],
                },
                "custom_field": 123,
            }
        )

    def test_empty_is_valid(self) -> None:
        """Test an empty object passes."""
        validate_arc3_schema({})

    @pytest.mark.parametrize(
        ("obj", "match"),
        [
            ({"name": 123}, "'name' must be a string"),
            ({"image_mimetype": None}, "'image_mimetype' must be a string"),
            ({"decimals": "0"}, "'decimals' must be an integer"),
            ({"decimals": True}, "'decimals' must be an integer"),
            ({"decimals": -1}, "'decimals' must be non-negative"),
            ({"properties": []}, "'properties' must be an object"),
            ({"localization": "en"}, "'localization' must be an object"),
            ({"localization": {"uri": "u", "default": "en"}}, "'locales' field"),
            (
                {"localization": {"uri": 1, "default": "en", "locales": []}},
                "localization.uri",
            ),
            (
                {"localization": {"uri": "u", "default": "en", "locales": "en"}},
                "must be an array",
            ),
            (
                {"localization": {"uri": "u", "default": "en", "locales": [1]}},
                "entries must be strings",
            ),
        ],
    )
    def test_invalid(self, obj: dict[str, Any], match: str) -> None:
        """Test each malformed field is reported."""
        with pytest.raises(MetadataArc3Error, match=match):
            validate_arc3_schema(obj)


class TestArc3Detection:
    """Tests for is_arc3_metadata / is_positive_uint64."""

    @pytest.mark.parametrize(
        "obj", [{"decimals": 0}, {"properties": {}}, {"localization": {}}]
    )
    def test_indicator_fields(self, obj: dict[str, Any]) -> None:
        """Test ARC-3 specific fields mark the document as ARC-3."""
        assert is_arc3_metadata(obj)

    def test_generic_fields_only(self) -> None:
        """Test generic fields alone do not mark the document as ARC-3."""
        assert not is_arc3_metadata({"name": "x", "description": "y"})

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(1, True), (2**64 - 1, True), (0, False), (2**64, False), (True, False), ("1", False)],
    )
    def test_is_positive_uint64(self, value: object, expected: bool) -> None:
        """Test positive uint64 detection."""
        assert is_positive_uint64(value) is expected


class TestValidateArc3Properties:
    """Tests for validate_arc3_properties."""

    def test_valid_arc20(self) -> None:
        """Test a valid ARC-20 application reference."""
        validate_arc3_properties(
            {"properties": {"arc-20": {"application-id": 123}}}, "arc-20"
        )

    def test_missing_properties(self) -> None:
        """Test missing properties raise."""
        with pytest.raises(InvalidArc3PropertiesError, match="ARC-62 metadata"):
            validate_arc3_properties({}, "arc-62")

    def test_missing_arc_key(self) -> None:
        """Test a missing ARC entry raises."""
        with pytest.raises(InvalidArc3PropertiesError, match="must be an object"):
            validate_arc3_properties({"properties": {}}, "arc-20")

    @pytest.mark.parametrize("app_id", [0, -1, "123", None, 2**64])
    def test_invalid_application_id(self, app_id: object) -> None:
        """Test invalid application ids raise."""
        with pytest.raises(InvalidArc3PropertiesError, match="positive uint64"):
            validate_arc3_properties(
                {"properties": {"arc-62": {"application-id": app_id}}}, "arc-62"
            )

    def test_error_is_arc3_error(self) -> None:
        """Test properties errors are ARC-3 errors."""
        assert issubclass(InvalidArc3PropertiesError, MetadataArc3Error)
