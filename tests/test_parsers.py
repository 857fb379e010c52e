"""Tests for the request parameter parsers."""

import pytest

from feature_params.errors import InvalidParameterValue
from feature_params.models import (
    Extent,
    Ordering,
    PropertiesEmpty,
    PropertiesUnset,
    PropertyNames,
    TransformFunction,
)
from feature_params.parsers import (
    extract_single_args,
    parse_bbox,
    parse_int,
    parse_limit,
    parse_order_by,
    parse_properties,
    parse_request_params,
    query_args_from_url,
)


class TestExtractSingleArgs:
    """Test argument normalization."""

    def test_names_are_lowercased(self):
        values = extract_single_args({"LIMIT": ["5"], "BBox": ["1,2,3,4"]})
        assert values == {"limit": "5", "bbox": "1,2,3,4"}

    def test_first_value_wins(self):
        values = extract_single_args({"limit": ["5", "6"]})
        assert values["limit"] == "5"

    def test_first_occurrence_of_name_wins(self):
        values = extract_single_args({"Status": ["open"], "STATUS": ["closed"]})
        assert values == {"status": "open"}

    def test_values_keep_case(self):
        values = extract_single_args({"Name": ["Main Street"]})
        assert values["name"] == "Main Street"

    def test_plain_string_values(self):
        assert extract_single_args({"limit": "7"}) == {"limit": "7"}

    def test_empty_value_list(self):
        assert extract_single_args({"properties": []}) == {"properties": ""}

    def test_no_arguments(self):
        assert extract_single_args({}) == {}


class TestQueryArgsFromUrl:
    """Test query string splitting."""

    def test_full_url(self):
        args = query_args_from_url("http://localhost/api/items?limit=5&limit=6&name=x")
        assert args == {"limit": ["5", "6"], "name": ["x"]}

    def test_blank_values_kept(self):
        args = query_args_from_url("http://localhost/api/items?properties=")
        assert args == {"properties": [""]}

    def test_bare_query_string(self):
        assert query_args_from_url("bbox=1,2,3,4") == {"bbox": ["1,2,3,4"]}

    def test_no_query(self):
        assert query_args_from_url("http://localhost/api/items") == {}

    def test_relative_path_without_query(self):
        assert query_args_from_url("/api/items") == {}

    def test_relative_path_with_query(self):
        assert query_args_from_url("/api/items?limit=5") == {"limit": ["5"]}


class TestParseInt:
    """Test the bounded integer parser."""

    def test_value_in_range(self):
        assert parse_int({"offset": "42"}, "offset", 0, 100, 0) == 42

    def test_bounds_are_inclusive(self):
        assert parse_int({"offset": "0"}, "offset", 0, 100, 7) == 0
        assert parse_int({"offset": "100"}, "offset", 0, 100, 7) == 100

    def test_below_min_clamps_to_min(self):
        assert parse_int({"offset": "-5"}, "offset", 0, 100, 0) == 0

    def test_above_max_clamps_to_max(self):
        assert parse_int({"offset": "5000"}, "offset", 0, 100, 0) == 100

    def test_absent_returns_default(self):
        assert parse_int({}, "precision", 0, 20, -1) == -1

    def test_empty_returns_default(self):
        assert parse_int({"precision": ""}, "precision", 0, 20, -1) == -1

    def test_explicit_sign(self):
        assert parse_int({"offset": "+5"}, "offset", 0, 100, 0) == 5

    @pytest.mark.parametrize("raw", ["abc", "1.5", "1e3", " 5", "5 ", "0x10", "--1"])
    def test_non_integer_rejected(self, raw):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_int({"offset": raw}, "offset", 0, 100, 0)
        assert exc_info.value.parameter == "offset"
        assert exc_info.value.value == raw

    @pytest.mark.parametrize("raw", [
        "9" * 5000,
        "1" * 5000,
        "9223372036854775808",
        "-9223372036854775809",
        "99999999999999999999",
    ])
    def test_outside_int64_rejected(self, raw):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_int({"offset": raw}, "offset", 0, 100, 0)
        assert exc_info.value.parameter == "offset"
        assert exc_info.value.value == raw

    def test_int64_bounds_are_clamped(self):
        assert parse_int({"offset": "9223372036854775807"}, "offset", 0, 100, 0) == 100
        assert parse_int({"offset": "-9223372036854775808"}, "offset", 0, 100, 0) == 0

    def test_leading_zeros(self):
        assert parse_int({"offset": "0" * 5000 + "42"}, "offset", 0, 100, 0) == 42
        assert parse_int({"offset": "-000"}, "offset", 0, 100, 7) == 0


class TestParseLimit:
    """Test the limit parser's asymmetric clamping."""

    def test_absent_returns_default(self, config):
        assert parse_limit({}, config) == 10

    def test_empty_returns_default(self, config):
        assert parse_limit({"limit": ""}, config) == 10

    def test_value_in_range(self, config):
        assert parse_limit({"limit": "50"}, config) == 50

    def test_zero_is_kept(self, config):
        assert parse_limit({"limit": "0"}, config) == 0

    def test_above_max_clamps_to_max(self, config):
        assert parse_limit({"limit": "5000"}, config) == 1000

    def test_negative_clamps_to_max(self, config):
        assert parse_limit({"limit": "-5"}, config) == 1000

    def test_non_integer_rejected(self, config):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_limit({"limit": "ten"}, config)
        assert exc_info.value.parameter == "limit"
        assert exc_info.value.value == "ten"

    @pytest.mark.parametrize("raw", ["9" * 5000, "99999999999999999999", "-9223372036854775809"])
    def test_outside_int64_rejected(self, config, raw):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_limit({"limit": raw}, config)
        assert exc_info.value.parameter == "limit"

    def test_int64_max_clamps_to_max(self, config):
        assert parse_limit({"limit": "9223372036854775807"}, config) == 1000


class TestParseBbox:
    """Test the bounding box parser."""

    def test_four_numbers(self):
        assert parse_bbox({"bbox": "1,2,3,4"}) == Extent(minx=1, miny=2, maxx=3, maxy=4)

    def test_decimals_and_negatives(self):
        bbox = parse_bbox({"bbox": "-123.5,45.25,-122.0,46"})
        assert bbox.as_list() == [-123.5, 45.25, -122.0, 46.0]

    def test_inverted_box_is_accepted(self):
        bbox = parse_bbox({"bbox": "10,10,0,0"})
        assert bbox.minx == 10
        assert bbox.maxx == 0

    def test_absent(self):
        assert parse_bbox({}) is None

    def test_exponent_and_infinity(self):
        bbox = parse_bbox({"bbox": "1e2,.5,-Infinity,inf"})
        assert bbox.as_list() == [100.0, 0.5, float("-inf"), float("inf")]

    @pytest.mark.parametrize("raw", [
        "1,2,3",
        "1,2,3,4,5",
        "a,2,3,4",
        "1,2,,4",
        "1, 2, 3, 4",
        "1_0,2,3,4",
        "١,2,3,4",
        "0x10,2,3,4",
        "1e400,2,3,4",
        "+nan,2,3,4",
    ])
    def test_malformed_rejected_with_whole_value(self, raw):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_bbox({"bbox": raw})
        assert exc_info.value.parameter == "bbox"
        assert exc_info.value.value == raw

    def test_bbox_wkt(self):
        bbox = Extent(minx=0, miny=1, maxx=2, maxy=3)
        assert bbox.bbox_wkt == (
            "SRID=4326;POLYGON((0.0 1.0,2.0 1.0,2.0 3.0,0.0 3.0,0.0 1.0))"
        )


class TestParseProperties:
    """Test the three-valued properties parser."""

    def test_absent_is_unset(self):
        assert parse_properties({}) == PropertiesUnset()

    def test_empty_is_empty(self):
        assert parse_properties({"properties": ""}) == PropertiesEmpty()

    def test_unset_and_empty_differ(self):
        assert parse_properties({}) != parse_properties({"properties": ""})

    def test_names_kept_raw(self):
        selection = parse_properties({"properties": "Name,FOO,Name"})
        assert selection == PropertyNames(names=["Name", "FOO", "Name"])


class TestParseOrderBy:
    """Test the ordering parser."""

    def test_absent(self):
        assert parse_order_by({}) == []

    def test_name_only_is_ascending(self):
        assert parse_order_by({"orderby": "name"}) == [Ordering(name="name", is_desc=False)]

    def test_descending(self):
        assert parse_order_by({"orderby": "name:d"}) == [Ordering(name="name", is_desc=True)]

    def test_explicit_ascending(self):
        assert parse_order_by({"orderby": "name:a"}) == [Ordering(name="name", is_desc=False)]

    def test_value_is_lowercased(self):
        assert parse_order_by({"orderby": "Name:D"}) == [Ordering(name="name", is_desc=True)]

    def test_invalid_direction_rejected(self):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_order_by({"orderby": "name:x"})
        assert exc_info.value.parameter == "orderby"
        assert exc_info.value.value == "x"

    def test_comma_is_not_a_key_separator(self):
        assert parse_order_by({"orderby": "name,lanes"}) == [
            Ordering(name="name,lanes", is_desc=False)
        ]


class TestParseRequestParams:
    """Test the full request parse."""

    def test_defaults(self, config, whitelist):
        params = parse_request_params({}, config, whitelist)
        assert params.limit == 10
        assert params.offset == 0
        assert params.bbox is None
        assert params.properties == PropertiesUnset()
        assert params.order_by == []
        assert params.precision == -1
        assert params.transform_funs is None
        assert params.values == {}

    def test_all_parameters(self, config, whitelist):
        params = parse_request_params(
            {
                "Limit": ["20"],
                "offset": ["40"],
                "bbox": ["1,2,3,4"],
                "properties": ["name,status"],
                "orderBy": ["lanes:d"],
                "precision": ["5"],
                "transform": ["centroid"],
                "status": ["open"],
            },
            config,
            whitelist,
        )
        assert params.limit == 20
        assert params.offset == 40
        assert params.bbox == Extent(minx=1, miny=2, maxx=3, maxy=4)
        assert params.properties == PropertyNames(names=["name", "status"])
        assert params.order_by == [Ordering(name="lanes", is_desc=True)]
        assert params.precision == 5
        assert params.transform_funs == [TransformFunction(name="ST_Centroid", args=[])]
        assert params.values["status"] == "open"

    def test_offset_clamped_to_limit_max(self, config, whitelist):
        params = parse_request_params({"offset": ["99999"]}, config, whitelist)
        assert params.offset == 1000

    def test_overlong_offset_rejected(self, config, whitelist):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_request_params({"offset": ["1" * 5000]}, config, whitelist)
        assert exc_info.value.parameter == "offset"

    def test_precision_clamped(self, config, whitelist):
        assert parse_request_params({"precision": ["25"]}, config, whitelist).precision == 20
        assert parse_request_params({"precision": ["-3"]}, config, whitelist).precision == 0

    def test_first_error_aborts(self, config, whitelist):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_request_params(
                {"limit": ["abc"], "bbox": ["x"], "orderby": ["a:q"]}, config, whitelist
            )
        assert exc_info.value.parameter == "limit"

    def test_unknown_transform_rejects_request(self, config, whitelist):
        with pytest.raises(InvalidParameterValue) as exc_info:
            parse_request_params({"transform": ["nonexistent"]}, config, whitelist)
        assert exc_info.value.parameter == "transform"

    def test_whitelist_built_from_config(self, config):
        params = parse_request_params({"transform": ["simplify,0.5"]}, config)
        assert params.transform_funs == [TransformFunction(name="ST_Simplify", args=["0.5"])]

    def test_parse_is_repeatable(self, config, whitelist):
        args = {"limit": ["5"], "properties": [""], "bbox": ["0,0,1,1"]}
        assert parse_request_params(args, config, whitelist) == \
            parse_request_params(args, config, whitelist)
