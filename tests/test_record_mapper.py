"""
tests/test_record_mapper.py

Unit tests for RecordMapper and the path tree it builds on.

Coverage
--------
- Mandatory fields land in the record, everything else in additional_info
- Age validation and leaf coercion
- Short and long rows
- Structural conflicts between header paths
"""

from __future__ import annotations

import pytest

from app.domain.path_tree import BranchNode, LeafNode
from app.mappers.record_mapper import RecordMapper, RowMaterializationError, coerce_leaf
from app.parsing.line_tokenizer import tokenize_line

BASE_HEADERS = ("name.firstName", "name.lastName", "age")


@pytest.fixture()
def mapper() -> RecordMapper:
    return RecordMapper()


# ---------------------------------------------------------------------------
# Path tree
# ---------------------------------------------------------------------------


class TestPathTree:
    def test_insert_creates_intermediate_branches(self) -> None:
        tree = BranchNode()
        tree.insert("a.b.c", "x")

        assert tree.to_dict() == {"a": {"b": {"c": "x"}}}
        assert isinstance(tree.children["a"], BranchNode)

    def test_siblings_share_a_branch(self) -> None:
        tree = BranchNode()
        tree.insert("address.line1", "A-563 Society")
        tree.insert("address.city", "Pune")

        assert tree.to_dict() == {"address": {"line1": "A-563 Society", "city": "Pune"}}

    def test_leaf_replaced_by_branch(self) -> None:
        tree = BranchNode()
        tree.insert("meta", "first")
        tree.insert("meta.source", "second")

        assert tree.to_dict() == {"meta": {"source": "second"}}

    def test_branch_replaced_by_leaf(self) -> None:
        tree = BranchNode()
        tree.insert("meta.source", "first")
        tree.insert("meta", "second")

        assert tree.children["meta"] == LeafNode("second")

    def test_pop_and_is_empty(self) -> None:
        tree = BranchNode()
        tree.insert("x", "1")

        assert tree.pop("x") == LeafNode("1")
        assert tree.is_empty()


# ---------------------------------------------------------------------------
# Materialization
# ---------------------------------------------------------------------------


class TestMaterialize:
    def test_mandatory_fields_only(self, mapper: RecordMapper) -> None:
        record = mapper.materialize(BASE_HEADERS, tokenize_line("Rohit,Prasad,35"))

        assert record.as_dict() == {"name": {"firstName": "Rohit", "lastName": "Prasad"}, "age": 35}
        assert record.additional_info is None
        assert record.full_name == "Rohit Prasad"

    def test_optional_fields_are_nested_in_additional_info(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "address.line1", "address.city", "gender")
        record = mapper.materialize(
            headers,
            tokenize_line('Rohit,Prasad,35,"A-563 Society, Rakshak Nagar",Pune,male'),
        )

        assert record.additional_info == {
            "address": {"line1": "A-563 Society, Rakshak Nagar", "city": "Pune"},
            "gender": "male",
        }

    def test_extra_name_fields_go_to_additional_info(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "name.middleName")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35", "K"])

        assert record.as_dict()["name"] == {"firstName": "Rohit", "lastName": "Prasad"}
        assert record.additional_info == {"name": {"middleName": "K"}}

    def test_header_order_does_not_matter(self, mapper: RecordMapper) -> None:
        record = mapper.materialize(("age", "name.lastName", "name.firstName"), ["41", "Rao", "Asha"])

        assert (record.first_name, record.last_name, record.age) == ("Asha", "Rao", 41)

    def test_values_beyond_headers_are_ignored(self, mapper: RecordMapper) -> None:
        record = mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad", "35", "stray"])

        assert record.additional_info is None

    def test_missing_optional_value_is_absent(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "address.city")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35"])

        assert record.additional_info is None

    def test_empty_optional_value_is_kept_as_string(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "gender")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35", ""])

        assert record.additional_info == {"gender": ""}

    def test_missing_mandatory_value_fails(self, mapper: RecordMapper) -> None:
        with pytest.raises(RowMaterializationError, match="Missing value for mandatory field: age"):
            mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad"])

    def test_conflicting_paths_keep_the_later_value(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "meta", "meta.source")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35", "raw", "import"])

        assert record.additional_info == {"meta": {"source": "import"}}


# ---------------------------------------------------------------------------
# Age validation and coercion
# ---------------------------------------------------------------------------


class TestAge:
    @pytest.mark.parametrize("raw", ["-10", "pi", "", "3.5", "1e3", "thirty"])
    def test_invalid_age_is_rejected_with_raw_value(self, mapper: RecordMapper, raw: str) -> None:
        with pytest.raises(RowMaterializationError) as exc_info:
            mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad", raw])

        message = str(exc_info.value)
        assert f'"{raw}"' in message
        assert "non-negative integer" in message
        assert exc_info.value.field == "age"
        assert exc_info.value.value == raw

    @pytest.mark.parametrize("raw, expected", [("0", 0), ("35", 35), ("+7", 7), ("007", 7)])
    def test_valid_age_becomes_int(self, mapper: RecordMapper, raw: str, expected: int) -> None:
        record = mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad", raw])

        assert record.age == expected
        assert isinstance(record.age, int)

    def test_nested_age_leaf_is_coerced(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "spouse.age")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35", "33"])

        assert record.additional_info == {"spouse": {"age": 33}}

    def test_non_numeric_nested_age_stays_string(self, mapper: RecordMapper) -> None:
        headers = (*BASE_HEADERS, "spouse.age")
        record = mapper.materialize(headers, ["Rohit", "Prasad", "35", "unknown"])

        assert record.additional_info == {"spouse": {"age": "unknown"}}

    def test_other_numeric_leaves_stay_strings(self) -> None:
        assert coerce_leaf("height", "180") == "180"
        assert coerce_leaf("stats.ages", "3") == "3"
        assert coerce_leaf("child.age", "3") == 3

    @pytest.mark.parametrize("raw", ["2147483648", "99999999999"])
    def test_age_beyond_integer_column_is_rejected(self, mapper: RecordMapper, raw: str) -> None:
        with pytest.raises(RowMaterializationError, match="must not exceed 2147483647") as exc_info:
            mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad", raw])

        assert exc_info.value.value == raw

    def test_largest_integer_column_age_is_accepted(self, mapper: RecordMapper) -> None:
        record = mapper.materialize(BASE_HEADERS, ["Rohit", "Prasad", "2147483647"])

        assert record.age == 2147483647
