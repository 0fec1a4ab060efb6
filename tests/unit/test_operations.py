"""Unit tests for operation models."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from fleetql.constants.sql import FilterOperator, QueryType
from fleetql.operations import Condition, Delete, Insert, Select, Update, Upsert


class TestCondition:

    def test_in_value_is_normalized_to_list(self):
        condition = Condition(column="zone", operator=FilterOperator.IN, value=("n", "s"))
        assert condition.value == ["n", "s"]

    def test_in_rejects_scalar(self):
        with pytest.raises(PydanticValidationError):
            Condition(column="zone", operator=FilterOperator.IN, value="north")

    def test_other_operators_keep_value(self):
        condition = Condition(column="fare", operator=FilterOperator.GT, value=(1, 2))
        assert condition.value == (1, 2)


class TestOperations:

    def test_select_defaults(self):
        operation = Select(table="drivers")
        assert operation.operation_type == QueryType.SELECT
        assert operation.columns == "*"
        assert operation.conditions == []
        assert operation.order_by is None
        assert operation.limit is None

    def test_select_rejects_negative_limit(self):
        with pytest.raises(PydanticValidationError):
            Select(table="drivers", limit=-1)

    def test_rows_must_share_keys(self):
        with pytest.raises(PydanticValidationError):
            Insert(table="t", rows=[{"a": 1}, {"a": 2, "b": 3}])

    def test_rows_cannot_be_empty(self):
        with pytest.raises(PydanticValidationError):
            Insert(table="t", rows=[])

    def test_column_names_follow_first_row(self):
        operation = Insert(table="t", rows=[{"b": 1, "a": 2}, {"a": 3, "b": 4}])
        assert operation.column_names == ["b", "a"]

    def test_upsert_requires_conflict_columns(self):
        with pytest.raises(PydanticValidationError):
            Upsert(table="t", rows=[{"a": 1}], conflict_columns=[])

    def test_update_requires_values(self):
        with pytest.raises(PydanticValidationError):
            Update(table="t", values={})

    def test_operation_type_is_frozen(self):
        operation = Delete(table="t")
        with pytest.raises(PydanticValidationError):
            operation.operation_type = QueryType.SELECT

    def test_telemetry_fields(self):
        operation = Delete(
            table="trips",
            conditions=[Condition(column="id", operator=FilterOperator.EQ, value=1)],
        )
        assert operation.telemetry_fields() == {
            "operation.type": "DELETE",
            "operation.table": "trips",
            "operation.conditions": "1",
        }

    def test_to_dict_emits_enum_values(self):
        data = Select(table="t", conditions=[
            Condition(column="a", operator=FilterOperator.NEQ, value=1),
        ]).to_dict()
        assert data["operation_type"] == "SELECT"
        assert data["conditions"][0]["operator"] == "!="
