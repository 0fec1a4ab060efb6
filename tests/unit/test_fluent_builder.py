"""Unit tests for the fluent query builder."""

import asyncio

import pytest

from fleetql.common.exceptions import ErrorCode, FleetQLError, ValidationError
from fleetql.constants.sql import QueryType
from fleetql.types import DriverResult, QueryResult


def run(awaitable):
    async def _await():
        return await awaitable
    return asyncio.run(_await())


class TestChainCompilation:
    """Compiled SQL and parameters produced by chains."""

    def test_driver_lookup_scenario(self, db, executor):
        executor.rows = [{"id": 1, "name": "Ada"}]
        builder = (
            db.from_("drivers")
            .select("id,name")
            .eq("status", "available")
            .order("name")
            .limit(10)
        )

        result = run(builder)

        assert executor.calls == [(
            "SELECT id,name FROM drivers WHERE status = $1 ORDER BY name ASC LIMIT 10",
            ["available"],
        )]
        assert result.data == [{"id": 1, "name": "Ada"}]
        assert result.error is None

    def test_update_placeholders_follow_values_then_filters(self, db):
        compiled = (
            db.from_("drivers")
            .eq("zone", "north")
            .update({"status": "offline", "shift": "night"})
            .gt("rating", 4)
            .compile()
        )

        assert compiled.sql == (
            "UPDATE drivers SET status = $1, shift = $2 "
            "WHERE zone = $3 AND rating > $4 RETURNING *"
        )
        assert compiled.params == ["offline", "night", "north", 4]

    def test_in_list_expansion(self, db):
        compiled = db.from_("t").eq("a", 1).in_("b", [2, 3, 4]).compile()
        assert compiled.sql == "SELECT * FROM t WHERE a = $1 AND b IN ($2, $3, $4)"
        assert compiled.params == [1, 2, 3, 4]

    def test_in_accepts_any_iterable(self, db):
        compiled = db.from_("t").in_("b", (x for x in ("x", "y"))).compile()
        assert compiled.params == ["x", "y"]

    def test_is_null_binds_nothing(self, db):
        compiled = db.from_("t").is_("x", None).compile()
        assert compiled.sql == "SELECT * FROM t WHERE x IS NULL"
        assert compiled.params == []

    def test_eq_none_becomes_is_null(self, db):
        compiled = db.from_("t").eq("x", None).neq("y", None).compile()
        assert compiled.sql == "SELECT * FROM t WHERE x IS NULL AND y IS NOT NULL"
        assert compiled.params == []

    def test_same_chain_compiles_identically(self, db):
        first = db.from_("t").eq("a", 1).eq("b", 2).compile()
        second = db.from_("t").eq("a", 1).eq("b", 2).compile()
        assert first == second
        assert first.sql == "SELECT * FROM t WHERE a = $1 AND b = $2"

    def test_chain_order_is_not_resorted(self, db):
        compiled = db.from_("t").eq("b", 2).eq("a", 1).compile()
        assert compiled.sql == "SELECT * FROM t WHERE b = $1 AND a = $2"
        assert compiled.params == [2, 1]

    def test_order_and_limit_keep_last_value(self, db):
        compiled = db.from_("t").order("a").limit(5).order("b", ascending=False).limit(2).compile()
        assert compiled.sql == "SELECT * FROM t ORDER BY b DESC LIMIT 2"

    def test_order_and_limit_ignored_for_writes(self, db):
        compiled = db.from_("t").order("a").limit(1).eq("id", 3).delete().compile()
        assert compiled.sql == "DELETE FROM t WHERE id = $1 RETURNING *"

    def test_compile_is_pure(self, db, executor):
        builder = db.from_("t").eq("a", 1)
        assert builder.compile() == builder.compile()
        assert executor.calls == []


class TestOperationSelection:
    """Which statement kind a chain ends up as."""

    def test_default_is_select(self, db):
        assert db.from_("t").operation == QueryType.SELECT

    def test_select_after_insert_only_sets_returning(self, db):
        builder = db.from_("drivers").insert({"name": "Ada"}).select("id")
        assert builder.operation == QueryType.INSERT
        assert builder.compile().sql == "INSERT INTO drivers (name) VALUES ($1) RETURNING id"

    def test_insert_without_select_has_no_returning(self, db):
        compiled = db.from_("drivers").insert({"name": "Ada", "status": "available"}).compile()
        assert compiled.sql == "INSERT INTO drivers (name, status) VALUES ($1, $2)"
        assert compiled.params == ["Ada", "available"]

    def test_select_before_insert_also_sets_returning(self, db):
        compiled = db.from_("drivers").select("*").insert({"name": "Ada"}).compile()
        assert compiled.sql == "INSERT INTO drivers (name) VALUES ($1) RETURNING *"

    def test_select_does_not_revert_upsert(self, db):
        builder = db.from_("t").upsert({"id": 1, "a": 2}).select("id")
        assert builder.operation == QueryType.UPSERT
        assert builder.compile().sql == (
            "INSERT INTO t (id, a) VALUES ($1, $2) "
            "ON CONFLICT (id) DO UPDATE SET id = EXCLUDED.id, a = EXCLUDED.a RETURNING id"
        )

    def test_last_write_wins(self, db):
        builder = db.from_("t").insert({"a": 1}).delete()
        assert builder.operation == QueryType.DELETE
        assert builder.compile().sql == "DELETE FROM t RETURNING *"

    def test_bulk_insert(self, db):
        compiled = db.from_("t").insert([{"a": 1, "b": 2}, {"a": 3, "b": 4}]).compile()
        assert compiled.sql == "INSERT INTO t (a, b) VALUES ($1, $2), ($3, $4)"
        assert compiled.params == [1, 2, 3, 4]

    def test_table_alias(self, db):
        assert db.table("t").compile().sql == "SELECT * FROM t"


class TestChainValidation:
    """Malformed input raises ValidationError from the chain method."""

    def test_injected_select_is_rejected_without_driver_call(self, db, executor):
        with pytest.raises(ValidationError):
            db.from_("users").select("a; DROP TABLE users")
        assert executor.calls == []

    @pytest.mark.parametrize("columns", ["a, b, c", "rel:table(*)"])
    def test_projection_syntax_is_accepted(self, db, columns):
        assert db.from_("t").select(columns).compile().sql == f"SELECT {columns} FROM t"

    def test_composite_conflict_target(self, db):
        compiled = db.from_("t").upsert({"a": 1}, on_conflict="a, b").compile()
        assert compiled.sql == (
            "INSERT INTO t (a) VALUES ($1) ON CONFLICT (a, b) DO UPDATE SET a = EXCLUDED.a RETURNING *"
        )

    def test_injected_conflict_target_is_rejected(self, db):
        with pytest.raises(ValidationError) as exc_info:
            db.from_("t").upsert({"a": 1}, on_conflict="a; DROP")
        assert exc_info.value.error_code == ErrorCode.INVALID_CONFLICT_TARGET

    def test_invalid_filter_column(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").eq("a = 1 OR 1", 1)

    def test_invalid_order_column(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").order("name; DROP")

    def test_negative_limit(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").limit(-1)

    def test_is_rejects_non_keyword_values(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").is_("x", "null")

    def test_in_rejects_string(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").in_("x", "abc")

    @pytest.mark.parametrize("payload", [{}, [], "a=1", [{"a": 1}, "b"]])
    def test_insert_rejects_malformed_payload(self, db, payload):
        with pytest.raises(ValidationError) as exc_info:
            db.from_("t").insert(payload)
        assert exc_info.value.error_code == ErrorCode.INVALID_PAYLOAD

    def test_insert_rejects_rows_with_different_keys(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").insert([{"a": 1}, {"b": 2}])

    def test_insert_rejects_invalid_key(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").insert({"a) VALUES (1); --": 1})

    def test_update_rejects_empty_mapping(self, db):
        with pytest.raises(ValidationError):
            db.from_("t").update({})


class TestResolution:
    """Terminal operations and result shaping."""

    ROWS = [{"id": 1}, {"id": 2}, {"id": 3}]

    def test_fetch_many_returns_all_rows(self, db, executor):
        executor.rows = list(self.ROWS)
        result = run(db.from_("t").select().fetch_many())
        assert isinstance(result, QueryResult)
        assert result.data == self.ROWS
        assert result.ok

    def test_single_returns_first_row(self, db, executor):
        executor.rows = list(self.ROWS)
        result = run(db.from_("t").select().single())
        assert result.data == {"id": 1}
        assert result.error is None

    def test_fetch_one_with_no_rows(self, db):
        data, error = run(db.from_("t").fetch_one())
        assert data is None
        assert error is None

    def test_fetch_many_with_no_rows(self, db):
        data, error = run(db.from_("t"))
        assert data == []
        assert error is None

    def test_driver_failure_becomes_error_result(self, compiler, executor_factory):
        from fleetql.query_builder import Database

        executor = executor_factory(error=RuntimeError("duplicate key value"))
        data, error = run(Database(executor, compiler).from_("t").insert({"id": 1}))

        assert data is None
        assert error.message == "duplicate key value"
        assert error.code == ErrorCode.QUERY_EXECUTION_ERROR.value
        assert error.details["query"] == "INSERT INTO t (id) VALUES ($1)"

    def test_fleetql_error_from_executor_is_kept(self, compiler, executor_factory):
        from fleetql.common.exceptions import configuration_error
        from fleetql.query_builder import Database

        executor = executor_factory(error=configuration_error("No database URL configured"))
        result = run(Database(executor, compiler).from_("t"))

        assert not result.ok
        assert result.error.code == ErrorCode.CONFIG_ERROR.value

    def test_mapping_result_from_executor(self, compiler):
        from fleetql.query_builder import Database

        class DictExecutor:
            async def query(self, sql, params):
                return {"rows": [{"id": 9}]}

        result = run(Database(DictExecutor(), compiler).from_("t").single())
        assert result.data == {"id": 9}

    def test_builder_resolves_once(self, db, executor):
        builder = db.from_("t")
        run(builder)

        with pytest.raises(FleetQLError) as exc_info:
            run(builder.fetch_many())
        assert exc_info.value.error_code == ErrorCode.BUILDER_CONSUMED
        assert len(executor.calls) == 1

    def test_unresolved_builder_performs_no_io(self, db, executor):
        db.from_("t").select("id").eq("a", 1)
        assert executor.calls == []

    def test_each_from_returns_fresh_builder(self, db):
        first = db.from_("t").eq("a", 1)
        second = db.from_("t")
        assert first is not second
        assert second.compile().sql == "SELECT * FROM t"

    def test_driver_result_row_count(self):
        assert DriverResult.from_rows([{"a": 1}]).row_count == 1
