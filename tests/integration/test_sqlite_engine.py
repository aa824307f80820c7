"""
Tests for select/count helpers against a real SQLite database.
"""

import pytest

from selectkit.adapters.base import BindError, ConnectionError, PrepareError, ReadError
from selectkit.adapters.sqlite_adapter import SQLiteEngine
from selectkit.domain.query.collectors import as_dict, as_tuple, columns, scalar
from selectkit.shared.types.models import CountSpec, QuerySpec


@pytest.fixture
def prepared_handles(sqlite_engine, monkeypatch):
    """Every handle the seeded SQLite engine prepares."""
    handles = []
    prepare = sqlite_engine.prepare

    def recording_prepare(sql):
        handle = prepare(sql)
        handles.append(handle)
        return handle

    monkeypatch.setattr(sqlite_engine, "prepare", recording_prepare)
    return handles


class TestSelect:
    """Tests for select_from on SQLite."""

    def test_select_star(self, executor):
        """Test that every row and column comes back in table order."""
        outcome = executor.select_from(QuerySpec(source="users", order_by="id"), as_tuple)
        assert outcome.ok
        assert len(outcome.value) == 5
        assert outcome.value[0] == (1, "ada", 36, 1, 9.5, b"\x01\x02")

    def test_filtered_paged_select(self, executor):
        """Test WHERE with a bound parameter plus LIMIT/OFFSET."""
        outcome = executor.select_from(
            QuerySpec(
                source="users",
                columns=["id", "name"],
                where="age > ?",
                order_by="id",
                limit=2,
                offset=1,
                parameters=[18],
            ),
            lambda row: (row.int64(0), row.text(1)),
        )
        assert outcome.sql == "SELECT id,name FROM users WHERE age > ? ORDER BY id LIMIT 2 OFFSET 1"
        assert outcome.value == [(2, "grace"), (3, "linus")]

    def test_join_group_having(self, executor):
        """Test a JOIN source with GROUP BY and HAVING."""
        outcome = executor.select_from(
            QuerySpec(
                source="orders o JOIN users u ON u.id = o.user_id",
                columns=["u.name", "sum(o.total) AS spent"],
                group_by="u.name",
                having="sum(o.total) > ?",
                order_by="spent DESC",
                parameters=[5],
            ),
            as_dict,
        )
        assert outcome.value == [
            {"name": "ada", "spent": 25.5},
            {"name": "grace", "spent": 7.0},
        ]

    def test_null_parameter(self, executor):
        """Test that None binds as SQL NULL."""
        outcome = executor.select_from(
            QuerySpec(source="users", columns=["name"], where="score IS ?", parameters=[None]),
            scalar(0, str),
        )
        assert outcome.value == ["linus"]

    def test_typed_reads(self, executor):
        """Test the typed accessors on real column values."""
        outcome = executor.select_from(
            QuerySpec(source="users", where="id = ?", parameters=[1]),
            lambda row: (row.int64(0), row.text(1), row.boolean(3), row.real(4), row.blob(5), row.is_null(5)),
        )
        assert outcome.value == [(1, "ada", True, 9.5, b"\x01\x02", False)]

    def test_selected_columns_collector(self, executor):
        """Test picking columns out of each row."""
        outcome = executor.select_from(
            QuerySpec(source="users", order_by="id DESC", limit=1), columns(1, 0)
        )
        assert outcome.value == [("ken", 5)]

    def test_no_rows(self, executor):
        """Test an empty result set."""
        outcome = executor.select_from(
            QuerySpec(source="users", where="age > ?", parameters=[200]), as_tuple
        )
        assert outcome.ok
        assert outcome.value == []

    def test_syntax_error_is_prepare_error(self, executor):
        """Test that malformed clause text surfaces as a PrepareError."""
        outcome = executor.select_from(QuerySpec(source="users", where="age >"), as_tuple)
        assert isinstance(outcome.error, PrepareError)
        assert outcome.error.original_error is not None

    def test_missing_table_is_prepare_error(self, executor):
        """Test that an unknown table surfaces as a PrepareError."""
        outcome = executor.select_from(QuerySpec(source="nope"), as_tuple)
        assert isinstance(outcome.error, PrepareError)

    def test_parameter_count_mismatch_is_bind_error(self, executor):
        """Test that too many parameters surface as a BindError."""
        outcome = executor.select_from(
            QuerySpec(source="users", where="age > ?", parameters=[18, 19]), as_tuple
        )
        assert not outcome.ok
        assert outcome.value is None
        assert isinstance(outcome.error, BindError)

    def test_missing_parameter_is_bind_error(self, executor):
        """Test that a placeholder without a value surfaces as a BindError."""
        outcome = executor.select_from(QuerySpec(source="users", where="age > ?"), as_tuple)
        assert isinstance(outcome.error, BindError)

    def test_type_mismatch_is_read_error(self, executor):
        """Test that reading text as an integer fails the call."""
        outcome = executor.select_from(QuerySpec(source="users"), lambda row: row.int64(1))
        assert isinstance(outcome.error, ReadError)

    def test_first_row_evaluation_error_is_read_error(self, executor):
        """Test that an error computing the first row is a ReadError, not a PrepareError."""
        outcome = executor.select_from(
            QuerySpec(source="users", columns=["abs(-9223372036854775807 - 1)"]), as_tuple
        )
        assert isinstance(outcome.error, ReadError)
        assert "overflow" in str(outcome.error)


class TestCount:
    """Tests for count_from on SQLite."""

    def test_count_active(self, executor):
        """Test counting with a bound boolean."""
        outcome = executor.count_from(CountSpec(source="users", where="active = ?", parameters=[True]))
        assert outcome.value == 3

    def test_count_all(self, executor):
        """Test count(*) over the whole table."""
        assert executor.count_from(CountSpec(source="users")).value == 5

    def test_count_no_matches_is_zero(self, executor):
        """Test that no matching rows counts as zero."""
        outcome = executor.count_from(CountSpec(source="users", where="age > ?", parameters=[200]))
        assert outcome.ok
        assert outcome.value == 0

    def test_count_column_skips_nulls(self, executor):
        """Test that counting a column ignores NULLs."""
        assert executor.count_from(CountSpec(source="users", columns=["score"])).value == 4

    def test_count_join(self, executor):
        """Test counting over a JOIN source."""
        outcome = executor.count_from(CountSpec(
            source="orders o JOIN users u ON u.id = o.user_id",
            columns=["DISTINCT u.id"],
        ))
        assert outcome.value == 3

    def test_count_prepare_failure(self, executor):
        """Test that an unknown table fails the count."""
        outcome = executor.count_from(CountSpec(source="nope"))
        assert outcome.value is None
        assert isinstance(outcome.error, PrepareError)

    def test_count_bind_failure(self, executor):
        """Test that a parameter mismatch fails the count."""
        outcome = executor.count_from(CountSpec(source="users", where="id = ?"))
        assert isinstance(outcome.error, BindError)


class TestPrepared:
    """Tests for prepare_select_from on SQLite."""

    def test_caller_iterates_handle(self, executor, sqlite_engine):
        """Test that the returned handle can be stepped by the caller."""
        with executor.prepare_select_from(
            QuerySpec(source="users", columns=["name"], where="age < ?", parameters=[30], order_by="id")
        ).unwrap() as handle:
            names = []
            while sqlite_engine.next(handle):
                names.append(sqlite_engine.read_column(handle, 0, str))
        assert names == ["linus", "barbara"]
        assert handle.closed

    def test_prepared_handle_is_executed(self, executor):
        """Test that the handle comes back already executed, with its columns known."""
        with executor.prepare_select_from(
            QuerySpec(source="users", columns=["id", "name"], where="id = ?", parameters=[1])
        ).unwrap() as handle:
            assert handle.executed
            assert handle.columns == ["id", "name"]

    def test_syntax_error_fails_prepare(self, executor, prepared_handles):
        """Test that malformed clause text fails the outcome and leaves no handle open."""
        outcome = executor.prepare_select_from(QuerySpec(source="users", where="age >"))

        assert not outcome.ok
        assert outcome.value is None
        assert isinstance(outcome.error, PrepareError)
        assert len(prepared_handles) == 1
        assert all(h.closed for h in prepared_handles)

    def test_parameter_mismatch_fails_prepare(self, executor, prepared_handles):
        """Test that a wrong parameter count fails the outcome and leaves no handle open."""
        outcome = executor.prepare_select_from(
            QuerySpec(source="users", where="id = ?", parameters=[1, 2])
        )

        assert not outcome.ok
        assert outcome.value is None
        assert isinstance(outcome.error, BindError)
        assert len(prepared_handles) == 1
        assert all(h.closed for h in prepared_handles)


class TestSQLiteEngine:
    """Tests for SQLiteEngine connection handling."""

    def test_missing_database_config(self):
        """Test that the database path is required."""
        with pytest.raises(ConnectionError):
            SQLiteEngine({})

    def test_missing_file_without_create(self, tmp_path):
        """Test that create=False refuses a missing file."""
        with pytest.raises(ConnectionError):
            SQLiteEngine({"database": str(tmp_path / "missing.db"), "create": False})

    def test_read_only_file(self, sqlite_file):
        """Test that a read-only connection can still select."""
        with SQLiteEngine({"database": sqlite_file, "read_only": True}) as engine:
            assert engine.health_check()
            assert engine.get_tables() == ["orders", "users"]

    def test_prepare_when_disconnected(self):
        """Test that preparing needs a connection."""
        engine = SQLiteEngine({"database": ":memory:"})
        with pytest.raises(PrepareError):
            engine.prepare("SELECT 1")

    def test_health_check_after_disconnect(self, sqlite_engine):
        """Test that a disconnected engine reports unhealthy."""
        sqlite_engine.disconnect()
        assert not sqlite_engine.health_check()
        assert not sqlite_engine.is_connected()
