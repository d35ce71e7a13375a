"""Tests for the SQLite client's filter and sort translation."""

from datetime import UTC, datetime, timedelta

import pytest

from src.core import db_client


@pytest.mark.unit
class TestParseFilter:
    """Tests for parse_filter."""

    def test_and_conditions(self):
        """Conditions joined by && become AND with typed parameters."""
        where, params = db_client.parse_filter('home_id = "5" && status = "completed"')

        assert where == "home_id = ? AND status = ?"
        assert params == [5, "completed"]

    def test_or_group(self):
        """Parenthesized || groups become OR groups."""
        where, params = db_client.parse_filter('(home_id = "1" || home_id = "2") && status = "completed"')

        assert where == "(home_id = ? OR home_id = ?) AND status = ?"
        assert params == [1, 2, "completed"]

    def test_like_escapes_wildcards(self):
        """The contains operator matches literally."""
        where, params = db_client.parse_filter('name ~ "50%_off"')

        assert where == "name LIKE ? ESCAPE '\\'"
        assert params == ["%50\\%\\_off%"]

    def test_range_comparison_keeps_text(self):
        """Range comparisons compare as text so ISO timestamps work."""
        where, params = db_client.parse_filter('due_date <= "2024-01-08"')

        assert where == "due_date <= ?"
        assert params == ["2024-01-08"]

    @pytest.mark.parametrize(
        "bad_filter",
        [
            'status = "x" OR 1=1',
            "status = completed",
            'status = "a" || status = "b"',
            'name = "Robert\'); DROP TABLE tasks;--"',
        ],
    )
    def test_invalid_syntax_rejected(self, bad_filter):
        """Anything outside the grammar is rejected."""
        with pytest.raises(ValueError, match="Invalid filter syntax"):
            db_client.parse_filter(bad_filter)

    def test_empty_filter(self):
        """An empty filter has no WHERE clause."""
        assert db_client.parse_filter("") == ("", [])


@pytest.mark.unit
class TestParseSort:
    """Tests for parse_sort."""

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            ("", "id ASC"),
            ("-created_at", "created_at DESC, id DESC"),
            ("+joined_at", "joined_at ASC, id ASC"),
            ("name", "name ASC, id ASC"),
            ("name desc", "name DESC, id DESC"),
            ("name; DROP TABLE tasks", "id ASC"),
        ],
    )
    def test_parse_sort(self, sort, expected):
        """Sort expressions map to safe ORDER BY clauses."""
        assert db_client.parse_sort(sort) == expected


@pytest.mark.unit
class TestBuildInFilter:
    """Tests for build_in_filter."""

    def test_builds_or_group(self):
        """Values become an OR group the parser accepts."""
        filter_query = db_client.build_in_filter("home_id", ["1", "2"])

        assert filter_query == '(home_id = "1" || home_id = "2")'
        assert db_client.parse_filter(filter_query) == ("(home_id = ? OR home_id = ?)", [1, 2])

    def test_empty_values_rejected(self):
        """An empty membership set is a caller error."""
        with pytest.raises(ValueError, match="no values"):
            db_client.build_in_filter("home_id", [])


@pytest.mark.unit
def test_sanitize_param_escapes_quotes():
    """Quotes are escaped so they cannot end the value early."""
    assert db_client.sanitize_param('a"b') == 'a\\"b'


@pytest.mark.unit
class TestListRecordsMatchingAny:
    """Tests for list_records_matching_any."""

    async def _seed(self, db, count):
        for i in range(count):
            await db.create_record(
                collection="tasks",
                data={
                    "home_id": str(i),
                    "status": "completed" if i % 2 else "pending",
                    "created_at": datetime(2024, 1, 1, tzinfo=UTC) + timedelta(hours=i),
                },
            )

    async def test_queries_in_bounded_chunks(self, patched_db, monkeypatch):
        """No single query carries more values than the chunk size."""
        await self._seed(patched_db, 7)
        filters = []
        original_list = patched_db.list_records

        async def _recording_list(**kwargs):
            filters.append(kwargs["filter_query"])
            return await original_list(**kwargs)

        monkeypatch.setattr("src.core.db_client.list_records", _recording_list)

        records = await db_client.list_records_matching_any(
            collection="tasks",
            field="home_id",
            values=[str(i) for i in range(7)],
            chunk_size=3,
        )

        assert len(records) == 7
        assert len(filters) == 3
        assert all(f.count("home_id =") <= 3 for f in filters)

    async def test_merged_chunks_keep_sort_order(self, patched_db):
        """Results from separate chunks come back in one global order."""
        await self._seed(patched_db, 7)

        records = await db_client.list_records_matching_any(
            collection="tasks",
            field="home_id",
            values=[str(i) for i in range(7)],
            sort="-created_at",
            chunk_size=2,
        )

        assert [r["home_id"] for r in records] == ["6", "5", "4", "3", "2", "1", "0"]

    async def test_extra_filter_applies_to_every_chunk(self, patched_db):
        """Additional conditions are ANDed onto each chunk."""
        await self._seed(patched_db, 6)

        records = await db_client.list_records_matching_any(
            collection="tasks",
            field="home_id",
            values=[str(i) for i in range(6)],
            filter_query='status = "completed"',
            chunk_size=4,
        )

        assert sorted(r["home_id"] for r in records) == ["1", "3", "5"]

    async def test_no_values_means_no_query(self, patched_db, monkeypatch):
        """An empty value list returns nothing without touching the store."""

        async def _fail(**kwargs):
            raise AssertionError("store should not be queried")

        monkeypatch.setattr("src.core.db_client.list_records", _fail)

        assert await db_client.list_records_matching_any(collection="tasks", field="home_id", values=[]) == []
