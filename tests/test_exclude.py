"""Tests for in-place exclusion helpers."""

from svcutils import exclude, exclude_by


class TestExclude:
    """Tests for exclude and exclude_by."""

    def test_removes_all_occurrences(self):
        """Test that duplicates are removed and order is kept."""
        items = [5, 1, 3, 1, 4]

        exclude(items, [1, 4])

        assert items == [5, 3]

    def test_nothing_to_remove(self):
        """Test an empty removal list."""
        items = ["b", "a"]

        exclude(items, [])

        assert items == ["b", "a"]

    def test_by_key(self):
        """Test comparing a derived key."""
        items = [{"id": 3}, {"id": 1}, {"id": 2}]

        exclude_by(items, [{"id": 1}, {"id": 9}], key=lambda item: item["id"])

        assert items == [{"id": 3}, {"id": 2}]
