"""
Unit tests for the Entry and ImportResult models.
"""

from datetime import datetime

import pytest
from pydantic import ValidationError

from zipzap.models.entry import Entry, ImportResult


class TestEntry:
    """Test cases for Entry."""

    def test_basic_entry(self):
        entry = Entry(path="/a/b", rank=3.0, last_access=100)

        assert entry.path == "/a/b"
        assert entry.rank == 3.0
        assert entry.last_access == 100

    def test_negative_rank_rejected(self):
        with pytest.raises(ValidationError):
            Entry(path="/a/b", rank=-0.1, last_access=100)

    def test_blank_path_rejected(self):
        with pytest.raises(ValidationError):
            Entry(path="   ", rank=1.0, last_access=100)
        with pytest.raises(ValidationError):
            Entry(path="", rank=1.0, last_access=100)

    def test_to_line(self):
        assert Entry(path="/x/y", rank=5.0, last_access=100).to_line() == "/x/y|5|100"
        assert Entry(path="/x/y", rank=1.25, last_access=7).to_line(";") == "/x/y;1.25;7"

    def test_to_line_keeps_full_rank_precision(self):
        rank = 8999.0 * 0.99 * 0.99
        line = Entry(path="/x/y", rank=rank, last_access=1).to_line()

        assert float(line.split("|")[1]) == rank
        assert Entry(path="/x/y", rank=1234.56789, last_access=1).to_line() == "/x/y|1234.56789|1"

    def test_last_access_datetime(self):
        entry = Entry(path="/a", rank=1.0, last_access=1_700_000_000)
        assert entry.last_access_datetime() == datetime.fromtimestamp(1_700_000_000)

    def test_to_dict(self):
        entry = Entry(path="/a", rank=1.0, last_access=5)
        assert entry.to_dict() == {'path': "/a", 'rank': 1.0, 'last_access': 5}

    def test_str(self):
        text = str(Entry(path="/a/b", rank=2.5, last_access=0))
        assert text.startswith("/a/b (rank 2.50, last access ")


class TestImportResult:
    """Test cases for ImportResult."""

    def test_defaults(self):
        result = ImportResult()
        assert (result.processed, result.applied, result.skipped, result.cleared) == (0, 0, 0, False)

    def test_str(self):
        assert str(ImportResult(processed=4, applied=3, skipped=1)) == "imported 4 rows"
