"""Tests for the durable outbox."""

import tempfile
from pathlib import Path

from fitlog.sync.outbox import Outbox


class TestOutbox:
    """Tests for Outbox."""

    def setup_method(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.db_path = Path(self.temp_dir) / "test_outbox.db"
        self.outbox = Outbox(db_path=self.db_path, max_size=5)

    def teardown_method(self):
        """Clean up."""
        self.outbox.close()

    def test_enqueue(self):
        """Test enqueueing a push."""
        self.outbox.enqueue("/api/routines", "POST", {"clientId": "r1"})

        assert self.outbox.size() == 1
        assert not self.outbox.is_empty()

    def test_peek_returns_oldest_first(self):
        """Test FIFO order and body decoding."""
        self.outbox.enqueue("/api/routines", "POST", {"order": 1})
        self.outbox.enqueue("/api/workouts", "POST", {"order": 2})

        items = self.outbox.peek(batch_size=10)

        assert [i.body["order"] for i in items] == [1, 2]
        assert items[0].path == "/api/routines"
        assert items[0].method == "POST"
        assert items[0].retry_count == 0

    def test_peek_does_not_remove(self):
        """Test peeking leaves items queued."""
        self.outbox.enqueue("/api/runs", "POST", {})
        self.outbox.peek()

        assert self.outbox.size() == 1

    def test_peek_respects_batch_size(self):
        """Test batch size limit."""
        for i in range(4):
            self.outbox.enqueue("/api/runs", "POST", {"i": i})

        assert len(self.outbox.peek(batch_size=3)) == 3

    def test_enqueue_without_body(self):
        """Test a bodiless push round-trips as None."""
        self.outbox.enqueue("/api/routines/r1", "DELETE", None)

        assert self.outbox.peek()[0].body is None

    def test_remove(self):
        """Test removing delivered items by id."""
        item_id = self.outbox.enqueue("/api/runs", "POST", {})

        removed = self.outbox.remove([item_id])

        assert removed == 1
        assert self.outbox.is_empty()

    def test_remove_empty_list(self):
        """Test removing nothing."""
        assert self.outbox.remove([]) == 0

    def test_increment_retry_and_remove_failed(self):
        """Test items are dropped once they reach the retry ceiling."""
        keep = self.outbox.enqueue("/api/runs", "POST", {"keep": True})
        drop = self.outbox.enqueue("/api/runs", "POST", {"keep": False})

        for _ in range(3):
            self.outbox.increment_retry([drop])
        self.outbox.increment_retry([keep])

        removed = self.outbox.remove_failed(max_retries=3)

        assert removed == 1
        assert [i.id for i in self.outbox.peek()] == [keep]

    def test_full_outbox_evicts_oldest(self):
        """Test max_size keeps the newest pushes."""
        for i in range(7):
            self.outbox.enqueue("/api/runs", "POST", {"i": i})

        items = self.outbox.peek(batch_size=10)

        assert self.outbox.size() == 5
        assert [i.body["i"] for i in items] == [2, 3, 4, 5, 6]

    def test_clear(self):
        """Test clearing every pending push."""
        self.outbox.enqueue("/api/runs", "POST", {})
        self.outbox.enqueue("/api/runs", "POST", {})

        assert self.outbox.clear() == 2
        assert self.outbox.is_empty()

    def test_persistence(self):
        """Test queued pushes survive a restart."""
        self.outbox.enqueue("/api/routines", "POST", {"clientId": "r1"})
        self.outbox.close()

        reopened = Outbox(db_path=self.db_path)
        try:
            assert reopened.size() == 1
            assert reopened.peek()[0].body == {"clientId": "r1"}
        finally:
            reopened.close()
