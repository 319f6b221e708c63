import unittest
from datetime import datetime, timezone
from unittest.mock import Mock

from crashidsync.gate import should_proceed

MARKER = datetime(2025, 1, 1, tzinfo=timezone.utc)


class TestShouldProceed(unittest.TestCase):
    def _source(self, fresh: bool) -> Mock:
        source = Mock()
        source.new_data_since.return_value = fresh
        return source

    def test_force_update_skips_freshness_check(self) -> None:
        source = self._source(False)
        self.assertTrue(should_proceed(MARKER, True, source))
        source.new_data_since.assert_not_called()

    def test_first_run_proceeds(self) -> None:
        source = self._source(False)
        self.assertTrue(should_proceed(None, False, source))
        source.new_data_since.assert_not_called()

    def test_new_data_proceeds(self) -> None:
        source = self._source(True)
        self.assertTrue(should_proceed(MARKER, False, source))
        source.new_data_since.assert_called_once_with(MARKER)

    def test_no_new_data_stops(self) -> None:
        source = self._source(False)
        with self.assertLogs("crashidsync.gate", level="INFO") as logs:
            self.assertFalse(should_proceed(MARKER, False, source))
        self.assertIn("No changes necessary", logs.output[0])

    def test_never_builds_target_state(self) -> None:
        source = self._source(True)
        should_proceed(MARKER, False, source)
        source.iter_groups.assert_not_called()


if __name__ == "__main__":
    unittest.main()
