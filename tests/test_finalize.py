import unittest
from unittest.mock import Mock

from crashidsync.errors import TransportError
from crashidsync.finalize import finalize


class TestFinalize(unittest.TestCase):
    def _client(self, ok: bool = True) -> Mock:
        client = Mock()
        client.approve.return_value = ok
        client.request_review.return_value = ok
        return client

    def test_dev_approves(self) -> None:
        client = self._client()
        self.assertTrue(finalize(client, "dev"))
        client.approve.assert_called_once_with()
        client.request_review.assert_not_called()

    def test_other_environments_request_review(self) -> None:
        for environment in ("stage", "prod", None):
            client = self._client()
            self.assertTrue(finalize(client, environment))
            client.request_review.assert_called_once_with()
            client.approve.assert_not_called()

    def test_failure_is_logged_not_raised(self) -> None:
        client = self._client(ok=False)
        with self.assertLogs("crashidsync.finalize", level="WARNING"):
            self.assertFalse(finalize(client, "prod"))
        client.request_review.assert_called_once_with()

    def test_transport_error_is_swallowed_and_logged(self) -> None:
        client = self._client()
        client.approve.side_effect = TransportError("PATCH failed")
        with self.assertLogs("crashidsync.finalize", level="WARNING") as logs:
            self.assertFalse(finalize(client, "dev"))
        self.assertIn("PATCH failed", logs.output[0])


if __name__ == "__main__":
    unittest.main()
