import threading
import time
import unittest
from datetime import datetime, timezone

from crashidsync.config import Settings
from crashidsync.errors import MalformedInputError, TransportError
from crashidsync.manager import CrashIdSyncManager
from crashidsync.models import RemoteRecord, SignatureGroup

MARKER = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _settings(**overrides):
    values = {"authorization": "Bearer TOKEN", "server": "https://rs.example.com/v1"}
    values.update(overrides)
    return Settings(**values)


def _group(signature, os="win", hashes=("h1",)):
    return SignatureGroup(
        signature_key=signature,
        signature=signature,
        process_type="gpu",
        channel="nightly",
        os=os,
        hashes=list(hashes),
    )


class FakeClient:
    def __init__(self, records=None, last_modified=MARKER) -> None:
        self.calls = []
        self.records = list(records or [])
        self.last_modified = last_modified
        self.fail_upserts = set()
        self.raise_on_delete = set()
        self.delete_all_ok = True
        self._lock = threading.Lock()

    def _log(self, *call) -> None:
        with self._lock:
            self.calls.append(call)

    def fetch_all(self):
        self._log("fetch_all")
        return list(self.records), self.last_modified

    def upsert(self, record_id, description, hashes):
        time.sleep(0.005)
        self._log("upsert", record_id, description, list(hashes))
        return record_id not in self.fail_upserts

    def delete(self, record):
        if record.id in self.raise_on_delete:
            raise TransportError("DELETE failed")
        self._log("delete", record.id)
        return True

    def delete_all(self):
        self._log("delete_all")
        return self.delete_all_ok

    def approve(self):
        self._log("approve")
        return True

    def request_review(self):
        self._log("request_review")
        return True


class FakeSource:
    def __init__(self, groups, fresh=True) -> None:
        self.groups = groups
        self.fresh = fresh
        self.iterations = 0

    def new_data_since(self, marker):
        return self.fresh

    def iter_groups(self):
        self.iterations += 1
        return iter(list(self.groups))


class TestCrashIdSyncManager(unittest.TestCase):
    def test_run_upserts_deletes_and_requests_review(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000", description="old"), RemoteRecord(id="id-001")])
        source = FakeSource([_group("A", hashes=["h1", "h2"])])

        result = CrashIdSyncManager(_settings(environment="prod"), client=client, source=source).run()

        self.assertEqual(
            client.calls,
            [
                ("fetch_all",),
                ("upsert", "id-000", "gpu (win nightly): A", ["h1", "h2"]),
                ("delete", "id-001"),
                ("request_review",),
            ],
        )
        self.assertEqual(result.status, "success")
        self.assertTrue(result.finalized)
        self.assertEqual(result.summary["upserted"], 1)
        self.assertEqual(result.summary["deleted"], 1)
        self.assertEqual(result.summary["failed"], 0)
        self.assertEqual(result.summary["hashes"], 2)

    def test_dev_environment_approves(self) -> None:
        client = FakeClient()
        source = FakeSource([_group("A")])
        CrashIdSyncManager(_settings(environment="dev"), client=client, source=source).run()
        self.assertEqual(client.calls[-1], ("approve",))

    def test_gate_short_circuits_before_building_target_state(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000")])
        source = FakeSource([_group("A")], fresh=False)

        result = CrashIdSyncManager(_settings(), client=client, source=source).run()

        self.assertEqual(result.status, "skipped")
        self.assertEqual(source.iterations, 0)
        self.assertEqual(client.calls, [("fetch_all",)])

    def test_force_update_ignores_gate(self) -> None:
        client = FakeClient()
        source = FakeSource([_group("A")], fresh=False)
        result = CrashIdSyncManager(_settings(force_update=True), client=client, source=source).run()
        self.assertEqual(result.status, "success")
        self.assertEqual(source.iterations, 1)

    def test_converged_rerun_reports_unchanged(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000", description="gpu (win nightly): A", hashes=["h1"])])
        source = FakeSource([_group("A")])

        result = CrashIdSyncManager(_settings(), client=client, source=source).run()

        self.assertEqual(result.summary["unchanged"], 1)
        self.assertEqual(result.summary["deleted"], 0)

    def test_individual_failures_do_not_abort(self) -> None:
        client = FakeClient([RemoteRecord(id="id-005"), RemoteRecord(id="id-006")])
        client.fail_upserts = {"id-000"}
        client.raise_on_delete = {"id-005"}
        source = FakeSource([_group("A"), _group("B")])

        result = CrashIdSyncManager(_settings(), client=client, source=source).run()

        self.assertEqual(result.status, "partial")
        self.assertEqual(result.summary["failed"], 2)
        self.assertEqual(result.summary["upserted"], 1)
        self.assertEqual(result.summary["deleted"], 1)
        failed = [r for r in result.results if r.status == "failed"]
        self.assertEqual([r.record_id for r in failed], ["id-000", "id-005"])
        self.assertEqual(failed[1].error_type, "TransportError")
        self.assertIn(("request_review",), client.calls)

    def test_malformed_group_aborts_before_any_mutation(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000")])
        source = FakeSource([_group("A"), _group("B", hashes=["h", 7])])

        with self.assertRaises(MalformedInputError):
            CrashIdSyncManager(_settings(), client=client, source=source).run()

        self.assertEqual(client.calls, [("fetch_all",)])

    def test_empty_target_state_is_refused_by_default(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000")])
        with self.assertRaises(MalformedInputError):
            CrashIdSyncManager(_settings(), client=client, source=FakeSource([])).run()
        self.assertEqual(client.calls, [("fetch_all",)])

    def test_empty_target_state_with_nothing_observed_is_a_noop(self) -> None:
        client = FakeClient([])
        result = CrashIdSyncManager(_settings(), client=client, source=FakeSource([])).run()
        self.assertEqual(result.status, "success")
        self.assertEqual(result.results, [])

    def test_empty_target_state_tears_down_when_allowed(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000"), RemoteRecord(id="id-001")])

        result = CrashIdSyncManager(_settings(allow_empty=True), client=client, source=FakeSource([])).run()

        self.assertEqual(client.calls, [("fetch_all",), ("delete_all",), ("request_review",)])
        self.assertEqual(result.summary["deleted"], 2)

    def test_teardown_failure_is_fatal(self) -> None:
        client = FakeClient([RemoteRecord(id="id-000")])
        client.delete_all_ok = False
        with self.assertRaises(TransportError):
            CrashIdSyncManager(_settings(allow_empty=True), client=client, source=FakeSource([])).run()
        self.assertNotIn(("request_review",), client.calls)

    def test_fetch_failure_propagates(self) -> None:
        client = FakeClient()

        def bad_fetch():
            raise TransportError("Can't retrieve records")

        client.fetch_all = bad_fetch  # type: ignore[method-assign]
        source = FakeSource([_group("A")])
        with self.assertRaises(TransportError):
            CrashIdSyncManager(_settings(), client=client, source=source).run()
        self.assertEqual(source.iterations, 0)

    def test_concurrent_apply_keeps_phase_barrier_and_result_order(self) -> None:
        observed = [RemoteRecord(id=f"old-{i}") for i in range(5)]
        client = FakeClient(observed)
        source = FakeSource([_group(str(i)) for i in range(8)])

        result = CrashIdSyncManager(_settings(max_workers=4), client=client, source=source).run()

        kinds = [call[0] for call in client.calls if call[0] in ("upsert", "delete")]
        self.assertEqual(kinds, ["upsert"] * 8 + ["delete"] * 5)
        self.assertEqual(
            [r.record_id for r in result.results],
            [f"id-{i:03d}" for i in range(8)] + [f"old-{i}" for i in range(5)],
        )


if __name__ == "__main__":
    unittest.main()
