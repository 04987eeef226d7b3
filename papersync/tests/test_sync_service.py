import os
import tempfile
import unittest

import httpx

from papersync.domain.WeeklyNote import ExtractedEntry, Task
from papersync.events.Event_Bus import GLOBAL_EVENT_BUS, VAULT_SYNCED, VAULT_SYNC_FAILED
from papersync.infra.GitHub_Repository import GitHubVaultStore
from papersync.infra.Vault_Repository import LocalVaultStore
from papersync.logic.notes.markdown import parse_weekly_note
from papersync.logic.sync.service import SyncOptions, sync_entries_to_vault
from papersync.logic.week.arithmetic import current_week_id
from papersync.tests.fakes import FakeContentsAPI, MemoryStore, NOTE_PATH


def entries(*items):
    return [ExtractedEntry(day=d, subject=s, content=c) for d, s, c in items]


class EventRecorder:
    def __init__(self):
        self.events = []

    def __call__(self, name, payload):
        self.events.append((name, payload))


class TestSyncValidation(unittest.TestCase):
    def check(self, items, options, message):
        result = sync_entries_to_vault(items, options)
        self.assertFalse(result.success)
        self.assertEqual(result.error, message)
        self.assertIsNone(result.note_path)

    def test_messages(self):
        one = entries(("Monday", "Math", "HW"))
        self.check([], SyncOptions(method="local", local_path="/tmp/vault"), "No entries to sync")
        self.check(one, SyncOptions(method="local"), "Vault path not configured")
        self.check(one, SyncOptions(method="github", github_repo="alice/vault"), "GitHub not connected")
        self.check(one, SyncOptions(method="github", github_token="tok"), "GitHub repository not selected")
        self.check(one, SyncOptions(method="github", github_token="tok", github_repo="vault"),
                   "Invalid repository name")
        self.check(one, SyncOptions(method="dropbox"), "Invalid vault method")

    def test_bad_week_id(self):
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW")),
                                       SyncOptions(method="local", local_path="/tmp/vault", week_id="2026-5"))
        self.assertFalse(result.success)
        self.assertIn("Invalid week id", result.error)


class TestSyncToMemoryStore(unittest.TestCase):
    def setUp(self):
        self.recorder = EventRecorder()
        GLOBAL_EVENT_BUS.subscribe(VAULT_SYNCED, self.recorder)
        GLOBAL_EVENT_BUS.subscribe(VAULT_SYNC_FAILED, self.recorder)
        self.options = SyncOptions(method="github", github_token="tok", github_repo="alice/vault",
                                   week_id="2026-W05")

    def tearDown(self):
        GLOBAL_EVENT_BUS.unsubscribe(VAULT_SYNCED, self.recorder)
        GLOBAL_EVENT_BUS.unsubscribe(VAULT_SYNC_FAILED, self.recorder)

    def test_first_sync_writes_note_and_overview(self):
        store = MemoryStore()
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW1"), ("Friday", "", "Buy pens")),
                                       self.options, store=store)
        self.assertTrue(result.success)
        self.assertEqual(result.note_path, NOTE_PATH)
        self.assertIsNone(result.warning)
        self.assertEqual(store.messages[NOTE_PATH], "Update weekly note: 2026-W05")
        self.assertEqual(store.messages["Overview.md"], "Create homework overview")
        self.assertIn("# 📚 Homework Overview", store.files["Overview.md"])

        note = parse_weekly_note(store.files[NOTE_PATH], "2026-W05")
        self.assertEqual(note.days[0].entries[0].tasks, [Task("HW1")])
        self.assertEqual(note.general_tasks, [Task("Buy pens")])
        self.assertEqual(self.recorder.events[-1][0], VAULT_SYNCED)
        self.assertEqual(self.recorder.events[-1][1]["note_path"], NOTE_PATH)

    def test_second_sync_keeps_previous_days(self):
        store = MemoryStore()
        sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        sync_entries_to_vault(entries(("Wednesday", "Art", "Sketch")), self.options, store=store)
        note = parse_weekly_note(store.files[NOTE_PATH], "2026-W05")
        self.assertEqual([d.day_name for d in note.days], ["Monday", "Wednesday"])

    def test_existing_overview_is_left_alone(self):
        store = MemoryStore({"Overview.md": "my own overview"})
        sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        self.assertEqual(store.files["Overview.md"], "my own overview")
        self.assertNotIn("Overview.md", store.messages)

    def test_overview_failure_is_partial_success(self):
        store = MemoryStore(fail_writes={"Overview.md"})
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        self.assertTrue(result.success)
        self.assertIn(NOTE_PATH, store.files)
        self.assertIn("overview could not be created", result.warning)
        self.assertEqual(result.to_dict()["warning"], result.warning)

    def test_read_failure_fails_sync_and_keeps_note(self):
        store = MemoryStore({NOTE_PATH: "old"}, fail_reads={NOTE_PATH})
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        self.assertFalse(result.success)
        self.assertIn("GitHub API error: 500", result.error)
        self.assertEqual(store.files[NOTE_PATH], "old")
        self.assertEqual(self.recorder.events[-1][0], VAULT_SYNC_FAILED)

    def test_unparseable_note_is_treated_as_fresh(self):
        store = MemoryStore({NOTE_PATH: "not a weekly note"})
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        self.assertTrue(result.success)
        self.assertIn("- [ ] HW1", store.files[NOTE_PATH])

    def test_write_failure_is_reported(self):
        store = MemoryStore(fail_writes={NOTE_PATH})
        result = sync_entries_to_vault(entries(("Monday", "Math", "HW1")), self.options, store=store)
        self.assertFalse(result.success)
        self.assertEqual(result.error, f"Failed to write file: {NOTE_PATH}")
        self.assertEqual(result.to_dict(), {"success": False, "error": result.error})
        name, payload = self.recorder.events[-1]
        self.assertEqual(name, VAULT_SYNC_FAILED)
        self.assertEqual(payload["week"], "2026-W05")
        self.assertEqual(payload["method"], "github")


EXISTING_NOTE = (
    "---\nweek: 2026-W05\ndate_range: 2026-01-26 to 2026-02-01\n---\n\n"
    "## Monday, January 26\n\n### Math\n- [ ] HW page 42\n"
)


class TestSyncToGitHub(unittest.TestCase):
    def setUp(self):
        self.options = SyncOptions(method="github", github_token="tok", github_repo="alice/vault",
                                   week_id="2026-W05")

    def sync(self, api, *items):
        store = GitHubVaultStore("tok", "alice", "vault", api_url="https://api.test",
                                 transport=httpx.MockTransport(api))
        try:
            return sync_entries_to_vault(entries(*items), self.options, store=store)
        finally:
            store.close()

    def test_existing_note_is_merged(self):
        api = FakeContentsAPI({NOTE_PATH: (EXISTING_NOTE, "n1"), "Overview.md": ("o", "o1")})
        result = self.sync(api, ("Tuesday", "Physics", "Lab"))
        self.assertTrue(result.success)
        stored = api.files[NOTE_PATH][0]
        self.assertIn("- [ ] HW page 42", stored)
        self.assertIn("- [ ] Lab", stored)

    def test_invalid_utf8_in_stored_note(self):
        raw = EXISTING_NOTE.encode("utf-8") + b"- [ ] caf\xe9\n"
        api = FakeContentsAPI({NOTE_PATH: (raw, "n1"), "Overview.md": ("o", "o1")})
        result = self.sync(api, ("Tuesday", "Physics", "Lab"))
        self.assertTrue(result.success)
        stored = api.files[NOTE_PATH][0]
        self.assertIn("- [ ] HW page 42", stored)
        self.assertIn("- [ ] caf\ufffd", stored)
        self.assertIn("- [ ] Lab", stored)

    def test_failed_read_leaves_stored_note_intact(self):
        api = FakeContentsAPI({NOTE_PATH: (EXISTING_NOTE, "n1")}, flaky_gets=[NOTE_PATH])
        result = self.sync(api, ("Tuesday", "Physics", "Lab"))
        self.assertFalse(result.success)
        self.assertIn("502", result.error)
        self.assertEqual(api.files[NOTE_PATH], (EXISTING_NOTE, "n1"))
        self.assertNotIn("PUT", api.methods())


class TestSyncToLocalVault(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()

    def tearDown(self):
        self._tmp.cleanup()

    def test_local_sync_defaults_to_current_week(self):
        options = SyncOptions(method="local", local_path=self._tmp.name)
        result = sync_entries_to_vault(entries(("Tuesday", "English", "Essay")), options)
        self.assertTrue(result.success)
        self.assertEqual(result.note_path, f"PaperSync/Weekly/{current_week_id()}.md")
        self.assertTrue(os.path.isfile(os.path.join(self._tmp.name, result.note_path)))
        self.assertTrue(os.path.isfile(os.path.join(self._tmp.name, "Overview.md")))
        self.assertEqual(LocalVaultStore(self._tmp.name).list_files("PaperSync/Weekly"),
                         [f"{current_week_id()}.md"])


if __name__ == '__main__':
    unittest.main()
