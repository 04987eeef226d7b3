import unittest

from papersync.domain.WeeklyNote import DateRange, DayRecord, SubjectEntry, Task, WeeklyNote
from papersync.logic.notes.markdown import format_human_date, parse_weekly_note, serialize_weekly_note


def sample_note() -> WeeklyNote:
    return WeeklyNote(
        week="2026-W05",
        date_range=DateRange(start="2026-01-26", end="2026-02-01"),
        days=[
            DayRecord(date="2026-01-26", day_name="Monday", entries=[
                SubjectEntry("Math", [
                    Task("Do HW", is_completed=False, due_date="2026-01-28"),
                    Task("Read chapter 3", is_completed=True),
                ]),
                SubjectEntry("English", [Task("Essay draft")]),
            ]),
            DayRecord(date="2026-01-28", day_name="Wednesday", entries=[
                SubjectEntry("Physics", [Task("Lab report", due_date="2026-02-02")]),
            ]),
        ],
        general_tasks=[Task("Buy supplies"), Task("Sign permission slip", is_completed=True)],
        synced_at="2026-01-27T10:00:00.000Z",
    )


class TestSerialize(unittest.TestCase):
    def test_format_human_date(self):
        self.assertEqual(format_human_date("2026-01-26"), "January 26")
        self.assertEqual(format_human_date("2025-12-05"), "December 5")

    def test_exact_layout(self):
        note = WeeklyNote(
            week="2026-W05",
            date_range=DateRange(start="2026-01-26", end="2026-02-01"),
            days=[DayRecord(date="2026-01-26", day_name="Monday", entries=[
                SubjectEntry("Math", [Task("Do HW", due_date="2026-01-28"), Task("Read chapter 3", True)]),
            ])],
            general_tasks=[Task("Buy supplies")],
            synced_at="2026-01-27T10:00:00.000Z",
        )
        expected = (
            "---\n"
            "week: 2026-W05\n"
            "date_range: 2026-01-26 to 2026-02-01\n"
            "synced_at: 2026-01-27T10:00:00.000Z\n"
            "---\n"
            "\n"
            "## Monday, January 26\n"
            "\n"
            "### Math\n"
            "- [ ] Do HW [due:: 2026-01-28]\n"
            "- [x] Read chapter 3\n"
            "\n"
            "---\n"
            "\n"
            "## General Tasks\n"
            "\n"
            "- [ ] Buy supplies\n"
        )
        self.assertEqual(serialize_weekly_note(note), expected)

    def test_synced_at_omitted_when_absent(self):
        note = WeeklyNote(week="2026-W05", date_range=DateRange("2026-01-26", "2026-02-01"))
        md = serialize_weekly_note(note)
        self.assertNotIn("synced_at", md)
        self.assertNotIn("General Tasks", md)

    def test_rule_only_between_days(self):
        md = serialize_weekly_note(sample_note())
        body = md.split("---\n", 2)[2]
        self.assertFalse(body.lstrip().startswith("---"))
        # one rule between the two days, one before general tasks
        self.assertEqual(body.count("\n---\n"), 2)


class TestParse(unittest.TestCase):
    def test_round_trip(self):
        note = sample_note()
        self.assertEqual(parse_weekly_note(serialize_weekly_note(note), note.week), note)

    def test_round_trip_without_general_tasks_or_sync_time(self):
        note = sample_note()
        note.general_tasks = []
        note.synced_at = None
        self.assertEqual(parse_weekly_note(serialize_weekly_note(note), note.week), note)

    def test_round_trip_across_new_year(self):
        note = WeeklyNote(
            week="2026-W01",
            date_range=DateRange("2025-12-29", "2026-01-04"),
            days=[
                DayRecord("2025-12-29", "Monday", [SubjectEntry("Math", [Task("Review")])]),
                DayRecord("2026-01-02", "Friday", [SubjectEntry("Art", [Task("Sketch")])]),
            ],
        )
        self.assertEqual(parse_weekly_note(serialize_weekly_note(note), note.week), note)

    def test_missing_frontmatter_is_tolerated(self):
        note = parse_weekly_note("## Monday, January 26\n\n### Math\n- [ ] HW\n", "2026-W05")
        self.assertEqual(note.week, "2026-W05")
        self.assertEqual(note.date_range, DateRange("", ""))
        self.assertIsNone(note.synced_at)
        self.assertEqual(note.days[0].entries[0].tasks, [Task("HW")])

    def test_empty_document(self):
        note = parse_weekly_note("", "2026-W05")
        self.assertEqual(note.days, [])
        self.assertEqual(note.general_tasks, [])

    def test_checkbox_and_due_date(self):
        md = "## Tuesday, January 27\n### Math\n- [X] Done one [due:: 2026-01-29]\n- [ ] Open one\n"
        tasks = parse_weekly_note(md, "2026-W05").days[0].entries[0].tasks
        self.assertEqual(tasks[0], Task("Done one", True, "2026-01-29"))
        self.assertEqual(tasks[1], Task("Open one", False, None))

    def test_heading_without_date_uses_weekday(self):
        md = "## Thursday\n### Math\n- [ ] HW\n"
        self.assertEqual(parse_weekly_note(md, "2026-W05").days[0].date, "2026-01-29")

    def test_unparseable_heading_date_uses_weekday(self):
        md = "## Thursday, sometime soon\n### Math\n- [ ] HW\n"
        self.assertEqual(parse_weekly_note(md, "2026-W05").days[0].date, "2026-01-29")

    def test_document_order_is_preserved(self):
        md = (
            "## Wednesday, January 28\n### Art\n- [ ] Paint\n"
            "## Monday, January 26\n### Math\n- [ ] HW\n"
        )
        days = parse_weekly_note(md, "2026-W05").days
        self.assertEqual([d.day_name for d in days], ["Wednesday", "Monday"])

    def test_empty_subjects_and_days_vanish(self):
        md = (
            "## Monday, January 26\n### Math\n### English\n- [ ] Essay\n"
            "## Tuesday, January 27\n### Physics\n"
        )
        note = parse_weekly_note(md, "2026-W05")
        self.assertEqual(len(note.days), 1)
        self.assertEqual([e.subject for e in note.days[0].entries], ["English"])

    def test_orphan_tasks_are_dropped(self):
        md = "- [ ] Before anything\n## Monday, January 26\n- [ ] No subject yet\n### Math\n- [ ] HW\n"
        note = parse_weekly_note(md, "2026-W05")
        self.assertEqual(note.days[0].entries, [SubjectEntry("Math", [Task("HW")])])
        self.assertEqual(note.general_tasks, [])

    def test_general_tasks_heading_is_case_insensitive(self):
        md = "## Monday, January 26\n### Math\n- [ ] HW\n---\n## general tasks\n- [ ] Buy pens\n"
        note = parse_weekly_note(md, "2026-W05")
        self.assertEqual(note.general_tasks, [Task("Buy pens")])
        self.assertEqual(len(note.days), 1)

    def test_surrounding_whitespace_is_stripped(self):
        note = WeeklyNote(
            week="2026-W05",
            date_range=DateRange("2026-01-26", "2026-02-01"),
            days=[DayRecord("2026-01-26", "Monday", [SubjectEntry(" Math ", [Task("HW ")])])],
            general_tasks=[Task("  Buy pens")],
        )
        parsed = parse_weekly_note(serialize_weekly_note(note), note.week)
        self.assertEqual(parsed.days[0].entries, [SubjectEntry("Math", [Task("HW")])])
        self.assertEqual(parsed.general_tasks, [Task("Buy pens")])

    def test_subject_headings_inside_general_tasks_are_ignored(self):
        md = "## General Tasks\n### Misc\n- [ ] Buy pens\n"
        note = parse_weekly_note(md, "2026-W05")
        self.assertEqual(note.general_tasks, [Task("Buy pens")])
        self.assertEqual(note.days, [])


if __name__ == '__main__':
    unittest.main()
