import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from datetime import date

from rabit.cli import join_arguments, main
from rabit.habit import Habit, HabitType
from rabit.storage import load_tracker, save_tracker
from rabit.tracker import Tracker


class CliTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp.name, "habit.json")

    def tearDown(self):
        self.tmp.cleanup()

    def _main(self, *argv):
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = main(["--file", self.path, *argv])
        return code, out.getvalue(), err.getvalue()

    def test_run_add_saves(self):
        code, out, _ = self._main("run", "add 'Drink Water' 8")

        self.assertEqual(code, 0)
        self.assertIn("Drink Water", out)
        tracker = load_tracker(self.path)
        self.assertEqual(tracker.labels(), ["Drink Water"])
        self.assertEqual(tracker.habits[0].habit_type, HabitType.COUNTER)

    def test_run_joins_shell_arguments(self):
        code, _, _ = self._main("run", "add", "Drink Water", "x")

        self.assertEqual(code, 0)
        self.assertEqual(load_tracker(self.path).habits[0].habit_type, HabitType.CHARACTER)

    def test_run_error_is_reported_in_band(self):
        code, out, _ = self._main("run", "remove", "1")

        self.assertEqual(code, 0)
        self.assertIn("only add, edit & delete", out)
        self.assertFalse(os.path.exists(self.path))

    def test_run_single_argument_line(self):
        self.assertEqual(self._main("run", "add Read")[0], 0)
        self.assertEqual(self._main("run", "edit 0 Run")[0], 0)
        self.assertEqual(load_tracker(self.path).labels(), ["Run"])

        code, out, _ = self._main("run", "delete 0")

        self.assertEqual(code, 0)
        self.assertIn("Deleted habit #0", out)
        self.assertEqual(load_tracker(self.path).habits, [])

    def test_run_apostrophe_in_argument(self):
        code, _, _ = self._main("run", "add", "Bob's run")

        self.assertEqual(code, 0)
        self.assertEqual(load_tracker(self.path).labels(), ["Bob's run"])

    def test_show_keeps_long_counts(self):
        save_tracker(
            Tracker(week_start=date(2026, 2, 2), habits=[Habit("Steps", HabitType.COUNTER, {"2026-02-02": "1234"})]),
            self.path,
        )

        code, out, _ = self._main("show")

        self.assertEqual(code, 0)
        self.assertIn("1234  ◦ ", out.splitlines()[2])

    def test_run_out_of_range_is_not_saved(self):
        code, out, _ = self._main("run", "delete 0")

        self.assertEqual(code, 0)
        self.assertIn("No habit #0", out)
        self.assertFalse(os.path.exists(self.path))

    def test_show_prints_week(self):
        save_tracker(
            Tracker(
                week_start=date(2026, 2, 2),
                habits=[Habit("Read", records={"2026-02-03": "true"}), Habit("Steps", HabitType.COUNTER)],
            ),
            self.path,
        )

        code, out, _ = self._main("show")

        lines = out.splitlines()
        self.assertEqual(code, 0)
        self.assertEqual(lines[0], "February 2026-02-02 → 2026-02-08")
        self.assertTrue(lines[1].endswith(" 2  3  4  5  6  7  8 "))
        self.assertTrue(lines[2].startswith(" 0 Read"))
        self.assertIn(" ◦  • ", lines[2])
        self.assertTrue(lines[3].startswith(" 1 Steps"))

    def test_show_other_week(self):
        save_tracker(Tracker(week_start=date(2026, 2, 2), habits=[Habit("Read")]), self.path)

        code, out, _ = self._main("show", "--date", "2026-03-04")

        self.assertEqual(code, 0)
        self.assertTrue(out.startswith("March 2026-03-02 → 2026-03-08"))

    def test_show_bad_date(self):
        code, _, err = self._main("show", "--date", "03/04/2026")

        self.assertEqual(code, 1)
        self.assertIn("YYYY-MM-DD", err)

    def test_show_without_habits(self):
        code, out, _ = self._main("show")

        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), "No habits yet.")

    def test_sync_without_database(self):
        save_tracker(Tracker(week_start=date(2026, 2, 2), habits=[Habit("Read")]), self.path)
        env = dict(os.environ)
        os.environ.pop("DATABASE_URL", None)
        os.environ.pop("RABIT_DB_URL", None)
        try:
            code, _, err = self._main("sync")
        finally:
            os.environ.clear()
            os.environ.update(env)

        self.assertEqual(code, 1)
        self.assertIn("DATABASE_URL", err)


class JoinArgumentsTests(unittest.TestCase):
    def test_quotes_parts_with_spaces(self):
        self.assertEqual(join_arguments(["edit", "0", "Read more"]), 'edit 0 "Read more"')
        self.assertEqual(join_arguments(["add 'Drink Water' 8"]), "add 'Drink Water' 8")
        self.assertEqual(join_arguments(["delete 0"]), "delete 0")
        self.assertEqual(join_arguments(["add", "Bob's run"]), "add \"Bob's run\"")
        self.assertEqual(join_arguments(["add", 'Say "hi" daily']), "add 'Say \"hi\" daily'")


if __name__ == "__main__":
    unittest.main()
