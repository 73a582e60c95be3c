"""
Unit tests for parsing termine.txt lines and files.

Parsing contract:
- 1 line = at most 1 SVStunde
- Bad lines are reported as RejectedLine, never raised
- Output is sorted by start, equal starts keep file order
"""

import unittest
from datetime import datetime

from svarchiv.model import RejectedLine, SVStunde
from svarchiv.schedule import parse_termine, parse_termine_file, parse_termine_line


class TestParseTermineLine(unittest.TestCase):
    def test_normal_line(self) -> None:
        s = parse_termine_line("- Mo 19.01 3.FS", 2026, 1)

        self.assertIsInstance(s, SVStunde)
        assert isinstance(s, SVStunde)

        self.assertEqual(s.start, datetime(2026, 1, 19, 11, 55))
        self.assertEqual(s.end, datetime(2026, 1, 19, 12, 40))
        self.assertEqual(s.date_label, "19.01")
        self.assertEqual(s.fs, "3.FS")
        self.assertEqual(s.raw_line, "- Mo 19.01 3.FS")

    def test_space_before_fs_suffix(self) -> None:
        s = parse_termine_line("  - Do 05.02 3. FS  ", 2026, 1)

        assert isinstance(s, SVStunde)
        self.assertEqual(s.start, datetime(2026, 2, 5, 11, 55))
        self.assertEqual(s.raw_line, "- Do 05.02 3. FS")

    def test_single_digit_day_and_month_are_padded(self) -> None:
        s = parse_termine_line("- Fr 5.9 6.FS", 2026, 9)

        assert isinstance(s, SVStunde)
        self.assertEqual(s.date_label, "05.09")
        self.assertEqual(s.start, datetime(2026, 9, 5, 14, 15))

    def test_hu_code_and_lowercase_suffix(self) -> None:
        s = parse_termine_line("- Mi 09.12 hu.fs", 2026, 10)

        assert isinstance(s, SVStunde)
        self.assertEqual(s.fs, "HU.FS")
        self.assertEqual(s.start, datetime(2026, 12, 9, 8, 0))
        self.assertEqual(s.end, datetime(2026, 12, 9, 9, 40))

    def test_year_rollover(self) -> None:
        january = parse_termine_line("- Mo 19.01 3.FS", 2025, 7)
        august = parse_termine_line("- Mo 18.08 3.FS", 2025, 7)

        assert isinstance(january, SVStunde)
        assert isinstance(august, SVStunde)
        self.assertEqual(january.start.year, 2026)
        self.assertEqual(august.start.year, 2025)

    def test_current_month_stays_in_current_year(self) -> None:
        s = parse_termine_line("- Mo 01.07 1.FS", 2025, 7)

        assert isinstance(s, SVStunde)
        self.assertEqual(s.start.year, 2025)

    def test_unknown_fs_code_is_rejected(self) -> None:
        r = parse_termine_line("- Mo 19.01 9.FS", 2026, 1, line_no=4)

        self.assertIsInstance(r, RejectedLine)
        assert isinstance(r, RejectedLine)
        self.assertEqual(r.line_no, 4)
        self.assertIn("unknown FS code", r.reason)

    def test_malformed_lines_are_rejected(self) -> None:
        for line in ["", "# SV-Stunden", "Mo 19.01 3.FS", "- Mo 19-01 3.FS", "- Mo 19.01", "- Mo 19.01 3."]:
            with self.subTest(line=line):
                r = parse_termine_line(line, 2026, 1)
                self.assertIsInstance(r, RejectedLine)

    def test_impossible_date_is_rejected(self) -> None:
        r = parse_termine_line("- Mo 31.02 3.FS", 2026, 1)

        assert isinstance(r, RejectedLine)
        self.assertIn("invalid date", r.reason)

    def test_end_after_start_for_every_code(self) -> None:
        for code in ["HU", "1", "2", "3", "4", "5", "6", "7", "8"]:
            with self.subTest(code=code):
                s = parse_termine_line(f"- Mo 19.01 {code}.FS", 2026, 1)
                assert isinstance(s, SVStunde)
                self.assertGreater(s.end, s.start)


class TestParseTermineFile(unittest.TestCase):
    NOW = datetime(2026, 1, 10, 9, 0)

    def test_counts_and_sorting(self) -> None:
        content = "\n".join(
            [
                "# SV-Stunden",
                "- Di 27.01 6.FS",
                "",
                "- Mo 19.01 3.FS",
                "- Mo 19.01 9.FS",
                "kaputt",
                "- Do 05.02 3. FS",
            ]
        )
        result = parse_termine(content, self.NOW)

        self.assertEqual([s.date_label for s in result.stunden], ["19.01", "27.01", "05.02"])
        self.assertEqual(len(result.rejected), 3)
        self.assertEqual([r.line_no for r in result.rejected], [1, 5, 6])

    def test_equal_start_keeps_file_order(self) -> None:
        content = "- Mo 19.01 3.FS\n- Montag 19.01 3. FS\n"
        stunden = parse_termine_file(content, self.NOW)

        self.assertEqual(len(stunden), 2)
        self.assertEqual(stunden[0].raw_line, "- Mo 19.01 3.FS")
        self.assertEqual(stunden[1].raw_line, "- Montag 19.01 3. FS")

    def test_rollover_sorts_after_current_year(self) -> None:
        now = datetime(2026, 10, 19, 8, 0)
        content = "- Mo 18.01 3.FS\n- Mo 19.10 3.FS\n- Di 03.11 6.FS\n"
        stunden = parse_termine_file(content, now)

        self.assertEqual(
            [s.start.date().isoformat() for s in stunden],
            ["2026-10-19", "2026-11-03", "2027-01-18"],
        )

    def test_empty_and_garbage_input(self) -> None:
        self.assertEqual(parse_termine_file("", self.NOW), [])
        self.assertEqual(parse_termine_file("\n\n   \n", self.NOW), [])

        result = parse_termine("foo\nbar\n", self.NOW)
        self.assertEqual(result.stunden, [])
        self.assertEqual(len(result.rejected), 2)

    def test_windows_line_endings(self) -> None:
        stunden = parse_termine_file("- Mo 19.01 3.FS\r\n- Di 27.01 6.FS\r\n", self.NOW)
        self.assertEqual(len(stunden), 2)

    def test_only_newline_separates_lines(self) -> None:
        # form feed and NEL stay inside their line
        content = "- Mo 19.01 3.FS\x0c- Di 27.01 6.FS\n- Do 05.02 3. FS x\n- Fr 06.02 1.FS\x85y"
        result = parse_termine(content, self.NOW)

        self.assertEqual([s.date_label for s in result.stunden], ["19.01", "05.02", "06.02"])
        self.assertEqual([s.line_no for s in result.stunden], [1, 2, 3])
        self.assertEqual(result.rejected, [])


if __name__ == "__main__":
    unittest.main()
