"""Tests for domain/scheduling/coverage.py"""

import unittest
from datetime import datetime, timedelta

from app.domain.scheduling import (
    AssignmentInterval,
    CoverageWindow,
    InvalidIntervalError,
    find_gaps,
    find_overlaps,
)
from app.domain.scheduling.coverage import gap_severity

JAN_1 = datetime(2026, 1, 1)
WINDOW = CoverageWindow(start=JAN_1, end=JAN_1 + timedelta(days=30))


def day(n, hour=0):
    """Midnight (or the given hour) n days after the window start"""
    return JAN_1 + timedelta(days=n, hours=hour)


def shift(start, end, name="Staff"):
    return AssignmentInterval(start=start, end=end, assignee_name=name)


def total_hours(spans):
    return sum((end - start).total_seconds() / 3600 for start, end in spans)


class TestFindGaps(unittest.TestCase):
    """Tests for coverage gap detection"""

    def test_full_coverage(self):
        report = find_gaps(WINDOW, [shift(WINDOW.start, WINDOW.end)])
        self.assertEqual(report.gaps, [])
        self.assertEqual(report.covered_percentage, 100.0)
        self.assertEqual(report.status, "full")

    def test_single_trailing_gap(self):
        report = find_gaps(WINDOW, [shift(day(0), day(29))])

        self.assertEqual(len(report.gaps), 1)
        gap = report.gaps[0]
        self.assertEqual(gap.start, day(29))
        self.assertEqual(gap.end, day(30))
        self.assertEqual(gap.hours, 24.0)
        self.assertEqual(round(report.covered_percentage, 1), 96.7)

    def test_no_intervals(self):
        report = find_gaps(WINDOW, [])
        self.assertEqual(len(report.gaps), 1)
        self.assertEqual((report.gaps[0].start, report.gaps[0].end), (WINDOW.start, WINDOW.end))
        self.assertEqual(report.covered_percentage, 0.0)
        self.assertEqual(report.status, "critical")

    def test_touching_intervals_leave_no_gap(self):
        report = find_gaps(WINDOW, [shift(day(0), day(10)), shift(day(10), day(30))])
        self.assertEqual(report.gaps, [])
        self.assertEqual(report.covered_runs, [(day(0), day(30))])

    def test_nested_interval_is_absorbed(self):
        outer = shift(day(0), day(20))
        report = find_gaps(WINDOW, [outer, shift(day(5), day(6))])
        self.assertEqual(report.covered_runs, [(day(0), day(20))])
        self.assertEqual(len(report.gaps), 1)
        self.assertEqual(report.gaps[0].start, day(20))

    def test_gaps_between_and_around_runs(self):
        report = find_gaps(WINDOW, [shift(day(1), day(2)), shift(day(3), day(29))])
        self.assertEqual(
            [(g.start, g.end) for g in report.gaps],
            [(day(0), day(1)), (day(2), day(3)), (day(29), day(30))],
        )

    def test_intervals_are_clipped_to_window(self):
        report = find_gaps(
            WINDOW,
            [shift(day(-5), day(1)), shift(day(29), day(40))],
        )
        self.assertEqual(report.covered_runs, [(day(0), day(1)), (day(29), day(30))])
        self.assertEqual([(g.start, g.end) for g in report.gaps], [(day(1), day(29))])

    def test_intervals_outside_window_are_ignored(self):
        report = find_gaps(WINDOW, [shift(day(-3), day(-1)), shift(day(30), day(31))])
        self.assertEqual(report.covered_runs, [])
        self.assertEqual(report.covered_percentage, 0.0)

    def test_input_order_does_not_matter(self):
        intervals = [
            shift(day(12), day(14), "C"),
            shift(day(0), day(3), "A"),
            shift(day(2), day(5), "B"),
            shift(day(12), day(13), "D"),
        ]
        forward = find_gaps(WINDOW, intervals)
        backward = find_gaps(WINDOW, list(reversed(intervals)))
        self.assertEqual(forward.gaps, backward.gaps)
        self.assertEqual(forward.covered_runs, backward.covered_runs)

    def test_gaps_and_runs_tile_the_window(self):
        cases = [
            [],
            [shift(day(0), day(30))],
            [shift(day(1, 6), day(2, 18)), shift(day(2), day(4)), shift(day(9), day(9, 1))],
            [shift(day(-1), day(3)), shift(day(3), day(7)), shift(day(25), day(35))],
        ]
        for intervals in cases:
            with self.subTest(intervals=intervals):
                report = find_gaps(WINDOW, intervals)
                spans = sorted(report.covered_runs + [(g.start, g.end) for g in report.gaps])

                self.assertAlmostEqual(total_hours(spans), WINDOW.hours)
                self.assertEqual(spans[0][0], WINDOW.start)
                self.assertEqual(spans[-1][1], WINDOW.end)
                for (_, prev_end), (next_start, _) in zip(spans, spans[1:]):
                    self.assertEqual(prev_end, next_start)

    def test_adding_an_interval_never_grows_gaps(self):
        base = [shift(day(0), day(4)), shift(day(10), day(12))]
        before = find_gaps(WINDOW, base)
        after = find_gaps(WINDOW, base + [shift(day(3), day(11))])

        self.assertLessEqual(after.gap_hours, before.gap_hours)
        for gap in after.gaps:
            self.assertTrue(
                any(old.start <= gap.start and gap.end <= old.end for old in before.gaps)
            )

    def test_malformed_interval_fails_whole_call(self):
        with self.assertRaises(InvalidIntervalError):
            find_gaps(WINDOW, [shift(day(0), day(1)), shift(day(5), day(5))])

    def test_inverted_window_rejected(self):
        with self.assertRaises(InvalidIntervalError):
            find_gaps(CoverageWindow(start=day(2), end=day(1)), [])

    def test_hours_summary(self):
        report = find_gaps(WINDOW, [shift(day(0), day(15))])
        self.assertEqual(report.total_hours, 720.0)
        self.assertEqual(report.gap_hours, 360.0)
        self.assertEqual(report.covered_hours, 360.0)
        self.assertEqual(report.covered_percentage, 50.0)


class TestSeverity(unittest.TestCase):
    def test_thresholds(self):
        self.assertEqual(gap_severity(25), "critical")
        self.assertEqual(gap_severity(24), "high")
        self.assertEqual(gap_severity(5), "high")
        self.assertEqual(gap_severity(4), "medium")
        self.assertEqual(gap_severity(0.5), "medium")

    def test_partial_status_without_critical_gaps(self):
        report = find_gaps(WINDOW, [shift(day(0), day(10)), shift(day(10, 3), day(30))])
        self.assertEqual(len(report.gaps), 1)
        self.assertEqual(report.gaps[0].severity, "medium")
        self.assertEqual(report.status, "partial")


class TestFindOverlaps(unittest.TestCase):
    """Tests for overlapping shift detection"""

    def test_overlapping_shifts_reported(self):
        overlaps = find_overlaps(
            WINDOW, [shift(day(0), day(2), "Ana"), shift(day(1), day(3), "Ben")]
        )
        self.assertEqual(len(overlaps), 1)
        self.assertEqual((overlaps[0].start, overlaps[0].end), (day(1), day(2)))
        self.assertEqual(overlaps[0].hours, 24.0)
        self.assertEqual(overlaps[0].first.assignee_name, "Ana")
        self.assertEqual(overlaps[0].second.assignee_name, "Ben")

    def test_touching_shifts_do_not_overlap(self):
        self.assertEqual(
            find_overlaps(WINDOW, [shift(day(0), day(1)), shift(day(1), day(2))]), []
        )

    def test_long_shift_overlaps_each_short_shift(self):
        overlaps = find_overlaps(
            WINDOW,
            [
                shift(day(0), day(10), "Long"),
                shift(day(2), day(3), "Short1"),
                shift(day(5), day(6), "Short2"),
            ],
        )
        self.assertEqual([o.second.assignee_name for o in overlaps], ["Short1", "Short2"])
        self.assertTrue(all(o.first.assignee_name == "Long" for o in overlaps))

    def test_short_shifts_inside_a_long_shift_overlap_each_other(self):
        overlaps = find_overlaps(
            WINDOW,
            [
                shift(day(0), day(10), "Long"),
                shift(day(1), day(3), "Ben"),
                shift(day(2), day(5), "Cy"),
            ],
        )
        pairs = {(o.first.assignee_name, o.second.assignee_name): o for o in overlaps}

        self.assertEqual(set(pairs), {("Long", "Ben"), ("Long", "Cy"), ("Ben", "Cy")})
        self.assertEqual((pairs["Ben", "Cy"].start, pairs["Ben", "Cy"].end), (day(2), day(3)))
        self.assertEqual((pairs["Long", "Cy"].start, pairs["Long", "Cy"].end), (day(2), day(5)))


if __name__ == "__main__":
    unittest.main()
