"""
Unit tests for merging search rows split across scheduling nodes.

Merged output order is not part of the contract, so the tests compare by
course number.
"""

import unittest

from querycourse.merge import canonical_nodes, merge_courses
from querycourse.parse import parse_course_info
from samples import search_row


def _by_no(courses):
    return {c.course_no: c for c in courses}


class TestMergeCourses(unittest.TestCase):
    def test_merges_nodes_of_same_course(self) -> None:
        rows = [
            parse_course_info(search_row(CourseNo="CS1003302", Node="R1")),
            parse_course_info(search_row(CourseNo="CS1003302", Node="T1,T2")),
        ]
        merged = merge_courses(rows)

        self.assertEqual(len(merged), 1)
        self.assertEqual(merged[0].course_no, "CS1003302")
        self.assertEqual(merged[0].node, "R1,T1,T2")

    def test_sorts_and_dedupes(self) -> None:
        rows = [
            parse_course_info(search_row(Node="T2")),
            parse_course_info(search_row(Node="R1,T2")),
            parse_course_info(search_row(Node="T1")),
        ]
        self.assertEqual(merge_courses(rows)[0].node, "R1,T1,T2")

    def test_first_row_is_canonical(self) -> None:
        rows = [
            parse_course_info(search_row(ClassRoomNo="TR-313", Node="R1")),
            parse_course_info(search_row(ClassRoomNo="TR-999", Node="R2")),
        ]
        merged = merge_courses(rows)
        self.assertEqual(merged[0].classroom_no, "TR-313")

    def test_blank_node_passes_through(self) -> None:
        row = parse_course_info(search_row(CourseNo="GE3729302", Node=" "))
        merged = merge_courses([row])
        self.assertIs(merged[0], row)
        self.assertEqual(merged[0].node, " ")

    def test_rows_without_node_pass_through(self) -> None:
        row = parse_course_info(search_row(CourseNo="GE3729302", Node=""))
        merged = merge_courses([row])
        self.assertEqual(merged, [row])
        self.assertIsNone(merged[0].node)

    def test_distinct_courses_kept(self) -> None:
        rows = [
            parse_course_info(search_row(CourseNo="CS1003302", Node="R1")),
            parse_course_info(search_row(CourseNo="CS2006302", Node="")),
            parse_course_info(search_row(CourseNo="CS1003302", Node="R2")),
        ]
        merged = _by_no(merge_courses(rows))

        self.assertEqual(set(merged), {"CS1003302", "CS2006302"})
        self.assertEqual(merged["CS1003302"].node, "R1,R2")
        self.assertIsNone(merged["CS2006302"].node)

    def test_idempotent(self) -> None:
        rows = [
            parse_course_info(search_row(CourseNo="CS1003302", Node="R1")),
            parse_course_info(search_row(CourseNo="CS1003302", Node="T1,T2")),
            parse_course_info(search_row(CourseNo="CS2006302", Node="")),
        ]
        once = merge_courses(rows)
        twice = merge_courses(once)
        self.assertEqual(_by_no(once), _by_no(twice))

    def test_input_not_modified(self) -> None:
        first = parse_course_info(search_row(Node="R1"))
        merge_courses([first, parse_course_info(search_row(Node="R2"))])
        self.assertEqual(first.node, "R1")


class TestCanonicalNodes(unittest.TestCase):
    def test_canonical(self) -> None:
        self.assertEqual(canonical_nodes("T2, R1,,T2"), "R1,T2")
        self.assertEqual(canonical_nodes(""), "")


if __name__ == "__main__":
    unittest.main()
