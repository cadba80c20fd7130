"""
Merging of search results.

The search endpoint returns one row per scheduling node, so a course taught in
several parallel groups shows up several times with the same course_no.
merge_courses() folds those rows into one record per course number:

    course_no  node          course_no  node
    CS1003302  R1       ->   CS1003302  R1,T1,T2
    CS1003302  T1,T2
"""

from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable, List

from querycourse.model import CourseInfo


def canonical_nodes(nodes: str) -> str:
    """
    Split on comma, sort, drop duplicates and blanks, join with comma.
    """
    parts = {p.strip() for p in nodes.split(",")}
    return ",".join(sorted(p for p in parts if p))


def merge_courses(courses: Iterable[CourseInfo]) -> List[CourseInfo]:
    """
    Return one CourseInfo per course_no.

    The first row seen for a course number is kept as the canonical record;
    the node values of later rows are appended to it. Input rows are not
    modified. Order follows first appearance, but callers should not rely on it.
    """
    canonical: Dict[str, CourseInfo] = {}
    nodes: Dict[str, List[str]] = {}

    for course in courses:
        key = course.course_no
        if key not in canonical:
            canonical[key] = course
            nodes[key] = []
        if course.node and course.node.strip():
            nodes[key].append(course.node)

    merged: List[CourseInfo] = []
    for key, course in canonical.items():
        if not nodes[key]:
            merged.append(course)
            continue
        joined = canonical_nodes(",".join(nodes[key]))
        merged.append(replace(course, node=joined) if joined else course)

    return merged
