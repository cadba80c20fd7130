"""
Central data model definitions used across the project.

This module defines the canonical structure of the records exchanged with the
NTUST querycourse API so that:
- the decoder, the merger and both clients share the same field names
- upstream wire quirks (numbers as strings, 0/1 booleans) never leak past parse.py
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Language(Enum):
    """
    Language of the returned course texts. The value is the wire code.
    """

    ZH = "zh"
    EN = "en"

    @classmethod
    def from_str(cls, text: str) -> "Language":
        code = text.strip().lower()
        for lang in cls:
            if lang.value == code:
                return lang
        raise ValueError(f"Unknown language: {text!r} (expected 'zh' or 'en')")

    def as_str(self) -> str:
        return self.value


@dataclass
class CourseInfo:
    """
    Represents one row of a course search result.

    Several rows may share (semester, course_no) and differ only by node;
    see merge.merge_courses().
    """

    semester: str
    course_no: str
    course_name: str
    course_teacher: str
    dimension: Optional[str]
    credit_point: float
    require_option: str
    all_year: str
    choose_student: int
    three_student: int
    all_student: int
    restrict1: int
    restrict2: int
    ntu_restrict: int
    ntnu_restrict: int
    course_times: str
    practical_times: str
    classroom_no: Optional[str]
    three_node: Optional[str]
    node: Optional[str]
    contents: Optional[str]
    ntu_people: int
    ntnu_people: int
    abroad_people: int


@dataclass
class CourseDetails:
    """
    Represents the full record of one course, keyed by (semester, course_no, language).

    Long-text and instruction fields are None when the API sends an empty string.
    """

    semester: str
    course_no: str
    course_name: str
    course_teacher: str
    credit_point: float
    course_times: str
    practical_times: str
    require_option: str
    all_year: str
    choose_student: int
    three_student: int
    all_student: int
    restrict1: int
    restrict2: int
    ntu_restrict: int
    ntnu_restrict: int
    classroom_no: Optional[str]
    dimension: Optional[str] = None
    node: Optional[str] = None
    contents: Optional[str] = None
    ntu_people: Optional[int] = None
    ntnu_people: Optional[int] = None
    abroad_people: Optional[int] = None
    core_ability: Optional[str] = None
    course_url: Optional[str] = None
    course_object: Optional[str] = None
    course_content: Optional[str] = None
    course_textbook: Optional[str] = None
    course_refbook: Optional[str] = None
    course_note: Optional[str] = None
    course_grading: Optional[str] = None
    course_remark: Optional[str] = None
    instruction_1: Optional[str] = None
    instruction_2: Optional[str] = None
    instruction_3: Optional[str] = None
    instruction_4: Optional[str] = None
    instruction_other: Optional[str] = None


@dataclass
class SearchOptions:
    """
    Filters sent to the search endpoint.

    Empty strings mean "no filter" for the text fields.
    """

    semester: str
    course_no: str = ""
    course_name: str = ""
    course_teacher: str = ""
    dimension: str = ""
    course_notes: str = ""
    foreign_language: bool = False
    only_general: bool = False
    only_ntust: bool = False
    only_master: bool = False
    only_undergraduate: bool = False
    only_node: bool = False
    language: Language = Language.ZH
