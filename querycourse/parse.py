"""
Parsing (raw API JSON -> typed records) and the SearchOptions wire form.

- Decodes search rows into CourseInfo and detail rows into CourseDetails
- Encodes SearchOptions into the JSON body the search endpoint expects
- Decodes such a body back into SearchOptions (captured requests, tests)

Important rules (DO NOT CHANGE):
- Wire names are an external contract, including the misspelled "OnleyNTUST"
- NTURestrict / NTNURestrict are the only fields allowed to fall back to a
  default; every other failing field makes the whole record a ParseError
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Mapping, Tuple, Type, TypeVar

from querycourse.coerce import (
    decode_bool_as_int,
    decode_numeric_string,
    decode_optional_text,
    decode_text,
    decode_tolerated_int,
    encode_bool_as_int,
)
from querycourse.errors import ParseError
from querycourse.model import CourseDetails, CourseInfo, Language, SearchOptions

# Used for NTURestrict / NTNURestrict when the API omits them or sends garbage.
RESTRICT_FALLBACK = 0

_MISSING = object()

Rule = Callable[[Mapping[str, Any], str], Any]
Record = TypeVar("Record")


# ---------------------------------------------------------------------------
# Field rules
# ---------------------------------------------------------------------------


def _required(raw: Mapping[str, Any], key: str) -> Any:
    value = raw.get(key, _MISSING)
    if value is _MISSING:
        raise ValueError("missing field")
    return value


def _text(raw: Mapping[str, Any], key: str) -> str:
    return decode_text(_required(raw, key))


def _optional_text(raw: Mapping[str, Any], key: str) -> Any:
    return decode_optional_text(raw.get(key))


def _float(raw: Mapping[str, Any], key: str) -> float:
    return decode_numeric_string(_required(raw, key), float)


def _int(raw: Mapping[str, Any], key: str) -> int:
    return decode_numeric_string(_required(raw, key), int)


def _tolerated_restrict(raw: Mapping[str, Any], key: str) -> int:
    return decode_tolerated_int(raw.get(key), RESTRICT_FALLBACK)


def _count_or(default: Any) -> Rule:
    """
    Integer count that may be missing (or null) from the payload.
    A present but unparsable value is still an error.
    """

    def rule(raw: Mapping[str, Any], key: str) -> Any:
        value = raw.get(key)
        if value is None:
            return default
        return decode_numeric_string(value, int)

    return rule


# ---------------------------------------------------------------------------
# Field tables: (attribute, wire name, rule)
# ---------------------------------------------------------------------------

_OFFERING_FIELDS: List[Tuple[str, str, Rule]] = [
    ("semester", "Semester", _text),
    ("course_no", "CourseNo", _text),
    ("course_name", "CourseName", _text),
    ("course_teacher", "CourseTeacher", _text),
    ("credit_point", "CreditPoint", _float),
    ("require_option", "RequireOption", _text),
    ("all_year", "AllYear", _text),
    ("choose_student", "ChooseStudent", _int),
    ("three_student", "ThreeStudent", _int),
    ("all_student", "AllStudent", _int),
    ("restrict1", "Restrict1", _int),
    ("restrict2", "Restrict2", _int),
    ("ntu_restrict", "NTURestrict", _tolerated_restrict),
    ("ntnu_restrict", "NTNURestrict", _tolerated_restrict),
    ("course_times", "CourseTimes", _text),
    ("practical_times", "PracticalTimes", _text),
    ("classroom_no", "ClassRoomNo", _optional_text),
    ("dimension", "Dimension", _optional_text),
    ("node", "Node", _optional_text),
    ("contents", "Contents", _optional_text),
]

COURSE_INFO_FIELDS: List[Tuple[str, str, Rule]] = _OFFERING_FIELDS + [
    ("three_node", "ThreeNode", _optional_text),
    ("ntu_people", "NTU_People", _count_or(0)),
    ("ntnu_people", "NTNU_People", _count_or(0)),
    ("abroad_people", "AbroadPeople", _count_or(0)),
]

COURSE_DETAILS_FIELDS: List[Tuple[str, str, Rule]] = _OFFERING_FIELDS + [
    ("ntu_people", "NTU_People", _count_or(None)),
    ("ntnu_people", "NTNU_People", _count_or(None)),
    ("abroad_people", "AbroadPeople", _count_or(None)),
    ("core_ability", "CoreAbility", _optional_text),
    ("course_url", "CourseURL", _optional_text),
    ("course_object", "CourseObject", _optional_text),
    ("course_content", "CourseContent", _optional_text),
    ("course_textbook", "CourseTextbook", _optional_text),
    ("course_refbook", "CourseRefbook", _optional_text),
    ("course_note", "CourseNote", _optional_text),
    ("course_grading", "CourseGrading", _optional_text),
    ("course_remark", "CourseRemark", _optional_text),
    ("instruction_1", "Instruction_1", _optional_text),
    ("instruction_2", "Instruction_2", _optional_text),
    ("instruction_3", "Instruction_3", _optional_text),
    ("instruction_4", "Instruction_4", _optional_text),
    ("instruction_other", "Instruction_other", _optional_text),
]

# (attribute, wire name) of the SearchOptions body, in upstream order
_SEARCH_TEXT_FIELDS: List[Tuple[str, str]] = [
    ("semester", "Semester"),
    ("course_no", "CourseNo"),
    ("course_name", "CourseName"),
    ("course_teacher", "CourseTeacher"),
    ("dimension", "Dimension"),
    ("course_notes", "CourseNotes"),
]

_SEARCH_FLAG_FIELDS: List[Tuple[str, str]] = [
    ("foreign_language", "ForeignLanguage"),
    ("only_general", "OnlyGeneral"),
    ("only_ntust", "OnleyNTUST"),  # sic, upstream spelling
    ("only_master", "OnlyMaster"),
    ("only_undergraduate", "OnlyUnderGraduate"),
    ("only_node", "OnlyNode"),
]


# ---------------------------------------------------------------------------
# Record decoding (CORE LOGIC)
# ---------------------------------------------------------------------------


def _decode_record(
    raw: Any,
    fields: List[Tuple[str, str, Rule]],
    cls: Type[Record],
    what: str,
) -> Record:
    """
    Apply every field rule and build `cls`, or raise one ParseError that
    lists all failing wire fields.
    """
    if not isinstance(raw, dict):
        raise ParseError(f"expected a JSON object for {what}, got {type(raw).__name__}")

    values: Dict[str, Any] = {}
    failures: List[str] = []
    for attr, wire, rule in fields:
        try:
            values[attr] = rule(raw, wire)
        except ValueError as e:
            failures.append(f"{wire} ({e})")

    if failures:
        course_no = raw.get("CourseNo")
        where = f" {course_no}" if isinstance(course_no, str) and course_no else ""
        raise ParseError(f"invalid {what}{where}: " + ", ".join(failures))

    return cls(**values)


def parse_course_info(raw: Any) -> CourseInfo:
    return _decode_record(raw, COURSE_INFO_FIELDS, CourseInfo, "course info")


def parse_course_details(raw: Any) -> CourseDetails:
    return _decode_record(raw, COURSE_DETAILS_FIELDS, CourseDetails, "course details")


def _parse_list(payload: Any, parse_one: Callable[[Any], Record]) -> List[Record]:
    if not isinstance(payload, list):
        raise ParseError(f"expected a JSON array, got {type(payload).__name__}")
    return [parse_one(item) for item in payload]


def parse_course_info_list(payload: Any) -> List[CourseInfo]:
    """
    Decode the search endpoint's array. Fails on the first invalid row.
    """
    return _parse_list(payload, parse_course_info)


def parse_course_details_list(payload: Any) -> List[CourseDetails]:
    """
    Decode the details endpoint's array (it is an array even for one course).
    """
    return _parse_list(payload, parse_course_details)


# ---------------------------------------------------------------------------
# SearchOptions wire form
# ---------------------------------------------------------------------------


def encode_search_options(options: SearchOptions) -> Dict[str, Any]:
    """
    Build the JSON body of the search request.
    """
    body: Dict[str, Any] = {}
    for attr, wire in _SEARCH_TEXT_FIELDS:
        body[wire] = getattr(options, attr)
    for attr, wire in _SEARCH_FLAG_FIELDS:
        body[wire] = encode_bool_as_int(getattr(options, attr))
    body["Language"] = options.language.as_str()
    return body


def decode_search_options(raw: Any) -> SearchOptions:
    """
    Inverse of encode_search_options(). Missing text filters default to "",
    missing flags to False and a missing language to Language.ZH.
    """
    if not isinstance(raw, dict):
        raise ParseError(f"expected a JSON object for search options, got {type(raw).__name__}")

    values: Dict[str, Any] = {}
    failures: List[str] = []

    for attr, wire in _SEARCH_TEXT_FIELDS:
        value = raw.get(wire, "")
        if attr == "semester" and wire not in raw:
            failures.append(f"{wire} (missing field)")
        elif not isinstance(value, str):
            failures.append(f"{wire} (expected a string)")
        else:
            values[attr] = value

    for attr, wire in _SEARCH_FLAG_FIELDS:
        try:
            values[attr] = decode_bool_as_int(raw.get(wire, 0))
        except ValueError as e:
            failures.append(f"{wire} ({e})")

    try:
        values["language"] = Language.from_str(str(raw.get("Language", Language.ZH.value)))
    except ValueError as e:
        failures.append(f"Language ({e})")

    if failures:
        raise ParseError("invalid search options: " + ", ".join(failures))

    return SearchOptions(**values)
