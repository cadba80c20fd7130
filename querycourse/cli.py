"""
CLI (Command Line Interface).

Quick terminal access to the querycourse API, e.g.:

    querycourse search 1131 --course-no cs
    querycourse search 1131 --teacher 陳 --raw --output results.json
    querycourse query 1122 AT2005701 --language en
    querycourse query 1122 CS2006302 CS2008302 CS3001302

Note:
- Several course numbers passed to `query` are fetched concurrently
- This CLI prints plain text; use --output for the full records as JSON
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import List

from querycourse.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT, ClientBuilder
from querycourse.errors import QueryError
from querycourse.export import export_courses_to_json
from querycourse.model import CourseDetails, CourseInfo, Language, SearchOptions

MAX_SEARCH_LINES = 20


def _make_builder(args: argparse.Namespace) -> ClientBuilder:
    """
    Translate the global options into a ClientBuilder.
    """
    return (
        ClientBuilder()
        .base_url(args.base_url)
        .user_agent(args.user_agent)
        .timeout(args.timeout)
        .local_address(args.local_address)
    )


def _language(text: str) -> Language:
    try:
        return Language.from_str(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _print_course_line(c: CourseInfo) -> None:
    node = c.node or "-"
    print(f"{c.course_no} | {c.course_name} | {c.course_teacher} | {node}")


def _print_details(d: CourseDetails) -> None:
    print(f"{d.course_no} {d.course_name} ({d.semester})")
    print(f"  teacher:   {d.course_teacher}")
    print(f"  credits:   {d.credit_point:g}")
    print(f"  times:     {d.course_times or '-'}  room: {d.classroom_no or '-'}")
    print(f"  enrolled:  {d.choose_student}/{d.restrict2}")
    if d.course_url:
        print(f"  url:       {d.course_url}")


def _cmd_search(args: argparse.Namespace) -> int:
    """
    Search courses and print one line per (merged) course.
    """
    semester = (args.semester or "").strip()
    if not semester:
        print("Please provide a semester (e.g. 1131).", file=sys.stderr)
        return 1

    options = SearchOptions(
        semester=semester,
        course_no=args.course_no,
        course_name=args.name,
        course_teacher=args.teacher,
        dimension=args.dimension,
        course_notes=args.notes,
        foreign_language=args.foreign_language,
        only_general=args.only_general,
        only_ntust=args.only_ntust,
        only_master=args.only_master,
        only_undergraduate=args.only_undergraduate,
        only_node=args.only_node,
        language=args.language,
    )

    with _make_builder(args).build() as client:
        courses = client.search(options, merge_results=not args.raw)

    if args.output:
        n = export_courses_to_json(courses, args.output)
        print(f"Exported {n} courses to: {args.output}")

    if not courses:
        print("No results.")
        return 0

    for c in courses[:MAX_SEARCH_LINES]:
        _print_course_line(c)
    if len(courses) > MAX_SEARCH_LINES:
        print(f"... and {len(courses) - MAX_SEARCH_LINES} more results")

    return 0


async def _query_many(builder: ClientBuilder, semester: str, course_nos: List[str], language: Language) -> List[CourseDetails]:
    async with builder.build_async() as client:
        return await client.query_many(semester, course_nos, language)


def _cmd_query(args: argparse.Namespace) -> int:
    """
    Fetch and print course details for one or more course numbers.
    """
    semester = (args.semester or "").strip()
    course_nos = [no.strip().upper() for no in args.course_no if no.strip()]
    if not semester or not course_nos:
        print("Please provide a semester and at least one course number.", file=sys.stderr)
        return 1

    builder = _make_builder(args)
    if len(course_nos) == 1:
        with builder.build() as client:
            details = [client.query(semester, course_nos[0], args.language)]
    else:
        details = asyncio.run(_query_many(builder, semester, course_nos, args.language))

    for d in details:
        _print_details(d)

    if args.output:
        n = export_courses_to_json(details, args.output)
        print(f"Exported {n} courses to: {args.output}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="querycourse", description="NTUST course query CLI")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL, help="API base URL")
    parser.add_argument("--user-agent", default=DEFAULT_USER_AGENT, help="User-Agent header")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("--local-address", default=None, help="Local address to bind outgoing connections to")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log requests (DEBUG)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_search = sub.add_parser("search", help="Search for courses")
    p_search.add_argument("semester", type=str, help="Semester (e.g. 1131)")
    p_search.add_argument("--course-no", default="", help="Course number filter (prefix, e.g. CS)")
    p_search.add_argument("--name", default="", help="Course name filter")
    p_search.add_argument("--teacher", default="", help="Teacher filter")
    p_search.add_argument("--dimension", default="", help="Dimension / category filter")
    p_search.add_argument("--notes", default="", help="Course notes filter")
    p_search.add_argument("--foreign-language", action="store_true", help="Only courses taught in a foreign language")
    p_search.add_argument("--only-general", action="store_true", help="Only general education courses")
    p_search.add_argument("--only-ntust", action="store_true", help="Only NTUST courses")
    p_search.add_argument("--only-master", action="store_true", help="Only graduate courses")
    p_search.add_argument("--only-undergraduate", action="store_true", help="Only undergraduate courses")
    p_search.add_argument("--only-node", action="store_true", help="Only courses with scheduling nodes")
    p_search.add_argument("--language", type=_language, default=Language.ZH, help="zh or en")
    p_search.add_argument("--raw", action="store_true", help="Do not merge rows split across nodes")
    p_search.add_argument("--output", "-o", default=None, help="Write results to a JSON file")

    p_query = sub.add_parser("query", help="Show course details")
    p_query.add_argument("semester", type=str, help="Semester (e.g. 1122)")
    p_query.add_argument("course_no", nargs="+", help="Course number(s) (e.g. AT2005701)")
    p_query.add_argument("--language", type=_language, default=Language.ZH, help="zh or en")
    p_query.add_argument("--output", "-o", default=None, help="Write details to a JSON file")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "search":
            raise SystemExit(_cmd_search(args))
        if args.command == "query":
            raise SystemExit(_cmd_query(args))
    except QueryError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(1)
    except ValueError as e:
        parser.error(str(e))

    raise SystemExit(2)
