"""
Tests for AsyncClient using httpx.MockTransport (no network).
"""

import asyncio
import json
import unittest

import httpx

from querycourse.async_client import AsyncClient, create_http_client
from querycourse.config import ClientBuilder, ClientConfig
from querycourse.errors import HttpError, ParseError
from querycourse.model import Language, SearchOptions
from samples import details_row, search_row


def _client(handler, **config) -> AsyncClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return AsyncClient(ClientConfig(**config), http_client=http_client)


class TestAsyncSearch(unittest.IsolatedAsyncioTestCase):
    async def test_search_merges_and_sends_body(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[
                    search_row(CourseNo="CS1003302", Node="R1"),
                    search_row(CourseNo="CS1003302", Node="T1,T2"),
                ],
            )

        client = _client(handler, user_agent="tests/1.0")
        courses = await client.search(SearchOptions("1131", course_no="CS", only_ntust=True))

        self.assertEqual(len(courses), 1)
        self.assertEqual(courses[0].node, "R1,T1,T2")

        req = seen[0]
        self.assertEqual(req.method, "POST")
        self.assertEqual(req.url.path, "/querycourse/api/courses")
        self.assertEqual(req.headers["User-Agent"], "tests/1.0")
        body = json.loads(req.content)
        self.assertEqual(body["OnleyNTUST"], 1)
        self.assertEqual(body["Language"], "zh")

    async def test_search_raw(self) -> None:
        rows = [search_row(Node="R1"), search_row(Node="R2"), search_row(CourseNo="CS2006302")]
        client = _client(lambda request: httpx.Response(200, json=rows))
        courses = await client.search(SearchOptions("1131"), merge_results=False)
        self.assertEqual(len(courses), 3)


class TestAsyncQuery(unittest.IsolatedAsyncioTestCase):
    async def test_end_to_end(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[details_row()])

        client = _client(handler)
        details = await client.query("1122", "AT2005701", Language.EN)

        self.assertEqual(details.course_no, "AT2005701")
        self.assertEqual(seen[0].url.path, "/querycourse/api/coursedetials")
        self.assertEqual(
            dict(seen[0].url.params),
            {"semester": "1122", "course_no": "AT2005701", "language": "en"},
        )

    async def test_empty_array(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=[]))
        with self.assertRaises(ParseError) as ctx:
            await client.query("1122", "AT2005701")
        self.assertIn("no course found", str(ctx.exception))

    async def test_error_status(self) -> None:
        client = _client(lambda request: httpx.Response(500, text="oops"))
        with self.assertRaises(HttpError):
            await client.query("1122", "AT2005701")

    async def test_connect_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(handler)
        with self.assertRaises(HttpError) as ctx:
            await client.search(SearchOptions("1131"))
        self.assertIsInstance(ctx.exception.__cause__, httpx.ConnectError)

    async def test_malformed_base_url_is_http_error(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=[]), base_url="http://[::1")
        with self.assertRaises(HttpError):
            await client.search(SearchOptions("1131"))

    async def test_invalid_body(self) -> None:
        client = _client(lambda request: httpx.Response(200, text="not json"))
        with self.assertRaises(ParseError):
            await client.query("1122", "AT2005701")


class TestQueryMany(unittest.IsolatedAsyncioTestCase):
    async def test_keeps_order_and_limits_concurrency(self) -> None:
        active = 0
        peak = 0

        async def handler(request: httpx.Request) -> httpx.Response:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            no = request.url.params["course_no"]
            return httpx.Response(200, json=[details_row(CourseNo=no)])

        client = _client(handler)
        numbers = ["CS2006302", "CS2008302", "CS3001302", "GE3729302", "PE111B022"]
        out = await client.query_many("1122", numbers, Language.ZH, concurrency=2)

        self.assertEqual([d.course_no for d in out], numbers)
        self.assertLessEqual(peak, 2)

    async def test_first_failure_propagates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params["course_no"] == "MISSING":
                return httpx.Response(200, json=[])
            return httpx.Response(200, json=[details_row()])

        client = _client(handler)
        with self.assertRaises(ParseError):
            await client.query_many("1122", ["AT2005701", "MISSING"])

    async def test_failure_cancels_pending_requests(self) -> None:
        cancelled = []

        async def handler(request: httpx.Request) -> httpx.Response:
            no = request.url.params["course_no"]
            if no == "MISSING":
                return httpx.Response(200, json=[])
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append(no)
                raise
            return httpx.Response(200, json=[details_row(CourseNo=no)])

        client = _client(handler)
        with self.assertRaises(ParseError):
            await client.query_many("1122", ["AT2005701", "MISSING"], concurrency=2)
        # pending requests are cancelled before query_many returns
        self.assertEqual(cancelled, ["AT2005701"])

    async def test_rejects_zero_concurrency(self) -> None:
        client = _client(lambda request: httpx.Response(200, json=[]))
        with self.assertRaises(ValueError):
            await client.query_many("1122", ["AT2005701"], concurrency=0)


class TestAsyncLifecycle(unittest.IsolatedAsyncioTestCase):
    async def test_context_manager_closes_own_client(self) -> None:
        async with ClientBuilder().build_async() as client:
            inner = client._client
        self.assertTrue(inner.is_closed)

    async def test_injected_client_left_open(self) -> None:
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200, json=[])))
        async with ClientBuilder().http_client(http_client).build_async():
            pass
        self.assertFalse(http_client.is_closed)
        await http_client.aclose()

    async def test_create_http_client_binds_local_address(self) -> None:
        http_client = create_http_client(ClientConfig(local_address="127.0.0.1"))
        transport = http_client._transport
        self.assertIsInstance(transport, httpx.AsyncHTTPTransport)
        self.assertEqual(transport._pool._local_address, "127.0.0.1")
        await http_client.aclose()

    async def test_create_http_client_applies_config(self) -> None:
        http_client = create_http_client(ClientConfig(user_agent="tests/2.0", timeout=4))
        self.assertEqual(http_client.headers["User-Agent"], "tests/2.0")
        self.assertEqual(http_client.timeout.connect, 4)
        await http_client.aclose()


if __name__ == "__main__":
    unittest.main()
