"""
asyncio client for the NTUST querycourse API, built on httpx.

    async with AsyncClient() as client:
        details = await client.query("1131", "TCG046301")

The client is safe to share between tasks: it holds only its frozen
configuration and the httpx connection pool.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Iterable, List, Optional

import httpx

from querycourse.client import decode_details_body, decode_search_body, details_params
from querycourse.config import DETAILS_PATH, SEARCH_PATH, ClientBuilder, ClientConfig
from querycourse.errors import HttpError
from querycourse.model import CourseDetails, CourseInfo, Language, SearchOptions
from querycourse.parse import encode_search_options

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8


def create_http_client(config: ClientConfig) -> httpx.AsyncClient:
    transport = None
    if config.local_address:
        transport = httpx.AsyncHTTPTransport(local_address=config.local_address)
    return httpx.AsyncClient(
        headers=config.headers(),
        timeout=config.timeout,
        transport=transport,
    )


class AsyncClient:
    def __init__(self, config: Optional[ClientConfig] = None, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self._config = config or ClientConfig()
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else create_http_client(self._config)

    @classmethod
    def builder(cls) -> ClientBuilder:
        return ClientBuilder()

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            resp = await self._client.request(
                method,
                url,
                headers=self._config.headers(),
                timeout=self._config.timeout,
                **kwargs,
            )
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise HttpError(str(e) or type(e).__name__) from e
        return resp

    async def search(self, options: SearchOptions, merge_results: bool = True) -> List[CourseInfo]:
        """
        Search courses; see Client.search().
        """
        resp = await self._send("POST", self._config.url_for(SEARCH_PATH), json=encode_search_options(options))
        return decode_search_body(resp.content, merge_results)

    async def query(self, semester: str, course_no: str, language: Language = Language.ZH) -> CourseDetails:
        """
        Fetch the details of one course; see Client.query().
        """
        resp = await self._send(
            "GET",
            self._config.url_for(DETAILS_PATH),
            params=details_params(semester, course_no, language),
        )
        return decode_details_body(resp.content)

    async def query_many(
        self,
        semester: str,
        course_nos: Iterable[str],
        language: Language = Language.ZH,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> List[CourseDetails]:
        """
        Fetch several courses concurrently, at most `concurrency` at a time.

        Results keep the order of `course_nos`. The first failure is raised
        and the remaining requests are cancelled.
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency!r}")

        semaphore = asyncio.Semaphore(concurrency)

        async def one(course_no: str) -> CourseDetails:
            async with semaphore:
                return await self.query(semester, course_no, language)

        tasks = [asyncio.ensure_future(one(no)) for no in course_nos]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
