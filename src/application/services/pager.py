import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import Any

from src.application.ports.jira_port import DEFAULT_EXPAND, JiraPort

logger = logging.getLogger(__name__)

_DEFAULT_MAX_PAGES = 1000


class RateLimitedPager:
    """nextPageToken 기반 Jira 검색 페이지네이션.

    페이지는 순차적으로 요청하며 페이지 사이마다 delay_ms만큼 대기합니다.
    다음 토큰이 없거나, 직전과 같은 토큰이 반환되거나, max_pages에 도달하면 종료합니다.
    요청 중 오류가 나면 누적 결과 없이 그대로 전파됩니다.
    """

    def __init__(
        self,
        jira_port: JiraPort,
        *,
        max_pages: int = _DEFAULT_MAX_PAGES,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.jira_port = jira_port
        self.max_pages = max_pages
        self._sleep = sleep

    async def fetch_all(
        self,
        jql: str,
        *,
        page_size: int = 50,
        delay_ms: int = 250,
        fields: Sequence[str] = ("*all",),
        expand: str | None = DEFAULT_EXPAND,
    ) -> list[dict[str, Any]]:
        if page_size <= 0:
            raise ValueError(f"page_size는 1 이상이어야 합니다: {page_size}")

        records: list[dict[str, Any]] = []
        token: str | None = None
        pages = 0

        while True:
            page = await self.jira_port.search_page(
                jql,
                max_results=page_size,
                next_page_token=token,
                fields=fields,
                expand=expand,
            )
            pages += 1
            records.extend(page.issues)
            logger.info("페이지 %d 수신: %d건 (누적 %d건)", pages, len(page.issues), len(records))

            next_token = page.next_page_token
            if not next_token:
                break
            if next_token == token:
                logger.warning("⚠️ 동일한 nextPageToken 반복 수신, 페이지네이션 중단: %s", jql)
                break
            if pages >= self.max_pages:
                logger.warning("⚠️ 최대 페이지 수(%d) 도달, 페이지네이션 중단: %s", self.max_pages, jql)
                break

            token = next_token
            await self._sleep(delay_ms / 1000)

        return records
