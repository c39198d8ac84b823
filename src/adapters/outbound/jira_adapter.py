import logging
from collections.abc import Sequence
from typing import Any

import httpx

from src.application.ports.jira_port import DEFAULT_EXPAND
from src.domain.errors import TransportError
from src.domain.jira import JiraSearchPage

logger = logging.getLogger(__name__)


class JiraAdapter:
    """Jira REST API (enhanced JQL search)와 통신하는 Outbound Adapter"""

    def __init__(
        self,
        base_url: str,
        user: str,
        api_token: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    async def search_page(
        self,
        jql: str,
        *,
        max_results: int,
        next_page_token: str | None = None,
        fields: Sequence[str] = ("*all",),
        expand: str | None = DEFAULT_EXPAND,
    ) -> JiraSearchPage:
        """JQL 검색 결과의 한 페이지를 조회합니다."""
        url = f"{self.base_url}/rest/api/2/search/jql"
        params: dict[str, Any] = {
            "jql": jql,
            "maxResults": max_results,
            "fields": ",".join(fields),
        }
        if expand:
            params["expand"] = expand
        if next_page_token:
            params["nextPageToken"] = next_page_token

        logger.debug("🌐 Jira 검색 API 호출: jql=%s, token=%s", jql, next_page_token)

        data = await self._request(
            "GET",
            url,
            params=params,
            custom_errors={
                400: "잘못된 요청입니다. JQL 문법을 확인하세요: ",
            },
            context_msg="Jira 이슈 검색",
        )

        issues = data.get("issues") or []
        return JiraSearchPage(
            issues=list(issues),
            next_page_token=data.get("nextPageToken") or None,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        """auth와 timeout이 설정된 httpx.AsyncClient를 반환합니다."""
        return httpx.AsyncClient(
            auth=(self.user, self.api_token),
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        custom_errors: dict[int, str] | None = None,
        context_msg: str = "Jira API",
        **kwargs,
    ) -> dict:
        """공통 HTTP 요청. JSON dict 반환."""
        try:
            async with self._client() as client:
                response = await client.request(method, url, **kwargs)
                logger.debug("HTTP Status: %d", response.status_code)
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            logger.error("❌ HTTP 오류 발생: %d", e.response.status_code)
            logger.error("응답 본문: %s", e.response.text[:500])
            self._raise_jira_error(e, custom_errors)
        except httpx.TimeoutException as e:
            logger.error("❌ 요청 시간 초과: %s", str(e))
            raise TransportError(f"Jira 요청 시간 초과 ({self.timeout}초): {url}") from e
        except httpx.TransportError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            raise TransportError(f"Jira 서버 연결 실패: {self.base_url}") from e
        except ValueError as e:
            logger.error("❌ 응답 JSON 파싱 실패: %s", str(e))
            raise TransportError(f"{context_msg} 응답을 해석할 수 없습니다") from e

    def _raise_jira_error(
        self,
        e: httpx.HTTPStatusError,
        custom_errors: dict[int, str] | None = None,
    ) -> None:
        """HTTP 상태 코드별 적절한 TransportError를 발생시킵니다."""
        status = e.response.status_code
        if custom_errors and status in custom_errors:
            msg = custom_errors[status]
            if status == 400 and msg.endswith(": "):
                msg = f"{msg}{e.response.text[:200]}"
            raise TransportError(msg) from e
        if status == 401:
            raise TransportError("Jira 인증 실패: 이메일 또는 API 토큰을 확인하세요") from e
        elif status == 403:
            raise TransportError("Jira 접근 권한이 없습니다") from e
        elif status == 429:
            raise TransportError("Jira 요청 한도 초과 (429): delayMs 또는 batchSize를 조정하세요") from e
        else:
            raise TransportError(f"Jira API 오류: {status}") from e
