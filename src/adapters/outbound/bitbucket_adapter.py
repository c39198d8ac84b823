import logging
from typing import Any

import httpx

from src.domain.bitbucket import BitbucketPage
from src.domain.errors import TransportError

logger = logging.getLogger(__name__)

BITBUCKET_API_URL = "https://api.bitbucket.org/2.0"


class BitbucketAdapter:
    """Bitbucket Cloud REST API와 통신하는 Outbound Adapter"""

    def __init__(
        self,
        user: str,
        api_token: str,
        base_url: str = BITBUCKET_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.user = user
        self.api_token = api_token
        self.timeout = timeout
        self._transport = transport

    async def list_user_pull_requests(
        self, workspace: str, selected_user: str, query: str, next_url: str | None = None,
    ) -> BitbucketPage:
        """워크스페이스 내 특정 사용자의 PR 한 페이지를 조회합니다."""
        if next_url:
            return await self._get_page(next_url)
        url = f"{self.base_url}/workspaces/{workspace}/pullrequests/{selected_user}"
        return await self._get_page(url, params={"q": query})

    async def list_repositories(
        self,
        workspace: str,
        *,
        role: str | None = None,
        query: str | None = None,
        next_url: str | None = None,
    ) -> BitbucketPage:
        """워크스페이스 저장소 한 페이지를 조회합니다."""
        if next_url:
            return await self._get_page(next_url)
        params: dict[str, Any] = {"pagelen": 100}
        if role:
            params["role"] = role
        if query:
            params["q"] = query
        return await self._get_page(f"{self.base_url}/repositories/{workspace}", params=params)

    async def list_repository_pull_requests(
        self, workspace: str, repo_slug: str, query: str, pagelen: int = 15,
    ) -> BitbucketPage:
        """저장소의 PR 한 페이지를 조회합니다."""
        url = f"{self.base_url}/repositories/{workspace}/{repo_slug}/pullrequests"
        return await self._get_page(url, params={"q": query, "pagelen": pagelen})

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            auth=(self.user, self.api_token),
            timeout=self.timeout,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )

    async def _get_page(self, url: str, params: dict[str, Any] | None = None) -> BitbucketPage:
        logger.debug("🌐 Bitbucket API 호출: %s %s", url, params or "")
        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error("❌ Bitbucket HTTP 오류: %d (%s)", status, url)
            if status == 401:
                raise TransportError("Bitbucket 인증 실패: 사용자명 또는 토큰을 확인하세요") from e
            if status == 404:
                raise TransportError(f"Bitbucket 리소스를 찾을 수 없습니다: {url}") from e
            raise TransportError(f"Bitbucket API 오류: {status}") from e
        except httpx.TransportError as e:
            logger.error("❌ 네트워크 오류: %s", str(e))
            raise TransportError(f"Bitbucket 서버 연결 실패: {self.base_url}") from e
        except ValueError as e:
            raise TransportError(f"Bitbucket 응답을 해석할 수 없습니다: {url}") from e

        return BitbucketPage(
            values=list(data.get("values") or []),
            next_url=data.get("next") or None,
        )
