from typing import Protocol

from src.domain.bitbucket import BitbucketPage


class BitbucketPort(Protocol):
    """Bitbucket 저장소/PR API 계약"""

    async def list_user_pull_requests(
        self, workspace: str, selected_user: str, query: str, next_url: str | None = None,
    ) -> BitbucketPage:
        """워크스페이스 내 특정 사용자의 PR 한 페이지를 조회합니다."""
        ...

    async def list_repositories(
        self,
        workspace: str,
        *,
        role: str | None = None,
        query: str | None = None,
        next_url: str | None = None,
    ) -> BitbucketPage:
        """워크스페이스 저장소 한 페이지를 조회합니다."""
        ...

    async def list_repository_pull_requests(
        self, workspace: str, repo_slug: str, query: str, pagelen: int = 15,
    ) -> BitbucketPage:
        """저장소의 PR 한 페이지를 조회합니다."""
        ...
