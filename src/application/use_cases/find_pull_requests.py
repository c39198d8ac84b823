import asyncio
import logging

from src.application.ports.bitbucket_port import BitbucketPort
from src.domain.bitbucket import BitbucketRepository, PullRequestRecord, project_pull_request

logger = logging.getLogger(__name__)

_DEFAULT_MAX_PAGES = 100


def open_branch_query(issue_key: str) -> str:
    return f'source.branch.name ~ "{issue_key}" AND state = "OPEN"'


class FindPullRequestsUseCase:
    """이슈 키가 브랜치명에 포함된 열린 PR을 찾는 Use Case"""

    def __init__(
        self,
        bitbucket_port: BitbucketPort,
        workspace: str,
        max_pages: int = _DEFAULT_MAX_PAGES,
        max_concurrency: int = 8,
    ):
        self.bitbucket_port = bitbucket_port
        self.workspace = workspace
        self.max_pages = max_pages
        self.max_concurrency = max(max_concurrency, 1)

    async def execute(self, issue_key: str, selected_user: str | None = None) -> list[dict]:
        if selected_user:
            records = await self.find_for_user(issue_key, selected_user)
        else:
            records = await self.find_across_repositories(issue_key)
        return [record.to_dict() for record in records]

    async def find_for_user(self, issue_key: str, selected_user: str) -> list[PullRequestRecord]:
        """워크스페이스에서 특정 사용자의 열린 PR을 next 링크를 따라 모두 조회합니다."""
        logger.info("🔍 사용자 PR 조회: user=%s, issue=%s", selected_user, issue_key)
        query = open_branch_query(issue_key)

        raw_pull_requests: list[dict] = []
        next_url: str | None = None
        for _ in range(self.max_pages):
            page = await self.bitbucket_port.list_user_pull_requests(
                self.workspace, selected_user, query, next_url,
            )
            raw_pull_requests.extend(page.values)
            if not page.next_url or page.next_url == next_url:
                break
            next_url = page.next_url
        else:
            logger.warning("⚠️ 최대 페이지 수(%d) 도달, PR 조회 중단", self.max_pages)

        return self._project(raw_pull_requests)

    async def find_across_repositories(self, issue_key: str) -> list[PullRequestRecord]:
        """기여 중인 모든 저장소를 조회한 뒤 저장소별로 PR을 검색합니다.

        저장소 하나의 PR 조회가 실패하면 해당 저장소만 빈 결과로 처리합니다.
        """
        repositories = await self.list_contributor_repositories()
        logger.info("🔍 저장소 %d개에서 PR 검색: issue=%s", len(repositories), issue_key)

        query = open_branch_query(issue_key)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def fetch(repository: BitbucketRepository) -> list[dict]:
            async with semaphore:
                try:
                    page = await self.bitbucket_port.list_repository_pull_requests(
                        self.workspace, repository.slug, query,
                    )
                except Exception as e:
                    logger.warning("⚠️ 저장소 PR 조회 실패 (%s): %s", repository.slug, e)
                    return []
            return page.values

        results = await asyncio.gather(*(fetch(repo) for repo in repositories))
        return self._project([pr for result in results for pr in result if pr])

    async def list_contributor_repositories(self) -> list[BitbucketRepository]:
        return await list_repositories(
            self.bitbucket_port, self.workspace, role="contributor", max_pages=self.max_pages,
        )

    @staticmethod
    def _project(raw_pull_requests: list[dict]) -> list[PullRequestRecord]:
        records = [project_pull_request(raw) for raw in raw_pull_requests]
        projected = [record for record in records if record is not None]
        logger.info("✅ PR 조회 완료: %d건 (제외 %d건)", len(projected), len(records) - len(projected))
        return projected


def _parse_repository(value: dict) -> BitbucketRepository:
    return BitbucketRepository(
        slug=value.get("slug", ""),
        name=value.get("name", ""),
        full_name=value.get("full_name", ""),
        project_key=(value.get("project") or {}).get("key", ""),
    )


async def list_repositories(
    bitbucket_port: BitbucketPort,
    workspace: str,
    *,
    role: str | None = None,
    query: str | None = None,
    max_pages: int = _DEFAULT_MAX_PAGES,
) -> list[BitbucketRepository]:
    """워크스페이스 저장소 목록을 next 링크를 따라 모두 조회합니다."""
    repositories: list[BitbucketRepository] = []
    next_url: str | None = None
    for _ in range(max_pages):
        page = await bitbucket_port.list_repositories(
            workspace, role=role, query=query, next_url=next_url,
        )
        repositories.extend(_parse_repository(value) for value in page.values)
        if not page.next_url or page.next_url == next_url:
            break
        next_url = page.next_url
    return repositories
