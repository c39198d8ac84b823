import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from src.application.services.field_normalizer import FieldNormalizer
from src.application.services.pager import RateLimitedPager
from src.domain.field_map import CUSTOM_FIELD_PREFIX
from src.domain.jira import JiraIssue

logger = logging.getLogger(__name__)

_JIRA_DATETIME_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f%z", "%Y-%m-%dT%H:%M:%S%z")
_MISSING_CREATED = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class AggregationOptions:
    """이슈 수집 조건 (카테고리별 프로젝트 키 + 페이지네이션 설정)"""
    project_keys: tuple[str, ...] = ()
    internal_project_keys: tuple[str, ...] = ()
    special_issue_keys: tuple[str, ...] = ()
    page_size: int = 50
    delay_ms: int = 250
    highest_number: int = 15
    chunk_size: int = 50
    max_concurrency: int = 8
    marker_issue_type: str = "Project"
    summary_denylist: tuple[str, ...] = ("old", "deprecated")
    derive_client_projects: bool = False
    strip_custom_fields: bool = False


def quote_list(values: Iterable[str]) -> str:
    return ", ".join(f'"{v}"' for v in values)


def chunked(values: Sequence[str], size: int) -> list[Sequence[str]]:
    size = max(size, 1)
    return [values[i:i + size] for i in range(0, len(values), size)]


def dedupe_by_key(issues: Iterable[JiraIssue]) -> list[JiraIssue]:
    """key 기준 중복 제거 (먼저 나온 이슈 유지, 순서 보존)"""
    seen: set[str] = set()
    unique: list[JiraIssue] = []
    for issue in issues:
        if issue.key in seen:
            continue
        seen.add(issue.key)
        unique.append(issue)
    return unique


def _parse_created(value: Any) -> datetime:
    if isinstance(value, str):
        for fmt in _JIRA_DATETIME_FORMATS:
            try:
                return datetime.strptime(value, fmt)
            except ValueError:
                continue
    return _MISSING_CREATED


def sort_by_created(issues: Iterable[JiraIssue]) -> list[JiraIssue]:
    """생성일 오름차순 안정 정렬. 생성일이 없거나 해석 불가한 이슈는 뒤로 보냅니다."""
    return sorted(issues, key=lambda issue: _parse_created(issue.created))


def derive_project_keys(issue_keys: Iterable[str]) -> list[str]:
    """이슈 키 목록에서 프로젝트 키(접두어)를 중복 없이 추출합니다."""
    return list(dict.fromkeys(key.split("-", 1)[0] for key in issue_keys if key))


class AggregateIssuesUseCase:
    """client / internal / special 카테고리별 Jira 이슈를 수집하는 Use Case.

    - client: (마커 이슈 유형 조회 ∪ 키 범위 조회)를 key 기준 중복 제거 후 생성일 순 정렬하고,
      내게 할당된 이슈를 그 뒤에 이어 붙입니다. 두 그룹 사이의 중복은 제거하지 않습니다.
    - internal: 프로젝트 단위 조회
    - special: 지정된 이슈 키 조회

    카테고리 하나가 실패해도 나머지는 계속 진행되며, 실패한 카테고리는 빈 목록이 됩니다.
    """

    def __init__(
        self,
        pager: RateLimitedPager,
        normalizer: FieldNormalizer,
        options: AggregationOptions,
    ):
        self.pager = pager
        self.normalizer = normalizer
        self.options = options

    # ------------------------------------------------------------------
    # Public methods
    # ------------------------------------------------------------------

    async def execute(self) -> list[JiraIssue]:
        logger.info("📋 AggregateIssuesUseCase 실행 시작")

        client_issues, internal_issues, special_issues = await asyncio.gather(
            self._guard("client", self.get_client_issues()),
            self._guard("internal", self.get_internal_issues()),
            self._guard("special", self.get_special_issues()),
        )

        issues = [*client_issues, *internal_issues, *special_issues]
        logger.info(
            "✅ 이슈 수집 완료: client=%d, internal=%d, special=%d, 합계=%d",
            len(client_issues), len(internal_issues), len(special_issues), len(issues),
        )
        return issues

    async def get_client_issues(self) -> list[JiraIssue]:
        project_keys = list(self.options.project_keys)
        if self.options.derive_client_projects:
            project_keys = derive_project_keys(await self.get_my_issue_keys())
            logger.info("할당된 이슈 기준 client 프로젝트: %s", project_keys)

        if not project_keys:
            logger.info("client 프로젝트 키 없음, 조회 생략")
            return []

        assigned_to_me, project_issues, key_range_issues = await asyncio.gather(
            self.fetch_assigned_to_me(project_keys),
            self.fetch_by_project(project_keys),
            self.fetch_by_key_range(project_keys),
        )

        deduped = sort_by_created(dedupe_by_key([*project_issues, *key_range_issues]))
        logger.info(
            "client 이슈: 프로젝트 %d건 (중복 제거 후), 내게 할당 %d건",
            len(deduped), len(assigned_to_me),
        )
        return [*deduped, *assigned_to_me]

    async def get_internal_issues(self) -> list[JiraIssue]:
        return await self.fetch_by_projects(self.options.internal_project_keys)

    async def get_special_issues(self) -> list[JiraIssue]:
        return await self.fetch_by_keys(self.options.special_issue_keys)

    async def get_my_issue_keys(self) -> list[str]:
        """현재 사용자에게 할당된 이슈 키 목록을 조회합니다."""
        records = await self.pager.fetch_all(
            "assignee = currentUser() ORDER BY created DESC",
            page_size=self.options.page_size,
            delay_ms=self.options.delay_ms,
            fields=("key",),
            expand=None,
        )
        return [record["key"] for record in records if record.get("key")]

    # ------------------------------------------------------------------
    # Retrieval strategies
    # ------------------------------------------------------------------

    async def fetch_assigned_to_me(self, project_keys: Sequence[str]) -> list[JiraIssue]:
        return await self._fetch_chunks(
            project_keys,
            lambda chunk: (
                f"project IN ({quote_list(chunk)}) AND assignee = currentUser() "
                f"ORDER BY created DESC"
            ),
        )

    async def fetch_by_project(self, project_keys: Sequence[str]) -> list[JiraIssue]:
        marker = self.options.marker_issue_type
        return await self._fetch_chunks(
            project_keys,
            lambda chunk: (
                f'project in ({quote_list(chunk)}) AND issuetype = "{marker}"'
                f"{self._summary_filter()} ORDER BY created DESC"
            ),
        )

    async def fetch_by_key_range(self, project_keys: Sequence[str]) -> list[JiraIssue]:
        """프로젝트별 KEY-1 ~ KEY-N 이슈를 조회합니다.

        프로젝트 간에는 동시에 요청하되 동시 요청 수는 max_concurrency로 제한합니다.
        """
        if self.options.highest_number <= 0:
            return []

        semaphore = asyncio.Semaphore(max(self.options.max_concurrency, 1))

        async def fetch_project(project_key: str) -> list[JiraIssue]:
            keys = [f"{project_key}-{n}" for n in range(1, self.options.highest_number + 1)]
            async with semaphore:
                return await self.fetch_by_keys(keys)

        results = await asyncio.gather(*(fetch_project(key) for key in project_keys))
        return [issue for result in results for issue in result]

    async def fetch_by_keys(self, issue_keys: Sequence[str]) -> list[JiraIssue]:
        if not issue_keys:
            return []
        jql = f"issuekey in ({quote_list(issue_keys)}){self._summary_filter()} ORDER BY created DESC"
        return await self._fetch(jql)

    async def fetch_by_projects(self, project_keys: Sequence[str]) -> list[JiraIssue]:
        return await self._fetch_chunks(
            project_keys,
            lambda chunk: (
                f"project IN ({quote_list(chunk)}){self._summary_filter()} ORDER BY created DESC"
            ),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _summary_filter(self) -> str:
        return "".join(f' AND summary !~ "{token}"' for token in self.options.summary_denylist)

    async def _fetch_chunks(
        self, project_keys: Sequence[str], build_jql: Callable[[Sequence[str]], str],
    ) -> list[JiraIssue]:
        issues: list[JiraIssue] = []
        for chunk in chunked(list(project_keys), self.options.chunk_size):
            issues.extend(await self._fetch(build_jql(chunk)))
        return issues

    async def _fetch(self, jql: str) -> list[JiraIssue]:
        logger.info("🌐 JQL 조회: %s", jql)
        records = await self.pager.fetch_all(
            jql,
            page_size=self.options.page_size,
            delay_ms=self.options.delay_ms,
        )
        return [self._standardize(record) for record in records]

    def _standardize(self, record: dict[str, Any]) -> JiraIssue:
        if self.options.strip_custom_fields:
            fields = record.get("fields") or {}
            record = {
                **record,
                "fields": {k: v for k, v in fields.items() if not k.startswith(CUSTOM_FIELD_PREFIX)},
            }
        return self.normalizer.normalize_issue(record)

    @staticmethod
    async def _guard(category: str, coro: Awaitable[list[JiraIssue]]) -> list[JiraIssue]:
        try:
            return await coro
        except Exception as e:
            logger.error("❌ %s 이슈 조회 실패, 빈 결과로 대체: %s: %s", category, type(e).__name__, e)
            return []
