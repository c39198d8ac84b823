from typing import Protocol, Sequence

from src.domain.jira import JiraSearchPage

DEFAULT_EXPAND = "renderedFields,names,schema,transitions,operations,editmeta"


class JiraPort(Protocol):
    """Jira 이슈 검색 API와의 계약을 정의하는 Port"""

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
        ...
