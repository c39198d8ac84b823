from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class JiraIssue:
    """표준화된 Jira 이슈 엔티티 (key 기준으로 동일성 판단)"""
    key: str
    id: str = field(default="", compare=False)
    self_url: str = field(default="", compare=False)
    expand: str = field(default="", compare=False)
    fields: dict[str, Any] = field(default_factory=dict, compare=False)
    rendered_fields: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def created(self) -> str | None:
        return self.fields.get("created")


@dataclass(frozen=True)
class JiraSearchPage:
    """검색 API 한 페이지 (원본 이슈 dict + 다음 페이지 토큰)"""
    issues: list[dict[str, Any]]
    next_page_token: str | None = None
