from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class BitbucketPage:
    """Bitbucket 페이지 응답 (values + next 링크)"""
    values: list[dict[str, Any]]
    next_url: str | None = None


@dataclass(frozen=True)
class BitbucketRepository:
    """Bitbucket 저장소 엔티티"""
    slug: str
    name: str
    full_name: str
    project_key: str = ""


@dataclass(frozen=True)
class PullRequestRecord:
    """이슈 키와 연결된 PR 요약"""
    branch_name: str
    title: str
    pr_link: str

    def to_dict(self) -> dict:
        return {
            "branch_name": self.branch_name,
            "title": self.title,
            "pr_link": self.pr_link,
        }


def project_pull_request(raw: dict[str, Any]) -> PullRequestRecord | None:
    """PR 원본 응답을 PullRequestRecord로 변환합니다. 브랜치명이나 HTML 링크가 없으면 None."""
    branch_name = ((raw.get("source") or {}).get("branch") or {}).get("name")
    pr_link = ((raw.get("links") or {}).get("html") or {}).get("href")
    if not branch_name or not pr_link:
        return None
    return PullRequestRecord(
        branch_name=branch_name,
        title=raw.get("title", ""),
        pr_link=pr_link,
    )
