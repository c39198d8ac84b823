import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from src.domain.errors import ConfigurationError
from src.domain.jira import JiraIssue

logger = logging.getLogger(__name__)


class FieldNormalizer:
    """원본 Jira 필드 키 ↔ 표준 필드 키 변환기.

    최상위 필드 키만 변환하며 중첩 객체는 그대로 통과시킵니다.
    두 원본 키가 같은 표준 키로 매핑되면 역변환이 불가능하므로 생성 시점에 거부합니다.
    """

    def __init__(self, rename_table: Mapping[str, str]):
        inverse: dict[str, str] = {}
        for raw_key, standard_key in rename_table.items():
            if standard_key in inverse:
                raise ConfigurationError(
                    f"필드 매핑 충돌: '{inverse[standard_key]}'와 '{raw_key}'가 "
                    f"모두 '{standard_key}'로 매핑됩니다"
                )
            inverse[standard_key] = raw_key
        self._table = MappingProxyType(dict(rename_table))
        self._inverse = MappingProxyType(inverse)

    @property
    def rename_table(self) -> Mapping[str, str]:
        return self._table

    def normalize(self, raw_fields: Mapping[str, Any] | None) -> dict[str, Any]:
        if not raw_fields:
            return {}
        return {self._table.get(key, key): value for key, value in raw_fields.items()}

    def denormalize(self, standardized_fields: Mapping[str, Any] | None) -> dict[str, Any]:
        if not standardized_fields:
            return {}
        return {self._inverse.get(key, key): value for key, value in standardized_fields.items()}

    def normalize_issue(self, raw_issue: Mapping[str, Any]) -> JiraIssue:
        """API 응답 이슈를 표준화된 JiraIssue로 변환합니다."""
        return JiraIssue(
            key=raw_issue.get("key", ""),
            id=str(raw_issue.get("id", "")),
            self_url=raw_issue.get("self") or "",
            expand=raw_issue.get("expand") or "",
            fields=self.normalize(raw_issue.get("fields")),
            rendered_fields=self.normalize(raw_issue.get("renderedFields")),
        )

    def denormalize_issue(self, issue: JiraIssue) -> dict[str, Any]:
        return {
            "expand": issue.expand,
            "id": issue.id,
            "self": issue.self_url,
            "key": issue.key,
            "fields": self.denormalize(issue.fields),
            "renderedFields": self.denormalize(issue.rendered_fields),
        }
