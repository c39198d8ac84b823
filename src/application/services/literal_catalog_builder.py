import logging
from collections.abc import Iterable, Mapping
from typing import Any

from src.domain.field_map import CUSTOM_FIELD_PREFIX
from src.domain.field_value import FieldValue, FieldValueKind, classify
from src.domain.jira import JiraIssue
from src.domain.literals import LiteralCatalog, capitalize, custom_catalog_name

logger = logging.getLogger(__name__)

USER_PROPS = ("displayName", "emailAddress", "accountId", "accountType", "timeZone")
STATUS_PROPS = ("name", "id", "key", "colorName")
STATUS_CATEGORY_PROPS = ("id", "key", "colorName", "name")
PROJECT_PROPS = ("key", "name", "projectTypeKey")
PRIORITY_PROPS = ("id", "name")
ISSUE_TYPE_PROPS = ("id", "name")

# (필드 키, 카탈로그 접두어, 추출 속성)
_OBJECT_FIELDS = (
    ("status", "Status", STATUS_PROPS),
    ("priority", "Priority", PRIORITY_PROPS),
    ("project", "Project", PROJECT_PROPS),
    ("issuetype", "IssueType", ISSUE_TYPE_PROPS),
    ("reporter", "Reporter", USER_PROPS),
    ("assignee", "Assignee", USER_PROPS),
    ("creator", "Creator", USER_PROPS),
)

LABEL_CATALOG = "Label"
COMPONENT_CATALOG = "ComponentName"
_COMPONENT_NAME_PROPS = ("name", "value", "displayName", "key")


class LiteralCatalogBuilder:
    """이슈 필드에서 관측된 문자열 값을 카탈로그별로 수집합니다.

    rename_table(원본 키 → 표준 필드명)이 주어지면 표준 필드명으로 바뀐 커스텀 필드도
    원본 키 기준 카탈로그 이름(예: requirementId → Custom12001)으로 수집합니다.
    """

    def __init__(self, rename_table: Mapping[str, str] | None = None):
        self._custom_keys = {
            standard: raw_key
            for raw_key, standard in (rename_table or {}).items()
            if raw_key.startswith(CUSTOM_FIELD_PREFIX)
        }

    def build(self, issues: Iterable[JiraIssue]) -> dict[str, list[str]]:
        catalog = self.collect(issues)
        aggregates = catalog.aggregates()
        logger.info("✅ 리터럴 카탈로그 생성 완료: %d개 카탈로그", len(aggregates))
        return aggregates

    def collect(self, issues: Iterable[JiraIssue]) -> LiteralCatalog:
        catalog = LiteralCatalog()
        count = 0
        for issue in issues:
            self._collect_from_fields(catalog, issue.fields)
            self._collect_from_fields(catalog, issue.rendered_fields)
            count += 1
        logger.info("리터럴 수집 대상 이슈: %d건", count)
        return catalog

    def _collect_from_fields(self, catalog: LiteralCatalog, fields: dict[str, Any] | None) -> None:
        if not isinstance(fields, dict):
            return

        for field_key, prefix, props in _OBJECT_FIELDS:
            self._collect_props(catalog, prefix, classify(fields.get(field_key)), props)

        status_category = classify(classify(fields.get("status")).prop("statusCategory"))
        self._collect_props(catalog, "StatusCategory", status_category, STATUS_CATEGORY_PROPS)

        for label in classify(fields.get("labels")).items:
            if label.kind is FieldValueKind.TEXT:
                catalog.add(LABEL_CATALOG, label.raw)

        for component in classify(fields.get("components")).items:
            if component.kind is FieldValueKind.TEXT:
                catalog.add(COMPONENT_CATALOG, component.raw)
            elif component.kind is FieldValueKind.OBJECT:
                catalog.add(COMPONENT_CATALOG, component.first_prop(*_COMPONENT_NAME_PROPS))

        for field_key, raw_value in fields.items():
            raw_key = self._custom_keys.get(field_key, field_key)
            if raw_key.startswith(CUSTOM_FIELD_PREFIX):
                self._collect_custom_field(catalog, custom_catalog_name(raw_key), classify(raw_value))

    @staticmethod
    def _collect_props(
        catalog: LiteralCatalog, prefix: str, value: FieldValue, props: tuple[str, ...],
    ) -> None:
        if value.kind is not FieldValueKind.OBJECT:
            return
        for prop in props:
            catalog.add(f"{prefix}{capitalize(prop)}", value.prop(prop))

    @staticmethod
    def _collect_custom_field(catalog: LiteralCatalog, name: str, value: FieldValue) -> None:
        if value.kind is FieldValueKind.TEXT:
            catalog.add(name, value.raw)
        elif value.kind is FieldValueKind.LIST:
            for item in value.items:
                if item.kind is FieldValueKind.TEXT:
                    catalog.add(name, item.raw)
                elif item.kind is FieldValueKind.OBJECT:
                    catalog.add(f"{name}Id", item.prop("id"))
                    catalog.add(f"{name}Value", item.prop("value"))
        elif value.kind is FieldValueKind.OBJECT:
            catalog.add(f"{name}Id", value.prop("id"))
            catalog.add(f"{name}Value", value.prop("value"))
