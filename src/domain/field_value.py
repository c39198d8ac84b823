from dataclasses import dataclass
from enum import Enum
from typing import Any


class FieldValueKind(Enum):
    TEXT = "text"
    OBJECT = "object"
    LIST = "list"
    OTHER = "other"


@dataclass(frozen=True)
class FieldValue:
    """Jira 필드 값의 형태별 태그 (문자열 | 객체 | 배열 | 기타)"""
    kind: FieldValueKind
    raw: Any

    @property
    def items(self) -> list["FieldValue"]:
        if self.kind is not FieldValueKind.LIST:
            return []
        return [classify(item) for item in self.raw]

    def prop(self, name: str) -> Any:
        if self.kind is not FieldValueKind.OBJECT:
            return None
        return self.raw.get(name)

    def first_prop(self, *names: str) -> Any:
        """None이 아닌 첫 번째 속성값을 반환합니다."""
        for name in names:
            value = self.prop(name)
            if value is not None:
                return value
        return None


def classify(value: Any) -> FieldValue:
    if isinstance(value, str):
        return FieldValue(FieldValueKind.TEXT, value)
    if isinstance(value, dict):
        return FieldValue(FieldValueKind.OBJECT, value)
    if isinstance(value, (list, tuple)):
        return FieldValue(FieldValueKind.LIST, list(value))
    return FieldValue(FieldValueKind.OTHER, value)
