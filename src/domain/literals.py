from typing import Any


class LiteralCatalog:
    """카탈로그명 → 고유 문자열 집합. 이름별 집합은 최초 사용 시 생성됩니다."""

    def __init__(self):
        self._values: dict[str, set[str]] = {}

    def add(self, name: str, value: Any) -> None:
        if not isinstance(value, str) or not value.strip():
            return
        self._values.setdefault(name, set()).add(value)

    def names(self) -> list[str]:
        return sorted(name for name, values in self._values.items() if values)

    def values(self, name: str) -> list[str]:
        return sorted(self._values.get(name, ()))

    def aggregates(self) -> dict[str, list[str]]:
        """비어 있지 않은 카탈로그를 이름순으로, 값은 사전순으로 반환합니다."""
        return {name: self.values(name) for name in self.names()}

    def __len__(self) -> int:
        return len(self.names())


def capitalize(text: str) -> str:
    return text[:1].upper() + text[1:]


def custom_catalog_name(field_key: str) -> str:
    """customfield_12001 → Custom12001"""
    suffix = field_key[len("customfield_"):] if field_key.startswith("customfield_") else field_key
    return f"Custom{suffix}"
