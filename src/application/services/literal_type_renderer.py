import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from datetime import datetime, timezone

from jinja2 import BaseLoader, Environment, StrictUndefined

logger = logging.getLogger(__name__)

_ILLEGAL_IDENTIFIER_CHARS = re.compile(r"[^A-Za-z0-9_]")
_LEADING_DIGIT = re.compile(r"^(\d)")

_LITERAL_TYPES_TEMPLATE = """\
// Auto-generated on {{ generated_at }}
// ⚠️ Do not edit manually. These are derived from Jira data.

{% for name, values in catalogs %}
export type {{ name }} = {{ values | map('ts_literal') | join(' | ') }}
{% endfor %}
"""


def safe_type_name(name: str) -> str:
    """타입 선언에 사용할 수 있는 식별자로 변환합니다. (허용되지 않는 문자 → _, 선행 숫자 앞에 _)"""
    return _LEADING_DIGIT.sub(r"_\1", _ILLEGAL_IDENTIFIER_CHARS.sub("_", name))


def ts_literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class LiteralTypeRenderer:
    """Jinja2 기반 리터럴 유니온 타입 선언 렌더러"""

    def __init__(self, clock: Callable[[], str] = _utc_timestamp):
        self._clock = clock
        self._env = Environment(
            loader=BaseLoader(),
            undefined=StrictUndefined,
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
        )
        self._env.filters["ts_literal"] = ts_literal
        self._template = self._env.from_string(_LITERAL_TYPES_TEMPLATE)

    def render(self, aggregates: Mapping[str, Sequence[str]]) -> str:
        catalogs = [
            (safe_type_name(name), list(values))
            for name, values in aggregates.items()
            if values
        ]
        rendered = self._template.render(generated_at=self._clock(), catalogs=catalogs)
        logger.info("리터럴 타입 렌더링 완료: %d개 타입, 길이=%d", len(catalogs), len(rendered))
        return rendered
