from pathlib import Path
from typing import Protocol


class LiteralOutputPort(Protocol):
    """생성된 리터럴 타입 선언 파일 저장 계약"""

    def write(self, path: str | Path, text: str) -> Path:
        """텍스트를 원자적으로 기록하고 최종 경로를 반환합니다."""
        ...
