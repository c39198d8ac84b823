from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class BuildResult:
    """빌드 명령 실행 결과"""
    command: str
    returncode: int


class BuildPort(Protocol):
    """생성된 타입 파일을 빌드하는 외부 단계 계약"""

    async def run(self) -> BuildResult:
        """빌드를 실행합니다. 실패 시 BuildError를 발생시킵니다."""
        ...
