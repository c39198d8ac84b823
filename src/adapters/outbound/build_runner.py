import asyncio
import logging
import shlex
from collections.abc import Sequence

from src.application.ports.build_port import BuildResult
from src.domain.errors import BuildError

logger = logging.getLogger(__name__)

_DEFAULT_BUILD_TIMEOUT_SECONDS = 600


class BuildRunner:
    """생성된 타입 파일을 포함한 프로젝트 빌드 명령을 실행하는 Adapter"""

    def __init__(
        self,
        command: str | Sequence[str] = "npm run build",
        working_dir: str = ".",
        timeout_seconds: float = _DEFAULT_BUILD_TIMEOUT_SECONDS,
    ):
        """
        Args:
            command: 실행할 빌드 명령 (문자열이면 shlex로 분리)
            working_dir: 빌드 명령을 실행할 작업 디렉토리
            timeout_seconds: 빌드 timeout (초)
        """
        self.command = shlex.split(command) if isinstance(command, str) else list(command)
        self.working_dir = working_dir
        self.timeout_seconds = timeout_seconds

    async def run(self) -> BuildResult:
        """빌드 명령을 실행합니다. 출력은 현재 콘솔로 그대로 전달됩니다.

        Raises:
            BuildError: 명령이 없거나, timeout을 초과하거나, 0이 아닌 코드로 종료된 경우
        """
        if not self.command:
            raise BuildError("빌드 명령이 비어 있습니다")

        command_text = " ".join(self.command)
        logger.info("🔨 빌드 실행: %s (cwd=%s)", command_text, self.working_dir)

        try:
            proc = await asyncio.create_subprocess_exec(*self.command, cwd=self.working_dir)
        except OSError as e:
            raise BuildError(f"빌드 명령을 실행할 수 없습니다: {command_text} ({e})") from e

        try:
            returncode = await asyncio.wait_for(proc.wait(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            proc.kill()
            await proc.wait()
            raise BuildError(
                f"빌드 timeout ({self.timeout_seconds}초 초과): {command_text}"
            )

        if returncode != 0:
            raise BuildError(f"빌드 실패 (exit code {returncode}): {command_text}")

        logger.info("✅ 빌드 완료: %s", command_text)
        return BuildResult(command=command_text, returncode=returncode)
