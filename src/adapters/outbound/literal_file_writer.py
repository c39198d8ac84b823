import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


class LiteralFileWriter:
    """생성된 타입 선언 파일을 원자적으로 기록합니다 (임시 파일 작성 후 교체)."""

    def write(self, path: str | Path, text: str) -> Path:
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                f.write(text)
            os.replace(tmp_name, target)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

        logger.info("파일 저장 완료: %s (%d bytes)", target, len(text.encode("utf-8")))
        return target
