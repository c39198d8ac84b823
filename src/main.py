import asyncio
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from src.adapters.inbound.cli import build_parser, dispatch
from src.configuration.container import build_container
from src.domain.errors import BuildError, ConfigurationError, TransportError

logger = logging.getLogger(__name__)


def setup_logging():
    """로깅 설정: stderr와 파일 두 곳에 로그 출력"""
    # 로그 디렉토리 생성 (LOG_DIR 미지정 시 현재 디렉토리의 logs/)
    log_dir = Path(os.getenv("LOG_DIR", Path.cwd() / "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / "jira-literals.log"

    formatter = logging.Formatter(
        '%(asctime)s [%(name)s] %(levelname)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

    # 1. stderr 핸들러 (stdout은 JSON 결과 출력용)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(formatter)
    root_logger.addHandler(stderr_handler)

    # 2. 파일 핸들러 (최대 10MB, 5개 백업)
    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    # httpx 요청 로그는 WARNING 이상만
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger(__name__)


async def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        logger.info("=" * 60)
        container = build_container(args.config)
        logger.info("✅ Container 빌드 완료")
        logger.info("설정 파일: %s", container.settings.config_path)
        logger.info("Jira URL: %s", container.settings.jira_host)
        logger.info("Jira User: %s", container.settings.jira_email)
        logger.info("Workspace: %s", container.settings.workspace)
        logger.info("=" * 60)

        return await dispatch(args, container)

    except ConfigurationError as e:
        logger.error("❌ 설정 오류: %s", e)
        return 2
    except BuildError as e:
        logger.error("❌ 빌드 실패: %s", e)
        return 1
    except TransportError as e:
        logger.error("❌ 통신 오류: %s", e)
        return 1


def run() -> None:
    setup_logging()
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
