import argparse
import json
import logging
import sys

from src.configuration.container import Container
from src.domain.errors import ConfigurationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jira-literals",
        description="Jira 데이터에서 리터럴 타입 선언을 생성하고 Bitbucket PR을 조회합니다.",
    )
    parser.add_argument("--config", help="설정 파일 경로 (기본값: ./jira.config.json)")
    subparsers = parser.add_subparsers(dest="command")

    generate = subparsers.add_parser("generate", help="리터럴 타입 파일 생성 후 빌드")
    generate.add_argument("--output", help="출력 파일 경로 (기본값: 설정의 outputPath)")
    generate.add_argument("--skip-build", action="store_true", help="빌드 단계 생략")

    pull_requests = subparsers.add_parser("pull-requests", help="이슈 키로 열린 PR 조회")
    pull_requests.add_argument("issue_key", help="Jira 이슈 키 (예: ABC-123)")
    pull_requests.add_argument(
        "--user",
        help="워크스페이스 사용자 (지정하지 않으면 기여 중인 모든 저장소를 검색)",
    )

    repositories = subparsers.add_parser("repositories", help="Jira 프로젝트 키로 저장소 조회")
    repositories.add_argument("project_key", help="프로젝트 키")

    parser.set_defaults(command="generate", output=None, skip_build=False)
    return parser


def _require_bitbucket(container: Container) -> None:
    if not container.settings.bitbucket_token:
        raise ConfigurationError("Bitbucket 조회에는 bitbucketToken 설정이 필요합니다")


def _print_json(data) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


async def dispatch(args: argparse.Namespace, container: Container) -> int:
    """파싱된 명령을 Use Case로 전달하고 결과를 JSON으로 출력합니다."""
    logger.info("명령 실행: %s", args.command)

    if args.command == "generate":
        result = await container.generate_literals_use_case.execute(
            output_path=args.output,
            skip_build=args.skip_build,
        )
    elif args.command == "pull-requests":
        _require_bitbucket(container)
        result = await container.find_pull_requests_use_case.execute(
            args.issue_key,
            selected_user=args.user,
        )
    elif args.command == "repositories":
        _require_bitbucket(container)
        result = await container.get_repositories_by_project_use_case.execute(args.project_key)
    else:
        raise ValueError(f"알 수 없는 명령: {args.command}")

    _print_json(result)
    return 0
