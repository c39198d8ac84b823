import logging
from pathlib import Path

from src.application.ports.build_port import BuildPort
from src.application.ports.literal_output_port import LiteralOutputPort
from src.application.services.literal_catalog_builder import LiteralCatalogBuilder
from src.application.services.literal_type_renderer import LiteralTypeRenderer
from src.application.use_cases.aggregate_issues import AggregateIssuesUseCase

logger = logging.getLogger(__name__)


class GenerateLiteralsUseCase:
    """Jira 데이터에서 리터럴 타입 선언 파일을 생성하고 빌드하는 Use Case"""

    def __init__(
        self,
        aggregate_issues: AggregateIssuesUseCase,
        catalog_builder: LiteralCatalogBuilder,
        renderer: LiteralTypeRenderer,
        output: LiteralOutputPort,
        build_runner: BuildPort,
        output_path: str | Path,
    ):
        self.aggregate_issues = aggregate_issues
        self.catalog_builder = catalog_builder
        self.renderer = renderer
        self.output = output
        self.build_runner = build_runner
        self.output_path = Path(output_path)

    async def execute(self, output_path: str | Path | None = None, skip_build: bool = False) -> dict:
        """
        이슈 수집 → 리터럴 카탈로그 생성 → 타입 선언 렌더링 → 파일 저장 → 빌드 순으로 실행합니다.

        Args:
            output_path: 출력 파일 경로. None이면 설정값 사용
            skip_build: True이면 빌드 단계를 생략합니다

        Returns:
            실행 결과 요약 (dict 형식)

        Raises:
            BuildError: 빌드 실패 시 (출력 파일은 이미 기록된 상태)
        """
        logger.info("🚀 GenerateLiteralsUseCase 실행 시작")

        issues = await self.aggregate_issues.execute()
        aggregates = self.catalog_builder.build(issues)
        text = self.renderer.render(aggregates)

        written = self.output.write(Path(output_path) if output_path else self.output_path, text)
        logger.info("✅ 리터럴 타입 파일 저장: %s", written)

        build_returncode = None
        if skip_build:
            logger.info("ℹ️ 빌드 단계 생략")
        else:
            result = await self.build_runner.run()
            build_returncode = result.returncode

        return {
            "issue_count": len(issues),
            "catalog_count": len(aggregates),
            "output_path": str(written),
            "build_returncode": build_returncode,
        }
