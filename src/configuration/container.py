from dataclasses import dataclass
from functools import lru_cache

from src.adapters.outbound.bitbucket_adapter import BitbucketAdapter
from src.adapters.outbound.build_runner import BuildRunner
from src.adapters.outbound.jira_adapter import JiraAdapter
from src.adapters.outbound.literal_file_writer import LiteralFileWriter
from src.application.services.field_normalizer import FieldNormalizer
from src.application.services.literal_catalog_builder import LiteralCatalogBuilder
from src.application.services.literal_type_renderer import LiteralTypeRenderer
from src.application.services.pager import RateLimitedPager
from src.application.use_cases.aggregate_issues import AggregateIssuesUseCase, AggregationOptions
from src.application.use_cases.find_pull_requests import FindPullRequestsUseCase
from src.application.use_cases.generate_literals import GenerateLiteralsUseCase
from src.application.use_cases.get_repositories_by_project import GetRepositoriesByProjectUseCase
from src.configuration.settings import Settings, build_settings


@dataclass(frozen=True)
class Container:
    settings: Settings
    aggregate_issues_use_case: AggregateIssuesUseCase
    generate_literals_use_case: GenerateLiteralsUseCase
    find_pull_requests_use_case: FindPullRequestsUseCase
    get_repositories_by_project_use_case: GetRepositoriesByProjectUseCase


@lru_cache(maxsize=1)
def build_container(config_path: str | None = None) -> Container:
    settings = build_settings(config_path)

    jira_adapter = JiraAdapter(
        base_url=settings.jira_host,
        user=settings.jira_email,
        api_token=settings.jira_api_token,
        timeout=settings.request_timeout,
    )

    bitbucket_adapter = BitbucketAdapter(
        user=settings.bitbucket_username,
        api_token=settings.bitbucket_token,
        timeout=settings.request_timeout,
    )

    # 필드 매핑 충돌은 여기서 ConfigurationError로 드러남
    normalizer = FieldNormalizer(settings.field_map)
    pager = RateLimitedPager(jira_adapter, max_pages=settings.max_pages)

    aggregate_issues_use_case = AggregateIssuesUseCase(
        pager=pager,
        normalizer=normalizer,
        options=AggregationOptions(
            project_keys=settings.project_keys,
            internal_project_keys=settings.internal_project_keys,
            special_issue_keys=settings.special_project_keys,
            page_size=settings.batch_size,
            delay_ms=settings.delay_ms,
            highest_number=settings.highest_number,
            chunk_size=settings.chunk_size,
            max_concurrency=settings.max_concurrency,
            marker_issue_type=settings.marker_issue_type,
            summary_denylist=settings.summary_denylist,
            derive_client_projects=settings.derive_client_projects,
            strip_custom_fields=settings.strip_custom_fields,
        ),
    )

    generate_literals_use_case = GenerateLiteralsUseCase(
        aggregate_issues=aggregate_issues_use_case,
        catalog_builder=LiteralCatalogBuilder(settings.field_map),
        renderer=LiteralTypeRenderer(),
        output=LiteralFileWriter(),
        build_runner=BuildRunner(
            command=settings.build_command,
            working_dir=settings.build_cwd,
            timeout_seconds=settings.build_timeout,
        ),
        output_path=settings.output_path,
    )

    find_pull_requests_use_case = FindPullRequestsUseCase(
        bitbucket_port=bitbucket_adapter,
        workspace=settings.workspace,
        max_pages=settings.max_pages,
        max_concurrency=settings.max_concurrency,
    )

    get_repositories_by_project_use_case = GetRepositoriesByProjectUseCase(
        bitbucket_port=bitbucket_adapter,
        workspace=settings.workspace,
    )

    return Container(
        settings=settings,
        aggregate_issues_use_case=aggregate_issues_use_case,
        generate_literals_use_case=generate_literals_use_case,
        find_pull_requests_use_case=find_pull_requests_use_case,
        get_repositories_by_project_use_case=get_repositories_by_project_use_case,
    )


def clear_container() -> None:
    build_container.cache_clear()
