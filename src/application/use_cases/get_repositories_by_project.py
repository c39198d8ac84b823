import logging

from src.application.ports.bitbucket_port import BitbucketPort
from src.application.use_cases.find_pull_requests import list_repositories

logger = logging.getLogger(__name__)


class GetRepositoriesByProjectUseCase:
    """Jira 프로젝트 키와 같은 Bitbucket 프로젝트에 속한 저장소를 조회하는 Use Case"""

    def __init__(self, bitbucket_port: BitbucketPort, workspace: str):
        self.bitbucket_port = bitbucket_port
        self.workspace = workspace

    async def execute(self, project_key: str) -> list[dict]:
        logger.info("GetRepositoriesByProjectUseCase 실행: project_key=%s", project_key)
        repositories = await list_repositories(
            self.bitbucket_port, self.workspace, query=f'project.key="{project_key}"',
        )
        logger.info("✅ 저장소 조회 완료: %d개", len(repositories))
        return [
            {
                "slug": repo.slug,
                "name": repo.name,
                "full_name": repo.full_name,
                "project_key": repo.project_key,
            }
            for repo in repositories
        ]
