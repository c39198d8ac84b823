import unittest

from fakes import FakeBitbucketPort, pull_request
from src.application.use_cases.find_pull_requests import FindPullRequestsUseCase, open_branch_query
from src.application.use_cases.get_repositories_by_project import GetRepositoriesByProjectUseCase


def _repo(slug, project_key="ABC"):
    return {"slug": slug, "name": slug.title(), "full_name": f"ws/{slug}", "project": {"key": project_key}}


class FindPullRequestsTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_failing_repository_is_isolated(self) -> None:
        port = FakeBitbucketPort(
            repositories=[_repo("broken"), _repo("web"), _repo("api")],
            pull_requests={
                "web": [pull_request("feature/ABC-12-login", "Login", "https://bb/pr/1")],
                "api": [],
            },
            failing_repos={"broken"},
        )
        use_case = FindPullRequestsUseCase(port, workspace="ws")

        records = await use_case.find_across_repositories("ABC-12")

        self.assertEqual(len(records), 1)
        self.assertEqual(records[0].branch_name, "feature/ABC-12-login")
        self.assertEqual(records[0].pr_link, "https://bb/pr/1")
        self.assertEqual(port.repository_queries[0], ("contributor", None, None))

    async def test_user_pull_requests_follow_next_links_and_drop_incomplete(self) -> None:
        port = FakeBitbucketPort(user_pages=[
            [pull_request("ABC-12-fix", "Fix", "https://bb/pr/2")],
            [
                {"title": "No branch", "links": {"html": {"href": "https://bb/pr/3"}}},
                {"title": "No link", "source": {"branch": {"name": "ABC-12-x"}}, "links": {}},
                pull_request("ABC-12-more", "More", "https://bb/pr/4"),
            ],
        ])
        use_case = FindPullRequestsUseCase(port, workspace="ws")

        result = await use_case.execute("ABC-12", selected_user="kim")

        self.assertEqual(
            result,
            [
                {"branch_name": "ABC-12-fix", "title": "Fix", "pr_link": "https://bb/pr/2"},
                {"branch_name": "ABC-12-more", "title": "More", "pr_link": "https://bb/pr/4"},
            ],
        )
        self.assertEqual(len(port.user_calls), 2)
        self.assertEqual(port.user_calls[0][2], 'source.branch.name ~ "ABC-12" AND state = "OPEN"')

    async def test_execute_without_user_scans_repositories(self) -> None:
        port = FakeBitbucketPort(
            repositories=[_repo("web")],
            pull_requests={"web": [pull_request("ABC-1", "T", "https://bb/pr/9")]},
        )

        result = await FindPullRequestsUseCase(port, workspace="ws").execute("ABC-1")

        self.assertEqual(result, [{"branch_name": "ABC-1", "title": "T", "pr_link": "https://bb/pr/9"}])

    async def test_repositories_by_project(self) -> None:
        port = FakeBitbucketPort(repositories=[_repo("web"), _repo("api")])

        result = await GetRepositoriesByProjectUseCase(port, workspace="ws").execute("ABC")

        self.assertEqual([r["slug"] for r in result], ["web", "api"])
        self.assertEqual(port.repository_queries[0], (None, 'project.key="ABC"', None))

    def test_open_branch_query(self) -> None:
        self.assertEqual(open_branch_query("X-1"), 'source.branch.name ~ "X-1" AND state = "OPEN"')
