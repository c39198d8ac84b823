from src.domain.bitbucket import BitbucketPage
from src.domain.errors import TransportError
from src.domain.jira import JiraSearchPage


class FakeJiraPort:
    """JQL → 페이지 목록을 미리 지정해 두는 테스트용 JiraPort"""

    def __init__(self, pages_by_jql=None, failing=()):
        self.pages_by_jql = pages_by_jql or {}
        self.failing = tuple(failing)
        self.calls = []

    async def search_page(self, jql, *, max_results, next_page_token=None, fields=("*all",), expand=None):
        self.calls.append({"jql": jql, "max_results": max_results, "token": next_page_token, "fields": fields})
        if any(marker in jql for marker in self.failing):
            raise TransportError(f"boom: {jql}")
        pages = self.pages_by_jql.get(jql)
        if pages is None:
            for pattern, candidate in self.pages_by_jql.items():
                if callable(pattern) and pattern(jql):
                    pages = candidate
                    break
        if not pages:
            return JiraSearchPage(issues=[])
        index = 0 if next_page_token is None else int(next_page_token)
        issues = pages[index]
        next_token = str(index + 1) if index + 1 < len(pages) else None
        return JiraSearchPage(issues=issues, next_page_token=next_token)


class FakeBitbucketPort:
    def __init__(self, repositories=(), pull_requests=None, failing_repos=(), user_pages=()):
        self.repositories = list(repositories)
        self.pull_requests = pull_requests or {}
        self.failing_repos = set(failing_repos)
        self.user_pages = list(user_pages)
        self.repository_queries = []
        self.user_calls = []

    async def list_user_pull_requests(self, workspace, selected_user, query, next_url=None):
        self.user_calls.append((workspace, selected_user, query, next_url))
        index = 0 if next_url is None else int(next_url.rsplit("=", 1)[1])
        values = self.user_pages[index] if index < len(self.user_pages) else []
        next_link = f"https://api.example/next?page={index + 1}" if index + 1 < len(self.user_pages) else None
        return BitbucketPage(values=values, next_url=next_link)

    async def list_repositories(self, workspace, *, role=None, query=None, next_url=None):
        self.repository_queries.append((role, query, next_url))
        if next_url is None and len(self.repositories) > 1:
            return BitbucketPage(values=self.repositories[:1], next_url="https://api.example/repos?page=2")
        if next_url is None:
            return BitbucketPage(values=self.repositories)
        return BitbucketPage(values=self.repositories[1:])

    async def list_repository_pull_requests(self, workspace, repo_slug, query, pagelen=15):
        if repo_slug in self.failing_repos:
            raise TransportError(f"repo failed: {repo_slug}")
        return BitbucketPage(values=self.pull_requests.get(repo_slug, []))


def raw_issue(key, created=None, summary="", **fields):
    body = {"summary": summary or key, **fields}
    if created:
        body["created"] = created
    return {"id": key.split("-")[-1], "key": key, "fields": body, "renderedFields": {}}


def pull_request(branch, title, href):
    return {
        "title": title,
        "source": {"branch": {"name": branch}},
        "links": {"html": {"href": href}},
    }
