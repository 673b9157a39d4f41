import logging
from typing import Optional

import requests

from portal.core.config import Settings
from portal.core.errors import ConfigurationError, ProtocolError, UpstreamError
from portal.schemas.requests import FileRevision, RepositoryRef, StoredFile

logger = logging.getLogger(__name__)


class GithubService:
    def __init__(self, settings: Settings):
        if not settings.GITHUB_TOKEN:
            raise ConfigurationError("No GitHub token")

        self.api_url = settings.GITHUB_API_URL.rstrip("/")
        self.branch = settings.GITHUB_BRANCH
        self.strict_probe = settings.STRICT_FILE_PROBE
        self.headers = {
            "Authorization": f"Bearer {settings.GITHUB_TOKEN}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": settings.USER_AGENT,
        }

    def repo_exists(self, repo: RepositoryRef) -> bool:
        """
        Probes for the repository. Transport errors count as "missing" so the
        caller falls through to creation.
        """
        url = f"{self.api_url}/repos/{repo.owner}/{repo.name}"
        try:
            resp = requests.get(url, headers=self.headers)
        except requests.RequestException as e:
            logger.warning(f"Repo probe for {repo.full_name} failed: {e}")
            return False
        return resp.ok

    def create_repo(self, repo: RepositoryRef):
        logger.info(f"Creating repo: {repo.full_name}")
        resp = requests.post(
            f"{self.api_url}/user/repos",
            headers=self.headers,
            json={
                "name": repo.name,
                "private": False,
                "description": f"LFJC Class {repo.name.upper()}",
                "auto_init": True,
            },
        )
        if not resp.ok:
            raise UpstreamError(
                f"Failed to create repo {repo.name}: {_error_message(resp)}",
                status_code=resp.status_code,
            )
        logger.info(f"✓ Repo {repo.full_name} created")

    def ensure_repo(self, repo: RepositoryRef):
        if self.repo_exists(repo):
            logger.info(f"✓ Repo {repo.full_name} exists")
            return
        self.create_repo(repo)

    def get_file_revision(self, repo: RepositoryRef, path: str) -> FileRevision:
        """
        Returns the current revision of `path`; `sha` is None when the file
        is absent or could not be probed (unless strict probing is on).
        """
        url = self._contents_url(repo, path)
        try:
            resp = requests.get(url, headers=self.headers)
        except requests.RequestException as e:
            if self.strict_probe:
                raise UpstreamError(f"Could not check {path}: {e}") from e
            logger.warning(f"Error checking {path}, will create: {e}")
            return FileRevision(path=path)

        if resp.ok:
            try:
                data = resp.json()
            except ValueError:
                data = None
            sha = data.get("sha") if isinstance(data, dict) else None
            if sha:
                logger.info(f"File {path} exists (sha {sha[:8]}), will update")
                return FileRevision(path=path, sha=sha)
            # A directory listing or a non-JSON body carries no usable sha
            if self.strict_probe:
                raise UpstreamError(
                    f"GitHub returned no sha while checking {path}",
                    status_code=resp.status_code,
                )
            logger.warning(f"No sha in response checking {path}, will create")
            return FileRevision(path=path)
        if resp.status_code == 404:
            logger.info(f"File {path} not found, will create")
            return FileRevision(path=path)

        if self.strict_probe:
            raise UpstreamError(
                f"GitHub API error while checking {path}: {resp.status_code}",
                status_code=resp.status_code,
            )
        logger.warning(f"Unexpected status {resp.status_code} checking {path}, will create")
        return FileRevision(path=path)

    def put_file(self, repo: RepositoryRef, path: str, content: str, message: str) -> StoredFile:
        """
        Creates or updates `path` on the configured branch. `content` must
        already be base64 and is passed through unchanged.
        """
        revision = self.get_file_revision(repo, path)

        payload = {
            "message": message,
            "content": content,
            "branch": self.branch,
        }
        if revision.sha:
            payload["sha"] = revision.sha

        resp = requests.put(self._contents_url(repo, path), headers=self.headers, json=payload)
        if not resp.ok:
            logger.error(f"Upload of {path} failed: {resp.status_code} - {resp.text}")
            raise UpstreamError(f"GitHub API error: {resp.status_code}", status_code=resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise ProtocolError("Invalid response from GitHub") from e

        stored = data.get("content") if isinstance(data, dict) else None
        if not stored or not stored.get("sha"):
            logger.error(f"Invalid response from GitHub: {data}")
            raise ProtocolError("Invalid response from GitHub")

        logger.info(f"✓ File {'UPDATED' if revision.sha else 'CREATED'}: {repo.full_name}/{path}")
        return StoredFile(url=stored.get("html_url"), sha=stored["sha"])

    def _contents_url(self, repo: RepositoryRef, path: str) -> str:
        return f"{self.api_url}/repos/{repo.owner}/{repo.name}/contents/{path}"


def _error_message(resp: requests.Response) -> Optional[str]:
    try:
        return resp.json().get("message") or resp.text
    except ValueError:
        return resp.text
