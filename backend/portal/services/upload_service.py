import logging
from typing import Optional

from portal.core.config import Settings
from portal.schemas.requests import RepositoryRef, StoredFile, UploadRequest
from portal.services.github_service import GithubService

logger = logging.getLogger(__name__)

ANSWER_KEY_PATH = "answer-key.txt"
QUESTIONS_DIR = "questions"


def resolve_destination(upload_type: str, filename: Optional[str]) -> str:
    if upload_type == "answer":
        return ANSWER_KEY_PATH
    return f"{QUESTIONS_DIR}/{filename}"


def commit_message(upload_type: str, filename: Optional[str], class_name: str) -> str:
    if upload_type == "answer":
        return f"Update answer key for {class_name.upper()}"
    return f"Upload question: {filename} to {class_name.upper()}"


class UploadService:
    def __init__(self, settings: Settings, github: Optional[GithubService] = None):
        self.owner = settings.GITHUB_USER
        self.github = github or GithubService(settings)

    def upload(self, request: UploadRequest) -> StoredFile:
        """
        Ensures the class repository exists, then writes the file to it.
        Any failure propagates to the caller; nothing is rolled back.
        """
        repo = RepositoryRef(owner=self.owner, name=request.class_name)
        path = resolve_destination(request.type, request.filename)

        logger.info(f"=== UPLOAD START === class={request.class_name} type={request.type} path={path} "
                    f"content_length={len(request.content)}")

        self.github.ensure_repo(repo)
        stored = self.github.put_file(
            repo,
            path,
            request.content,
            commit_message(request.type, request.filename, request.class_name),
        )

        logger.info(f"=== GITHUB UPLOAD SUCCESS === {stored.url}")
        return stored
