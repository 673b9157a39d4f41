from unittest.mock import MagicMock

import pytest

from portal.core.errors import ConfigurationError, RequestValidationFailed, UpstreamError
from portal.schemas.requests import RepositoryRef, StoredFile, UploadRequest
from portal.services.upload_service import UploadService, commit_message, resolve_destination


@pytest.mark.parametrize("filename", [None, "q1.pdf", "notes/answer.txt"])
def test_answer_always_goes_to_root_answer_key(filename):
    assert resolve_destination("answer", filename) == "answer-key.txt"


@pytest.mark.parametrize("filename", ["q1.pdf", "Paper 2.PDF", "set-a/q3.png"])
def test_question_goes_under_questions(filename):
    assert resolve_destination("question", filename) == f"questions/{filename}"


def test_commit_messages_use_uppercased_class():
    assert commit_message("answer", None, "jee2026") == "Update answer key for JEE2026"
    assert commit_message("question", "q1.pdf", "jee2026") == "Upload question: q1.pdf to JEE2026"


def test_request_lowercases_class_and_defaults_type():
    req = UploadRequest.from_form({"class": " JEE2026 ", "filename": "q1.pdf", "content": "aGk=", "type": ""})
    assert req.class_name == "jee2026"
    assert req.type == "question"


@pytest.mark.parametrize("form", [
    {"class": "jee2026", "type": "answer"},
    {"class": "jee2026", "content": "", "type": "answer"},
    {"content": "aGk=", "type": "answer"},
    {"class": "jee2026", "content": "aGk=", "type": "question"},
    {"class": "jee2026", "content": "aGk=", "type": "solution"},
    {"class": "jee2026", "content": "aGk=", "filename": "../secrets.txt"},
    {"class": "jee2026", "content": "aGk=", "filename": "/etc/passwd"},
])
def test_invalid_requests_are_rejected(form):
    with pytest.raises(RequestValidationFailed):
        UploadRequest.from_form(form)


def test_answer_does_not_need_filename():
    req = UploadRequest.from_form({"class": "jee2026", "content": "aGk=", "type": "answer"})
    assert req.filename is None


def test_missing_token_is_a_configuration_error(settings):
    cfg = settings.model_copy(update={"GITHUB_TOKEN": ""})
    with pytest.raises(ConfigurationError):
        UploadService(cfg)


def test_upload_ensures_repo_then_writes(settings):
    github = MagicMock()
    github.put_file.return_value = StoredFile(url="https://github.com/iitjeelf/jee2026/blob/main/questions/q1.pdf", sha="abc")
    service = UploadService(settings, github=github)

    req = UploadRequest.from_form({"class": "jee2026", "filename": "q1.pdf", "content": "aGk=", "type": "question"})
    stored = service.upload(req)

    repo = RepositoryRef(owner="iitjeelf", name="jee2026")
    github.ensure_repo.assert_called_once_with(repo)
    github.put_file.assert_called_once_with(repo, "questions/q1.pdf", "aGk=", "Upload question: q1.pdf to JEE2026")
    assert stored.sha == "abc"


def test_failed_repo_creation_skips_write(settings):
    github = MagicMock()
    github.ensure_repo.side_effect = UpstreamError("Failed to create repo jee2026: nope", status_code=422)
    service = UploadService(settings, github=github)

    req = UploadRequest.from_form({"class": "jee2026", "content": "aGk=", "type": "answer"})
    with pytest.raises(UpstreamError):
        service.upload(req)
    github.put_file.assert_not_called()
