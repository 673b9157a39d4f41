from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from portal.core.errors import RequestValidationFailed

UploadType = Literal["question", "answer"]


class UploadRequest(BaseModel):
    class_name: str = Field(alias="class")
    filename: Optional[str] = None
    content: str
    type: UploadType = "question"

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("class_name")
    @classmethod
    def normalize_class(cls, value: str) -> str:
        value = value.strip().lower()
        if not value:
            raise ValueError("class is required")
        return value

    @field_validator("content")
    @classmethod
    def require_content(cls, value: str) -> str:
        if not value:
            raise ValueError("content is required")
        return value

    @field_validator("type", mode="before")
    @classmethod
    def default_type(cls, value):
        # Browsers send an empty string for an unset select
        return value or "question"

    @model_validator(mode="after")
    def check_filename(self):
        if self.type != "question":
            return self
        if not self.filename:
            raise ValueError("filename is required for questions")
        # Names are used verbatim under questions/, so refuse anything that escapes it
        parts = self.filename.split("/")
        if self.filename.startswith("/") or "\\" in self.filename or ".." in parts:
            raise ValueError(f"invalid filename: {self.filename}")
        return self

    @classmethod
    def from_form(cls, form) -> "UploadRequest":
        """
        Builds a request from raw form fields, turning pydantic errors into
        RequestValidationFailed so they share the upload error path.
        """
        data = {k: v for k, v in form.items() if v is not None}
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'request'}: {err['msg']}"
                for err in e.errors()
            )
            raise RequestValidationFailed(f"Invalid upload request: {problems}") from e


class RepositoryRef(BaseModel):
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


class FileRevision(BaseModel):
    path: str
    sha: Optional[str] = None


class StoredFile(BaseModel):
    url: Optional[str] = None
    sha: str


class BackupPayload(BaseModel):
    class_name: str = Field(serialization_alias="class")
    date: str
    content: str


class UploadResponse(BaseModel):
    success: bool
    message: str
    url: Optional[str] = None
