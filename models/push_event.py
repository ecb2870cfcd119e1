from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator


class GiteaModel(BaseModel):
    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def null_string_is_empty(cls, value, info: ValidationInfo):
        # A JSON null in a string field decodes to "", as Go's zero value would.
        if value is None and cls.model_fields[info.field_name].annotation is str:
            return ""
        return value


class GiteaUser(GiteaModel):
    email: str = ""
    login: str = ""


class GiteaRepository(GiteaModel):
    full_name: str = ""
    html_url: str = ""
    owner: GiteaUser


class GiteaCommitUser(GiteaModel):
    name: str = ""
    email: str = ""


class GiteaCommit(GiteaModel):
    id: str = ""
    message: str = ""
    author: GiteaCommitUser = GiteaCommitUser()


class GiteaPushPayload(GiteaModel):
    """Subset of Gitea's push webhook payload that the dispatcher needs."""
    ref: str = ""
    before: str = ""
    after: str = ""
    repository: GiteaRepository
    head_commit: GiteaCommit


class PushEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_full_name: str
    repo_html_url: str
    repo_owner_email: str
    ref: str
    head_commit_id: str
    head_commit_author_email: str

    @classmethod
    def from_payload(cls, payload: GiteaPushPayload) -> "PushEvent":
        return cls(
            repo_full_name=payload.repository.full_name,
            repo_html_url=payload.repository.html_url,
            repo_owner_email=payload.repository.owner.email,
            ref=payload.ref,
            head_commit_id=payload.head_commit.id,
            head_commit_author_email=payload.head_commit.author.email,
        )
