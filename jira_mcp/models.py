"""Immutable pydantic records mirroring the Jira REST v3 JSON shapes.

Attributes are snake_case in Python; they load from and dump to the camelCase
keys Jira uses. Unknown keys in responses are ignored.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JiraModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_json(self) -> str:
        """Serialize with Jira's own key names."""
        return self.model_dump_json(by_alias=True)


class StatusCategory(JiraModel):
    id: int
    key: str
    name: str


class Status(JiraModel):
    id: str
    name: str
    status_category: StatusCategory | None = None


class User(JiraModel):
    account_id: str  # stable handle used for assignment
    display_name: str
    email_address: str | None = None  # hidden by privacy settings on most sites
    self_link: str = Field(alias="self")


class Priority(JiraModel):
    id: str
    name: str
    self_link: str = Field(alias="self")


class IssueType(JiraModel):
    id: str
    name: str
    self_link: str = Field(alias="self")
    description: str | None = None
    icon_url: str | None = None


class Project(JiraModel):
    id: str
    key: str
    name: str
    self_link: str = Field(alias="self")


class DescriptionText(JiraModel):
    type: str = ""
    text: str = ""


class DescriptionBlock(JiraModel):
    type: str = ""
    content: list[DescriptionText] = []


class Description(JiraModel):
    """Atlassian Document Format body, reduced to blocks of text runs.

    Only two levels are kept: top-level blocks and their direct text runs.
    Deeper nodes (list items, table cells, nested paragraphs) are discarded.
    """

    type: str = ""
    content: list[DescriptionBlock] = []


class Fields(JiraModel):
    # Everything but summary is routinely absent, depending on the requested field set.
    summary: str = ""
    description: Description | None = None
    status: Status | None = None
    assignee: User | None = None
    reporter: User | None = None
    priority: Priority | None = None
    issue_type: IssueType | None = Field(default=None, alias="issuetype")
    project: Project | None = None
    created: str | None = None
    updated: str | None = None


class Issue(JiraModel):
    id: str  # opaque internal id
    key: str  # DEMO-123
    self_link: str = Field(alias="self")
    fields: Fields


class SearchResult(JiraModel):
    start_at: int = 0
    max_results: int = 0
    total: int = 0
    issues: list[Issue] = []


class TransitionStatus(JiraModel):
    id: str
    name: str


class Transition(JiraModel):
    """One allowed workflow move; the id is only valid for the issue it was listed for."""

    id: str
    name: str
    to: TransitionStatus
