from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from . import links

BodyFormat = Literal["storage", "atlas_doc_format", "view", "editor"]
BodyRepresentation = Literal["storage", "atlas_doc_format", "wiki"]
ContentStatus = Literal["current", "trashed", "draft", "archived"]
WriteStatus = Literal["current", "draft"]
LabelPrefix = Literal["global", "my", "team", "system"]
WritableLabelPrefix = Literal["global", "my", "team"]
TaskStatus = Literal["incomplete", "complete"]
ContentType = Literal["page", "blogpost"]


class PaginatedResult(BaseModel):
    """
    One page of a cursor-paginated collection.

    `results` keeps server order. The presence of `_links.next` is the only
    signal that more pages exist; pages are never merged automatically.
    """

    results: List[Dict[str, Any]] = Field(default_factory=list)
    links: Dict[str, Any] = Field(default_factory=dict, alias="_links")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    @property
    def next_link(self) -> Optional[str]:
        return links.next_link({"_links": self.links})

    @property
    def has_more(self) -> bool:
        return self.next_link is not None

    @property
    def next_cursor(self) -> Optional[str]:
        return links.parse_cursor(self.next_link)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True)


# --- Input Models (request payloads) ---


class _Input(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ContentBodyInput(_Input):
    representation: BodyRepresentation = "storage"
    value: str


class VersionInput(_Input):
    number: int
    message: Optional[str] = None


def next_version(current: int, message: Optional[str] = None) -> VersionInput:
    """Version to transmit for an update, given the caller's last known version."""
    return VersionInput(number=current + 1, message=message)


class SpaceDescriptionValue(_Input):
    value: str
    representation: str = "plain"


class SpaceDescriptionInput(_Input):
    plain: SpaceDescriptionValue


class SpaceCreateInput(_Input):
    key: str
    name: str
    description: Optional[SpaceDescriptionInput] = None
    type: Optional[Literal["global", "personal"]] = None


class PageCreateInput(_Input):
    space_id: str = Field(alias="spaceId")
    status: Optional[WriteStatus] = None
    title: str
    parent_id: Optional[str] = Field(default=None, alias="parentId")
    body: Optional[ContentBodyInput] = None


class PageUpdateInput(_Input):
    id: str
    status: WriteStatus = "current"
    title: str
    body: Optional[ContentBodyInput] = None
    version: VersionInput


class BlogPostCreateInput(_Input):
    space_id: str = Field(alias="spaceId")
    status: Optional[WriteStatus] = None
    title: str
    body: Optional[ContentBodyInput] = None


class BlogPostUpdateInput(_Input):
    id: str
    status: WriteStatus = "current"
    title: str
    body: Optional[ContentBodyInput] = None
    version: VersionInput


class CommentCreateInput(_Input):
    page_id: Optional[str] = Field(default=None, alias="pageId")
    blog_post_id: Optional[str] = Field(default=None, alias="blogPostId")
    custom_content_id: Optional[str] = Field(default=None, alias="customContentId")
    parent_comment_id: Optional[str] = Field(default=None, alias="parentCommentId")
    body: ContentBodyInput


class CommentUpdateInput(_Input):
    body: ContentBodyInput
    version: VersionInput


class CustomContentCreateInput(_Input):
    type: str
    status: Optional[WriteStatus] = None
    title: Optional[str] = None
    space_id: Optional[str] = Field(default=None, alias="spaceId")
    page_id: Optional[str] = Field(default=None, alias="pageId")
    blog_post_id: Optional[str] = Field(default=None, alias="blogPostId")
    custom_content_id: Optional[str] = Field(default=None, alias="customContentId")
    body: Optional[ContentBodyInput] = None


class CustomContentUpdateInput(_Input):
    id: str
    status: Optional[WriteStatus] = None
    title: Optional[str] = None
    body: Optional[ContentBodyInput] = None
    version: VersionInput


class LabelInput(_Input):
    name: str
    prefix: WritableLabelPrefix = "global"


class PropertyCreateInput(_Input):
    key: str
    value: Any


class PropertyUpdateInput(_Input):
    key: str
    # opaque JSON, whatever the caller stored
    value: Any
    version: VersionInput


class Principal(_Input):
    type: Literal["user", "group"]
    id: str


class PermissionOperation(_Input):
    key: str
    target: str


class SpacePermissionCreateInput(_Input):
    principal: Principal
    operation: PermissionOperation


class TaskUpdateInput(_Input):
    status: TaskStatus


__all__ = [
    "BodyFormat",
    "BodyRepresentation",
    "ContentStatus",
    "WriteStatus",
    "LabelPrefix",
    "WritableLabelPrefix",
    "TaskStatus",
    "ContentType",
    "PaginatedResult",
    "ContentBodyInput",
    "VersionInput",
    "next_version",
    "SpaceCreateInput",
    "SpaceDescriptionInput",
    "SpaceDescriptionValue",
    "PageCreateInput",
    "PageUpdateInput",
    "BlogPostCreateInput",
    "BlogPostUpdateInput",
    "CommentCreateInput",
    "CommentUpdateInput",
    "CustomContentCreateInput",
    "CustomContentUpdateInput",
    "LabelInput",
    "PropertyCreateInput",
    "PropertyUpdateInput",
    "Principal",
    "PermissionOperation",
    "SpacePermissionCreateInput",
    "TaskUpdateInput",
]
