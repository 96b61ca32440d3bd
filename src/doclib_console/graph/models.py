"""Data models for Microsoft Graph sites, lists, drives and list items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Graph API JSON field names
FIELD_ID = "id"
FIELD_NAME = "name"
FIELD_DISPLAY_NAME = "displayName"
FIELD_MAIL = "mail"
FIELD_WEB_URL = "webUrl"
FIELD_SIZE = "size"
FIELD_FILE = "file"
FIELD_FOLDER = "folder"
FIELD_DESCRIPTION = "description"
FIELD_GROUP = "group"
FIELD_BASE = "base"
FIELD_HIDDEN = "hidden"
FIELD_INDEXED = "indexed"
FIELD_ENFORCE_UNIQUE_VALUES = "enforceUniqueValues"
FIELD_CONTENT_TYPE = "contentType"
FIELD_FIELDS = "fields"

# List item field keys
FIELD_LINK_FILENAME = "LinkFilename"
FIELD_CONTENT_TYPE_ID = "ContentTypeId"
FIELD_TITLE = "Title"

# Graph instance annotations
CONFLICT_BEHAVIOR = "@microsoft.graph.conflictBehavior"

# OData response keys
ODATA_NEXT_LINK = "@odata.nextLink"
ODATA_VALUE = "value"


@dataclass(frozen=True)
class User:
    """A directory user projected to display name, id and mail."""

    id: str
    display_name: str | None = None
    mail: str | None = None


@dataclass(frozen=True)
class UserPage:
    """One page of users plus whether the server reported a next page."""

    users: list[User] = field(default_factory=list)
    more_available: bool = False


@dataclass(frozen=True)
class Site:
    """A SharePoint site."""

    id: str
    web_url: str = ""


@dataclass(frozen=True)
class SiteList:
    """A SharePoint list within a site."""

    id: str
    name: str = ""
    web_url: str = ""


@dataclass(frozen=True)
class Drive:
    """A document library (drive) within a site."""

    id: str
    name: str = ""
    web_url: str = ""


@dataclass(frozen=True)
class DriveItem:
    """A file or folder in a drive.

    ``file`` and ``folder`` hold the raw Graph facets; exactly one of them is
    normally present.
    """

    id: str | None
    name: str = ""
    web_url: str = ""
    size: int | None = None
    file: dict[str, Any] | None = None
    folder: dict[str, Any] | None = None


@dataclass(frozen=True)
class ColumnDefinition:
    """A column on a list.

    Attributes:
        kind: Graph facet name of the column type (e.g. "choice", "number"),
            or None when the response carried no type facet.
        options: The kind-specific option block as returned by Graph.
    """

    id: str | None = None
    name: str = ""
    display_name: str = ""
    description: str = ""
    hidden: bool = False
    indexed: bool = False
    enforce_unique_values: bool = False
    kind: str | None = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ContentTypeRef:
    """Reference to a content type, as embedded in list items and base types."""

    id: str | None = None
    name: str | None = None


@dataclass(frozen=True)
class ContentType:
    """A content type."""

    id: str | None = None
    name: str = ""
    description: str = ""
    group: str = ""
    base: ContentTypeRef | None = None


@dataclass(frozen=True)
class ListItem:
    """A list item with its expanded field map."""

    id: str | None
    web_url: str = ""
    content_type: ContentTypeRef | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    @property
    def link_filename(self) -> str | None:
        """Folder or file name this item represents, when present."""
        value = self.fields.get(FIELD_LINK_FILENAME)
        return None if value is None else str(value)
