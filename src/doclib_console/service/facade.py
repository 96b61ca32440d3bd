"""Service facade: one result-returning method per console operation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from doclib_console.graph.columns import ColumnKind, parse_choices
from doclib_console.graph.gateway import EmptyResponseError
from doclib_console.graph.models import FIELD_TITLE, DriveItem, ListItem
from doclib_console.service.results import OperationResult

if TYPE_CHECKING:
    from doclib_console.config import AppConfig
    from doclib_console.graph.gateway import GraphGateway
    from doclib_console.graph.models import ColumnDefinition

logger = logging.getLogger(__name__)

SEPARATOR = "-------------------------"

# Option keys rendered for each created column kind, as (label, Graph key).
_COLUMN_OPTION_LABELS: dict[ColumnKind, list[tuple[str, str]]] = {
    ColumnKind.CHOICE: [("AllowTextEntry", "allowTextEntry"), ("DisplayAs", "displayAs")],
    ColumnKind.NUMBER: [
        ("DecimalPlaces", "decimalPlaces"),
        ("DisplayAs", "displayAs"),
        ("Maximum", "maximum"),
        ("Minimum", "minimum"),
    ],
    ColumnKind.CURRENCY: [("Locale", "locale")],
    ColumnKind.DATE_TIME: [("DisplayAs", "displayAs"), ("Format", "format")],
    ColumnKind.LOOKUP: [
        ("AllowMultipleValues", "allowMultipleValues"),
        ("AllowUnlimitedLength", "allowUnlimitedLength"),
        ("ColumnName", "columnName"),
        ("ListID", "listId"),
    ],
    ColumnKind.BOOLEAN: [],
    ColumnKind.PERSON_OR_GROUP: [
        ("AllowMultipleSelection", "allowMultipleSelection"),
        ("DisplayAs", "displayAs"),
        ("ChooseFromType", "chooseFromType"),
    ],
    ColumnKind.HYPERLINK: [("IsPicture", "isPicture")],
}


class MissingIdentifierError(RuntimeError):
    """Raised when a matched Graph entity lacks an identifier the flow depends on."""


def _fmt(value: Any) -> str:
    return "" if value is None else str(value)


def _block(lines: list[str]) -> list[str]:
    return [SEPARATOR, *lines, SEPARATOR]


def find_by_link_filename(items: list[ListItem], name: str) -> ListItem | None:
    """Return the first list item whose LinkFilename equals ``name``."""
    return next((item for item in items if item.link_filename == name), None)


def find_by_name(items: list[DriveItem], name: str) -> DriveItem | None:
    """Return the first drive item whose name equals ``name`` exactly."""
    return next((item for item in items if item.name == name), None)


class DocumentLibraryService:
    """Turns each console operation into gateway calls and a rendered result.

    No method raises: every exception coming out of the gateway is logged
    and returned as an error :class:`OperationResult`.
    """

    def __init__(
        self,
        gateway: GraphGateway,
        site_id: str,
        drive_id: str,
        list_id: str,
        document_set_content_type_id: str,
        document_set_field: str = "test",
    ) -> None:
        """Initialise the service.

        Args:
            gateway: Initialized GraphGateway.
            site_id: Graph ID of the SharePoint site.
            drive_id: Graph ID of the document library drive.
            list_id: Graph ID of the document library list.
            document_set_content_type_id: Content type forced onto new document sets.
            document_set_field: Custom field populated on new document sets.
        """
        self._gateway = gateway
        self._site_id = site_id
        self._drive_id = drive_id
        self._list_id = list_id
        self._document_set_content_type_id = document_set_content_type_id
        self._document_set_field = document_set_field

    # ------------------------------------------------------------------
    # General site information
    # ------------------------------------------------------------------

    def display_access_token(self) -> OperationResult:
        try:
            token = self._gateway.get_token()
            return OperationResult.success([f"App-only token: {token}"])
        except Exception as exc:
            logger.error("[display_access_token] token request failed", exc_info=True)
            return OperationResult.from_exception("Error getting app-only access token", exc)

    def list_users(self) -> OperationResult:
        try:
            page = self._gateway.list_users()
            if not page.users:
                return OperationResult.not_found("No results returned.")
            lines: list[str] = []
            for user in page.users:
                lines.append(f"User: {user.display_name or 'NO NAME'}")
                lines.append(f"  ID: {user.id}")
                lines.append(f"  Email: {user.mail or 'NO EMAIL'}")
            lines.append("")
            lines.append(f"More users available? {page.more_available}")
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_users] listing users failed", exc_info=True)
            return OperationResult.from_exception("Error getting users", exc)

    def show_root_site(self) -> OperationResult:
        try:
            site = self._gateway.find_root_site()
            if site is None:
                logger.warning("[show_root_site] no site matched the configured suffix")
                return OperationResult.not_found("No matching site found.")
            return OperationResult.success(_block([f"ID: {site.id}", f"WebUrl: {site.web_url}"]))
        except Exception as exc:
            logger.error("[show_root_site] site lookup failed", exc_info=True)
            return OperationResult.from_exception("Error getting Root Site", exc)

    def list_lists(self) -> OperationResult:
        try:
            lists = self._gateway.list_lists(self._site_id)
            if not lists:
                return OperationResult.not_found("No lists found.")
            lines: list[str] = []
            for site_list in lists:
                lines += _block(
                    [
                        f"ID: {site_list.id}",
                        f"Name: {site_list.name}",
                        f"WebUrl: {site_list.web_url}",
                    ]
                )
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_lists] listing lists failed", exc_info=True)
            return OperationResult.from_exception("Error getting lists", exc)

    def list_drives(self) -> OperationResult:
        try:
            drives = self._gateway.list_drives(self._site_id)
            if not drives:
                return OperationResult.not_found("No Drives found.")
            lines: list[str] = []
            for drive in drives:
                lines += _block(
                    [f"ID: {drive.id}", f"Name: {drive.name}", f"WebUrl: {drive.web_url}"]
                )
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_drives] listing drives failed", exc_info=True)
            return OperationResult.from_exception("Error getting drives", exc)

    # ------------------------------------------------------------------
    # Document library
    # ------------------------------------------------------------------

    def list_files(self) -> OperationResult:
        try:
            items = self._gateway.list_drive_items(self._drive_id)
            if not items:
                return OperationResult.not_found("No Files found.")
            lines: list[str] = []
            for item in items:
                lines += _block(
                    [
                        f"ID: {_fmt(item.id)}",
                        f"Name: {item.name}",
                        f"WebUrl: {item.web_url}",
                        f"Size: {_fmt(item.size)}",
                        f"File: {_fmt(item.file)}",
                        f"Folder: {_fmt(item.folder)}",
                    ]
                )
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_files] listing files failed", exc_info=True)
            return OperationResult.from_exception("Error getting files", exc)

    def list_columns(self) -> OperationResult:
        try:
            columns = self._gateway.list_columns(self._site_id, self._list_id)
            if not columns:
                return OperationResult.not_found("No columns found.")
            lines: list[str] = []
            for column in columns:
                lines += _block([f"Display Name: {column.display_name}"])
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_columns] listing columns failed", exc_info=True)
            return OperationResult.from_exception("Error getting columns", exc)

    def list_content_types(self) -> OperationResult:
        try:
            content_types = self._gateway.list_content_types(self._site_id, self._list_id)
            if not content_types:
                return OperationResult.not_found("No Content Types found.")
            lines: list[str] = []
            for content_type in content_types:
                lines += _block(
                    [
                        f"Name: {content_type.name}",
                        f"Group: {content_type.group}",
                        f"Description: {content_type.description}",
                    ]
                )
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_content_types] listing content types failed", exc_info=True)
            return OperationResult.from_exception("Error getting content types", exc)

    def list_items(self) -> OperationResult:
        try:
            items = self._gateway.list_items_with_fields(self._site_id, self._list_id)
            if not items:
                return OperationResult.not_found("No Items found.")
            lines: list[str] = []
            for item in items:
                content_type_name = item.content_type.name if item.content_type else None
                body = [
                    f"Id: {_fmt(item.id)}",
                    f"WebURL: {item.web_url}",
                    f"Content Type Name: {_fmt(content_type_name)}",
                    "Fields:",
                ]
                if not item.fields:
                    body.append("No fields found.")
                body += [f"    {key}: {_fmt(value)}" for key, value in item.fields.items()]
                lines += _block(body)
            return OperationResult.success(lines)
        except Exception as exc:
            logger.error("[list_items] listing items failed", exc_info=True)
            return OperationResult.from_exception("Error getting items", exc)

    def create_column(
        self,
        kind: ColumnKind,
        name: str,
        choices: str | None = None,
    ) -> OperationResult:
        """Create a column and render its options.

        Args:
            kind: Column kind to create.
            name: Column name.
            choices: Comma-separated choice values, only used for choice columns.
        """
        try:
            choice_list = parse_choices(choices) if kind is ColumnKind.CHOICE and choices else None
            column = self._gateway.create_column(
                self._site_id, self._list_id, kind, name, choices=choice_list
            )
            return OperationResult.success(self._render_column(kind, column))
        except EmptyResponseError:
            logger.warning(
                "[create_column] no column returned; kind:%s;name:%s", kind.value, name
            )
            return OperationResult.error("Column was not created.")
        except Exception as exc:
            logger.error(
                "[create_column] column creation failed; kind:%s;name:%s",
                kind.value,
                name,
                exc_info=True,
            )
            return OperationResult.from_exception("Error creating column", exc)

    def create_content_type(self, name: str, description: str, group: str) -> OperationResult:
        try:
            content_type = self._gateway.create_content_type(
                self._site_id, name, description, group
            )
            body = [
                "Custom Content Type Created!",
                f"Name: {content_type.name}",
                f"Description: {content_type.description}",
                f"Group: {content_type.group}",
            ]
            if content_type.base is not None:
                body += [
                    "Content Type options:",
                    f"    BaseId: {_fmt(content_type.base.id)}",
                    f"    Name: {_fmt(content_type.base.name)}",
                ]
            return OperationResult.success(_block(body))
        except Exception as exc:
            logger.error("[create_content_type] creation failed; name:%s", name, exc_info=True)
            return OperationResult.from_exception("Error creating Content Type", exc)

    def rename_document(self, old_name: str, new_name: str) -> OperationResult:
        """Rename the root-level drive item called ``old_name``."""
        try:
            items = self._gateway.list_drive_items(self._drive_id)
            item = find_by_name(items, old_name)
            if item is None:
                logger.warning("[rename_document] no drive item matched; name:%s", old_name)
                return OperationResult.not_found("No File with that name found.")
            if not item.id:
                raise MissingIdentifierError("Drive item Id is null.")
            self._gateway.rename_drive_item(self._drive_id, item.id, new_name)
            return OperationResult.success(_block(["File renamed successfully!"]))
        except Exception as exc:
            logger.error("[rename_document] rename failed; name:%s", old_name, exc_info=True)
            return OperationResult.from_exception("Error renaming document", exc)

    def update_document_set_field(
        self,
        set_name: str,
        field_name: str,
        new_value: str,
    ) -> OperationResult:
        """Set one field on the document set whose folder is called ``set_name``."""
        try:
            items = self._gateway.list_items_with_fields(self._site_id, self._list_id)
            document_set = find_by_link_filename(items, set_name)
            if document_set is None:
                logger.warning("[update_document_set_field] no set matched; name:%s", set_name)
                return OperationResult.not_found("No Document Sets found with that name.")
            content_type_id = document_set.content_type.id if document_set.content_type else None
            if not content_type_id:
                raise MissingIdentifierError("ContentType Id is null.")
            if not document_set.id:
                raise MissingIdentifierError("DocumentSet Id is null.")
            self._gateway.update_list_item_field(
                self._site_id,
                self._list_id,
                document_set.id,
                content_type_id,
                field_name,
                new_value,
            )
            return OperationResult.success(_block(["Document Set Updated successfully!"]))
        except Exception as exc:
            logger.error(
                "[update_document_set_field] update failed; name:%s", set_name, exc_info=True
            )
            return OperationResult.from_exception("Error updating Document Set", exc)

    def create_document_set(self, name: str, field_value: str) -> OperationResult:
        """Create a folder and tag its list item as a document set.

        Folder creation does not return the list item ID, so the list is
        fetched again and the item is matched on its LinkFilename.
        """
        try:
            self._gateway.create_folder(self._drive_id, name)
            items = self._gateway.list_items_with_fields(self._site_id, self._list_id)
            folder_item = find_by_link_filename(items, name)
            if folder_item is None:
                logger.warning("[create_document_set] created folder not found; name:%s", name)
                return OperationResult.error("There was a problem creating the Document Set!")
            if not folder_item.id:
                raise MissingIdentifierError("Folder item Id is null.")
            fields: dict[str, Any] = {FIELD_TITLE: name, self._document_set_field: field_value}
            self._gateway.update_list_item_fields(
                self._site_id,
                self._list_id,
                folder_item.id,
                self._document_set_content_type_id,
                fields,
            )
            return OperationResult.success(["Document Set created!"])
        except Exception as exc:
            logger.error("[create_document_set] creation failed; name:%s", name, exc_info=True)
            return OperationResult.from_exception("Error creating Document Set", exc)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _render_column(kind: ColumnKind, column: ColumnDefinition) -> list[str]:
        body = [
            f"{kind.label} Column Created!",
            f"Id: {_fmt(column.id)}",
            f"Name: {column.name}",
            f"Description: {column.description}",
            f"Hidden: {column.hidden}",
            f"Indexed: {column.indexed}",
            f"EnforceUniqueValues: {column.enforce_unique_values}",
        ]
        if column.kind == kind.value:
            body.append(f"{kind.label} options:")
            if kind is ColumnKind.BOOLEAN:
                body.append("    No options on booleans.")
            for label, key in _COLUMN_OPTION_LABELS[kind]:
                body.append(f"    {label}: {_fmt(column.options.get(key))}")
            if kind is ColumnKind.CHOICE:
                choices = column.options.get("choices") or []
                body += [f"    Choice: {choice}" for choice in choices]
        return _block(body)


def document_library_service_from_config(
    gateway: GraphGateway, config: AppConfig
) -> DocumentLibraryService:
    """Construct a DocumentLibraryService from application configuration.

    Args:
        gateway: Initialized GraphGateway instance.
        config: Application configuration instance.

    Returns:
        Configured DocumentLibraryService instance.
    """
    return DocumentLibraryService(
        gateway=gateway,
        site_id=config.site_id,
        drive_id=config.drive_id,
        list_id=config.list_id,
        document_set_content_type_id=config.document_set_content_type_id,
        document_set_field=config.document_set_field,
    )
