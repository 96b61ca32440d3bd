"""Remote gateway: one Graph call per document library operation."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from doclib_console.graph.client import GraphClient
from doclib_console.graph.columns import (
    DEFAULT_CURRENCY_LOCALE,
    DEFAULT_LOOKUP_LIST_ID,
    ColumnKind,
    build_column_payload,
)
from doclib_console.graph.models import (
    CONFLICT_BEHAVIOR,
    FIELD_BASE,
    FIELD_CONTENT_TYPE,
    FIELD_CONTENT_TYPE_ID,
    FIELD_DESCRIPTION,
    FIELD_DISPLAY_NAME,
    FIELD_ENFORCE_UNIQUE_VALUES,
    FIELD_FIELDS,
    FIELD_FILE,
    FIELD_FOLDER,
    FIELD_GROUP,
    FIELD_HIDDEN,
    FIELD_ID,
    FIELD_INDEXED,
    FIELD_MAIL,
    FIELD_NAME,
    FIELD_SIZE,
    FIELD_TITLE,
    FIELD_WEB_URL,
    ODATA_NEXT_LINK,
    ODATA_VALUE,
    ColumnDefinition,
    ContentType,
    ContentTypeRef,
    Drive,
    DriveItem,
    ListItem,
    Site,
    SiteList,
    User,
    UserPage,
)

if TYPE_CHECKING:
    from doclib_console.config import AppConfig

logger = logging.getLogger(__name__)

USERS_PAGE_SIZE = 25
BASE_CONTENT_TYPE_ID = "0x0101"
BASE_CONTENT_TYPE_NAME = "Document"
DEFAULT_SITE_SUFFIX = "SPtraining"


class GatewayNotInitializedError(RuntimeError):
    """Raised when a gateway operation runs before initialize()."""

    def __init__(self) -> None:
        super().__init__("Graph has not been initialized for app-only auth")


class EmptyResponseError(RuntimeError):
    """Raised when Graph accepts a write but returns no usable body."""


class GraphGateway:
    """Issues the Graph requests behind each document library operation.

    The gateway owns a single GraphClient for the lifetime of the process.
    It is either injected at construction time or built once by
    :meth:`initialize`; every operation fails with
    :class:`GatewayNotInitializedError` until one of the two has happened.
    """

    def __init__(
        self,
        client: GraphClient | None = None,
        *,
        site_suffix: str = DEFAULT_SITE_SUFFIX,
        currency_locale: str = DEFAULT_CURRENCY_LOCALE,
        lookup_list_id: str = DEFAULT_LOOKUP_LIST_ID,
    ) -> None:
        """Initialise the gateway.

        Args:
            client: Pre-built GraphClient, or None to build one in initialize().
            site_suffix: URL suffix that identifies the root site.
            currency_locale: Locale applied to new currency columns.
            lookup_list_id: Target list applied to new lookup columns.
        """
        self._client = client
        self._site_suffix = site_suffix
        self._currency_locale = currency_locale
        self._lookup_list_id = lookup_list_id

    @property
    def is_initialized(self) -> bool:
        return self._client is not None

    def initialize(self, tenant_id: str, client_id: str, client_secret: str) -> None:
        """Build the authenticated client. Repeat calls are no-ops."""
        if self.is_initialized:
            logger.debug("[initialize] client already initialized; skipping")
            return
        self._client = GraphClient(
            client_id=client_id,
            client_secret=client_secret,
            tenant_id=tenant_id,
        )
        logger.info("[initialize] graph client initialized; tenant_id:%s", tenant_id)

    def _require_client(self) -> GraphClient:
        if self._client is None:
            raise GatewayNotInitializedError()
        return self._client

    # ------------------------------------------------------------------
    # Read operations
    # ------------------------------------------------------------------

    def get_token(self) -> str:
        """Return a raw bearer token for the Graph default scope."""
        return self._require_client().acquire_token()

    def list_users(self) -> UserPage:
        """Return the first page of users ordered by display name."""
        client = self._require_client()
        logger.info("[list_users] fetching users; top:%d", USERS_PAGE_SIZE)
        response = client.get(
            "/users",
            {
                "$select": [FIELD_DISPLAY_NAME, FIELD_ID, FIELD_MAIL],
                "$top": USERS_PAGE_SIZE,
                "$orderby": FIELD_DISPLAY_NAME,
            },
        )
        users = [self._parse_user(raw) for raw in self._values(response)]
        more_available = bool(response and response.get(ODATA_NEXT_LINK))
        return UserPage(users=users, more_available=more_available)

    def find_root_site(self, suffix: str | None = None) -> Site | None:
        """Return the first site whose URL ends with the configured suffix.

        A trailing slash on the site URL is ignored and the comparison is
        case-insensitive.

        Args:
            suffix: Override for the configured site suffix.

        Returns:
            The matching Site, or None when no site matches.
        """
        client = self._require_client()
        wanted = (suffix or self._site_suffix).lower()
        logger.info("[find_root_site] fetching sites; suffix:%s", wanted)
        response = client.get("/sites", {"$select": [FIELD_ID, FIELD_WEB_URL]})
        for raw in self._values(response):
            url = (raw.get(FIELD_WEB_URL) or "").rstrip("/")
            if url.lower().endswith(wanted):
                return Site(id=raw.get(FIELD_ID, ""), web_url=raw.get(FIELD_WEB_URL, ""))
        return None

    def list_lists(self, site_id: str) -> list[SiteList]:
        client = self._require_client()
        logger.info("[list_lists] fetching lists; site_id:%s", site_id)
        response = client.get(
            f"/sites/{site_id}/lists",
            {"$select": [FIELD_ID, FIELD_NAME, FIELD_WEB_URL]},
        )
        return [
            SiteList(
                id=raw.get(FIELD_ID, ""),
                name=raw.get(FIELD_NAME, ""),
                web_url=raw.get(FIELD_WEB_URL, ""),
            )
            for raw in self._values(response)
        ]

    def list_drives(self, site_id: str) -> list[Drive]:
        client = self._require_client()
        logger.info("[list_drives] fetching drives; site_id:%s", site_id)
        response = client.get(
            f"/sites/{site_id}/drives",
            {"$select": [FIELD_ID, FIELD_NAME, FIELD_WEB_URL]},
        )
        return [
            Drive(
                id=raw.get(FIELD_ID, ""),
                name=raw.get(FIELD_NAME, ""),
                web_url=raw.get(FIELD_WEB_URL, ""),
            )
            for raw in self._values(response)
        ]

    def list_drive_items(self, drive_id: str) -> list[DriveItem]:
        """Return the immediate children of the drive's root folder."""
        client = self._require_client()
        logger.info("[list_drive_items] fetching root children; drive_id:%s", drive_id)
        response = client.get(
            f"/drives/{drive_id}/items/root/children",
            {
                "$select": [
                    FIELD_ID,
                    FIELD_NAME,
                    FIELD_WEB_URL,
                    FIELD_SIZE,
                    FIELD_FILE,
                    FIELD_FOLDER,
                ]
            },
        )
        return [self._parse_drive_item(raw) for raw in self._values(response)]

    def list_columns(self, site_id: str, list_id: str) -> list[ColumnDefinition]:
        client = self._require_client()
        logger.info("[list_columns] fetching columns; site_id:%s;list_id:%s", site_id, list_id)
        response = client.get(
            f"/sites/{site_id}/lists/{list_id}/columns",
            {"$select": [FIELD_DISPLAY_NAME]},
        )
        return [self._parse_column(raw) for raw in self._values(response)]

    def list_content_types(self, site_id: str, list_id: str) -> list[ContentType]:
        client = self._require_client()
        logger.info(
            "[list_content_types] fetching content types; site_id:%s;list_id:%s",
            site_id,
            list_id,
        )
        response = client.get(
            f"/sites/{site_id}/lists/{list_id}/contentTypes",
            {"$select": [FIELD_NAME, FIELD_DESCRIPTION, FIELD_GROUP]},
        )
        return [self._parse_content_type(raw) for raw in self._values(response)]

    def list_items_with_fields(self, site_id: str, list_id: str) -> list[ListItem]:
        """Return every list item with its content type and expanded field map."""
        client = self._require_client()
        logger.info(
            "[list_items_with_fields] fetching items; site_id:%s;list_id:%s", site_id, list_id
        )
        response = client.get(
            f"/sites/{site_id}/lists/{list_id}/items",
            {
                "$select": [FIELD_ID, FIELD_WEB_URL, FIELD_CONTENT_TYPE, FIELD_FIELDS],
                "$expand": FIELD_FIELDS,
            },
        )
        return [self._parse_list_item(raw) for raw in self._values(response)]

    # ------------------------------------------------------------------
    # Write operations
    # ------------------------------------------------------------------

    def create_column(
        self,
        site_id: str,
        list_id: str,
        kind: ColumnKind,
        name: str,
        choices: list[str] | None = None,
    ) -> ColumnDefinition:
        """Create a column of the given kind on a list.

        Args:
            site_id: Graph ID of the site.
            list_id: Graph ID of the list.
            kind: Column kind; selects the fixed-default option block.
            name: Column name.
            choices: Choice values, only used for choice columns.

        Returns:
            The created column as returned by Graph.

        Raises:
            EmptyResponseError: If Graph returned no body.
        """
        client = self._require_client()
        payload = build_column_payload(
            kind,
            name,
            choices=choices,
            currency_locale=self._currency_locale,
            lookup_list_id=self._lookup_list_id,
        )
        logger.info("[create_column] creating column; kind:%s;name:%s", kind.value, name)
        response = client.post(f"/sites/{site_id}/lists/{list_id}/columns", payload)
        return self._parse_column(self._require_body(response, "create_column"))

    def create_content_type(
        self,
        site_id: str,
        name: str,
        description: str,
        group: str,
    ) -> ContentType:
        """Create a site content type derived from the built-in Document type."""
        client = self._require_client()
        payload = {
            FIELD_NAME: name,
            FIELD_DESCRIPTION: description,
            FIELD_GROUP: group,
            FIELD_BASE: {FIELD_ID: BASE_CONTENT_TYPE_ID, FIELD_NAME: BASE_CONTENT_TYPE_NAME},
        }
        logger.info("[create_content_type] creating content type; name:%s;group:%s", name, group)
        response = client.post(f"/sites/{site_id}/contentTypes", payload)
        return self._parse_content_type(self._require_body(response, "create_content_type"))

    def create_folder(self, drive_id: str, name: str) -> DriveItem:
        """Create a folder at the drive root; fails on a name collision."""
        client = self._require_client()
        payload = {FIELD_NAME: name, FIELD_FOLDER: {}, CONFLICT_BEHAVIOR: "fail"}
        logger.info("[create_folder] creating folder; drive_id:%s;name:%s", drive_id, name)
        response = client.post(f"/drives/{drive_id}/items/root/children", payload)
        return self._parse_drive_item(self._require_body(response, "create_folder"))

    def rename_drive_item(self, drive_id: str, item_id: str, new_name: str) -> DriveItem:
        client = self._require_client()
        logger.info(
            "[rename_drive_item] renaming item; drive_id:%s;item_id:%s;new_name:%s",
            drive_id,
            item_id,
            new_name,
        )
        response = client.patch(f"/drives/{drive_id}/items/{item_id}", {FIELD_NAME: new_name})
        return self._parse_drive_item(self._require_body(response, "rename_drive_item"))

    def update_list_item_field(
        self,
        site_id: str,
        list_id: str,
        item_id: str,
        content_type_id: str,
        field_name: str,
        field_value: Any,
    ) -> ListItem:
        """Set the item's content type and one entry of its field map."""
        client = self._require_client()
        payload = {
            FIELD_CONTENT_TYPE: {FIELD_ID: content_type_id},
            FIELD_FIELDS: {field_name: field_value},
        }
        logger.info(
            "[update_list_item_field] patching item; item_id:%s;field:%s", item_id, field_name
        )
        response = client.patch(f"/sites/{site_id}/lists/{list_id}/items/{item_id}", payload)
        return self._parse_list_item(self._require_body(response, "update_list_item_field"))

    def update_list_item_fields(
        self,
        site_id: str,
        list_id: str,
        item_id: str,
        content_type_id: str,
        fields: dict[str, Any],
    ) -> ListItem:
        """Patch several fields at once.

        The ContentTypeId field is always forced to ``content_type_id`` and
        the Title field is always sent, as None when the caller omitted it.
        The caller's mapping is not modified.
        """
        client = self._require_client()
        values = dict(fields)
        values[FIELD_CONTENT_TYPE_ID] = content_type_id
        values[FIELD_TITLE] = values.get(FIELD_TITLE)
        logger.info(
            "[update_list_item_fields] patching item; item_id:%s;field_count:%d",
            item_id,
            len(values),
        )
        response = client.patch(
            f"/sites/{site_id}/lists/{list_id}/items/{item_id}", {FIELD_FIELDS: values}
        )
        return self._parse_list_item(self._require_body(response, "update_list_item_fields"))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _values(response: dict[str, Any] | None) -> list[dict[str, Any]]:
        if not response:
            return []
        return response.get(ODATA_VALUE) or []

    @staticmethod
    def _require_body(response: dict[str, Any] | None, operation: str) -> dict[str, Any]:
        if not response:
            logger.error("[%s] graph returned an empty response", operation)
            raise EmptyResponseError(f"Graph API returned an empty response for {operation}")
        return response

    @staticmethod
    def _parse_user(raw: dict[str, Any]) -> User:
        return User(
            id=raw.get(FIELD_ID, ""),
            display_name=raw.get(FIELD_DISPLAY_NAME),
            mail=raw.get(FIELD_MAIL),
        )

    @staticmethod
    def _parse_drive_item(raw: dict[str, Any]) -> DriveItem:
        return DriveItem(
            id=raw.get(FIELD_ID),
            name=raw.get(FIELD_NAME, ""),
            web_url=raw.get(FIELD_WEB_URL, ""),
            size=raw.get(FIELD_SIZE),
            file=raw.get(FIELD_FILE),
            folder=raw.get(FIELD_FOLDER),
        )

    @staticmethod
    def _parse_column(raw: dict[str, Any]) -> ColumnDefinition:
        kind = next((k.value for k in ColumnKind if k.value in raw), None)
        return ColumnDefinition(
            id=raw.get(FIELD_ID),
            name=raw.get(FIELD_NAME, ""),
            display_name=raw.get(FIELD_DISPLAY_NAME, ""),
            description=raw.get(FIELD_DESCRIPTION, ""),
            hidden=bool(raw.get(FIELD_HIDDEN, False)),
            indexed=bool(raw.get(FIELD_INDEXED, False)),
            enforce_unique_values=bool(raw.get(FIELD_ENFORCE_UNIQUE_VALUES, False)),
            kind=kind,
            options=dict(raw[kind] or {}) if kind else {},
        )

    @staticmethod
    def _parse_content_type_ref(raw: dict[str, Any] | None) -> ContentTypeRef | None:
        if raw is None:
            return None
        return ContentTypeRef(id=raw.get(FIELD_ID), name=raw.get(FIELD_NAME))

    @classmethod
    def _parse_content_type(cls, raw: dict[str, Any]) -> ContentType:
        return ContentType(
            id=raw.get(FIELD_ID),
            name=raw.get(FIELD_NAME, ""),
            description=raw.get(FIELD_DESCRIPTION, ""),
            group=raw.get(FIELD_GROUP, ""),
            base=cls._parse_content_type_ref(raw.get(FIELD_BASE)),
        )

    @classmethod
    def _parse_list_item(cls, raw: dict[str, Any]) -> ListItem:
        return ListItem(
            id=raw.get(FIELD_ID),
            web_url=raw.get(FIELD_WEB_URL, ""),
            content_type=cls._parse_content_type_ref(raw.get(FIELD_CONTENT_TYPE)),
            fields=dict(raw.get(FIELD_FIELDS) or {}),
        )


def graph_gateway_from_config(config: AppConfig) -> GraphGateway:
    """Construct and initialize a GraphGateway from application configuration.

    Args:
        config: Application configuration instance.

    Returns:
        Initialized GraphGateway instance.
    """
    gateway = GraphGateway(
        site_suffix=config.site_suffix,
        currency_locale=config.currency_locale,
        lookup_list_id=config.lookup_list_id,
    )
    gateway.initialize(config.tenant_id, config.client_id, config.client_secret)
    return gateway
