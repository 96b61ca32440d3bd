"""Column definition payloads for the supported column kinds."""

from __future__ import annotations

from enum import Enum
from typing import Any

DEFAULT_CURRENCY_LOCALE = "en-ca"
DEFAULT_LOOKUP_LIST_ID = "a27bf34e-444f-433b-8874-20eb73a7ef35"
LOOKUP_COLUMN_NAME = "ID"


class ColumnKind(str, Enum):
    """Supported column kinds. Values are the Graph type facet names."""

    CHOICE = "choice"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE_TIME = "dateTime"
    LOOKUP = "lookup"
    BOOLEAN = "boolean"
    PERSON_OR_GROUP = "personOrGroup"
    HYPERLINK = "hyperlinkOrPicture"

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS = {
    ColumnKind.CHOICE: "Choice",
    ColumnKind.NUMBER: "Number",
    ColumnKind.CURRENCY: "Currency",
    ColumnKind.DATE_TIME: "DateTime",
    ColumnKind.LOOKUP: "LookUp",
    ColumnKind.BOOLEAN: "Boolean",
    ColumnKind.PERSON_OR_GROUP: "PersonOrGroup",
    ColumnKind.HYPERLINK: "Hyperlink",
}


def parse_choices(raw: str) -> list[str]:
    """Split a comma-separated choice string, trimming and dropping empty entries."""
    return [choice.strip() for choice in raw.split(",") if choice.strip()]


def column_options(
    kind: ColumnKind,
    *,
    choices: list[str] | None = None,
    currency_locale: str = DEFAULT_CURRENCY_LOCALE,
    lookup_list_id: str = DEFAULT_LOOKUP_LIST_ID,
) -> dict[str, Any]:
    """Return the fixed-default option block for a column kind.

    Args:
        kind: Column kind to build options for.
        choices: Choice values; only used for ``ColumnKind.CHOICE``.
        currency_locale: Locale for currency columns.
        lookup_list_id: Target list for lookup columns.

    Returns:
        The option block to send under the kind's facet name.
    """
    if kind is ColumnKind.CHOICE:
        return {"allowTextEntry": True, "choices": list(choices or [])}
    if kind is ColumnKind.NUMBER:
        return {"decimalPlaces": "automatic", "displayAs": "number"}
    if kind is ColumnKind.CURRENCY:
        return {"locale": currency_locale}
    if kind is ColumnKind.DATE_TIME:
        return {"displayAs": "default", "format": "dateTime"}
    if kind is ColumnKind.LOOKUP:
        return {
            "allowMultipleValues": False,
            "allowUnlimitedLength": False,
            "columnName": LOOKUP_COLUMN_NAME,
            "listId": lookup_list_id,
        }
    if kind is ColumnKind.BOOLEAN:
        return {}
    if kind is ColumnKind.PERSON_OR_GROUP:
        return {
            "allowMultipleSelection": True,
            "displayAs": "account",
            "chooseFromType": "peopleAndGroups",
        }
    if kind is ColumnKind.HYPERLINK:
        return {"isPicture": False}
    raise ValueError(f"Unsupported column kind: {kind!r}")


def build_column_payload(
    kind: ColumnKind,
    name: str,
    *,
    choices: list[str] | None = None,
    currency_locale: str = DEFAULT_CURRENCY_LOCALE,
    lookup_list_id: str = DEFAULT_LOOKUP_LIST_ID,
) -> dict[str, Any]:
    """Build a complete columnDefinition request body.

    Every column is created visible, unindexed, without a uniqueness
    constraint and with an empty description.
    """
    return {
        "description": "",
        "enforceUniqueValues": False,
        "hidden": False,
        "indexed": False,
        "name": name,
        kind.value: column_options(
            kind,
            choices=choices,
            currency_locale=currency_locale,
            lookup_list_id=lookup_list_id,
        ),
    }
