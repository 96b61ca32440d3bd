"""Application configuration loaded from environment variables."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Domain constants
    have sensible defaults but can be overridden via environment variables.
    """

    # Required: no defaults, fail at startup if missing
    tenant_id: str
    client_id: str
    client_secret: str
    site_id: str
    drive_id: str
    list_id: str

    # Domain constants: defaults provided, overridable via env
    site_suffix: str = "SPtraining"
    document_set_content_type_id: str = "0x0120D520"
    document_set_field: str = "test"
    lookup_list_id: str = "a27bf34e-444f-433b-8874-20eb73a7ef35"
    currency_locale: str = "en-ca"
    log_level: str = "WARNING"


def load_config(dotenv_path: str | None = None) -> AppConfig:
    """Construct an AppConfig from environment variables.

    A ``.env`` file is read first (``dotenv_path`` or the nearest ``.env``);
    variables already present in the environment take precedence.

    Required environment variables:
        DL_TENANT_ID: Azure AD tenant ID.
        DL_CLIENT_ID: Azure AD application (client) ID.
        DL_CLIENT_SECRET: Azure AD application client secret.
        DL_SITE_ID: Graph ID of the SharePoint site.
        DL_DRIVE_ID: Graph ID of the document library drive.
        DL_LIST_ID: Graph ID of the document library list.

    Optional environment variables (with defaults):
        DL_SITE_SUFFIX: URL suffix identifying the root site (default: SPtraining).
        DL_DOCUMENT_SET_CONTENT_TYPE_ID: Content type applied to new document sets.
        DL_DOCUMENT_SET_FIELD: Custom field populated on new document sets (default: test).
        DL_LOOKUP_LIST_ID: Target list for lookup columns.
        DL_CURRENCY_LOCALE: Locale for currency columns (default: en-ca).
        DL_LOG_LEVEL: Root log level (default: WARNING).

    Returns:
        Configured AppConfig instance.

    Raises:
        KeyError: If a required environment variable is missing.
        ValueError: If DL_LOG_LEVEL is not a standard logging level name.
    """
    load_dotenv(dotenv_path, override=False)
    log_level = os.environ.get("DL_LOG_LEVEL", "WARNING").upper()
    if log_level not in logging.getLevelNamesMapping():
        raise ValueError(f"Invalid log level in DL_LOG_LEVEL: {log_level!r}")
    return AppConfig(
        tenant_id=os.environ["DL_TENANT_ID"],
        client_id=os.environ["DL_CLIENT_ID"],
        client_secret=os.environ["DL_CLIENT_SECRET"],
        site_id=os.environ["DL_SITE_ID"],
        drive_id=os.environ["DL_DRIVE_ID"],
        list_id=os.environ["DL_LIST_ID"],
        site_suffix=os.environ.get("DL_SITE_SUFFIX", "SPtraining"),
        document_set_content_type_id=os.environ.get(
            "DL_DOCUMENT_SET_CONTENT_TYPE_ID", "0x0120D520"
        ),
        document_set_field=os.environ.get("DL_DOCUMENT_SET_FIELD", "test"),
        lookup_list_id=os.environ.get(
            "DL_LOOKUP_LIST_ID", "a27bf34e-444f-433b-8874-20eb73a7ef35"
        ),
        currency_locale=os.environ.get("DL_CURRENCY_LOCALE", "en-ca"),
        log_level=log_level,
    )
