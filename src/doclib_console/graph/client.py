"""Microsoft Graph API client with MSAL authentication."""

from __future__ import annotations

import json
import logging
from typing import Any
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import quote, urlencode

import msal

logger = logging.getLogger(__name__)

GRAPH_BASE_URL = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPES = ["https://graph.microsoft.com/.default"]
AUTHORITY_BASE_URL = "https://login.microsoftonline.com"


class GraphAuthError(Exception):
    """Raised when MSAL token acquisition fails."""


class GraphApiError(Exception):
    """Raised when the Graph API returns a non-2xx response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"Graph API error {status_code}: {message}")
        self.status_code = status_code
        self.message = message


def build_query(params: dict[str, Any] | None) -> str:
    """Render OData query options as a query string.

    List values are joined with commas, so ``{"$select": ["id", "name"]}``
    becomes ``?$select=id,name``. ``None`` values are skipped.

    Args:
        params: Mapping of OData option name to value.

    Returns:
        Query string including the leading '?', or '' when there is nothing to send.
    """
    if not params:
        return ""
    rendered: dict[str, str] = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, list | tuple):
            value = ",".join(str(v) for v in value)
        rendered[key] = str(value)
    if not rendered:
        return ""
    return "?" + urlencode(rendered, safe="$,", quote_via=quote)


class GraphClient:
    """Authenticated client for Microsoft Graph API."""

    def __init__(self, client_id: str, client_secret: str, tenant_id: str) -> None:
        """Initialise the MSAL confidential client application.

        Args:
            client_id: Azure AD application (client) ID.
            client_secret: Azure AD application client secret.
            tenant_id: Azure AD tenant ID.
        """
        authority = f"{AUTHORITY_BASE_URL}/{tenant_id}"
        self._app = msal.ConfidentialClientApplication(
            client_id=client_id,
            client_credential=client_secret,
            authority=authority,
        )

    def acquire_token(self) -> str:
        """Acquire a Bearer token using client credentials flow.

        MSAL keeps acquired tokens in its in-memory cache, so repeated calls
        only reach the token endpoint once the cached token has expired.

        Returns:
            Access token string.

        Raises:
            GraphAuthError: If MSAL cannot acquire a token.
        """
        result: dict[str, Any] = self._app.acquire_token_for_client(scopes=GRAPH_SCOPES) or {}
        if "access_token" not in result:
            error = result.get("error", "unknown_error")
            description = result.get("error_description", "No description provided")
            logger.error("[acquire_token] MSAL token acquisition failed; error:%s", error)
            raise GraphAuthError(f"Token acquisition failed: {error}: {description}")
        return str(result["access_token"])

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Perform an authenticated GET request to the Graph API.

        Args:
            path: URL path relative to GRAPH_BASE_URL (must start with '/').
            params: Optional OData query options such as ``$select``.

        Returns:
            Parsed JSON response body as a dict.

        Raises:
            GraphAuthError: If token acquisition fails.
            GraphApiError: If the API returns a non-2xx status code.
        """
        return self._send("GET", f"{path}{build_query(params)}")

    def post(self, path: str, body: dict[str, Any]) -> dict[str, Any] | None:
        """Perform an authenticated POST request with a JSON body.

        Returns:
            Parsed JSON response body, or None when the response has no body.
        """
        return self._send("POST", path, body)

    def patch(self, path: str, body: dict[str, Any]) -> dict[str, Any] | None:
        """Perform an authenticated PATCH request with a JSON body.

        Returns:
            Parsed JSON response body, or None when the response has no body.
        """
        return self._send("PATCH", path, body)

    def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> Any:
        token = self.acquire_token()
        url = f"{GRAPH_BASE_URL}{path}"
        headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        }
        data = None
        if body is not None:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Type"] = "application/json"
        req = urllib_request.Request(url, data=data, headers=headers, method=method)
        logger.debug("[_send] graph request; method:%s;path:%s", method, path)
        try:
            with urllib_request.urlopen(req) as resp:
                raw = resp.read()
                if not raw:
                    return None
                return json.loads(raw)
        except HTTPError as exc:
            raw = exc.read()
            try:
                detail = json.loads(raw).get("error", {}).get("message", exc.reason)
            except Exception:
                detail = exc.reason
            raise GraphApiError(exc.code, detail) from exc
