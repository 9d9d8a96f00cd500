"""Google Sheets and Docs access over REST with service-account credentials."""

from __future__ import annotations

import asyncio
from typing import Any
from urllib.parse import quote

import google.auth.exceptions
import google.auth.transport.requests
import httpx
from google.oauth2 import service_account

from linda.config import GoogleConfig

_SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/documents.readonly",
]
_TOKEN_URI = "https://oauth2.googleapis.com/token"
_SHEETS_URL = "https://sheets.googleapis.com/v4/spreadsheets"
_DOCS_URL = "https://docs.googleapis.com/v1/documents"


class GoogleConfigError(Exception):
    """Raised when service-account credentials are not configured."""


class GoogleAPIError(Exception):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class GoogleWorkspaceClient:
    """Appends spreadsheet rows and reads document text.

    The access token is minted lazily and reused until it expires.
    """

    def __init__(
        self,
        config: GoogleConfig,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
        credentials: service_account.Credentials | None = None,
    ) -> None:
        self._config = config
        self._credentials = credentials
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)

    @property
    def configured(self) -> bool:
        return self._config.has_credentials

    async def close(self) -> None:
        await self._client.aclose()

    async def _access_token(self) -> str:
        if not self.configured:
            raise GoogleConfigError("Missing Google client email or private key")

        try:
            if self._credentials is None:
                self._credentials = service_account.Credentials.from_service_account_info(
                    {
                        "type": "service_account",
                        "client_email": self._config.client_email,
                        "private_key": self._config.private_key,
                        "token_uri": _TOKEN_URI,
                    },
                    scopes=_SCOPES,
                )

            if not self._credentials.valid:
                # google-auth refresh is blocking
                await asyncio.to_thread(
                    self._credentials.refresh, google.auth.transport.requests.Request()
                )
        except (ValueError, google.auth.exceptions.GoogleAuthError) as e:
            raise GoogleConfigError(f"Google service account rejected: {e}") from e
        return self._credentials.token

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        token = await self._access_token()
        response = await self._client.request(
            method, url, headers={"Authorization": f"Bearer {token}"}, **kwargs
        )
        if response.is_error:
            raise GoogleAPIError(
                f"Google {method} {url} failed with {response.status_code}",
                status_code=response.status_code,
            )
        return response.json()

    async def append_rows(
        self, spreadsheet_id: str, sheet_range: str, rows: list[list[str]]
    ) -> dict[str, Any]:
        url = f"{_SHEETS_URL}/{spreadsheet_id}/values/{quote(sheet_range, safe='')}:append"
        return await self._request(
            "POST",
            url,
            params={"valueInputOption": "RAW"},
            json={"values": rows},
        )

    async def read_document(self, document_id: str) -> str:
        """Return the document's plain text: every paragraph's text runs, joined."""
        data = await self._request("GET", f"{_DOCS_URL}/{document_id}")
        return extract_document_text(data)


def extract_document_text(document: dict[str, Any]) -> str:
    parts: list[str] = []
    for item in (document.get("body") or {}).get("content") or []:
        paragraph = item.get("paragraph") or {}
        for element in paragraph.get("elements") or []:
            parts.append((element.get("textRun") or {}).get("content") or "")
    return "".join(parts).strip()
