"""
app/ledger/stores/sheets.py

Google Sheets ledger store over the Sheets v4 REST API.

Requests are authorised with service-account credentials; the access
token is refreshed whenever it is missing or expired, so a long-lived
scheduler keeps working past the token lifetime.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Sequence
from urllib.parse import quote

import google.auth.transport.requests
import requests
from google.auth.credentials import Credentials
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account

from app.config import ExternalHTTPSettings, LedgerSettings
from app.connectors.base import BaseConnector, ConnectorRequestError
from app.ledger.colors import CellColor
from app.ledger.grid import HEADER_ROW, LedgerGrid
from app.ledger.stores.base import LedgerStore, LedgerStoreError

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ("https://www.googleapis.com/auth/spreadsheets",)

_UPDATED_RANGE_ROW = re.compile(r"![A-Z]+(\d+)")


def column_letter(column: int) -> str:
    """
    Convert a 0-based column index to A1 letters (0 -> A, 26 -> AA).
    """

    if column < 0:
        raise ValueError(f"Column index must be >= 0, got {column}.")
    letters = ""
    number = column + 1
    while number > 0:
        number, remainder = divmod(number - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


class SheetsLedgerStore(BaseConnector, LedgerStore):
    """
    Reads and writes one worksheet of a spreadsheet.
    """

    def __init__(
        self,
        *,
        spreadsheet_id: str,
        sheet_name: str,
        credentials: Credentials,
        http_settings: ExternalHTTPSettings,
        base_url: str = "https://sheets.googleapis.com/v4/spreadsheets",
        session: requests.Session | None = None,
        auth_request: google.auth.transport.requests.Request | None = None,
    ) -> None:
        super().__init__(source="google_sheets", http_settings=http_settings, session=session)
        self._spreadsheet_url = f"{base_url.rstrip('/')}/{spreadsheet_id}"
        self._sheet_name = sheet_name
        self._credentials = credentials
        self._auth_request = auth_request or google.auth.transport.requests.Request()
        self._sheet_id: int | None = None

    @classmethod
    def from_settings(
        cls,
        *,
        settings: LedgerSettings,
        http_settings: ExternalHTTPSettings,
    ) -> "SheetsLedgerStore":
        missing = [
            name
            for name, value in (
                ("SPREADSHEET_ID", settings.spreadsheet_id),
                ("SHEET_NAME", settings.sheet_name),
            )
            if not value
        ]
        if missing:
            raise RuntimeError(
                "Google Sheets ledger is not configured. Missing: " + ", ".join(missing) + "."
            )
        try:
            credentials = service_account.Credentials.from_service_account_file(
                settings.service_account_file,
                scopes=list(SHEETS_SCOPES),
            )
        except (OSError, ValueError) as exc:
            raise RuntimeError(
                "Google Sheets ledger is not configured. Cannot load service account key "
                f"GOOGLE_SERVICE_ACCOUNT_FILE={settings.service_account_file!r}: {exc}"
            ) from exc
        return cls(
            spreadsheet_id=settings.spreadsheet_id or "",
            sheet_name=settings.sheet_name or "",
            credentials=credentials,
            http_settings=http_settings,
            base_url=settings.sheets_base_url,
        )

    # ------------------------------------------------------------------
    # LedgerStore
    # ------------------------------------------------------------------

    def read_grid(self) -> LedgerGrid:
        payload = self._call("GET", self._values_url(self._quoted_sheet()))
        values = payload.get("values", []) if isinstance(payload, dict) else []
        return LedgerGrid.from_values(values)

    def append_row(self, values: Sequence[str]) -> int:
        expected_row = self.read_grid().row_count + 1
        payload = self._call(
            "POST",
            self._values_url(self._a1(0, expected_row)) + ":append",
            params={"valueInputOption": "USER_ENTERED", "insertDataOption": "INSERT_ROWS"},
            json_body={"values": [list(values)]},
        )
        updated_range = ""
        if isinstance(payload, dict):
            updated_range = (payload.get("updates") or {}).get("updatedRange") or ""
        match = _UPDATED_RANGE_ROW.search(updated_range)
        if match is None:
            logger.warning(
                "Sheets append returned no updatedRange; assuming row=%s sheet=%s",
                expected_row,
                self._sheet_name,
            )
            return expected_row
        return int(match.group(1))

    def append_column_header(self, value: str) -> int:
        header_range = f"{self._quoted_sheet()}!{HEADER_ROW}:{HEADER_ROW}"
        payload = self._call("GET", self._values_url(header_range))
        rows = payload.get("values", []) if isinstance(payload, dict) else []
        header = LedgerGrid.from_values(rows).row(1)
        column = len(header)
        self.write_cell_value(HEADER_ROW, column, value)
        return column

    def write_rows(self, start_row: int, rows: Sequence[Sequence[str]]) -> None:
        if not rows:
            return
        self._call(
            "PUT",
            self._values_url(self._a1(0, start_row)),
            params={"valueInputOption": "USER_ENTERED"},
            json_body={"values": [list(row) for row in rows]},
        )

    def write_cell_value(self, row: int, column: int, value: str) -> None:
        self._call(
            "PUT",
            self._values_url(self._a1(column, row)),
            params={"valueInputOption": "USER_ENTERED"},
            json_body={"values": [[value]]},
        )

    def write_cell_format(self, row: int, column: int, color: CellColor) -> None:
        request = {
            "repeatCell": {
                "range": {
                    "sheetId": self._resolve_sheet_id(),
                    "startRowIndex": row - 1,
                    "endRowIndex": row,
                    "startColumnIndex": column,
                    "endColumnIndex": column + 1,
                },
                "cell": {
                    "userEnteredFormat": {
                        "backgroundColor": {
                            "red": color.red,
                            "green": color.green,
                            "blue": color.blue,
                        },
                    },
                },
                "fields": "userEnteredFormat.backgroundColor",
            }
        }
        self._call("POST", f"{self._spreadsheet_url}:batchUpdate", json_body={"requests": [request]})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve_sheet_id(self) -> int:
        if self._sheet_id is not None:
            return self._sheet_id

        payload = self._call("GET", self._spreadsheet_url, params={"fields": "sheets.properties"})
        sheets = payload.get("sheets", []) if isinstance(payload, dict) else []
        for sheet in sheets:
            properties = sheet.get("properties") or {}
            if properties.get("title") == self._sheet_name:
                self._sheet_id = int(properties.get("sheetId", 0))
                return self._sheet_id
        raise LedgerStoreError(f"Worksheet {self._sheet_name!r} not found in spreadsheet.")

    def _quoted_sheet(self) -> str:
        escaped = self._sheet_name.replace("'", "''")
        return f"'{escaped}'"

    def _a1(self, column: int, row: int) -> str:
        return f"{self._quoted_sheet()}!{column_letter(column)}{row}"

    def _values_url(self, a1_range: str) -> str:
        return f"{self._spreadsheet_url}/values/{quote(a1_range, safe='')}"

    def _auth_headers(self) -> dict[str, str]:
        if not self._credentials.valid:
            try:
                self._credentials.refresh(self._auth_request)
            except GoogleAuthError as exc:
                logger.error("Google Sheets token refresh failed sheet=%s error=%s", self._sheet_name, exc)
                raise LedgerStoreError(f"Google Sheets authentication failed: {exc}") from exc
        headers: dict[str, str] = {}
        self._credentials.apply(headers)
        return headers

    def _call(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> Any:
        headers = self._auth_headers()
        try:
            return self._request_json(
                method=method,
                url=url,
                params=params,
                headers=headers,
                json_body=json_body,
            )
        except ConnectorRequestError as exc:
            raise LedgerStoreError(f"Google Sheets {method} failed: {exc}") from exc
