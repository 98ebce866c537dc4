# core/sheets.py
import logging
from typing import Optional

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials

from app.core.errors import SinkError

logger = logging.getLogger("ishqme.sheets")

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def build_gspread_client(credentials_path: str, timeout: Optional[float] = None) -> gspread.Client:
    creds = Credentials.from_service_account_file(credentials_path, scopes=SCOPES)
    client = gspread.authorize(creds)
    if timeout:
        client.set_timeout(timeout)
    return client


class SheetLogSink:
    """
    Append-only capture log on a Google Sheet.

    The worksheet handle is opened lazily on the first append and reused.
    Calls are blocking; run them through app.utils.executor.run_blocking.
    """

    def __init__(
        self,
        spreadsheet_id: str,
        tab: str = "Sheet1",
        credentials_path: Optional[str] = None,
        client: Optional[gspread.Client] = None,
        timeout: Optional[float] = None,
    ):
        self.spreadsheet_id = spreadsheet_id
        self.tab = tab
        self.credentials_path = credentials_path
        self.timeout = timeout
        self._client = client
        if client is not None and timeout:
            client.set_timeout(timeout)
        self._worksheet = None

    def _get_worksheet(self):
        if self._worksheet is None:
            if self._client is None:
                if not self.credentials_path:
                    raise SinkError("No Google credentials configured for the sheet log")
                self._client = build_gspread_client(self.credentials_path, timeout=self.timeout)
            self._worksheet = self._client.open_by_key(self.spreadsheet_id).worksheet(self.tab)
            logger.info(f"✅ Sheet log ready | spreadsheet={self.spreadsheet_id} | tab={self.tab}")
        return self._worksheet

    def append_row(self, values: list) -> None:
        try:
            self._get_worksheet().append_row(
                values,
                value_input_option="USER_ENTERED",
                insert_data_option="INSERT_ROWS",
            )
        except SinkError:
            raise
        except (gspread.exceptions.GSpreadException, GoogleAuthError, OSError, ValueError) as e:
            # Force a fresh handle next time
            self._worksheet = None
            raise SinkError(f"Sheet append failed: {e}") from e
        logger.info(f"Row appended to sheet | tab={self.tab} | email={values[0] if values else ''}")
