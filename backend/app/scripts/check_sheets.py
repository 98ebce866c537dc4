# scripts/check_sheets.py
"""Verify the Google service account can open the capture log sheet.

    python -m app.scripts.check_sheets
"""
import sys

from app.core.config import settings
from app.core.sheets import build_gspread_client


def check_sheet_access(credentials_path: str, spreadsheet_id: str, tab: str) -> bool:
    try:
        client = build_gspread_client(credentials_path)
        worksheet = client.open_by_key(spreadsheet_id).worksheet(tab)
    except Exception as e:
        print(f"❌ Sheet access failed: {e}")
        return False
    print(f"✅ Auth OK | spreadsheet={spreadsheet_id} | tab={worksheet.title} | rows={worksheet.row_count}")
    return True


if __name__ == "__main__":
    if not settings.sheets_configured:
        print("❌ SPREADSHEET_ID and GOOGLE_CREDENTIALS_PATH must be set")
        sys.exit(1)
    ok = check_sheet_access(settings.GOOGLE_CREDENTIALS_PATH, settings.SPREADSHEET_ID, settings.SHEET_TAB)
    sys.exit(0 if ok else 1)
