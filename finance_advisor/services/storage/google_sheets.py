"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the hosted document store because:
1. Users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)
4. Easy to export/migrate later

TRADEOFFS:
- Not suitable for high-volume data (we're fine for personal use)
- No transactions: concurrent writers are last-writer-wins
- Limited query capabilities (we filter in Python)
- No push notifications: live values refresh after our own writes

Every row carries the app_id and the identity, so one spreadsheet can
hold many isolated users. Calls are never retried; a failure is
reported to the caller as PermissionDeniedError or StorageError.
"""

import json
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

import gspread
import structlog
from google.oauth2.service_account import Credentials

from finance_advisor.config import get_settings
from finance_advisor.models.audit import AuditEvent, AuditEventType, AuditSeverity
from finance_advisor.models.finance import (
    BudgetDocument,
    BudgetMap,
    NewTransaction,
    Profile,
    Transaction,
    TransactionType,
)
from finance_advisor.services.storage.interface import (
    AuditStorageInterface,
    BudgetStorageInterface,
    ConnectionError,
    PermissionDeniedError,
    ProfileStorageInterface,
    StorageError,
    TransactionStorageInterface,
)


logger = structlog.get_logger(__name__)


TRANSACTION_COLUMNS = [
    "app_id",
    "identity",
    "id",
    "type",
    "category",
    "amount",
    "date",
    "description",
    "created_at",
]

BUDGET_COLUMNS = [
    "app_id",
    "identity",
    "budgets_json",
    "custom_categories_json",
    "updated_at",
]

PROFILE_COLUMNS = [
    "app_id",
    "identity",
    "name",
    "updated_at",
]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "identity",
    "resource",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

PERMISSION_STATUS_CODES = {401, 403}


def _status_code(error: gspread.exceptions.APIError) -> Optional[int]:
    response = getattr(error, "response", None)
    return getattr(response, "status_code", None)


def translate_error(error: Exception, action: str) -> StorageError:
    """Map a Sheets API failure onto the storage error taxonomy."""
    if isinstance(error, StorageError):
        return error
    if (
        isinstance(error, gspread.exceptions.APIError)
        and _status_code(error) in PERMISSION_STATUS_CODES
    ):
        return PermissionDeniedError(f"Permission denied while trying to {action}: {error}")
    return StorageError(f"Failed to {action}: {error}")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and lazily creates the worksheets it needs.
    """

    def __init__(self):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = get_settings().google_sheets
        self._app_id = get_settings().app.app_id

    @property
    def app_id(self) -> str:
        return self._app_id

    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str], rows: int) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_transactions_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.transactions_sheet_name, TRANSACTION_COLUMNS, 1000
        )

    def get_budgets_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.budgets_sheet_name, BUDGET_COLUMNS, 100
        )

    def get_profiles_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.profiles_sheet_name, PROFILE_COLUMNS, 100
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name, AUDIT_COLUMNS, 5000
        )

    def find_rows(self, sheet: gspread.Worksheet, identity: str) -> list[tuple[int, list]]:
        """
        Rows belonging to this app and identity.

        Returns (1-based row number, row values) pairs, header excluded.
        """
        matches = []
        for idx, row in enumerate(sheet.get_all_values()[1:], start=2):
            if len(row) > 1 and row[0] == self._app_id and row[1] == identity:
                matches.append((idx, row))
        return matches


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


class GoogleSheetsTransactionStorage(TransactionStorageInterface):
    """
    Transactions stored one per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    def _transaction_to_row(self, identity: str, transaction: Transaction) -> list:
        return [
            self._client.app_id,
            identity,
            transaction.id,
            transaction.type.value,
            transaction.category,
            str(transaction.amount),
            transaction.date.isoformat(),
            transaction.description,
            transaction.created_at.isoformat(),
        ]

    def _row_to_transaction(self, row: list) -> Transaction:
        created_at = _safe_get(row, 8)
        return Transaction(
            id=_safe_get(row, 2),
            type=TransactionType(_safe_get(row, 3)),
            category=_safe_get(row, 4),
            amount=Decimal(_safe_get(row, 5, "0")),
            date=date.fromisoformat(_safe_get(row, 6)),
            description=_safe_get(row, 7),
            created_at=datetime.fromisoformat(created_at) if created_at else datetime.now(timezone.utc),
        )

    async def create_transaction(self, identity: str, record: NewTransaction) -> str:
        transaction = Transaction.from_new(record, uuid4().hex)
        try:
            sheet = self._client.get_transactions_sheet()
            sheet.append_row(
                self._transaction_to_row(identity, transaction),
                value_input_option="RAW",
            )
        except Exception as e:
            raise translate_error(e, "add transaction")
        await self.refresh_transactions(identity)
        return transaction.id

    async def delete_transaction(self, identity: str, transaction_id: str) -> bool:
        try:
            sheet = self._client.get_transactions_sheet()
            for idx, row in self._client.find_rows(sheet, identity):
                if _safe_get(row, 2) == transaction_id:
                    sheet.delete_rows(idx)
                    break
            else:
                return False
        except Exception as e:
            raise translate_error(e, "delete transaction")
        await self.refresh_transactions(identity)
        return True

    async def list_transactions(self, identity: str) -> list[Transaction]:
        try:
            sheet = self._client.get_transactions_sheet()
            rows = self._client.find_rows(sheet, identity)
        except Exception as e:
            raise translate_error(e, "load transactions")

        transactions = []
        for idx, row in rows:
            try:
                transactions.append(self._row_to_transaction(row))
            except Exception as e:
                logger.warning("malformed_transaction_row", row=idx, error=str(e))
        return transactions


class GoogleSheetsBudgetStorage(BudgetStorageInterface):
    """
    One row per identity holding the budgets document as JSON.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    def _row_to_document(self, row: list) -> BudgetDocument:
        budgets = json.loads(_safe_get(row, 2, "{}"))
        custom = json.loads(_safe_get(row, 3, "[]"))
        return BudgetDocument(
            budgets={category: Decimal(str(limit)) for category, limit in budgets.items()},
            custom_categories=list(custom),
        )

    async def get_budget_document(self, identity: str) -> Optional[BudgetDocument]:
        try:
            sheet = self._client.get_budgets_sheet()
            rows = self._client.find_rows(sheet, identity)
            if not rows:
                return None
            return self._row_to_document(rows[0][1])
        except Exception as e:
            raise translate_error(e, "load budgets")

    async def upsert_budget_document(
        self,
        identity: str,
        budgets: Optional[BudgetMap] = None,
        custom_categories: Optional[list[str]] = None,
        merge: bool = True,
    ) -> None:
        try:
            sheet = self._client.get_budgets_sheet()
            rows = self._client.find_rows(sheet, identity)
            existing = BudgetDocument()
            if rows and merge:
                existing = self._row_to_document(rows[0][1])

            document = BudgetDocument(
                budgets=dict(budgets) if budgets is not None else existing.budgets,
                custom_categories=(
                    list(custom_categories)
                    if custom_categories is not None
                    else existing.custom_categories
                ),
            )
            new_row = [
                self._client.app_id,
                identity,
                json.dumps({k: str(v) for k, v in document.budgets.items()}),
                json.dumps(document.custom_categories),
                _now_iso(),
            ]

            if rows:
                row_number = rows[0][0]
                sheet.update(range_name=f"A{row_number}:E{row_number}", values=[new_row])
            else:
                sheet.append_row(new_row, value_input_option="RAW")
        except Exception as e:
            raise translate_error(e, "update budgets")
        await self.refresh_budget_document(identity)


class GoogleSheetsProfileStorage(ProfileStorageInterface):
    """
    One row per identity holding the display name.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        super().__init__()
        self._client = client or GoogleSheetsClient()

    async def get_profile(self, identity: str) -> Optional[Profile]:
        try:
            sheet = self._client.get_profiles_sheet()
            rows = self._client.find_rows(sheet, identity)
        except Exception as e:
            raise translate_error(e, "load user profile")
        if not rows:
            return None
        return Profile(name=_safe_get(rows[0][1], 2))

    async def upsert_profile(self, identity: str, name: str, merge: bool = True) -> None:
        new_row = [self._client.app_id, identity, name, _now_iso()]
        try:
            sheet = self._client.get_profiles_sheet()
            rows = self._client.find_rows(sheet, identity)
            if rows:
                row_number = rows[0][0]
                sheet.update(range_name=f"A{row_number}:D{row_number}", values=[new_row])
            else:
                sheet.append_row(new_row, value_input_option="RAW")
        except Exception as e:
            raise translate_error(e, "update user name")
        await self.refresh_profile(identity)


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        return AuditEvent(
            event_id=UUID(_safe_get(row, 0)),
            timestamp=datetime.fromisoformat(_safe_get(row, 1)),
            event_type=AuditEventType(_safe_get(row, 2)),
            severity=AuditSeverity(_safe_get(row, 3)),
            identity=_safe_get(row, 4) or None,
            resource=_safe_get(row, 5) or None,
            entity_id=_safe_get(row, 6) or None,
            correlation_id=UUID(_safe_get(row, 7)) if _safe_get(row, 7) else None,
            description=_safe_get(row, 8),
            details=json.loads(_safe_get(row, 9)) if _safe_get(row, 9) else {},
            error_message=_safe_get(row, 10) or None,
            is_user_action=_safe_get(row, 11).lower() == "true",
        )

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._client.get_audit_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Audit logging should not break the main flow
            logger.warning("audit_event_write_failed", error=str(e))
            return False

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            sheet = self._client.get_audit_sheet()
            all_rows = sheet.get_all_values()[1:]
        except Exception as e:
            raise translate_error(e, "load audit events")

        events = []
        for row in all_rows:
            if row and row[0]:
                try:
                    events.append(self._row_to_event(row))
                except Exception:
                    continue

        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
