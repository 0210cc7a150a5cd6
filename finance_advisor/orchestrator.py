"""
Session Orchestrator for Personal Finance Advisor

This module ties together all the components and defines what
happens for every user intent:
1. Sign in → subscribe to transactions, budgets and profile
2. Add / delete transaction
3. Update budgets, add custom category
4. Update user name
5. Navigate, cancel, toggle dark mode

DESIGN DECISION: The session enforces the boundaries:
- No store call without an established identity
- No store call with unvalidated input
- Every outcome is audited and reported as a status message
- Store failures never escape an intent

The session keeps the latest snapshot pushed by each live value.
Summary and advice are recomputed from those snapshots on demand.
"""

import datetime as dt
import time
from decimal import Decimal
from typing import Any, Callable, Mapping, Optional

import structlog

from finance_advisor.analysis import generate_advice, sort_for_display, summarize
from finance_advisor.audit import AuditLogger, configure_logging, create_correlation_id
from finance_advisor.config import Settings, StorageBackend, get_settings
from finance_advisor.exceptions import NotAuthenticatedError, ValidationError
from finance_advisor.models.category import CategoryRegistry, try_add_custom_category
from finance_advisor.models.finance import BudgetDocument, Profile, Summary, Transaction
from finance_advisor.services.identity import (
    AnonymousIdentityProvider,
    IdentityError,
    IdentityProviderInterface,
)
from finance_advisor.services.storage import (
    BudgetStorageInterface,
    GoogleSheetsAuditStorage,
    GoogleSheetsBudgetStorage,
    GoogleSheetsClient,
    GoogleSheetsProfileStorage,
    GoogleSheetsTransactionStorage,
    InMemoryAuditStorage,
    InMemoryBudgetStorage,
    InMemoryProfileStorage,
    InMemoryTransactionStorage,
    PermissionDeniedError,
    ProfileStorageInterface,
    StorageError,
    TransactionStorageInterface,
)
from finance_advisor.state import AppState, Screen, StatusNotifier, Subscription, ViewRouter
from finance_advisor.validation import TransactionValidator, filter_budgets, parse_user_name


logger = structlog.get_logger(__name__)


NOT_AUTHENTICATED_MESSAGE = "Error: Not authenticated. Please try again."
INITIALIZATION_FAILED_MESSAGE = "Error: Could not initialize the application. Please try again."

TRANSACTION_ADDED_MESSAGE = "Transaction added successfully!"
TRANSACTION_DELETED_MESSAGE = "Transaction deleted successfully!"
BUDGETS_UPDATED_MESSAGE = "Budgets updated successfully!"
CATEGORY_ADDED_TEMPLATE = 'Category "{name}" added!'
USER_NAME_UPDATED_MESSAGE = "User name updated successfully!"

PERMISSION_DENIED_TEMPLATE = "Error: Permission denied while {action}."
COULD_NOT_TEMPLATE = "Error: Could not {action}."

# intent -> (audit resource, permission-denied wording, generic failure wording)
STORE_INTENTS = {
    "add_transaction": ("transactions", "writing transactions", "add transaction"),
    "delete_transaction": ("transactions", "deleting transactions", "delete transaction"),
    "update_budgets": ("budgets", "updating budgets", "update budgets"),
    "add_custom_category": ("budgets", "adding custom categories to budgets", "add custom category"),
    "update_user_name": ("profile", "updating user profile", "update user name"),
}

# audit resource -> wording used in load failure messages
LOAD_RESOURCES = {
    "transactions": "transactions",
    "budgets": "budgets",
    "profile": "user profile",
}


class FinanceSession:
    """
    One user's session against the store.

    Flow:
    1. sign_in() → identity established, snapshots subscribed
    2. Intents → validated locally, then sent to the store
    3. The store refreshes its live values → session snapshots update
    4. snapshot() → AppState for the front end

    Every intent returns normally. Failures are reported through the
    status notifier and the audit log.
    """

    def __init__(
        self,
        identity_provider: IdentityProviderInterface,
        transaction_storage: TransactionStorageInterface,
        budget_storage: BudgetStorageInterface,
        profile_storage: ProfileStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        status_message_seconds: float = 3.0,
        dark_mode: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._identity_provider = identity_provider
        self._transaction_storage = transaction_storage
        self._budget_storage = budget_storage
        self._profile_storage = profile_storage
        self._audit_logger = audit_logger or AuditLogger()

        self._router = ViewRouter()
        self._notifier = StatusNotifier(status_message_seconds, clock=clock)
        self._dark_mode = dark_mode

        self._identity: Optional[str] = None
        self._subscriptions: list[Subscription] = []
        self._transactions: tuple[Transaction, ...] = ()
        self._budget_document = BudgetDocument()
        self._profile = Profile()

    # =========================================================================
    # READ-ONLY STATE
    # =========================================================================

    @property
    def identity(self) -> Optional[str]:
        return self._identity

    @property
    def router(self) -> ViewRouter:
        return self._router

    @property
    def notifier(self) -> StatusNotifier:
        return self._notifier

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    @property
    def budgets(self) -> dict[str, Decimal]:
        return dict(self._budget_document.budgets)

    @property
    def custom_categories(self) -> tuple[str, ...]:
        return tuple(self._budget_document.custom_categories)

    @property
    def user_name(self) -> str:
        return self._profile.name

    @property
    def registry(self) -> CategoryRegistry:
        return CategoryRegistry.from_document(self._budget_document)

    def summary(self, today: Optional[dt.date] = None) -> Summary:
        return summarize(self._transactions, today=today)

    def advice(self, today: Optional[dt.date] = None) -> list[str]:
        return generate_advice(self.summary(today), self._budget_document.budgets)

    def snapshot(self, today: Optional[dt.date] = None) -> AppState:
        """Everything the front end needs for one render."""
        summary = self.summary(today)
        return AppState(
            identity=self._identity,
            screen=self._router.current,
            dark_mode=self._dark_mode,
            transactions=tuple(sort_for_display(self._transactions)),
            budgets=self.budgets,
            custom_categories=self.custom_categories,
            user_name=self._profile.name,
            summary=summary,
            advice=tuple(generate_advice(summary, self._budget_document.budgets)),
            status=self._notifier.current(),
        )

    # =========================================================================
    # IDENTITY AND SUBSCRIPTIONS
    # =========================================================================

    async def sign_in(self) -> Optional[str]:
        """
        Establish an identity and subscribe to its snapshots.

        Signing in as a different identity releases the previous
        subscriptions first. Returns the identity, or None on failure.
        """
        try:
            identity = await self._identity_provider.sign_in()
        except IdentityError as e:
            logger.error("sign_in_failed", error=str(e))
            self._notifier.error(INITIALIZATION_FAILED_MESSAGE)
            return None

        if identity == self._identity:
            return identity

        self._release()
        self._identity = identity
        await self._audit_logger.log_identity_established(identity)
        await self._subscribe(identity)
        return identity

    async def sign_out(self) -> None:
        self._release()
        await self._identity_provider.sign_out()

    def close(self) -> None:
        """Release every subscription. The session can sign in again later."""
        self._release()

    async def _subscribe(self, identity: str) -> None:
        loaders = [
            ("transactions", self._transaction_storage.watch_transactions, self._on_transactions),
            ("budgets", self._budget_storage.watch_budget_document, self._on_budget_document),
            ("profile", self._profile_storage.watch_profile, self._on_profile),
        ]
        for resource, watch, listener in loaders:
            try:
                live = await watch(identity)
            except PermissionDeniedError as e:
                self._notifier.error(
                    PERMISSION_DENIED_TEMPLATE.format(action=f"loading {LOAD_RESOURCES[resource]}")
                )
                await self._audit_logger.log_snapshot_load_failed(identity, resource, str(e))
                continue
            except StorageError as e:
                self._notifier.error(COULD_NOT_TEMPLATE.format(action=f"load {LOAD_RESOURCES[resource]}"))
                await self._audit_logger.log_snapshot_load_failed(identity, resource, str(e))
                continue
            self._subscriptions.append(live.subscribe(listener, emit_current=True))

    def _release(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions = []

        if self._identity is not None:
            self._transaction_storage.forget_transactions(self._identity)
            self._budget_storage.forget_budget_document(self._identity)
            self._profile_storage.forget_profile(self._identity)

        self._identity = None
        self._transactions = ()
        self._budget_document = BudgetDocument()
        self._profile = Profile()

    def _on_transactions(self, transactions: tuple[Transaction, ...]) -> None:
        self._transactions = tuple(transactions)

    def _on_budget_document(self, document: BudgetDocument) -> None:
        self._budget_document = document

    def _on_profile(self, profile: Profile) -> None:
        self._profile = profile

    # =========================================================================
    # INTENT HELPERS
    # =========================================================================

    def _require_identity(self) -> str:
        """
        Raises:
            NotAuthenticatedError: no identity has been established yet
        """
        if self._identity is None:
            raise NotAuthenticatedError(NOT_AUTHENTICATED_MESSAGE)
        return self._identity

    async def _reject_unauthenticated(self, intent: str, error: NotAuthenticatedError) -> None:
        self._notifier.error(str(error))
        await self._audit_logger.log_unauthenticated(intent)

    async def _reject_input(self, intent: str, error: ValidationError, correlation_id) -> None:
        self._notifier.error(str(error))
        await self._audit_logger.log_validation_failed(
            identity=self._identity,
            intent=intent,
            field=error.field,
            message=str(error),
            correlation_id=correlation_id,
        )

    async def _report_store_error(self, intent: str, error: Exception, correlation_id) -> None:
        resource, denied_action, failed_action = STORE_INTENTS[intent]
        if isinstance(error, PermissionDeniedError):
            self._notifier.error(PERMISSION_DENIED_TEMPLATE.format(action=denied_action))
            await self._audit_logger.log_permission_denied(
                identity=self._identity,
                resource=resource,
                intent=intent,
                error_message=str(error),
                correlation_id=correlation_id,
            )
        else:
            self._notifier.error(COULD_NOT_TEMPLATE.format(action=failed_action))
            await self._audit_logger.log_storage_error(
                identity=self._identity,
                resource=resource,
                intent=intent,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    # =========================================================================
    # INTENTS
    # =========================================================================

    async def add_transaction(
        self,
        transaction_type: Any,
        category: Any,
        amount: Any,
        date: Any,
        description: Optional[str] = None,
    ) -> Optional[str]:
        """
        Validate and store a new transaction.

        Returns:
            The new transaction id, or None if nothing was stored
        """
        try:
            identity = self._require_identity()
        except NotAuthenticatedError as e:
            await self._reject_unauthenticated("add_transaction", e)
            return None
        correlation_id = create_correlation_id()

        try:
            record = TransactionValidator(self.registry).validate(
                transaction_type, category, amount, date, description
            )
        except ValidationError as e:
            await self._reject_input("add_transaction", e, correlation_id)
            return None

        try:
            transaction_id = await self._transaction_storage.create_transaction(identity, record)
        except Exception as e:
            await self._report_store_error("add_transaction", e, correlation_id)
            return None

        await self._audit_logger.log_transaction_added(
            identity=identity,
            transaction_id=transaction_id,
            transaction_type=record.type.value,
            category=record.category,
            amount=str(record.amount),
            correlation_id=correlation_id,
        )
        self._notifier.success(TRANSACTION_ADDED_MESSAGE)
        self._router.complete()
        return transaction_id

    async def delete_transaction(self, transaction_id: str) -> bool:
        """
        Delete a transaction by id. Does not navigate.

        Deleting an id that no longer exists counts as success.
        """
        try:
            identity = self._require_identity()
        except NotAuthenticatedError as e:
            await self._reject_unauthenticated("delete_transaction", e)
            return False
        correlation_id = create_correlation_id()

        try:
            existed = await self._transaction_storage.delete_transaction(identity, transaction_id)
        except Exception as e:
            await self._report_store_error("delete_transaction", e, correlation_id)
            return False

        if not existed:
            logger.warning("transaction_already_gone", transaction_id=transaction_id)
        await self._audit_logger.log_transaction_deleted(
            identity=identity,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        self._notifier.success(TRANSACTION_DELETED_MESSAGE)
        return True

    async def update_budgets(self, raw_budgets: Mapping[str, Any]) -> bool:
        """
        Replace the budget limits with the positive numeric entries of raw_budgets.

        Custom categories in the document are left as they are.
        """
        try:
            identity = self._require_identity()
        except NotAuthenticatedError as e:
            await self._reject_unauthenticated("update_budgets", e)
            return False
        correlation_id = create_correlation_id()

        budgets = filter_budgets(raw_budgets, self.registry.expense)
        try:
            await self._budget_storage.upsert_budget_document(identity, budgets=budgets, merge=True)
        except Exception as e:
            await self._report_store_error("update_budgets", e, correlation_id)
            return False

        await self._audit_logger.log_budgets_updated(
            identity=identity,
            budgets={category: str(limit) for category, limit in budgets.items()},
            correlation_id=correlation_id,
        )
        self._notifier.success(BUDGETS_UPDATED_MESSAGE)
        self._router.complete()
        return True

    async def add_custom_category(self, name: str) -> bool:
        """Append an expense category. Does not navigate."""
        try:
            identity = self._require_identity()
        except NotAuthenticatedError as e:
            await self._reject_unauthenticated("add_custom_category", e)
            return False
        correlation_id = create_correlation_id()

        try:
            updated = try_add_custom_category(name, self._budget_document.custom_categories)
        except ValidationError as e:
            await self._reject_input("add_custom_category", e, correlation_id)
            return False

        try:
            await self._budget_storage.upsert_budget_document(
                identity, custom_categories=updated, merge=True
            )
        except Exception as e:
            await self._report_store_error("add_custom_category", e, correlation_id)
            return False

        added = updated[-1]
        await self._audit_logger.log_custom_category_added(
            identity=identity,
            category=added,
            correlation_id=correlation_id,
        )
        self._notifier.success(CATEGORY_ADDED_TEMPLATE.format(name=added))
        return True

    async def update_user_name(self, name: str) -> bool:
        try:
            identity = self._require_identity()
        except NotAuthenticatedError as e:
            await self._reject_unauthenticated("update_user_name", e)
            return False
        correlation_id = create_correlation_id()

        try:
            cleaned = parse_user_name(name)
        except ValidationError as e:
            await self._reject_input("update_user_name", e, correlation_id)
            return False

        try:
            await self._profile_storage.upsert_profile(identity, cleaned, merge=True)
        except Exception as e:
            await self._report_store_error("update_user_name", e, correlation_id)
            return False

        await self._audit_logger.log_profile_updated(identity=identity, correlation_id=correlation_id)
        self._notifier.success(USER_NAME_UPDATED_MESSAGE)
        self._router.complete()
        return True

    # =========================================================================
    # NAVIGATION AND DISPLAY
    # =========================================================================

    def navigate(self, screen: Screen) -> Screen:
        return self._router.navigate(screen)

    def cancel(self) -> Screen:
        return self._router.cancel()

    def toggle_dark_mode(self) -> bool:
        self._dark_mode = not self._dark_mode
        return self._dark_mode


def create_app_components(settings: Optional[Settings] = None) -> FinanceSession:
    """
    Factory function to create a session wired to the configured backend.

    Args:
        settings: Settings to use. Defaults to get_settings().

    Returns:
        A FinanceSession that has not signed in yet
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(app_settings.log_level)

    if app_settings.storage_backend == StorageBackend.GOOGLE_SHEETS:
        sheets_client = GoogleSheetsClient()
        transaction_storage = GoogleSheetsTransactionStorage(sheets_client)
        budget_storage = GoogleSheetsBudgetStorage(sheets_client)
        profile_storage = GoogleSheetsProfileStorage(sheets_client)
        audit_storage = GoogleSheetsAuditStorage(sheets_client)
    else:
        transaction_storage = InMemoryTransactionStorage()
        budget_storage = InMemoryBudgetStorage()
        profile_storage = InMemoryProfileStorage()
        audit_storage = InMemoryAuditStorage()

    logger.info("app_components_created", storage_backend=app_settings.storage_backend.value)

    return FinanceSession(
        identity_provider=AnonymousIdentityProvider(),
        transaction_storage=transaction_storage,
        budget_storage=budget_storage,
        profile_storage=profile_storage,
        audit_logger=AuditLogger(audit_storage),
        status_message_seconds=app_settings.status_message_seconds,
        dark_mode=app_settings.dark_mode,
    )
