"""
Audit Logger

DESIGN DECISION: Every intent outcome is logged, successful or not.
This provides:
1. Traceability of what changed in the store and when
2. Debugging capability for rejected input and store failures
3. A history the user can inspect in the AuditLog sheet

The audit logger:
- Is async so it sits naturally in the intent handlers
- Gracefully handles failures (a broken audit sheet never fails an intent)
- Supports correlation IDs to tie an intent to its follow-up events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from finance_advisor.models.audit import AuditEvent, AuditEventBuilder
from finance_advisor.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_level: str = "INFO") -> None:
    """Route stdlib logging (and therefore structlog) to stderr at log_level."""
    logging.basicConfig(format="%(message)s", level=log_level.upper())


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage, when one is configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger()

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value == "error":
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_identity_established(self, identity: str) -> None:
        await self.log(AuditEventBuilder.identity_established(identity))

    async def log_snapshot_load_failed(
        self,
        identity: str,
        resource: str,
        error_message: str,
    ) -> None:
        event = AuditEventBuilder.snapshot_load_failed(
            identity=identity,
            resource=resource,
            error_message=error_message,
        )
        await self.log(event)

    async def log_transaction_added(
        self,
        identity: str,
        transaction_id: str,
        transaction_type: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a stored transaction."""
        event = AuditEventBuilder.transaction_added(
            identity=identity,
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_deleted(
        self,
        identity: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.transaction_deleted(
            identity=identity,
            transaction_id=transaction_id,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_budgets_updated(
        self,
        identity: str,
        budgets: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.budgets_updated(
            identity=identity,
            budgets=budgets,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_custom_category_added(
        self,
        identity: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.custom_category_added(
            identity=identity,
            category=category,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_profile_updated(
        self,
        identity: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        event = AuditEventBuilder.profile_updated(
            identity=identity,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        identity: Optional[str],
        intent: str,
        field: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log input rejected before reaching the store."""
        event = AuditEventBuilder.validation_failed(
            identity=identity,
            intent=intent,
            field=field,
            message=message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_unauthenticated(self, intent: str) -> None:
        await self.log(AuditEventBuilder.unauthenticated_rejected(intent))

    async def log_permission_denied(
        self,
        identity: Optional[str],
        resource: str,
        intent: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a store refusal."""
        event = AuditEventBuilder.permission_denied(
            identity=identity,
            resource=resource,
            intent=intent,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_storage_error(
        self,
        identity: Optional[str],
        resource: str,
        intent: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log any other store failure."""
        event = AuditEventBuilder.storage_error(
            identity=identity,
            resource=resource,
            intent=intent,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of an intent and pass it to every
    audit call the intent makes.
    """
    return uuid4()
