"""Tests for the audit logger."""

import asyncio

from finance_advisor.audit import AuditLogger, create_correlation_id
from finance_advisor.models import AuditEvent, AuditEventType, AuditSeverity
from finance_advisor.services.storage import AuditStorageInterface, InMemoryAuditStorage


class BrokenAuditStorage(AuditStorageInterface):
    async def append_event(self, event: AuditEvent) -> bool:
        raise RuntimeError("sheet unavailable")

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return []


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_local_only(self):
        event = AuditEvent(event_type=AuditEventType.PROFILE_UPDATED, description="x")
        assert asyncio.run(AuditLogger().log(event)) is True

    def test_persists_to_storage(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)
        correlation_id = create_correlation_id()

        asyncio.run(
            logger.log_transaction_added(
                identity="u1",
                transaction_id="t1",
                transaction_type="expense",
                category="Rent",
                amount="800.00",
                correlation_id=correlation_id,
            )
        )

        [event] = storage.events
        assert event.event_type == AuditEventType.TRANSACTION_ADDED
        assert event.correlation_id == correlation_id

    def test_storage_failure_is_not_raised(self):
        """A broken audit sheet never fails the caller."""
        event = AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            description="x",
        )
        assert asyncio.run(AuditLogger(BrokenAuditStorage()).log(event)) is False

    def test_helpers_record_expected_types(self):
        storage = InMemoryAuditStorage()
        logger = AuditLogger(storage)

        async def scenario():
            await logger.log_identity_established("u1")
            await logger.log_validation_failed("u1", "add_transaction", "amount", "bad")
            await logger.log_unauthenticated("delete_transaction")
            await logger.log_permission_denied("u1", "budgets", "update_budgets", "no")
            await logger.log_storage_error("u1", "profile", "update_user_name", "down")
            await logger.log_snapshot_load_failed("u1", "transactions", "down")

        asyncio.run(scenario())
        assert [e.event_type for e in storage.events] == [
            AuditEventType.IDENTITY_ESTABLISHED,
            AuditEventType.VALIDATION_FAILED,
            AuditEventType.UNAUTHENTICATED_REJECTED,
            AuditEventType.PERMISSION_DENIED,
            AuditEventType.STORAGE_ERROR,
            AuditEventType.SNAPSHOT_LOAD_FAILED,
        ]
