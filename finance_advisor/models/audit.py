"""
Audit Models for Personal Finance Advisor

Every intent the user issues is logged with its outcome.
This provides:
1. Traceability of every add, delete and update
2. Debugging information when the store rejects a call
3. A record of validation failures that never reached the store

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Session
    IDENTITY_ESTABLISHED = "identity_established"
    SNAPSHOT_LOAD_FAILED = "snapshot_load_failed"

    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Budgets and categories
    BUDGETS_UPDATED = "budgets_updated"
    CUSTOM_CATEGORY_ADDED = "custom_category_added"

    # Profile
    PROFILE_UPDATED = "profile_updated"

    # Rejections and failures
    VALIDATION_FAILED = "validation_failed"
    UNAUTHENTICATED_REJECTED = "unauthenticated_rejected"
    PERMISSION_DENIED = "permission_denied"
    STORAGE_ERROR = "storage_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Who and what
    identity: Optional[str] = Field(
        default=None,
        description="Identity the event happened under, if any"
    )
    resource: Optional[str] = Field(
        default=None,
        description="Affected resource: transactions, budgets or profile"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the record this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "identity": self.identity,
            "resource": self.resource,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, identity, resource,
         entity_id, correlation_id, description, details_json,
         error_message, is_user_action]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.identity or "",
            self.resource or "",
            self.entity_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
            str(self.is_user_action),
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(identity, transaction_id, ...)
        event = AuditEventBuilder.permission_denied(identity, "budgets", ...)
    """

    @staticmethod
    def identity_established(identity: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IDENTITY_ESTABLISHED,
            identity=identity,
            description="Signed in anonymously",
        )

    @staticmethod
    def transaction_added(
        identity: str,
        transaction_id: str,
        transaction_type: str,
        category: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            identity=identity,
            resource="transactions",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Transaction added: {transaction_type} {category} {amount}",
            details={
                "type": transaction_type,
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        identity: str,
        transaction_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            identity=identity,
            resource="transactions",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description="Transaction deleted",
            is_user_action=True,
        )

    @staticmethod
    def budgets_updated(
        identity: str,
        budgets: dict[str, str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGETS_UPDATED,
            identity=identity,
            resource="budgets",
            correlation_id=correlation_id,
            description=f"Budgets updated for {len(budgets)} categories",
            details={"budgets": budgets},
            is_user_action=True,
        )

    @staticmethod
    def custom_category_added(
        identity: str,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CUSTOM_CATEGORY_ADDED,
            identity=identity,
            resource="budgets",
            correlation_id=correlation_id,
            description=f"Custom category added: {category}",
            details={"category": category},
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(
        identity: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            identity=identity,
            resource="profile",
            correlation_id=correlation_id,
            description="Profile name updated",
            is_user_action=True,
        )

    @staticmethod
    def validation_failed(
        identity: Optional[str],
        intent: str,
        field: str,
        message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            identity=identity,
            correlation_id=correlation_id,
            description=f"Input rejected for {intent}",
            details={
                "intent": intent,
                "field": field,
            },
            error_message=message,
            is_user_action=True,
        )

    @staticmethod
    def unauthenticated_rejected(intent: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.UNAUTHENTICATED_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Rejected {intent}: no identity established",
            details={"intent": intent},
        )

    @staticmethod
    def permission_denied(
        identity: Optional[str],
        resource: str,
        intent: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERMISSION_DENIED,
            severity=AuditSeverity.ERROR,
            identity=identity,
            resource=resource,
            correlation_id=correlation_id,
            description=f"Permission denied for {intent} on {resource}",
            details={"intent": intent},
            error_message=error_message,
        )

    @staticmethod
    def storage_error(
        identity: Optional[str],
        resource: str,
        intent: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_ERROR,
            severity=AuditSeverity.ERROR,
            identity=identity,
            resource=resource,
            correlation_id=correlation_id,
            description=f"Storage error during {intent} on {resource}",
            details={"intent": intent},
            error_message=error_message,
        )

    @staticmethod
    def snapshot_load_failed(
        identity: str,
        resource: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SNAPSHOT_LOAD_FAILED,
            severity=AuditSeverity.ERROR,
            identity=identity,
            resource=resource,
            description=f"Could not load {resource}",
            error_message=error_message,
        )
