"""Status-gated workflow actions per document type.

Each entity has a fixed table of which actions are offered in which
status. `ActionRunner` executes an allowed action against the API and
reports the outcome as an `ActionResult` instead of raising, so callers
can show the message and keep their current state on failure.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog

from qayd.calculations import safe_parse_float
from qayd.errors import ActionNotAvailableError, QaydAPIError, QaydError

if TYPE_CHECKING:
    from qayd.api.client import QaydAPIClient

logger = structlog.get_logger(__name__)


class Entity(str, Enum):
    JOURNAL = "journal"
    INVOICE = "invoice"
    PAYMENT = "payment"
    QUOTATION = "quotation"
    PURCHASE_ORDER = "purchase_order"
    EXPENSE = "expense"
    FIXED_ASSET = "fixed_asset"
    RECONCILIATION = "reconciliation"
    VAT_RETURN = "vat_return"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class Action(str, Enum):
    VIEW = "view"
    EDIT = "edit"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    POST = "post"
    CANCEL = "cancel"
    SEND = "send"
    ACCEPT = "accept"
    REJECT = "reject"
    CONVERT_TO_INVOICE = "convert_to_invoice"
    MARK_RECEIVED = "mark_received"
    CONVERT_TO_BILL = "convert_to_bill"
    CLOSE = "close"
    MARK_PAID = "mark_paid"
    DISPOSE = "dispose"
    SELL = "sell"
    COMPLETE = "complete"
    FILE = "file"
    EXPORT_PDF = "export_pdf"
    EXPORT_EXCEL = "export_excel"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


PAST_TENSE = {
    Action.EDIT: "updated",
    Action.DELETE: "deleted",
    Action.SUBMIT: "submitted",
    Action.APPROVE: "approved",
    Action.POST: "posted",
    Action.CANCEL: "cancelled",
    Action.SEND: "sent",
    Action.ACCEPT: "accepted",
    Action.REJECT: "rejected",
    Action.CONVERT_TO_INVOICE: "converted to invoice",
    Action.MARK_RECEIVED: "marked as received",
    Action.CONVERT_TO_BILL: "converted to bill",
    Action.CLOSE: "closed",
    Action.MARK_PAID: "marked as paid",
    Action.DISPOSE: "disposed",
    Action.SELL: "sold",
    Action.COMPLETE: "completed",
    Action.FILE: "filed",
    Action.EXPORT_PDF: "exported",
    Action.EXPORT_EXCEL: "exported",
}


@dataclass(frozen=True)
class ActionPolicy:
    """Which actions an entity offers, always and per status."""

    always: tuple[Action, ...]
    by_status: Mapping[str, tuple[Action, ...]]
    editable_status: str
    plural: str


_DRAFT_WORKFLOW = {
    "draft": (Action.EDIT, Action.DELETE, Action.SUBMIT),
    "submitted": (Action.APPROVE,),
    "approved": (Action.POST,),
}

STATUS_ACTIONS: dict[Entity, ActionPolicy] = {
    Entity.JOURNAL: ActionPolicy(
        always=(Action.VIEW,),
        by_status=_DRAFT_WORKFLOW,
        editable_status="draft",
        plural="journals",
    ),
    Entity.INVOICE: ActionPolicy(
        always=(Action.VIEW,),
        by_status=_DRAFT_WORKFLOW,
        editable_status="draft",
        plural="invoices",
    ),
    Entity.PAYMENT: ActionPolicy(
        always=(Action.VIEW,),
        by_status={**_DRAFT_WORKFLOW, "posted": (Action.CANCEL,)},
        editable_status="draft",
        plural="payments",
    ),
    Entity.QUOTATION: ActionPolicy(
        always=(Action.EXPORT_PDF,),
        by_status={
            "draft": (Action.EDIT, Action.DELETE, Action.SEND),
            "sent": (Action.ACCEPT, Action.REJECT),
            "accepted": (Action.CONVERT_TO_INVOICE,),
        },
        editable_status="draft",
        plural="quotations",
    ),
    Entity.PURCHASE_ORDER: ActionPolicy(
        always=(Action.EXPORT_PDF,),
        by_status={
            "draft": (Action.EDIT, Action.DELETE, Action.SEND),
            "sent": (Action.MARK_RECEIVED,),
            "accepted": (Action.CLOSE,),
            "received": (Action.CONVERT_TO_BILL, Action.CLOSE),
        },
        editable_status="draft",
        plural="purchase orders",
    ),
    Entity.EXPENSE: ActionPolicy(
        always=(Action.VIEW,),
        by_status={
            "pending": (Action.EDIT, Action.APPROVE, Action.REJECT, Action.DELETE),
            "approved": (Action.MARK_PAID,),
        },
        editable_status="pending",
        plural="expenses",
    ),
    Entity.FIXED_ASSET: ActionPolicy(
        always=(Action.VIEW,),
        by_status={"active": (Action.EDIT, Action.DISPOSE, Action.SELL)},
        editable_status="active",
        plural="assets",
    ),
    Entity.RECONCILIATION: ActionPolicy(
        always=(Action.VIEW, Action.EXPORT_PDF, Action.EXPORT_EXCEL),
        by_status={
            "draft": (Action.DELETE,),
            "in_progress": (Action.COMPLETE,),
        },
        editable_status="draft",
        plural="reconciliations",
    ),
    Entity.VAT_RETURN: ActionPolicy(
        always=(Action.VIEW, Action.EXPORT_PDF, Action.EXPORT_EXCEL),
        by_status={
            "draft": (Action.DELETE,),
            "calculated": (Action.FILE,),
            "filed": (Action.MARK_PAID,),
        },
        editable_status="draft",
        plural="VAT returns",
    ),
}

# Offered in the UI but without a backend endpoint yet
UNSUPPORTED_ACTIONS = frozenset(
    {
        (Entity.PURCHASE_ORDER, Action.SEND),
        (Entity.PURCHASE_ORDER, Action.MARK_RECEIVED),
        (Entity.PURCHASE_ORDER, Action.CLOSE),
        (Entity.EXPENSE, Action.MARK_PAID),
    }
)

REQUIRED_ARGUMENTS: dict[tuple[Entity, Action], tuple[str, ...]] = {
    (Entity.PAYMENT, Action.CANCEL): ("reason",),
    (Entity.EXPENSE, Action.REJECT): ("reason",),
    (Entity.FIXED_ASSET, Action.DISPOSE): ("disposal_date",),
    (Entity.FIXED_ASSET, Action.SELL): ("disposal_date", "disposal_amount"),
}

RecordOrStatus = Mapping[str, Any] | str | None


def _status_of(record: RecordOrStatus) -> str | None:
    if record is None or isinstance(record, str):
        return record
    status = record.get("status")
    return str(status.value if isinstance(status, Enum) else status) if status else None


def _guard(entity: Entity, action: Action, record: RecordOrStatus) -> bool:
    """Record-level conditions beyond the status table."""
    if entity is Entity.QUOTATION and action is Action.CONVERT_TO_INVOICE:
        return not (isinstance(record, Mapping) and record.get("converted_to_invoice"))
    return True


def available_actions(entity: Entity | str, record: RecordOrStatus) -> list[Action]:
    """Actions offered for a record (or bare status), always-actions first."""
    entity = Entity(entity)
    policy = STATUS_ACTIONS[entity]
    status = _status_of(record)

    actions: list[Action] = []
    for action in (*policy.always, *policy.by_status.get(status or "", ())):
        if action not in actions and _guard(entity, action, record):
            actions.append(action)
    return actions


def is_action_allowed(entity: Entity | str, record: RecordOrStatus, action: Action | str) -> bool:
    return Action(action) in available_actions(entity, record)


def is_action_supported(entity: Entity | str, action: Action | str) -> bool:
    return (Entity(entity), Action(action)) not in UNSUPPORTED_ACTIONS


def require_action(entity: Entity | str, record: RecordOrStatus, action: Action | str) -> None:
    """Raise ActionNotAvailableError unless the action is offered."""
    entity = Entity(entity)
    action = Action(action)
    if is_action_allowed(entity, record, action):
        return

    policy = STATUS_ACTIONS[entity]
    status = _status_of(record)
    if action in (Action.EDIT, Action.DELETE):
        message = f"Can only {action.label} {policy.editable_status} {policy.plural}"
    elif entity is Entity.QUOTATION and action is Action.CONVERT_TO_INVOICE and status == "accepted":
        message = "Quotation has already been converted to an invoice"
    else:
        message = f"Cannot {action.label} a {status or 'new'} {entity.label}"
    raise ActionNotAvailableError(entity.value, action.value, status, message)


@dataclass
class ActionResult:
    success: bool
    message: str
    entity: Entity
    action: Action
    record: Any = None
    status_code: int | None = None
    details: Any = None
    supported: bool = True
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "entity": self.entity.value,
            "action": self.action.value,
            "record": self.record,
            "status_code": self.status_code,
            "details": self.details,
            "supported": self.supported,
        }


Handler = Callable[..., Awaitable[Any]]


class ActionRunner:
    """Executes workflow actions against the Qayd API."""

    RESOURCES = {
        Entity.JOURNAL: "journals",
        Entity.INVOICE: "invoices",
        Entity.PAYMENT: "payments",
        Entity.QUOTATION: "quotations",
        Entity.PURCHASE_ORDER: "purchase_orders",
        Entity.EXPENSE: "expenses",
        Entity.FIXED_ASSET: "assets",
        Entity.RECONCILIATION: "reconciliations",
        Entity.VAT_RETURN: "vat_returns",
    }

    def __init__(self, client: QaydAPIClient):
        self.client = client
        self._handlers: dict[tuple[Entity, Action], Handler] = {
            # Journals
            (Entity.JOURNAL, Action.SUBMIT): partial(self._invoke, "journals", "submit"),
            (Entity.JOURNAL, Action.APPROVE): partial(self._invoke, "journals", "approve"),
            (Entity.JOURNAL, Action.POST): partial(self._invoke, "journals", "post"),
            # Invoices
            (Entity.INVOICE, Action.SUBMIT): partial(self._invoke, "invoices", "submit"),
            (Entity.INVOICE, Action.APPROVE): partial(self._invoke, "invoices", "approve"),
            (Entity.INVOICE, Action.POST): partial(self._invoke, "invoices", "post"),
            # Payments
            (Entity.PAYMENT, Action.SUBMIT): partial(self._invoke, "payments", "submit"),
            (Entity.PAYMENT, Action.APPROVE): partial(self._invoke, "payments", "approve"),
            (Entity.PAYMENT, Action.POST): partial(self._invoke, "payments", "post"),
            (Entity.PAYMENT, Action.CANCEL): self._cancel_payment,
            # Quotations
            (Entity.QUOTATION, Action.SEND): partial(self._invoke, "quotations", "send"),
            (Entity.QUOTATION, Action.ACCEPT): partial(self._invoke, "quotations", "accept"),
            (Entity.QUOTATION, Action.REJECT): partial(self._invoke, "quotations", "reject"),
            (Entity.QUOTATION, Action.CONVERT_TO_INVOICE): partial(
                self._invoke, "quotations", "convert_to_invoice"
            ),
            # Purchase orders
            (Entity.PURCHASE_ORDER, Action.CONVERT_TO_BILL): partial(
                self._invoke, "purchase_orders", "convert_to_bill"
            ),
            # Expenses
            (Entity.EXPENSE, Action.APPROVE): partial(self._invoke, "expenses", "approve"),
            (Entity.EXPENSE, Action.REJECT): self._reject_expense,
            # Fixed assets
            (Entity.FIXED_ASSET, Action.DISPOSE): partial(self._dispose_asset, "dispose"),
            (Entity.FIXED_ASSET, Action.SELL): partial(self._dispose_asset, "sell"),
            # Reconciliations
            (Entity.RECONCILIATION, Action.COMPLETE): partial(
                self._invoke, "reconciliations", "complete"
            ),
            (Entity.RECONCILIATION, Action.EXPORT_EXCEL): partial(
                self._invoke, "reconciliations", "export_excel"
            ),
            # VAT returns
            (Entity.VAT_RETURN, Action.FILE): self._file_vat_return,
            (Entity.VAT_RETURN, Action.MARK_PAID): self._pay_vat_return,
            (Entity.VAT_RETURN, Action.EXPORT_EXCEL): partial(
                self._invoke, "vat_returns", "export_excel"
            ),
        }

    def _handler_for(self, entity: Entity, action: Action) -> Handler:
        handler = self._handlers.get((entity, action))
        if handler is not None:
            return handler
        # Generic actions shared by every resource
        resource = self.RESOURCES[entity]
        if action is Action.VIEW:
            return partial(self._invoke, resource, "get")
        if action is Action.EDIT:
            return partial(self._edit, resource)
        if action is Action.DELETE:
            return partial(self._invoke, resource, "delete")
        if action is Action.EXPORT_PDF:
            return partial(self._invoke, resource, "export_pdf")
        raise ActionNotAvailableError(
            entity.value, action.value, None, f"No handler for {entity.label} {action.label}"
        )

    async def run(
        self,
        entity: Entity | str,
        record: Mapping[str, Any],
        action: Action | str,
        **kwargs: Any,
    ) -> ActionResult:
        """Run an action for a record and report the outcome."""
        entity = Entity(entity)
        action = Action(action)
        record_id = record.get("id")

        def failure(message: str, **extra: Any) -> ActionResult:
            return ActionResult(False, message, entity, action, **extra)

        try:
            require_action(entity, record, action)
        except ActionNotAvailableError as e:
            return failure(str(e))

        if not is_action_supported(entity, action):
            logger.info("action_not_supported", entity=entity.value, action=action.value)
            return failure("Status update not yet implemented", supported=False)

        if not record_id:
            return failure(f"{entity.label.capitalize()} has no id")

        required = REQUIRED_ARGUMENTS.get((entity, action), ())
        missing = [name for name in required if kwargs.get(name) in (None, "")]
        if action is Action.EDIT and not kwargs.get("data"):
            missing.append("data")
        if missing:
            return failure(f"Missing required argument: {', '.join(missing)}")
        if action is Action.EDIT and not isinstance(kwargs["data"], Mapping):
            return failure("Invalid argument: data must be an object")
        amount = kwargs.get("disposal_amount")
        if amount not in (None, "") and math.isnan(safe_parse_float(amount, math.nan)):
            return failure("Invalid argument: disposal_amount must be a number")

        handler = self._handler_for(entity, action)
        logger.info("running_action", entity=entity.value, action=action.value, id=record_id)

        try:
            result = await handler(str(record_id), **kwargs)
        except QaydAPIError as e:
            logger.warning(
                "action_failed",
                entity=entity.value,
                action=action.value,
                status=e.status_code,
                details=e.details,
            )
            return failure(str(e), status_code=e.status_code, details=e.details)
        except QaydError as e:
            logger.warning(
                "action_rejected", entity=entity.value, action=action.value, error=str(e)
            )
            return failure(str(e), errors=list(getattr(e, "errors", [])))

        logger.info("action_completed", entity=entity.value, action=action.value, id=record_id)
        message = (
            f"{entity.label.capitalize()} loaded"
            if action is Action.VIEW
            else f"{entity.label.capitalize()} {PAST_TENSE[action]}"
        )
        return ActionResult(True, message, entity, action, record=result)

    # === Handlers ===

    async def _invoke(self, resource: str, method: str, record_id: str, **_: Any) -> Any:
        return await getattr(getattr(self.client, resource), method)(record_id)

    async def _edit(self, resource: str, record_id: str, data: Mapping[str, Any], **_: Any) -> Any:
        return await getattr(self.client, resource).update(record_id, dict(data))

    async def _cancel_payment(self, record_id: str, reason: str, **_: Any) -> Any:
        return await self.client.payments.cancel(record_id, reason)

    async def _reject_expense(self, record_id: str, reason: str, **_: Any) -> Any:
        return await self.client.expenses.reject(record_id, reason)

    async def _dispose_asset(
        self,
        disposal_type: str,
        record_id: str,
        disposal_date: Any,
        disposal_amount: Any = 0.0,
        **_: Any,
    ) -> Any:
        return await self.client.assets.dispose(
            record_id, disposal_date, safe_parse_float(disposal_amount), disposal_type  # type: ignore[arg-type]
        )

    async def _file_vat_return(self, record_id: str, filing_date: Any = None, **_: Any) -> Any:
        return await self.client.vat_returns.file(record_id, filing_date)

    async def _pay_vat_return(
        self,
        record_id: str,
        payment_date: Any = None,
        payment_reference: str | None = None,
        **_: Any,
    ) -> Any:
        return await self.client.vat_returns.record_payment(
            record_id, payment_date, payment_reference
        )
