"""Tests for status-gated workflow actions."""

import json

import httpx
import pytest

from qayd.errors import ActionNotAvailableError
from qayd.models import (
    AssetStatus,
    ExpenseStatus,
    InvoiceStatus,
    JournalStatus,
    PaymentStatus,
    PurchaseOrderStatus,
    QuotationStatus,
    ReconciliationStatus,
    VatReturnStatus,
)
from qayd.workflow import (
    STATUS_ACTIONS,
    Action,
    ActionRunner,
    Entity,
    available_actions,
    is_action_allowed,
    is_action_supported,
    require_action,
)


class TestAvailableActions:
    """Tests for the per-status action tables."""

    @pytest.mark.parametrize(
        "status,expected",
        [
            ("draft", [Action.VIEW, Action.EDIT, Action.DELETE, Action.SUBMIT]),
            ("submitted", [Action.VIEW, Action.APPROVE]),
            ("approved", [Action.VIEW, Action.POST]),
            ("posted", [Action.VIEW]),
            (None, [Action.VIEW]),
        ],
    )
    def test_journal_actions(self, status, expected):
        """Test the journal draft/submit/approve/post chain."""
        assert available_actions(Entity.JOURNAL, {"status": status}) == expected

    def test_posted_payment_can_be_cancelled(self):
        """Test payments add cancel once posted."""
        assert available_actions("payment", "posted") == [Action.VIEW, Action.CANCEL]

    def test_quotation_actions(self):
        """Test quotations always offer PDF export."""
        assert available_actions(Entity.QUOTATION, "sent") == [
            Action.EXPORT_PDF,
            Action.ACCEPT,
            Action.REJECT,
        ]

    def test_converted_quotation_hides_conversion(self):
        """Test an already converted quotation cannot convert again."""
        record = {"status": "accepted", "converted_to_invoice": True}

        assert Action.CONVERT_TO_INVOICE not in available_actions(Entity.QUOTATION, record)
        assert Action.CONVERT_TO_INVOICE in available_actions(
            Entity.QUOTATION, {"status": "accepted"}
        )

    def test_received_purchase_order(self):
        """Test received orders convert to bills or close."""
        assert available_actions(Entity.PURCHASE_ORDER, "received") == [
            Action.EXPORT_PDF,
            Action.CONVERT_TO_BILL,
            Action.CLOSE,
        ]

    def test_expense_and_asset_actions(self):
        """Test pending expenses and active assets."""
        assert available_actions(Entity.EXPENSE, "pending") == [
            Action.VIEW,
            Action.EDIT,
            Action.APPROVE,
            Action.REJECT,
            Action.DELETE,
        ]
        assert available_actions(Entity.FIXED_ASSET, "disposed") == [Action.VIEW]
        assert Action.SELL in available_actions(Entity.FIXED_ASSET, "active")

    def test_reconciliation_actions(self):
        """Test reconciliations always export."""
        assert available_actions(Entity.RECONCILIATION, "in_progress") == [
            Action.VIEW,
            Action.EXPORT_PDF,
            Action.EXPORT_EXCEL,
            Action.COMPLETE,
        ]

    def test_vat_return_cycle(self):
        """Test a VAT return is filed once calculated and paid once filed."""
        always = [Action.VIEW, Action.EXPORT_PDF, Action.EXPORT_EXCEL]

        assert available_actions(Entity.VAT_RETURN, "draft") == [*always, Action.DELETE]
        assert available_actions(Entity.VAT_RETURN, "calculated") == [*always, Action.FILE]
        assert available_actions(Entity.VAT_RETURN, "filed") == [*always, Action.MARK_PAID]
        assert available_actions(Entity.VAT_RETURN, "paid") == always
        assert not is_action_allowed(Entity.VAT_RETURN, "draft", Action.FILE)
        assert is_action_supported(Entity.VAT_RETURN, Action.MARK_PAID)

    def test_enum_status_is_accepted(self):
        """Test records holding status enums."""
        assert is_action_allowed("invoice", {"status": InvoiceStatus.SUBMITTED}, "approve")

    def test_every_entity_has_a_policy(self):
        """Test the table covers every entity."""
        assert set(STATUS_ACTIONS) == set(Entity)

    def test_placeholder_actions_are_unsupported(self):
        """Test actions without endpoints are flagged."""
        assert not is_action_supported(Entity.PURCHASE_ORDER, Action.SEND)
        assert not is_action_supported(Entity.EXPENSE, Action.MARK_PAID)
        assert is_action_supported(Entity.QUOTATION, Action.SEND)


class TestRequireAction:
    """Tests for action refusal messages."""

    def test_edit_non_draft(self):
        """Test editing a posted journal."""
        with pytest.raises(ActionNotAvailableError, match="Can only edit draft journals"):
            require_action(Entity.JOURNAL, "posted", Action.EDIT)

    def test_delete_approved_expense(self):
        """Test expenses are only deletable while pending."""
        with pytest.raises(ActionNotAvailableError, match="Can only delete pending expenses"):
            require_action(Entity.EXPENSE, "approved", Action.DELETE)

    def test_wrong_status(self):
        """Test approving a draft invoice."""
        with pytest.raises(ActionNotAvailableError) as exc_info:
            require_action(Entity.INVOICE, "draft", Action.APPROVE)

        assert str(exc_info.value) == "Cannot approve a draft invoice"
        assert exc_info.value.status == "draft"

    def test_already_converted(self):
        """Test converting a quotation twice."""
        with pytest.raises(ActionNotAvailableError, match="already been converted"):
            require_action(
                Entity.QUOTATION,
                {"status": "accepted", "converted_to_invoice": True},
                Action.CONVERT_TO_INVOICE,
            )

    def test_allowed_action_passes(self):
        """Test no error for an offered action."""
        require_action(Entity.PAYMENT, "approved", Action.POST)


class TestActionRunner:
    """Tests for executing actions against the API."""

    @pytest.mark.asyncio
    async def test_submit_journal(self, make_client):
        """Test a successful submit."""
        api, transport = make_client(
            lambda request: httpx.Response(200, json={"data": {"id": "j1", "status": "submitted"}})
        )

        result = await ActionRunner(api).run("journal", {"id": "j1", "status": "draft"}, "submit")

        assert result.success
        assert result.message == "Journal submitted"
        assert result.record == {"id": "j1", "status": "submitted"}
        assert transport.last.url.path == "/api/journals/j1/submit"

    @pytest.mark.asyncio
    async def test_disallowed_action_makes_no_request(self, make_client):
        """Test refusing an action for the wrong status."""
        api, transport = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.JOURNAL, {"id": "j1", "status": "posted"}, Action.DELETE
        )

        assert not result.success
        assert result.message == "Can only delete draft journals"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_api_error_is_reported(self, make_client):
        """Test server errors become a failed result."""
        api, _ = make_client(
            lambda request: httpx.Response(400, json={"message": "Journal is not balanced"})
        )

        result = await ActionRunner(api).run(
            Entity.JOURNAL, {"id": "j1", "status": "approved"}, Action.POST
        )

        assert not result.success
        assert result.message == "Journal is not balanced"
        assert result.status_code == 400
        assert result.to_dict()["success"] is False

    @pytest.mark.asyncio
    async def test_cancel_payment_requires_reason(self, make_client):
        """Test cancel without a reason is refused locally."""
        api, transport = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.PAYMENT, {"id": "p1", "status": "posted"}, Action.CANCEL
        )

        assert result.message == "Missing required argument: reason"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_cancel_payment(self, make_client):
        """Test cancel sends the reason."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "p1"}))

        result = await ActionRunner(api).run(
            Entity.PAYMENT, {"id": "p1", "status": "posted"}, Action.CANCEL, reason="Bounced"
        )

        assert result.success
        assert result.message == "Payment cancelled"
        assert json.loads(transport.last.content) == {"reason": "Bounced"}

    @pytest.mark.asyncio
    async def test_unsupported_action(self, make_client):
        """Test placeholder actions report without calling the API."""
        api, transport = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.PURCHASE_ORDER, {"id": "po1", "status": "draft"}, Action.SEND
        )

        assert not result.success
        assert not result.supported
        assert result.message == "Status update not yet implemented"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_edit_requires_data(self, make_client):
        """Test edit without changes is refused."""
        api, _ = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.INVOICE, {"id": "i1", "status": "draft"}, Action.EDIT
        )

        assert result.message == "Missing required argument: data"

    @pytest.mark.asyncio
    async def test_edit_rejects_non_mapping_data(self, make_client):
        """Test edit data that is not an object is refused without a request."""
        api, transport = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.JOURNAL, {"id": "j1", "status": "draft"}, Action.EDIT, data=[1, 2]
        )

        assert not result.success
        assert result.message == "Invalid argument: data must be an object"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_edit_quotation_uses_put(self, make_client):
        """Test edit goes to the resource update call."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "q1"}))

        result = await ActionRunner(api).run(
            Entity.QUOTATION, {"id": "q1", "status": "draft"}, Action.EDIT, data={"notes": "x"}
        )

        assert result.success
        assert result.message == "Quotation updated"
        assert transport.last.method == "PUT"

    @pytest.mark.asyncio
    async def test_sell_asset(self, make_client):
        """Test selling an asset forwards date and amount."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "a1"}))

        result = await ActionRunner(api).run(
            Entity.FIXED_ASSET,
            {"id": "a1", "status": "active"},
            Action.SELL,
            disposal_date="2024-06-30",
            disposal_amount=900,
        )

        assert result.success
        assert result.message == "Fixed asset sold"
        assert transport.last.url.path == "/api/assets/a1/sell"
        assert json.loads(transport.last.content)["disposal_amount"] == 900.0

    @pytest.mark.asyncio
    async def test_sell_asset_amount_as_text(self, make_client):
        """Test a typed disposal amount is parsed the way form amounts are."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "a1"}))

        result = await ActionRunner(api).run(
            Entity.FIXED_ASSET,
            {"id": "a1", "status": "active"},
            Action.SELL,
            disposal_date="2024-06-30",
            disposal_amount="1250.50",
        )

        assert result.success
        assert json.loads(transport.last.content)["disposal_amount"] == 1250.5

    @pytest.mark.asyncio
    async def test_sell_asset_rejects_non_numeric_amount(self, make_client):
        """Test a non-numeric disposal amount is refused without a request."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "a1"}))

        result = await ActionRunner(api).run(
            Entity.FIXED_ASSET,
            {"id": "a1", "status": "active"},
            Action.SELL,
            disposal_date="2024-06-30",
            disposal_amount="nine hundred",
        )

        assert not result.success
        assert result.message == "Invalid argument: disposal_amount must be a number"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_file_vat_return(self, make_client):
        """Test filing a calculated VAT return sends the filing date."""
        api, transport = make_client(
            lambda request: httpx.Response(200, json={"id": "v1", "status": "filed"})
        )

        result = await ActionRunner(api).run(
            Entity.VAT_RETURN,
            {"id": "v1", "status": "calculated"},
            Action.FILE,
            filing_date="2024-04-15",
        )

        assert result.success
        assert result.record["status"] == "filed"
        assert transport.last.url.path == "/api/tax/vat/returns/v1/file"
        assert json.loads(transport.last.content) == {"filing_date": "2024-04-15"}

    @pytest.mark.asyncio
    async def test_pay_vat_return(self, make_client):
        """Test paying a filed VAT return records date and reference."""
        api, transport = make_client(lambda request: httpx.Response(200, json={"id": "v1"}))

        result = await ActionRunner(api).run(
            Entity.VAT_RETURN,
            {"id": "v1", "status": "filed"},
            Action.MARK_PAID,
            payment_date="2024-04-30",
            payment_reference="GTA-2024-Q1",
        )

        assert result.success
        assert transport.last.url.path == "/api/tax/vat/returns/v1/payment"
        assert json.loads(transport.last.content) == {
            "payment_date": "2024-04-30",
            "payment_reference": "GTA-2024-Q1",
        }

    @pytest.mark.asyncio
    async def test_draft_vat_return_cannot_be_filed(self, make_client):
        """Test filing is refused before the return is calculated."""
        api, transport = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(
            Entity.VAT_RETURN, {"id": "v1", "status": "draft"}, Action.FILE
        )

        assert not result.success
        assert result.message == "Cannot file a draft vat return"
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_view_loads_record(self, make_client):
        """Test view fetches the record."""
        api, transport = make_client(
            lambda request: httpx.Response(200, json={"id": "r1", "status": "draft"})
        )

        result = await ActionRunner(api).run(
            Entity.RECONCILIATION, {"id": "r1", "status": "draft"}, Action.VIEW
        )

        assert result.message == "Reconciliation loaded"
        assert transport.last.method == "GET"

    @pytest.mark.asyncio
    async def test_record_without_id(self, make_client):
        """Test a record with no id cannot be acted on."""
        api, _ = make_client(lambda request: httpx.Response(200, json={}))

        result = await ActionRunner(api).run(Entity.JOURNAL, {"status": "draft"}, Action.SUBMIT)

        assert not result.success
        assert result.message == "Journal has no id"


class TestStatusTables:
    """Tests tying the action tables to the status enums."""

    @pytest.mark.parametrize(
        "entity,statuses",
        [
            (Entity.JOURNAL, JournalStatus),
            (Entity.INVOICE, InvoiceStatus),
            (Entity.PAYMENT, PaymentStatus),
            (Entity.QUOTATION, QuotationStatus),
            (Entity.PURCHASE_ORDER, PurchaseOrderStatus),
            (Entity.EXPENSE, ExpenseStatus),
            (Entity.FIXED_ASSET, AssetStatus),
            (Entity.RECONCILIATION, ReconciliationStatus),
            (Entity.VAT_RETURN, VatReturnStatus),
        ],
    )
    def test_tables_use_known_statuses(self, entity, statuses):
        """Test every status in a table is a real status of the entity."""
        known = {status.value for status in statuses}

        assert set(STATUS_ACTIONS[entity].by_status) <= known

    @pytest.mark.parametrize("entity", list(Entity))
    def test_offered_actions_are_allowed(self, entity):
        """Test available actions pass the allow check and edits stay in the editable status."""
        policy = STATUS_ACTIONS[entity]
        for status in policy.by_status:
            for action in available_actions(entity, status):
                assert is_action_allowed(entity, status, action)
                if action in (Action.EDIT, Action.DELETE):
                    assert status == policy.editable_status
