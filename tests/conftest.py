from __future__ import annotations

import pytest

from models import Invoice, LineItem


@pytest.fixture
def sample_item() -> LineItem:
    return LineItem(quantity=2, rate=500, discount=10, discount_type="percent", gst_rate=18,
                    description="Steel Widget", hsn_code="7326")


@pytest.fixture
def intra_invoice(sample_item: LineItem) -> Invoice:
    return Invoice(
        seller_state="27",
        place_of_supply="27",
        items=(sample_item,),
        invoice_number="INV-001",
        invoice_date="2026-10-19",
        seller_name="Friends Group Company Pvt. Ltd.",
        buyer_name="Acme Traders",
    )
