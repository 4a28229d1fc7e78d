from __future__ import annotations

import dataclasses

import pytest

from models import Invoice, LineItem, LineItemResult
from tax_calc import aggregate_tax, calc_invoice_totals, calc_line_item, is_inter_state, split_tax


def _item(**kw) -> LineItem:
    base = dict(quantity=1, rate=0, discount=0, discount_type="percent", gst_rate=18)
    base.update(kw)
    return LineItem(**base)


def test_line_item_percent_discount(sample_item: LineItem) -> None:
    res = calc_line_item(sample_item)
    assert res == LineItemResult(subtotal=1000, discount_amt=100, taxable_value=900,
                                 gst_amt=162, total=1062)


def test_line_item_flat_discount_clamped_to_subtotal() -> None:
    res = calc_line_item(_item(rate=1000, discount=1500, discount_type="flat", gst_rate=0))
    assert res.discount_amt == 1000
    assert res.taxable_value == 0
    assert res.gst_amt == 0
    assert res.total == 0


def test_line_item_flat_discount_below_subtotal() -> None:
    res = calc_line_item(_item(quantity=3, rate=100, discount=50, discount_type="flat", gst_rate=5))
    assert res.subtotal == 300
    assert res.discount_amt == 50
    assert res.taxable_value == 250
    assert res.gst_amt == 12.5
    assert res.total == 262.5


def test_line_item_percent_discount_over_hundred_is_not_clamped() -> None:
    res = calc_line_item(_item(rate=100, discount=150))
    assert res.discount_amt == 150
    assert res.taxable_value == -50
    assert res.gst_amt == -9
    assert res.total == -59


def test_line_item_rounds_each_field_half_up() -> None:
    res = calc_line_item(_item(quantity=1, rate=10.05, gst_rate=5))
    # 10.05 * 5% = 0.5025
    assert res.gst_amt == 0.5
    assert res.total == 10.55


def test_line_item_accepts_raw_mapping_with_bad_numbers() -> None:
    res = calc_line_item({"quantity": "abc", "rate": None, "gstRate": "18"})
    assert res == LineItemResult()


def test_line_item_unknown_gst_rate_processed_like_known() -> None:
    res = calc_line_item(_item(rate=100, gst_rate=7))
    assert res.gst_amt == 7
    assert res.total == 107


def test_taxable_is_subtotal_minus_discount() -> None:
    items = [
        _item(quantity=3, rate=33.33, discount=7.5),
        _item(quantity=7, rate=19.99, discount=12.34, discount_type="flat"),
        _item(quantity=0.5, rate=1999, discount=99, discount_type="flat"),
    ]
    for it in items:
        res = calc_line_item(it)
        assert res.taxable_value == pytest.approx(res.subtotal - res.discount_amt, abs=0.01)
        if it.discount_type == "flat":
            assert res.taxable_value >= 0


def test_is_inter_state_is_strict_code_equality() -> None:
    assert is_inter_state("27", "27") is False
    assert is_inter_state("27", "07") is True
    assert is_inter_state("27", 27) is True
    assert is_inter_state("27", " 27") is True


def test_split_tax() -> None:
    assert split_tax(162, False) == (81, 81, 0)
    assert split_tax(162, True) == (0, 0, 162)
    assert split_tax(0.01, False) == (0.01, 0.01, 0)


def test_aggregate_tax_groups_and_sorts_by_rate() -> None:
    items = [
        _item(rate=100, gst_rate=28),
        _item(rate=200, gst_rate=5),
        _item(rate=300, gst_rate=18),
        _item(rate=400, gst_rate=5),
    ]
    enriched = [dataclasses.replace(i, calc=calc_line_item(i)) for i in items]
    brackets = aggregate_tax(enriched, inter_state=False)
    assert [b.rate for b in brackets] == [5, 18, 28]
    assert brackets[0].taxable == 600
    assert brackets[0].cgst == 15
    assert brackets[0].sgst == 15
    assert brackets[0].igst == 0


def test_aggregate_tax_inter_state_zeroes_cgst_sgst() -> None:
    enriched = [dataclasses.replace(i, calc=calc_line_item(i))
                for i in (_item(rate=1000, gst_rate=12), _item(rate=50, gst_rate=0))]
    brackets = aggregate_tax(enriched, inter_state=True)
    assert [(b.rate, b.igst, b.cgst, b.sgst) for b in brackets] == [(0, 0, 0, 0), (12, 120, 0, 0)]


def test_invoice_intra_state_scenario(intra_invoice: Invoice) -> None:
    totals = calc_invoice_totals(intra_invoice)
    assert totals.is_inter_state is False
    assert totals.subtotal == 1000
    assert totals.total_discount == 100
    assert totals.total_taxable == 900
    assert totals.total_tax == 162
    assert (totals.total_cgst, totals.total_sgst, totals.total_igst) == (81, 81, 0)
    assert len(totals.tax_breakdown) == 1
    bracket = totals.tax_breakdown[0]
    assert (bracket.rate, bracket.taxable, bracket.cgst, bracket.sgst, bracket.igst) == (18, 900, 81, 81, 0)
    assert totals.grand_total == 1062
    assert totals.rounded_total == 1062
    assert totals.round_off_amt == 0
    assert totals.amount_in_words == "Rupees One Thousand Sixty Two Only"
    assert totals.line_items[0].calc.total == 1062


def test_invoice_inter_state_scenario(intra_invoice: Invoice) -> None:
    totals = calc_invoice_totals(dataclasses.replace(intra_invoice, place_of_supply="07"))
    assert totals.is_inter_state is True
    assert (totals.total_cgst, totals.total_sgst, totals.total_igst) == (0, 0, 162)
    for bracket in totals.tax_breakdown:
        assert bracket.cgst == 0
        assert bracket.sgst == 0
    assert totals.tax_breakdown[0].igst == 162


def test_invoice_from_form_dict_with_camel_case_keys() -> None:
    totals = calc_invoice_totals({
        "sellerState": "27",
        "placeOfSupply": "07",
        "currency": "INR",
        "roundOff": True,
        "shippingCharge": "",
        "items": [{"quantity": 2, "rate": 500, "discount": 10,
                   "discountType": "percent", "gstRate": 18}],
    })
    assert totals.total_igst == 162
    assert totals.shipping_charge == 0
    assert totals.rounded_total == 1062


def test_round_off_half_rounds_up() -> None:
    inv = Invoice(seller_state="27", place_of_supply="27",
                  items=(_item(rate=1234.5, gst_rate=0),), round_off=True)
    totals = calc_invoice_totals(inv)
    assert totals.grand_total == 1234.5
    assert totals.rounded_total == 1235
    assert totals.round_off_amt == 0.5
    assert totals.amount_in_words == "Rupees One Thousand Two Hundred and Thirty Five Only"


def test_round_off_down_gives_negative_adjustment() -> None:
    inv = Invoice(items=(_item(rate=1234.4, gst_rate=0),), round_off=True)
    totals = calc_invoice_totals(inv)
    assert totals.rounded_total == 1234
    assert totals.round_off_amt == -0.4


def test_round_off_disabled_keeps_paise() -> None:
    inv = Invoice(items=(_item(rate=1234.5, gst_rate=0),), round_off=False)
    totals = calc_invoice_totals(inv)
    assert totals.rounded_total == 1234.5
    assert totals.round_off_amt == 0


@pytest.mark.parametrize("round_off", [True, False])
def test_rounded_minus_grand_equals_round_off_amt(round_off: bool) -> None:
    inv = Invoice(
        seller_state="27", place_of_supply="29", round_off=round_off, shipping_charge=49.99,
        items=(
            _item(quantity=3, rate=333.33, discount=5, gst_rate=12),
            _item(quantity=1, rate=78.45, discount=10, discount_type="flat", gst_rate=28),
        ),
    )
    totals = calc_invoice_totals(inv)
    assert totals.rounded_total - totals.grand_total == pytest.approx(totals.round_off_amt, abs=1e-9)


def test_bracket_taxable_sums_to_total_taxable() -> None:
    inv = Invoice(items=tuple(
        _item(quantity=q, rate=r, discount=d, gst_rate=g)
        for q, r, d, g in [(3, 19.99, 5, 5), (1, 7.77, 0, 12), (11, 3.33, 2.5, 18), (2, 99.95, 0, 5)]
    ))
    totals = calc_invoice_totals(inv)
    assert sum(b.taxable for b in totals.tax_breakdown) == pytest.approx(totals.total_taxable, abs=0.005)


def test_invoice_split_independent_of_bracket_split() -> None:
    inv = Invoice(seller_state="27", place_of_supply="27", items=(
        _item(rate=0.2, gst_rate=5),
        _item(rate=0.1, gst_rate=12),
    ))
    totals = calc_invoice_totals(inv)
    assert [b.cgst for b in totals.tax_breakdown] == [0.01, 0.01]
    assert totals.total_tax == 0.02
    assert totals.total_cgst == 0.01
    assert totals.total_sgst == 0.01


def test_shipping_charge_coerced_non_negative() -> None:
    items = (_item(rate=100, gst_rate=0),)
    assert calc_invoice_totals(Invoice(items=items, shipping_charge="abc")).shipping_charge == 0
    assert calc_invoice_totals(Invoice(items=items, shipping_charge=float("nan"))).shipping_charge == 0
    assert calc_invoice_totals(Invoice(items=items, shipping_charge=-50)).shipping_charge == 0
    totals = calc_invoice_totals(Invoice(items=items, shipping_charge="40"))
    assert totals.shipping_charge == 40
    assert totals.rounded_total == 140


def test_unknown_currency_falls_back_to_base() -> None:
    totals = calc_invoice_totals(Invoice(currency="XYZ", items=(_item(rate=10, gst_rate=0),)))
    assert totals.currency == "INR"
    assert totals.amount_in_words == "Rupees Ten Only"


def test_words_use_selected_currency() -> None:
    totals = calc_invoice_totals(Invoice(currency="USD", items=(_item(rate=250, gst_rate=0),)))
    assert totals.amount_in_words == "Dollars Two Hundred and Fifty Only"


def test_enrichment_does_not_touch_input(intra_invoice: Invoice) -> None:
    totals = calc_invoice_totals(intra_invoice)
    assert intra_invoice.items[0].calc is None
    assert totals.line_items[0] is not intra_invoice.items[0]
    assert totals.line_items[0].description == "Steel Widget"
    with pytest.raises(dataclasses.FrozenInstanceError):
        totals.grand_total = 0


def test_item_order_preserved() -> None:
    inv = Invoice(items=(
        _item(description="b", gst_rate=28), _item(description="a", gst_rate=5),
    ))
    totals = calc_invoice_totals(inv)
    assert [i.description for i in totals.line_items] == ["b", "a"]


def test_same_input_same_output(intra_invoice: Invoice) -> None:
    assert calc_invoice_totals(intra_invoice) == calc_invoice_totals(intra_invoice)


def test_to_dict_exposes_renderer_fields(intra_invoice: Invoice) -> None:
    data = calc_invoice_totals(intra_invoice).to_dict()
    assert data["tax_breakdown"][0] == {"rate": 18, "taxable": 900, "cgst": 81, "sgst": 81, "igst": 0}
    assert data["line_items"][0]["calc"]["taxable_value"] == 900
    assert data["amount_in_words"].endswith("Only")
