import logging
from dataclasses import replace
from typing import Iterable, List, Mapping, Tuple, Union

from invoice_defaults import CURRENCIES, BASE_CURRENCY
from models import Invoice, InvoiceTotals, LineItem, LineItemResult, TaxBracket
from utils import WHOLE, money, number_to_words, to_number

logger = logging.getLogger(__name__)

__all__ = [
    "is_inter_state", "split_tax", "calc_line_item", "aggregate_tax",
    "calc_invoice_totals", "money",
]


def is_inter_state(seller_state, place_of_supply) -> bool:
    """
    Seller state == place of supply → CGST + SGST
    Else → IGST
    Codes are compared as given: "27" and 27 are different jurisdictions.
    """
    return seller_state != place_of_supply


def split_tax(tax, inter_state: bool) -> Tuple[float, float, float]:
    """Split a tax amount into (cgst, sgst, igst); the unused side is exactly 0."""
    if inter_state:
        return 0.0, 0.0, money(tax)
    half = money(tax / 2)
    return half, half, 0.0


def calc_line_item(item: Union[LineItem, Mapping]) -> LineItemResult:
    """
    Compute the monetary breakdown for one invoice line.
    percent → discount = subtotal × discount%  (not clamped)
    flat    → discount = min(discount, subtotal)
    Each field is rounded to 2 decimals on its own.
    """
    if not isinstance(item, LineItem):
        item = LineItem.from_dict(item)

    subtotal = to_number(item.quantity) * to_number(item.rate)
    discount = to_number(item.discount)
    if item.discount_type == "flat":
        discount_amt = min(discount, subtotal)
    else:
        discount_amt = subtotal * (discount / 100)
    taxable_value = subtotal - discount_amt
    gst_amt = taxable_value * (to_number(item.gst_rate) / 100)

    return LineItemResult(
        subtotal=money(subtotal),
        discount_amt=money(discount_amt),
        taxable_value=money(taxable_value),
        gst_amt=money(gst_amt),
        total=money(taxable_value + gst_amt),
    )


def aggregate_tax(line_items: Iterable[LineItem], inter_state: bool) -> List[TaxBracket]:
    """Group enriched line items by GST rate, ascending by rate."""
    tax_map = {}
    for item in line_items:
        calc = item.calc if item.calc is not None else calc_line_item(item)
        entry = tax_map.setdefault(to_number(item.gst_rate), {"taxable": 0.0, "tax": 0.0})
        entry["taxable"] += calc.taxable_value
        entry["tax"] += calc.gst_amt

    brackets = []
    for rate in sorted(tax_map):
        entry = tax_map[rate]
        cgst, sgst, igst = split_tax(entry["tax"], inter_state)
        brackets.append(TaxBracket(rate=rate, taxable=money(entry["taxable"]),
                                   cgst=cgst, sgst=sgst, igst=igst))
    return brackets


def calc_invoice_totals(invoice: Union[Invoice, Mapping]) -> InvoiceTotals:
    """
    Run the whole pipeline for one invoice:
    line items → tax brackets → invoice sums → rounding → words.

    The invoice-wide CGST/SGST/IGST come from the summed tax, not from the
    bracket values, so the two views can differ by one paisa.
    """
    if not isinstance(invoice, Invoice):
        invoice = Invoice.from_dict(invoice)

    currency = invoice.currency if invoice.currency in CURRENCIES else BASE_CURRENCY
    if currency != invoice.currency:
        logger.debug("Unknown currency %r, using %s", invoice.currency, BASE_CURRENCY)

    inter_state = is_inter_state(invoice.seller_state, invoice.place_of_supply)
    line_items = tuple(replace(item, calc=calc_line_item(item)) for item in invoice.items)

    subtotal = sum(i.calc.subtotal for i in line_items)
    total_discount = sum(i.calc.discount_amt for i in line_items)
    total_taxable = sum(i.calc.taxable_value for i in line_items)
    total_tax = sum(i.calc.gst_amt for i in line_items)

    tax_breakdown = aggregate_tax(line_items, inter_state)
    total_cgst, total_sgst, total_igst = split_tax(total_tax, inter_state)

    shipping = max(to_number(invoice.shipping_charge), 0.0)
    grand_total = total_taxable + total_tax + shipping
    if invoice.round_off:
        rounded_total = money(grand_total, WHOLE)
    else:
        rounded_total = money(grand_total)
    round_off_amt = money(rounded_total - grand_total)

    logger.debug("Invoice %s: %d items, inter_state=%s, total=%s",
                 invoice.invoice_number or "-", len(line_items), inter_state, rounded_total)

    return InvoiceTotals(
        line_items=line_items,
        currency=currency,
        subtotal=money(subtotal),
        total_discount=money(total_discount),
        total_taxable=money(total_taxable),
        is_inter_state=inter_state,
        tax_breakdown=tuple(tax_breakdown),
        total_cgst=total_cgst,
        total_sgst=total_sgst,
        total_igst=total_igst,
        total_tax=money(total_tax),
        shipping_charge=shipping,
        grand_total=money(grand_total),
        rounded_total=rounded_total,
        round_off_amt=round_off_amt,
        amount_in_words=number_to_words(rounded_total, currency),
    )
