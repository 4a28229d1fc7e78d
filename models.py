from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from invoice_defaults import BASE_CURRENCY, DISCOUNT_TYPES
from utils import to_number


def _pick(raw: Mapping, snake: str, camel: str, default=None):
    """Read a form field by its snake_case or camelCase key."""
    if snake in raw:
        return raw[snake]
    return raw.get(camel, default)


def _text(value) -> str:
    return "" if value is None else str(value)


@dataclass(frozen=True)
class LineItemResult:
    subtotal: float = 0.0
    discount_amt: float = 0.0
    taxable_value: float = 0.0
    gst_amt: float = 0.0
    total: float = 0.0


@dataclass(frozen=True)
class LineItem:
    quantity: float = 1
    rate: float = 0.0
    discount: float = 0.0
    discount_type: str = "percent"
    gst_rate: float = 18
    description: str = ""
    hsn_code: str = ""
    unit: str = "Nos"
    calc: Optional[LineItemResult] = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "LineItem":
        discount_type = _pick(raw, "discount_type", "discountType", "percent")
        if discount_type not in DISCOUNT_TYPES:
            discount_type = "percent"
        return cls(
            quantity=to_number(raw.get("quantity")),
            rate=to_number(raw.get("rate")),
            discount=to_number(raw.get("discount")),
            discount_type=discount_type,
            gst_rate=to_number(_pick(raw, "gst_rate", "gstRate")),
            description=_text(raw.get("description")),
            hsn_code=_text(_pick(raw, "hsn_code", "hsnCode")),
            unit=_text(raw.get("unit", "Nos")),
        )


@dataclass(frozen=True)
class Invoice:
    seller_state: Any = ""
    place_of_supply: Any = ""
    currency: str = BASE_CURRENCY
    items: Tuple[LineItem, ...] = ()
    shipping_charge: Any = 0.0
    round_off: bool = True

    # presentation only; never read by the calculation
    invoice_number: str = ""
    invoice_date: str = ""
    due_date: str = ""
    seller_name: str = ""
    seller_address: str = ""
    seller_gstin: str = ""
    seller_pan: str = ""
    buyer_name: str = ""
    buyer_address: str = ""
    buyer_gstin: str = ""
    buyer_state: str = ""
    reverse_charge: bool = False
    notes: str = ""
    terms_and_conditions: str = ""
    bank_name: str = ""
    account_number: str = ""
    ifsc_code: str = ""
    bank_branch: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Invoice":
        items = tuple(
            it if isinstance(it, LineItem) else LineItem.from_dict(it)
            for it in (raw.get("items") or ())
        )
        return cls(
            seller_state=_pick(raw, "seller_state", "sellerState", ""),
            place_of_supply=_pick(raw, "place_of_supply", "placeOfSupply", ""),
            currency=raw.get("currency") or BASE_CURRENCY,
            items=items,
            shipping_charge=_pick(raw, "shipping_charge", "shippingCharge", 0),
            round_off=bool(_pick(raw, "round_off", "roundOff", True)),
            invoice_number=_text(_pick(raw, "invoice_number", "invoiceNumber")),
            invoice_date=_text(_pick(raw, "invoice_date", "invoiceDate")),
            due_date=_text(_pick(raw, "due_date", "dueDate")),
            seller_name=_text(_pick(raw, "seller_name", "sellerName")),
            seller_address=_text(_pick(raw, "seller_address", "sellerAddress")),
            seller_gstin=_text(_pick(raw, "seller_gstin", "sellerGSTIN")),
            seller_pan=_text(_pick(raw, "seller_pan", "sellerPAN")),
            buyer_name=_text(_pick(raw, "buyer_name", "buyerName")),
            buyer_address=_text(_pick(raw, "buyer_address", "buyerAddress")),
            buyer_gstin=_text(_pick(raw, "buyer_gstin", "buyerGSTIN")),
            buyer_state=_text(_pick(raw, "buyer_state", "buyerState")),
            reverse_charge=bool(_pick(raw, "reverse_charge", "reverseCharge", False)),
            notes=_text(raw.get("notes")),
            terms_and_conditions=_text(_pick(raw, "terms_and_conditions", "termsAndConditions")),
            bank_name=_text(_pick(raw, "bank_name", "bankName")),
            account_number=_text(_pick(raw, "account_number", "accountNumber")),
            ifsc_code=_text(_pick(raw, "ifsc_code", "ifscCode")),
            bank_branch=_text(_pick(raw, "bank_branch", "bankBranch")),
        )


@dataclass(frozen=True)
class TaxBracket:
    rate: float
    taxable: float = 0.0
    cgst: float = 0.0
    sgst: float = 0.0
    igst: float = 0.0


@dataclass(frozen=True)
class InvoiceTotals:
    """Computed totals shared by the preview and every export path.

    Renderers read these figures as-is and never recompute money.
    """
    line_items: Tuple[LineItem, ...] = ()
    currency: str = BASE_CURRENCY
    subtotal: float = 0.0
    total_discount: float = 0.0
    total_taxable: float = 0.0
    is_inter_state: bool = False
    tax_breakdown: Tuple[TaxBracket, ...] = field(default_factory=tuple)
    total_cgst: float = 0.0
    total_sgst: float = 0.0
    total_igst: float = 0.0
    total_tax: float = 0.0
    shipping_charge: float = 0.0
    grand_total: float = 0.0
    rounded_total: float = 0.0
    round_off_amt: float = 0.0
    amount_in_words: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
