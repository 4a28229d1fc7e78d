import logging
import os

import streamlit as st

from config import (COMPANY_INFO, DEFAULT_CURRENCY, DEFAULT_ROUND_OFF,
                    DEFAULT_SELLER_STATE, configure_logging)
from invoice_defaults import (CURRENCIES, DISCOUNT_TYPES, GST_RATES, INDIAN_STATES,
                              create_empty_item, default_invoice)
from invoice_generator import (generate_invoice_csv_bytes, generate_invoice_docx,
                               generate_invoice_pdf, generate_invoice_xlsx_bytes)
from models import Invoice
from tax_calc import calc_invoice_totals
from utils import format_currency

configure_logging()
logger = logging.getLogger(__name__)

# ---------------------------------------------------
# PAGE CONFIG
# ---------------------------------------------------
st.set_page_config(page_title="GST Invoice Generator", layout="wide")

st.markdown("""
    <style>
        .main, .stApp { background-color: #f7faff; }
        h1, h2, h3, h4 { color: #0b5394; }
        .company-header {
            text-align: center;
            background-color: #008000;
            color: white;
            padding: 15px 0;
            border-radius: 8px;
            margin-bottom: 15px;
        }
        .company-header h2 { margin: 0; font-weight: 700; }
        .company-header p { margin: 2px 0; font-size: 13px; }
        .section-title {
            font-size: 22px;
            color: #008000;
            font-weight: 700;
            border-bottom: 2px solid #008000;
            margin-bottom: 12px;
            padding-bottom: 4px;
        }
        .item-box {
            background-color: #eef4fa;
            padding: 15px;
            border-radius: 6px;
            margin-bottom: 10px;
        }
        .summary-box {
            background-color: #eaf1fb;
            padding: 12px 18px;
            border-radius: 8px;
            font-weight: 600;
            margin-top: 15px;
            border-left: 4px solid #0b5394;
        }
    </style>
""", unsafe_allow_html=True)

# ---------------------------------------------------
# COMPANY HEADER
# ---------------------------------------------------
if os.path.exists(COMPANY_INFO["logo_path"]):
    st.image(COMPANY_INFO["logo_path"], width=140)

st.markdown(f"""
<div class="company-header">
    <h2>{COMPANY_INFO["name"]}</h2>
    <p>{COMPANY_INFO["address"]}</p>
    <p>GSTIN: {COMPANY_INFO["gstin"]} | 📞 {COMPANY_INFO["contact"]} | ✉️ {COMPANY_INFO["email"]}</p>
</div>
""", unsafe_allow_html=True)

st.title("🧾 GST Invoice Generator")

if "invoice" not in st.session_state:
    st.session_state.invoice = default_invoice(DEFAULT_SELLER_STATE, DEFAULT_CURRENCY, DEFAULT_ROUND_OFF)
    st.session_state.invoice["seller_name"] = COMPANY_INFO["name"]
    st.session_state.invoice["seller_gstin"] = COMPANY_INFO["gstin"]
    st.session_state.invoice["seller_address"] = COMPANY_INFO["address"]

inv = st.session_state.invoice
state_codes = list(INDIAN_STATES)


def _state_label(code):
    return f"{code} - {INDIAN_STATES[code]}"


# ---------------------------------------------------
# PARTIES & META
# ---------------------------------------------------
st.markdown('<div class="section-title">Invoice Details</div>', unsafe_allow_html=True)
col1, col2 = st.columns(2)
with col1:
    inv["seller_name"] = st.text_input("Seller Name", value=inv["seller_name"])
    inv["seller_gstin"] = st.text_input("Seller GSTIN", value=inv["seller_gstin"])
    inv["seller_state"] = st.selectbox("Seller State", state_codes, format_func=_state_label,
                                       index=state_codes.index(inv["seller_state"]))
    inv["seller_address"] = st.text_area("Seller Address", value=inv["seller_address"])
    inv["seller_pan"] = st.text_input("Seller PAN", value=inv["seller_pan"])
    inv["invoice_number"] = st.text_input("Invoice Number", value=inv["invoice_number"])
    inv["invoice_date"] = st.text_input("Invoice Date", value=inv["invoice_date"])
    inv["due_date"] = st.text_input("Due Date", value=inv["due_date"])
with col2:
    inv["buyer_name"] = st.text_input("Buyer Name", value=inv["buyer_name"])
    inv["buyer_gstin"] = st.text_input("Buyer GSTIN", value=inv["buyer_gstin"])
    inv["buyer_address"] = st.text_area("Buyer Address", value=inv["buyer_address"])
    inv["buyer_state"] = st.selectbox("Buyer State", state_codes, format_func=_state_label,
                                      index=state_codes.index(inv["buyer_state"]))
    inv["place_of_supply"] = st.selectbox("Place of Supply", state_codes, format_func=_state_label,
                                          index=state_codes.index(inv["place_of_supply"]))
    currency_codes = list(CURRENCIES)
    inv["currency"] = st.selectbox("Currency", currency_codes,
                                   index=currency_codes.index(inv["currency"]) if inv["currency"] in CURRENCIES else 0)
    inv["round_off"] = st.checkbox("Round off total", value=inv["round_off"])
    inv["reverse_charge"] = st.checkbox("Reverse Charge", value=inv["reverse_charge"])

inv["shipping_charge"] = st.number_input("Shipping Charge", min_value=0.0,
                                         value=float(inv["shipping_charge"]))

# ---------------------------------------------------
# LINE ITEMS
# ---------------------------------------------------
st.markdown('<div class="section-title">Items</div>', unsafe_allow_html=True)
col1, col2 = st.columns(2)
with col1:
    if st.button("➕ Add Item"):
        inv["items"].append(create_empty_item())
with col2:
    if st.button("➖ Remove Item"):
        if len(inv["items"]) > 1:
            inv["items"].pop()
        else:
            st.info("An invoice needs at least one item.")

for i, it in enumerate(inv["items"]):
    key = it["id"]
    st.markdown(f'<div class="item-box"><b>Item {i+1}</b>', unsafe_allow_html=True)
    c1, c2, c3 = st.columns(3)
    with c1:
        it["description"] = st.text_input("Description", value=it["description"], key=f"desc{key}")
        it["hsn_code"] = st.text_input("HSN/SAC", value=it["hsn_code"], key=f"hsn{key}")
    with c2:
        it["quantity"] = st.number_input("Quantity", min_value=0.0, value=float(it["quantity"]), key=f"qty{key}")
        it["rate"] = st.number_input("Rate (per unit)", min_value=0.0, value=float(it["rate"]), key=f"rate{key}")
    with c3:
        it["discount_type"] = st.selectbox("Discount Type", DISCOUNT_TYPES,
                                           index=DISCOUNT_TYPES.index(it["discount_type"]), key=f"dt{key}")
        it["discount"] = st.number_input("Discount", min_value=0.0, value=float(it["discount"]), key=f"disc{key}")
        it["gst_rate"] = st.selectbox("GST Rate %", GST_RATES,
                                      index=GST_RATES.index(it["gst_rate"]), key=f"gst{key}")
    st.markdown('</div>', unsafe_allow_html=True)

# ---------------------------------------------------
# BANK DETAILS & FOOTER
# ---------------------------------------------------
st.markdown('<div class="section-title">Bank Details &amp; Footer</div>', unsafe_allow_html=True)
col1, col2 = st.columns(2)
with col1:
    inv["bank_name"] = st.text_input("Bank Name", value=inv["bank_name"])
    inv["account_number"] = st.text_input("Account Number", value=inv["account_number"])
    inv["ifsc_code"] = st.text_input("IFSC Code", value=inv["ifsc_code"])
    inv["bank_branch"] = st.text_input("Branch", value=inv["bank_branch"])
with col2:
    inv["terms_and_conditions"] = st.text_area("Terms & Conditions", value=inv["terms_and_conditions"])
    inv["notes"] = st.text_area("Notes", value=inv["notes"])

# ---------------------------------------------------
# TOTALS (one calculation feeds the preview and every export)
# ---------------------------------------------------
invoice = Invoice.from_dict(inv)
totals = calc_invoice_totals(invoice)
cur = totals.currency

tax_lines = (f"IGST: {format_currency(totals.total_igst, cur)}" if totals.is_inter_state else
             f"CGST: {format_currency(totals.total_cgst, cur)} | SGST: {format_currency(totals.total_sgst, cur)}")
round_sign = "-" if totals.round_off_amt < 0 else ""
st.markdown(f"""
<div class="summary-box">
    Taxable: {format_currency(totals.total_taxable, cur)}
    (Discount: -{format_currency(totals.total_discount, cur)})<br>
    {tax_lines}<br>
    Shipping: {format_currency(totals.shipping_charge, cur)} |
    Round Off: {round_sign}{format_currency(totals.round_off_amt, cur)}<br>
    <b>Total: {format_currency(totals.rounded_total, cur)}</b><br>
    <i>{totals.amount_in_words}</i>
</div>
""", unsafe_allow_html=True)

if totals.tax_breakdown:
    st.table([{
        "GST %": f"{t.rate:g}",
        "Taxable": format_currency(t.taxable, cur),
        "CGST": format_currency(t.cgst, cur),
        "SGST": format_currency(t.sgst, cur),
        "IGST": format_currency(t.igst, cur),
    } for t in totals.tax_breakdown])

# ---------------------------------------------------
# DOWNLOADS
# ---------------------------------------------------
file_stem = invoice.invoice_number or "invoice"
exports = [
    ("📄 PDF", generate_invoice_pdf, "pdf", "application/pdf"),
    ("📝 DOCX", generate_invoice_docx, "docx",
     "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
    ("📊 Excel", generate_invoice_xlsx_bytes, "xlsx",
     "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"),
]
cols = st.columns(len(exports) + 1)
for col, (label, render, ext, mime) in zip(cols, exports):
    with col:
        try:
            data = render(invoice, totals)
        except Exception as e:
            logger.exception("%s export failed for %s", ext, file_stem)
            st.error(f"{ext.upper()} export failed: {e}")
            continue
        st.download_button(f"{label} Download", data=data,
                           file_name=f"{file_stem}.{ext}", mime=mime)
with cols[-1]:
    st.download_button("🧮 CSV Download", data=generate_invoice_csv_bytes(totals),
                       file_name=f"{file_stem}.csv", mime="text/csv")
