from io import BytesIO

import pandas as pd
from docx import Document
from docx.shared import Pt
from PIL import Image, ImageDraw, ImageFont
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from invoice_defaults import state_name
from utils import format_currency


def _supply_label(totals):
    return "Inter-State (IGST)" if totals.is_inter_state else "Intra-State (CGST+SGST)"


def _signed(amount, currency, symbol=None):
    return ("-" if amount < 0 else "") + format_currency(amount, currency, symbol)


def _plain(amount, currency):
    """Currency code instead of the symbol, for the built-in PDF and bitmap fonts."""
    return format_currency(amount, currency, symbol=f"{currency} ")


def total_rows(invoice, totals):
    """(label, amount) rows for the totals block, in display order."""
    rows = [("Subtotal", totals.total_taxable)]
    for t in totals.tax_breakdown:
        if t.rate == 0:
            continue
        if totals.is_inter_state:
            rows.append((f"IGST @ {t.rate:g}%", t.igst))
        else:
            rows.append((f"CGST @ {t.rate / 2:g}%", t.cgst))
            rows.append((f"SGST @ {t.rate / 2:g}%", t.sgst))
    if totals.shipping_charge > 0:
        rows.append(("Shipping", totals.shipping_charge))
    if invoice.round_off and totals.round_off_amt != 0:
        rows.append(("Round Off", totals.round_off_amt))
    rows.append(("TOTAL", totals.rounded_total))
    return rows


def discount_text(row, currency, symbol=None):
    """"10%" for percent discounts, the amount for flat ones."""
    if row["discount_type"] == "flat":
        return format_currency(row["discount"], currency, symbol)
    return f"{row['discount']:g}%"


def bank_rows(invoice):
    """(label, value) rows for the bank details block; empty without a bank name."""
    if not invoice.bank_name:
        return []
    rows = [("Bank", invoice.bank_name),
            ("A/C No", invoice.account_number),
            ("IFSC", invoice.ifsc_code),
            ("Branch", invoice.bank_branch)]
    return [(label, value) for label, value in rows if value]


def item_records(totals):
    records = []
    for sr, item in enumerate(totals.line_items, start=1):
        records.append({
            "sr": sr,
            "description": item.description,
            "hsn": item.hsn_code,
            "qty": item.quantity,
            "unit": item.unit,
            "rate": item.rate,
            "discount": item.discount,
            "discount_type": item.discount_type,
            "taxable": item.calc.taxable_value,
            "gst_rate": item.gst_rate,
            "gst_amt": item.calc.gst_amt,
            "total": item.calc.total,
        })
    return records


def generate_invoice_pdf(invoice, totals):
    cur = totals.currency
    code = f"{cur} "
    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    x, y = 40, height - 40

    # Header Section
    c.setFont("Helvetica-Bold", 14)
    c.drawCentredString(width/2, y, "TAX INVOICE")
    y -= 30

    c.setFont("Helvetica", 10)
    c.drawString(x, y, f"Invoice: {invoice.invoice_number}")
    c.drawString(width/2, y, f"Date: {invoice.invoice_date}"
                 + (f"   Due: {invoice.due_date}" if invoice.due_date else ""))
    if invoice.reverse_charge:
        c.drawRightString(width - x, y - 12, "Reverse Charge: Yes")
    y -= 24

    # Seller / Buyer blocks
    seller = [f"Seller: {invoice.seller_name}", invoice.seller_address,
              f"GSTIN: {invoice.seller_gstin}" if invoice.seller_gstin else "",
              f"PAN: {invoice.seller_pan}" if invoice.seller_pan else ""]
    buyer = [f"Buyer: {invoice.buyer_name}", invoice.buyer_address,
             f"GSTIN: {invoice.buyer_gstin}" if invoice.buyer_gstin else "",
             f"State: {state_name(invoice.buyer_state)}" if invoice.buyer_state else ""]
    seller = [line for line in seller if line]
    buyer = [line for line in buyer if line]
    for i in range(max(len(seller), len(buyer))):
        if i < len(seller):
            c.drawString(x, y, seller[i][:60])
        if i < len(buyer):
            c.drawString(width/2, y, buyer[i][:60])
        y -= 14
    y -= 6
    c.drawString(x, y, f"Place of Supply: {state_name(invoice.place_of_supply)} "
                       f"({invoice.place_of_supply})  |  {_supply_label(totals)}")
    y -= 30

    # Table Header
    c.setFont("Helvetica-Bold", 9)
    headers = ["#", "Description", "HSN/SAC", "Qty", "Rate", "Disc", "Taxable", "GST%", "Amount"]
    positions = [x, x+15, x+140, x+195, x+222, x+292, x+340, x+410, x+445]
    for header, pos in zip(headers, positions):
        c.drawString(pos, y, header)
    y -= 18

    c.setFont("Helvetica", 9)
    for row in item_records(totals):
        c.drawString(positions[0], y, str(row["sr"]))
        c.drawString(positions[1], y, row["description"][:24])
        c.drawString(positions[2], y, row["hsn"])
        c.drawString(positions[3], y, f"{row['qty']:g}")
        c.drawString(positions[4], y, _plain(row["rate"], cur))
        c.drawString(positions[5], y, discount_text(row, cur, code))
        c.drawString(positions[6], y, _plain(row["taxable"], cur))
        c.drawString(positions[7], y, f"{row['gst_rate']:g}%")
        c.drawString(positions[8], y, _plain(row["total"], cur))
        y -= 15

        if y < 100:
            c.showPage()
            y = height - 40
            c.setFont("Helvetica", 9)

    # Totals block
    y -= 10
    for label, amount in total_rows(invoice, totals):
        c.setFont("Helvetica-Bold" if label == "TOTAL" else "Helvetica", 10)
        c.drawString(positions[6], y, label)
        c.drawRightString(width - x, y, _signed(amount, cur, code))
        y -= 15

    y -= 10
    c.setFont("Helvetica-Oblique", 9)
    c.drawString(x, y, totals.amount_in_words)
    y -= 24

    bank = bank_rows(invoice)
    if bank:
        c.setFont("Helvetica-Bold", 9)
        c.drawString(x, y, "Bank Details")
        y -= 13
        c.setFont("Helvetica", 8)
        for label, value in bank:
            c.drawString(x, y, f"{label}: {value}")
            y -= 11
        y -= 8

    for title, text in (("Terms & Conditions", invoice.terms_and_conditions), ("Notes", invoice.notes)):
        if not text:
            continue
        if y < 80:
            c.showPage()
            y = height - 40
        c.setFont("Helvetica-Bold", 9)
        c.drawString(x, y, title)
        y -= 13
        c.setFont("Helvetica", 8)
        for line in text.splitlines():
            c.drawString(x, y, line[:110])
            y -= 11
        y -= 8

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer.read()


def generate_invoice_docx(invoice, totals):
    cur = totals.currency
    doc = Document()
    doc.add_heading("TAX INVOICE", level=1)
    doc.add_paragraph(f"Invoice #: {invoice.invoice_number}    Date: {invoice.invoice_date}"
                      + (f"    Due: {invoice.due_date}" if invoice.due_date else "")
                      + ("    Reverse Charge: Yes" if invoice.reverse_charge else ""))

    parties = doc.add_table(rows=1, cols=2)
    seller_cell, buyer_cell = parties.rows[0].cells
    seller_cell.text = "\n".join(filter(None, [
        "FROM", invoice.seller_name, invoice.seller_address,
        f"GSTIN: {invoice.seller_gstin}" if invoice.seller_gstin else "",
        f"PAN: {invoice.seller_pan}" if invoice.seller_pan else "",
    ]))
    buyer_cell.text = "\n".join(filter(None, [
        "BILL TO", invoice.buyer_name, invoice.buyer_address,
        f"GSTIN: {invoice.buyer_gstin}" if invoice.buyer_gstin else "",
        f"State: {state_name(invoice.buyer_state)}" if invoice.buyer_state else "",
    ]))

    doc.add_paragraph(f"Place of Supply: {state_name(invoice.place_of_supply)} "
                      f"({invoice.place_of_supply})  |  {_supply_label(totals)}")

    headers = ["#", "Description", "HSN/SAC", "Qty", "Rate", "Disc", "Taxable", "GST %", "Amount"]
    table = doc.add_table(rows=1, cols=len(headers))
    table.style = "Table Grid"
    for cell, header in zip(table.rows[0].cells, headers):
        cell.text = header
    for row in item_records(totals):
        cells = table.add_row().cells
        values = [
            str(row["sr"]), row["description"] or "-", row["hsn"] or "-", f"{row['qty']:g}",
            format_currency(row["rate"], cur), discount_text(row, cur),
            format_currency(row["taxable"], cur),
            f"{row['gst_rate']:g}%", format_currency(row["total"], cur),
        ]
        for cell, value in zip(cells, values):
            cell.text = value

    summary = doc.add_table(rows=0, cols=2)
    for label, amount in total_rows(invoice, totals):
        cells = summary.add_row().cells
        cells[0].text = label
        cells[1].text = _signed(amount, cur)

    words = doc.add_paragraph().add_run(totals.amount_in_words)
    words.italic = True
    words.font.size = Pt(9)

    bank = bank_rows(invoice)
    if bank:
        doc.add_heading("Bank Details", level=3)
        for label, value in bank:
            doc.add_paragraph(f"{label}: {value}")
    if invoice.terms_and_conditions:
        doc.add_heading("Terms & Conditions", level=3)
        doc.add_paragraph(invoice.terms_and_conditions)
    if invoice.notes:
        doc.add_heading("Notes", level=3)
        doc.add_paragraph(invoice.notes)

    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def generate_invoice_image_bytes(invoice, totals, width=1000, row_height=30):
    """PNG preview of the invoice."""
    cur = totals.currency
    rows = max(len(totals.line_items), 1) + len(total_rows(invoice, totals)) + 6
    height = rows * row_height + 200
    img = Image.new("RGB", (width, height), "white")
    draw = ImageDraw.Draw(img)

    try:
        font = ImageFont.truetype("arial.ttf", 14)
        font_bold = ImageFont.truetype("arialbd.ttf", 14)
    except OSError:
        font = ImageFont.load_default()
        font_bold = font

    y = 30
    draw.text((width/2 - 100, y), "TAX INVOICE", font=font_bold, fill="black")
    y += 40
    draw.text((50, y), f"Invoice: {invoice.invoice_number}", font=font, fill="black")
    draw.text((width/2, y), f"Date: {invoice.invoice_date}", font=font, fill="black")
    y += 30
    draw.text((50, y), f"Seller: {invoice.seller_name}", font=font, fill="black")
    draw.text((width/2, y), f"Buyer: {invoice.buyer_name}", font=font, fill="black")
    y += 25
    draw.text((50, y), _supply_label(totals), font=font, fill="black")
    y += 40

    header_text = "Sr   Description               HSN       Qty    Disc          GST%    Amount"
    draw.text((50, y), header_text, font=font_bold, fill="black")
    y += row_height

    for row in item_records(totals):
        item_text = (f"{row['sr']:<4} {row['description'][:24]:<24}  {row['hsn']:<8}  "
                     f"{row['qty']:<5g}  {discount_text(row, cur, f'{cur} '):<12}  "
                     f"{row['gst_rate']:<5g}  {_plain(row['total'], cur)}")
        draw.text((50, y), item_text, font=font, fill="black")
        y += row_height

    y += 20
    for label, amount in total_rows(invoice, totals):
        draw.text((width/2, y), label + ": " + _signed(amount, cur, f"{cur} "),
                  font=font_bold if label == "TOTAL" else font, fill="black")
        y += row_height
    draw.text((50, y), totals.amount_in_words, font=font, fill="black")

    buffer = BytesIO()
    img.save(buffer, format="PNG")
    buffer.seek(0)
    return buffer.getvalue()


def generate_invoice_xlsx_bytes(invoice, totals):
    items_df = pd.DataFrame(item_records(totals))
    rows = [{"label": label, "amount": amount} for label, amount in total_rows(invoice, totals)]
    rows.append({"label": "Amount in Words", "amount": totals.amount_in_words})
    totals_df = pd.DataFrame(rows)
    buffer = BytesIO()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        items_df.to_excel(writer, index=False, sheet_name="Items")
        totals_df.to_excel(writer, index=False, sheet_name="Totals")
        bank = bank_rows(invoice)
        if bank:
            pd.DataFrame(bank, columns=["label", "value"]).to_excel(
                writer, index=False, sheet_name="Bank Details")

        worksheet = writer.sheets["Items"]
        for column in worksheet.columns:
            longest = max(len(str(cell.value)) for cell in column if cell.value is not None)
            worksheet.column_dimensions[column[0].column_letter].width = min(longest + 2, 50)

    buffer.seek(0)
    return buffer.getvalue()


def generate_invoice_csv_bytes(totals):
    df = pd.DataFrame(item_records(totals))
    buffer = BytesIO()
    buffer.write(df.to_csv(index=False).encode('utf-8'))
    buffer.seek(0)
    return buffer.getvalue()
