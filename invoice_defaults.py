"""Static reference data for GST invoicing: currencies, state codes, defaults."""
import uuid
from datetime import date
from types import MappingProxyType

BASE_CURRENCY = "INR"

GST_RATES = (0, 5, 12, 18, 28)

DISCOUNT_TYPES = ("percent", "flat")

# code -> (symbol, display name, spoken name used in amount-in-words)
_CURRENCY_ROWS = [
    ("INR", "₹", "Indian Rupee", "Rupees"),
    ("USD", "$", "US Dollar", "Dollars"),
    ("EUR", "€", "Euro", "Euros"),
    ("GBP", "£", "British Pound", "Pounds"),
    ("AED", "د.إ", "UAE Dirham", "Dirhams"),
    ("SGD", "S$", "Singapore Dollar", "Singapore Dollars"),
    ("AUD", "A$", "Australian Dollar", "Australian Dollars"),
    ("CAD", "C$", "Canadian Dollar", "Canadian Dollars"),
    ("JPY", "¥", "Japanese Yen", "Yen"),
]

CURRENCIES = MappingProxyType({
    code: MappingProxyType({"code": code, "symbol": symbol, "name": name, "spoken": spoken})
    for code, symbol, name, spoken in _CURRENCY_ROWS
})

# GST state codes used for seller state and place of supply
INDIAN_STATES = MappingProxyType({
    "01": "Jammu & Kashmir", "02": "Himachal Pradesh", "03": "Punjab",
    "04": "Chandigarh", "05": "Uttarakhand", "06": "Haryana",
    "07": "Delhi", "08": "Rajasthan", "09": "Uttar Pradesh",
    "10": "Bihar", "11": "Sikkim", "12": "Arunachal Pradesh",
    "13": "Nagaland", "14": "Manipur", "15": "Mizoram",
    "16": "Tripura", "17": "Meghalaya", "18": "Assam",
    "19": "West Bengal", "20": "Jharkhand", "21": "Odisha",
    "22": "Chhattisgarh", "23": "Madhya Pradesh", "24": "Gujarat",
    "26": "Dadra & Nagar Haveli and Daman & Diu",
    "27": "Maharashtra", "29": "Karnataka", "30": "Goa",
    "31": "Lakshadweep", "32": "Kerala", "33": "Tamil Nadu",
    "34": "Puducherry", "35": "Andaman & Nicobar", "36": "Telangana",
    "37": "Andhra Pradesh", "38": "Ladakh", "97": "Other Territory",
})


def get_currency(code):
    """Return the currency entry for `code`, falling back to the base currency."""
    return CURRENCIES.get(code) or CURRENCIES[BASE_CURRENCY]


def state_name(code):
    return INDIAN_STATES.get(code, code)


def create_empty_item():
    """Blank line item as the form layer creates it."""
    return {
        "id": uuid.uuid4().hex,
        "description": "",
        "hsn_code": "",
        "quantity": 1,
        "unit": "Nos",
        "rate": 0.0,
        "discount": 0.0,
        "discount_type": "percent",
        "gst_rate": 18,
    }


def default_invoice(seller_state="27", currency=BASE_CURRENCY, round_off=True):
    return {
        "currency": currency,
        "seller_name": "", "seller_address": "", "seller_gstin": "",
        "seller_state": seller_state, "seller_pan": "",
        "buyer_name": "", "buyer_address": "", "buyer_gstin": "",
        "buyer_state": seller_state,
        "invoice_number": "INV-001",
        "invoice_date": date.today().isoformat(),
        "due_date": "",
        "place_of_supply": seller_state,
        "reverse_charge": False,
        "items": [create_empty_item()],
        "shipping_charge": 0.0,
        "round_off": round_off,
        "terms_and_conditions": "",
        "notes": "",
        "bank_name": "", "account_number": "", "ifsc_code": "", "bank_branch": "",
    }
