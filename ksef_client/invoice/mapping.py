"""
FA (3) field name translation to English.

A static lookup table applied recursively to parsed invoices. Keys missing
from the table, including attributes, are kept as they are.
"""

from typing import Any

FIELD_MAP: dict[str, str] = {
    # Root
    "Faktura": "Invoice",
    # Header
    "Naglowek": "Header",
    "KodFormularza": "FormCode",
    "WariantFormularza": "FormVariant",
    "DataWytworzeniaFa": "InvoiceCreationDate",
    "SystemInfo": "SystemInfo",
    # Subjects
    "Podmiot1": "Seller",
    "Podmiot2": "Buyer",
    "Podmiot3": "ThirdParty",
    "DaneIdentyfikacyjne": "IdentificationData",
    "NIP": "TaxId",
    "Nazwa": "Name",
    "Adres": "Address",
    "KodKraju": "CountryCode",
    "AdresL1": "AddressLine1",
    "AdresL2": "AddressLine2",
    "JST": "LocalGovernmentUnit",
    "GV": "GovernmentUnit",
    # Invoice data
    "Fa": "InvoiceData",
    "KodWaluty": "CurrencyCode",
    "P_1": "IssueDate",
    "P_2": "InvoiceNumber",
    "P_13_1": "NetAmount23",
    "P_13_2": "NetAmount8",
    "P_13_3": "NetAmount5",
    "P_13_4": "NetAmount0",
    "P_13_5": "NetAmountExempt",
    "P_14_1": "VatAmount23",
    "P_14_2": "VatAmount8",
    "P_14_3": "VatAmount5",
    "P_15": "GrossAmount",
    "RodzajFaktury": "InvoiceType",
    # Annotations
    "Adnotacje": "Annotations",
    "P_16": "SelfBilling",
    "P_17": "ReverseCharge",
    "P_18": "SplitPayment",
    "P_18A": "SplitPaymentMandatory",
    "Zwolnienie": "Exemption",
    "P_19N": "NoExemption",
    "NoweSrodkiTransportu": "NewTransportMeans",
    "P_22N": "NoNewTransportMeans",
    "P_23": "MarginScheme",
    "PMarzy": "MarginProcedure",
    "P_PMarzyN": "NoMarginProcedure",
    # Lines
    "FaWiersz": "InvoiceLine",
    "NrWierszaFa": "LineNumber",
    "P_7": "Description",
    "P_8A": "Unit",
    "P_8B": "Quantity",
    "P_9A": "UnitPrice",
    "P_9B": "UnitPriceGross",
    "P_11": "NetValue",
    "P_11Vat": "VatValue",
    "P_12": "VatRate",
}


def map_to_english(data: Any) -> Any:
    """Return a copy of ``data`` with FA field names replaced by English ones."""
    if isinstance(data, list):
        return [map_to_english(item) for item in data]
    if isinstance(data, dict):
        return {FIELD_MAP.get(key, key): map_to_english(value) for key, value in data.items()}
    return data
