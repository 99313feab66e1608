"""
Minimal FA (3) invoice builder.

Produces a single-line VAT invoice (100.00 net, 23% VAT) suitable for
exercising the submission flow against the KSeF test environment.
"""

from datetime import datetime, timezone

from lxml import etree

FA_NAMESPACE = "http://crd.gov.pl/wzor/2025/06/25/13775/"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
ETD_NAMESPACE = "http://crd.gov.pl/xml/schematy/dziedzinowe/mf/2022/01/05/eD/DefinicjeTypy/"

NSMAP = {
    None: FA_NAMESPACE,
    "xsi": XSI_NAMESPACE,
    "etd": ETD_NAMESPACE,
}


def _fa(tag: str) -> str:
    return f"{{{FA_NAMESPACE}}}{tag}"


def _add(parent: etree._Element, tag: str, text: str | None = None) -> etree._Element:
    element = etree.SubElement(parent, _fa(tag))
    if text is not None:
        element.text = text
    return element


def _add_party(
    root: etree._Element, tag: str, nip: str, name: str, address: str
) -> etree._Element:
    party = _add(root, tag)
    identification = _add(party, "DaneIdentyfikacyjne")
    _add(identification, "NIP", nip)
    _add(identification, "Nazwa", name)
    address_el = _add(party, "Adres")
    _add(address_el, "KodKraju", "PL")
    _add(address_el, "AdresL1", address)
    return party


def create_minimal_invoice(
    seller_nip: str,
    buyer_nip: str,
    invoice_number: str,
    *,
    issued_at: datetime | None = None,
) -> str:
    """
    Build a minimal FA (3) invoice XML document.

    Args:
        seller_nip: Seller tax number (must match the authenticated context).
        buyer_nip: Buyer tax number.
        invoice_number: Seller's invoice number (P_2).
        issued_at: Creation time; defaults to now (UTC).

    Returns:
        UTF-8 XML text with declaration.
    """
    issued_at = (issued_at or datetime.now(timezone.utc)).astimezone(timezone.utc)
    issue_date = issued_at.strftime("%Y-%m-%d")

    root = etree.Element(_fa("Faktura"), nsmap=NSMAP)

    header = _add(root, "Naglowek")
    form_code = _add(header, "KodFormularza", "FA")
    form_code.set("kodSystemowy", "FA (3)")
    form_code.set("wersjaSchemy", "1-0E")
    _add(header, "WariantFormularza", "3")
    _add(header, "DataWytworzeniaFa", issued_at.strftime("%Y-%m-%dT%H:%M:%SZ"))
    _add(header, "SystemInfo", "KSeF Python Client")

    _add_party(
        root, "Podmiot1", seller_nip, "Test Seller Company", "ul. Testowa 1, 00-000 Warszawa"
    )
    buyer = _add_party(
        root, "Podmiot2", buyer_nip, "Test Buyer Company", "ul. Testowa 2, 00-000 Warszawa"
    )
    _add(buyer, "JST", "2")
    _add(buyer, "GV", "2")

    fa = _add(root, "Fa")
    _add(fa, "KodWaluty", "PLN")
    _add(fa, "P_1", issue_date)
    _add(fa, "P_2", invoice_number)
    _add(fa, "P_13_1", "100.00")
    _add(fa, "P_14_1", "23.00")
    _add(fa, "P_15", "123.00")

    annotations = _add(fa, "Adnotacje")
    for tag in ("P_16", "P_17", "P_18", "P_18A"):
        _add(annotations, tag, "2")
    _add(_add(annotations, "Zwolnienie"), "P_19N", "1")
    _add(_add(annotations, "NoweSrodkiTransportu"), "P_22N", "1")
    _add(annotations, "P_23", "2")
    _add(_add(annotations, "PMarzy"), "P_PMarzyN", "1")

    _add(fa, "RodzajFaktury", "VAT")

    line = _add(fa, "FaWiersz")
    _add(line, "NrWierszaFa", "1")
    _add(line, "P_7", "Test Item")
    _add(line, "P_8A", "szt")
    _add(line, "P_8B", "1")
    _add(line, "P_9A", "100.00")
    _add(line, "P_11", "100.00")
    _add(line, "P_11Vat", "23.00")
    _add(line, "P_12", "23")

    etree.indent(root)
    return etree.tostring(root, xml_declaration=True, encoding="UTF-8").decode("utf-8")
