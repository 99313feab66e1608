"""
XML to dict conversion for downloaded invoices.

Conventions:
- element names lose their namespace URI but keep their prefix, if any;
- attributes and namespace declarations are keys prefixed with "@_";
- text of an element that also has attributes or children is under "#text",
  the segments around child elements joined in document order;
- leaf elements without attributes become their text ("" when empty);
- repeated sibling elements become lists.

Values are kept as strings.
"""

from typing import Any

from lxml import etree

from ksef_client.exceptions import KsefError

ATTRIBUTE_PREFIX = "@_"
TEXT_KEY = "#text"


def _name(element: etree._Element) -> str:
    qname = etree.QName(element)
    return f"{element.prefix}:{qname.localname}" if element.prefix else qname.localname


def _attribute_name(key: str, nsmap: dict[str | None, str]) -> str:
    qname = etree.QName(key)
    if qname.namespace is None:
        return ATTRIBUTE_PREFIX + qname.localname
    prefix = next((p for p, uri in nsmap.items() if uri == qname.namespace and p), None)
    local = f"{prefix}:{qname.localname}" if prefix else qname.localname
    return ATTRIBUTE_PREFIX + local


def _namespace_declarations(element: etree._Element) -> dict[str, str]:
    parent = element.getparent()
    inherited = parent.nsmap if parent is not None else {}
    declarations = {}
    for prefix, uri in element.nsmap.items():
        if inherited.get(prefix) == uri:
            continue
        key = "xmlns" if prefix is None else f"xmlns:{prefix}"
        declarations[ATTRIBUTE_PREFIX + key] = uri
    return declarations


def _convert(element: etree._Element) -> Any:
    node: dict[str, Any] = _namespace_declarations(element)
    for key, value in element.attrib.items():
        node[_attribute_name(key, element.nsmap)] = value

    texts = [(element.text or "").strip()]
    for child in element:
        texts.append((child.tail or "").strip())
        if not isinstance(child.tag, str):
            continue  # comments, processing instructions
        name = _name(child)
        value = _convert(child)
        if name not in node:
            node[name] = value
        elif isinstance(node[name], list):
            node[name].append(value)
        else:
            node[name] = [node[name], value]

    text = "".join(texts)
    if not node:
        return text
    if text:
        node[TEXT_KEY] = text
    return node


def xml_to_dict(xml: str | bytes) -> dict[str, Any]:
    """
    Parse an XML document into nested dicts.

    Raises:
        KsefError: If the document is not well-formed.
    """
    data = xml.encode("utf-8") if isinstance(xml, str) else xml
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(data, parser)
    except etree.XMLSyntaxError as e:
        msg = f"Invalid invoice XML: {e}"
        raise KsefError(msg) from e
    return {_name(root): _convert(root)}
