"""
FA (3) invoice document helpers: building, parsing and field translation.
"""

from ksef_client.invoice.mapping import FIELD_MAP, map_to_english
from ksef_client.invoice.parser import xml_to_dict
from ksef_client.invoice.template import create_minimal_invoice

__all__ = ["FIELD_MAP", "create_minimal_invoice", "map_to_english", "xml_to_dict"]
