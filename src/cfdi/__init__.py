# Deserialización de XML de CFDI en modelos tipados
from .xml_parser import CFDIParser, parse_cfdi, parse_comprobantes
from .datos_principales import DatosPrincipales, get_datos_principales
from .models import (
    Comprobante,
    Emisor,
    Receptor,
    Concepto,
    Conceptos,
    Complemento,
    TimbreFiscalDigital,
    TipoComprobante,
)
from .exceptions import (
    ParseError,
    MalformedXml,
    MissingRootElement,
    MissingRequiredChild,
    MissingRequiredAttribute,
    InvalidAttributeValue,
    NOT_A_NUMBER,
    NOT_A_DATE,
)

# Nombre corto
parse = parse_cfdi

__all__ = [
    'CFDIParser', 'parse', 'parse_cfdi', 'parse_comprobantes',
    'DatosPrincipales', 'get_datos_principales',
    'Comprobante', 'Emisor', 'Receptor', 'Concepto', 'Conceptos',
    'Complemento', 'TimbreFiscalDigital', 'TipoComprobante',
    'ParseError', 'MalformedXml', 'MissingRootElement', 'MissingRequiredChild',
    'MissingRequiredAttribute', 'InvalidAttributeValue', 'NOT_A_NUMBER', 'NOT_A_DATE',
]
