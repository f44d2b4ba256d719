"""
Tabla de atributos de cada nodo del CFDI y sus reglas de conversión.

Cada modelo se llena a partir de una lista explícita de `Campo`: qué atributo
del XML lo alimenta, si es obligatorio y cómo se convierte. Así cualquier
regla de obligatoriedad o de tipo se revisa en un solo lugar.

Se soportan dos "dialectos" de nombres de atributo:
    - moderno: CFDI 3.3 / 4.0 (Total, SubTotal, FormaPago, Rfc, UUID...)
    - legado: nombres en minúscula (total, subtotal, formaDePago, rfc, uuid...)

Cada campo tiene un solo nombre por dialecto y la comparación es exacta
(sensible a mayúsculas): `subTotal` no cuenta como `subtotal`.
"""
import re
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Tuple

from lxml import etree

from .exceptions import (
    MissingRequiredAttribute,
    InvalidAttributeValue,
    NOT_A_NUMBER,
    NOT_A_DATE,
)

MODERNO = "moderno"
LEGADO = "legado"

# Formato de fecha del estándar: AAAA-MM-DDThh:mm:ss, sin zona horaria
FORMATO_FECHA = "%Y-%m-%dT%H:%M:%S"
_PATRON_FECHA = re.compile(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)

# Decimal no negativo, sin signo, sin notación científica ni separadores de miles
_PATRON_DECIMAL = re.compile(r"\d+(\.\d+)?", re.ASCII)


def parse_decimal(valor: str, elemento: str, atributo: str) -> Decimal:
    """
    Convertir el texto de un atributo a Decimal.

    Raises:
        InvalidAttributeValue: si el texto no es un decimal no negativo
    """
    if not _PATRON_DECIMAL.fullmatch(valor):
        raise InvalidAttributeValue(elemento, atributo, NOT_A_NUMBER, valor)
    try:
        return Decimal(valor)
    except InvalidOperation:
        raise InvalidAttributeValue(elemento, atributo, NOT_A_NUMBER, valor)


def parse_fecha(valor: str, elemento: str, atributo: str) -> datetime:
    """
    Convertir el texto de un atributo a datetime con el formato fijo del CFDI.

    Raises:
        InvalidAttributeValue: si el texto no coincide exactamente con el formato
            o no es una fecha válida (ej. 2023-02-30)
    """
    if not _PATRON_FECHA.fullmatch(valor):
        raise InvalidAttributeValue(elemento, atributo, NOT_A_DATE, valor)
    try:
        return datetime.strptime(valor, FORMATO_FECHA)
    except ValueError:
        raise InvalidAttributeValue(elemento, atributo, NOT_A_DATE, valor)


def parse_texto(valor: str, elemento: str, atributo: str) -> str:
    return valor


@dataclass(frozen=True)
class Campo:
    """Un atributo del modelo y de dónde sale en el XML"""

    atributo: str  # Nombre del campo en el dataclass
    moderno: str  # Nombre en CFDI 3.3 / 4.0
    legado: str  # Nombre en el dialecto en minúscula
    requerido: bool = True
    convertir: Callable[[str, str, str], Any] = parse_texto

    def nombre(self, dialecto: str) -> str:
        return self.moderno if dialecto == MODERNO else self.legado


CAMPOS_COMPROBANTE: Tuple[Campo, ...] = (
    Campo('total', 'Total', 'total', convertir=parse_decimal),
    Campo('subtotal', 'SubTotal', 'subtotal', convertir=parse_decimal),
    Campo('fecha', 'Fecha', 'fecha', convertir=parse_fecha),
    Campo('forma_de_pago', 'FormaPago', 'formaDePago'),
    Campo('tipo_comprobante', 'TipoDeComprobante', 'tipoDeComprobante'),
    Campo('descuento', 'Descuento', 'descuento', requerido=False, convertir=parse_decimal),
)

CAMPOS_EMISOR: Tuple[Campo, ...] = (
    Campo('rfc', 'Rfc', 'rfc'),
    Campo('nombre', 'Nombre', 'nombre'),
    Campo('regimen_fiscal', 'RegimenFiscal', 'regimenFiscal'),
)

CAMPOS_RECEPTOR: Tuple[Campo, ...] = (
    Campo('rfc', 'Rfc', 'rfc'),
    Campo('nombre', 'Nombre', 'nombre'),
    Campo('regimen_fiscal', 'RegimenFiscalReceptor', 'regimenFiscal'),
    Campo('uso_cfdi', 'UsoCFDI', 'usoCFDI'),
)

CAMPOS_CONCEPTO: Tuple[Campo, ...] = (
    Campo('clave_prod_serv', 'ClaveProdServ', 'claveProdServ', requerido=False),
    Campo('cantidad', 'Cantidad', 'cantidad', convertir=parse_decimal),
    Campo('clave_unidad', 'ClaveUnidad', 'claveUnidad', requerido=False),
    Campo('unidad', 'Unidad', 'unidad', requerido=False),
    Campo('descripcion', 'Descripcion', 'descripcion'),
    Campo('valor_unitario', 'ValorUnitario', 'valorUnitario', convertir=parse_decimal),
    Campo('importe', 'Importe', 'importe', convertir=parse_decimal),
    Campo('descuento', 'Descuento', 'descuento', requerido=False, convertir=parse_decimal),
)

CAMPOS_TIMBRE: Tuple[Campo, ...] = (
    Campo('uuid', 'UUID', 'uuid'),
    Campo('fecha_timbrado', 'FechaTimbrado', 'fechaTimbrado', convertir=parse_fecha),
    Campo('no_certificado_sat', 'NoCertificadoSAT', 'noCertificadoSAT'),
    Campo('version', 'Version', 'version', requerido=False),
    Campo('rfc_prov_certif', 'RfcProvCertif', 'rfcProvCertif', requerido=False),
    Campo('sello_cfd', 'SelloCFD', 'selloCFD', requerido=False),
    Campo('sello_sat', 'SelloSAT', 'selloSAT', requerido=False),
)


def detectar_dialecto(elem: etree._Element) -> str:
    """CFDI 3.3+ y el timbre 1.1 declaran `Version` con mayúscula"""
    return MODERNO if elem.get('Version') is not None else LEGADO


def nombre_local(elem: etree._Element) -> str:
    """Nombre del nodo sin namespace (cfdi:Emisor -> Emisor)"""
    if not isinstance(elem.tag, str):
        # Comentarios e instrucciones de procesamiento
        return ""
    return etree.QName(elem).localname


def leer_atributos(
    elem: etree._Element,
    elemento: str,
    campos: Tuple[Campo, ...],
    dialecto: str,
) -> Dict[str, Any]:
    """
    Leer y convertir los atributos de un nodo según su tabla de campos.

    Args:
        elem: Nodo XML
        elemento: Nombre del nodo para los mensajes de error
        campos: Tabla de campos del modelo
        dialecto: MODERNO o LEGADO

    Returns:
        Diccionario {atributo_del_modelo: valor_convertido}; los opcionales
        ausentes quedan en None

    Raises:
        MissingRequiredAttribute: si falta un atributo obligatorio
        InvalidAttributeValue: si un atributo no se puede convertir
    """
    valores: Dict[str, Any] = {}

    for campo in campos:
        nombre = campo.nombre(dialecto)
        texto = elem.get(nombre)

        if texto is None:
            if campo.requerido:
                raise MissingRequiredAttribute(elemento, nombre)
            valores[campo.atributo] = None
            continue

        valores[campo.atributo] = campo.convertir(texto, elemento, nombre)

    return valores
