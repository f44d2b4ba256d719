"""
Parser de archivos XML CFDI del SAT
Convierte el XML de una factura electrónica mexicana en modelos tipados

El texto se recibe ya decodificado y siempre se interpreta como UTF-8, aunque
el documento declare otra codificación en `<?xml ... encoding=...?>`.

Los conceptos se parsean con las mismas reglas estrictas que el resto del
comprobante: un Concepto con `cantidad` o `importe` inválidos hace fallar el
documento completo, en lugar de omitirse con una advertencia. Así un
Comprobante parseado nunca trae menos conceptos de los que tiene el XML.
"""
from typing import Optional, List, Tuple
from lxml import etree
from loguru import logger

from .esquema import (
    CAMPOS_COMPROBANTE,
    CAMPOS_EMISOR,
    CAMPOS_RECEPTOR,
    CAMPOS_CONCEPTO,
    CAMPOS_TIMBRE,
    detectar_dialecto,
    leer_atributos,
    nombre_local,
)
from .exceptions import (
    ParseError,
    MalformedXml,
    MissingRootElement,
    MissingRequiredChild,
)
from .models import (
    Comprobante,
    Emisor,
    Receptor,
    Concepto,
    Conceptos,
    Complemento,
    TimbreFiscalDigital,
)


class CFDIParser:
    """Parser para XML de CFDI (atributos en minúscula, 3.3 y 4.0)"""

    def __init__(self, conservar_xml: bool = True):
        """
        Args:
            conservar_xml: Guardar el XML crudo de Conceptos y de complementos
                no modelados
        """
        self.conservar_xml = conservar_xml
        self.errores: List[str] = []

    def parse(self, xml_content: str) -> Comprobante:
        """
        Parsear contenido XML como string

        Args:
            xml_content: Contenido XML (texto ya decodificado, se asume UTF-8)

        Returns:
            Comprobante con todos sus subnodos

        Raises:
            ParseError: alguna de sus subclases, según la falla encontrada
        """
        root = self._leer_raiz(xml_content)

        if nombre_local(root) != 'Comprobante':
            raise MissingRootElement(nombre_local(root) or str(root.tag))

        comprobante = self._parse_comprobante(root)
        logger.debug(
            f"Comprobante parseado: {comprobante.emisor.rfc} -> {comprobante.receptor.rfc}, "
            f"UUID {comprobante.get_uuid() or 'sin timbre'}"
        )
        return comprobante

    def parse_string(self, xml_content: str) -> Optional[Comprobante]:
        """
        Igual que parse(), pero registra el error en `self.errores` y
        regresa None en lugar de lanzar la excepción.
        """
        try:
            return self.parse(xml_content)
        except ParseError as e:
            logger.error(f"Error al parsear XML string: {e}")
            self.errores.append(f"Error al parsear: {e}")
            return None

    def _leer_raiz(self, xml_content: str) -> etree._Element:
        """Convertir el texto a un árbol lxml (UTF-8 fijo, sin resolver entidades ni usar red)"""
        if not xml_content or not xml_content.strip():
            raise MalformedXml("documento vacío")

        parser = etree.XMLParser(encoding='utf-8', resolve_entities=False, no_network=True)
        try:
            return etree.fromstring(xml_content.encode('utf-8'), parser=parser)
        except etree.XMLSyntaxError as e:
            raise MalformedXml(str(e)) from e

    def _parse_comprobante(self, root: etree._Element) -> Comprobante:
        """Parsear el nodo principal del comprobante"""
        dialecto = detectar_dialecto(root)
        datos = leer_atributos(root, 'Comprobante', CAMPOS_COMPROBANTE, dialecto)

        emisor = self._hijo_unico(root, 'Emisor')
        receptor = self._hijo_unico(root, 'Receptor')

        return Comprobante(
            emisor=Emisor(**leer_atributos(emisor, 'Emisor', CAMPOS_EMISOR, dialecto)),
            receptor=Receptor(**leer_atributos(receptor, 'Receptor', CAMPOS_RECEPTOR, dialecto)),
            conceptos=self._parse_conceptos(root, dialecto),
            complemento=self._parse_complemento(root),
            **datos,
        )

    def _hijo_unico(self, root: etree._Element, nombre: str) -> etree._Element:
        """Ubicar un subnodo obligatorio que debe aparecer exactamente una vez"""
        encontrados = self._hijos(root, nombre)
        if len(encontrados) != 1:
            raise MissingRequiredChild(nombre, len(encontrados))
        return encontrados[0]

    def _hijos(self, elem: etree._Element, nombre: str) -> List[etree._Element]:
        return [hijo for hijo in elem if nombre_local(hijo) == nombre]

    def _parse_conceptos(self, root: etree._Element, dialecto: str) -> Conceptos:
        """Parsear los conceptos de la factura de forma mínima"""
        nodos = self._hijos(root, 'Conceptos')
        if not nodos:
            return Conceptos()

        conceptos_node = nodos[0]
        conceptos = tuple(
            Concepto(**leer_atributos(concepto_elem, 'Concepto', CAMPOS_CONCEPTO, dialecto))
            for concepto_elem in self._hijos(conceptos_node, 'Concepto')
        )

        return Conceptos(concepto=conceptos, xml=self._xml_crudo(conceptos_node))

    def _parse_complemento(self, root: etree._Element) -> Optional[Complemento]:
        """Parsear el Complemento (opcional) y su TimbreFiscalDigital (opcional)"""
        nodos = self._hijos(root, 'Complemento')
        if not nodos:
            return None
        if len(nodos) > 1:
            logger.warning(f"Se encontraron {len(nodos)} nodos Complemento, se usa el primero")

        timbre = None
        otros: List[str] = []
        for hijo in nodos[0]:
            nombre = nombre_local(hijo)
            if not nombre:
                continue
            if nombre == 'TimbreFiscalDigital' and timbre is None:
                timbre = self._parse_timbre(hijo)
            elif self.conservar_xml:
                otros.append(self._xml_crudo(hijo))

        return Complemento(timbre_fiscal_digital=timbre, otros=tuple(otros))

    def _parse_timbre(self, elem: etree._Element) -> TimbreFiscalDigital:
        """El timbre 1.1 usa `Version`; el 1.0 usa `version`"""
        datos = leer_atributos(elem, 'TimbreFiscalDigital', CAMPOS_TIMBRE, detectar_dialecto(elem))
        return TimbreFiscalDigital(**datos)

    def _xml_crudo(self, elem: etree._Element) -> Optional[str]:
        if not self.conservar_xml:
            return None
        return etree.tostring(elem, encoding='unicode', with_tail=False)


def parse_cfdi(xml_content: str) -> Comprobante:
    """Intenta generar un Comprobante a partir del texto de un XML"""
    return CFDIParser().parse(xml_content)


def parse_comprobantes(xmls: List[str]) -> Tuple[List[Comprobante], List[str]]:
    """
    Parsear varios XML ya leídos, sin detenerse en el primero que falle.

    Returns:
        (comprobantes parseados, mensajes de error)
    """
    parser = CFDIParser()
    comprobantes = []

    for xml_content in xmls:
        comprobante = parser.parse_string(xml_content)
        if comprobante is not None:
            comprobantes.append(comprobante)

    logger.info(f"Parseados exitosamente {len(comprobantes)} de {len(xmls)} comprobantes")

    return comprobantes, parser.errores
