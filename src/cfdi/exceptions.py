"""
Excepciones del parser de CFDI.

Cada tipo de falla es una clase distinta para que quien llama pueda
distinguir entre "el XML está roto" y "al comprobante le falta el Emisor"
sin tener que interpretar mensajes de texto.

Jerarquía:
    ParseError
    ├── MalformedXml                → El texto no es XML bien formado
    ├── MissingRootElement          → El nodo raíz no es un Comprobante
    ├── MissingRequiredChild        → Falta (o está duplicado) Emisor/Receptor
    ├── MissingRequiredAttribute    → Falta un atributo obligatorio
    └── InvalidAttributeValue       → Un atributo no se pudo convertir
"""

# Motivos posibles de InvalidAttributeValue
NOT_A_NUMBER = "not-a-number"
NOT_A_DATE = "not-a-date"


class ParseError(Exception):
    """Excepción base. Todas las fallas de parseo heredan de esta."""


class MalformedXml(ParseError):
    """El texto recibido no es un documento XML bien formado."""

    def __init__(self, detalle: str = ""):
        self.detalle = detalle
        mensaje = "El contenido no es XML bien formado"
        if detalle:
            mensaje += f": {detalle}"
        super().__init__(mensaje)


class MissingRootElement(ParseError):
    """El nodo raíz del documento no es un Comprobante."""

    def __init__(self, encontrado: str = ""):
        self.encontrado = encontrado
        mensaje = "No se encontró el nodo raíz Comprobante"
        if encontrado:
            mensaje += f" (raíz encontrada: {encontrado})"
        super().__init__(mensaje)


class MissingRequiredChild(ParseError):
    """
    Un subnodo obligatorio (Emisor o Receptor) no existe, o aparece
    más de una vez.
    """

    def __init__(self, which: str, encontrados: int = 0):
        self.which = which
        self.encontrados = encontrados
        if encontrados == 0:
            mensaje = f"Falta el nodo obligatorio {which}"
        else:
            mensaje = f"Se esperaba exactamente un nodo {which}, se encontraron {encontrados}"
        super().__init__(mensaje)


class MissingRequiredAttribute(ParseError):
    """Un atributo obligatorio no está presente en su nodo."""

    def __init__(self, element: str, attribute: str):
        self.element = element
        self.attribute = attribute
        super().__init__(f"Falta el atributo obligatorio '{attribute}' en {element}")


class InvalidAttributeValue(ParseError):
    """Un atributo presente no se pudo convertir a su tipo (número o fecha)."""

    def __init__(self, element: str, attribute: str, reason: str, valor: str = ""):
        self.element = element
        self.attribute = attribute
        self.reason = reason
        self.valor = valor
        super().__init__(
            f"Valor inválido en {element}@{attribute}: '{valor}' ({reason})"
        )
