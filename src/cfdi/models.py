"""
Modelos de datos para comprobantes CFDI del SAT

Solo se modela la estructura básica del comprobante:

    Comprobante
    ├── Emisor
    ├── Receptor
    ├── Conceptos
    │   └── Concepto (0..n)
    └── Complemento (opcional)
        └── TimbreFiscalDigital (opcional)

Todos los modelos son inmutables; se construyen una sola vez desde el parser.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .datos_principales import DatosPrincipales


class TipoComprobante(Enum):
    """Tipos de comprobante CFDI"""
    INGRESO = "I"
    EGRESO = "E"
    TRASLADO = "T"
    NOMINA = "N"
    PAGO = "P"


@dataclass(frozen=True)
class Emisor:
    """Información del contribuyente emisor del comprobante"""

    rfc: str
    nombre: str  # Nombre, denominación o razón social
    regimen_fiscal: str  # Clave del régimen, ver catálogos del SAT


@dataclass(frozen=True)
class Receptor:
    """Información del contribuyente receptor del comprobante"""

    rfc: str
    nombre: str
    regimen_fiscal: str
    uso_cfdi: str  # Clave del uso que el receptor dará al CFDI


@dataclass(frozen=True)
class Concepto:
    """Representa un concepto/producto en la factura"""

    cantidad: Decimal
    descripcion: str
    valor_unitario: Decimal
    importe: Decimal
    clave_prod_serv: Optional[str] = None  # Clave del catálogo SAT (CFDI 3.3+)
    clave_unidad: Optional[str] = None  # Clave de unidad SAT (CFDI 3.3+)
    unidad: Optional[str] = None  # Descripción de la unidad
    descuento: Optional[Decimal] = None

    @property
    def importe_neto(self) -> Decimal:
        """Importe menos descuento"""
        return self.importe - (self.descuento or Decimal("0"))

    def to_dict(self) -> dict:
        """Convertir a diccionario"""
        return {
            'clave_prod_serv': self.clave_prod_serv,
            'cantidad': str(self.cantidad),
            'clave_unidad': self.clave_unidad,
            'unidad': self.unidad,
            'descripcion': self.descripcion,
            'valor_unitario': str(self.valor_unitario),
            'importe': str(self.importe),
            'descuento': str(self.descuento) if self.descuento is not None else None,
        }


@dataclass(frozen=True)
class Conceptos:
    """
    Lista de conceptos de la factura.

    Los conceptos se parsean de forma mínima (sin impuestos por concepto);
    `xml` conserva el subárbol original para quien necesite más detalle.
    """

    concepto: Tuple[Concepto, ...] = ()
    xml: Optional[str] = None

    def __len__(self) -> int:
        return len(self.concepto)

    def __iter__(self):
        return iter(self.concepto)


@dataclass(frozen=True)
class TimbreFiscalDigital:
    """Timbre fiscal: incluye el UUID, fecha de timbrado, certificado SAT, etc."""

    uuid: str
    fecha_timbrado: datetime
    no_certificado_sat: str
    version: Optional[str] = None
    rfc_prov_certif: Optional[str] = None
    sello_cfd: Optional[str] = None
    sello_sat: Optional[str] = None


@dataclass(frozen=True)
class Complemento:
    """
    Complemento de la factura. Incluye el TimbreFiscalDigital (si se encuentra).

    Otros complementos (pagos, nómina, impuestos locales...) no se modelan;
    se guardan como XML crudo en `otros`.
    """

    timbre_fiscal_digital: Optional[TimbreFiscalDigital] = None
    otros: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Comprobante:
    """Nodo principal del CFDI. De aquí se obtienen todos los demás subnodos."""

    total: Decimal
    subtotal: Decimal
    fecha: datetime
    forma_de_pago: str
    tipo_comprobante: str
    emisor: Emisor
    receptor: Receptor
    conceptos: Conceptos
    complemento: Optional[Complemento] = None
    descuento: Optional[Decimal] = None

    @property
    def tipo(self) -> Optional[TipoComprobante]:
        """Tipo de comprobante como enum, o None si la clave no es del catálogo"""
        try:
            return TipoComprobante(self.tipo_comprobante)
        except ValueError:
            return None

    @property
    def timbre_fiscal_digital(self) -> Optional[TimbreFiscalDigital]:
        """Timbre fiscal, si el comprobante tiene Complemento con timbre"""
        if self.complemento is None:
            return None
        return self.complemento.timbre_fiscal_digital

    def get_conceptos(self) -> Tuple[Concepto, ...]:
        """Regresa los conceptos de la factura"""
        return self.conceptos.concepto

    def get_uuid(self) -> Optional[str]:
        """UUID del timbre, o None si la factura no está timbrada"""
        timbre = self.timbre_fiscal_digital
        return timbre.uuid if timbre is not None else None

    def get_fecha_timbrado(self) -> Optional[datetime]:
        """Fecha de timbrado, o None si la factura no está timbrada"""
        timbre = self.timbre_fiscal_digital
        return timbre.fecha_timbrado if timbre is not None else None

    def get_datos_principales(self) -> 'DatosPrincipales':
        """Genera un DatosPrincipales con los datos del comprobante"""
        from .datos_principales import get_datos_principales
        return get_datos_principales(self)

    def __str__(self) -> str:
        return f"Comprobante {self.tipo_comprobante} - {self.emisor.nombre} - ${self.total:,.2f}"
