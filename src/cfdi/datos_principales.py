"""
Datos principales de un comprobante en un solo nivel.

Asume que el comprobante ya fue parseado correctamente; no incluye datos
que ocupan mucho espacio o que casi nunca se usan (sellos, certificados, etc.).
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from .models import Comprobante, Complemento, Concepto, TimbreFiscalDigital


@dataclass(frozen=True)
class DatosPrincipales:
    """
    Resumen de un Comprobante.

    El UUID, la fecha de timbrado y el certificado SAT dependen de que exista
    Complemento -> TimbreFiscalDigital, por eso se exponen como métodos que
    regresan None en lugar de campos obligatorios.
    """

    emisor_rfc: str
    emisor_nombre: str
    receptor_rfc: str
    receptor_nombre: str
    subtotal: Decimal
    total: Decimal
    fecha: datetime
    conceptos: Tuple[Concepto, ...] = ()
    complemento: Optional[Complemento] = None

    def _timbre(self) -> Optional[TimbreFiscalDigital]:
        if self.complemento is None:
            return None
        return self.complemento.timbre_fiscal_digital

    def get_uuid(self) -> Optional[str]:
        """UUID del timbre, o None si no hay Complemento o no trae timbre"""
        timbre = self._timbre()
        if timbre is None:
            return None
        return timbre.uuid

    def get_fecha_timbrado(self) -> Optional[datetime]:
        """Fecha de timbrado, o None si no hay Complemento o no trae timbre"""
        timbre = self._timbre()
        if timbre is None:
            return None
        return timbre.fecha_timbrado

    def get_no_certificado_sat(self) -> Optional[str]:
        """Número de certificado del SAT, o None si no hay timbre"""
        timbre = self._timbre()
        if timbre is None:
            return None
        return timbre.no_certificado_sat

    @property
    def timbrado(self) -> bool:
        """True si el comprobante trae TimbreFiscalDigital"""
        return self._timbre() is not None

    def to_dict(self) -> dict:
        """Convertir a diccionario para reportes"""
        fecha_timbrado = self.get_fecha_timbrado()
        return {
            'emisor_rfc': self.emisor_rfc,
            'emisor_nombre': self.emisor_nombre,
            'receptor_rfc': self.receptor_rfc,
            'receptor_nombre': self.receptor_nombre,
            'subtotal': str(self.subtotal),
            'total': str(self.total),
            'fecha': self.fecha.isoformat(),
            'uuid': self.get_uuid(),
            'fecha_timbrado': fecha_timbrado.isoformat() if fecha_timbrado else None,
            'no_certificado_sat': self.get_no_certificado_sat(),
            'conceptos': [c.to_dict() for c in self.conceptos],
        }

    def __str__(self) -> str:
        return f"{self.emisor_nombre} ({self.emisor_rfc}) - ${self.total:,.2f} - {self.get_uuid() or 'sin timbre'}"


def get_datos_principales(comprobante: Comprobante) -> DatosPrincipales:
    """Genera un DatosPrincipales con los datos del comprobante"""
    return DatosPrincipales(
        emisor_rfc=comprobante.emisor.rfc,
        emisor_nombre=comprobante.emisor.nombre,
        receptor_rfc=comprobante.receptor.rfc,
        receptor_nombre=comprobante.receptor.nombre,
        subtotal=comprobante.subtotal,
        total=comprobante.total,
        fecha=comprobante.fecha,
        conceptos=comprobante.get_conceptos(),
        complemento=comprobante.complemento,
    )
