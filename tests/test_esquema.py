"""
Tests para las reglas de conversión de atributos (cfdi.esquema)
"""
from datetime import datetime
from decimal import Decimal

import pytest
from lxml import etree

from cfdi.esquema import (
    CAMPOS_COMPROBANTE,
    CAMPOS_EMISOR,
    CAMPOS_TIMBRE,
    LEGADO,
    MODERNO,
    detectar_dialecto,
    leer_atributos,
    nombre_local,
    parse_decimal,
    parse_fecha,
)
from cfdi.exceptions import (
    InvalidAttributeValue,
    MissingRequiredAttribute,
    NOT_A_DATE,
    NOT_A_NUMBER,
)


class TestParseDecimal:

    @pytest.mark.parametrize("texto, esperado", [
        ("116.00", Decimal("116.00")),
        ("0", Decimal("0")),
        ("0.000001", Decimal("0.000001")),
        ("1234567.89", Decimal("1234567.89")),
    ])
    def test_valores_validos(self, texto, esperado):
        assert parse_decimal(texto, "Comprobante", "total") == esperado

    @pytest.mark.parametrize("texto", [
        "abc", "", "1e3", "-5.00", "+5", "1,234.56", " 116.00", "116.", ".5", "NaN", "116.00\n",
    ])
    def test_valores_invalidos(self, texto):
        with pytest.raises(InvalidAttributeValue) as exc:
            parse_decimal(texto, "Comprobante", "total")
        assert exc.value.reason == NOT_A_NUMBER
        assert exc.value.valor == texto


class TestParseFecha:

    def test_formato_del_estandar(self):
        assert parse_fecha("2023-05-01T12:00:00", "Comprobante", "fecha") == datetime(2023, 5, 1, 12, 0, 0)

    @pytest.mark.parametrize("texto", [
        "2023-05-01",
        "2023-05-01 12:00:00",
        "2023-05-01T12:00:00Z",
        "2023-05-01T12:00:00-06:00",
        "2023-05-01T12:00:00.123",
        "2023-02-30T00:00:00",
        "2023-05-01T25:00:00",
        "01/05/2023",
    ])
    def test_formatos_rechazados(self, texto):
        with pytest.raises(InvalidAttributeValue) as exc:
            parse_fecha(texto, "Comprobante", "fecha")
        assert exc.value.reason == NOT_A_DATE


class TestLeerAtributos:

    def test_dialecto(self):
        assert detectar_dialecto(etree.fromstring('<Comprobante Version="4.0"/>')) == MODERNO
        assert detectar_dialecto(etree.fromstring('<Comprobante version="3.2"/>')) == LEGADO
        assert detectar_dialecto(etree.fromstring('<Comprobante/>')) == LEGADO

    def test_nombre_local_ignora_namespace(self):
        elem = etree.fromstring('<cfdi:Emisor xmlns:cfdi="http://www.sat.gob.mx/cfd/4"/>')
        assert nombre_local(elem) == "Emisor"

    def test_emisor_moderno(self):
        elem = etree.fromstring('<Emisor Rfc="AAA010101AAA" Nombre="Emisor SA" RegimenFiscal="601"/>')
        datos = leer_atributos(elem, "Emisor", CAMPOS_EMISOR, MODERNO)
        assert datos == {"rfc": "AAA010101AAA", "nombre": "Emisor SA", "regimen_fiscal": "601"}

    def test_nombre_del_otro_dialecto_no_cuenta(self):
        elem = etree.fromstring('<Emisor Rfc="AAA010101AAA" Nombre="Emisor SA" RegimenFiscal="601"/>')
        with pytest.raises(MissingRequiredAttribute) as exc:
            leer_atributos(elem, "Emisor", CAMPOS_EMISOR, LEGADO)
        assert exc.value.attribute == "rfc"

    def test_opcionales_ausentes_quedan_en_none(self):
        elem = etree.fromstring(
            '<TimbreFiscalDigital uuid="1234-ABCD" fechaTimbrado="2023-05-01T12:05:00" noCertificadoSAT="1"/>'
        )
        datos = leer_atributos(elem, "TimbreFiscalDigital", CAMPOS_TIMBRE, LEGADO)
        assert datos["uuid"] == "1234-ABCD"
        assert datos["version"] is None
        assert datos["sello_sat"] is None

    def test_variante_de_mayusculas_no_cuenta_en_legado(self):
        elem = etree.fromstring(
            '<Comprobante total="116.00" subTotal="100.00" fecha="2023-05-01T12:00:00" '
            'formaDePago="01" tipoDeComprobante="I"/>'
        )
        with pytest.raises(MissingRequiredAttribute) as exc:
            leer_atributos(elem, "Comprobante", CAMPOS_COMPROBANTE, LEGADO)
        assert exc.value.element == "Comprobante"
        assert exc.value.attribute == "subtotal"

    def test_timbre_legado_con_uuid_en_mayusculas(self):
        elem = etree.fromstring(
            '<TimbreFiscalDigital UUID="1234-ABCD" '
            'FechaTimbrado="2017-01-10T09:00:00" noCertificadoSAT="1"/>'
        )
        with pytest.raises(MissingRequiredAttribute) as exc:
            leer_atributos(elem, "TimbreFiscalDigital", CAMPOS_TIMBRE, detectar_dialecto(elem))
        assert exc.value.attribute == "uuid"

    def test_timbre_legado_con_fecha_en_mayusculas(self):
        elem = etree.fromstring(
            '<TimbreFiscalDigital uuid="1234-ABCD" '
            'FechaTimbrado="2017-01-10T09:00:00" noCertificadoSAT="1"/>'
        )
        with pytest.raises(MissingRequiredAttribute) as exc:
            leer_atributos(elem, "TimbreFiscalDigital", CAMPOS_TIMBRE, LEGADO)
        assert exc.value.attribute == "fechaTimbrado"
