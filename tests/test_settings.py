"""
Tests para la configuración y el logging
"""
import os

from loguru import logger

from cfdi import CFDIParser
from cfdi.logging_config import configurar_logging
from cfdi.settings import Settings


def test_settings_desde_entorno(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv('CFDI_LOG_LEVEL', 'debug')
    monkeypatch.setenv('CFDI_LOG_RETENTION', '7 days')

    config = Settings.from_env()

    assert config.log_level == 'DEBUG'
    assert config.log_retention == '7 days'


def test_settings_por_defecto(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    for variable in ('CFDI_LOG_LEVEL', 'CFDI_LOG_FORMAT', 'CFDI_LOG_ROTATION', 'CFDI_LOG_RETENTION'):
        monkeypatch.delenv(variable, raising=False)

    config = Settings.from_env()

    assert config.log_level == 'INFO'
    assert config.log_format == Settings().log_format
    assert config.log_rotation == '10 MB'


def test_settings_lee_archivo_env_solo_al_pedirlo(monkeypatch, tmp_path):
    # setenv + delenv deja registrada la variable para limpiarla al terminar
    monkeypatch.setenv('CFDI_LOG_LEVEL', 'INFO')
    monkeypatch.delenv('CFDI_LOG_LEVEL')
    monkeypatch.chdir(tmp_path)
    (tmp_path / '.env').write_text('CFDI_LOG_LEVEL=warning\n', encoding='utf-8')

    CFDIParser()
    assert 'CFDI_LOG_LEVEL' not in os.environ

    config = Settings.from_env()
    assert config.log_level == 'WARNING'


def test_parser_no_depende_de_settings():
    assert CFDIParser().conservar_xml is True
    assert CFDIParser(conservar_xml=False).conservar_xml is False


def test_configurar_logging_con_archivo(tmp_path):
    ruta = configurar_logging('WARNING', tmp_path / 'cfdi.log', config=Settings())
    try:
        logger.debug("mensaje de prueba")
    finally:
        logger.remove()

    assert ruta == tmp_path / 'cfdi.log'
    assert "mensaje de prueba" in ruta.read_text(encoding='utf-8')


def test_configurar_logging_sin_archivo():
    try:
        assert configurar_logging(config=Settings()) is None
    finally:
        logger.remove()
