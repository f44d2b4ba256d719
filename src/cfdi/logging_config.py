"""
Configuración de loguru para aplicaciones que usan el parser
"""
import sys
from pathlib import Path
from typing import Optional, Union
from loguru import logger

from .settings import Settings


def configurar_logging(
    nivel: Optional[str] = None,
    archivo: Optional[Union[str, Path]] = None,
    config: Optional[Settings] = None,
) -> Optional[Path]:
    """
    Configurar sistema de logging

    Args:
        nivel: Nivel para la consola. Si no se indica se usa config.log_level
        archivo: Ruta opcional de un archivo de log con rotación
        config: Configuración a usar. Por defecto Settings.from_env()

    Returns:
        Ruta del archivo de log, si se configuró uno
    """
    if config is None:
        config = Settings.from_env()

    logger.remove()  # Remover handler por defecto

    # Consola
    logger.add(
        sys.stderr,
        format=config.log_format,
        level=nivel or config.log_level,
        colorize=True,
    )

    if archivo is None:
        return None

    # Archivo
    log_file = Path(archivo)
    logger.add(
        str(log_file),
        format=config.log_format,
        level="DEBUG",
        rotation=config.log_rotation,
        retention=config.log_retention,
    )

    return log_file
