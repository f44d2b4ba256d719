"""
Configuración de logging para aplicaciones que usan el parser.

El parser no lee esta configuración: el resultado de parsear un XML depende
solo del texto recibido. Las variables de entorno y los archivos .env se
cargan únicamente cuando se llama a Settings.from_env().
"""
import os
from dataclasses import dataclass
from dotenv import load_dotenv, find_dotenv


@dataclass
class Settings:
    """Configuración de logging"""

    log_level: str = "INFO"
    log_format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name} | {message}"
    log_rotation: str = "10 MB"
    log_retention: str = "30 days"

    @classmethod
    def from_env(cls) -> 'Settings':
        """Crear configuración desde variables de entorno"""
        # .env.local sobreescribe .env (para desarrollo sin modificar .env compartido)
        load_dotenv(find_dotenv('.env', usecwd=True))
        load_dotenv(find_dotenv('.env.local', usecwd=True), override=True)

        return cls(
            log_level=os.getenv('CFDI_LOG_LEVEL', 'INFO').upper(),
            log_format=os.getenv('CFDI_LOG_FORMAT', cls.log_format),
            log_rotation=os.getenv('CFDI_LOG_ROTATION', cls.log_rotation),
            log_retention=os.getenv('CFDI_LOG_RETENTION', cls.log_retention),
        )
