"""
Configuration for the slide repair service, read from environment variables.

Nothing here changes what `repair` does to a slide; these settings only
control logging, output validation at the API edge and batch parallelism.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List

from slide_repair.exceptions import ConfigurationError


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


@dataclass
class RepairConfig:
    """Repair engine configuration"""
    log_actions: bool = field(default_factory=lambda: _env_flag('REPAIR_LOG_ACTIONS', 'true'))
    validate_output: bool = field(default_factory=lambda: _env_flag('REPAIR_VALIDATE_OUTPUT', 'true'))
    max_workers: int = field(default_factory=lambda: int(os.getenv('REPAIR_MAX_WORKERS', '8')))


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str = field(default_factory=lambda: os.getenv('HOST', '0.0.0.0'))
    port: int = field(default_factory=lambda: int(os.getenv('PORT', '9090')))
    cors_origins: List[str] = field(
        default_factory=lambda: [o.strip() for o in os.getenv('CORS_ORIGINS', '*').split(',') if o.strip()]
    )
    max_batch_size: int = field(default_factory=lambda: int(os.getenv('MAX_BATCH_SIZE', '50')))
    sentry_dsn: str = field(default_factory=lambda: os.getenv('SENTRY_DSN', ''))
    environment: str = field(default_factory=lambda: os.getenv('ENV', 'development'))


@dataclass
class LogConfig:
    """Logging configuration"""
    level: str = field(default_factory=lambda: os.getenv('LOG_LEVEL', 'INFO'))


@dataclass
class Config:
    """Master configuration"""
    repair: RepairConfig = field(default_factory=RepairConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LogConfig = field(default_factory=LogConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            'repair': {
                'log_actions': self.repair.log_actions,
                'validate_output': self.repair.validate_output,
                'max_workers': self.repair.max_workers
            },
            'server': {
                'host': self.server.host,
                'port': self.server.port,
                'cors_origins': list(self.server.cors_origins),
                'max_batch_size': self.server.max_batch_size,
                'environment': self.server.environment
            },
            'logging': {
                'level': self.logging.level
            }
        }

    def validate(self) -> None:
        """Validate configuration values"""
        if self.repair.max_workers < 1:
            raise ConfigurationError(
                f"REPAIR_MAX_WORKERS must be at least 1, got {self.repair.max_workers}",
                context={'setting': 'REPAIR_MAX_WORKERS'}
            )

        if self.server.port < 1 or self.server.port > 65535:
            raise ConfigurationError(
                f"PORT must be between 1 and 65535, got {self.server.port}",
                context={'setting': 'PORT'}
            )

        if self.server.max_batch_size < 1:
            raise ConfigurationError(
                f"MAX_BATCH_SIZE must be at least 1, got {self.server.max_batch_size}",
                context={'setting': 'MAX_BATCH_SIZE'}
            )

        if self.logging.level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ConfigurationError(
                f"LOG_LEVEL must be a standard logging level, got {self.logging.level}",
                context={'setting': 'LOG_LEVEL'}
            )


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Get singleton configuration instance"""
    try:
        config = Config()
    except ValueError as e:
        raise ConfigurationError("Invalid numeric configuration value", cause=e) from e
    config.validate()
    return config


def get_config_dict() -> Dict[str, Any]:
    """Get configuration as dictionary"""
    return get_config().to_dict()


def get_repair_config() -> RepairConfig:
    """Get repair engine configuration"""
    return get_config().repair


def get_server_config() -> ServerConfig:
    """Get HTTP server configuration"""
    return get_config().server
