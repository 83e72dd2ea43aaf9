"""
Configuration for the slide repair service.
"""

from slide_repair.config.repair_config import (
    Config,
    RepairConfig,
    ServerConfig,
    LogConfig,
    get_config,
    get_config_dict,
    get_repair_config,
    get_server_config,
)
from slide_repair.config.logging_config import get_logging_config, apply_logging_config

__all__ = [
    'Config',
    'RepairConfig',
    'ServerConfig',
    'LogConfig',
    'get_config',
    'get_config_dict',
    'get_repair_config',
    'get_server_config',
    'get_logging_config',
    'apply_logging_config',
]
