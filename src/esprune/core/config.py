"""
Centralized configuration management with validation.
"""
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field, validator

from .errors import ConfigError

EXIT_MISSING_REGION = 1
EXIT_MISSING_URL = 2


class ElasticsearchConfig(BaseModel):
    """Target cluster configuration."""
    url: Optional[str] = None
    verify_certs: bool = True
    request_timeout: int = 30


class AwsConfig(BaseModel):
    """AWS signing configuration."""
    region: Optional[str] = None
    service: str = "es"
    profile: Optional[str] = None


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: Optional[str] = None
    max_size: int = 10485760  # 10MB
    backup_count: int = 5

    @validator('level')
    def validate_log_level(cls, v):
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()


class AppConfig(BaseModel):
    """Main application configuration."""
    elasticsearch: ElasticsearchConfig = Field(default_factory=ElasticsearchConfig)
    aws: AwsConfig = Field(default_factory=AwsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def require_settings(self) -> None:
        """Raise ConfigError if the region or the cluster URL is missing.

        The region is checked first, so a configuration missing both reports
        the region.
        """
        if not self.aws.region:
            raise ConfigError("AWS_REGION not set", exit_code=EXIT_MISSING_REGION)
        if not self.elasticsearch.url:
            raise ConfigError("ELASTICSEARCH_URL not set", exit_code=EXIT_MISSING_URL)


class ConfigManager:
    """Centralized configuration manager."""

    _instance: Optional['ConfigManager'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigManager':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def load_config(self, config_path: Optional[str] = None) -> AppConfig:
        """Load configuration from file and environment variables."""
        if self._config is not None:
            return self._config

        file_config = self._load_config_file(config_path)
        env_config = self._load_env_config()
        merged_config = self._merge_configs(file_config, env_config)

        self._config = AppConfig(**merged_config)
        return self._config

    def reset(self) -> None:
        """Forget the cached configuration so the next load re-reads it."""
        self._config = None

    def _load_config_file(self, config_path: Optional[str] = None) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if config_path is None:
            for path in ['config.yaml', 'config/config.yaml', Path.home() / '.esprune' / 'config.yaml']:
                if Path(path).exists():
                    config_path = str(path)
                    break

        if config_path is None or not Path(config_path).exists():
            return {}

        try:
            with open(config_path, 'r') as f:
                file_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error loading config from {config_path}: {e}") from e

        if not isinstance(file_config, dict):
            raise ConfigError(f"Config file {config_path} must contain a mapping, "
                              f"got {type(file_config).__name__}")
        return file_config

    def _load_env_config(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        env_config: Dict[str, Any] = {}

        if os.getenv('AWS_REGION'):
            env_config.setdefault('aws', {})['region'] = os.getenv('AWS_REGION')
        if os.getenv('AWS_PROFILE'):
            env_config.setdefault('aws', {})['profile'] = os.getenv('AWS_PROFILE')
        if os.getenv('ELASTICSEARCH_URL'):
            env_config.setdefault('elasticsearch', {})['url'] = os.getenv('ELASTICSEARCH_URL')
        if os.getenv('ESPRUNE_REQUEST_TIMEOUT'):
            env_config.setdefault('elasticsearch', {})['request_timeout'] = int(os.getenv('ESPRUNE_REQUEST_TIMEOUT'))

        if os.getenv('ESPRUNE_LOG_LEVEL'):
            env_config.setdefault('logging', {})['level'] = os.getenv('ESPRUNE_LOG_LEVEL')

        return env_config

    def _merge_configs(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge configuration dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_configs(result[key], value)
            else:
                result[key] = value

        return result


# Global config manager instance
config_manager = ConfigManager()


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load and return the application configuration."""
    return config_manager.load_config(config_path)
