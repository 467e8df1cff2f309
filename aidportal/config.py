import logging
import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource
from typing_extensions import Self


def default_data_dir() -> Path:
    """Data directory (database, attachments), overridable via AID_DATA_DIR."""
    override = os.environ.get("AID_DATA_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".local" / "share" / "aidportal"


class YamlConfigSettingsSource(PydanticBaseSettingsSource):
    """Load settings from YAML file specified by AID_CONFIG_FILE env var."""

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Get the value for a field from the YAML config."""
        yaml_data = self._load_yaml_config()
        field_value = yaml_data.get(field_name)
        return field_value, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return all settings from YAML file."""
        return self._load_yaml_config()

    def _load_yaml_config(self) -> dict[str, Any]:
        """Load config from YAML file if specified."""
        config_file = os.environ.get("AID_CONFIG_FILE")
        if config_file:
            path = Path(config_file)
            if path.exists():
                return yaml.safe_load(path.read_text()) or {}
        return {}


class Server(BaseModel):
    """Server configuration (nested in Config, uses env_nested_delimiter)."""

    name: str = "Event Aid Portal"
    version: str = "0.1.0"
    description: str = "Financial aid requests for scientific event attendance"


class DatabaseConfig(BaseModel):
    """Database configuration (nested in Config, uses env_nested_delimiter).

    An empty url means "derive a SQLite file under the data directory".
    """

    url: str = ""
    echo: bool = False
    auto_migrate: bool = True  # Auto-migrate for SQLite, manual for PostgreSQL


class LoggingConfig(BaseModel):
    """Logging configuration (nested in Config, uses env_nested_delimiter)."""

    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    @property
    def file(self) -> str | None:
        """Get log file path from AID_LOG_FILE env var."""
        return os.environ.get("AID_LOG_FILE")


class WorkerConfig(BaseModel):
    """Background worker configuration.

    Controls the outbox workers that dispatch notifications. Per-handler
    batch size and polling live on the handler classes.
    """

    enabled: bool = True
    stale_claim_interval: float = 60.0  # Seconds between stale-claim sweeps


# =============================================================================
# Authentication Configuration
# =============================================================================


class JwtConfig(BaseModel):
    """JWT configuration."""

    secret: str = ""  # Must be set in production
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 8 * 60


class AuthConfig(BaseModel):
    """Authentication configuration."""

    jwt: JwtConfig = JwtConfig()
    admin_secret: str = ""  # Shared administrator credential; empty disables admin login
    min_password_length: int = 6


# =============================================================================
# Program rules
# =============================================================================


class PolicyConfig(BaseModel):
    """Aid program rules.

    lead_time_days is enforced on submission; the deadlines are published
    through the rules endpoint.
    """

    lead_time_days: int = 15
    accountability_deadline_days: int = 30
    reimbursement_period_days: int = 60
    currency: str = "BRL"
    reference_fee: Decimal | None = None


class StorageConfig(BaseModel):
    """Attachment storage. An empty path means "<data dir>/attachments"."""

    path: str = ""
    max_upload_bytes: int = 20 * 1024 * 1024


class SmtpConfig(BaseModel):
    host: str = "localhost"
    port: int = 587
    username: str = ""
    password: str = ""
    use_tls: bool = True
    timeout: float = 10.0


class NotificationConfig(BaseModel):
    """Notification delivery.

    backend "log" only writes the rendered message to the log; "smtp" sends mail.
    """

    backend: Literal["log", "smtp"] = "log"
    sender: str = "noreply@aidportal.local"
    admin_recipients: list[str] = []  # Copied on every notification
    smtp: SmtpConfig = SmtpConfig()


class Config(BaseSettings):
    # These are BaseModel, so env_nested_delimiter handles their env vars
    server: Server = Server()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    worker: WorkerConfig = WorkerConfig()
    auth: AuthConfig = AuthConfig()
    policy: PolicyConfig = PolicyConfig()
    storage: StorageConfig = StorageConfig()
    notification: NotificationConfig = NotificationConfig()

    model_config = {
        "env_prefix": "AID_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",  # Allows AID_DATABASE__URL override
    }

    @model_validator(mode="after")
    def derive_paths(self) -> Self:
        """Fill the database url and storage path from the data dir when unset."""
        data_dir = default_data_dir()
        if not self.database.url:
            self.database = self.database.model_copy(
                update={"url": f"sqlite+aiosqlite:///{data_dir / 'aidportal.db'}"}
            )
        if not self.storage.path:
            self.storage = self.storage.model_copy(
                update={"path": str(data_dir / "attachments")}
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include YAML config.

        Priority (highest to lowest):
        1. init_settings - values passed to Config()
        2. env_settings - environment variables
        3. dotenv_settings - .env file
        4. yaml_settings - AID_CONFIG_FILE yaml
        5. file_secret_settings - secrets from files
        """
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


def configure_logging(config: LoggingConfig) -> None:
    """Configure Python logging based on config.

    Should be called early in application startup so all loggers pick up
    the configuration.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(config.level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(config.format, datefmt=config.date_format)

    if config.file:
        log_path = Path(config.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(config.level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(config.level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)

    logging.debug("Logging configured: level=%s, file=%s", config.level, config.file)
