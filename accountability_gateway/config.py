"""Configuration management using Pydantic Settings"""

from dataclasses import dataclass

from pydantic_settings import BaseSettings, SettingsConfigDict

from accountability_gateway.domain.exceptions import ConfigurationError


@dataclass(frozen=True)
class CollectionIds:
    """Identifiers of the five hosted collections"""

    cardio: str
    debt: str
    workouts: str
    bonuses: str
    balances: str


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Record store
    notion_api_key: str | None = None
    notion_api_base: str = "https://api.notion.com/v1"
    notion_version: str = "2022-06-28"
    notion_cardio_db_id: str | None = None
    notion_debt_db_id: str | None = None
    notion_workouts_db_id: str | None = None
    notion_bonuses_db_id: str | None = None
    notion_balances_db_id: str | None = None

    # Run ledger
    ledger_database_url: str = "sqlite:///./accountability_ledger.db"

    # Notifications
    discord_webhook_url: str | None = None
    notifier_username: str = "Accountability Coach"

    # Service
    service_name: str = "accountability-gateway"
    log_level: str = "INFO"
    timezone: str = "UTC"

    # HTTP Client
    http_timeout_seconds: float = 10.0
    webhook_max_retries: int = 3
    webhook_backoff_base: float = 1.0  # Exponential backoff base in seconds

    # Workout labels differ between deployments
    yoga_workout_type: str = "Yoga"
    lifting_workout_type: str = "Lifting"

    def collection_ids(self) -> CollectionIds:
        """
        Validate and return collection identifiers.

        Raises:
            ConfigurationError: Listing every missing identifier
        """
        ids = {
            "cardio": self.notion_cardio_db_id,
            "debt": self.notion_debt_db_id,
            "workouts": self.notion_workouts_db_id,
            "bonuses": self.notion_bonuses_db_id,
            "balances": self.notion_balances_db_id,
        }
        missing = [name for name, value in ids.items() if not value]
        if missing:
            raise ConfigurationError(f"Missing database IDs for: {', '.join(missing)}")
        return CollectionIds(**ids)


settings = Settings()
