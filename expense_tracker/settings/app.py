from zoneinfo import ZoneInfo

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='app_')

    app_name: str = "Expense Tracker API"
    log_level: str = "INFO"

    jwt_secret: SecretStr
    token_ttl_minutes: int = 60 * 24
    bcrypt_rounds: int = 12

    timezone: str = "UTC"
    currency: str = "INR"

    create_tables: bool = False

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)
