from typing import Annotated

from annotated_types import Ge
from pydantic_settings import BaseSettings, SettingsConfigDict


class NotificationSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NOTIFICATIONS_")

    recheck_interval_minutes: Annotated[int, Ge(ge=1)] = 5
    display_limit: Annotated[int, Ge(ge=1)] = 5
    # sessions without an open socket are dropped after this long without access
    session_idle_minutes: Annotated[int, Ge(ge=1)] = 30
