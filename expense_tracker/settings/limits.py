from typing import Annotated

from annotated_types import Ge, Gt, Le
from pydantic_settings import BaseSettings, SettingsConfigDict


class LimitSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LIMITS_")

    warning_threshold: Annotated[float, Gt(gt=0), Le(le=100)] = 80.0
    history_size: Annotated[int, Ge(ge=1)] = 50
