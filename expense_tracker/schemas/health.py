from datetime import datetime
from typing import Literal

from expense_tracker.schemas.base import BaseSchema


class JobSchema(BaseSchema):
    id: str
    name: str
    next_run_time: datetime | None


class HealthSchema(BaseSchema):
    status: Literal["ok", "error"]
    jobs: list[JobSchema]
    active_sessions: int
