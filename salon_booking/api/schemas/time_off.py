from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class TimeOffCreate(BaseModel):
    business_id: str
    staff_id: str = Field(description='Staff member id, or "all" for the whole business')
    start_at: datetime
    end_at: datetime
    reason: str = Field(default="", max_length=255)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeOffCreate":
        if self.start_at >= self.end_at:
            raise ValueError("end_at must be after start_at")
        return self


class TimeOffPublic(BaseModel):
    id: str
    business_id: str
    staff_id: str
    start_at: datetime
    end_at: datetime
    reason: str
