from pydantic import BaseModel, ConfigDict, field_validator
from datetime import datetime
from typing import Literal
import uuid


class SubmissionCreate(BaseModel):
    code: str
    language: Literal["cpp", "java", "javascript", "python"]

    @field_validator("code")
    @classmethod
    def code_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Code must not be empty")
        return v


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    user_id: uuid.UUID
    problem_id: str
    language: str
    code: str
    status: str
    created_at: datetime
