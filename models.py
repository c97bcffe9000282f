from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Verdict(str, Enum):
    NAUGHTY = "NAUGHTY"
    NICE = "NICE"


class Question(BaseModel):
    id: int
    question: str
    options: List[str]
    correctAnswer: str


class ScanResult(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str = Field(min_length=1)
    verdict: Verdict
    message: str = Field(min_length=1)
    score: float = Field(allow_inf_nan=False)
    country: Optional[str] = None
    timestamp: Optional[datetime] = None

    @field_validator("score", mode="before")
    @classmethod
    def reject_boolean_score(cls, v):
        # JSON true/false would otherwise coerce to 1.0/0.0
        if isinstance(v, bool):
            raise ValueError("score must be a number")
        return v


class CountryResponse(BaseModel):
    countryCode: str
