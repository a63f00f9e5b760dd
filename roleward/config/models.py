from pydantic import BaseModel, Field, field_validator
from typing import Literal


class PoliciesConfig(BaseModel):
    modules: list[str] = Field(default_factory=list)
    entry_points: bool = True

    @field_validator("modules")
    @classmethod
    def _strip_blank(cls, v: list[str]) -> list[str]:
        for name in v:
            if not name.strip():
                raise ValueError("policy module names must be non-empty")
        return [name.strip() for name in v]


class RolewardConfig(BaseModel):
    policies: PoliciesConfig = Field(default_factory=PoliciesConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
