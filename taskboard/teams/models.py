from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from taskboard.auth.models import UserRef


class TeamCreate(BaseModel):
    name: str = Field(min_length=1, max_length=50)
    description: str = Field("", max_length=200)

    @field_validator("name", "description", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class MemberAdd(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId", min_length=1)


class TeamResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    description: str
    leader: UserRef
    members: List[UserRef]
    created_at: str = Field(alias="createdAt")
    updated_at: str = Field(alias="updatedAt")


class TeamDeleted(BaseModel):
    id: str
    message: str
