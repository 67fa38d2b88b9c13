from pydantic import BaseModel, EmailStr
from typing import Optional, Literal

Role = Literal["admin", "employee"]


class UserCreate(BaseModel):
    identity: str
    email: EmailStr
    name: Optional[str] = None


class UserRoleUpdate(BaseModel):
    identity: str
    role: Role
    team_name: Optional[str] = None


class UserSchema(BaseModel):
    id: int
    identity: str
    email: str
    name: Optional[str] = None
    role: Optional[Role] = None
    team_id: Optional[int] = None

    class Config:
        from_attributes = True
