from pydantic import BaseModel, EmailStr


class TeamSchema(BaseModel):
    id: int
    name: str
    admin_id: int

    class Config:
        from_attributes = True


class MemberInvite(BaseModel):
    email: EmailStr


class MemberAdded(BaseModel):
    user_id: int
