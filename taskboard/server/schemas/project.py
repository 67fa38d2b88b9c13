from pydantic import BaseModel


class ProjectCreate(BaseModel):
    name: str
    team_id: int


class ProjectSchema(BaseModel):
    id: int
    name: str
    team_id: int
    created_at: int

    class Config:
        from_attributes = True
