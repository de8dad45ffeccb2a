from pydantic import BaseModel


class RequestModel(BaseModel):
    """Request bodies arrive camelCase; fields are declared snake_case with aliases."""

    class Config:
        populate_by_name = True
        str_strip_whitespace = True
        extra = "ignore"


class MessageOut(BaseModel):
    message: str
