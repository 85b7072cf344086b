from pydantic import BaseModel

class HealthOut(BaseModel):
    status: str
    service: str
    version: str
    counties: list[str]
    endpoints: list[str]

class ErrorOut(BaseModel):
    error: str
    code: str
    url: str | None = None
