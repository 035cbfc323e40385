from typing import Optional
from pydantic import BaseModel

INVALID_URL_MESSAGE = "Please supply a valid url."


class ErrorResponse(BaseModel):
    """
    JSON body for every non-200 answer of the render endpoint.

    `status` is always 0. `error` names the failure kind for server-side
    failures and is omitted for denials.
    """
    status: int = 0
    message: str
    error: Optional[str] = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    status: str = "ok"
