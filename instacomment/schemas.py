from typing import Literal

from pydantic import BaseModel, Field


class GenerateCommentsRequest(BaseModel):
    link: str | None = None
    count: int | float | str | None = Field(None, description="Number of comments to return.")


class GenerateCommentsResponse(BaseModel):
    ok: Literal[True] = True
    caption: str
    comments: list[str]


class ErrorResponse(BaseModel):
    ok: Literal[False] = False
    error: str
