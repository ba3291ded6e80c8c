from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class RecipeRequest(BaseModel):
    # Unknown keys are dropped; values are not type-checked
    model_config = ConfigDict(extra="ignore")

    name: Optional[Any] = None
    roast: Optional[Any] = None
    origin: Optional[Any] = None
    process: Optional[Any] = None
    varietal: Optional[Any] = None
    masl: Optional[Any] = None
    roast_date: Optional[Any] = Field(default=None, alias="roastDate")
    brew_profile: Optional[Any] = Field(default=None, alias="brewProfile")


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    temperature: float
    max_tokens: int
