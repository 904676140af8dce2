from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serializes with camelCase keys, accepts either spelling on input."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProcessingResultResponse(CamelModel):
    """Response format for a processed recording"""
    id: str
    filename: str
    duration: str
    participants: int
    transcript: str
    summary: str
    key_points: List[str] = []
    topics: List[str] = []
    sentiment: str = "neutral"
    action_items: List[str] = []
    speaker_names: List[str] = []
    language: str = "en"
    confidence: float = 0.0
    timestamp: str
    source: str
    original_url: Optional[str] = None
    title: Optional[str] = None


class RemoteSubmissionRequest(BaseModel):
    url: str = Field(..., min_length=1)

