"""
Semantic Analysis Models
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class SemanticTagType(str, Enum):
    TOPIC = "topic"
    ENTITY = "entity"
    SENTIMENT = "sentiment"
    KEYWORD = "keyword"


class SemanticTag(BaseModel):
    """Tag extracted from an utterance"""

    type: SemanticTagType
    value: str
    confidence: float = Field(..., ge=0.0, le=1.0)


class SemanticAnalysis(BaseModel):
    """Topics, entities, sentiment and keywords of an utterance"""

    topics: List[SemanticTag] = Field(default_factory=list, max_length=3)
    entities: List[SemanticTag] = Field(default_factory=list)
    sentiment: SemanticTag
    keywords: List[SemanticTag] = Field(default_factory=list, max_length=5)
