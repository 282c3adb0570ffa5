"""
Pydantic Schemas for Chat and Writing Assistant endpoints
"""

from pydantic import Field
from typing import Literal, Optional
from datetime import datetime

from glance.schemas.document import CamelModel


class ChatRequest(CamelModel):
    """Single question about one document; history is held by the client"""
    message: Optional[str] = Field(None, description="User question")


class ChatResponse(CamelModel):
    """Completion grounded in the document's retrieved context"""
    response: str
    document_title: str
    timestamp: datetime


WritingAction = Literal["improve", "rephrase", "explain", "summarize", "key_points", "academic"]


class AnalyzeRequest(CamelModel):
    """Editor request: free prompt, optionally wrapped in a rewrite preset"""
    prompt: Optional[str] = Field(None, description="Selected text or free-form prompt")
    action: Optional[WritingAction] = Field(None, description="Rewrite preset applied to the prompt")


class AnalyzeResponse(CamelModel):
    response: str
