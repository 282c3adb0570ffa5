"""
Pydantic Schemas for Document endpoints
Responses serialize in camelCase for the web client
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Literal, Optional
from datetime import datetime
from uuid import UUID


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class DocumentResponse(CamelModel):
    """Schema for document responses"""
    id: UUID
    user_id: str = Field(..., description="Owning user id")
    title: str
    file_name: str
    file_key: str = Field(..., description="Object storage key")
    file_url: str = Field(..., description="Public blob URL")
    file_size: int = Field(..., description="File size in bytes")
    status: Literal["processing", "ready", "error"]
    error_message: Optional[str] = Field(None, description="Why indexing failed")
    chunk_count: int = Field(0, description="Windows indexed in the vector namespace")
    is_starred: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None


class DeleteResponse(BaseModel):
    """Schema for delete acknowledgements"""
    success: bool = True
