"""Image upload Pydantic models."""
from typing import Optional
from pydantic import BaseModel, Field


class UploadedFile(BaseModel):
    """A file accepted from the request and stored in the temporary upload dir."""
    path: str = Field(..., description="Location of the stored temporary file")
    filename: str = Field(..., description="Generated collision-resistant file name")
    original_name: Optional[str] = Field(None, description="Client-supplied file name, if any")
    mime_type: Optional[str] = Field(None, description="Client-declared content type")
    size: int = Field(0, ge=0, description="Stored size in bytes")
