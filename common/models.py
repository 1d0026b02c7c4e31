"""Shared Pydantic models for API envelopes."""
from typing import Optional, List, Dict
from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    """Base model serialised with the camelCase keys the mobile client expects."""
    model_config = ConfigDict(populate_by_name=True)


class GenerationResult(CamelModel):
    """Payload of a successful (or demo) generation."""
    image_url: str = Field(..., alias="imageUrl", description="URL of the generated image")
    prompt: str = Field(..., description="Prompt sent to the provider")
    transformation_type: Optional[str] = Field(None, alias="transformationType", description="Requested transformation id")
    timestamp: str = Field(..., description="ISO-8601 UTC time of generation")
    provider: Optional[str] = Field(None, description="Provider that produced the image")
    demo: Optional[bool] = Field(None, description="Set when demo mode bypassed the provider")


class GenerationResponse(CamelModel):
    success: bool = True
    message: str
    data: GenerationResult


class ErrorEnvelope(CamelModel):
    """Error body returned for every failed request."""
    success: bool = False
    error: str = Field(..., description="Short error category title")
    code: str = Field(..., description="Stable machine-readable error code")
    message: str = Field(..., description="Human-readable explanation")


class TransformationInfo(CamelModel):
    id: str
    name: str
    description: str
    icon: str
    category: str


class TransformationList(CamelModel):
    transformations: List[TransformationInfo]
    total_count: int = Field(..., alias="totalCount")


class TransformationListResponse(CamelModel):
    success: bool = True
    message: str
    data: TransformationList


class ApiInfoResponse(BaseModel):
    message: str
    version: str
    endpoints: Dict[str, str]


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    version: str
    timestamp: str
    status: str = "running"
    provider: Optional[str] = None
    demo_mode: Optional[bool] = Field(None, alias="demoMode")
