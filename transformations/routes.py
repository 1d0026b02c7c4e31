"""Transformation catalog routes."""
from fastapi import APIRouter

from common.models import TransformationInfo, TransformationList, TransformationListResponse
from transformations.services import list_transformations
from utils.logger import get_logger

logger = get_logger("transformations.routes")
router = APIRouter(tags=["transformations"])


@router.get("/transformations", response_model=TransformationListResponse)
def get_transformations():
    """List every available transformation in display order."""
    transformations = [TransformationInfo(**entry) for entry in list_transformations()]
    logger.debug(f"Listed {len(transformations)} transformations")
    return TransformationListResponse(
        message="Available transformations retrieved successfully!",
        data=TransformationList(transformations=transformations, total_count=len(transformations))
    )
