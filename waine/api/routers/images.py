"""Image upload endpoint.

Routes:
- POST /upload-image - Analyse an uploaded image and return chat context for it

Dependencies: waine.application.services.image_service
System role: Image context HTTP API
"""

from fastapi import APIRouter, Depends, File, Form, UploadFile

from waine.api.deps import get_image_service
from waine.api.routers.router_utils import handle_service_errors
from waine.application.services.image_service import ImageService
from waine.core.exceptions import InputError
from waine.models.image import ImageAnalysisResponse

router = APIRouter(tags=["images"])


@router.post("/upload-image", response_model=ImageAnalysisResponse)
@handle_service_errors
async def upload_image(
    file: UploadFile | None = File(default=None),
    description: str | None = Form(default=None),
    image_service: ImageService = Depends(get_image_service),
) -> ImageAnalysisResponse:
    """Analyse an image with Gemini vision.

    Raises:
        HTTPException(400): Missing file, non-image, or too large
        HTTPException(502): Vision analysis failed
    """
    if file is None:
        raise InputError("No file provided", field="file")
    data = await file.read()
    return await image_service.analyze_upload(
        file_name=file.filename,
        mime_type=file.content_type,
        data=data,
        description=description,
    )
