from typing import List

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    Path,
    UploadFile,
    status,
)

from shop_api.dependencies import get_image_service
from shop_api.schemas import (
    ApiResponse,
    ImageMetadata,
    MessageResponse,
    SignedUrl,
    SignedUrlRequest,
    StoredImage,
    UploadedDesignImage,
    UploadedImage,
)
from shop_api.security import Principal, get_current_principal
from shop_api.services import ImageFile, ImageService

router = APIRouter(prefix="/images")


async def read_image(upload: UploadFile) -> ImageFile:
    return ImageFile(upload.filename, upload.content_type, await upload.read())


@router.post("/upload", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UploadedImage])
async def upload_image(
    image: UploadFile = File(..., description="A jpeg, png, gif or webp image of at most 10 MiB"),
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    uploaded = images.upload_user_image(principal.uid, await read_image(image))
    return {"message": "Image uploaded successfully", "data": uploaded}


@router.post(
    "/upload-multiple",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[List[UploadedImage]],
)
async def upload_images(
    images: List[UploadFile] = File(...),
    principal: Principal = Depends(get_current_principal),
    image_service: ImageService = Depends(get_image_service),
):
    """Upload up to 10 images at once. Nothing is stored if any file is rejected."""
    files = [await read_image(upload) for upload in images]
    uploaded = image_service.upload_user_images(principal.uid, files)
    return {"message": f"{len(uploaded)} images uploaded successfully", "data": uploaded}


@router.post("/design", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UploadedDesignImage])
async def upload_design_image(
    image: UploadFile = File(...),
    design_id: str = Form(..., min_length=1),
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    """Upload a design preview; the design's ``preview_image`` is pointed at it."""
    uploaded = images.upload_design_image(principal.uid, design_id, await read_image(image))
    return {"message": "Design image uploaded successfully", "data": uploaded}


@router.post("/avatar", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[UploadedImage])
async def upload_avatar(
    avatar: UploadFile = File(...),
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    uploaded = images.upload_avatar(principal.uid, await read_image(avatar))
    return {"message": "Avatar uploaded successfully", "data": uploaded}


@router.get("/mine", response_model=ApiResponse[List[StoredImage]])
def list_my_images(
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    return {"data": images.list_user_images(principal.uid)}


@router.get("/metadata/{file_name:path}", response_model=ApiResponse[ImageMetadata])
def get_image_metadata(
    file_name: str = Path(..., description="Object key of the image"),
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    return {"data": images.get_metadata(file_name)}


@router.post("/signed-url", response_model=ApiResponse[SignedUrl])
def create_signed_url(
    body: SignedUrlRequest,
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    return {"data": images.generate_signed_url(body.file_name, body.expiration_minutes)}


@router.delete("/{file_name:path}", response_model=MessageResponse)
def delete_image(
    file_name: str = Path(..., description="Object key of the image"),
    principal: Principal = Depends(get_current_principal),
    images: ImageService = Depends(get_image_service),
):
    """Delete an image. Only keys inside the caller's own folders can be deleted."""
    images.delete_image(principal.uid, file_name)
    return {"message": "Image deleted successfully"}
