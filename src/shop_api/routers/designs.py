from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from shop_api.dependencies import get_design_service
from shop_api.schemas import (
    ApiResponse,
    Category,
    Design,
    DesignCreate,
    DesignDetail,
    DesignUpdate,
    LikeResult,
    MessageResponse,
    MyDesignsQueryParams,
    PaginatedResponse,
    PublicDesignsQueryParams,
    paginate,
)
from shop_api.security import Principal, get_current_principal, get_optional_principal
from shop_api.services import DesignService

router = APIRouter(prefix="/designs")

DesignId = Annotated[str, Path(description="ID of the design", min_length=1)]
NULLABLE_DESIGN_FIELDS = {"preview_image"}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Design])
def create_design(
    body: DesignCreate,
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    design = designs.create(principal.uid, body.model_dump(mode="json"))
    return {"message": "Design created successfully", "data": design}


@router.get("", response_model=PaginatedResponse[Design])
def list_public_designs(
    query_params: Annotated[PublicDesignsQueryParams, Query()],
    designs: DesignService = Depends(get_design_service),
):
    """
    Browse published public designs.

    Args:
        query_params: ``category`` keeps designs tagged with that category,
            ``search`` matches the start of the design name, plus ``limit``
            and ``offset`` for paging.
    """
    items = designs.list_public(
        category=query_params.category,
        search=query_params.search,
        limit=query_params.limit,
        offset=query_params.offset,
    )
    return paginate(items, query_params)


@router.get("/categories", response_model=ApiResponse[List[Category]])
def list_categories(designs: DesignService = Depends(get_design_service)):
    return {"data": designs.list_categories()}


@router.get("/mine", response_model=PaginatedResponse[Design])
def list_my_designs(
    query_params: Annotated[MyDesignsQueryParams, Query()],
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    status_filter = query_params.status.value if query_params.status else None
    items = designs.list_user(
        principal.uid, status=status_filter, limit=query_params.limit, offset=query_params.offset
    )
    return paginate(items, query_params)


@router.get("/{design_id}", response_model=ApiResponse[DesignDetail])
def get_design(
    design_id: DesignId,
    principal: Optional[Principal] = Depends(get_optional_principal),
    designs: DesignService = Depends(get_design_service),
):
    """Fetch one design and count the view. Private designs are only shown to their owner."""
    return {"data": designs.view(design_id, principal)}


@router.put("/{design_id}", response_model=ApiResponse[Design])
def update_design(
    design_id: DesignId,
    body: DesignUpdate,
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    changes = {
        field: value
        for field, value in body.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or field in NULLABLE_DESIGN_FIELDS
    }
    design = designs.update(design_id, principal.uid, changes)
    return {"message": "Design updated successfully", "data": design}


@router.delete("/{design_id}", response_model=MessageResponse)
def delete_design(
    design_id: DesignId,
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    designs.delete(design_id, principal.uid)
    return {"message": "Design deleted successfully"}


@router.post("/{design_id}/like", response_model=ApiResponse[LikeResult])
def toggle_like(
    design_id: DesignId,
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    result = designs.toggle_like(design_id, principal.uid)
    message = "Design liked" if result["liked"] else "Design unliked"
    return {"message": message, "data": result}


@router.post("/{design_id}/duplicate", status_code=status.HTTP_201_CREATED, response_model=ApiResponse[Design])
def duplicate_design(
    design_id: DesignId,
    principal: Principal = Depends(get_current_principal),
    designs: DesignService = Depends(get_design_service),
):
    copy = designs.duplicate(design_id, principal)
    return {"message": "Design duplicated successfully", "data": copy}
