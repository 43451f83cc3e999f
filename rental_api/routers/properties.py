"""
Property management API endpoints for CRUD operations, filtering and the admin summary.
Create and update take multipart forms with up to eight images.
"""

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile, status
from typing import Any, Dict, List, Optional, Union

from rental_api.models.user import User
from rental_api.services.policy import Action, can_change_property_type
from rental_api.services.property import PropertyService
from rental_api.schemas.property import (
    MessageResponse,
    PropertyCreate,
    PropertyListResponse,
    PropertyResponse,
    PropertySummary,
    PropertyUpdate
)
from rental_api.schemas.error import get_auth_error_responses, get_crud_error_responses, get_error_responses
from rental_api.utils.dependencies import (
    get_current_user,
    get_property_service,
    require_action
)


router = APIRouter(prefix="/properties", tags=["Properties"])

# Scalar form fields an update may carry
UPDATE_FORM_FIELDS = (
    "title", "location", "area", "rent", "deposit",
    "type", "maps_link", "owner_details"
)


def _uploaded(files: Optional[List[UploadFile]]) -> List[UploadFile]:
    """Drop the empty file parts browsers send for untouched file inputs."""
    return [file for file in (files or []) if file is not None and file.filename]


def _features_value(features: Optional[List[str]]) -> Union[None, str, List[str]]:
    """A single form value may hold a comma-separated list."""
    if features is not None and len(features) == 1:
        return features[0]
    return features


@router.get(
    "/public/{property_id}",
    response_model=PropertyResponse,
    summary="Get property",
    description="Fetch a single listing; no authentication required",
    responses=get_error_responses(404)
)
async def get_property(
    property_id: str,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Get a listing by id.

    Raises:
        PropertyNotFoundError: If the listing does not exist
    """
    property_obj = await property_service.get_property(property_id)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.get(
    "/summary",
    response_model=PropertySummary,
    summary="Listing summary",
    description="Total, created today, residential and commercial counts (admin only)",
    responses=get_auth_error_responses()
)
async def get_summary(
    current_user: User = Depends(require_action(Action.VIEW_SUMMARY)),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertySummary:
    return PropertySummary(**await property_service.get_summary())


@router.get(
    "",
    response_model=PropertyListResponse,
    summary="List properties",
    description=(
        "Paginated listings, newest first. Non-admins only see their own listings; "
        "admins may filter by created_by. Page size is capped at 100."
    ),
    responses=get_error_responses(400, 401)
)
async def list_properties(
    type: Optional[str] = Query(None, description="residential or commercial; other values are ignored"),
    area: Optional[str] = Query(None, description="Case-insensitive locality substring"),
    search: Optional[str] = Query(None, description="Case-insensitive substring of title, location or area"),
    created_by: Optional[str] = Query(None, description="Creator id (admin only)"),
    page: Optional[str] = Query(None, description="Page number, defaults to 1"),
    limit: Optional[str] = Query(None, description="Page size, defaults to 20, at most 100"),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyListResponse:
    """
    List listings visible to the current user.

    Page and limit are parsed leniently; anything unusable falls back to the defaults.
    """
    items, pagination = await property_service.list_properties(
        current_user,
        property_type=type,
        area=area,
        search=search,
        created_by=created_by,
        page=page,
        limit=limit
    )

    return PropertyListResponse(
        items=[PropertyResponse.model_validate(item.to_dict()) for item in items],
        pagination=pagination
    )


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing from a multipart form with 1 to 8 images (5 MB each)",
    responses=get_crud_error_responses()
)
async def create_property(
    title: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    area: Optional[str] = Form(None),
    rent: Optional[str] = Form(None),
    deposit: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    maps_link: Optional[str] = Form(None),
    owner_details: Optional[str] = Form(None),
    features: Optional[List[str]] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(require_action(Action.CREATE_PROPERTY)),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Create a new listing owned by the current user.

    Raises:
        ValidationError: If a field is invalid or no usable image was uploaded
    """
    property_data = PropertyCreate(
        title=title,
        location=location,
        area=area,
        rent=rent,
        deposit=deposit,
        type=type,
        maps_link=maps_link,
        owner_details=owner_details,
        features=_features_value(features)
    )

    property_obj = await property_service.create_property(
        property_data,
        current_user,
        files=_uploaded(images)
    )
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update property",
    description="Update a listing you own (any listing for admins); new images replace the old ones",
    responses=get_crud_error_responses()
)
async def update_property(
    request: Request,
    property_id: str,
    images: Optional[List[UploadFile]] = File(None),
    current_user: User = Depends(require_action(Action.UPDATE_PROPERTY)),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Update a listing.

    Only the fields present in the form are changed; a present but empty
    deposit clears it. Accepted fields: title, location, area, rent, deposit,
    type, maps_link, owner_details, features. Only admins may change the
    type; for anyone else a submitted type is ignored, valid or not.

    Raises:
        PropertyNotFoundError: If the listing does not exist
        PropertyOwnershipError: If the user does not own the listing
    """
    form = await request.form()

    submitted: Dict[str, Any] = {
        field: form.get(field) for field in UPDATE_FORM_FIELDS if field in form
    }
    if "features" in form:
        submitted["features"] = _features_value(form.getlist("features"))
    if not can_change_property_type(current_user):
        submitted.pop("type", None)

    patch = PropertyUpdate(**submitted)

    property_obj = await property_service.update_property(
        property_id,
        patch,
        current_user,
        files=_uploaded(images)
    )
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.delete(
    "/{property_id}",
    response_model=MessageResponse,
    summary="Delete property",
    description="Delete a listing you own (any listing for admins)",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: str,
    current_user: User = Depends(require_action(Action.DELETE_PROPERTY)),
    property_service: PropertyService = Depends(get_property_service)
) -> MessageResponse:
    await property_service.delete_property(property_id, current_user)
    return MessageResponse(message="Property deleted")


# Same handler as /public/{id}; registered last so it never shadows /summary
router.add_api_route(
    "/{property_id}",
    get_property,
    methods=["GET"],
    response_model=PropertyResponse,
    summary="Get property",
    description="Alias of /public/{property_id}",
    responses=get_error_responses(404)
)
