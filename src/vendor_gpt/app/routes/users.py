"""User profile API: role, location and pincode prefill."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from vendor_gpt.app.dependencies import get_pincode_lookup, get_users
from vendor_gpt.domain.schemas import PincodeResponse, UserLocation, UserResponse, UserUpsert
from vendor_gpt.services.pincode_service import PincodeLookup
from vendor_gpt.services.user_directory import UserDirectory

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/pincode/{pincode}", response_model=PincodeResponse)
async def lookup_pincode(pincode: str, lookup: PincodeLookup = Depends(get_pincode_lookup)):
    """City and state for a 6-digit Indian pincode."""
    result = await lookup.lookup(pincode)
    if result is None:
        raise HTTPException(status_code=404, detail="Pincode not found")
    return PincodeResponse(pincode=result.pincode, city=result.city, state=result.state)


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(user_id: str, users: UserDirectory = Depends(get_users)):
    return await users.get(user_id)


@router.put("/{user_id}", response_model=UserResponse)
async def upsert_user(user_id: str, body: UserUpsert, users: UserDirectory = Depends(get_users)):
    return await users.upsert(
        user_id,
        name=body.name,
        email=body.email,
        role=body.role,
        photo_url=body.photo_url,
    )


@router.put("/{user_id}/location", response_model=UserResponse)
async def save_location(user_id: str, body: UserLocation, users: UserDirectory = Depends(get_users)):
    return await users.save_location(user_id, body)
