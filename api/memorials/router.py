"""
FastAPI router for memorial endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query, Request, Response, status

from . import qrcodes, schemas, service

router = APIRouter()


@router.post("/create-memorial", status_code=status.HTTP_201_CREATED)
async def create_memorial(payload: schemas.CreateMemorialRequest, request: Request) -> dict:
    """
    Create a memorial and return its id plus a QR code (data URL) for its page.
    """
    result = await service.create_memorial(payload, origin=qrcodes.request_origin(request))
    return {
        "success": True,
        "id": result["id"],
        "qr_code_url": result["qr_code"],
    }


@router.get("/memorial/{memorial_id}")
async def get_memorial(memorial_id: int) -> dict:
    memorial = await service.get_memorial(memorial_id)
    return {"success": True, "memorial": memorial}


@router.get("/memorial/{memorial_id}/qrcode.png")
async def get_memorial_qr(memorial_id: int, request: Request) -> Response:
    png = await service.memorial_qr_png(memorial_id, origin=qrcodes.request_origin(request))
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'inline; filename="memorial-{memorial_id}.png"'},
    )


@router.get("/search-profile")
async def search_profile(
    name: str | None = Query(default=None),
    death_date: str | None = Query(default=None),
) -> dict:
    """
    Find one memorial by name (case-insensitive) and exact date of death.
    """
    profile = await service.search_profile(name, death_date)
    return {"success": True, "profile": profile}


@router.get("/memorials")
async def list_memorials() -> dict:
    memorials = await service.list_memorials()
    return {"success": True, "memorials": memorials}


@router.put("/update-memorial/{memorial_id}")
async def update_memorial(
    memorial_id: int,
    payload: schemas.UpdateMemorialRequest,
    request: Request,
) -> dict:
    memorial = await service.update_memorial(
        memorial_id,
        payload,
        origin=qrcodes.request_origin(request),
    )
    return {"success": True, "memorial": memorial}


@router.put("/approve-memorial/{memorial_id}")
async def approve_memorial(memorial_id: int) -> dict:
    memorial = await service.approve_memorial(memorial_id)
    return {"success": True, "memorial": memorial}


@router.put("/disapprove-memorial/{memorial_id}")
async def disapprove_memorial(memorial_id: int) -> dict:
    memorial = await service.disapprove_memorial(memorial_id)
    return {"success": True, "memorial": memorial}


@router.delete("/delete-memorial/{memorial_id}")
async def delete_memorial(memorial_id: int) -> dict:
    await service.delete_memorial(memorial_id)
    return {"success": True, "message": "Profile deleted successfully"}


@router.get("/generate-qrcode/{memorial_id}")
async def generate_qrcode(memorial_id: int, request: Request) -> dict:
    """
    Canonical profile URL for an id. Does not check that the memorial exists.
    """
    return {"qrCodeUrl": qrcodes.profile_url(memorial_id, qrcodes.request_origin(request))}
