"""Folder CRUD endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_app_settings, get_async_session
from core.config import Settings
from schemas.folder import FolderCreate, FolderResponse, FolderUpdate
from services import folder_service
from services.exceptions import FolderNotEmptyError

router = APIRouter(prefix="/folders", tags=["folders"])


@router.post("", response_model=FolderResponse, status_code=201)
async def create_folder(
    data: FolderCreate,
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """Create a new folder."""
    folder = await folder_service.create_folder(db, data)
    return FolderResponse.model_validate(folder)


@router.get("", response_model=list[FolderResponse])
async def list_folders(
    db: AsyncSession = Depends(get_async_session),
) -> list[FolderResponse]:
    """List all folders, each with its bookmarks."""
    folders = await folder_service.get_folders(db)
    return [FolderResponse.model_validate(f) for f in folders]


@router.get("/{folder_id}", response_model=FolderResponse)
async def get_folder(
    folder_id: int,
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """Get a single folder with its bookmarks."""
    folder = await folder_service.get_folder(db, folder_id)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return FolderResponse.model_validate(folder)


@router.put("/{folder_id}", response_model=FolderResponse)
async def update_folder(
    folder_id: int,
    data: FolderUpdate,
    db: AsyncSession = Depends(get_async_session),
) -> FolderResponse:
    """Update a folder. Only fields present in the body are changed."""
    folder = await folder_service.update_folder(db, folder_id, data)
    if folder is None:
        raise HTTPException(status_code=404, detail="Folder not found")
    return FolderResponse.model_validate(folder)


@router.delete("/{folder_id}", status_code=204)
async def delete_folder(
    folder_id: int,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    """
    Delete a folder.

    Bookmarks in the folder are not deleted; see FOLDER_DELETE_POLICY for what
    happens to their folder_id.
    """
    try:
        deleted = await folder_service.delete_folder(
            db, folder_id, policy=settings.folder_delete_policy,
        )
    except FolderNotEmptyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    if not deleted:
        raise HTTPException(status_code=404, detail="Folder not found")
    return Response(status_code=204)
