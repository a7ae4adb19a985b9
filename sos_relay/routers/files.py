"""Serves media written by the local object storage."""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from sos_relay.dependencies import get_object_storage
from sos_relay.services.object_storage import LocalObjectStorage, ObjectStorage

router = APIRouter(prefix="/api", tags=["files"])


@router.get("/upload/{filename}")
async def get_file(filename: str, storage: ObjectStorage = Depends(get_object_storage)) -> FileResponse:
    """Serve an uploaded file over HTTP."""
    if not isinstance(storage, LocalObjectStorage):
        raise HTTPException(status_code=404, detail="File not found")
    path = storage.resolve(filename)
    if path is None:
        raise HTTPException(status_code=404, detail="File not found")
    return FileResponse(str(path))
