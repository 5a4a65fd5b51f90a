"""Upload routes - CSV bulk import of the problem catalogue."""

from fastapi import APIRouter, Depends, HTTPException, UploadFile, File

from codeassess.config import logger
from codeassess.deps import get_admin_user
from codeassess.services.bulk_upload import import_csv, BulkUploadError

router = APIRouter(tags=["uploads"])


@router.post("/admin/bulk-upload")
async def bulk_upload(file: UploadFile = File(...), admin: dict = Depends(get_admin_user)):
    """Import subjects, topics and problems from a CSV file"""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")

    try:
        return await import_csv(content)
    except BulkUploadError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"=== BULK UPLOAD ERROR === {file.filename}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Failed to process CSV: {e}")
