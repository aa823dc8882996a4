from typing import Optional, List
from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import JSONResponse
from app.api.schemas import DeleteResponse, DeletionResult, ErrorResponse, StoredFileInfo, UploadResponse
from app.api.dependencies import get_file_service
from app.services.file_service import FileService
from app.core.auth import require_api_key

router = APIRouter(
    tags=["files"],
    dependencies=[Depends(require_api_key)],
    responses={status.HTTP_403_FORBIDDEN: {"model": ErrorResponse}},
)

@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse}},
)
async def upload_files(
    files: Optional[List[UploadFile]] = File(None),
    form_path: Optional[str] = Form(None, alias="path"),
    query_path: Optional[str] = Query(None, alias="path"),
    file_service: FileService = Depends(get_file_service)
):
    """
    Upload one or more files under the "files" field.

    The optional "path" (form field first, then query string) names the
    subdirectory below the upload root; it is normalized before use.
    """
    stored = await file_service.save_files(files or [], form_path or query_path)

    return UploadResponse(
        message="Files uploaded successfully.",
        files=[
            StoredFileInfo(
                originalname=record.original_name,
                filename=record.stored_name,
                path=record.relative_path,
            )
            for record in stored
        ],
    )

@router.delete(
    "/delete",
    response_model=DeleteResponse,
    response_model_exclude_none=True,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": DeleteResponse},
    },
)
async def delete_files(
    filenames: Optional[List[str]] = Query(None),
    file_service: FileService = Depends(get_file_service)
):
    """
    Delete files by path relative to the upload root.

    "filenames" may be comma-separated, repeated, or both. Every file is
    attempted; if any deletion fails the response is a 500 listing the errors.
    """
    paths = [
        name.strip()
        for value in (filenames or [])
        for name in value.split(",")
        if name.strip()
    ]

    report = await file_service.delete_files(paths)

    results = [
        DeletionResult(path=outcome.path, deleted=outcome.ok, error=outcome.error)
        for outcome in report.outcomes
    ]

    if report.errors:
        body = DeleteResponse(
            message="Error deleting files.",
            deleted=report.succeeded,
            errors=report.errors,
            results=results,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(exclude_none=True),
        )

    return DeleteResponse(
        message="Files deleted successfully.",
        deleted=report.succeeded,
        results=results,
    )
