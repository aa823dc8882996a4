from pydantic import BaseModel
from typing import Optional, List

class StoredFileInfo(BaseModel):
    originalname: str
    filename: str
    path: str  # relative to the upload root, served under /uploads/

class UploadResponse(BaseModel):
    message: str
    files: List[StoredFileInfo]

class DeletionResult(BaseModel):
    path: str
    deleted: bool
    error: Optional[str] = None

class DeleteResponse(BaseModel):
    message: str
    deleted: int
    errors: Optional[List[str]] = None
    results: List[DeletionResult]

class ErrorResponse(BaseModel):
    message: str
    errors: Optional[List[str]] = None
