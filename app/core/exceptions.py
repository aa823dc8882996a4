from typing import List, Optional
from fastapi import status


class UploadStoreError(Exception):
    """
    Base error for the service. Carries the client-facing message and status.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error."

    def __init__(self, message: Optional[str] = None, errors: Optional[List[str]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class AuthError(UploadStoreError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden: Invalid API Key"


class ValidationError(UploadStoreError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class MissingParameterError(ValidationError):
    default_message = "Filenames are required."


class NoFilesError(ValidationError):
    default_message = "No files were uploaded."


class DirectoryCreationError(UploadStoreError):
    default_message = "Failed to create directory."


class WriteError(UploadStoreError):
    default_message = "Failed to write file."


class UnlinkError(UploadStoreError):
    default_message = "Failed to delete file."
