from fastapi import Request
from app.core.config import Settings
from app.services.file_service import FileService

def get_settings(request: Request) -> Settings:
    return request.app.state.settings

# Dependency to get the FileService instance
def get_file_service(request: Request) -> FileService:
    """
    Dependency to get a FileService bound to the configured upload root.
    """
    return FileService(get_settings(request).UPLOAD_DIR)
