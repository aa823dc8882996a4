import asyncio
import logging
import os
import aiofiles
import aiofiles.os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence
from app.core.exceptions import (
    DirectoryCreationError,
    MissingParameterError,
    NoFilesError,
    UnlinkError,
    ValidationError,
    WriteError,
)
from app.utils.file_utils import derive_filename, normalize_path, path_segments, resolve_within_root

logger = logging.getLogger("file_service")

CHUNK_SIZE = 1024 * 1024  # 1MB chunks when copying uploads to disk
MAX_NAME_ATTEMPTS = 5


class IncomingFile(Protocol):
    filename: Optional[str]

    async def read(self, size: int = -1) -> bytes: ...


@dataclass
class StoredFile:
    original_name: str
    stored_name: str
    relative_path: str


@dataclass
class DeletionOutcome:
    path: str
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DeletionReport:
    outcomes: List[DeletionOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def errors(self) -> List[str]:
        return [outcome.error for outcome in self.outcomes if not outcome.ok]


class FileService:
    """
    Stores uploaded files under a single upload root and deletes them again.

    Every path handed to the filesystem is checked to resolve inside the
    upload root, both for upload directories and for deletion targets.
    """

    def __init__(self, upload_root: Path):
        self.upload_root = Path(upload_root).resolve()

    async def resolve_directory(self, normalized_path: str) -> Path:
        """
        Resolve a normalized subpath below the upload root and create it if missing.
        """
        relative = "/".join(path_segments(normalized_path))
        directory = resolve_within_root(self.upload_root, relative, allow_root=True)
        if directory is None:
            raise ValidationError("Invalid upload path.")

        try:
            await aiofiles.os.makedirs(directory, exist_ok=True)
        except OSError as e:
            logger.error(f"Error creating upload directory {directory}: {str(e)}")
            raise DirectoryCreationError() from e
        return directory

    async def save_files(self, files: Sequence[IncomingFile], raw_path: Optional[str] = None) -> List[StoredFile]:
        """
        Store every uploaded file in the directory named by raw_path.

        All files of one request share the destination directory. Files are
        written in arrival order and there is no rollback: when one fails, the
        ones before it stay on disk.
        """
        if not files:
            raise NoFilesError()

        directory = await self.resolve_directory(normalize_path(raw_path))

        stored = []
        for upload in files:
            stored.append(await self._write_file(directory, upload))
        return stored

    async def delete_files(self, paths: Sequence[str]) -> DeletionReport:
        """
        Delete each path relative to the upload root, independently of the others.

        Per-file failures are collected in the report instead of being raised.
        """
        if not paths:
            raise MissingParameterError()

        results = await asyncio.gather(
            *(self._delete_file(path) for path in paths),
            return_exceptions=True,
        )

        report = DeletionReport()
        for path, result in zip(paths, results):
            if isinstance(result, UnlinkError):
                logger.warning(f"Failed to delete {path}: {result.message}")
                report.outcomes.append(DeletionOutcome(path=path, error=result.message))
            elif isinstance(result, BaseException):
                raise result
            else:
                report.outcomes.append(DeletionOutcome(path=path))
        return report

    async def _write_file(self, directory: Path, upload: IncomingFile) -> StoredFile:
        original_name = upload.filename or ""

        # Exclusive create; a name taken by another process gets the next clock tick
        for _ in range(MAX_NAME_ATTEMPTS):
            stored_name = derive_filename(original_name)
            target = directory / stored_name
            try:
                out_file = await aiofiles.open(target, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                logger.error(f"Error opening {target} for writing: {str(e)}")
                raise WriteError() from e
            break
        else:
            raise WriteError(f"Could not allocate a unique name for {original_name}.")

        try:
            try:
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    await out_file.write(chunk)
            finally:
                await out_file.close()
        except OSError as e:
            logger.error(f"Error writing {target}: {str(e)}")
            await self._discard_partial(target)
            raise WriteError() from e

        relative_path = target.relative_to(self.upload_root).as_posix()
        logger.info(f"Stored upload {original_name!r} as {relative_path}")
        return StoredFile(original_name=original_name, stored_name=stored_name, relative_path=relative_path)

    async def _discard_partial(self, target: Path) -> None:
        try:
            await aiofiles.os.remove(target)
        except OSError as e:
            logger.warning(f"Could not remove partial file {target}: {str(e)}")

    async def _delete_file(self, path: str) -> None:
        try:
            resolved = resolve_within_root(self.upload_root, path)
        except (ValueError, RuntimeError, OSError) as e:
            raise UnlinkError(f"{path}: invalid path") from e
        if resolved is None:
            raise UnlinkError(f"{path}: path is outside the upload directory")

        # Unlink the path as given so symlinks and trailing slashes keep their meaning
        target = os.path.join(self.upload_root, path.lstrip("/\\"))
        try:
            await aiofiles.os.remove(target)
        except FileNotFoundError as e:
            raise UnlinkError(f"{path}: no such file") from e
        except ValueError as e:
            raise UnlinkError(f"{path}: invalid path") from e
        except OSError as e:
            raise UnlinkError(f"{path}: {e.strerror or 'could not be deleted'}") from e
