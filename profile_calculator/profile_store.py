"""
Profile document persistence.

Reads the enabled module codes out of a profile document and writes fresh
profile documents with atomic writes.
"""

import contextlib
import json
import logging
import os
import stat
import tempfile
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import ValidationError
from pydantic import field_validator

from .errors import ProfileIOError
from .errors import ProfileParseError

logger = logging.getLogger(__name__)

PROFILE_SUFFIX = ".json"


class ProfileDocument(BaseModel):
    """On-disk profile schema."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    enabled_list: list[str] = Field(..., alias="EnabledList", description="Enabled module codes, in order")
    disabled_list: list[str] = Field(default_factory=list, alias="DisabledList", description="Disabled module codes")
    operation: int | str = Field(default=0, alias="Operation", description="Legacy tag, written as 0")

    @field_validator("disabled_list", mode="before")
    @classmethod
    def _null_disabled_list(cls, value):
        return [] if value is None else value


def is_profile_path(path: Path) -> bool:
    """Check whether a path carries the profile document extension."""
    return Path(path).suffix.lower() == PROFILE_SUFFIX


def require_profile_path(path: Path) -> None:
    """Raise ProfileIOError unless the path is a profile document path."""
    if not is_profile_path(path):
        raise ProfileIOError(f"Profile destination must be a JSON file: {path}")


class ProfileStore:
    """
    Reads and writes profile documents.

    Contract:
    - Inputs: file paths, ordered lists of module codes
    - Outputs: ordered lists of module codes, written profile files
    - Side Effects: Filesystem writes to the target path only
    - Errors: ProfileIOError for unreadable/unwritable paths, ProfileParseError for bad content
    - Duplicates and order in EnabledList are passed through untouched
    """

    def read(self, path: Path) -> list[str]:
        """Read the enabled module codes of a profile.

        Args:
            path: Profile document to read

        Returns:
            EnabledList of the profile, in document order

        Raises:
            ProfileIOError: If the file cannot be read
            ProfileParseError: If the file is not a valid profile document
        """
        path = Path(path)
        try:
            raw = path.read_bytes()
        except OSError as e:
            raise ProfileIOError(f"Cannot read profile {path}: {e}") from e

        try:
            # utf-8-sig also accepts documents saved with a byte-order mark
            data = json.loads(raw.decode("utf-8-sig"))
        except UnicodeDecodeError as e:
            raise ProfileParseError(f"Profile {path} is not UTF-8 text: {e}") from e
        except json.JSONDecodeError as e:
            raise ProfileParseError(f"Profile {path} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ProfileParseError(f"Profile {path} must contain a JSON object")

        try:
            document = ProfileDocument.model_validate(data)
        except ValidationError as e:
            raise ProfileParseError(f"Profile {path} is not a valid profile: {_summarize(e)}") from e

        logger.debug(f"Read {len(document.enabled_list)} codes from {path}")
        return document.enabled_list

    def write(self, path: Path, codes: list[str]) -> None:
        """Write a fresh profile document containing the given codes.

        Existing content at the path is replaced.

        Args:
            path: Destination profile path
            codes: Module codes for EnabledList, written in the given order

        Raises:
            ProfileIOError: If the document cannot be written
        """
        path = Path(path)
        document = ProfileDocument(enabled_list=list(codes))
        payload = document.model_dump(by_alias=True)

        try:
            # Write to temp file first (atomic write pattern)
            with tempfile.NamedTemporaryFile(
                mode="w", dir=path.parent, prefix=".profile_", suffix=".tmp", delete=False, encoding="utf-8"
            ) as tmp_file:
                temp_path = Path(tmp_file.name)
                try:
                    json.dump(payload, tmp_file, ensure_ascii=False)
                    tmp_file.flush()
                    tmp_file.close()
                    os.chmod(temp_path, _target_mode(path))
                    temp_path.replace(path)
                except OSError:
                    with contextlib.suppress(OSError):
                        temp_path.unlink()
                    raise
        except OSError as e:
            raise ProfileIOError(f"Failed to write profile {path}: {e}") from e

        logger.info(f"Wrote profile {path} with {len(document.enabled_list)} codes")


def _target_mode(path: Path) -> int:
    """Permission bits for a written profile: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def _summarize(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(p) for p in item["loc"]) or "document"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)
