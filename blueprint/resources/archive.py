"""Safe zip extraction."""

import os
import zipfile
from typing import List

from blueprint.exceptions import ValidationError


def extract_zip(path: str, target: str) -> List[str]:
    """
    Extract an archive, refusing members that would land outside target.

    Returns:
        The archive's member names

    Raises:
        ValidationError: If a member path escapes the target directory
        zipfile.BadZipFile: If the file is not a zip archive
    """
    root = os.path.realpath(target)
    with zipfile.ZipFile(path) as archive:
        members = archive.namelist()
        for member in members:
            destination = os.path.realpath(os.path.join(root, member))
            if destination != root and not destination.startswith(root + os.sep):
                raise ValidationError(f"Archive member escapes the bundle: {member}")
        archive.extractall(root)
    return members
