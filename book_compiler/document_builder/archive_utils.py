"""Archive Utilities

Re-packs ZIP-based artifacts (EPUB, DOCX) so identical input yields
byte-identical archives.
"""
import io
import zipfile
from typing import Callable, Optional

from ..config import FIXED_ZIP_DATE_TIME

EntryTransform = Callable[[str, bytes], bytes]

# The EPUB container requires this entry first and uncompressed
MIMETYPE_ENTRY = "mimetype"


def normalize_zip(data: bytes, transform: Optional[EntryTransform] = None) -> bytes:
    """
    Rewrite a ZIP archive with fixed timestamps and permissions.

    Entry order and per-entry compression are preserved, except that a
    "mimetype" entry is always written first and stored uncompressed.

    Args:
        data: Original archive bytes
        transform: Optional function(name, content) -> content applied to each entry

    Returns:
        Normalized archive bytes
    """
    source = zipfile.ZipFile(io.BytesIO(data))
    entries = source.infolist()
    entries.sort(key=lambda info: info.filename != MIMETYPE_ENTRY)

    output = io.BytesIO()
    with source, zipfile.ZipFile(output, "w") as target:
        for info in entries:
            content = source.read(info.filename)
            if transform is not None:
                content = transform(info.filename, content)

            fixed = zipfile.ZipInfo(info.filename, date_time=FIXED_ZIP_DATE_TIME)
            if info.filename == MIMETYPE_ENTRY:
                fixed.compress_type = zipfile.ZIP_STORED
            else:
                fixed.compress_type = info.compress_type
            fixed.external_attr = 0o644 << 16
            target.writestr(fixed, content)

    return output.getvalue()
