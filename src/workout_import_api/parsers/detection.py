"""
Format Detection

Maps filenames and MIME types to one of the supported import formats.
"""

from typing import Optional, Union

from .models import FileFormat


EXTENSION_FORMATS = {
    'csv': FileFormat.CSV,
    'json': FileFormat.JSON,
    'xml': FileFormat.XML,
}

MIME_FORMATS = {
    'text/csv': FileFormat.CSV,
    'application/csv': FileFormat.CSV,
    'application/json': FileFormat.JSON,
    'text/json': FileFormat.JSON,
    'application/xml': FileFormat.XML,
    'text/xml': FileFormat.XML,
}


def detect_format(filename: Optional[str]) -> Optional[FileFormat]:
    """Format from the lower-cased extension, e.g. 'Log.CSV' -> csv"""
    if not filename or '.' not in filename:
        return None
    extension = filename.lower().rsplit('.', 1)[-1].strip()
    return EXTENSION_FORMATS.get(extension)


def format_from_mime(mime_type: Optional[str]) -> Optional[FileFormat]:
    """Format from a MIME type; parameters such as charset are ignored"""
    if not mime_type:
        return None
    base_type = mime_type.split(';', 1)[0].strip().lower()
    return MIME_FORMATS.get(base_type)


def coerce_format(value: Union[str, FileFormat, None]) -> Optional[FileFormat]:
    """Accept an explicit format tag ('csv', 'JSON', FileFormat.XML)"""
    if isinstance(value, FileFormat):
        return value
    if not value:
        return None
    try:
        return FileFormat(str(value).strip().lower())
    except ValueError:
        return None


def resolve_format(
    filename: Optional[str],
    mime_type: Optional[str] = None,
    hint: Union[str, FileFormat, None] = None,
) -> Optional[FileFormat]:
    """
    Resolve the format of an upload.

    An explicit hint wins, then the filename extension, then the MIME type.
    Returns None when nothing matches.
    """
    return coerce_format(hint) or detect_format(filename) or format_from_mime(mime_type)
