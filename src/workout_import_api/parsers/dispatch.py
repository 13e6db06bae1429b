"""
Import pipeline entry point.

parse_file() picks the parser for a (format, data kind) pair and always
returns a ParseResult; nothing raises past this function.
"""

import logging
from typing import Dict, Type, Union

from .base import BaseParser, decode_content
from .csv_parser import CSVParser
from .detection import coerce_format
from .json_parser import JSONParser
from .models import DataKind, FileFormat, ParseResult
from .xml_parser import XMLParser

logger = logging.getLogger(__name__)


PARSERS: Dict[FileFormat, Type[BaseParser]] = {
    FileFormat.CSV: CSVParser,
    FileFormat.JSON: JSONParser,
    FileFormat.XML: XMLParser,
}


def parse_file(
    content: Union[str, bytes],
    file_format: Union[str, FileFormat],
    kind: Union[str, DataKind],
) -> ParseResult:
    """
    Parse an uploaded file into canonical exercise or workout records.

    Args:
        content: File text, or raw bytes (decoded leniently)
        file_format: 'csv', 'json' or 'xml'
        kind: 'exercise' or 'workout'

    Returns:
        ParseResult; on failure success is False and errors lists
        human-readable messages
    """
    resolved_format = coerce_format(file_format)
    if resolved_format is None:
        return ParseResult(success=False, errors=[f"Unsupported file type: {file_format}"])
    file_format = resolved_format

    try:
        kind = kind if isinstance(kind, DataKind) else DataKind(str(kind).strip().lower())
    except ValueError:
        return ParseResult(success=False, errors=[f"Unsupported data type: {kind}"])

    text = decode_content(content) if isinstance(content, bytes) else content

    # A fresh parser per call keeps invocations independent
    parser = PARSERS[file_format]()
    try:
        result = parser.parse(text, kind)
    except Exception as e:
        logger.exception(f"Failed to parse {file_format.value.upper()} file: {e}")
        return ParseResult(
            success=False,
            errors=[f"Failed to parse {file_format.value.upper()} file: {str(e)}"],
            detected_format=file_format.value,
        )

    logger.info(
        f"Parsed {kind.value} {file_format.value} file: "
        f"{len(result.records)} records, {len(result.errors or [])} errors"
    )
    return result
