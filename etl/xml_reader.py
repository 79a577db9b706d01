# WORKFLOW: Streaming decoder for the dump's XML tables.
# Used by: Pipeline (main pass per table, id pre-collection for Posts)
# Functions:
# 1. iter_rows() - Yield the attribute dict of every <row> element, clearing as it goes
# 2. decode_row() - Convert one attribute dict to a typed field map via a schema
# 3. decode_rows() - Lazy sequence of typed field maps for a whole table stream
# 4. read_ids() - Collect the Id attribute of every row
#
# Decode flow: table stream -> iterparse -> <row> attributes -> schema parsers -> field map
# Memory stays flat: each element is discarded once its attributes are read.

"""
Streaming decoder for the dump's XML tables.
"""

import logging
import xml.etree.ElementTree as ET
from typing import IO, Any, Dict, Iterator, Optional, Sequence, Set

from etl.errors import DumpDecodeError
from etl.schemas import STRING_LIST, FieldSpec

logger = logging.getLogger(__name__)

ROW_TAG = "row"


def iter_rows(stream: IO[bytes], table: str) -> Iterator[Dict[str, str]]:
    """
    Yield the attributes of every <row> element in a table stream.

    Args:
        stream: Binary stream positioned at the start of the XML document
        table: Table name, used in error messages

    Returns:
        Iterator of attribute dicts, one per row
    """
    root = None
    try:
        for event, elem in ET.iterparse(stream, events=("start", "end")):
            if event == "start":
                if root is None:
                    root = elem
                continue
            if elem.tag == ROW_TAG:
                yield dict(elem.attrib)
                elem.clear()
                # Drop finished rows from the root so the tree never grows.
                root.clear()
    except ET.ParseError as e:
        raise DumpDecodeError(table, f"malformed XML: {e}") from e


def decode_row(attributes: Dict[str, str], schema: Sequence[FieldSpec], table: str) -> Dict[str, Any]:
    """
    Convert one row's attributes to a typed field map.

    Args:
        attributes: Raw attribute values of a <row> element
        schema: Ordered field list for the table's entity kind
        table: Table name, used in error messages

    Returns:
        Dictionary of entity field name -> typed value
    """
    fields: Dict[str, Any] = {}
    for spec in schema:
        raw = attributes.get(spec.attribute)
        if raw is None:
            if spec.type == STRING_LIST:
                fields[spec.name] = []
            elif spec.optional:
                fields[spec.name] = None
            else:
                row_id = attributes.get("Id", "?")
                raise DumpDecodeError(table, f"row {row_id} is missing required attribute {spec.attribute}")
            continue

        try:
            fields[spec.name] = spec.parser(raw)
        except (TypeError, ValueError) as e:
            row_id = attributes.get("Id", "?")
            raise DumpDecodeError(
                table, f"row {row_id} has invalid {spec.type} value for {spec.attribute}: {raw!r}"
            ) from e
    return fields


def decode_rows(stream: IO[bytes], schema: Sequence[FieldSpec], table: str = "<table>") -> Iterator[Dict[str, Any]]:
    """
    Lazily decode a table stream into typed field maps.

    The sequence is forward-only; any decode error aborts the whole read.

    Args:
        stream: Binary stream of the table's XML
        schema: Ordered field list for the table's entity kind
        table: Table name, used in error messages

    Returns:
        Iterator of field maps
    """
    for attributes in iter_rows(stream, table):
        yield decode_row(attributes, schema, table)


def read_ids(stream: IO[bytes], table: str = "<table>", attribute: str = "Id") -> Set[int]:
    """
    Collect the identifier of every row in a table stream.

    Args:
        stream: Binary stream of the table's XML
        table: Table name, used in error messages
        attribute: Identifier attribute name

    Returns:
        Set of integer identifiers
    """
    ids: Set[int] = set()
    for attributes in iter_rows(stream, table):
        raw: Optional[str] = attributes.get(attribute)
        if raw is None:
            raise DumpDecodeError(table, f"row is missing required attribute {attribute}")
        try:
            ids.add(int(raw))
        except ValueError as e:
            raise DumpDecodeError(table, f"invalid integer value for {attribute}: {raw!r}") from e
    logger.debug(f"Collected {len(ids)} ids from {table}")
    return ids
