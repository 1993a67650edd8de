"""
Line parser for hierarchy datasets.

Each line holds an object id and a JSON payload separated by a space or tab:

    -4611686018427387904 {"properties": {"locales": {"default": {...}}}}

Object ids are written as signed 64-bit integers and reinterpreted bit for bit
as unsigned, so "-1" names object 18446744073709551615. Parsing never touches
shared state: it either returns an entry, returns None for sentinel records,
or raises a BadIdError/BadPayloadError for the caller to count.
"""

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

from rapidfuzz import fuzz
from rapidfuzz.utils import default_process

from .exceptions import BadIdError, BadPayloadError
from .models import Entry, HIERARCHY_LEVELS, SENTINEL_TYPE
from .utils.data_utils import get_nested, safe_string_conversion


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MASK = (1 << 64) - 1
INT64_MAX_DIGITS = len(str(INT64_MAX))

_SEPARATOR = re.compile(r'[ \t]')
_SIGNED_DECIMAL = re.compile(r'[+-]?[0-9]+')


def decode_object_id(token: str, line: Optional[str] = None) -> int:
    """
    Decode a signed 64-bit decimal and reinterpret it as unsigned.

    Args:
        token: Identifier text, without surrounding whitespace
        line: Source line, attached to the error for reporting

    Returns:
        Identifier in [0, 2**64)

    Raises:
        BadIdError: If the token is not a signed 64-bit integer
    """
    if not _SIGNED_DECIMAL.fullmatch(token):
        raise BadIdError(f"Not an integer object id: {token!r}", line=line, reason='not_integer')

    # Longer digit strings can never fit and may exceed int()'s conversion limit
    digits = token.lstrip('+-').lstrip('0')
    if len(digits) > INT64_MAX_DIGITS:
        raise BadIdError(f"Object id out of signed 64-bit range: {token[:32]}...", line=line,
                         reason='out_of_range')

    value = int(digits or '0')
    if token.startswith('-'):
        value = -value
    if not INT64_MIN <= value <= INT64_MAX:
        raise BadIdError(f"Object id out of signed 64-bit range: {token}", line=line,
                         reason='out_of_range')

    return value & UINT64_MASK


def split_line(line: str) -> Tuple[str, str]:
    """Split a line at its first space or tab into (id token, payload)."""
    separator = _SEPARATOR.search(line)
    if separator is None:
        raise BadIdError("No separator between object id and payload", line=line,
                         reason='missing_separator')
    return line[:separator.start()], line[separator.end():]


class EntryParser:
    """
    Turns raw hierarchy lines into entries.

    The parser is stateless; a single instance is shared by all workers.
    """

    def __init__(self, name_match_threshold: int = 90,
                 logger: Optional[logging.Logger] = None):
        self.name_match_threshold = name_match_threshold
        self.logger = logger or logging.getLogger(__name__)

    def parse(self, line: str) -> Optional[Tuple[int, Entry]]:
        """
        Parse one non-blank line.

        Returns:
            (object id, entry), or None when the payload is a sentinel record

        Raises:
            BadIdError: Missing separator or undecodable object id
            BadPayloadError: Payload is not a hierarchy record
        """
        id_token, payload = split_line(line)
        osm_id = decode_object_id(id_token, line=line)

        entry = self.decode_payload(osm_id, payload, line=line)
        if entry.is_sentinel:
            return None

        return osm_id, entry

    def decode_payload(self, osm_id: int, payload: str, line: Optional[str] = None) -> Entry:
        """Decode the JSON payload of a line into an Entry."""
        try:
            record = json.loads(payload)
        except (ValueError, RecursionError) as e:
            raise BadPayloadError(f"Cannot decode payload: {e}", line=line, reason='invalid_json')

        if not isinstance(record, dict):
            raise BadPayloadError("Payload is not a JSON object", line=line, reason='not_an_object')

        entry_type = record.get('type')
        if entry_type is not None and not isinstance(entry_type, str):
            raise BadPayloadError(f"Payload type is not a string: {entry_type!r}", line=line,
                                  reason='bad_type')

        properties = record.get('properties', {})
        if not isinstance(properties, dict):
            raise BadPayloadError("Payload properties are not an object", line=line,
                                  reason='bad_properties')

        address = self._read_address(properties)
        if entry_type is None:
            entry_type = self._most_specific_level(address)

        return Entry(
            osm_id=osm_id,
            type=entry_type,
            name=self._read_name(properties),
            address=address,
            properties=properties
        )

    def _read_address(self, properties: Dict[str, Any]) -> Dict[str, str]:
        raw = get_nested(properties, 'locales', 'default', 'address')
        if not isinstance(raw, dict):
            raw = properties.get('address')
        if not isinstance(raw, dict):
            return {}

        address = {}
        for level in HIERARCHY_LEVELS:
            value = safe_string_conversion(raw.get(level))
            if value:
                address[level] = value
        return address

    def _read_name(self, properties: Dict[str, Any]) -> str:
        name = safe_string_conversion(get_nested(properties, 'locales', 'default', 'name'))
        if not name:
            name = safe_string_conversion(properties.get('name'))
        return name

    @staticmethod
    def _most_specific_level(address: Dict[str, str]) -> str:
        for level in reversed(HIERARCHY_LEVELS):
            if level in address:
                return level
        return SENTINEL_TYPE

    def is_name_mismatched(self, entry: Entry) -> bool:
        """
        Check whether an entry's name disagrees with the address value at its
        own level. Entries without a name or without that level never mismatch.
        """
        if not entry.name:
            return False

        expected = entry.address.get(entry.type)
        if not expected:
            return False

        score = fuzz.ratio(entry.name, expected, processor=default_process)
        if score < self.name_match_threshold:
            self.logger.debug(
                f"Name {entry.name!r} does not match {entry.type} {expected!r} "
                f"(score {score:.1f}) for object {entry.osm_id}"
            )
            return True
        return False
