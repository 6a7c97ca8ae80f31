"""
Whitelist Configuration Codec

Converts a rule's whitelist configuration between two shapes:

- the stored shape: a JSON array of configuration objects, e.g.
  ``[{"isp": "AT&T", "country": ["IN"]}, {"isp": "Jio"}]``
- the editing shape: a flat map of synthetic keys to values, e.g.
  ``{"isp_0": "AT&T", "country_0": ["IN"], "isp_1": "Jio"}``

A whitelist with a single object uses bare field names as keys. With more
than one object every key carries the object's position as a ``_<index>``
suffix. A key whose last underscore segment is not all digits (or that has
no underscore) belongs to object 0.
"""

import json
from typing import Any, Iterable

from ..logging import codec_logger
from ..utils.constants import (
    ALL_COUNTRIES_SENTINEL,
    COUNTRY_FIELD,
    SCALAR_ITEM_FIELD,
    THRESHOLD_FIELD,
)
from .models import (
    ConfigurationBlock,
    CountryOption,
    DecodeResult,
    FlatPairMap,
    ParameterCountryRow,
    PendingAdditions,
    RuleKind,
    RuleWhitelistEntry,
)


class WhitelistDecodeError(ValueError):
    """Raised when a stored whitelist configuration is not valid JSON."""
    pass


def synthetic_key(field: str, index: int, total: int) -> str:
    """Build the editing key for ``field`` of object ``index`` out of ``total``."""
    if total > 1:
        return f"{field}_{index}"
    return field


def split_synthetic_key(key: str) -> tuple[str, int]:
    """
    Split an editing key into its field name and object index.

    ``"threshold_1"`` -> ``("threshold", 1)``; ``"threshold"`` and
    ``"event_type"`` -> index 0 with the key unchanged.
    """
    field, sep, suffix = key.rpartition("_")
    if sep and suffix.isascii() and suffix.isdigit():
        return field, int(suffix)
    return key, 0


def parse_whitelist(json_text: str | None) -> Any:
    """
    Parse stored whitelist text.

    Empty or missing text is treated as an empty list.

    Raises:
        WhitelistDecodeError: If the text is not valid JSON or nests too deeply
    """
    try:
        return json.loads(json_text or "[]")
    except (TypeError, ValueError, RecursionError) as e:
        raise WhitelistDecodeError(f"Invalid whitelist configuration: {e}") from e


def decode(json_text: str | None) -> DecodeResult:
    """
    Decode stored whitelist text into editing pairs.

    Never raises: malformed input yields an empty result with ``error`` set
    and a logged warning.

    Args:
        json_text: The rule's ``whitelistConfiguration`` JSON text

    Returns:
        DecodeResult with the pairs and the countries of the first object
    """
    try:
        parsed = parse_whitelist(json_text)
    except WhitelistDecodeError as e:
        codec_logger().warning("whitelist_decode_failed", error=str(e))
        return DecodeResult(error=str(e))

    result = DecodeResult()

    if isinstance(parsed, list):
        total = len(parsed)
        for index, item in enumerate(parsed):
            if isinstance(item, dict):
                for field, value in item.items():
                    if field == COUNTRY_FIELD and isinstance(value, list) and index == 0:
                        result.extracted_countries = list(value)
                    result.pairs[synthetic_key(field, index, total)] = value
            else:
                result.pairs[synthetic_key(SCALAR_ITEM_FIELD, index, total)] = item
    elif isinstance(parsed, dict):
        result.pairs.update(parsed)
    else:
        codec_logger().debug(
            "whitelist_decode_ignored",
            value_type=type(parsed).__name__,
        )

    return result


def _group_by_index(pairs: FlatPairMap) -> list[dict[str, Any]]:
    """Regroup editing pairs into objects ordered by index, empties dropped."""
    grouped: dict[int, dict[str, Any]] = {}
    for key, value in pairs.items():
        field, index = split_synthetic_key(key)
        grouped.setdefault(index, {})[field] = value
    return [grouped[index] for index in sorted(grouped) if grouped[index]]


def _rows_to_objects(
    rule_kind: RuleKind, rows: Iterable[ParameterCountryRow]
) -> list[dict[str, Any]]:
    """Build whitelist objects from pending country/redirect rows."""
    objects = []
    for row in rows:
        if not str(row.value).strip():
            continue
        if rule_kind == RuleKind.COUNTRY:
            if row.countries:
                objects.append(
                    {row.parameter: row.value, COUNTRY_FIELD: list(row.countries)}
                )
        elif rule_kind == RuleKind.REDIRECT:
            item: dict[str, Any] = {row.parameter: row.value}
            if row.threshold:
                item[THRESHOLD_FIELD] = row.threshold
            objects.append(item)
    return objects


def _blocks_to_objects(blocks: Iterable[ConfigurationBlock]) -> list[dict[str, Any]]:
    """Build whitelist objects from pending configuration blocks."""
    objects = []
    for block in blocks:
        item = {
            param: block.values[param]
            for param in block.parameters
            if str(block.values.get(param) or "").strip()
        }
        if item:
            objects.append(item)
    return objects


def encode(
    pairs: FlatPairMap, additions: PendingAdditions | None = None
) -> RuleWhitelistEntry:
    """
    Encode editing pairs, plus any pending additions, into the stored shape.

    Objects left without fields are dropped, so gaps in the indices close up.

    Args:
        pairs: Editing pairs from decode() and subsequent edits
        additions: Entries from an add session, or None outside one

    Returns:
        List of whitelist objects ready to be sent to the update API
    """
    entries = _group_by_index(pairs)

    if additions is not None:
        if additions.rule_kind.uses_parameter_rows:
            entries.extend(
                _rows_to_objects(additions.rule_kind, additions.parameter_rows)
            )
        else:
            entries.extend(_blocks_to_objects(additions.configuration_blocks))

    return [entry for entry in entries if entry]


def delete_key(pairs: FlatPairMap, key: str) -> FlatPairMap:
    """
    Remove one editing key and renumber the remaining objects from 0.

    The input map is not modified.
    """
    remaining = {k: v for k, v in pairs.items() if k != key}
    entries = _group_by_index(remaining)

    total = len(entries)
    reindexed: FlatPairMap = {}
    for index, entry in enumerate(entries):
        for field, value in entry.items():
            reindexed[synthetic_key(field, index, total)] = value
    return reindexed


def normalize_country_selection(
    selected: list[str], all_countries: list[CountryOption]
) -> list[str]:
    """
    Collapse a selection of every known country into ``["all"]``.

    Selections are compared as sets; anything that misses a country is
    returned unchanged.
    """
    all_values = {country.value for country in all_countries}
    if set(selected) == all_values:
        return [ALL_COUNTRIES_SENTINEL]
    return selected


def expand_country_selection(
    stored: list[str], all_countries: list[CountryOption]
) -> list[str]:
    """Expand a stored ``["all"]`` back into the current country values."""
    if ALL_COUNTRIES_SENTINEL in stored:
        return [country.value for country in all_countries if country.value]
    return stored
