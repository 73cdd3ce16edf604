"""
Turns raw media-get output into normalized records.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from melody_fetcher.exceptions import MalformedOutputError
from melody_fetcher.models.track import SearchResult, TrackMetadata

log = logging.getLogger(__name__)


def _parse_json(output: str) -> Any:
    try:
        return json.loads(output)
    except (json.JSONDecodeError, TypeError) as e:
        raise MalformedOutputError(f"Resolver output is not JSON: {e}", output) from e


def normalize_metadata(output: str) -> TrackMetadata:
    """
    Parses metadata-mode output, a single JSON object, into a TrackMetadata.

    Raises:
        MalformedOutputError: If the output is not a JSON object or an
        identifying field (title, artist, album, source) is not a string.
    """
    payload = _parse_json(output)
    if not isinstance(payload, dict):
        raise MalformedOutputError(
            f"Expected a JSON object, got {type(payload).__name__}", output
        )
    try:
        return TrackMetadata.model_validate(payload)
    except ValidationError as e:
        raise MalformedOutputError(f"Unexpected metadata identity fields: {e}", output) from e


def normalize_search_results(output: str) -> list[SearchResult]:
    """
    Parses search-mode output, a JSON array, into SearchResults.

    The array order is the resolver's relevance ranking and is kept as is.

    Raises:
        MalformedOutputError: If the output is not a JSON array of objects.
    """
    payload = _parse_json(output)
    if not isinstance(payload, list):
        raise MalformedOutputError(
            f"Expected a JSON array, got {type(payload).__name__}", output
        )
    results = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise MalformedOutputError(
                f"Search item {index} is {type(item).__name__}, not an object", output
            )
        try:
            results.append(SearchResult.model_validate(item))
        except ValidationError as e:
            raise MalformedOutputError(
                f"Unexpected fields in search item {index}: {e}", output
            ) from e
    log.debug(f"Normalized {len(results)} search results")
    return results
