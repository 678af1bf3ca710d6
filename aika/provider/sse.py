"""Server-sent event decoding for streamed responses.

Vendors stream replies as ``data: <json>`` lines separated by blank lines.
Decoding is lazy: events are produced while the HTTP connection is still
being read, so the first chunk reaches the caller as soon as it arrives.
"""

import logging
from typing import Callable, Iterable, Iterator, Optional, TypeVar

from aika.exceptions import DecodeError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

T = TypeVar("T")


def iter_data(lines: Iterable[str], sentinel: Optional[str] = None) -> Iterator[str]:
    """Yield the payload of each ``data:`` line.

    Blank lines and lines without the ``data: `` prefix (``event:`` lines,
    ``:`` heartbeats) are skipped. When ``sentinel`` is given, a payload equal
    to it ends the sequence without being yielded.
    """
    for line in lines:
        if not line.strip():
            continue
        if not line.startswith(DATA_PREFIX):
            continue

        data = line[len(DATA_PREFIX):]
        if sentinel is not None and data.strip() == sentinel:
            return
        yield data


def decode_events(
    lines: Iterable[str],
    parse: Callable[[str], T],
    sentinel: Optional[str] = None,
) -> Iterator[T]:
    """Decode each payload with ``parse``, skipping events it rejects.

    ``parse`` signals a malformed event by raising DecodeError; the event is
    logged and dropped and decoding carries on with the next line.
    """
    for data in iter_data(lines, sentinel):
        try:
            event = parse(data)
        except DecodeError as e:
            logger.warning(f"Skipping malformed stream event: {e}")
            logger.debug(f"Malformed payload: {data!r}")
            continue
        yield event
