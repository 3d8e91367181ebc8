"""Incremental decoder for the chat event stream.

Records are ``data: <json>`` lines terminated by a blank line. Network
chunks can end anywhere, including inside a multi-byte character or
between ``\\r`` and ``\\n``, so incomplete input is held back until the
rest arrives.
"""

import codecs
import logging

from pydantic import ValidationError

from ..models.events import StreamEvent
from ..models.events import parse_stream_event

logger = logging.getLogger(__name__)

RECORD_DELIMITER = "\n\n"


class SSEDecoder:
    """Turns a byte stream into StreamEvents, one complete record at a time.

    Example:
        >>> decoder = SSEDecoder()
        >>> decoder.feed(b'data: {"type": "te')
        []
        >>> decoder.feed(b'xt", "content": "Hi"}\\n\\n')
        [TextEvent(type='text', content='Hi')]
    """

    def __init__(self) -> None:
        self._text_decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._pending_cr = ""
        self.skipped = 0

    def feed(self, chunk: bytes | str) -> list[StreamEvent]:
        """Add a network chunk and return every event completed by it."""
        text = self._text_decoder.decode(chunk) if isinstance(chunk, bytes) else chunk
        text = self._pending_cr + text

        # A trailing CR may be the first half of a CRLF
        if text.endswith("\r"):
            self._pending_cr = "\r"
            text = text[:-1]
        else:
            self._pending_cr = ""

        self._buffer += text.replace("\r\n", "\n").replace("\r", "\n")

        records = self._buffer.split(RECORD_DELIMITER)
        # The last piece is either "" or an incomplete record
        self._buffer = records.pop()

        return self._parse_records(records)

    def flush(self) -> list[StreamEvent]:
        """Parse whatever is left when the stream closes."""
        tail = self._buffer + self._text_decoder.decode(b"", final=True) + self._pending_cr
        self._buffer = ""
        self._pending_cr = ""
        if not tail.strip():
            return []
        return self._parse_records([tail.replace("\r\n", "\n").replace("\r", "\n")])

    def _parse_records(self, records: list[str]) -> list[StreamEvent]:
        events = []
        for record in records:
            event = self._parse_record(record)
            if event is not None:
                events.append(event)
        return events

    def _parse_record(self, record: str) -> StreamEvent | None:
        data_lines = []
        for line in record.split("\n"):
            if not line or line.startswith(":"):
                # Blank line or comment (keepalive ping)
                continue
            field, _, value = line.partition(":")
            if field != "data":
                continue
            data_lines.append(value[1:] if value.startswith(" ") else value)

        if not data_lines:
            return None

        payload = "\n".join(data_lines)
        try:
            return parse_stream_event(payload)
        except ValidationError as e:
            self.skipped += 1
            logger.error(f"Error parsing stream record ({e.error_count()} error(s)): {payload[:200]}")
            return None
