"""
Header extraction from curl's verbose output.
"""

from curl_bench.persistence.record import ParsedHeaders

# Marker prefix -> ParsedHeaders attribute
HEADER_MARKERS = (
    ("x-served-by:", "served_by"),
    ("x-cache:", "cache_status"),
    ("date:", "response_date"),
)

RESPONSE_MARKER = "<"


def parse_header_line(line: str):
    """Return (attribute, value) if the line carries a known header, else None."""
    stripped = line.strip()
    if stripped.startswith(RESPONSE_MARKER):
        stripped = stripped[1:].lstrip()
    lowered = stripped.lower()
    for marker, attribute in HEADER_MARKERS:
        if lowered.startswith(marker):
            return attribute, stripped[len(marker):].strip()
    return None


def parse_headers(trace: str) -> ParsedHeaders:
    """Scan a trace for the known headers.

    Every matching line overwrites the previous value, so the last occurrence
    in the trace wins (redirect chains report the final response).
    """
    headers = ParsedHeaders()
    for line in trace.split("\n"):
        match = parse_header_line(line)
        if match:
            attribute, value = match
            setattr(headers, attribute, value)
    return headers
