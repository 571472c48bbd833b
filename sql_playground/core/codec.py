"""Reversible encoding between query text and a shareable URL locator."""

from __future__ import annotations

import base64
import binascii
import logging
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from sql_playground.core.errors import DecodeError

LOGGER = logging.getLogger(__name__)

DEFAULT_PARAM_NAME = "sql"


def encode(query_text: str) -> str:
    """Return a URL-safe base64 locator for *query_text* (no padding)."""

    raw = base64.urlsafe_b64encode(query_text.encode("utf-8", "surrogatepass"))
    return raw.decode("ascii").rstrip("=")


def decode_strict(locator: str) -> str:
    """Decode *locator*, raising `DecodeError` when it is malformed.

    Both the URL-safe and the standard base64 alphabets are accepted, with or
    without padding.
    """

    # a bare "+" arrives as a space once the query string has been parsed
    candidate = locator.replace(" ", "+").strip().replace("+", "-").replace("/", "_")
    if len(candidate) % 4 == 1:
        raise DecodeError("Locator has an impossible length")
    candidate += "=" * (-len(candidate) % 4)
    try:
        raw = base64.b64decode(candidate.encode("ascii"), altchars=b"-_", validate=True)
        return raw.decode("utf-8", "surrogatepass")
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise DecodeError(str(exc)) from exc


def decode(locator: str | None) -> str:
    """Decode *locator*; malformed or missing input yields an empty string."""

    if not locator:
        return ""
    try:
        return decode_strict(locator)
    except DecodeError as exc:
        LOGGER.debug("Ignoring undecodable locator: %s", exc)
        return ""


def read_locator(url: str, param_name: str = DEFAULT_PARAM_NAME) -> str | None:
    """Return the raw locator carried by *url*, if any."""

    for key, value in parse_qsl(urlsplit(url).query, keep_blank_values=True):
        if key == param_name:
            return value
    return None


def with_locator(url: str, locator: str, param_name: str = DEFAULT_PARAM_NAME) -> str:
    """Return *url* with *param_name* set to *locator*, keeping other parameters."""

    parts = urlsplit(url)
    params = [(key, value) for key, value in parse_qsl(parts.query, keep_blank_values=True) if key != param_name]
    params.append((param_name, locator))
    return urlunsplit(parts._replace(query=urlencode(params)))
