"""Charset detection and tolerant decoding for clippings exports."""

from __future__ import annotations

import codecs
import logging

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

FALLBACK_ENCODING = "latin-1"

_BOMS = (
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)


def _bom_encoding(raw: bytes) -> tuple[str, int] | None:
    for bom, encoding in _BOMS:
        if raw.startswith(bom):
            return encoding, len(bom)
    return None


def detect_encoding(raw: bytes) -> str:
    """Guess the encoding of *raw*: BOM, strict UTF-8, detector, then Latin-1."""

    bom = _bom_encoding(raw)
    if bom is not None:
        return bom[0]

    try:
        raw.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    best = from_bytes(raw).best()
    if best and best.encoding:
        return best.encoding

    return FALLBACK_ENCODING


def decode(raw: bytes, encoding: str | None = None) -> str:
    """Decode *raw*, dropping any BOM.

    Falls back to Latin-1 when the chosen codec fails or produces
    replacement characters.
    """

    chosen = encoding or detect_encoding(raw)
    bom = _bom_encoding(raw)
    payload = raw[bom[1] :] if bom is not None else raw
    if chosen == "utf-8-sig":
        chosen = "utf-8"

    try:
        text = payload.decode(chosen)
    except (UnicodeDecodeError, LookupError) as exc:
        logger.warning("Decoding as %s failed (%s); falling back to %s", chosen, exc, FALLBACK_ENCODING)
        return payload.decode(FALLBACK_ENCODING)

    if "\ufffd" in text:
        logger.warning("Decoding as %s produced replacement characters; falling back to %s", chosen, FALLBACK_ENCODING)
        return payload.decode(FALLBACK_ENCODING)
    return text
