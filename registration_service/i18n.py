"""Message catalogs and locale negotiation.

Catalogs are plain JSON objects (``locales/<locale>.json``) mapping stable
message keys to display strings. They are loaded once at startup; lookups are
pure functions of ``(key, locale)``.
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)


def _load_json_mapping(path: Path) -> Dict[str, str]:
    """Load a JSON file and return a string-to-string mapping.

    Raises ``ValueError`` if the file does not contain a JSON object.
    """
    with path.open("r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"Catalog file {path} does not contain a JSON object")
    return {str(k): str(v) for k, v in data.items()}


def parse_accept_language(header: Optional[str]) -> List[str]:
    """Return the language tags of an ``Accept-Language`` header by preference.

    Tags are lower-cased and sorted by descending ``q`` weight; ties keep
    header order. Malformed weights (not a number, non-finite or outside
    ``[0, 1]``) count as ``q=0``; ``*`` is dropped.
    """
    if not header:
        return []

    weighted: List[Tuple[float, int, str]] = []
    for position, part in enumerate(header.split(",")):
        pieces = [p.strip() for p in part.split(";")]
        tag = pieces[0].lower()
        if not tag or tag == "*":
            continue
        quality = 1.0
        for param in pieces[1:]:
            if param.startswith("q="):
                try:
                    quality = float(param[2:])
                except ValueError:
                    quality = 0.0
                if not math.isfinite(quality) or quality > 1:
                    quality = 0.0
        if quality <= 0:
            continue
        weighted.append((-quality, position, tag))

    return [tag for _, _, tag in sorted(weighted)]


class MessageCatalog:
    """Locale-keyed table of message key -> display string."""

    def __init__(self, catalogs: Mapping[str, Mapping[str, str]], default_locale: str = "en") -> None:
        self._catalogs = {locale.lower(): dict(messages) for locale, messages in catalogs.items()}
        self.default_locale = default_locale.lower()
        if self.default_locale not in self._catalogs:
            raise ValueError(f"Default locale {default_locale!r} has no catalog")

    @classmethod
    def from_directory(cls, directory: Path, default_locale: str = "en") -> "MessageCatalog":
        """Load every ``*.json`` file of ``directory`` as one locale."""
        catalogs: Dict[str, Dict[str, str]] = {}
        for path in sorted(Path(directory).glob("*.json")):
            catalogs[path.stem] = _load_json_mapping(path)
            logger.debug("Loaded %d messages for locale %s", len(catalogs[path.stem]), path.stem)
        if not catalogs:
            raise ValueError(f"No message catalogs found in {directory}")
        logger.info("Message catalogs loaded: %s", ", ".join(catalogs))
        return cls(catalogs, default_locale)

    @property
    def locales(self) -> Iterable[str]:
        return self._catalogs.keys()

    def negotiate(self, accept_language: Optional[str]) -> str:
        """Pick the best available locale for an ``Accept-Language`` header."""
        for tag in parse_accept_language(accept_language):
            if tag in self._catalogs:
                return tag
            primary = tag.split("-", 1)[0]
            if primary in self._catalogs:
                return primary
        return self.default_locale

    def translate(self, key: str, locale: Optional[str] = None) -> str:
        """Return the display string of ``key`` in ``locale``.

        Falls back to the default locale, then to the key itself.
        """
        messages = self._catalogs.get((locale or self.default_locale).lower(), {})
        if key in messages:
            return messages[key]
        return self._catalogs[self.default_locale].get(key, key)

    def translate_all(self, keys: Mapping[str, str], locale: Optional[str] = None) -> Dict[str, str]:
        """Translate the values of a field -> key mapping, keeping its order."""
        return {field: self.translate(key, locale) for field, key in keys.items()}
