"""Localized message bundles."""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional

import yaml

from optdl.core.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LOCALE = "en-US"
MESSAGES_DIR = Path(__file__).parent.parent / "messages"


class MessageBundle(Mapping):
    """Read-only table of user-facing messages for one locale.

    Components receive a bundle at construction instead of reaching for a
    shared table, so tests can inject their own.
    """

    def __init__(self, messages: Mapping[str, str], locale: str = DEFAULT_LOCALE):
        self._messages = MappingProxyType(dict(messages))
        self.locale = locale

    def __getitem__(self, key: str) -> str:
        return self._messages[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def format(self, key: str, **kwargs) -> str:
        """Render a message, falling back to the key when it is unknown."""
        template = self._messages.get(key)
        if template is None:
            logger.debug(f"Missing message '{key}' in locale {self.locale}")
            details = ", ".join(f"{k}={v}" for k, v in sorted(kwargs.items()))
            return f"{key} ({details})" if details else key
        return template.format(**kwargs)

    @classmethod
    def load(cls, locale: Optional[str] = None, messages_dir: Optional[Path] = None) -> "MessageBundle":
        """Load the bundle for ``locale``, falling back to en-US.

        Keys missing from a translated bundle are taken from en-US.

        Raises:
            FileNotFoundError: If the en-US bundle itself is missing
        """
        locale = locale or DEFAULT_LOCALE
        messages_dir = messages_dir or MESSAGES_DIR

        messages: Dict[str, str] = cls._read(messages_dir / f"{DEFAULT_LOCALE}.yml")
        if locale != DEFAULT_LOCALE:
            localized_path = messages_dir / f"{locale}.yml"
            if localized_path.exists():
                messages.update(cls._read(localized_path))
            else:
                logger.debug(f"No message bundle for locale {locale}, using {DEFAULT_LOCALE}")
                locale = DEFAULT_LOCALE

        return cls(messages, locale=locale)

    @staticmethod
    def _read(path: Path) -> Dict[str, str]:
        if not path.exists():
            raise FileNotFoundError(f"Message bundle not found: {path}")
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return {str(key): str(value) for key, value in data.items()}


@lru_cache(maxsize=None)
def default_messages(locale: str = DEFAULT_LOCALE) -> MessageBundle:
    """Return the packaged bundle for ``locale`` (loaded once, read-only)."""
    return MessageBundle.load(locale)
