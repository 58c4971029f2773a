"""Scrub Confluence storage-format content before it is shown to a reader.

Two passes: `clean_metadata` drops editor bookkeeping (macro ids, schema
versions, layout hints, empty parameters) and unwraps CDATA; `clean_binary_data`
drops embedded diagram payloads and long base64 blobs and collapses alignment
padding. Readers parse structure from delimiters, not visual alignment.
"""

import re
from dataclasses import dataclass, field

from atlas.config import Settings, get_settings
from atlas.constants import BASE64_MIN_RUN, WHITESPACE_MIN_RUN

_MACRO_ID = re.compile(r'\s*ac:macro-id="[^"]*"')
_SCHEMA_VERSION = re.compile(r'\s*ac:schema-version="[^"]*"')
_DATA_LAYOUT = re.compile(r'\s*data-layout="[^"]*"')
_EMPTY_PARAM_SELF = re.compile(r'<ac:parameter ac:name=""\s*/>')
_EMPTY_PARAM_PAIR = re.compile(r'<ac:parameter ac:name="">[^<]*</ac:parameter>')
_ADF_ATTRIBUTE = re.compile(r"<ac:adf-attribute[^>]*>.*?</ac:adf-attribute>")
_CDATA = re.compile(r"<!\[CDATA\[([\s\S]*?)\]\]>")

_MX_GRAPH_MODEL = re.compile(r"<mxGraphModel[\s\S]*?</mxGraphModel>")
_MX_FILE = re.compile(r"<mxfile[\s\S]*?</mxfile>")

_METADATA_PATTERNS = (
    _MACRO_ID,
    _SCHEMA_VERSION,
    _DATA_LAYOUT,
    _EMPTY_PARAM_SELF,
    _EMPTY_PARAM_PAIR,
    _ADF_ATTRIBUTE,
)


@dataclass(frozen=True)
class CleanupRules:
    """Compiled cleanup patterns for one pair of thresholds."""

    base64_min_run: int = BASE64_MIN_RUN
    whitespace_min_run: int = WHITESPACE_MIN_RUN
    _base64: re.Pattern[str] = field(init=False, repr=False, compare=False)
    _padding: re.Pattern[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_base64", re.compile(rf"[A-Za-z0-9+/=]{{{self.base64_min_run},}}"))
        # Spaces and tabs only; newlines carry structure
        object.__setattr__(self, "_padding", re.compile(rf"[^\S\n]{{{self.whitespace_min_run},}}"))

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "CleanupRules":
        settings = settings or get_settings()
        return cls(base64_min_run=settings.base64_min_run, whitespace_min_run=settings.whitespace_min_run)

    def clean_metadata(self, html: str) -> str:
        result = html
        for pattern in _METADATA_PATTERNS:
            result = pattern.sub("", result)
        return _CDATA.sub(r"\1", result)

    def clean_binary_data(self, content: str) -> str:
        result = _MX_GRAPH_MODEL.sub("", content)
        result = _MX_FILE.sub("", result)
        result = self._base64.sub("", result)
        result = self._padding.sub(" ", result)
        return result.strip()


DEFAULT_RULES = CleanupRules()


def clean_metadata(html: str) -> str:
    """Remove Confluence editor metadata from storage-format HTML and unwrap CDATA sections."""
    return DEFAULT_RULES.clean_metadata(html)


def clean_binary_data(content: str) -> str:
    """Remove diagram payloads and base64 blobs, collapse padding runs, and trim."""
    return DEFAULT_RULES.clean_binary_data(content)
