# File: scaffoldgen/rules.py
"""
scaffoldgen - Rule & Label Synthesis
======================================
Per-column string synthesis for validation artifacts:

* ``synthesize_rule`` builds the validation-rule expression for a column
  from its kind and the operation mode.  Output is a pipe-delimited rule
  string in the host framework's rule grammar, e.g.::

      required|file|image|mimes:png,jpg,jpeg,gif|max:10000|mimetypes:...

  For a fixed (column, kind, mode) the output is byte-identical across calls,
  and between CREATE and UPDATE only the leading presence keyword changes.

* ``synthesize_label`` builds the human-readable attribute label, dropping
  the media suffix first so ``cover_img`` reads ``Cover``.

Nothing here touches the filesystem or knows about templates.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from scaffoldgen.columns import classify_column, media_suffix_of
from scaffoldgen.models import ColumnKind, OperationMode
from scaffoldgen.utils import to_title_human

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.rules")

# ---------------------------------------------------------------------------
# Rule vocabulary
# ---------------------------------------------------------------------------

DEFAULT_MAX_UPLOAD_SIZE: int = 10000

PRESENCE_KEYWORDS: Dict[OperationMode, str] = {
    OperationMode.CREATE: "required",
    OperationMode.UPDATE: "nullable",
}


@dataclass(frozen=True, slots=True)
class MediaRuleSpec:
    """File-upload constraints attached to one media kind."""

    extensions: Tuple[str, ...]
    mimetypes: Tuple[str, ...]
    is_image: bool = False


MEDIA_RULES: Dict[ColumnKind, MediaRuleSpec] = {
    ColumnKind.IMAGE: MediaRuleSpec(
        extensions=("png", "jpg", "jpeg", "gif"),
        mimetypes=("image/jpeg", "image/png", "image/jpg", "image/gif"),
        is_image=True,
    ),
    ColumnKind.VIDEO: MediaRuleSpec(
        extensions=("mp4", "webm", "ogg", "mov", "wmv"),
        mimetypes=(
            "video/mp4",
            "video/webm",
            "video/ogg",
            "video/quicktime",
            "video/x-ms-wmv",
        ),
    ),
    ColumnKind.AUDIO: MediaRuleSpec(
        extensions=("mp3", "wav", "ogg", "aac"),
        mimetypes=("audio/mpeg", "audio/wav", "audio/ogg", "audio/aac"),
    ),
    ColumnKind.DOCUMENT: MediaRuleSpec(
        extensions=("pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx"),
        mimetypes=(
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "application/vnd.ms-excel",
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            "application/vnd.ms-powerpoint",
            "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        ),
    ),
}


# ---------------------------------------------------------------------------
# Rule synthesizer
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def rule_tokens(
    kind: ColumnKind,
    mode: OperationMode,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
) -> Tuple[str, ...]:
    """
    Return the ordered rule tokens for a kind/mode pair.

    The column name does not influence the rule; it only picks the kind.
    """
    tokens: List[str] = [PRESENCE_KEYWORDS[mode]]

    spec: Optional[MediaRuleSpec] = MEDIA_RULES.get(kind)
    if spec is not None:
        tokens.append("file")
        if spec.is_image:
            tokens.append("image")
        tokens.append("mimes:" + ",".join(spec.extensions))
        tokens.append(f"max:{max_size}")
        tokens.append("mimetypes:" + ",".join(spec.mimetypes))

    return tuple(tokens)


def synthesize_rule(
    column: str,
    kind: Optional[ColumnKind] = None,
    mode: OperationMode = OperationMode.CREATE,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
) -> str:
    """
    Build the validation-rule expression for *column*.

    *kind* defaults to the classifier's verdict for the column name.
    """
    if kind is None:
        kind = classify_column(column)
    return "|".join(rule_tokens(kind, mode, max_size))


def build_rules(
    columns: Sequence[str],
    mode: OperationMode,
    max_size: int = DEFAULT_MAX_UPLOAD_SIZE,
) -> Dict[str, str]:
    """Map each column name to its rule expression, in input order."""
    return {
        column: synthesize_rule(column, classify_column(column), mode, max_size)
        for column in columns
    }


# ---------------------------------------------------------------------------
# Label synthesizer
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def synthesize_label(column: str) -> str:
    """
    Build the human-readable label for *column*.

        >>> synthesize_label("cover_img")
        'Cover'
        >>> synthesize_label("first_name")
        'First Name'
    """
    base: str = column
    suffix: Optional[str] = media_suffix_of(column)
    if suffix is not None and len(column) > len(suffix):
        base = column[: -len(suffix)]
    return to_title_human(base)


def build_labels(columns: Sequence[str]) -> Dict[str, str]:
    """Map each original column name to its label, in input order."""
    return {column: synthesize_label(column) for column in columns}


# ---------------------------------------------------------------------------
# Failure messages
# ---------------------------------------------------------------------------

CREATE_MESSAGES: Mapping[str, str] = {
    "required": "The :attribute field is required.",
}


def default_messages(mode: OperationMode) -> Dict[str, str]:
    """Fixed failure-message mapping; only CREATE carries entries."""
    if mode is OperationMode.CREATE:
        return dict(CREATE_MESSAGES)
    return {}


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_MAX_UPLOAD_SIZE",
    "PRESENCE_KEYWORDS",
    "MediaRuleSpec",
    "MEDIA_RULES",
    "rule_tokens",
    "synthesize_rule",
    "build_rules",
    "synthesize_label",
    "build_labels",
    "CREATE_MESSAGES",
    "default_messages",
]
