# File: scaffoldgen/columns.py
"""
scaffoldgen - Column Classification & Exclusion Policy
========================================================
Two pure building blocks of the generation pipeline:

* ``classify_column`` maps a column name to a ``ColumnKind`` by suffix.
  The suffix table is fixed and ordered; the first match wins and names
  without a known suffix are ``PLAIN``.
* ``filter_columns`` removes bookkeeping and credential columns that must
  never appear in generated validation or serialization output.  The result
  is always a subset of the input, in input order.
"""

from __future__ import annotations

import functools
import logging
from typing import FrozenSet, List, Optional, Sequence, Set, Tuple

from scaffoldgen.models import ColumnInfo, ColumnKind, GenerationScope

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("scaffoldgen.columns")

# ---------------------------------------------------------------------------
# Suffix table
# ---------------------------------------------------------------------------

MEDIA_SUFFIXES: Tuple[Tuple[str, ColumnKind], ...] = (
    ("_img", ColumnKind.IMAGE),
    ("_vid", ColumnKind.VIDEO),
    ("_aud", ColumnKind.AUDIO),
    ("_docs", ColumnKind.DOCUMENT),
)

# ---------------------------------------------------------------------------
# Exclusion sets
# ---------------------------------------------------------------------------

IDENTITY_COLUMN: str = "id"

BASELINE_EXCLUSIONS: Tuple[str, ...] = (
    IDENTITY_COLUMN,
    "created_at",
    "updated_at",
    "deleted_at",
)

AUTH_EXCLUSIONS: Tuple[str, ...] = ("email_verified_at", "remember_token")

AUTH_SERIALIZATION_EXCLUSIONS: Tuple[str, ...] = ("password",)

DEFAULT_AUTH_ENTITY: str = "User"


# ---------------------------------------------------------------------------
# Classifier
# ---------------------------------------------------------------------------


@functools.lru_cache(maxsize=None)
def classify_column(name: str) -> ColumnKind:
    """
    Return the ``ColumnKind`` for a column name.

        >>> classify_column("cover_img")
        <ColumnKind.IMAGE: 'image'>
        >>> classify_column("price")
        <ColumnKind.PLAIN: 'plain'>
    """
    for suffix, kind in MEDIA_SUFFIXES:
        if name.endswith(suffix):
            return kind
    return ColumnKind.PLAIN


def media_suffix_of(name: str) -> Optional[str]:
    """Return the media suffix *name* ends with, or ``None`` for plain columns."""
    for suffix, _ in MEDIA_SUFFIXES:
        if name.endswith(suffix):
            return suffix
    return None


def classify_columns(names: Sequence[str]) -> List[ColumnInfo]:
    """Wrap each name in a ``ColumnInfo`` (kind is computed on the model)."""
    return [ColumnInfo(name=name) for name in names]


# ---------------------------------------------------------------------------
# Exclusion policy
# ---------------------------------------------------------------------------


def excluded_columns(
    entity: str,
    scope: GenerationScope,
    auth_entity: str = DEFAULT_AUTH_ENTITY,
) -> FrozenSet[str]:
    """
    Return the set of column names that must not appear for *entity* in
    *scope*.

    * Always: ``id``, ``created_at``, ``updated_at``, ``deleted_at``.
    * Authentication principal: also ``email_verified_at``, ``remember_token``.
    * Serialization: ``id`` is kept; the principal's ``password`` is dropped.
    """
    exclusions: Set[str] = set(BASELINE_EXCLUSIONS)
    is_principal: bool = entity == auth_entity

    if is_principal:
        exclusions.update(AUTH_EXCLUSIONS)

    if scope is GenerationScope.SERIALIZATION:
        exclusions.discard(IDENTITY_COLUMN)
        if is_principal:
            exclusions.update(AUTH_SERIALIZATION_EXCLUSIONS)

    return frozenset(exclusions)


def filter_columns(
    entity: str,
    columns: Sequence[str],
    scope: GenerationScope,
    auth_entity: str = DEFAULT_AUTH_ENTITY,
) -> List[str]:
    """
    Apply the exclusion policy to *columns*, preserving order.

    An empty result is valid and produces an artifact without fields.
    """
    exclusions: FrozenSet[str] = excluded_columns(entity, scope, auth_entity)
    kept: List[str] = [c for c in columns if c not in exclusions]

    logger.debug(
        "filter_columns(%s, %s): kept %d of %d column(s).",
        entity,
        scope.value,
        len(kept),
        len(columns),
    )
    return kept


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "MEDIA_SUFFIXES",
    "IDENTITY_COLUMN",
    "BASELINE_EXCLUSIONS",
    "AUTH_EXCLUSIONS",
    "AUTH_SERIALIZATION_EXCLUSIONS",
    "DEFAULT_AUTH_ENTITY",
    "classify_column",
    "media_suffix_of",
    "classify_columns",
    "excluded_columns",
    "filter_columns",
]
