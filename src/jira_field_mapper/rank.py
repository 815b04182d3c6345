"""
LexoRank decoding for Jira backlog ordering.

Jira stores manual ordering as a LexoRank string such as "0|i0005r:" made of
a bucket digit, a base-36 rank and an optional base-36 sub-rank. Azure DevOps
wants a numeric backlog priority, so the rank is decoded to a Decimal.
"""

from __future__ import annotations

import logging
import re
import threading
from decimal import Decimal
from typing import Final

logger: logging.Logger = logging.getLogger(__name__)

LEXORANK_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-2]\|[0-9a-zA-Z]*(\:[0-9a-zA-Z]*)?$")

# Unrankable items sort after every decoded rank
RANK_SENTINEL: Final[Decimal] = Decimal("Infinity")

_REBALANCE_HINT: Final[str] = (
    "You may need to re-balance the JIRA LexoRank. "
    "see: https://confluence.atlassian.com/adminjiraserver/managing-lexorank-938847803.html"
)


def decode_base36(value: str) -> int:
    """Decode a base-36 string (case-insensitive). Empty strings decode to 0."""
    if not value:
        return 0
    return int(value, 36)


class LexoRankCodec:
    """Decodes LexoRank strings and remembers what it decoded.

    One codec is meant to live for one migration run. It keeps two caches:
    rank string -> decimal, and decimal -> first rank string that produced it.
    Both are updated under a single lock so concurrent revisions can share
    the codec.
    """

    _decoded: dict[str, Decimal]
    _owners: dict[Decimal, str]

    def __init__(self) -> None:
        self._decoded = {}
        self._owners = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._decoded)

    def decode(self, lexo_rank: str | None) -> Decimal:
        """Decode a LexoRank string into a comparable decimal.

        The rank and sub-rank are combined as "<rank>.<sub_rank>", so the
        sub-rank only breaks ties between equal ranks and the bucket digit is
        ignored.

        Args:
            lexo_rank: Rank string like "0|hzzzzz:" or "1|abc:def"

        Returns:
            The decoded decimal, or RANK_SENTINEL for empty or malformed input
        """
        if not lexo_rank or not LEXORANK_PATTERN.fullmatch(lexo_rank):
            logger.warning(f"Invalid LexoRank '{lexo_rank}', item will be ranked last")
            return RANK_SENTINEL

        with self._lock:
            cached = self._decoded.get(lexo_rank)
            if cached is not None:
                logger.warning(f"Duplicate rank detected. {_REBALANCE_HINT}")
                return cached

            # An empty rank segment ("0|:abc") decodes as rank 0, the sub-rank stays a sub-rank
            _bucket, _, ranks = lexo_rank.partition("|")
            rank_part, _, sub_rank_part = ranks.partition(":")
            try:
                rank = Decimal(f"{decode_base36(rank_part)}.{decode_base36(sub_rank_part)}")
            except ValueError as e:
                logger.warning(f"LexoRank '{lexo_rank[:40]}...' could not be decoded ({e}), item will be ranked last")
                return RANK_SENTINEL

            owner = self._owners.get(rank)
            if owner is None:
                self._owners[rank] = lexo_rank
            else:
                logger.warning(
                    f"Duplicate rank detected for different LexoRank values ('{owner}' and '{lexo_rank}'). "
                    f"{_REBALANCE_HINT}"
                )
            self._decoded[lexo_rank] = rank

        logger.debug(f"Decoded LexoRank {lexo_rank} -> {rank}")
        return rank
