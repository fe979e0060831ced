"""Blocked time extraction.

Turns fixed weekly commitments into per-day occupied intervals: the
commitment itself plus a commute buffer on each side.
"""

import logging
from typing import Optional

from weekplanner.domain.models import (
    BlockKind,
    FixedBlock,
    PlannerConfig,
    Weekday,
    WeeklyCommitment,
)

logger = logging.getLogger(__name__)


class BlockedTimeExtractor:
    """Builds the blocked intervals for each day.

    Buffers are not merged or deduplicated. Later stages only ask whether
    a time range overlaps any block, so duplicates are harmless.
    """

    def __init__(self, config: Optional[PlannerConfig] = None):
        self.config = config or PlannerConfig()

    def extract(
        self,
        commitments: list[WeeklyCommitment],
    ) -> dict[Weekday, list[FixedBlock]]:
        """Emit treatment and commute blocks for every commitment.

        Args:
            commitments: Fixed weekly commitments.

        Returns:
            Dict mapping each day with commitments to its blocked intervals,
            in commitment order.
        """
        buffer = self.config.commute_buffer_minutes
        blocked: dict[Weekday, list[FixedBlock]] = {}

        for commitment in commitments:
            day_blocks = blocked.setdefault(commitment.day, [])

            day_blocks.append(
                FixedBlock(
                    day=commitment.day,
                    start=commitment.start,
                    end=commitment.end,
                    kind=BlockKind.TREATMENT,
                    location=commitment.location,
                )
            )
            # Travel before, never earlier than midnight
            day_blocks.append(
                FixedBlock(
                    day=commitment.day,
                    start=max(0, commitment.start - buffer),
                    end=commitment.start,
                    kind=BlockKind.COMMUTE,
                    location="transit",
                )
            )
            # Travel after; may run past the end of the working day
            day_blocks.append(
                FixedBlock(
                    day=commitment.day,
                    start=commitment.end,
                    end=commitment.end + buffer,
                    kind=BlockKind.COMMUTE,
                    location="transit",
                )
            )

        logger.debug(
            "Extracted %d blocked intervals across %d days",
            sum(len(b) for b in blocked.values()),
            len(blocked),
        )
        return blocked
