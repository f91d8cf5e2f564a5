"""
Region algebra for rule-based secondary-structure prediction.

The Chou-Fasman family of methods builds its prediction from intervals:
short windows rich in helix- or strand-forming residues *nucleate* a
structure, the nucleus is *extended* in both directions while the local
propensity stays high, weak regions are *filtered* out, overlapping regions
of one class are *merged*, and regions of different classes that overlap
are *resolved* in favour of the stronger one. Positions left uncovered are
coil.

All intervals are half-open ``[start, end)``. Every operation takes the
sequence as an argument; the propensity tables are injected once at
construction, so one ``RegionAlgebra`` can serve any number of sequences
concurrently.

Tie-break policy
----------------
- Nucleation dominance is non-strict for helix (``avg_H >= avg_E``) and
  strict for strand (``avg_E > avg_H``).
- Conflict resolution gives exact ties to helix.
- String assembly paints helix after strand, so helix wins any residual
  overlap.

References
----------
- Chou & Fasman (1974) Biochemistry 13:222-245
- Chou & Fasman (1978) Adv Enzymol 47:45-148
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..core.models import Conformation, Region
from ..core.propensity import CHOU_FASMAN_SCALES, PropensityScales

logger = logging.getLogger(__name__)

# Length of the sliding window tested during extension
EXTENSION_WINDOW = 4


class RegionAlgebra:
    """
    Nucleation, extension, filtering, merging and conflict resolution over
    a sequence, driven by a set of propensity tables.

    Example:
        >>> algebra = RegionAlgebra()
        >>> seq = "EEEEEEEEEE"
        >>> nuclei = algebra.find_nucleation_regions(seq, 4, 6, 1.0, Conformation.HELIX)
        >>> [algebra.extend(seq, r, Conformation.HELIX) for r in nuclei][0]
        Region(start=0, end=10, score=None)
    """

    def __init__(self, scales: Optional[PropensityScales] = None):
        self.scales = scales or CHOU_FASMAN_SCALES

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def average_propensity(
        self,
        sequence: str,
        start: int,
        end: int,
        conformation: Conformation,
    ) -> float:
        """
        Mean conformational parameter over ``sequence[start:end]``.

        Empty, inverted or out-of-range spans score 0.0.
        """
        if start >= end or start < 0 or end > len(sequence):
            return 0.0

        total = 0.0
        for residue in sequence[start:end]:
            total += self.scales.score(residue, conformation)
        return total / (end - start)

    def region_average(
        self,
        sequence: str,
        region: Region,
        conformation: Conformation,
    ) -> float:
        """Mean conformational parameter over a region."""
        return self.average_propensity(sequence, region.start, region.end, conformation)

    def has_highest_average(
        self,
        sequence: str,
        region: Region,
        conformation: Conformation,
    ) -> bool:
        """
        Whether ``conformation`` dominates the competing class over a region.

        Helix needs ``avg_H >= avg_E``; strand needs ``avg_E > avg_H``.
        """
        helix_avg = self.region_average(sequence, region, Conformation.HELIX)
        strand_avg = self.region_average(sequence, region, Conformation.STRAND)

        if conformation == Conformation.HELIX:
            return helix_avg >= strand_avg
        if conformation == Conformation.STRAND:
            return strand_avg > helix_avg
        return False

    # -------------------------------------------------------------------------
    # Nucleation
    # -------------------------------------------------------------------------

    def is_nucleation(
        self,
        sequence: str,
        region: Region,
        conformation: Conformation,
        count_threshold: int,
        min_param: float,
    ) -> bool:
        """
        Test whether a window can nucleate ``conformation``.

        At least ``count_threshold`` residues must score strictly above
        ``min_param`` and the conformation must dominate on average.
        """
        qualified = sum(
            1
            for residue in sequence[region.start:region.end]
            if self.scales.score(residue, conformation) > min_param
        )
        return qualified >= count_threshold and self.has_highest_average(
            sequence, region, conformation
        )

    def find_nucleation_regions(
        self,
        sequence: str,
        count_threshold: int,
        window_size: int,
        min_param: float,
        conformation: Conformation,
    ) -> list[Region]:
        """
        Slide a fixed window (step 1) and keep every nucleating window.

        Overlapping windows are returned separately; they are merged later.
        """
        regions = []
        for start in range(0, len(sequence) - window_size + 1):
            window = Region(start=start, end=start + window_size)
            if self.is_nucleation(sequence, window, conformation, count_threshold, min_param):
                regions.append(window)

        logger.debug(
            f"{len(regions)} {conformation.name.lower()} nucleation windows "
            f"(size {window_size}, need {count_threshold} > {min_param})"
        )
        return regions

    # -------------------------------------------------------------------------
    # Extension and filtering
    # -------------------------------------------------------------------------

    def extend(
        self,
        sequence: str,
        region: Region,
        conformation: Conformation,
        threshold: float = 1.0,
    ) -> Region:
        """
        Grow a region independently at both termini.

        A 4-residue window anchored at the region's N-terminus is shifted
        one residue towards position 0 as long as the shifted window stays
        inside the sequence and its average is ``>= threshold``; each
        accepted shift moves the start by one. The C-terminus is extended
        the same way with a window anchored at the region's end.
        """
        n = len(sequence)

        start = region.start
        window_start = region.start
        while window_start - 1 >= 0:
            avg = self.average_propensity(
                sequence, window_start - 1, window_start - 1 + EXTENSION_WINDOW, conformation
            )
            if avg < threshold:
                break
            window_start -= 1
            start -= 1

        end = region.end
        window_end = region.end
        while window_end + 1 <= n:
            avg = self.average_propensity(
                sequence, window_end + 1 - EXTENSION_WINDOW, window_end + 1, conformation
            )
            if avg < threshold:
                break
            window_end += 1
            end += 1

        return Region(start=start, end=end)

    def extend_all(
        self,
        sequence: str,
        regions: Iterable[Region],
        conformation: Conformation,
        threshold: float = 1.0,
    ) -> list[Region]:
        """Extend every region."""
        return [self.extend(sequence, r, conformation, threshold) for r in regions]

    def filter(
        self,
        sequence: str,
        regions: Iterable[Region],
        conformation: Conformation,
        threshold: float,
    ) -> list[Region]:
        """Keep regions whose whole-region average is ``>= threshold``."""
        return [
            r for r in regions
            if self.region_average(sequence, r, conformation) >= threshold
        ]

    # -------------------------------------------------------------------------
    # Merging and conflict resolution
    # -------------------------------------------------------------------------

    @staticmethod
    def merge(regions: Iterable[Region]) -> list[Region]:
        """
        Merge overlapping and abutting regions.

        Regions are sorted by start; the running region absorbs the next one
        whenever ``current.end >= next.start``. The result is sorted and
        pairwise disjoint.
        """
        ordered = sorted(regions, key=lambda r: r.start)
        if len(ordered) < 2:
            return ordered

        merged = []
        current = ordered[0]
        for region in ordered[1:]:
            if current.touches(region):
                current = current.merge(region)
            else:
                merged.append(current)
                current = region
        merged.append(current)

        return merged

    def stronger(
        self,
        sequence: str,
        first: Region,
        first_conformation: Conformation,
        second: Region,
        second_conformation: Conformation,
    ) -> Region:
        """
        Return whichever of two regions has the higher average propensity.

        Exact ties go to the helix region; if neither is helix the second
        region wins.
        """
        first_avg = self.region_average(sequence, first, first_conformation)
        second_avg = self.region_average(sequence, second, second_conformation)

        if first_avg > second_avg:
            return first
        if second_avg > first_avg:
            return second
        if first_conformation == Conformation.HELIX:
            return first
        return second

    def resolve_conflicts(
        self,
        sequence: str,
        regions: list[Region],
        conformation: Conformation,
        competitors: list[Region],
        competitor_conformation: Conformation,
    ) -> list[Region]:
        """
        Drop every region that loses to an overlapping competitor.

        A region is removed whole (never trimmed) as soon as one overlapping
        competitor is stronger.
        """
        kept = []
        for region in regions:
            lost = False
            for other in competitors:
                if not region.overlaps(other):
                    continue
                winner = self.stronger(
                    sequence, region, conformation, other, competitor_conformation
                )
                if winner is other:
                    lost = True
                    break
            if not lost:
                kept.append(region)

        dropped = len(regions) - len(kept)
        if dropped:
            logger.debug(
                f"Dropped {dropped} {conformation.name.lower()} region(s) "
                f"overlapping stronger {competitor_conformation.name.lower()} regions"
            )
        return kept

    # -------------------------------------------------------------------------
    # Final assembly
    # -------------------------------------------------------------------------

    @staticmethod
    def coil_fill(helix: list[Region], strand: list[Region], length: int) -> list[Region]:
        """Maximal runs of positions covered by neither helix nor strand."""
        if length == 0:
            return []

        covered = [False] * length
        for region in list(helix) + list(strand):
            for i in range(max(region.start, 0), min(region.end, length)):
                covered[i] = True

        regions = []
        start = None
        for i, is_covered in enumerate(covered):
            if not is_covered and start is None:
                start = i
            elif is_covered and start is not None:
                regions.append(Region(start=start, end=i))
                start = None
        if start is not None:
            regions.append(Region(start=start, end=length))

        return regions

    @staticmethod
    def assemble(helix: list[Region], strand: list[Region], length: int) -> str:
        """
        Paint regions onto an all-coil string.

        Strand is painted first and helix last.
        """
        labels = ["C"] * length
        for region in strand:
            for i in range(region.start, min(region.end, length)):
                labels[i] = "E"
        for region in helix:
            for i in range(region.start, min(region.end, length)):
                labels[i] = "H"
        return "".join(labels)

    def annotate(
        self,
        sequence: str,
        regions: Iterable[Region],
        conformation: Conformation,
    ) -> list[Region]:
        """Attach each region's average propensity as its score."""
        return [
            r.model_copy(update={"score": self.region_average(sequence, r, conformation)})
            for r in regions
        ]
