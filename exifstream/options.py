# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Reader options

Copyright 2025 DNAi inc.
"""

from dataclasses import dataclass
from enum import Enum


class MultiRationalPolicy(Enum):
    """How rationals with more than one component are reduced to one fraction."""
    # Fold every component with a 60x weight per level
    FOLD_ALL = "fold_all"
    # Fold only GPS coordinates and timestamps; other tags keep their first component
    FOLD_SEXAGESIMAL = "fold_sexagesimal"


@dataclass(frozen=True)
class ExifOptions:
    """
    Options shared by the directory walker, the decoder and the loader.
    
    Attributes:
        multi_rational_policy: Reduction applied to multi-component rationals
        strict: Fail a single entry (and skip it) when its payload is shorter
            than its format requires, instead of zero-padding it
        include_thumbnail: Also walk IFD1, the thumbnail directory
        max_ifds: Upper bound on directories visited in one walk
        max_entries: Directories announcing more entries than this are
            treated as corrupt
    """
    multi_rational_policy: MultiRationalPolicy = MultiRationalPolicy.FOLD_ALL
    strict: bool = False
    include_thumbnail: bool = False
    max_ifds: int = 8
    max_entries: int = 1000


DEFAULT_OPTIONS = ExifOptions()
