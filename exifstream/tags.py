# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
Decoded tag values

A decoded tag is one of three variants sharing the same base record:
BasicTag (text only), IntegerTag and FloatTag. The variant is chosen
from the entry's format code when the tag is decoded and never changes.

Copyright 2025 DNAi inc.
"""

import math
from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class TagBase:
    """
    Fields shared by every tag variant.
    
    Attributes:
        tag_id: Numeric tag identifier (e.g., 274 for Orientation)
        label: Tag name, trimmed of surrounding spaces
        text_value: Human-readable value, trimmed of surrounding spaces
    """
    tag_id: int
    label: str
    text_value: str

    @property
    def text_label(self) -> str:
        return self.label


@dataclass(frozen=True)
class BasicTag(TagBase):
    """A tag without a numeric payload; text_value is its only representation."""


@dataclass(frozen=True)
class IntegerTag(TagBase):
    """A BYTE, SHORT or LONG tag (signed variants included)."""
    int_value: int


@dataclass(frozen=True)
class FloatTag(TagBase):
    """
    A RATIONAL or SRATIONAL tag.
    
    The value is kept as a fraction; float_value() derives the float on
    demand. For multi-component rationals (e.g., GPS degrees, minutes,
    seconds) numerator/denominator hold the folded fraction and
    components keeps every raw pair in payload order.
    """
    numerator: int
    denominator: int
    components: Tuple[Tuple[int, int], ...] = ()

    def float_value(self) -> float:
        """
        Numerator divided by denominator.
        
        A zero denominator only comes from malformed data: 0/0 yields
        nan and n/0 yields an infinity carrying the sign of n.
        """
        if self.denominator == 0:
            if self.numerator == 0:
                return math.nan
            return math.copysign(math.inf, self.numerator)
        return self.numerator / self.denominator


Tag = Union[BasicTag, IntegerTag, FloatTag]
