"""
Shared field types
"""
from typing import Annotated, Optional
from pydantic import BeforeValidator

from freight.models.enums import TrailerLength


def normalize_trailer_length(value):
    """Accept 15 / 13.5 as well as "15" / "13.5" """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:g}"
    return value


TrailerLengthField = Annotated[Optional[TrailerLength], BeforeValidator(normalize_trailer_length)]
