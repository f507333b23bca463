"""
fleet/models.py -- Domain dataclass for the CarManager fleet.

Pure data container with zero logic. Persistence lives in fleet/store.py and
orchestration in fleet/service.py.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Vehicle:
    """A vehicle record.

    year >= 1900 is enforced at the HTTP boundary (api/validation.py), not here.

    id is None before the record is written to the database.
    """

    name: str
    brand: str
    year: int = 0
    id: Optional[int] = None
