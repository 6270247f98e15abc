"""Export record for handing a serialized TEOS across a boundary."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from teos.models.base import TEOSBaseModel
from teos.models.constants import TEOS_DTO_TYPE
from teos.models.teos import Mode


class TEOSDto(TEOSBaseModel):
    """Read-only projection of a TEOS.

    Owns a serialized copy of the envelope (``blob``), so it stays valid
    independently of the TEOS it was built from.
    """

    type: Literal["torln.teos.dto.v1"] = TEOS_DTO_TYPE
    id: str = Field(..., description="Envelope identifier (aad.identifier)")
    mode: Mode
    ciphersuite: str = Field(..., description="Envelope suite string")
    blob: bytes = Field(..., description="Serialized TEOS")
    timestamp: datetime = Field(..., description="Creation time (UTC)")
