"""TEOS data models.

Public exports:
    AADPayload, AAD: context metadata (caller input / attached form)
    BaseTEOS: unsigned encrypted record
    EnvelopeAuth, PSKEnvelope, MLSEnvelope: signed envelope parts
    PskTEOS, MlsTEOS, TEOS: complete envelopes (tagged on ``mode``)
    TEOSDto: export projection
"""

from teos.models.base import TEOSBaseModel
from teos.models.dto import TEOSDto
from teos.models.teos import (
    AAD,
    AADPayload,
    BaseTEOS,
    EnvelopeAuth,
    MLSEnvelope,
    MlsTEOS,
    Mode,
    PSKEnvelope,
    PskTEOS,
    TEOS,
    teos_adapter,
)

__all__ = [
    "AAD",
    "AADPayload",
    "BaseTEOS",
    "EnvelopeAuth",
    "MLSEnvelope",
    "MlsTEOS",
    "Mode",
    "PSKEnvelope",
    "PskTEOS",
    "TEOS",
    "TEOSBaseModel",
    "TEOSDto",
    "teos_adapter",
]
