"""Minecraft protocol numbers and the version bands that share block ids."""

from __future__ import annotations

from dataclasses import dataclass

MC_1_13 = 393
MC_1_14 = 477
MC_1_15_2 = 578
MC_1_16 = 735
MC_1_16_5 = 754
MC_1_17 = 755
MC_1_18_2 = 758
MC_1_19 = 759
MC_1_19_2 = 760
MC_1_19_3 = 761
MC_1_19_4 = 762
MC_1_20 = 763

MINIMUM_SUPPORTED_PROTOCOL = MC_1_13


@dataclass(frozen=True, slots=True)
class VersionBand:
    """Contiguous protocol range, both ends inclusive."""

    name: str
    min_version: int
    max_version: int

    def contains(self, protocol_version: int) -> bool:
        return self.min_version <= protocol_version <= self.max_version


BAND_1_13 = VersionBand("1.13", MC_1_13, MC_1_14 - 1)
BAND_1_14 = VersionBand("1.14-1.15.2", MC_1_14, MC_1_15_2)
BAND_1_16 = VersionBand("1.16-1.16.5", MC_1_16, MC_1_16_5)
BAND_1_17 = VersionBand("1.17-1.18.2", MC_1_17, MC_1_18_2)
BAND_1_19 = VersionBand("1.19-1.19.2", MC_1_19, MC_1_19_2)
BAND_1_19_3 = VersionBand("1.19.3", MC_1_19_3, MC_1_19_3)
BAND_1_19_4 = VersionBand("1.19.4", MC_1_19_4, MC_1_19_4)
BAND_1_20 = VersionBand("1.20-1.20.1", MC_1_20, MC_1_20)

ALL_BANDS: tuple[VersionBand, ...] = (
    BAND_1_13,
    BAND_1_14,
    BAND_1_16,
    BAND_1_17,
    BAND_1_19,
    BAND_1_19_3,
    BAND_1_19_4,
    BAND_1_20,
)


def band_for(protocol_version: int) -> VersionBand | None:
    for band in ALL_BANDS:
        if band.contains(protocol_version):
            return band
    return None
