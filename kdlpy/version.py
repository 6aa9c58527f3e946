"""KDL language versions."""

from enum import StrEnum


class KdlVersion(StrEnum):
    """Grammar revision used to read or write a document.

    `AUTO` only applies to reading: the document is parsed as KDL 2 and
    re-parsed as KDL 1 when that fails.
    """

    AUTO = "auto"
    V1 = "1"
    V2 = "2"
