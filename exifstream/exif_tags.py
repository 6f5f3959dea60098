# Copyright 2025 DNAi inc.

# Dual-licensed under the DNAi Free License v1.1 and the
# DNAi Commercial License v1.1.
# See the LICENSE files in the project root for details.

"""
EXIF tag definitions

Tag names per directory and well-known tag identifiers with their
enumerated value ranges. The constants are exposed for callers; the
decoder itself never interprets them.

Copyright 2025 DNAi inc.
"""

from typing import Dict, FrozenSet

# ============================================================
# Directory names
# ============================================================
IFD0 = "IFD0"
IFD1 = "IFD1"
EXIF_IFD = "EXIF"
GPS_IFD = "GPS"
INTEROP_IFD = "Interoperability"

# ============================================================
# Sub-directory pointer tags (followed by the walker, never yielded)
# ============================================================
TAG_EXIF_IFD_POINTER = 0x8769
TAG_GPS_IFD_POINTER = 0x8825
TAG_INTEROP_IFD_POINTER = 0xA005

# ============================================================
# Well-known tags
# ============================================================
TAG_MAKE = 0x010F
TAG_MODEL = 0x0110
TAG_ORIENTATION = 274  # 0x0112
TAG_DATETIME = 0x0132
TAG_DATETIME_ORIGINAL = 0x9003
TAG_DATETIME_DIGITIZED = 0x9004

# Orientation (TAG_ORIENTATION), 1-8
ORIENTATION_UNKNOWN = 0
ORIENTATION_TOP_LEFT = 1
ORIENTATION_TOP_RIGHT = 2
ORIENTATION_BOTTOM_RIGHT = 3
ORIENTATION_BOTTOM_LEFT = 4
ORIENTATION_LEFT_TOP = 5
ORIENTATION_RIGHT_TOP = 6
ORIENTATION_RIGHT_BOTTOM = 7
ORIENTATION_LEFT_BOTTOM = 8

ORIENTATION_VALUES: FrozenSet[int] = frozenset(range(ORIENTATION_TOP_LEFT, ORIENTATION_LEFT_BOTTOM + 1))

# GPS directory
TAG_GPS_VERSION_ID = 0x0000
TAG_GPS_LATITUDE_REF = 0x0001
TAG_GPS_LATITUDE = 0x0002
TAG_GPS_LONGITUDE_REF = 0x0003
TAG_GPS_LONGITUDE = 0x0004
TAG_GPS_ALTITUDE_REF = 0x0005
TAG_GPS_ALTITUDE = 0x0006
TAG_GPS_TIMESTAMP = 0x0007
TAG_GPS_DEST_LATITUDE_REF = 0x0013
TAG_GPS_DEST_LATITUDE = 0x0014
TAG_GPS_DEST_LONGITUDE_REF = 0x0015
TAG_GPS_DEST_LONGITUDE = 0x0016
TAG_GPS_DATESTAMP = 0x001D

# GPSAltitudeRef
GPS_ALTITUDE_ABOVE_SEA_LEVEL = 0
GPS_ALTITUDE_BELOW_SEA_LEVEL = 1

# GPSLatitudeRef / GPSLongitudeRef
GPS_LATITUDE_NORTH = "N"
GPS_LATITUDE_SOUTH = "S"
GPS_LONGITUDE_EAST = "E"
GPS_LONGITUDE_WEST = "W"

GPS_LATITUDE_REFS: FrozenSet[str] = frozenset({GPS_LATITUDE_NORTH, GPS_LATITUDE_SOUTH})
GPS_LONGITUDE_REFS: FrozenSet[str] = frozenset({GPS_LONGITUDE_EAST, GPS_LONGITUDE_WEST})

# Multi-component rationals stored as degrees/minutes/seconds (or h/m/s)
SEXAGESIMAL_GPS_TAGS: FrozenSet[int] = frozenset({
    TAG_GPS_LATITUDE,
    TAG_GPS_LONGITUDE,
    TAG_GPS_TIMESTAMP,
    TAG_GPS_DEST_LATITUDE,
    TAG_GPS_DEST_LONGITUDE,
})

# ============================================================
# IFD0 / IFD1 / EXIF IFD tag names (shared id space)
# ============================================================
EXIF_TAG_NAMES: Dict[int, str] = {
    0x000B: "ProcessingSoftware",
    0x00FE: "SubfileType",
    0x0100: "ImageWidth",
    0x0101: "ImageLength",
    0x0102: "BitsPerSample",
    0x0103: "Compression",
    0x0106: "PhotometricInterpretation",
    0x010E: "ImageDescription",
    0x010F: "Make",
    0x0110: "Model",
    0x0111: "StripOffsets",
    0x0112: "Orientation",
    0x0115: "SamplesPerPixel",
    0x0116: "RowsPerStrip",
    0x0117: "StripByteCounts",
    0x011A: "XResolution",
    0x011B: "YResolution",
    0x011C: "PlanarConfiguration",
    0x0128: "ResolutionUnit",
    0x012D: "TransferFunction",
    0x0131: "Software",
    0x0132: "DateTime",
    0x013B: "Artist",
    0x013C: "HostComputer",
    0x013E: "WhitePoint",
    0x013F: "PrimaryChromaticities",
    0x0201: "JPEGInterchangeFormat",
    0x0202: "JPEGInterchangeFormatLength",
    0x0211: "YCbCrCoefficients",
    0x0212: "YCbCrSubSampling",
    0x0213: "YCbCrPositioning",
    0x0214: "ReferenceBlackWhite",
    0x02BC: "XMLPacket",
    0x8298: "Copyright",
    0x829A: "ExposureTime",
    0x829D: "FNumber",
    0x8769: "ExifIfdPointer",
    0x8822: "ExposureProgram",
    0x8824: "SpectralSensitivity",
    0x8825: "GPSInfoIfdPointer",
    0x8827: "ISOSpeedRatings",
    0x8828: "OECF",
    0x8830: "SensitivityType",
    0x8832: "RecommendedExposureIndex",
    0x9000: "ExifVersion",
    0x9003: "DateTimeOriginal",
    0x9004: "DateTimeDigitized",
    0x9010: "OffsetTime",
    0x9011: "OffsetTimeOriginal",
    0x9012: "OffsetTimeDigitized",
    0x9101: "ComponentsConfiguration",
    0x9102: "CompressedBitsPerPixel",
    0x9201: "ShutterSpeedValue",
    0x9202: "ApertureValue",
    0x9203: "BrightnessValue",
    0x9204: "ExposureBiasValue",
    0x9205: "MaxApertureValue",
    0x9206: "SubjectDistance",
    0x9207: "MeteringMode",
    0x9208: "LightSource",
    0x9209: "Flash",
    0x920A: "FocalLength",
    0x9214: "SubjectArea",
    0x927C: "MakerNote",
    0x9286: "UserComment",
    0x9290: "SubSecTime",
    0x9291: "SubSecTimeOriginal",
    0x9292: "SubSecTimeDigitized",
    0xA000: "FlashpixVersion",
    0xA001: "ColorSpace",
    0xA002: "PixelXDimension",
    0xA003: "PixelYDimension",
    0xA004: "RelatedSoundFile",
    0xA005: "InteroperabilityIfdPointer",
    0xA20B: "FlashEnergy",
    0xA20E: "FocalPlaneXResolution",
    0xA20F: "FocalPlaneYResolution",
    0xA210: "FocalPlaneResolutionUnit",
    0xA214: "SubjectLocation",
    0xA215: "ExposureIndex",
    0xA217: "SensingMethod",
    0xA300: "FileSource",
    0xA301: "SceneType",
    0xA302: "CFAPattern",
    0xA401: "CustomRendered",
    0xA402: "ExposureMode",
    0xA403: "WhiteBalance",
    0xA404: "DigitalZoomRatio",
    0xA405: "FocalLengthIn35mmFilm",
    0xA406: "SceneCaptureType",
    0xA407: "GainControl",
    0xA408: "Contrast",
    0xA409: "Saturation",
    0xA40A: "Sharpness",
    0xA40C: "SubjectDistanceRange",
    0xA420: "ImageUniqueID",
    0xA430: "CameraOwnerName",
    0xA431: "BodySerialNumber",
    0xA432: "LensSpecification",
    0xA433: "LensMake",
    0xA434: "LensModel",
    0xA435: "LensSerialNumber",
    0xA500: "Gamma",
}

# ============================================================
# GPS IFD tag names
# ============================================================
GPS_TAG_NAMES: Dict[int, str] = {
    0x0000: "GPSVersionID",
    0x0001: "GPSLatitudeRef",
    0x0002: "GPSLatitude",
    0x0003: "GPSLongitudeRef",
    0x0004: "GPSLongitude",
    0x0005: "GPSAltitudeRef",
    0x0006: "GPSAltitude",
    0x0007: "GPSTimeStamp",
    0x0008: "GPSSatellites",
    0x0009: "GPSStatus",
    0x000A: "GPSMeasureMode",
    0x000B: "GPSDOP",
    0x000C: "GPSSpeedRef",
    0x000D: "GPSSpeed",
    0x000E: "GPSTrackRef",
    0x000F: "GPSTrack",
    0x0010: "GPSImgDirectionRef",
    0x0011: "GPSImgDirection",
    0x0012: "GPSMapDatum",
    0x0013: "GPSDestLatitudeRef",
    0x0014: "GPSDestLatitude",
    0x0015: "GPSDestLongitudeRef",
    0x0016: "GPSDestLongitude",
    0x0017: "GPSDestBearingRef",
    0x0018: "GPSDestBearing",
    0x0019: "GPSDestDistanceRef",
    0x001A: "GPSDestDistance",
    0x001B: "GPSProcessingMethod",
    0x001C: "GPSAreaInformation",
    0x001D: "GPSDateStamp",
    0x001E: "GPSDifferential",
    0x001F: "GPSHPositioningError",
}

# ============================================================
# Interoperability IFD tag names
# ============================================================
INTEROP_TAG_NAMES: Dict[int, str] = {
    0x0001: "InteroperabilityIndex",
    0x0002: "InteroperabilityVersion",
    0x1000: "RelatedImageFileFormat",
    0x1001: "RelatedImageWidth",
    0x1002: "RelatedImageLength",
}

_NAMES_BY_IFD: Dict[str, Dict[int, str]] = {
    IFD0: EXIF_TAG_NAMES,
    IFD1: EXIF_TAG_NAMES,
    EXIF_IFD: EXIF_TAG_NAMES,
    GPS_IFD: GPS_TAG_NAMES,
    INTEROP_IFD: INTEROP_TAG_NAMES,
}


def tag_name(tag_id: int, ifd: str = IFD0) -> str:
    """
    Look up the name of a tag within a directory.
    
    Args:
        tag_id: Numeric tag identifier
        ifd: Directory the tag was found in (IFD0, EXIF, GPS, ...)
        
    Returns:
        The tag name, or "Tag 0xNNNN" for unknown tags
    """
    names = _NAMES_BY_IFD.get(ifd, EXIF_TAG_NAMES)
    return names.get(tag_id, f"Tag 0x{tag_id:04X}")
