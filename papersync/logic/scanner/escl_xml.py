"""eSCL XML helpers: capability parsing and scan-request generation.

eSCL replies use a small, fixed tag vocabulary, so values are pulled out with
tag-scoped regular expressions rather than a namespace-aware XML parser. The
parser never raises: anything missing or malformed is filled with defaults so
discovery always has something to show, even for quirky scanner firmware.
"""
import re
from typing import Dict, List, Optional

from papersync.domain.Scanner import (
    COLOR_MODE_TO_ESCL, FORMAT_TO_MIME, INPUT_SOURCE_TO_ESCL,
    ScannerCapabilities, ScanSettings, SourceCapabilities,
)
from papersync.utilities.constants import (
    DEFAULT_COLOR_MODES, DEFAULT_DOCUMENT_FORMATS, DEFAULT_RESOLUTIONS,
    DEFAULT_MAX_HEIGHT, DEFAULT_MAX_WIDTH, DEFAULT_MIN_HEIGHT, DEFAULT_MIN_WIDTH,
    ESCL_NAMESPACE, PWG_NAMESPACE, SCAN_REGION_HEIGHT, SCAN_REGION_WIDTH,
)

INPUT_SOURCES = ("Platen", "Adf")
_XRES_RE = re.compile(r"<scan:XResolution>\s*(\d+)\s*</scan:XResolution>", re.I)
_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _tag_re(tag: str) -> re.Pattern:
    return re.compile(rf"<{re.escape(tag)}[^>]*>([^<]*)</{re.escape(tag)}>", re.I)


def xml_value(xml: str, tag: str) -> Optional[str]:
    m = _tag_re(tag).search(xml)
    return m.group(1).strip() if m else None


def xml_values(xml: str, tag: str) -> List[str]:
    return [v.strip() for v in _tag_re(tag).findall(xml)]


def extract_section(xml: str, name: str) -> Optional[str]:
    m = re.search(rf"<scan:{name}[^>]*>[\s\S]*?</scan:{name}>", xml, re.I)
    return m.group(0) if m else None


def _int_or(value: Optional[str], default: int) -> int:
    """Leading integer of value ("2550.0" -> 2550), or default when there is none."""
    m = _LEADING_INT_RE.match(value or "")
    return int(m.group(1)) if m else default


def parse_resolutions(section: str) -> List[int]:
    found = sorted({int(v) for v in _XRES_RE.findall(section)})
    return found or list(DEFAULT_RESOLUTIONS)


def parse_color_modes(section: str) -> List[str]:
    modes = []
    if "RGB24" in section or "Color" in section:
        modes.append("color")
    if "Grayscale8" in section or "Grayscale" in section:
        modes.append("grayscale")
    if "BlackAndWhite1" in section or "Binary" in section:
        modes.append("blackwhite")
    return modes or list(DEFAULT_COLOR_MODES)


def parse_capabilities(xml: str) -> ScannerCapabilities:
    xml = xml or ""
    input_sources: List[str] = []
    sources: Dict[str, SourceCapabilities] = {
        name: SourceCapabilities(resolutions=[300], color_modes=list(DEFAULT_COLOR_MODES))
        for name in INPUT_SOURCES
    }
    for name in INPUT_SOURCES:
        section = extract_section(xml, name)
        if section is None:
            continue
        input_sources.append(name)
        sources[name] = SourceCapabilities(
            resolutions=parse_resolutions(section),
            color_modes=parse_color_modes(section),
        )
    if not input_sources:
        input_sources.append("Platen")

    formats = xml_values(xml, "pwg:DocumentFormat") or list(DEFAULT_DOCUMENT_FORMATS)
    return ScannerCapabilities(
        input_sources=input_sources,
        source_capabilities=sources,
        formats=formats,
        max_width=_int_or(xml_value(xml, "scan:MaxWidth"), DEFAULT_MAX_WIDTH),
        max_height=_int_or(xml_value(xml, "scan:MaxHeight"), DEFAULT_MAX_HEIGHT),
        min_width=_int_or(xml_value(xml, "scan:MinWidth"), DEFAULT_MIN_WIDTH),
        min_height=_int_or(xml_value(xml, "scan:MinHeight"), DEFAULT_MIN_HEIGHT),
    )


_SCAN_REQUEST_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<scan:ScanSettings xmlns:scan="{escl_ns}"
                   xmlns:pwg="{pwg_ns}">
  <pwg:Version>2.0</pwg:Version>
  <scan:Intent>Document</scan:Intent>
  <pwg:ScanRegions>
    <pwg:ScanRegion>
      <pwg:ContentRegionUnits>escl:ThreeHundredthsOfInches</pwg:ContentRegionUnits>
      <pwg:XOffset>0</pwg:XOffset>
      <pwg:YOffset>0</pwg:YOffset>
      <pwg:Width>{width}</pwg:Width>
      <pwg:Height>{height}</pwg:Height>
    </pwg:ScanRegion>
  </pwg:ScanRegions>
  <pwg:InputSource>{input_source}</pwg:InputSource>
  <scan:ColorMode>{color_mode}</scan:ColorMode>
  <scan:XResolution>{resolution}</scan:XResolution>
  <scan:YResolution>{resolution}</scan:YResolution>
  <pwg:DocumentFormat>{document_format}</pwg:DocumentFormat>
</scan:ScanSettings>"""


def build_scan_request_xml(settings: ScanSettings) -> str:
    """Pure template fill; resolution is not checked against capabilities here."""
    return _SCAN_REQUEST_TEMPLATE.format(
        escl_ns=ESCL_NAMESPACE,
        pwg_ns=PWG_NAMESPACE,
        width=SCAN_REGION_WIDTH,
        height=SCAN_REGION_HEIGHT,
        input_source=INPUT_SOURCE_TO_ESCL[settings.input_source],
        color_mode=COLOR_MODE_TO_ESCL[settings.color_mode],
        resolution=settings.resolution,
        document_format=FORMAT_TO_MIME[settings.format],
    )


__all__ = ['parse_capabilities', 'build_scan_request_xml', 'xml_value', 'xml_values', 'extract_section']
