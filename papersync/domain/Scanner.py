"""Scanner domain: discovered eSCL devices, their capabilities, scan settings and jobs."""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ColorMode = Literal["color", "grayscale", "blackwhite"]
InputSource = Literal["Platen", "Adf"]
ScanFormat = Literal["pdf", "jpeg", "png"]
ScannerProtocol = Literal["http", "https"]
JobStatus = Literal["pending", "processing", "completed", "failed"]

COLOR_MODE_TO_ESCL: Dict[str, str] = {
    "color": "RGB24",
    "grayscale": "Grayscale8",
    "blackwhite": "BlackAndWhite1",
}
FORMAT_TO_MIME: Dict[str, str] = {
    "pdf": "application/pdf",
    "jpeg": "image/jpeg",
    "png": "image/png",
}
INPUT_SOURCE_TO_ESCL: Dict[str, str] = {
    "Platen": "Platen",
    "Adf": "Feeder",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AdvertisedCapabilities(_CamelModel):
    color_modes: List[str] = Field(default_factory=list)
    document_formats: List[str] = Field(default_factory=list)


class DiscoveredScanner(_CamelModel):
    id: str
    name: str
    host: str
    port: int
    protocol: ScannerProtocol = "http"
    model: Optional[str] = None
    manufacturer: Optional[str] = None
    uuid: Optional[str] = None
    admin_url: Optional[str] = None
    capabilities: AdvertisedCapabilities = Field(default_factory=AdvertisedCapabilities)

    @property
    def dedupe_key(self) -> str:
        return self.uuid or self.host


class SourceCapabilities(_CamelModel):
    resolutions: List[int]
    color_modes: List[ColorMode]


class ScannerCapabilities(_CamelModel):
    input_sources: List[InputSource]
    source_capabilities: Dict[InputSource, SourceCapabilities]
    formats: List[str]
    max_width: int
    max_height: int
    min_width: int
    min_height: int


class ScanSettings(_CamelModel):
    color_mode: ColorMode = "color"
    resolution: int = Field(300, gt=0)
    format: ScanFormat = "jpeg"
    input_source: InputSource = "Platen"


class ScanJob(_CamelModel):
    job_url: str
    status: JobStatus = "pending"
