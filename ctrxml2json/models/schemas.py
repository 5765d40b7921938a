"""Data models for conversion options and results."""
import codecs
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ctrxml2json import config


class ParseErrorPolicy(str, Enum):
    """What a batch does when one file cannot be converted."""
    SKIP = "skip"
    ABORT = "abort"


class AmpersandPolicy(str, Enum):
    """How the sanitizer escapes ampersands.

    LEGACY escapes every ampersand, including those that already start an
    entity reference, so '&amp;' becomes '&amp;amp;'. PRESERVE_ENTITIES
    escapes only bare ampersands.
    """
    LEGACY = "legacy"
    PRESERVE_ENTITIES = "preserve-entities"


class ConversionStatus(str, Enum):
    """Outcome of converting one file."""
    CONVERTED = "converted"
    FAILED = "failed"
    SKIPPED = "skipped"


class ConversionOptions(BaseModel):
    """Options applied to every file of a run."""
    on_parse_error: ParseErrorPolicy = Field(default=ParseErrorPolicy.SKIP)
    ampersand_policy: AmpersandPolicy = Field(default=AmpersandPolicy.LEGACY)
    ascii_only: bool = True
    escape_slashes: bool = True
    input_encoding: str = Field(default="utf-8", min_length=1)

    class Config:
        """Pydantic configuration."""
        extra = "forbid"
        frozen = True

    @field_validator("input_encoding")
    @classmethod
    def validate_input_encoding(cls, v):
        """Reject encodings Python cannot decode with."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"unknown encoding: {v}")
        return v

    @classmethod
    def from_config(cls, **overrides) -> "ConversionOptions":
        """Build options from config values, replaced by any non-None override."""
        values = {
            "on_parse_error": config.ON_PARSE_ERROR,
            "ampersand_policy": config.AMPERSAND_POLICY,
            "ascii_only": config.JSON_ASCII_ONLY,
            "escape_slashes": config.JSON_ESCAPE_SLASHES,
            "input_encoding": config.INPUT_ENCODING,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})
        return cls(**values)


class ConversionResult(BaseModel):
    """Result of converting a single XML file."""
    input_path: str
    output_path: str
    status: ConversionStatus
    error: Optional[str] = None


class BatchSummary(BaseModel):
    """Results of a batch run, in processing order."""
    results: List[ConversionResult] = Field(default_factory=list)
    aborted: bool = False

    def _count(self, status: ConversionStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def converted(self) -> int:
        return self._count(ConversionStatus.CONVERTED)

    @property
    def failed(self) -> int:
        return self._count(ConversionStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(ConversionStatus.SKIPPED)

    @property
    def ok(self) -> bool:
        """True when nothing failed and the batch ran to the end."""
        return self.failed == 0 and not self.aborted
