"""
Settings Models for the Textkernel relay
"""
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional

from cvscore.utils.exceptions import ConfigurationError


class TextkernelSettings(BaseModel):
    """Textkernel account and endpoint configuration"""
    account_id: Optional[str] = Field(default=None, description="Tx-AccountId header value")
    service_key: Optional[str] = Field(default=None, description="Tx-ServiceKey header value")
    base_url: str = Field(default="https://api.eu.textkernel.com/tx/v10", description="API base URL")
    timeout: int = Field(default=60, ge=1, le=300, description="Request timeout in seconds")

    @field_validator('base_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip("/")

    def require_credentials(self) -> None:
        """Raise ConfigurationError unless both credentials are present"""
        missing = [
            key for key, value in (
                ("TEXTKERNEL_ACCOUNT_ID", self.account_id),
                ("TEXTKERNEL_API_KEY", self.service_key),
            ) if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing API configuration",
                config_key=", ".join(missing),
            )


class UploadSettings(BaseModel):
    """Limits applied to uploaded documents"""
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Maximum size per file in MB")
    allowed_content_types: List[str] = Field(default_factory=lambda: ["application/pdf"])

    @property
    def max_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


class ScoringWeights(BaseModel):
    """Bimetric category weights sent with every scoring request"""
    position_title: float = Field(default=1.0, ge=0.0, description="Weight for job title match")
    skills: float = Field(default=1.0, ge=0.0, description="Weight for skills match")
    education: float = Field(default=1.0, ge=0.0, description="Weight for education match")
    experience: float = Field(default=1.0, ge=0.0, description="Weight for experience match")
    languages: float = Field(default=1.0, ge=0.0, description="Weight for language match")

    def as_payload(self) -> Dict[str, Any]:
        """Render as the Settings block of a bimetric scoring request"""
        payload: Dict[str, Any] = {}
        for category, weight in (
            ("PositionTitle", self.position_title),
            ("Skills", self.skills),
            ("Education", self.education),
            ("Experience", self.experience),
            ("Languages", self.languages),
        ):
            payload[category] = weight > 0
            payload[f"{category}Weight"] = weight
        return payload


class AppSettings(BaseModel):
    """Complete service configuration"""
    textkernel: TextkernelSettings = Field(default_factory=TextkernelSettings)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)
