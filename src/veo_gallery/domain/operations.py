"""Wire models for Gemini long-running video operations."""

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class VeoVideo(_WireModel):
    """Video locator inside a generated sample."""

    uri: str | None = None
    mime_type: str | None = Field(default=None, alias="mimeType")


class VeoSample(_WireModel):
    """Single generated sample."""

    video: VeoVideo | None = None


class VeoVideoResponse(_WireModel):
    """Generated samples plus safety filtering details."""

    generated_samples: list[VeoSample] = Field(
        default_factory=list, alias="generatedSamples"
    )
    rai_media_filtered_count: int | None = Field(
        default=None, alias="raiMediaFilteredCount"
    )
    rai_media_filtered_reasons: list[str] = Field(
        default_factory=list, alias="raiMediaFilteredReasons"
    )


class VeoOperationResponse(_WireModel):
    """Response body of a finished operation."""

    generate_video_response: VeoVideoResponse | None = Field(
        default=None, alias="generateVideoResponse"
    )


class VeoOperationError(_WireModel):
    """Error body of a failed operation."""

    code: int | None = None
    message: str = ""


class VeoOperation(_WireModel):
    """Long-running operation as returned by submit and poll."""

    name: str
    done: bool = False
    response: VeoOperationResponse | None = None
    error: VeoOperationError | None = None
