"""
Service identification for error reporting.

The service context is appended to error records so that the error-reporting
backend can group them by service and version.
"""

from pydantic import BaseModel, ConfigDict, Field


class ServiceContext(BaseModel):
    """
    Identity of the running service.

    Attributes:
        service: Service name (e.g. the project name from pyproject.toml)
        version: Deployed version string
    """

    service: str = Field(..., min_length=1, description="Service name")
    version: str = Field(default="latest", description="Service version")

    model_config = ConfigDict(frozen=True)
