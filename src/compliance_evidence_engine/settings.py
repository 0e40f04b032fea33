"""Service-specific settings for compliance-evidence-engine.

Settings use the COMPLIANCE_EVIDENCE_ prefix and cover:
- Application base URL used when building finding links for notifications
- Document staleness window used by the documents progress calculation
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for compliance-evidence-engine.

    Environment variable prefix: COMPLIANCE_EVIDENCE_
    """

    service_name: str = "compliance-evidence-engine"

    # -------------------------------------------------------------------------
    # Notification links
    # -------------------------------------------------------------------------

    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL of the web application. Finding URLs embedded in "
        "email and push payloads are built on top of this value.",
    )

    # -------------------------------------------------------------------------
    # Document freshness
    # -------------------------------------------------------------------------

    document_staleness_days: int = Field(
        default=180,
        ge=1,
        description="Days after which a submitted document is considered outstanding. "
        "Expressed as a fixed number of days (6 x 30), not calendar months.",
    )

    model_config = SettingsConfigDict(env_prefix="COMPLIANCE_EVIDENCE_")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings instance.

    Returns:
        Cached Settings loaded from the environment.
    """
    return Settings()
