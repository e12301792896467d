from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="INFRA_",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    project_name: str = "sample-app"
    env_name: str = "dev"  # overridden by `cdk deploy -c env=<name>`
    log_level: str = "INFO"

    # Target account / region; the CDK CLI exports CDK_DEFAULT_* for the active profile
    aws_account: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("INFRA_AWS_ACCOUNT", "CDK_DEFAULT_ACCOUNT"),
    )
    aws_region: str = Field(
        default="ap-northeast-1",
        validation_alias=AliasChoices("INFRA_AWS_REGION", "CDK_DEFAULT_REGION"),
    )

    @property
    def name_prefix(self) -> str:
        return f"{self.project_name}-{self.env_name}"


settings = Settings()
