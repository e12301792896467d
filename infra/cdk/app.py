#!/usr/bin/env python3
"""
CDK app entry point.

Usage
-----
Install the project (from the repo root):
    pip install -e .

Bootstrap (once per account/region):
    cdk bootstrap aws://<ACCOUNT_ID>/<REGION>

Deploy an environment (dev / stg / prd):
    cdk deploy -c env=dev

When no ``env`` context is given, ``INFRA_ENV_NAME`` (default ``dev``) is used.
Project name, account and region come from ``INFRA_*`` variables or ``.env``;
see ``infra.cdk.config.Settings``.
"""

from typing import Optional

import aws_cdk as cdk

from infra.cdk.config import Settings, settings as default_settings
from infra.cdk.env_values import get_env_values
from infra.cdk.exceptions.config_exceptions import UnknownEnvironmentError
from infra.cdk.logging_config import configure_logging, get_logger
from infra.cdk.stacks.infra_stack import InfraStack

logger = get_logger(__name__)


def resolve_settings(app: cdk.App, settings: Optional[Settings] = None) -> Settings:
    """Settings with ``env_name`` taken from the ``env`` context when present."""
    settings = settings or default_settings
    env_name = app.node.try_get_context("env") or settings.env_name
    return settings.model_copy(update={"env_name": env_name})


def build_app(
    app: Optional[cdk.App] = None, settings: Optional[Settings] = None
) -> cdk.App:
    app = app or cdk.App()
    settings = resolve_settings(app, settings)
    env_name = settings.env_name

    try:
        env_values = get_env_values(env_name)
    except UnknownEnvironmentError as exc:
        logger.error("unknown_environment", env_name=env_name, error=exc.message)
        raise

    name_prefix = settings.name_prefix
    InfraStack(
        app,
        f"{name_prefix}-infra-stack",
        name_prefix=name_prefix,
        env_values=env_values,
        env=cdk.Environment(account=settings.aws_account, region=settings.aws_region),
    )

    cdk.Tags.of(app).add("Project", settings.project_name)
    cdk.Tags.of(app).add("Environment", env_name)

    return app


def main(app: Optional[cdk.App] = None) -> None:
    app = app or cdk.App()
    # Logging must see the context env, not the INFRA_ENV_NAME default
    settings = resolve_settings(app)
    configure_logging(settings)
    logger.info("synth_starting")
    build_app(app, settings)
    assembly = app.synth()
    logger.info("synth_finished", directory=assembly.directory)


if __name__ == "__main__":
    main()
