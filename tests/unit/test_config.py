import logging

import pytest
import structlog

from infra.cdk.config import Settings
from infra.cdk.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "INFRA_PROJECT_NAME",
        "INFRA_ENV_NAME",
        "INFRA_LOG_LEVEL",
        "INFRA_AWS_ACCOUNT",
        "INFRA_AWS_REGION",
        "CDK_DEFAULT_ACCOUNT",
        "CDK_DEFAULT_REGION",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.project_name == "sample-app"
        assert settings.env_name == "dev"
        assert settings.aws_account is None
        assert settings.aws_region == "ap-northeast-1"
        assert settings.name_prefix == "sample-app-dev"

    def test_reads_prefixed_environment_variables(self, monkeypatch):
        monkeypatch.setenv("INFRA_PROJECT_NAME", "billing")
        monkeypatch.setenv("INFRA_ENV_NAME", "stg")
        settings = Settings(_env_file=None)
        assert settings.name_prefix == "billing-stg"

    def test_falls_back_to_cdk_default_account_and_region(self, monkeypatch):
        monkeypatch.setenv("CDK_DEFAULT_ACCOUNT", "123456789012")
        monkeypatch.setenv("CDK_DEFAULT_REGION", "us-east-1")
        settings = Settings(_env_file=None)
        assert settings.aws_account == "123456789012"
        assert settings.aws_region == "us-east-1"

    def test_explicit_values_win(self, monkeypatch):
        monkeypatch.setenv("CDK_DEFAULT_REGION", "us-east-1")
        settings = Settings(_env_file=None, aws_region="eu-west-1")
        assert settings.aws_region == "eu-west-1"


class TestLogging:
    def test_configure_sets_root_level(self):
        configure_logging(Settings(_env_file=None, log_level="DEBUG"))
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) == 1
        assert isinstance(
            root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter
        )

    def test_unknown_level_falls_back_to_info(self):
        configure_logging(Settings(_env_file=None, log_level="chatty"))
        assert logging.getLogger().level == logging.INFO

    def test_get_logger_returns_bound_logger(self):
        configure_logging(Settings(_env_file=None))
        logger = get_logger("infra.test")
        logger.info("test_event", key="value")

    def test_project_and_env_bound_to_every_event(self):
        configure_logging(Settings(_env_file=None, project_name="billing", env_name="stg"))
        assert structlog.contextvars.get_contextvars() == {
            "project": "billing",
            "env_name": "stg",
        }
