"""Shared pytest fixtures."""

from typing import Optional

import pytest
from aws_cdk import App, RemovalPolicy, Stack

from infra.cdk.env_values import ApiEcsSettings, EnvValues

NAME_PREFIX = "test-dev"


@pytest.fixture
def stack() -> Stack:
    """Environment-agnostic stack in a fresh app."""
    return Stack(App(), "TestStack")


def ecs_settings(
    cpu: int = 256,
    memory_limit_mib: int = 512,
    desired_count: int = 1,
    min_capacity: int = 1,
    max_capacity: int = 3,
    **kwargs,
) -> ApiEcsSettings:
    return ApiEcsSettings(
        cpu=cpu,
        memory_limit_mib=memory_limit_mib,
        desired_count=desired_count,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        **kwargs,
    )


def env_values(
    env_name: str = "dev",
    api_ecs_settings: Optional[ApiEcsSettings] = None,
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
    **kwargs,
) -> EnvValues:
    return EnvValues(
        env_name=env_name,
        api_ecs_settings=api_ecs_settings or ecs_settings(),
        removal_policy=removal_policy,
        **kwargs,
    )
