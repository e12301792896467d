"""
Per-environment deployment values.

Each environment (dev / stg / prd) gets one ``EnvValues`` record. The record is
handed to ``InfraStack`` unchanged; sizing numbers are passed through to the
provider as-is and are only checked by CloudFormation's own schema.
"""

from __future__ import annotations

import dataclasses
from typing import Dict, Optional

from aws_cdk import RemovalPolicy

from infra.cdk.exceptions.config_exceptions import UnknownEnvironmentError


@dataclasses.dataclass(frozen=True)
class ApiEcsSettings:
    cpu: int
    memory_limit_mib: int
    desired_count: int
    min_capacity: int
    max_capacity: int
    # Current placement is public subnets with a public IP, since the VPC has no NAT.
    assign_public_ip: bool = True
    use_private_subnets: bool = False


@dataclasses.dataclass(frozen=True)
class EnvValues:
    env_name: str
    api_ecs_settings: ApiEcsSettings
    # None opens the API ECS security group to any IPv4 address
    api_ecs_ingress_cidr: Optional[str] = None
    removal_policy: RemovalPolicy = RemovalPolicy.DESTROY


ENV_VALUES: Dict[str, EnvValues] = {
    "dev": EnvValues(
        env_name="dev",
        api_ecs_settings=ApiEcsSettings(
            cpu=256,
            memory_limit_mib=512,
            desired_count=1,
            min_capacity=1,
            max_capacity=3,
        ),
    ),
    "stg": EnvValues(
        env_name="stg",
        api_ecs_settings=ApiEcsSettings(
            cpu=256,
            memory_limit_mib=512,
            desired_count=1,
            min_capacity=1,
            max_capacity=3,
        ),
    ),
    "prd": EnvValues(
        env_name="prd",
        api_ecs_settings=ApiEcsSettings(
            cpu=512,
            memory_limit_mib=1024,
            desired_count=2,
            min_capacity=2,
            max_capacity=6,
        ),
        removal_policy=RemovalPolicy.RETAIN,
    ),
}


def get_env_values(env_name: str) -> EnvValues:
    try:
        return ENV_VALUES[env_name]
    except KeyError:
        raise UnknownEnvironmentError(
            f"No environment values registered for '{env_name}'. "
            f"Expected one of: {', '.join(sorted(ENV_VALUES))}."
        ) from None
