"""
AWS CDK stack for the API platform.

Provisions per environment:
  - VPC with public / private subnets over two AZs (no NAT gateway)
  - Security groups for the API ECS service and VPC endpoints
  - Cognito user pool, app client and identity pool
  - ECS Fargate API service with CPU auto-scaling

Every physical name is scoped with ``name_prefix`` (``<project>-<env>``) so
several environments can share one account.
"""

from __future__ import annotations

from aws_cdk import CfnOutput, Stack
from constructs import Construct

from infra.cdk.components.api_ecs import ApiEcs
from infra.cdk.components.app_security_group import AppSecurityGroup
from infra.cdk.components.auth import Auth
from infra.cdk.components.network import Network
from infra.cdk.env_values import EnvValues
from infra.cdk.logging_config import get_logger

logger = get_logger(__name__)


class InfraStack(Stack):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        name_prefix: str,
        env_values: EnvValues,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        logger.info(
            "infra_stack_declaring",
            stack=construct_id,
            name_prefix=name_prefix,
            env_name=env_values.env_name,
        )

        self.network = Network(self, "network", name_prefix=name_prefix)

        self.security_group = AppSecurityGroup(
            self,
            "security-group",
            name_prefix=name_prefix,
            vpc=self.network.vpc,
            api_ecs_ingress_cidr=env_values.api_ecs_ingress_cidr,
        )

        self.auth = Auth(
            self,
            "auth",
            name_prefix=name_prefix,
            removal_policy=env_values.removal_policy,
        )

        self.api_ecs = ApiEcs(
            self,
            "api-ecs",
            name_prefix=name_prefix,
            vpc=self.network.vpc,
            api_ecs_security_group=self.security_group.api_ecs_security_group,
            ecs_settings=env_values.api_ecs_settings,
            removal_policy=env_values.removal_policy,
        )

        self._output(self.auth)

    def _output(self, auth: Auth) -> None:
        # Consumed by the front-end to configure Cognito sign-in
        CfnOutput(
            self,
            "userPoolId",
            value=auth.user_pool.user_pool_id,
            description="Cognito User Pool ID",
        )
        CfnOutput(
            self,
            "userPoolClientId",
            value=auth.user_pool_client.user_pool_client_id,
            description="Cognito User Pool Client ID",
        )
        CfnOutput(
            self,
            "identityPoolId",
            value=auth.id_pool.identity_pool_id,
            description="Cognito Identity Pool ID",
        )
