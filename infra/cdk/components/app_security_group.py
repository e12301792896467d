from typing import Optional

from aws_cdk import Tags
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from infra.cdk.logging_config import get_logger

logger = get_logger(__name__)


class AppSecurityGroup(Construct):
    """Security groups for the API ECS service and the VPC endpoints it calls."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        name_prefix: str,
        vpc: ec2.IVpc,
        api_ecs_ingress_cidr: Optional[str] = None,
    ) -> None:
        super().__init__(scope, construct_id)
        self._name_prefix = name_prefix

        # The endpoint group references the API ECS group, so it is declared first.
        self.api_ecs_security_group = self._create_api_ecs_security_group(
            vpc, api_ecs_ingress_cidr
        )
        self.vpc_endpoint_security_group = self._create_vpc_endpoint_security_group(
            vpc, self.api_ecs_security_group
        )

        logger.debug("security_groups_declared", name_prefix=name_prefix)

    def _create_api_ecs_security_group(
        self, vpc: ec2.IVpc, ingress_cidr: Optional[str]
    ) -> ec2.SecurityGroup:
        security_group = self._create_security_group(
            "ApiEcs", "api-ecs-sg", "API ECS Security Group", vpc
        )

        # Still open to the internet on HTTP until a load balancer fronts the service.
        if ingress_cidr is None:
            security_group.add_ingress_rule(
                ec2.Peer.any_ipv4(), ec2.Port.tcp(80), "from anywhere"
            )
        else:
            security_group.add_ingress_rule(
                ec2.Peer.ipv4(ingress_cidr), ec2.Port.tcp(80), f"from {ingress_cidr}"
            )

        return security_group

    def _create_vpc_endpoint_security_group(
        self, vpc: ec2.IVpc, api_ecs_security_group: ec2.SecurityGroup
    ) -> ec2.SecurityGroup:
        security_group = self._create_security_group(
            "VpcEndpoint", "vpc-endpoint-sg", "VPC Endpoint Security Group", vpc
        )
        security_group.add_ingress_rule(
            api_ecs_security_group, ec2.Port.tcp(443), "from API ECS"
        )
        return security_group

    def _create_security_group(
        self, construct_id: str, name: str, description: str, vpc: ec2.IVpc
    ) -> ec2.SecurityGroup:
        security_group_name = f"{self._name_prefix}-{name}"
        security_group = ec2.SecurityGroup(
            self,
            construct_id,
            security_group_name=security_group_name,
            description=description,
            vpc=vpc,
        )
        Tags.of(security_group).add("Name", security_group_name)
        return security_group
