"""
VPC for the API service.

172.16.0.0/16 split over two AZs into one public and one private /24 each.
No NAT gateway is provisioned. The private subnets are still declared as
PRIVATE_WITH_EGRESS, so they have no working egress path as declared; workloads
that need outbound access run in the public subnets for now.
"""

from typing import List

from aws_cdk import Tags
from aws_cdk import aws_ec2 as ec2
from constructs import Construct

from infra.cdk.logging_config import get_logger

logger = get_logger(__name__)

VPC_CIDR = "172.16.0.0/16"
MAX_AZS = 2


class Network(Construct):
    def __init__(self, scope: Construct, construct_id: str, *, name_prefix: str) -> None:
        super().__init__(scope, construct_id)

        vpc = ec2.Vpc(
            self,
            "vpc",
            vpc_name=f"{name_prefix}-vpc",
            ip_addresses=ec2.IpAddresses.cidr(VPC_CIDR),
            nat_gateways=0,
            max_azs=MAX_AZS,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name="Public",
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=24,
                ),
                ec2.SubnetConfiguration(
                    name="Private",
                    subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                    cidr_mask=24,
                ),
            ],
        )

        self._tag_subnets(vpc.public_subnets, f"{name_prefix}-public")
        self._tag_subnets(vpc.private_subnets, f"{name_prefix}-private")

        igw = vpc.node.find_child("IGW")
        Tags.of(igw).add("Name", f"{name_prefix}-igw")

        logger.debug(
            "network_declared",
            name_prefix=name_prefix,
            public_subnets=len(vpc.public_subnets),
            private_subnets=len(vpc.private_subnets),
        )
        self.vpc: ec2.IVpc = vpc

    @staticmethod
    def _tag_subnets(subnets: List[ec2.ISubnet], name_base: str) -> None:
        for no, subnet in enumerate(subnets, start=1):
            Tags.of(subnet).add("Name", f"{name_base}-subnet-{no}")

            rtb = subnet.node.find_child("RouteTable")
            Tags.of(rtb).add("Name", f"{name_base}-rtb-{no}")
