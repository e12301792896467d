import pytest
from aws_cdk import App, Stack
from aws_cdk import aws_ec2 as ec2
from aws_cdk.assertions import Match, Template

from infra.cdk.components.app_security_group import AppSecurityGroup
from tests.conftest import NAME_PREFIX


def build(api_ecs_ingress_cidr=None):
    stack = Stack(App(), "TestStack")
    vpc = ec2.Vpc(stack, "Vpc", max_azs=2)
    security_group = AppSecurityGroup(
        stack,
        "security-group",
        name_prefix=NAME_PREFIX,
        vpc=vpc,
        api_ecs_ingress_cidr=api_ecs_ingress_cidr,
    )
    return stack, security_group


def group_id(stack: Stack, security_group: ec2.SecurityGroup) -> dict:
    return {
        "Fn::GetAtt": [stack.get_logical_id(security_group.node.default_child), "GroupId"]
    }


class TestApiEcsSecurityGroup:
    def test_open_on_port_80_from_anywhere_by_default(self):
        stack, _ = build()
        Template.from_stack(stack).has_resource_properties(
            "AWS::EC2::SecurityGroup",
            {
                "GroupName": "test-dev-api-ecs-sg",
                "GroupDescription": "API ECS Security Group",
                "SecurityGroupIngress": [
                    {
                        "CidrIp": "0.0.0.0/0",
                        "Description": "from anywhere",
                        "FromPort": 80,
                        "IpProtocol": "tcp",
                        "ToPort": 80,
                    }
                ],
                "Tags": Match.array_with([{"Key": "Name", "Value": "test-dev-api-ecs-sg"}]),
            },
        )

    def test_ingress_can_be_restricted_to_a_cidr(self):
        stack, _ = build(api_ecs_ingress_cidr="10.0.0.0/8")
        Template.from_stack(stack).has_resource_properties(
            "AWS::EC2::SecurityGroup",
            {
                "GroupName": "test-dev-api-ecs-sg",
                "SecurityGroupIngress": [
                    Match.object_like(
                        {"CidrIp": "10.0.0.0/8", "FromPort": 80, "ToPort": 80}
                    )
                ],
            },
        )


class TestVpcEndpointSecurityGroup:
    def test_group_name_and_tag(self):
        stack, _ = build()
        Template.from_stack(stack).has_resource_properties(
            "AWS::EC2::SecurityGroup",
            {
                "GroupName": "test-dev-vpc-endpoint-sg",
                "GroupDescription": "VPC Endpoint Security Group",
                "Tags": Match.array_with(
                    [{"Key": "Name", "Value": "test-dev-vpc-endpoint-sg"}]
                ),
            },
        )

    @pytest.mark.parametrize("ingress_cidr", [None, "10.0.0.0/8", "203.0.113.0/24"])
    def test_only_source_is_api_ecs_security_group(self, ingress_cidr):
        stack, security_group = build(api_ecs_ingress_cidr=ingress_cidr)
        template = Template.from_stack(stack)
        endpoint_group_id = group_id(stack, security_group.vpc_endpoint_security_group)

        rules = [
            rule["Properties"]
            for rule in template.find_resources("AWS::EC2::SecurityGroupIngress").values()
            if rule["Properties"]["GroupId"] == endpoint_group_id
        ]
        assert rules == [
            {
                "Description": "from API ECS",
                "FromPort": 443,
                "GroupId": endpoint_group_id,
                "IpProtocol": "tcp",
                "SourceSecurityGroupId": group_id(
                    stack, security_group.api_ecs_security_group
                ),
                "ToPort": 443,
            }
        ]

        endpoint_group = template.find_resources(
            "AWS::EC2::SecurityGroup",
            {"Properties": {"GroupName": "test-dev-vpc-endpoint-sg"}},
        )
        (resource,) = endpoint_group.values()
        assert "SecurityGroupIngress" not in resource["Properties"]
