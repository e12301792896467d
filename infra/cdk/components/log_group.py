from aws_cdk import RemovalPolicy
from aws_cdk import aws_logs as logs
from constructs import Construct


def create_log_group(scope: Construct, id_prefix: str, log_group_name: str) -> logs.LogGroup:
    """Log group with one-year retention that is deleted together with the stack."""
    return logs.LogGroup(
        scope,
        f"{id_prefix}LogGroup",
        log_group_name=log_group_name,
        retention=logs.RetentionDays.ONE_YEAR,
        removal_policy=RemovalPolicy.DESTROY,
    )
