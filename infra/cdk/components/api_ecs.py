"""
API service on ECS Fargate.

Provisions, in dependency order:
  - task execution role and task role (kept separate)
  - ECR repository, seeded with a placeholder image
  - ECS cluster with container insights and Fargate capacity providers
  - Fargate task definition, log group and the API container
  - Fargate service with circuit-breaker rollback
  - CPU target-tracking auto-scaling

The real API image is pushed by the API repository's CI/CD. The placeholder only
exists because the first service deployment times out when the ``latest`` tag
is missing from the repository.
"""

from __future__ import annotations

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecr as ecr
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_iam as iam
from aws_cdk import aws_logs as logs
from cdk_ecr_deployment import DockerImageName, ECRDeployment
from constructs import Construct

from infra.cdk.components.log_group import create_log_group
from infra.cdk.env_values import ApiEcsSettings
from infra.cdk.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER_IMAGE = "nginx:latest"
IMAGE_TAG = "latest"
CONTAINER_NAME = "api-ecs-container"
TARGET_CPU_UTILIZATION_PERCENT = 70


class ApiEcs(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        name_prefix: str,
        vpc: ec2.IVpc,
        api_ecs_security_group: ec2.ISecurityGroup,
        ecs_settings: ApiEcsSettings,
        removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
    ) -> None:
        super().__init__(scope, construct_id)
        self._name_prefix = name_prefix

        task_execution_role = self._create_task_execution_role()
        task_role = self._create_task_role()

        self.repository = self._create_repository(removal_policy)
        self.placeholder_deployment = self._deploy_placeholder_image(self.repository)

        self.cluster = self._create_cluster(vpc)
        self.task_definition = self._create_task_definition(
            task_execution_role, task_role, ecs_settings
        )
        self.log_group = create_log_group(self, "ApiEcs", f"/ecs/{name_prefix}-api-ecs-log")
        self._add_container(self.task_definition, self.repository, self.log_group)

        self.service = self._create_service(
            self.cluster, self.task_definition, api_ecs_security_group, vpc, ecs_settings
        )
        self.service.node.add_dependency(self.placeholder_deployment)
        self.scalable_target = self._add_cpu_scaling(self.service, ecs_settings)

        logger.debug(
            "api_ecs_declared",
            name_prefix=name_prefix,
            cpu=ecs_settings.cpu,
            memory_limit_mib=ecs_settings.memory_limit_mib,
            desired_count=ecs_settings.desired_count,
        )

    def _create_task_execution_role(self) -> iam.Role:
        return iam.Role(
            self,
            "TaskExecutionRole",
            role_name=f"{self._name_prefix}-api-ecs-task-execution-role",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
            managed_policies=[
                iam.ManagedPolicy.from_aws_managed_policy_name(
                    "service-role/AmazonECSTaskExecutionRolePolicy"
                )
            ],
        )

    def _create_task_role(self) -> iam.Role:
        return iam.Role(
            self,
            "TaskRole",
            role_name=f"{self._name_prefix}-api-ecs-task-role",
            assumed_by=iam.ServicePrincipal("ecs-tasks.amazonaws.com"),
        )

    def _create_repository(self, removal_policy: RemovalPolicy) -> ecr.Repository:
        return ecr.Repository(
            self,
            "Ecr",
            repository_name=f"{self._name_prefix}-api-ecs-ecr",
            removal_policy=removal_policy,
            empty_on_delete=removal_policy == RemovalPolicy.DESTROY,
            image_scan_on_push=True,
        )

    def _deploy_placeholder_image(self, repository: ecr.Repository) -> ECRDeployment:
        return ECRDeployment(
            self,
            "EcrPlaceholderDeploy",
            src=DockerImageName(PLACEHOLDER_IMAGE),
            dest=DockerImageName(f"{repository.repository_uri}:{IMAGE_TAG}"),
        )

    def _create_cluster(self, vpc: ec2.IVpc) -> ecs.Cluster:
        return ecs.Cluster(
            self,
            "Cluster",
            cluster_name=f"{self._name_prefix}-api-ecs-cluster",
            vpc=vpc,
            enable_fargate_capacity_providers=True,
            container_insights=True,
        )

    def _create_task_definition(
        self,
        task_execution_role: iam.Role,
        task_role: iam.Role,
        ecs_settings: ApiEcsSettings,
    ) -> ecs.FargateTaskDefinition:
        return ecs.FargateTaskDefinition(
            self,
            "TaskDefinition",
            family=f"{self._name_prefix}-api-ecs-task-def",
            execution_role=task_execution_role,
            task_role=task_role,
            cpu=ecs_settings.cpu,
            memory_limit_mib=ecs_settings.memory_limit_mib,
            runtime_platform=ecs.RuntimePlatform(
                cpu_architecture=ecs.CpuArchitecture.X86_64,
                operating_system_family=ecs.OperatingSystemFamily.LINUX,
            ),
        )

    @staticmethod
    def _add_container(
        task_definition: ecs.FargateTaskDefinition,
        repository: ecr.IRepository,
        log_group: logs.ILogGroup,
    ) -> ecs.ContainerDefinition:
        return task_definition.add_container(
            "Container",
            container_name=CONTAINER_NAME,
            image=ecs.ContainerImage.from_ecr_repository(repository, IMAGE_TAG),
            logging=ecs.LogDrivers.aws_logs(stream_prefix="ecs", log_group=log_group),
            # start_period must outlast container boot, or rollouts fail on health checks
            health_check=ecs.HealthCheck(
                command=["CMD-SHELL", "curl -f http://localhost/ || exit 1"],
                interval=Duration.seconds(30),
                timeout=Duration.seconds(5),
                retries=3,
                start_period=Duration.seconds(60),
            ),
        )

    def _create_service(
        self,
        cluster: ecs.Cluster,
        task_definition: ecs.FargateTaskDefinition,
        api_ecs_security_group: ec2.ISecurityGroup,
        vpc: ec2.IVpc,
        ecs_settings: ApiEcsSettings,
    ) -> ecs.FargateService:
        if ecs_settings.use_private_subnets:
            subnets = vpc.private_subnets
        else:
            subnets = vpc.public_subnets

        return ecs.FargateService(
            self,
            "Service",
            service_name=f"{self._name_prefix}-api-ecs-service",
            cluster=cluster,
            task_definition=task_definition,
            desired_count=ecs_settings.desired_count,
            min_healthy_percent=100,
            max_healthy_percent=200,
            assign_public_ip=ecs_settings.assign_public_ip,
            vpc_subnets=ec2.SubnetSelection(subnets=subnets),
            deployment_controller=ecs.DeploymentController(
                type=ecs.DeploymentControllerType.ECS
            ),
            circuit_breaker=ecs.DeploymentCircuitBreaker(rollback=True),
            security_groups=[api_ecs_security_group],
        )

    @staticmethod
    def _add_cpu_scaling(
        service: ecs.FargateService, ecs_settings: ApiEcsSettings
    ) -> ecs.ScalableTaskCount:
        # min <= desired <= max is left to Application Auto Scaling to reconcile
        scalable_target = service.auto_scale_task_count(
            min_capacity=ecs_settings.min_capacity,
            max_capacity=ecs_settings.max_capacity,
        )
        scalable_target.scale_on_cpu_utilization(
            "CpuScaling",
            policy_name="CpuScalingPolicy",
            target_utilization_percent=TARGET_CPU_UTILIZATION_PERCENT,
            scale_in_cooldown=Duration.seconds(60),
            scale_out_cooldown=Duration.seconds(60),
        )
        return scalable_target
