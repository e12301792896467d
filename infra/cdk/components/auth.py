"""
Cognito user pool, app client and identity pool for the front-end.

The identity pool generates its authenticated / unauthenticated IAM roles with
CloudFormation-assigned names. Those names are replaced afterwards with
prefix-scoped ones so IAM policies and audits can refer to them by a stable name.
"""

from typing import List, Tuple

from aws_cdk import Duration, RemovalPolicy
from aws_cdk import aws_cognito as cognito
from aws_cdk import aws_cognito_identitypool as identitypool
from aws_cdk import aws_iam as iam
from constructs import Construct

from infra.cdk.logging_config import get_logger

logger = get_logger(__name__)


class Auth(Construct):
    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        name_prefix: str,
        removal_policy: RemovalPolicy = RemovalPolicy.DESTROY,
    ) -> None:
        super().__init__(scope, construct_id)
        self._name_prefix = name_prefix

        self.user_pool = self._create_user_pool(removal_policy)
        self.user_pool_client = self._create_user_pool_client(self.user_pool)
        self.id_pool = self._create_identity_pool(self.user_pool, self.user_pool_client)

        self._apply_role_name_overrides(self.identity_pool_role_names())

        logger.debug("auth_declared", name_prefix=name_prefix)

    def _create_user_pool(self, removal_policy: RemovalPolicy) -> cognito.UserPool:
        return cognito.UserPool(
            self,
            "UserPool",
            user_pool_name=f"{self._name_prefix}-user-pool",
            deletion_protection=False,
            removal_policy=removal_policy,
            self_sign_up_enabled=True,
            sign_in_aliases=cognito.SignInAliases(username=False, email=True),
        )

    def _create_user_pool_client(self, user_pool: cognito.UserPool) -> cognito.UserPoolClient:
        return user_pool.add_client(
            "UserPoolClient",
            user_pool_client_name=f"{self._name_prefix}-client",
            id_token_validity=Duration.days(1),
        )

    def _create_identity_pool(
        self,
        user_pool: cognito.UserPool,
        user_pool_client: cognito.UserPoolClient,
    ) -> identitypool.IdentityPool:
        return identitypool.IdentityPool(
            self,
            "IdentityPool",
            identity_pool_name=f"{self._name_prefix}-id-pool",
            authentication_providers=identitypool.IdentityPoolAuthenticationProviders(
                user_pools=[
                    identitypool.UserPoolAuthenticationProvider(
                        user_pool=user_pool,
                        user_pool_client=user_pool_client,
                    )
                ]
            ),
        )

    def identity_pool_role_names(self) -> List[Tuple[iam.IRole, str]]:
        return [
            (
                self.id_pool.authenticated_role,
                f"{self._name_prefix}-id-pool-authenticated-role",
            ),
            (
                self.id_pool.unauthenticated_role,
                f"{self._name_prefix}-id-pool-unauthenticated-role",
            ),
        ]

    @staticmethod
    def _apply_role_name_overrides(role_names: List[Tuple[iam.IRole, str]]) -> None:
        for role, role_name in role_names:
            cfn_role: iam.CfnRole = role.node.default_child
            cfn_role.add_property_override("RoleName", role_name)
