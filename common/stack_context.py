from attrs import define, field
from aws_cdk import RemovalPolicy, Stack, aws_logs as logs

import common.constants as constants
from common.environment import ResolvedEnvironment


@define(slots=True, frozen=True)
class StackContext:
    scope: Stack
    environment: ResolvedEnvironment = field(
        metadata={"description": "Resolved deployment environment"},
    )
    service: str = field(default=constants.SERVICE_NAME, init=False)

    @property
    def aws_account_id(self) -> str:
        return Stack.of(self.scope).account

    @property
    def aws_region(self) -> str:
        return Stack.of(self.scope).region

    @property
    def stack_id(self) -> str:
        return Stack.of(self.scope).node.id

    # ---------- naming ----------
    def build_table_name(self) -> str:
        """Products-{env}, no unique suffix."""
        return f"{constants.TABLE_NAME_PREFIX}-{self.environment.name}"

    def build_repository_name(self) -> str:
        """Build the registry name.

        Examples:
            - Without unique suffix: product-management-system-dev
            - With unique suffix: product-management-system-dev-123456
        """
        return self.environment.suffixed(constants.REPOSITORY_PREFIX)

    def build_log_group_name(self) -> str:
        return f"/ecs/{self.service}-{self.stack_id}"

    def build_alarm_topic_name(self) -> str:
        return f"{self.service}-alarms-{self.stack_id.lower()}"

    def build_alarm_name(self, alarm: str) -> str:
        return f"{self.stack_id}-{alarm}"

    # ---------- arns ----------
    def build_table_arn(self, table_name: str) -> str:
        return (
            f"arn:aws:dynamodb:{self.aws_region}:{self.aws_account_id}"
            f":table/{table_name}"
        )

    # ---------- log groups ----------
    def build_log_group(self, construct_id: str) -> logs.LogGroup:
        return logs.LogGroup(
            self.scope,
            construct_id,
            log_group_name=self.build_log_group_name(),
            removal_policy=RemovalPolicy.DESTROY,
            retention=constants.LOG_RETENTION,
        )
