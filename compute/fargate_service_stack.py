from typing import Optional

from aws_cdk import (
    CfnOutput,
    Duration,
    Stack,
    aws_cloudwatch as cloudwatch,
    aws_cloudwatch_actions as cloudwatch_actions,
    aws_ecs as ecs,
    aws_ecs_patterns as ecs_patterns,
    aws_iam as iam,
    aws_logs as logs,
    aws_sns as sns,
    aws_sns_subscriptions as subscriptions,
)
from constructs import Construct

import common.constants as constants
from common.environment import ResolvedEnvironment
from common.handles import NetworkHandle, RegistryHandle
from common.stack_context import StackContext


class FargateServiceStack(Stack):
    """Load-balanced Fargate service running the products API, with alarms."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment: ResolvedEnvironment,
        network: NetworkHandle,
        registry: RegistryHandle,
        image_tag: str,
        notification_email: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.context = StackContext(scope=self, environment=environment)

        # Log group for the container's awslogs driver
        self.log_group = self.context.build_log_group("ProductManagementLogs")

        # SNS topic all alarms notify, optionally with an email subscriber
        self.alarm_topic = self._build_alarm_topic(notification_email)

        self.cluster = ecs.Cluster(
            self,
            "ProductManagementCluster",
            vpc=network.vpc,
            container_insights_v2=ecs.ContainerInsights.ENABLED,
        )

        self.fargate_service = self._build_fargate_service(
            registry=registry, image_tag=image_tag, log_group=self.log_group
        )
        self.fargate_service.target_group.configure_health_check(
            path=constants.HEALTH_CHECK_PATH,
            healthy_http_codes=constants.HEALTHY_HTTP_CODES,
        )

        # Alarms
        self.alarms = self._build_alarms()

        # Permissions
        self._grant_table_access()

        CfnOutput(self, "ClusterName", value=self.cluster.cluster_name)
        CfnOutput(
            self, "ServiceName", value=self.fargate_service.service.service_name
        )
        CfnOutput(
            self,
            "TargetGroupArn",
            value=self.fargate_service.target_group.target_group_arn,
        )

    # Resource creation

    def _build_alarm_topic(self, notification_email: Optional[str]) -> sns.Topic:
        topic = sns.Topic(
            self,
            "ProductManagementAlarms",
            topic_name=self.context.build_alarm_topic_name(),
        )
        # Without an address the alarms still fire, nobody is notified.
        if notification_email:
            topic.add_subscription(subscriptions.EmailSubscription(notification_email))
        return topic

    def _build_fargate_service(
        self,
        registry: RegistryHandle,
        image_tag: str,
        log_group: logs.ILogGroup,
    ) -> ecs_patterns.ApplicationLoadBalancedFargateService:
        return ecs_patterns.ApplicationLoadBalancedFargateService(
            self,
            "ProductManagementFargateService",
            cluster=self.cluster,
            cpu=constants.TASK_CPU,
            memory_limit_mib=constants.TASK_MEMORY_MIB,
            desired_count=constants.DESIRED_COUNT,
            task_image_options=ecs_patterns.ApplicationLoadBalancedTaskImageOptions(
                image=ecs.ContainerImage.from_ecr_repository(
                    registry.repository, image_tag
                ),
                container_port=constants.CONTAINER_PORT,
                environment=dict(constants.CONTAINER_ENVIRONMENT),
                log_driver=ecs.LogDriver.aws_logs(
                    stream_prefix=constants.LOG_STREAM_PREFIX,
                    log_group=log_group,
                ),
            ),
            public_load_balancer=True,
            listener_port=constants.LISTENER_PORT,
            health_check_grace_period=Duration.seconds(
                constants.HEALTH_CHECK_GRACE_SECONDS
            ),
        )

    def _build_alarm(
        self,
        construct_id: str,
        alarm: str,
        metric: cloudwatch.IMetric,
        threshold: float,
        evaluation_periods: int,
        datapoints_to_alarm: int,
        description: str,
    ) -> cloudwatch.Alarm:
        # Missing data counts as breaching: a crashed service emits no metrics.
        cw_alarm = cloudwatch.Alarm(
            self,
            construct_id,
            alarm_name=self.context.build_alarm_name(alarm),
            metric=metric,
            threshold=threshold,
            evaluation_periods=evaluation_periods,
            datapoints_to_alarm=datapoints_to_alarm,
            comparison_operator=cloudwatch.ComparisonOperator.GREATER_THAN_OR_EQUAL_TO_THRESHOLD,
            treat_missing_data=cloudwatch.TreatMissingData.BREACHING,
            alarm_description=description,
        )
        cw_alarm.add_alarm_action(cloudwatch_actions.SnsAction(self.alarm_topic))
        return cw_alarm

    def _build_alarms(self) -> list[cloudwatch.Alarm]:
        service = self.fargate_service.service
        target_group = self.fargate_service.target_group
        return [
            self._build_alarm(
                "CpuUsageAlarm",
                "high-cpu-usage",
                metric=service.metric_cpu_utilization(),
                threshold=constants.UTILIZATION_THRESHOLD_PERCENT,
                evaluation_periods=constants.UTILIZATION_EVALUATION_PERIODS,
                datapoints_to_alarm=constants.UTILIZATION_DATAPOINTS_TO_ALARM,
                description="Alert when CPU usage is high",
            ),
            self._build_alarm(
                "MemoryUsageAlarm",
                "high-memory-usage",
                metric=service.metric_memory_utilization(),
                threshold=constants.UTILIZATION_THRESHOLD_PERCENT,
                evaluation_periods=constants.UTILIZATION_EVALUATION_PERIODS,
                datapoints_to_alarm=constants.UTILIZATION_DATAPOINTS_TO_ALARM,
                description="Alert when memory usage is high",
            ),
            self._build_alarm(
                "ServiceHealthAlarm",
                "unhealthy-hosts",
                metric=target_group.metrics.unhealthy_host_count(),
                threshold=constants.UNHEALTHY_HOST_THRESHOLD,
                evaluation_periods=constants.UNHEALTHY_HOST_EVALUATION_PERIODS,
                datapoints_to_alarm=constants.UNHEALTHY_HOST_DATAPOINTS_TO_ALARM,
                description="Alert when there are unhealthy hosts",
            ),
        ]

    def _grant_table_access(self) -> None:
        """Attach the CRUD table actions to the task role.

        The ARN is built from the bare service table name, so it does not match
        the Products-{env} table declared by the database stack.
        """
        task_role = self.fargate_service.task_definition.task_role
        task_role.attach_inline_policy(
            iam.Policy(
                self,
                "ProductsTableAccessPolicy",
                statements=[
                    iam.PolicyStatement(
                        effect=iam.Effect.ALLOW,
                        actions=list(constants.TABLE_ACTIONS),
                        resources=[
                            self.context.build_table_arn(constants.SERVICE_TABLE_NAME)
                        ],
                    )
                ],
            )
        )
