from aws_cdk import CfnOutput, RemovalPolicy, Stack, aws_ecr as ecr
from constructs import Construct

from common.environment import ResolvedEnvironment
from common.handles import RegistryHandle
from common.stack_context import StackContext


class ContainerRegistryStack(Stack):

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment: ResolvedEnvironment,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.context = StackContext(scope=self, environment=environment)

        repository_name = self.context.build_repository_name()
        # TODO: add an image-count lifecycle rule once a retention policy is agreed
        repository = ecr.Repository(
            self,
            "ProductManagementRepo",
            repository_name=repository_name,
            removal_policy=RemovalPolicy.DESTROY,
        )
        self.registry = RegistryHandle(
            repository=repository, repository_name=repository_name
        )

        CfnOutput(self, "RepositoryName", value=repository.repository_name)
