from aws_cdk import CfnOutput, RemovalPolicy, Stack, aws_dynamodb as dynamodb
from constructs import Construct

import common.constants as constants
from common.environment import ResolvedEnvironment
from common.handles import TableHandle
from common.stack_context import StackContext


class DatabaseStack(Stack):

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        environment: ResolvedEnvironment,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)
        self.context = StackContext(scope=self, environment=environment)

        # DynamoDB table backing the products service
        products_table = self._build_dynamodb()
        self.table = TableHandle(
            table=products_table,
            table_name=self.context.build_table_name(),
        )

        CfnOutput(self, "TableName", value=products_table.table_name)

    def _build_dynamodb(self) -> dynamodb.Table:
        # Destroyed with the stack; not suitable for production data.
        return dynamodb.Table(
            self,
            "ProductsTable",
            table_name=self.context.build_table_name(),
            partition_key=dynamodb.Attribute(
                name=constants.PARTITION_KEY,
                type=dynamodb.AttributeType.STRING,
            ),
            billing_mode=dynamodb.BillingMode.PAY_PER_REQUEST,
            removal_policy=RemovalPolicy.DESTROY,
        )
