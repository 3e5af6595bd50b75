from aws_cdk import CfnOutput, Stack, aws_ec2 as ec2
from constructs import Construct

from common import constants
from common.handles import NetworkHandle


class NetworkingStack(Stack):
    """Isolated network with public and private subnets behind a single NAT gateway."""

    def __init__(
        self, scope: Construct, construct_id: str, vpc: ec2.IVpc | None = None, **kwargs
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        vpc = vpc or self.create_vpc()
        self.vpc = vpc
        self.network = NetworkHandle(vpc=vpc)

        CfnOutput(self, "VpcId", value=vpc.vpc_id)

    def create_vpc(self) -> ec2.Vpc:
        # One NAT gateway regardless of AZ count: all private egress leaves
        # through a single gateway.
        vpc = ec2.Vpc(
            self,
            "ProductManagementVpc",
            max_azs=constants.MAX_AZS,
            nat_gateways=constants.NAT_GATEWAYS,
            subnet_configuration=[
                ec2.SubnetConfiguration(
                    name=constants.PUBLIC_SUBNET_NAME,
                    subnet_type=ec2.SubnetType.PUBLIC,
                    cidr_mask=constants.CIDR_MASK,
                ),
                ec2.SubnetConfiguration(
                    name=constants.PRIVATE_SUBNET_NAME,
                    subnet_type=ec2.SubnetType.PRIVATE_WITH_EGRESS,
                    cidr_mask=constants.CIDR_MASK,
                ),
            ],
        )
        return vpc
