from attrs import define, field
from aws_cdk import aws_dynamodb as dynamodb, aws_ec2 as ec2, aws_ecr as ecr

import common.constants as constants


class NetworkHandleTypeError(TypeError):
    """Raised when a network handle does not wrap a concrete ``ec2.Vpc``."""


@define(slots=True, frozen=True)
class NetworkHandle:
    vpc: ec2.IVpc

    def public_subnets(self) -> ec2.SelectedSubnets:
        return self.vpc.select_subnets(subnet_group_name=constants.PUBLIC_SUBNET_NAME)

    def private_subnets(self) -> ec2.SelectedSubnets:
        return self.vpc.select_subnets(subnet_group_name=constants.PRIVATE_SUBNET_NAME)

    def require_vpc(self) -> ec2.Vpc:
        """Return the wrapped VPC, insisting it was declared rather than imported."""
        if not isinstance(self.vpc, ec2.Vpc):
            raise NetworkHandleTypeError(
                f"Network handle wraps {type(self.vpc).__name__}, expected ec2.Vpc. "
                "The networking stack must declare its VPC, not import one."
            )
        return self.vpc


@define(slots=True, frozen=True)
class TableHandle:
    table: dynamodb.ITable
    table_name: str
    partition_key: str = field(default=constants.PARTITION_KEY)


@define(slots=True, frozen=True)
class RegistryHandle:
    repository: ecr.IRepository
    repository_name: str
