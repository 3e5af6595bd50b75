"""Wires the product management stacks together.

The environment is resolved once, then the network, database and registry
stacks are declared independently. The compute stack comes last and receives
the network and registry handles.
"""
import os
from typing import Mapping, Optional

import aws_cdk as cdk
from attrs import define
from aws_lambda_powertools import Logger

import common.constants as constants
from common.environment import (
    DeploymentSettings,
    ResolvedEnvironment,
    resolve_environment,
    resolve_settings,
)
from compute.fargate_service_stack import FargateServiceStack
from database.database_stack import DatabaseStack
from networking.networking_stack import NetworkingStack
from registry.container_registry_stack import ContainerRegistryStack

logger = Logger(
    service="product-management-infra", level=os.getenv("LOG_LEVEL", "INFO").upper()
)

CONTEXT_KEYS = (
    constants.CONTEXT_ENV,
    constants.CONTEXT_REGION,
    constants.CONTEXT_UNIQUE_ID,
)


@define(slots=True, frozen=True)
class Deployment:
    environment: ResolvedEnvironment
    settings: DeploymentSettings
    network_stack: NetworkingStack
    database_stack: DatabaseStack
    registry_stack: ContainerRegistryStack
    service_stack: FargateServiceStack


def read_context(app: cdk.App) -> dict[str, Optional[object]]:
    return {key: app.node.try_get_context(key) for key in CONTEXT_KEYS}


def build_deployment(
    app: cdk.App, environ: Optional[Mapping[str, str]] = None
) -> Deployment:
    """Declare every stack of the deployment on ``app``.

    Raises:
        NetworkHandleTypeError: the networking stack did not declare a
            concrete VPC. Orchestration stops before the compute stack.
    """
    environ = os.environ if environ is None else environ
    environment = resolve_environment(read_context(app), environ)
    settings = resolve_settings(environ)
    logger.info(
        "Resolved deployment environment",
        environment=environment.name,
        region=environment.region,
        unique_suffix=environment.unique_suffix,
        image_tag=settings.image_tag,
        notifications=bool(settings.notification_email),
    )

    env = cdk.Environment(account=settings.account, region=environment.region)

    network_stack = NetworkingStack(
        app, f"{constants.NETWORK_STACK}-{environment.name}", env=env
    )
    database_stack = DatabaseStack(
        app,
        f"{constants.DATABASE_STACK}-{environment.name}",
        environment=environment,
        env=env,
    )
    registry_stack = ContainerRegistryStack(
        app,
        f"{constants.REGISTRY_STACK}-{environment.name}",
        environment=environment,
        env=env,
    )
    logger.info(
        "Declared upstream stacks",
        table=database_stack.table.table_name,
        repository=registry_stack.registry.repository_name,
    )

    network_stack.network.require_vpc()

    service_stack = FargateServiceStack(
        app,
        f"{constants.SERVICE_STACK}-{environment.name}",
        environment=environment,
        network=network_stack.network,
        registry=registry_stack.registry,
        image_tag=settings.image_tag,
        notification_email=settings.notification_email,
        env=env,
    )
    logger.info("Declared service stack", stack=service_stack.stack_name)

    return Deployment(
        environment=environment,
        settings=settings,
        network_stack=network_stack,
        database_stack=database_stack,
        registry_stack=registry_stack,
        service_stack=service_stack,
    )
