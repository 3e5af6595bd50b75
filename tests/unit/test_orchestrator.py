import pytest
from aws_cdk import App, Stack, aws_ec2 as ec2
from aws_cdk.assertions import Template
from stack_test_helpers import (
    container_image_tail,
    find_resources_by_type,
    get_single_resource_id,
)

from common.environment import ResolvedEnvironment
from common.handles import NetworkHandleTypeError
from networking.networking_stack import NetworkingStack
from product_management.orchestrator import Deployment, build_deployment


@pytest.fixture(scope="module")
def staging_deployment() -> Deployment:
    app = App(context={"env": "staging"})
    return build_deployment(app, environ={})


def test_staging_environment_resolution(staging_deployment: Deployment):
    assert staging_deployment.environment == ResolvedEnvironment(
        name="staging", region="us-east-2", unique_suffix=""
    )


def test_stack_ids_carry_environment(staging_deployment: Deployment):
    assert staging_deployment.network_stack.stack_name == "NetworkStack-staging"
    assert staging_deployment.database_stack.stack_name == "DatabaseStack-staging"
    assert (
        staging_deployment.registry_stack.stack_name
        == "ContainerRegistryStack-staging"
    )
    assert (
        staging_deployment.service_stack.stack_name
        == "ECSFargateServiceStack-staging"
    )


def test_stacks_target_resolved_region(staging_deployment: Deployment):
    assert staging_deployment.service_stack.region == "us-east-2"


def test_staging_resource_names(staging_deployment: Deployment):
    Template.from_stack(staging_deployment.registry_stack).has_resource_properties(
        "AWS::ECR::Repository",
        {"RepositoryName": "product-management-system-staging"},
    )
    Template.from_stack(staging_deployment.database_stack).has_resource_properties(
        "AWS::DynamoDB::Table", {"TableName": "Products-staging"}
    )


def test_service_depends_on_network_and_registry(staging_deployment: Deployment):
    # cross-stack references become dependencies during synthesis
    Template.from_stack(staging_deployment.service_stack)
    dependencies = {
        stack.stack_name for stack in staging_deployment.service_stack.dependencies
    }
    assert "NetworkStack-staging" in dependencies
    assert "ContainerRegistryStack-staging" in dependencies


def test_image_tag_and_desired_count_from_environment():
    app = App()
    deployment = build_deployment(app, environ={"ECR_IMAGE_TAG": "v2"})
    template = Template.from_stack(deployment.service_stack)

    template.has_resource_properties("AWS::ECS::Service", {"DesiredCount": 2})
    task_definitions = find_resources_by_type(template, "AWS::ECS::TaskDefinition")
    logical_id = get_single_resource_id(task_definitions, "task definition")
    container = task_definitions[logical_id]["Properties"]["ContainerDefinitions"][0]
    assert container_image_tail(container["Image"]).endswith(":v2")


def test_context_overrides_process_environment():
    app = App(context={"env": "ctx", "uniqueId": "99"})
    deployment = build_deployment(
        app, environ={"DEPLOY_ENV": "ignored", "GITHUB_RUN_ID": "1"}
    )
    assert deployment.environment.name == "ctx"
    assert deployment.registry_stack.registry.repository_name == (
        "product-management-system-ctx-99"
    )


@pytest.mark.parametrize(
    "environ,expected", [({}, 0), ({"NOTIFICATION_EMAIL": "ops@example.com"}, 1)]
)
def test_notification_email_wiring(environ, expected: int):
    deployment = build_deployment(App(), environ=environ)
    Template.from_stack(deployment.service_stack).resource_count_is(
        "AWS::SNS::Subscription", expected
    )


def test_service_stack_names_follow_resolved_environment(
    staging_deployment: Deployment,
):
    context = staging_deployment.service_stack.context
    assert context.environment.name == "staging"
    assert context.build_repository_name() == "product-management-system-staging"


def test_imported_vpc_stops_orchestration(monkeypatch):
    def imported_network_stack(scope, construct_id, **kwargs):
        vpc = ec2.Vpc.from_vpc_attributes(
            Stack(scope, "LookupStack"),
            "ImportedVpc",
            vpc_id="vpc-12345678",
            availability_zones=["us-east-2a", "us-east-2b"],
        )
        return NetworkingStack(scope, construct_id, vpc=vpc, **kwargs)

    monkeypatch.setattr(
        "product_management.orchestrator.NetworkingStack", imported_network_stack
    )
    app = App()

    with pytest.raises(NetworkHandleTypeError):
        build_deployment(app, environ={})

    stack_ids = [child.node.id for child in app.node.children]
    assert "NetworkStack-dev" in stack_ids
    assert not any(
        stack_id.startswith("ECSFargateServiceStack") for stack_id in stack_ids
    )
