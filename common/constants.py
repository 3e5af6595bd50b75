from aws_cdk import aws_logs as logs

DEFAULT_ENV = "dev"
DEFAULT_REGION = "us-east-2"
DEFAULT_IMAGE_TAG = "latest"

# Context keys and environment variables consumed by the resolver
CONTEXT_ENV = "env"
CONTEXT_REGION = "region"
CONTEXT_UNIQUE_ID = "uniqueId"
ENV_VAR_DEPLOY_ENV = "DEPLOY_ENV"
ENV_VAR_REGION = "CDK_DEFAULT_REGION"
ENV_VAR_ACCOUNT = "CDK_DEFAULT_ACCOUNT"
ENV_VAR_UNIQUE_ID = ("GITHUB_RUN_ID", "UNIQUE_ID")
ENV_VAR_IMAGE_TAG = "ECR_IMAGE_TAG"
ENV_VAR_NOTIFICATION_EMAIL = "NOTIFICATION_EMAIL"

# Naming convention components
SERVICE_NAME = "product-management"  # The application name
REPOSITORY_PREFIX = "product-management-system"
LOG_STREAM_PREFIX = "product-management"

# Stack ids, suffixed with the environment name
NETWORK_STACK = "NetworkStack"
DATABASE_STACK = "DatabaseStack"
REGISTRY_STACK = "ContainerRegistryStack"
SERVICE_STACK = "ECSFargateServiceStack"

# Network
MAX_AZS = 2
NAT_GATEWAYS = 1
CIDR_MASK = 24
PUBLIC_SUBNET_NAME = "Public"
PRIVATE_SUBNET_NAME = "Private"

# Data store
TABLE_NAME_PREFIX = "Products"  # provisioned as Products-{env}
PARTITION_KEY = "Id"

# The running service is configured and authorized against the bare table
# name, not the Products-{env} table declared by the database stack.
SERVICE_TABLE_NAME = "Products"
TABLE_ACTIONS = (
    "dynamodb:DescribeTable",
    "dynamodb:Query",
    "dynamodb:Scan",
    "dynamodb:GetItem",
    "dynamodb:PutItem",
    "dynamodb:UpdateItem",
    "dynamodb:DeleteItem",
)

# Compute
TASK_CPU = 512
TASK_MEMORY_MIB = 1024
DESIRED_COUNT = 2
LISTENER_PORT = 80
CONTAINER_PORT = 80
HEALTH_CHECK_GRACE_SECONDS = 60
HEALTH_CHECK_PATH = "/health"
HEALTHY_HTTP_CODES = "200"
LOG_RETENTION = logs.RetentionDays.ONE_WEEK
CONTAINER_ENVIRONMENT = {
    "ASPNETCORE_ENVIRONMENT": "Production",
    "DYNAMODB_TABLE_NAME": SERVICE_TABLE_NAME,
    "ASPNETCORE_URLS": "http://+:80",
}

# Alarms
UTILIZATION_THRESHOLD_PERCENT = 80
UTILIZATION_EVALUATION_PERIODS = 3
UTILIZATION_DATAPOINTS_TO_ALARM = 2
UNHEALTHY_HOST_THRESHOLD = 1
UNHEALTHY_HOST_EVALUATION_PERIODS = 2
UNHEALTHY_HOST_DATAPOINTS_TO_ALARM = 2
