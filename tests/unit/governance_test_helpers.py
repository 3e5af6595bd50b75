from enum import Enum


def resource_governance_doc_url(resource: str) -> str:
    governance_doc_url = f"https://product-management-internal-docs/{resource}-governance"
    return governance_doc_url


class AWSService(str, Enum):
    DynamoDB = "dynamodb"
    ECR = "ecr"
    ECS = "ecs"
    Log_Group = "log-group"
    SNS = "sns"
    CloudWatch = "cloudwatch"
