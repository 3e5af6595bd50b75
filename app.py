#!/usr/bin/env python3
"""AWS CDK entrypoint for provisioning the Product Management infrastructure.

Resolves the target environment from CDK context (``-c env=staging``) and the
process environment, then declares the network, database, registry and Fargate
service stacks. Override ``DEPLOY_ENV``, ``CDK_DEFAULT_REGION``,
``ECR_IMAGE_TAG`` or ``NOTIFICATION_EMAIL`` to change the deployment.
"""
import aws_cdk as cdk

from product_management.orchestrator import build_deployment

app = cdk.App()

# Raises on a wiring error, aborting synthesis.
build_deployment(app)

app.synth()
