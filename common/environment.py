"""Resolution of the deployment environment.

Every value the stacks depend on is read here, once, from the CDK context and
the process environment. The resulting records are threaded explicitly through
the stack constructors; no stack reads ``os.environ`` on its own.
"""
import os
from typing import Iterable, Mapping, Optional

from attrs import define, field
from attrs.validators import instance_of, optional

import common.constants as constants


@define(slots=True, frozen=True)
class ResolvedEnvironment:
    name: str = field(
        default=constants.DEFAULT_ENV,
        validator=instance_of(str),
        metadata={"description": "Deployment environment (dev, staging, prod)"},
    )
    region: str = field(default=constants.DEFAULT_REGION, validator=instance_of(str))
    unique_suffix: str = field(
        default="",
        validator=instance_of(str),
        metadata={"description": "Optional run identifier, empty means no suffix"},
    )

    def suffixed(self, base: str) -> str:
        """Append the environment name and, when present, the unique suffix.

        Examples:
            - Without suffix: product-management-system-dev
            - With suffix: product-management-system-dev-4242
        """
        name = f"{base}-{self.name}"
        if self.unique_suffix:
            name = f"{name}-{self.unique_suffix}"
        return name


@define(slots=True, frozen=True)
class DeploymentSettings:
    account: Optional[str] = field(default=None, validator=optional(instance_of(str)))
    image_tag: str = field(default=constants.DEFAULT_IMAGE_TAG, validator=instance_of(str))
    notification_email: Optional[str] = field(
        default=None, validator=optional(instance_of(str))
    )


def _first_non_empty(candidates: Iterable[Optional[object]]) -> Optional[str]:
    for candidate in candidates:
        if candidate is None:
            continue
        value = str(candidate)
        if value:
            return value
    return None


def resolve_environment(
    context: Mapping[str, Optional[object]],
    environ: Optional[Mapping[str, str]] = None,
) -> ResolvedEnvironment:
    """Resolve name, region and unique suffix.

    For each field the first non-empty value wins: explicit context entry,
    then environment variable, then the literal default.
    """
    environ = os.environ if environ is None else environ

    name = _first_non_empty(
        (context.get(constants.CONTEXT_ENV), environ.get(constants.ENV_VAR_DEPLOY_ENV))
    )
    region = _first_non_empty(
        (context.get(constants.CONTEXT_REGION), environ.get(constants.ENV_VAR_REGION))
    )
    unique_suffix = _first_non_empty(
        (
            context.get(constants.CONTEXT_UNIQUE_ID),
            *(environ.get(var) for var in constants.ENV_VAR_UNIQUE_ID),
        )
    )
    return ResolvedEnvironment(
        name=name or constants.DEFAULT_ENV,
        region=region or constants.DEFAULT_REGION,
        unique_suffix=unique_suffix or "",
    )


def resolve_settings(environ: Optional[Mapping[str, str]] = None) -> DeploymentSettings:
    environ = os.environ if environ is None else environ
    return DeploymentSettings(
        account=_first_non_empty((environ.get(constants.ENV_VAR_ACCOUNT),)),
        image_tag=_first_non_empty((environ.get(constants.ENV_VAR_IMAGE_TAG),))
        or constants.DEFAULT_IMAGE_TAG,
        notification_email=_first_non_empty(
            (environ.get(constants.ENV_VAR_NOTIFICATION_EMAIL),)
        ),
    )
