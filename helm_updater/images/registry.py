"""Registry login via docker login, one login per registry host per run."""

import logging
from enum import Enum

from ..config import Config
from ..errors import UnknownRegistryError
from ..models import Image
from ..runner import CommandRunner

logger = logging.getLogger(__name__)

# ECR Public only issues tokens from this region
ECR_PUBLIC_HOST = "public.ecr.aws"
ECR_PUBLIC_REGION = "us-east-1"


class LoginStrategy(str, Enum):
    """How credentials are obtained for a registry."""

    NONE = "none"
    QUAY = "quay"
    GCR = "gcr"
    ECR = "ecr"


def classify_registry(registry: str) -> LoginStrategy:
    """
    Pick the login strategy for a registry host.

    Raises:
        UnknownRegistryError: Non-empty registry with no login configuration.
    """
    if not registry:
        return LoginStrategy.NONE
    if registry == "quay.io":
        return LoginStrategy.QUAY
    if "gcr.io" in registry:
        return LoginStrategy.GCR
    if ".ecr." in registry:
        return LoginStrategy.ECR
    raise UnknownRegistryError(registry)


def ecr_region(registry: str) -> str:
    """Region of a private ECR host, e.g. 1234.dkr.ecr.eu-west-1.amazonaws.com."""
    words = registry.split(".")
    if len(words) < 3:
        raise UnknownRegistryError(registry)
    return words[-3]


class RegistryAuthenticator:
    """Logs in to every registry the discovered images come from."""

    def __init__(self, config: Config, runner: CommandRunner):
        self.config = config
        self.runner = runner
        self.logged_in: set[str] = set()

    def login_all(self, images: list[Image]) -> None:
        for image in images:
            self.login(image.registry)

    def login(self, registry: str) -> None:
        strategy = classify_registry(registry)
        if strategy is LoginStrategy.NONE or registry in self.logged_in:
            return

        if strategy is LoginStrategy.QUAY:
            # QUAY_USERNAME and QUAY_PASSWORD
            username, password = self.config.quay_username, self.config.quay_password
        elif strategy is LoginStrategy.GCR:
            # GCR_JSON_KEY for a service account with read access
            username, password = "_json_key", self.config.gcr_json_key
        else:
            # AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are read by the AWS CLI;
            # the role needs ecr:GetAuthorizationToken and ecr:BatchGetImage
            username, password = "AWS", self._ecr_password(registry)

        self._stdin_login(registry, username, password)
        self.logged_in.add(registry)

    def _ecr_password(self, registry: str) -> str:
        """Fetch a temporary ECR password with the AWS CLI."""
        if registry == ECR_PUBLIC_HOST:
            service, region = "ecr-public", ECR_PUBLIC_REGION
        else:
            service, region = "ecr", ecr_region(registry)

        password = self.runner.run(
            "aws", service, "get-login-password", "--region", region,
            env={"AWS_REGION": region},
            log_output=False,
        )
        return password.strip()

    def _stdin_login(self, registry: str, username: str, password: str) -> None:
        """docker login with the password on stdin so it never reaches argv or logs."""
        output = self.runner.run(
            "docker", "login", registry,
            "--username", username,
            "--password-stdin",
            stdin=password,
            log_output=False,
        )
        logger.info(f"{registry} login result: {output.strip()}")
