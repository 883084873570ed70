"""
Network/volume provisioning tests against a simulated docker runtime.
"""

from pathlib import Path
import subprocess
from unittest.mock import Mock, patch

import pytest
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))
from demod_deploy import provision_infrastructure  # noqa: E402
from demod_deploy.exceptions import InfrastructureCreationError  # noqa: E402
from demod_deploy.models import (  # noqa: E402
    InfrastructureResource,
    ResourceKind,
    ResourceState,
    declared_resources,
)

NETWORK = InfrastructureResource(ResourceKind.NETWORK, "frontend")
VOLUME = InfrastructureResource(ResourceKind.VOLUME, "demod-data")


class FakeRuntime:
    """In-memory stand-in for docker network/volume state."""

    def __init__(self, present=(), fail_create=()):
        self.present = set(present)
        self.fail_create = set(fail_create)
        self.create_calls = []
        self.inspect_calls = []

    def state(self, resource):
        return ResourceState.PRESENT if resource in self.present else ResourceState.ABSENT

    def resource_exists(self, resource):
        self.inspect_calls.append(resource)
        return resource in self.present

    def create_resource(self, resource):
        self.create_calls.append(resource)
        if resource in self.fail_create:
            return subprocess.CompletedProcess([], 1, "", "Cannot connect to the Docker daemon")
        self.present.add(resource)
        return subprocess.CompletedProcess([], 0, resource.name, "")

    def patch(self):
        return patch.multiple(
            "demod_deploy.docker",
            resource_exists=self.resource_exists,
            create_resource=self.create_resource,
        )


class TestProvisionInfrastructure:
    def test_creates_missing_resources(self):
        runtime = FakeRuntime()

        with runtime.patch():
            created = provision_infrastructure(declared_resources())

        assert created == [NETWORK, VOLUME]
        assert runtime.state(NETWORK) == ResourceState.PRESENT
        assert runtime.state(VOLUME) == ResourceState.PRESENT

    def test_second_run_is_a_no_op(self):
        runtime = FakeRuntime()

        with runtime.patch():
            provision_infrastructure(declared_resources())
            first_state = set(runtime.present)
            runtime.create_calls.clear()

            created = provision_infrastructure(declared_resources())

        assert created == []
        assert runtime.create_calls == []
        assert runtime.present == first_state

    def test_existing_resource_is_skipped(self):
        runtime = FakeRuntime(present=[NETWORK])

        with runtime.patch():
            created = provision_infrastructure(declared_resources())

        assert created == [VOLUME]
        assert runtime.create_calls == [VOLUME]

    def test_networks_before_volumes(self):
        runtime = FakeRuntime()
        extra_network = InfrastructureResource(ResourceKind.NETWORK, "backend")

        with runtime.patch():
            provision_infrastructure([VOLUME, NETWORK, extra_network])

        assert runtime.create_calls == [NETWORK, extra_network, VOLUME]

    def test_creation_failure_is_fatal(self):
        runtime = FakeRuntime(fail_create=[NETWORK])

        with runtime.patch():
            with pytest.raises(InfrastructureCreationError, match="network 'frontend'") as exc_info:
                provision_infrastructure(declared_resources())

        assert "Cannot connect to the Docker daemon" in str(exc_info.value)
        assert runtime.create_calls == [NETWORK]
        assert runtime.state(VOLUME) == ResourceState.ABSENT


class TestDockerResourceCommands:
    def test_inspect_command(self):
        from demod_deploy import docker

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0)
            assert docker.resource_exists(VOLUME) is True

            assert mock_run.call_args[0][0] == ["docker", "volume", "inspect", "demod-data"]

    def test_missing_resource(self):
        from demod_deploy import docker

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=1)
            assert docker.resource_exists(NETWORK) is False

    def test_create_command(self):
        from demod_deploy import docker

        with patch("subprocess.run") as mock_run:
            mock_run.return_value = Mock(returncode=0)
            docker.create_resource(NETWORK)

            assert mock_run.call_args[0][0] == ["docker", "network", "create", "frontend"]
