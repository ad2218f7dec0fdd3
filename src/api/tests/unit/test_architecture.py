"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers
within the Credentials bounded context.
"""

from pytest_archon import archrule


class TestCredentialsDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_outer_layers(self):
        """Domain layer should not depend on any other credentials layer."""
        (
            archrule("domain_no_outer_layers")
            .match("credentials.domain*")
            .should_not_import(
                "credentials.application*",
                "credentials.infrastructure*",
                "credentials.presentation*",
                "credentials.dependencies*",
            )
            .check("credentials")
        )

    def test_domain_does_not_import_frameworks(self):
        """Domain objects should be framework-agnostic."""
        (
            archrule("domain_no_frameworks")
            .match("credentials.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*")
            .check("credentials")
        )


class TestCredentialsPortsLayerBoundaries:
    def test_ports_does_not_import_implementations(self):
        """Ports define interfaces and know nothing of their adapters."""
        (
            archrule("ports_no_implementations")
            .match("credentials.ports*")
            .should_not_import(
                "credentials.application*",
                "credentials.infrastructure*",
                "sqlalchemy*",
            )
            .check("credentials")
        )


class TestCredentialsApplicationLayerBoundaries:
    """Tests that the application layer has no forbidden dependencies."""

    def test_application_does_not_import_infrastructure(self):
        """Application services depend on ports, never on adapters."""
        (
            archrule("application_no_infrastructure")
            .match("credentials.application*")
            .should_not_import("credentials.infrastructure*", "sqlalchemy*")
            .check("credentials")
        )

    def test_application_does_not_import_presentation(self):
        (
            archrule("application_no_presentation")
            .match("credentials.application*")
            .should_not_import("credentials.presentation*", "fastapi*", "starlette*")
            .check("credentials")
        )


class TestSharedKernelBoundaries:
    def test_shared_kernel_does_not_import_bounded_contexts(self):
        """The shared kernel is used by contexts, never the other way around."""
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import("credentials*")
            .check("shared_kernel")
        )
