"""Architecture tests using pytest-archon.

These tests enforce the layer boundaries inside each bounded context and
the direction of dependencies between contexts: tenancy knows nothing of
its users, the registry knows nothing of course content, and only
community and insights compose the others.
"""

import pytest
from pytest_archon import archrule

CONTEXTS = ["tenancy", "registry", "community", "insights"]


class TestDomainLayerBoundaries:
    """Domain layers hold plain values and have no framework dependencies."""

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_infrastructure(self, context):
        (
            archrule(f"{context}_domain_no_infrastructure")
            .match(f"{context}.domain*")
            .should_not_import(f"{context}.infrastructure*", "infrastructure*")
            .check(context)
        )

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_application(self, context):
        (
            archrule(f"{context}_domain_no_application")
            .match(f"{context}.domain*")
            .should_not_import(f"{context}.application*")
            .check(context)
        )

    @pytest.mark.parametrize("context", CONTEXTS)
    def test_domain_does_not_import_frameworks(self, context):
        (
            archrule(f"{context}_domain_no_frameworks")
            .match(f"{context}.domain*")
            .should_not_import("fastapi*", "starlette*", "sqlalchemy*")
            .check(context)
        )


class TestPortsLayerBoundaries:
    @pytest.mark.parametrize("context", ["tenancy", "registry", "community"])
    def test_ports_do_not_import_infrastructure(self, context):
        (
            archrule(f"{context}_ports_no_infrastructure")
            .match(f"{context}.ports*")
            .should_not_import(f"{context}.infrastructure*")
            .check(context)
        )

    @pytest.mark.parametrize("context", ["tenancy", "registry", "community"])
    def test_ports_do_not_import_application(self, context):
        (
            archrule(f"{context}_ports_no_application")
            .match(f"{context}.ports*")
            .should_not_import(f"{context}.application*")
            .check(context)
        )


class TestApplicationLayerBoundaries:
    @pytest.mark.parametrize("context", ["tenancy", "registry", "insights"])
    def test_application_does_not_import_own_infrastructure(self, context):
        (
            archrule(f"{context}_application_no_infrastructure")
            .match(f"{context}.application*")
            .should_not_import(f"{context}.infrastructure*")
            .check(context)
        )

    @pytest.mark.parametrize("context", ["tenancy", "registry", "insights"])
    def test_application_does_not_import_fastapi(self, context):
        (
            archrule(f"{context}_application_no_fastapi")
            .match(f"{context}.application*")
            .should_not_import("fastapi*", "starlette*")
            .check(context)
        )


class TestCrossContextBoundaries:
    def test_tenancy_does_not_import_other_contexts(self):
        """Tenancy routes course ids to databases and nothing more."""
        (
            archrule("tenancy_is_standalone")
            .match("tenancy*")
            .should_not_import("registry*", "community*", "insights*")
            .check("tenancy")
        )

    def test_registry_does_not_import_course_content(self):
        (
            archrule("registry_no_content")
            .match("registry*")
            .should_not_import("community*", "insights*")
            .check("registry")
        )

    def test_community_does_not_import_insights(self):
        (
            archrule("community_no_insights")
            .match("community*")
            .should_not_import("insights*")
            .check("community")
        )

    def test_shared_kernel_does_not_import_contexts(self):
        (
            archrule("shared_kernel_no_contexts")
            .match("shared_kernel*")
            .should_not_import(*(f"{context}*" for context in CONTEXTS))
            .check("shared_kernel")
        )

    def test_infrastructure_database_does_not_import_contexts(self):
        (
            archrule("infrastructure_database_no_contexts")
            .match("infrastructure.database*")
            .should_not_import(*(f"{context}*" for context in CONTEXTS))
            .check("infrastructure")
        )
