"""
Tests for the failed-environment remediation step.
"""

from datetime import datetime
from types import SimpleNamespace

import pytest
from unittest.mock import MagicMock
from azure.core.exceptions import HttpResponseError

from acasched.errors import RemediationError
from acasched.remediation import (
    FailedStateTagger,
    RemediationStep,
    apply_remediation,
    merge_tags,
    remediation_tag,
)

FIXED_NOW = datetime(2026, 10, 18, 21, 0, 5)


def _client(state, tags=None):
    client = MagicMock()
    environment = SimpleNamespace(provisioning_state=state, tags=tags)
    client.managed_environments.get.return_value = environment
    return client, environment


class TestTags:
    """Test tag construction and merging."""

    def test_remediation_tag(self):
        assert remediation_tag(FIXED_NOW) == {"fix_20261018": "2026-10-18"}

    def test_merge_keeps_existing_and_replaces_collision(self):
        existing = {"owner": "platform", "fix_20261018": "stale"}
        merged = merge_tags(existing, {"fix_20261018": "2026-10-18"})

        assert merged == {"owner": "platform", "fix_20261018": "2026-10-18"}
        assert existing["fix_20261018"] == "stale"

    def test_merge_with_no_existing_tags(self):
        assert merge_tags(None, {"a": "1"}) == {"a": "1"}


class TestFailedStateTagger:
    """Test the tagging strategy against a mocked client."""

    def test_failed_environment_is_tagged(self):
        client, environment = _client("Failed", {"owner": "platform"})

        result = FailedStateTagger(clock=lambda: FIXED_NOW).apply(client, "cae-rg", "env1")

        assert result.applied
        assert result.tag_name == "fix_20261018"
        assert result.tag_value == "2026-10-18"
        assert environment.tags == {"owner": "platform", "fix_20261018": "2026-10-18"}
        client.managed_environments.get.assert_called_once_with("cae-rg", "env1")
        client.managed_environments.begin_update.assert_called_once_with("cae-rg", "env1", environment)
        client.managed_environments.begin_update.return_value.result.assert_called_once()

    def test_state_comparison_is_case_insensitive(self):
        client, _ = _client("FAILED")
        assert FailedStateTagger(clock=lambda: FIXED_NOW).apply(client, "cae-rg", "env1").applied

    def test_enum_state_value_is_used(self):
        client, _ = _client(SimpleNamespace(value="Failed"))
        result = FailedStateTagger(clock=lambda: FIXED_NOW).apply(client, "cae-rg", "env1")
        assert result.provisioning_state == "Failed"
        assert result.applied

    def test_healthy_environment_is_untouched(self):
        client, environment = _client("Succeeded", {"owner": "platform"})

        result = FailedStateTagger().apply(client, "cae-rg", "env1")

        assert not result.applied
        assert result.provisioning_state == "Succeeded"
        assert environment.tags == {"owner": "platform"}
        client.managed_environments.begin_update.assert_not_called()

    def test_update_error_is_wrapped(self):
        client, _ = _client("Failed")
        client.managed_environments.begin_update.side_effect = HttpResponseError(message="Conflict")

        with pytest.raises(RemediationError, match="Conflict"):
            FailedStateTagger(clock=lambda: FIXED_NOW).apply(client, "cae-rg", "env1")


class TestRemediationStep:
    """Test the strategy base class."""

    def test_base_class_is_abstract(self):
        with pytest.raises(TypeError):
            RemediationStep()

    def test_subclass_must_implement_apply(self):
        class Incomplete(RemediationStep):
            pass

        with pytest.raises(TypeError):
            Incomplete()


class TestApplyRemediation:
    """Test that remediation errors never escape."""

    def test_errors_are_logged_and_swallowed(self, caplog):
        client = MagicMock()
        client.managed_environments.get.side_effect = HttpResponseError(message="NotFound")

        result = apply_remediation(FailedStateTagger(), client, "cae-rg", "env1")

        assert result is None
        assert "Remediation of environment 'env1' failed" in caplog.text

    def test_custom_step(self):
        class RaisingStep(RemediationStep):
            def apply(self, client, resource_group, environment_name):
                raise RuntimeError("unexpected")

        assert apply_remediation(RaisingStep(), MagicMock(), "cae-rg", "env1") is None
