"""
Tests for the dependency check and the Azure session check.
"""

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from unittest.mock import Mock, patch
from azure.core.exceptions import ClientAuthenticationError, ServiceRequestError

from acasched.cloud.auth import ARM_SCOPE, check_session
from acasched.errors import AuthError, DependencyError
from acasched.provision import REQUIRED_MODULES, ensure_dependencies, ensure_dependency, is_importable


class TestProvision:
    """Test module detection and pip fallback."""

    def test_is_importable(self):
        assert is_importable("json")
        assert not is_importable("acasched_missing_module")
        assert not is_importable("acasched_missing_parent.child")

    @patch("acasched.provision.subprocess.run")
    def test_present_module_skips_install(self, mock_run):
        ensure_dependency("json", "json")
        mock_run.assert_not_called()

    @patch("acasched.provision.subprocess.run")
    @patch("acasched.provision.is_importable", side_effect=[False, True])
    def test_missing_module_is_installed(self, mock_importable, mock_run):
        mock_run.return_value = Mock(returncode=0, stdout="", stderr="")

        ensure_dependency("azure.mgmt.appcontainers", "azure-mgmt-appcontainers")

        args = mock_run.call_args[0][0]
        assert args[1:4] == ["-m", "pip", "install"]
        assert args[-1] == "azure-mgmt-appcontainers"

    @patch("acasched.provision.subprocess.run")
    @patch("acasched.provision.is_importable", return_value=False)
    def test_install_disabled(self, mock_importable, mock_run):
        with pytest.raises(DependencyError, match="not installed"):
            ensure_dependency("azure.identity", "azure-identity", install=False)
        mock_run.assert_not_called()

    @patch("acasched.provision.subprocess.run")
    @patch("acasched.provision.is_importable", return_value=False)
    def test_pip_failure(self, mock_importable, mock_run):
        mock_run.return_value = Mock(
            returncode=1, stdout="", stderr="Collecting x\nERROR: No matching distribution found"
        )

        with pytest.raises(DependencyError, match="No matching distribution found"):
            ensure_dependency("azure.identity", "azure-identity")

    @patch("acasched.provision.ensure_dependency")
    def test_ensure_dependencies_checks_all(self, mock_ensure):
        ensure_dependencies(install=False)
        assert mock_ensure.call_count == len(REQUIRED_MODULES)
        mock_ensure.assert_any_call("azure.identity", "azure-identity", install=False)


class TestCheckSession:
    """Test ARM token acquisition."""

    def test_active_session(self):
        credential = Mock()
        credential.get_token.return_value = SimpleNamespace(token="t", expires_on=1792357200)

        info = check_session(credential)

        credential.get_token.assert_called_once_with(ARM_SCOPE)
        assert info.expires_on == datetime.fromtimestamp(1792357200, tz=timezone.utc)

    def test_no_session(self):
        credential = Mock()
        credential.get_token.side_effect = ClientAuthenticationError(message="No credential available")

        with pytest.raises(AuthError, match="No credential available"):
            check_session(credential)

    def test_unreachable_token_endpoint(self):
        credential = Mock()
        credential.get_token.side_effect = ServiceRequestError("connection refused")

        with pytest.raises(AuthError, match="connection refused"):
            check_session(credential)

