"""Tests for the terraform runner."""
import io
import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from aztfimport.runlog import RunLogger
from aztfimport.terraform.runner import TerraformError, TerraformRunner


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def runner(tmp_path):
    return TerraformRunner(str(tmp_path), RunLogger(io.StringIO()), env={"ARM_SUBSCRIPTION_ID": "0000"})


@patch("aztfimport.terraform.runner.subprocess.run")
def test_import_command(mock_run, runner, tmp_path):
    """terraform import runs in the working dir with the extra environment."""
    mock_run.return_value = completed(stdout="Import successful!")

    runner.import_resource("azurerm_resource_group.res-0", "/subscriptions/0000/resourceGroups/rg")

    args, kwargs = mock_run.call_args
    assert args[0] == ["terraform", "import", "-no-color", "-input=false",
                       "azurerm_resource_group.res-0", "/subscriptions/0000/resourceGroups/rg"]
    assert kwargs["cwd"] == str(tmp_path)
    assert kwargs["env"]["ARM_SUBSCRIPTION_ID"] == "0000"


@patch("aztfimport.terraform.runner.subprocess.run")
def test_failure_raises(mock_run, runner):
    """A non-zero exit raises TerraformError with stderr."""
    mock_run.return_value = completed(returncode=1, stderr="Error: Cannot import non-existent remote object\n")

    with pytest.raises(TerraformError) as excinfo:
        runner.init()

    assert excinfo.value.returncode == 1
    assert excinfo.value.stderr == "Error: Cannot import non-existent remote object"
    assert "'terraform init' failed" in str(excinfo.value)


@patch("aztfimport.terraform.runner.subprocess.run")
def test_show_state(mock_run, runner, tmp_path):
    """State is read from terraform show -json once a state file exists."""
    assert runner.show_state() == {}
    mock_run.assert_not_called()

    (tmp_path / "terraform.tfstate").write_text("{}")
    mock_run.return_value = completed(stdout=json.dumps({"format_version": "1.0"}))

    assert runner.show_state() == {"format_version": "1.0"}
    assert mock_run.call_args[0][0] == ["terraform", "show", "-json", "-no-color"]


@patch("aztfimport.terraform.runner.shutil.which")
def test_available(mock_which, runner):
    """Availability is a PATH lookup of the binary."""
    mock_which.return_value = None
    assert not runner.available()
    mock_which.return_value = "/usr/bin/terraform"
    assert runner.available()
