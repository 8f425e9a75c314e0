"""Tests for the Terraform import engine."""
import io
import json
from unittest.mock import MagicMock

import pytest
from azure.core.exceptions import ResourceNotFoundError

from aztfimport.config.schema import RunConfig
from aztfimport.errors import GenerationError, InitializationError
from aztfimport.meta.engine import TerraformImportEngine
from aztfimport.meta.models import ImportOutcome, ImportStatus, ResourceRecord, TargetAddress
from aztfimport.runlog import RunLogger
from aztfimport.terraform.runner import TerraformError

RG_ID = "/subscriptions/0000/resourceGroups/test-rg"
VNET_ID = RG_ID + "/providers/Microsoft.Network/virtualNetworks/vnet"
SITE_ID = RG_ID + "/providers/Microsoft.Web/sites/app"


@pytest.fixture
def mapping_file(tmp_path):
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps({
        RG_ID: "azurerm_resource_group",
        VNET_ID: {"resource_type": "azurerm_virtual_network", "resource_name": "vnet"},
    }))
    return str(path)


@pytest.fixture
def config(tmp_path, mapping_file):
    return RunConfig(resource_group="test-rg", output_dir=str(tmp_path / "out"), mapping_file=mapping_file)


@pytest.fixture
def lister():
    mock_lister = MagicMock()
    mock_lister.list_resource_ids.return_value = [RG_ID, VNET_ID, SITE_ID]
    return mock_lister


@pytest.fixture
def runner():
    mock_runner = MagicMock()
    mock_runner.available.return_value = True
    mock_runner.binary = "terraform"
    return mock_runner


def make_engine(config, lister, runner):
    return TerraformImportEngine(config, RunLogger(io.StringIO()), lister=lister, runner=runner)


def test_init_builds_records(config, lister, runner, tmp_path):
    """init prepares the output dir, runs terraform init and maps discovered resources."""
    engine = make_engine(config, lister, runner)
    engine.init()

    assert (tmp_path / "out" / "provider.tf").exists()
    runner.init.assert_called_once()
    lister.list_resource_ids.assert_called_once_with("test-rg")

    records = engine.list_resources()
    assert [r.resource_id for r in records] == [RG_ID, VNET_ID, SITE_ID]
    assert records[0].target_address == "azurerm_resource_group.res-0"
    assert records[1].target_address == "azurerm_virtual_network.vnet"
    assert not records[2].mapping_present


def test_init_missing_mapping_file(config, lister, runner):
    """A missing mapping file is an initialization error."""
    config.mapping_file = "missing.json"

    with pytest.raises(InitializationError, match="not found"):
        make_engine(config, lister, runner).init()
    runner.init.assert_not_called()


def test_init_invalid_mapping_file(config, lister, runner, tmp_path):
    """A malformed mapping file is an initialization error."""
    bad = tmp_path / "bad.json"
    bad.write_text(json.dumps({RG_ID: {"resource_type": "not valid"}}))
    config.mapping_file = str(bad)

    with pytest.raises(InitializationError, match="invalid mapping file"):
        make_engine(config, lister, runner).init()


def test_init_rejects_existing_config(config, lister, runner, tmp_path):
    """An output dir holding Terraform files is refused."""
    out = tmp_path / "out"
    out.mkdir()
    (out / "main.tf").write_text("")

    with pytest.raises(InitializationError, match="already contains Terraform files: main.tf"):
        make_engine(config, lister, runner).init()


def test_init_output_path_is_file(config, lister, runner, tmp_path):
    """An output path that is a file is refused."""
    (tmp_path / "out").write_text("")

    with pytest.raises(InitializationError):
        make_engine(config, lister, runner).init()


def test_init_without_terraform(config, lister, runner):
    """A missing terraform binary is reported."""
    runner.available.return_value = False

    with pytest.raises(InitializationError, match="not found in PATH"):
        make_engine(config, lister, runner).init()


def test_init_terraform_failure(config, lister, runner):
    """terraform init failures are initialization errors."""
    runner.init.side_effect = TerraformError(["terraform", "init"], 1, "provider download failed")

    with pytest.raises(InitializationError, match="provider download failed"):
        make_engine(config, lister, runner).init()


def test_init_discovery_failure(config, lister, runner):
    """Azure API errors during discovery are initialization errors."""
    lister.list_resource_ids.side_effect = ResourceNotFoundError("Resource group 'test-rg' could not be found.")

    with pytest.raises(InitializationError, match="listing resource group test-rg"):
        make_engine(config, lister, runner).init()


def test_init_duplicate_addresses(config, lister, runner, mapping_file):
    """Two resources mapped to the same address fail init before any import."""
    with open(mapping_file, "w") as f:
        json.dump({
            VNET_ID: "azurerm_virtual_network.vnet",
            SITE_ID: {"resource_type": "azurerm_virtual_network", "resource_name": "vnet"},
        }, f)
    engine = make_engine(config, lister, runner)

    with pytest.raises(InitializationError, match="both mapped to azurerm_virtual_network.vnet") as exc_info:
        engine.init()

    assert VNET_ID in str(exc_info.value)
    assert SITE_ID in str(exc_info.value)
    assert engine.list_resources() == []
    runner.import_resource.assert_not_called()


def test_import_success(config, lister, runner, tmp_path):
    """A successful import returns IMPORTED and removes the stub."""
    engine = make_engine(config, lister, runner)
    engine.init()
    record = engine.list_resources()[0]

    def check_stub(address, resource_id):
        stub = tmp_path / "out" / "import_azurerm_resource_group_res-0.tf"
        assert stub.read_text() == 'resource "azurerm_resource_group" "res-0" {}\n'

    runner.import_resource.side_effect = check_stub
    outcome = engine.import_resource(record)

    assert outcome.status is ImportStatus.IMPORTED
    runner.import_resource.assert_called_once_with("azurerm_resource_group.res-0", RG_ID)
    assert list((tmp_path / "out").glob("import_*.tf")) == []


def test_import_failure(config, lister, runner, tmp_path):
    """A terraform failure becomes a FAILED outcome with stderr as cause."""
    engine = make_engine(config, lister, runner)
    engine.init()
    runner.import_resource.side_effect = TerraformError(["terraform", "import"], 1, "Error: resource not found\n")

    outcome = engine.import_resource(engine.list_resources()[1])

    assert outcome == ImportOutcome.failed("Error: resource not found")
    assert list((tmp_path / "out").glob("import_*.tf")) == []


def test_generate_config(config, lister, runner, tmp_path):
    """Generation renders the imported records from state."""
    engine = make_engine(config, lister, runner)
    engine.init()
    records = engine.list_resources()
    records[0].record(ImportOutcome.imported())
    records[1].record(ImportOutcome.failed("boom"))
    records[2].record(ImportOutcome.skipped())
    runner.show_state.return_value = {
        "values": {"root_module": {"resources": [
            {"address": "azurerm_resource_group.res-0", "values": {"name": "test-rg", "location": "eastus"}},
        ]}}
    }

    paths = engine.generate_config(records)

    content = (tmp_path / "out" / "main.tf").read_text()
    assert paths == [str(tmp_path / "out" / "main.tf")]
    assert 'resource "azurerm_resource_group" "res-0"' in content
    assert "azurerm_virtual_network" not in content


def test_generate_state_failure(config, lister, runner):
    """Failing to read state is a generation error."""
    engine = make_engine(config, lister, runner)
    runner.show_state.side_effect = TerraformError(["terraform", "show"], 1, "state locked")

    with pytest.raises(GenerationError, match="reading Terraform state"):
        engine.generate_config([])
