"""Tests for cached module metadata loading."""

import json

import pytest

from tfmodules.module_resolution import ModuleMetadataError
from tfmodules.module_resolution import load_module_metadata
from tfmodules.module_resolution.metadata import ModuleMetadata


def test_missing_file_returns_none(tmp_path):
    """No metadata file means the project was never initialised."""
    assert load_module_metadata(tmp_path) is None


def test_terraform_init_format(tmp_path, write_tree):
    """The modules.json written by terraform init is read as-is."""
    write_tree(
        {
            ".terraform/modules/modules.json": json.dumps(
                {
                    "Modules": [
                        {"Key": "", "Source": "", "Dir": "."},
                        {
                            "Key": "vpc",
                            "Source": "registry.terraform.io/terraform-aws-modules/vpc/aws",
                            "Version": "5.1.0",
                            "Dir": ".terraform/modules/vpc",
                        },
                    ]
                }
            )
        }
    )

    metadata = load_module_metadata(tmp_path)

    assert metadata is not None
    entry = metadata.find("vpc")
    assert entry.dir == ".terraform/modules/vpc"
    assert entry.version == "5.1.0"
    assert metadata.find("missing") is None


def test_custom_metadata_path(tmp_path, write_tree):
    write_tree({"cache/modules.json": '{"Modules": [{"Key": "a", "Dir": "cache/a"}]}'})

    metadata = load_module_metadata(tmp_path, "cache/modules.json")

    assert metadata.find("a").dir == "cache/a"


@pytest.mark.parametrize("content", ["not json", '{"Modules": [{"Key": "a"}]}', '{"Modules": "nope"}'])
def test_malformed_file_raises(tmp_path, write_tree, content):
    """Invalid JSON or schema surfaces as ModuleMetadataError."""
    write_tree({".terraform/modules/modules.json": content})

    with pytest.raises(ModuleMetadataError):
        load_module_metadata(tmp_path)


def test_duplicate_keys_warn_and_first_wins(caplog):
    """Duplicate keys are warned about and the first entry is used."""
    metadata = ModuleMetadata.model_validate(
        {"Modules": [{"Key": "x", "Dir": "first"}, {"Key": "x", "Dir": "second"}]}
    )

    assert metadata.find("x").dir == "first"
    assert "more than once" in caplog.text
