"""Tests for HCL file enumeration and parsing."""

import pytest

from tfmodules.block.values import evaluate
from tfmodules.parser import FileParseError
from tfmodules.parser import list_source_files
from tfmodules.parser import parse_file

MAIN_TF = """
module "network" {
  source = "./network"
  cidr   = "10.0.0.0/16"
}

resource "aws_s3_bucket" "logs" { #tfsec:ignore:aws-s3-enable-versioning
  bucket = "logs"
}

variable "region" {
  default = "eu-west-1"
}

locals {
  env = "prod"
}
"""


def test_list_source_files_is_sorted_and_filtered(write_tree, tmp_path):
    """Only .tf files directly in the directory are listed, sorted by name."""
    write_tree({"b.tf": "", "a.tf": "", "notes.md": "", "vars.tfvars": "", "sub/c.tf": ""})

    files = list_source_files(tmp_path)

    assert [f.name for f in files] == ["a.tf", "b.tf"]


def test_list_source_files_missing_directory(tmp_path):
    """A missing directory surfaces as OSError."""
    with pytest.raises(OSError):
        list_source_files(tmp_path / "missing")


def test_parse_file_labels(write_tree, tmp_path):
    """Labels are peeled per block type: two for resources, one for modules, none for locals."""
    write_tree({"main.tf": MAIN_TF})

    blocks, _ = parse_file(tmp_path / "main.tf")

    by_type = {block.type: block for block in blocks}
    assert by_type["module"].labels == ("network",)
    assert by_type["resource"].labels == ("aws_s3_bucket", "logs")
    assert by_type["variable"].labels == ("region",)
    assert by_type["locals"].labels == ()


def test_parse_file_attributes(write_tree, tmp_path):
    """Attribute values survive parsing and parser metadata keys are removed."""
    write_tree({"main.tf": MAIN_TF})

    blocks, _ = parse_file(tmp_path / "main.tf")

    module = next(block for block in blocks if block.type == "module")
    assert evaluate(module.attributes["source"]).raw == "./network"
    assert evaluate(module.attributes["cidr"]).raw == "10.0.0.0/16"
    assert not any(name.startswith("__") for name in module.attributes)
    assert module.range.filename == str(tmp_path / "main.tf")


def test_parse_file_collects_ignores(write_tree, tmp_path):
    """Ignore directives are returned alongside the blocks."""
    write_tree({"main.tf": MAIN_TF})

    _, ignores = parse_file(tmp_path / "main.tf")

    assert [ignore.rule_id for ignore in ignores] == ["aws-s3-enable-versioning"]


def test_parse_file_syntax_error_keeps_ignores(write_tree, tmp_path):
    """A syntax error still carries the ignores extracted before parsing."""
    write_tree({"broken.tf": '#tfsec:ignore:aws-rule\nresource "a" "b" {\n  x = \n'})

    with pytest.raises(FileParseError) as exc_info:
        parse_file(tmp_path / "broken.tf")

    assert exc_info.value.path == tmp_path / "broken.tf"
    assert [ignore.rule_id for ignore in exc_info.value.ignores] == ["aws-rule"]


def test_parse_file_unreadable(tmp_path):
    """A missing file is reported as a parse error, not OSError."""
    with pytest.raises(FileParseError):
        parse_file(tmp_path / "absent.tf")


def test_parse_file_records_line_ranges(write_tree, tmp_path):
    """The installed hcl2 reports block line numbers, so ranges are populated."""
    write_tree({"main.tf": 'module "child" {\n  source = "./child"\n}\n'})

    blocks, _ = parse_file(tmp_path / "main.tf")

    assert [block.labels for block in blocks] == [("child",)]
    assert blocks[0].range.start_line == 1
    assert blocks[0].range.end_line >= blocks[0].range.start_line
    assert "__start_line__" not in blocks[0].attributes
