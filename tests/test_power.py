"""Tests for power loading and steer.toml configuration."""

import logging
from pathlib import Path

import pytest

from conftest import FIXTURE_INDEX, make_power, write_doc
from steer.config import PowerConfig, load_config
from steer.errors import (
    CatalogMismatchError,
    ConfigError,
    DuplicateIdError,
    PowerIndexError,
    UnknownCategoryError,
)
from steer.models import PriorityTier
from steer.power import Power, load_power
from steer.retrieval import SteeringReader


def test_load_power_reads_frontmatter(fixture_power: Power):
    """Test load_power reads name, display name and keywords from frontmatter."""
    assert fixture_power.name == "react-best-practices"
    assert fixture_power.display_name == "Fixture Power"
    assert fixture_power.title == "Fixture Power"
    assert fixture_power.keywords == ["react", "fixture"]
    assert len(fixture_power.catalog) == 4
    assert len(fixture_power.store) == 4
    assert fixture_power.mismatches == []


def test_missing_index(tmp_path: Path):
    """Test a directory without POWER.md raises PowerIndexError."""
    with pytest.raises(PowerIndexError):
        load_power(tmp_path)


def test_index_without_rules(tmp_path: Path):
    """Test an index that lists no rules raises PowerIndexError."""
    make_power(tmp_path / "p", index="---\nname: empty\n---\n\n# Empty\n", docs=[])
    with pytest.raises(PowerIndexError) as exc_info:
        load_power(tmp_path / "p")
    assert "no rules" in str(exc_info.value)


def test_name_falls_back_to_directory(tmp_path: Path):
    """Test the directory name is used when frontmatter has no name."""
    index = FIXTURE_INDEX.replace('name: "react-best-practices"\n', "")
    path = make_power(tmp_path / "my-power", index=index)
    assert load_power(path).name == "my-power"


def test_duplicate_id_aborts_load(tmp_path: Path):
    """Test a duplicate id stops the power from loading."""
    index = FIXTURE_INDEX.replace(
        "- `rerender-memo` - Extract expensive work into memoized components",
        "- `rerender-memo` - Extract expensive work into memoized components\n- rerender-memo - Again",
    )
    path = make_power(tmp_path / "p", index=index)
    with pytest.raises(DuplicateIdError):
        load_power(path)


def test_missing_document_is_a_warning_not_a_failure(tmp_path: Path, caplog):
    """Test a missing document is logged and the rest stays readable."""
    path = make_power(tmp_path / "p", docs=["rerender-memo", "server-cache-react", "async-parallel"])

    with caplog.at_level(logging.WARNING, logger="steer.power"):
        power = load_power(path)

    assert [m.rule_id for m in power.mismatches] == ["async-defer-await"]
    assert any("async-defer-await" in r.getMessage() for r in caplog.records)

    # The rest of the catalog is still served.
    reader = SteeringReader(power)
    assert "Body of async-parallel." in reader.read_steering("react-best-practices", "async-parallel.md")
    assert [d.id for d in power.catalog.rules_in_category("Eliminating Waterfalls")] == [
        "async-parallel",
        "async-defer-await",
    ]


def test_strict_config_makes_mismatch_fatal(tmp_path: Path):
    """Test strict mode raises CatalogMismatchError."""
    path = make_power(tmp_path / "p", docs=["rerender-memo"], config="strict = true\n")
    with pytest.raises(CatalogMismatchError):
        load_power(path)


def test_preload_config(tmp_path: Path):
    """Test preload = true loads every document up front."""
    path = make_power(tmp_path / "p", config="preload = true\n")
    power = load_power(path)
    assert all(power.store.is_loaded(doc_id) for doc_id in power.store.ids())


def test_config_overrides_name_and_steering_dir(tmp_path: Path):
    """Test steer.toml overrides the power name and steering directory."""
    path = make_power(tmp_path / "p", docs=[], config='name = "renamed"\nsteering_dir = "rules"\n')

    for doc_id in ("rerender-memo", "server-cache-react", "async-parallel", "async-defer-await"):
        write_doc(path / "rules", doc_id)

    power = load_power(path)
    assert power.name == "renamed"
    assert power.catalog.power_name == "renamed"
    assert power.mismatches == []


def test_config_defaults_when_absent(tmp_path: Path):
    """Test defaults apply when steer.toml is absent."""
    assert load_config(tmp_path) == PowerConfig()


def test_config_categories_replace_fixed_set(tmp_path: Path):
    """Test [[categories]] in steer.toml replaces the fixed set."""
    (tmp_path / "steer.toml").write_text(
        "\n".join(
            [
                "[[categories]]",
                'name = "Security"',
                'tier = "critical"',
                'prefix = "sec-"',
                "",
                "[[categories]]",
                'name = "Style"',
                'tier = "LOW"',
                "",
            ]
        ),
        encoding="utf-8",
    )
    config = load_config(tmp_path)
    names = config.category_set.names()
    assert names == ["Security", "Style"]
    assert config.category_set.get("security").tier is PriorityTier.CRITICAL
    assert config.category_set.get("style").rank == 2


@pytest.mark.parametrize(
    "content, key",
    [
        ("strict = 1\n", "strict"),
        ('extension = "md"\n', "extension"),
        ('steering_dir = ""\n', "steering_dir"),
        ('[[categories]]\nname = "X"\ntier = "urgent"\n', "categories[0].tier"),
        ("categories = []\n", "categories"),
        ("not toml = = =\n", "<file>"),
    ],
)
def test_invalid_config_values(tmp_path: Path, content: str, key: str):
    """Test invalid steer.toml values raise ConfigError naming the key."""
    (tmp_path / "steer.toml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError) as exc_info:
        load_config(tmp_path)
    assert exc_info.value.key == key


def test_index_errors_report_power_md_line_numbers(tmp_path: Path):
    """Test index errors report line numbers counted from the top of POWER.md."""
    index = FIXTURE_INDEX.replace("### Re-render Optimization (MEDIUM)", "### Database Tuning (MEDIUM)")
    path = make_power(tmp_path / "p", index=index)
    with pytest.raises(UnknownCategoryError) as exc_info:
        load_power(path)

    lines = index.split("\n")
    assert lines[exc_info.value.line - 1] == "### Database Tuning (MEDIUM)"
