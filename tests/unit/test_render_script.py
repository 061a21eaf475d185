"""
Unit tests for the chart rendering script.
"""

import argparse
import json
from pathlib import Path
from typing import Any

import pytest

from scripts.render_org_chart import load_organizations, main


@pytest.fixture
def input_file(tmp_path: Path, sample_organizations_data: list[dict[str, Any]]) -> Path:
    path = tmp_path / "organizations.json"
    path.write_text(json.dumps({"organizations": sample_organizations_data}), encoding="utf-8")
    return path


class TestRenderScript:
    """Tests for scripts/render_org_chart.py."""

    def test_load_wrapped_and_bare_lists(
        self, tmp_path: Path, input_file: Path, sample_organizations_data: list[dict[str, Any]]
    ) -> None:
        bare = tmp_path / "bare.json"
        bare.write_text(json.dumps(sample_organizations_data), encoding="utf-8")

        assert load_organizations(input_file) == load_organizations(bare)
        assert [o.id for o in load_organizations(bare)][:2] == ["org-parent-1", "org-sub-1"]

    @pytest.mark.asyncio
    async def test_writes_exports(self, tmp_path: Path, input_file: Path) -> None:
        output = tmp_path / "exports"

        exit_code = await main(argparse.Namespace(input=input_file, output=output, no_png=False))

        assert exit_code == 0
        chart = json.loads((output / "organizational-chart.json").read_text(encoding="utf-8"))
        assert len(chart["nodes"]) == 4
        assert (output / "organizational-chart.png").read_bytes().startswith(b"\x89PNG")

    @pytest.mark.asyncio
    async def test_json_only(self, tmp_path: Path, input_file: Path) -> None:
        exit_code = await main(argparse.Namespace(input=input_file, output=tmp_path, no_png=True))

        assert exit_code == 0
        assert not (tmp_path / "organizational-chart.png").exists()

    @pytest.mark.asyncio
    async def test_unreadable_input(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text('[{"name": "no id"}]', encoding="utf-8")

        assert await main(argparse.Namespace(input=bad, output=tmp_path, no_png=True)) == 1
        assert await main(argparse.Namespace(input=tmp_path / "missing.json", output=tmp_path, no_png=True)) == 1
