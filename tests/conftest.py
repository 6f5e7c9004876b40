from __future__ import annotations

from pathlib import Path

import pytest

from layerconf.core.options import LoaderOptions


@pytest.fixture
def make_options(tmp_path: Path):
    """Options isolated from the real working directory, home and environment."""
    local = tmp_path / "local"
    global_dir = tmp_path / "global"
    local.mkdir()
    global_dir.mkdir()

    def _make(**overrides) -> LoaderOptions:
        values = dict(
            local_config_directory=local,
            global_config_directory=global_dir,
            environ={},
            system_properties={},
        )
        values.update(overrides)
        return LoaderOptions(**values)

    _make.local = local
    _make.global_dir = global_dir
    return _make
