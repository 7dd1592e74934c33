from pathlib import Path

import pytest

from v5sym.debug_metadata import (
    DebugMetadataPatchError,
    apply_auto_fix,
    can_auto_fix,
    can_enable_debug_metadata,
    enable_debug_metadata,
    should_offer_debug_fix,
)
from v5sym.model import ResolvedLocation, ResolvedSymbol

VEXCODE_MAKEFILE = "\n".join(
    [
        "# VEXcode makefile 2019_03_26_01",
        "",
        "# show compiler output",
        "VERBOSE = 0",
        "",
        "# include toolchain options",
        "include vex/mkenv.mk",
        "",
        "# location of the project source cpp and c files",
        "SRC_C  = $(wildcard src/*.cpp)",
        "",
    ]
)


def test_dbg_001_unpatched_vexcode_makefile_can_be_fixed() -> None:
    assert can_enable_debug_metadata(VEXCODE_MAKEFILE) is True


def test_dbg_002_patch_inserts_debug_flags_after_environment_include() -> None:
    patched = enable_debug_metadata(VEXCODE_MAKEFILE)

    assert (
        "include vex/mkenv.mk\n\n# enable debug metadata\nCFLAGS += -g\nCXX_FLAGS += -g\n"
        in patched
    )
    assert patched.startswith("# VEXcode makefile")
    assert patched.count("CFLAGS += -g") == 1


def test_dbg_003_second_application_is_refused() -> None:
    patched = enable_debug_metadata(VEXCODE_MAKEFILE)

    assert can_enable_debug_metadata(patched) is False
    with pytest.raises(DebugMetadataPatchError):
        enable_debug_metadata(patched)


def test_dbg_004_non_vexcode_makefiles_are_not_patchable() -> None:
    assert can_enable_debug_metadata("all:\n\tmake -C src\n") is False
    assert (
        can_enable_debug_metadata("# VEXcode makefile\nVERBOSE = 0\n") is False
    )
    assert (
        can_enable_debug_metadata(
            "# VEXcode makefile\ninclude vex/mkenv.mk\nCFLAGS += -g -O0\n"
        )
        is False
    )


def test_dbg_005_project_level_fix_rewrites_makefile(tmp_path: Path) -> None:
    makefile = tmp_path / "makefile"
    makefile.write_text(VEXCODE_MAKEFILE, encoding="utf-8")

    assert can_auto_fix(tmp_path) is True
    assert apply_auto_fix(tmp_path) == makefile
    assert "CXX_FLAGS += -g" in makefile.read_text(encoding="utf-8")
    assert can_auto_fix(tmp_path) is False
    with pytest.raises(DebugMetadataPatchError):
        apply_auto_fix(tmp_path)


def test_dbg_006_missing_makefile_is_not_fixable(tmp_path: Path) -> None:
    assert can_auto_fix(tmp_path) is False


def test_dbg_007_fix_is_offered_only_for_location_less_results(tmp_path: Path) -> None:
    (tmp_path / "makefile").write_text(VEXCODE_MAKEFILE, encoding="utf-8")
    code_object = tmp_path / "build" / "robot.elf"
    without_location = ResolvedSymbol(
        symbol_name="main", location=None, code_object=code_object
    )
    with_location = ResolvedSymbol(
        symbol_name="main",
        location=ResolvedLocation(source_file=tmp_path / "src" / "main.cpp", line=3),
        code_object=code_object,
    )

    assert should_offer_debug_fix(without_location, tmp_path) is True
    assert should_offer_debug_fix(with_location, tmp_path) is False
