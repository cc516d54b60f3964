# size_report.py ──────────────────────────────────────────────────────────
#
# • PlatformIO post-build hook: prints the flash / RAM footprint of the
#   firmware, attributed to source folders and files.
# • Add to platformio.ini:   extra_scripts = post:size_report.py
# • Optional features file next to platformio.ini: footprint_features.json
# • Works on Windows, Linux and macOS.

Import("env")
import pathlib, shutil, subprocess

from fwfootprint.cli import run
from fwfootprint.config import ReportConfig
from fwfootprint.errors import FootprintError
from fwfootprint.toolchain import Toolchain

# ── Board capacities ────────────────────────────────────────────────────
RAM_BYTES  = 0x50000       # 327 680  (ESP32-C3 DRAM + RTC fast RAM)
FLASH_APP  = 0x140000      # 1 310 720 factory-partition budget

FEATURES_FILE = "footprint_features.json"


# ── Helpers ─────────────────────────────────────────────────────────────
def find_tool(name_hint):
    return (env.get(name_hint) or
            env.WhereIs(name_hint) or
            shutil.which(name_hint))


def write_stat_file(readelf, elf, stat):
    """The report reads RAM sections from `readelf -e`, like a Zephyr .stat."""
    result = subprocess.run([readelf, "-e", str(elf)], text=True, capture_output=True)
    if result.returncode:
        return False
    stat.write_text(result.stdout)
    return True


# ── Post-build hook ─────────────────────────────────────────────────────
def _after_build(source, target, env):
    elf = pathlib.Path(env.subst("$PROG_PATH"))
    if not elf.exists():
        print("⚠️  Cannot find firmware.elf – footprint report skipped")
        return

    readelf = find_tool("READELF") or "readelf"
    if not write_stat_file(readelf, elf, elf.with_suffix(".stat")):
        print("⚠️  readelf returned an error – footprint report skipped")
        return

    features = pathlib.Path(env.subst("$PROJECT_DIR")) / FEATURES_FILE
    cfg = ReportConfig(
        outdir=str(elf.parent),
        kernel_name=elf.stem,
        source_dir=env.subst("$PROJECT_DIR") + "/",
        depth=4,
        rom=True,
        ram=True,
        features_file=str(features) if features.exists() else None,
        flash_capacity=FLASH_APP,
        ram_capacity=RAM_BYTES,
    )
    try:
        toolchain = Toolchain(nm=find_tool("NM"), objdump=find_tool("OBJDUMP"))
        run(cfg, toolchain=toolchain, summary=True)
    except FootprintError as e:
        print(f"⚠️  {e} – footprint report skipped")

# Register the hook
env.AddPostAction("buildprog", _after_build)
