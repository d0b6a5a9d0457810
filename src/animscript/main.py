"""
main.py — command line entry point
----------------------------------

    animscript list [DIR] [--json]
    animscript info PATH
    animscript run SCRIPT [--dir DIR] [--keys a,b,c] [--seconds N] [--param name=value ...]

SCRIPT is a guid or a display name as shown by `list`.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional

from animscript.engine.animation_instance import AnimationInstance
from animscript.engine.frame_scheduler import FrameScheduler, monotonic_ms
from animscript.managers.config_manager import ConfigManager
from animscript.managers.script_catalog import ScriptCatalog
from animscript.models.config import EngineConfig
from animscript.models.descriptor import ScriptDescriptor
from animscript.models.enums import LogCategory, LogLevel
from animscript.models.keymap import KeyMap
from animscript.models.schemas import ScriptListResponse, ScriptResponse
from animscript.utils.logger import get_category_logger, configure_logger

log = get_category_logger(LogCategory.SYSTEM)

# Reduced ANSI layout used by `run` (12 units per key)
DEMO_ROWS = [
    ["esc", "f1", "f2", "f3", "f4", "f5", "f6", "f7", "f8", "f9", "f10", "f11", "f12"],
    ["grave", "1", "2", "3", "4", "5", "6", "7", "8", "9", "0", "minus", "equal"],
    ["tab", "q", "w", "e", "r", "t", "y", "u", "i", "o", "p", "lbrace", "rbrace"],
    ["caps", "a", "s", "d", "f", "g", "h", "j", "k", "l", "colon", "quote", "enter"],
    ["lshift", "z", "x", "c", "v", "b", "n", "m", "comma", "dot", "slash", "rshift"],
    ["lctrl", "lwin", "lalt", "space", "ralt", "rwin", "rmenu", "rctrl"],
]
DEMO_PITCH = 12


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="animscript",
        description="Discover and run keyboard animation scripts",
    )
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = parser.add_subparsers(dest="command")

    # list
    p_list = sub.add_parser("list", help="List scripts in the animations directory")
    p_list.add_argument("dir", nargs="?", help="Animations directory")
    p_list.add_argument("--json", action="store_true", help="Print JSON")

    # info
    p_info = sub.add_parser("info", help="Query one script executable")
    p_info.add_argument("path", help="Script executable")

    # run
    p_run = sub.add_parser("run", help="Run a script and print its final colors")
    p_run.add_argument("script", help="Script guid or display name")
    p_run.add_argument("--dir", help="Animations directory")
    p_run.add_argument("--keys", help="Comma-separated key names (default: all)")
    p_run.add_argument("--seconds", type=float, default=2.0, help="Run time")
    p_run.add_argument("--param", action="append", default=[], metavar="NAME=VALUE",
                       help="Override a parameter (repeatable)")
    return parser


def parse_overrides(pairs: List[str]) -> Dict[str, str]:
    overrides = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise ValueError(f"Expected NAME=VALUE, got '{pair}'")
        overrides[name.strip().lower()] = value
    return overrides


def print_descriptor(desc: ScriptDescriptor) -> None:
    print(f"{desc.name}  {desc.guid_text}")
    print(f"  version {desc.version} ({desc.year}) by {desc.author}, {desc.license}")
    if desc.description:
        print(f"  {desc.description}")
    timing = "absolute" if desc.absolute_time else "relative"
    print(f"  time={timing} repeat={'on' if desc.repeat else 'off'} "
          f"preempt={'on' if desc.preempt else 'off'} "
          f"kpmode={desc.kp_mode.name.lower()} "
          f"params={'live' if desc.live_params else 'on-demand'}")
    for p in desc.params:
        print(f"    {p.type.value:<9} {p.name:<12} default={p.default!r} "
              f"min={p.minimum!r} max={p.maximum!r}")


def cmd_list(config: EngineConfig, directory: Optional[str], as_json: bool) -> int:
    catalog = ScriptCatalog(config.info_timeout, config.kill_timeout)
    catalog.discover(directory or config.animations_dir)
    scripts = catalog.list()
    if as_json:
        response = ScriptListResponse(
            scripts=[ScriptResponse.from_descriptor(d) for d in scripts],
            count=len(scripts),
        )
        print(response.model_dump_json(indent=2))
        return 0
    if not scripts:
        print("No animation scripts found.")
        return 1
    print(f"{'Name':<40} {'Version':<10} {'Author'}")
    print("-" * 70)
    for desc in scripts:
        print(f"{desc.name:<40} {desc.version:<10} {desc.author}")
    return 0


def cmd_info(config: EngineConfig, path: str) -> int:
    catalog = ScriptCatalog(config.info_timeout, config.kill_timeout)
    desc = catalog.load(Path(path))
    if desc is None:
        print(f"{path} is not a valid animation script.")
        return 1
    print_descriptor(desc)
    return 0


async def run_for(anim: AnimationInstance, fps: int, seconds: float) -> None:
    scheduler = FrameScheduler(fps=fps)
    scheduler.add(anim)
    if anim.param_values.get("trigger") in (True, "true", "1"):
        anim.retrigger(monotonic_ms())
    await scheduler.start()
    try:
        await asyncio.sleep(seconds)
    finally:
        await scheduler.stop()


def cmd_run(config: EngineConfig, args) -> int:
    catalog = ScriptCatalog(config.info_timeout, config.kill_timeout)
    catalog.discover(args.dir or config.animations_dir)
    catalog.list()
    desc = catalog.find(args.script)
    if desc is None:
        print(f"Unknown script '{args.script}' (see 'list').")
        return 1

    keymap = KeyMap.from_rows(DEMO_ROWS, pitch=DEMO_PITCH)
    keys = args.keys.split(",") if args.keys else list(keymap)

    try:
        overrides = parse_overrides(args.param)
    except ValueError as ex:
        print(str(ex))
        return 2
    unknown = sorted(set(overrides) - set(desc.param_names()))
    if unknown:
        print(f"Unknown parameter(s) for {desc.name}: {', '.join(unknown)}")
        return 2
    values = desc.default_values()
    values.update(overrides)

    log.info(f"Running {desc.name}", seconds=args.seconds, keys=len(keys))
    anim = catalog.clone_for_use(desc.guid)
    with anim:
        if not anim.init(keymap, keys, values):
            return 1
        asyncio.run(run_for(anim, config.fps, args.seconds))
        colors = anim.colors

    print(f"{desc.name}: {len(colors)} keys after {args.seconds:g}s")
    for key in sorted(colors):
        print(f"  {key:<8} {colors[key]:08x}")
    return 0


def main(argv=None) -> int:
    # Unicode log symbols on consoles with a legacy encoding
    if hasattr(sys.stdout, 'reconfigure') and sys.stdout.encoding.upper() != 'UTF-8':
        sys.stdout.reconfigure(encoding='utf-8')  # type: ignore

    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    manager = ConfigManager(args.config)
    config = manager.load()
    manager.apply_logging()
    if args.debug:
        configure_logger(LogLevel.DEBUG, config.use_colors)
    elif args.command == "list" and args.json:
        # Log lines share stdout with the JSON document
        configure_logger(LogLevel.ERROR, config.use_colors)

    if args.command == "list":
        return cmd_list(config, args.dir, args.json)
    if args.command == "info":
        return cmd_info(config, args.path)
    if args.command == "run":
        return cmd_run(config, args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
