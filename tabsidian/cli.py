#!/usr/bin/env python3
"""Export a browser tab snapshot into a Markdown note.

Usage:
- tabsidian export <tabs.json> [--config FILE] [--template FILE] [--out FILE] [--now ISO] [--obsidian] [-v]
- tabsidian validate <template-file>

The snapshot is either a JSON list of tab records or an object with
"tabs", "window" and "groups". Preferences use the DEFAULT_CFG keys.

Env:
- TABSIDIAN_CONFIG_PATH: preferences JSON used when --config is absent.
- TABSIDIAN_VERBOSE: log progress to stderr.
"""

import json
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from tabsidian.export.config import MAX_OBSIDIAN_URI_LENGTH, merge_cfg
from tabsidian.export.filters import select_tabs
from tabsidian.export.markdown import format_tabs_markdown
from tabsidian.export.obsidian import export_filename, plan_obsidian_export, resolve_obsidian_settings
from tabsidian.template import validate_template

USAGE = (
    "usage: tabsidian export <tabs.json> [--config FILE] [--template FILE] [--out FILE] "
    "[--now ISO] [--obsidian] [-v]\n"
    "       tabsidian validate <template-file>"
)
VERBOSE = False


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on", "y"}


def log(msg: str) -> None:
    if not VERBOSE:
        return
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    print(f"[tabsidian] {ts} {msg}", file=sys.stderr)


def load_cfg(p: Path) -> dict:
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    data = json.loads(p.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {p}")
    return data


def load_snapshot(p: Path) -> Dict:
    data = json.loads(p.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return {"tabs": data, "window": None, "groups": None}
    if isinstance(data, dict):
        tabs = data.get("tabs")
        return {
            "tabs": tabs if isinstance(tabs, list) else [],
            "window": data.get("window"),
            "groups": data.get("groups"),
        }
    raise ValueError(f"Snapshot must be a JSON list or object: {p}")


def parse_args(argv: List[str]) -> Dict:
    opts = {
        "command": None,
        "source": None,
        "config": None,
        "template": None,
        "out": None,
        "now": None,
        "obsidian": False,
        "verbose": _env_flag("TABSIDIAN_VERBOSE", default=False),
    }
    valued = {"--config": "config", "--template": "template", "--out": "out", "--now": "now"}
    rest = []
    args = list(argv[1:])
    idx = 0
    while idx < len(args):
        arg = args[idx]
        if arg in ("-v", "--verbose"):
            opts["verbose"] = True
        elif arg == "--obsidian":
            opts["obsidian"] = True
        elif arg in valued:
            if idx + 1 >= len(args):
                raise SystemExit(f"{arg} requires a value")
            idx += 1
            opts[valued[arg]] = args[idx]
        elif arg.split("=", 1)[0] in valued and "=" in arg:
            key, value = arg.split("=", 1)
            opts[valued[key]] = value
        elif arg in ("-h", "--help"):
            print(USAGE, file=sys.stderr)
            raise SystemExit(0)
        elif arg.startswith("-"):
            raise SystemExit(f"unknown option: {arg}")
        else:
            rest.append(arg)
        idx += 1

    if rest:
        opts["command"] = rest[0]
    if len(rest) > 1:
        opts["source"] = rest[1]
    if len(rest) > 2:
        raise SystemExit(f"unknown args: {' '.join(rest[2:])}")
    return opts


def _resolve_cfg(config_arg: Optional[str]) -> dict:
    if config_arg:
        return merge_cfg(load_cfg(Path(config_arg).expanduser()), None)
    env_path = os.environ.get("TABSIDIAN_CONFIG_PATH")
    if env_path:
        p = Path(env_path).expanduser()
        if p.exists():
            log(f"config: {p}")
            return merge_cfg(load_cfg(p), None)
        log(f"config: {p} not found, using defaults")
    return merge_cfg(None, None)


def run_export(opts: Dict) -> int:
    if not opts["source"]:
        print(USAGE, file=sys.stderr)
        return 2

    try:
        cfg = _resolve_cfg(opts["config"])
    except (FileNotFoundError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    src = Path(opts["source"]).expanduser().resolve()
    try:
        snapshot = load_snapshot(src)
    except (OSError, ValueError) as exc:
        print(f"error: cannot read snapshot ({exc})", file=sys.stderr)
        return 2
    tabs = select_tabs(snapshot["tabs"], cfg.get("restrictedUrls") or [])
    log(f"tabs: {len(snapshot['tabs'])} in snapshot, {len(tabs)} selected")
    if not tabs:
        print("No exportable tabs found; nothing to do.", file=sys.stderr)
        return 3

    template = cfg.get("markdownFormat")
    if opts["template"]:
        try:
            template = Path(opts["template"]).expanduser().read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            print(f"error: cannot read template ({exc})", file=sys.stderr)
            return 2

    try:
        result = format_tabs_markdown(
            tabs,
            template,
            {"window": snapshot["window"], "groups": snapshot["groups"], "cfg": cfg, "now": opts["now"]},
            stderr=sys.stderr,
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    markdown = result["markdown"]
    formatted_timestamp = result["formattedTimestamp"]

    if opts["obsidian"]:
        settings = resolve_obsidian_settings(cfg)
        if not settings["enabled"]:
            print("warn: Obsidian export is not configured (obsidianVault, obsidianNotePath)", file=sys.stderr)
        else:
            plan = plan_obsidian_export(
                markdown,
                formatted_timestamp,
                settings,
                clipboard_ok=False,
                max_length=int(cfg.get("maxObsidianUriLength") or MAX_OBSIDIAN_URI_LENGTH),
            )
            if plan["url"]:
                log(f"obsidian: {plan['notePath']} ({plan['totalLength']} chars)")
                print(plan["url"])
                return 0
            print(f"warn: Obsidian export skipped ({plan['reason']}); writing a file instead", file=sys.stderr)

    out = Path(opts["out"]).expanduser() if opts["out"] else Path.cwd() / export_filename(formatted_timestamp)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(markdown, encoding="utf-8")
    log(f"wrote {out}")
    print(str(out))
    return 0


def run_validate(opts: Dict) -> int:
    if not opts["source"]:
        print(USAGE, file=sys.stderr)
        return 2
    try:
        template = Path(opts["source"]).expanduser().read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read template ({exc})", file=sys.stderr)
        return 2
    result = validate_template(template)
    for message in result["errors"]:
        print(f"error: {message}", file=sys.stderr)
    for message in result["warnings"]:
        print(f"warn: {message}", file=sys.stderr)
    if result["errors"]:
        return 4
    print("Template ready.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    global VERBOSE
    argv = list(sys.argv if argv is None else argv)
    opts = parse_args(argv)
    VERBOSE = bool(opts["verbose"])

    if opts["command"] == "export":
        return run_export(opts)
    if opts["command"] == "validate":
        return run_validate(opts)
    print(USAGE, file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
