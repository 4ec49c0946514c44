"""
generate_demos.py — Render the bundled sample decks with the engine.

Reads demo_config.json, renders each sample deck as PPTX and PDF into
demo_ppts/output/, and records per-demo metadata (timestamps, sizes,
fallback slides) in demo_status.json.

Run directly:  python demo_ppts/generate_demos.py [--theme <selector>]
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root is on the path
ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

DEMO_DIR = ROOT_DIR / "demo_ppts"
DEMO_OUTPUT_DIR = DEMO_DIR / "output"
DEMO_CONFIG_PATH = DEMO_DIR / "demo_config.json"
DEMO_STATUS_PATH = DEMO_DIR / "demo_status.json"


def _load_config() -> dict:
    """Load the demo configuration."""
    with open(DEMO_CONFIG_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


def _save_status(status: dict) -> None:
    """Persist generation status."""
    with open(DEMO_STATUS_PATH, "w", encoding="utf-8") as f:
        json.dump(status, f, indent=4, default=str)


def generate_single_demo(demo_cfg: dict, theme_override: str = "") -> dict:
    """Render one sample deck in both formats; returns its metadata."""
    from engine.errors import MalformedDeckError
    from orchestrator import DeckOrchestrator, generate_filename
    from models import RenderRequest

    demo_id = demo_cfg["id"]
    title = demo_cfg["title"]
    theme = theme_override or demo_cfg.get("theme", "auto")

    print(f"\n{'='*60}")
    print(f"  Rendering: {title}  (theme={theme})")
    print(f"{'='*60}")

    request = RenderRequest(
        deck_text=json.dumps(demo_cfg["deck"]),
        document_title=title,
        theme=theme,
    )
    orchestrator = DeckOrchestrator()
    meta = {
        "id": demo_id,
        "title": title,
        "theme": theme,
        "generated_at": datetime.now().isoformat(),
        "files": {},
        "status": "success",
        "error": None,
    }

    for fmt in ("pptx", "pdf"):
        try:
            result = orchestrator.render(request, fmt)
        except MalformedDeckError as e:
            print(f"  ❌ {fmt.upper()} failed: {e}")
            meta["status"] = "error"
            meta["error"] = e.diagnostic
            continue

        output_path = DEMO_OUTPUT_DIR / generate_filename(f"{demo_id} {title}", fmt)
        output_path.write_bytes(result.content)
        meta["files"][fmt] = {
            "file_path": str(output_path),
            "file_size_kb": round(len(result.content) / 1024, 1),
            "slides": result.slide_count,
            "fallback_slides": [s.index for s in result.slides if s.fallback],
        }
        print(f"  ✅ {output_path.name} ({meta['files'][fmt]['file_size_kb']} KB, "
              f"{result.fallback_count} fallback)")

    return meta


def generate_all_demos(theme_override: str = "") -> None:
    """Render every configured demo and refresh demo_status.json."""
    config = _load_config()
    DEMO_OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

    print("\n" + "=" * 60)
    print("  Deck Engine — Demo Rendering")
    print(f"  Time: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print("=" * 60)

    status = {"demos": {}, "last_full_run": None}
    for demo_cfg in config["demo_decks"]:
        meta = generate_single_demo(demo_cfg, theme_override)
        status["demos"][meta["id"]] = meta

    status["last_full_run"] = datetime.now().isoformat()
    _save_status(status)

    success = sum(1 for d in status["demos"].values() if d.get("status") == "success")
    print(f"\n{success}/{len(status['demos'])} demos rendered → {DEMO_OUTPUT_DIR}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render the bundled demo decks")
    parser.add_argument("--theme", default="", help="Theme selector applied to every demo")
    args = parser.parse_args()
    generate_all_demos(theme_override=args.theme)
