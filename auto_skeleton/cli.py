#!/usr/bin/env python3
"""
auto-skeleton CLI - analyzes a component on a live page with Playwright and
writes its skeleton configuration and renderable markup per breakpoint.
"""

import argparse
import asyncio
import json
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

try:
    from playwright.async_api import Browser, Error, TimeoutError as PlaywrightTimeoutError, async_playwright
except ImportError:
    print("ERROR: playwright not installed. Run: pip install playwright && playwright install chromium")
    raise SystemExit(1)

from . import VERSION
from .animation import PRESETS, skeleton_stylesheet
from .browser import PlaywrightSurface
from .config import DebugConfig, SkeletonOptions
from .debug import analysis_overlay, summarize
from .errors import AutoSkeletonError
from .generator import SkeletonGenerator
from .pipeline import analyze, generate
from .types import SkeletonNode

DEFAULT_BREAKPOINTS = {
    "desktop": {"width": 1440, "height": 900},
    "tablet": {"width": 834, "height": 1112},
    "mobile": {"width": 390, "height": 844},
}

DEFAULT_SELECTOR = "body"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
body {{ margin: 0; padding: 16px; font-family: sans-serif; }}
{stylesheet}
</style>
</head>
<body>
{body}
</body>
</html>
"""


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def now_iso() -> str:
    return datetime.now().isoformat()


def safe_filename(value: str) -> str:
    return re.sub(r"[^\w\-]", "_", value)


def parse_breakpoints(raw: Optional[str]) -> Dict[str, Dict[str, int]]:
    if not raw:
        return DEFAULT_BREAKPOINTS
    result = {}
    parts = [p.strip() for p in raw.split(",") if p.strip()]
    for part in parts:
        if "=" not in part:
            continue
        name, size = part.split("=", 1)
        if "x" not in size:
            continue
        width_str, height_str = size.lower().split("x", 1)
        try:
            result[name.strip()] = {"width": int(width_str), "height": int(height_str)}
        except ValueError:
            continue
    return result or DEFAULT_BREAKPOINTS


def parse_list(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [p.strip() for p in raw.split(",") if p.strip()]


def read_overrides(raw: Optional[str]) -> Dict[str, Dict[str, Any]]:
    if not raw:
        return {}
    data = json.loads(Path(raw).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Overrides file must hold a JSON object: {raw}")
    return data


def write_text(path: Path, content: str) -> None:
    path.write_text(content, encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def render_html(tree: SkeletonNode, title: str) -> str:
    return HTML_TEMPLATE.format(title=title, stylesheet=skeleton_stylesheet(), body=tree.to_html())


class SkeletonCollector:
    def __init__(
        self,
        url: str,
        output_dir: str,
        selector: str = DEFAULT_SELECTOR,
        breakpoints: Optional[Dict[str, Dict[str, int]]] = None,
        options: Optional[SkeletonOptions] = None,
        reduced_motion: bool = False,
    ):
        self.url = url
        self.selector = selector
        self.breakpoints = breakpoints or DEFAULT_BREAKPOINTS
        self.options = options or SkeletonOptions()
        self.reduced_motion = reduced_motion
        self.generator = SkeletonGenerator()

        self.output_dir = Path(output_dir)
        ensure_dir(self.output_dir)

        self.pages: Dict[str, Dict[str, Any]] = {}
        self.limits: List[str] = []

    async def collect_all(self) -> Path:
        async with async_playwright() as p:
            browser = await p.chromium.launch(headless=True)
            for bp_name, bp_config in self.breakpoints.items():
                await self.collect_page(browser, bp_name, bp_config)
            await browser.close()

        results_path = self.output_dir / "results.json"
        write_json(results_path, self.build_results())

        print("\n✅ Skeleton collection complete")
        print(f"Output: {self.output_dir}")
        if self.limits:
            print(f"⚠️  {len(self.limits)} breakpoint(s) failed, see {results_path}")
        return results_path

    async def collect_page(self, browser: Browser, breakpoint: str, bp_config: Dict[str, int]) -> None:
        safe_tag = safe_filename(breakpoint)
        page_dir = self.output_dir / safe_tag
        stage = "init"

        context = await browser.new_context(viewport=bp_config, device_scale_factor=1)
        page = await context.new_page()

        try:
            stage = "emulate_media"
            await page.emulate_media(reduced_motion="reduce" if self.reduced_motion else "no-preference")
            stage = "goto"
            await page.goto(self.url, wait_until="domcontentloaded", timeout=60000)
            stage = "wait_root"
            await page.wait_for_selector(self.selector, state="attached", timeout=15000)
            try:
                stage = "wait_networkidle"
                await page.wait_for_load_state("networkidle", timeout=15000)
            except PlaywrightTimeoutError:
                self.limits.append(f"{breakpoint}: network did not go idle, analyzing anyway")

            surface = PlaywrightSurface(page)
            print(f"🔍 [{breakpoint}] analyzing {self.selector}")
            stage = "analyze"
            analysis = await analyze(surface, self.selector, self.options)
            stage = "host_preferences"
            host = await surface.host_preferences()
            stage = "generate"
            result = generate(analysis, self.options, host, self.generator)

            stage = "write"
            ensure_dir(page_dir)
            write_json(page_dir / "skeleton.json", {
                "analysis": analysis.to_dict(),
                "generation": result.to_dict(),
                "host": {
                    "prefers_reduced_motion": host.prefers_reduced_motion,
                    "prefers_dark_scheme": host.prefers_dark_scheme,
                    "viewport": [host.viewport_width, host.viewport_height],
                },
            })
            write_text(page_dir / "skeleton.html", render_html(result.renderable_tree, f"{self.selector} ({breakpoint})"))
            if self.options.debug.overlay:
                write_text(page_dir / "overlay.html", render_html(analysis_overlay(analysis), f"overlay ({breakpoint})"))

            self.pages[breakpoint] = {
                "url": self.url,
                "viewport": bp_config,
                "summary": summarize(analysis),
                "element_count": result.metadata.element_count,
                "complexity_score": result.metadata.complexity,
                "output": str(page_dir.relative_to(self.output_dir)),
            }
            print(f"🧱 [{breakpoint}] {result.metadata.element_count} placeholders, "
                  f"{analysis.metadata.complexity.value} layout")

        except AutoSkeletonError as exc:
            self.pages[breakpoint] = {"url": self.url, "error": exc.to_dict(), "stage": stage}
            self.limits.append(f"Failed to build skeleton for {breakpoint} at {stage}: {exc}")
            print(f"❌ [{breakpoint}] {exc.code}: {exc.message}")
        except Error as exc:
            self.pages[breakpoint] = {"url": self.url, "error": str(exc), "stage": stage}
            self.limits.append(f"Failed to build skeleton for {breakpoint} at {stage}: {exc}")
            print(f"❌ [{breakpoint}] {stage}: {exc}")
        finally:
            await context.close()

    def build_results(self) -> Dict[str, Any]:
        results: Dict[str, Any] = {
            "meta": {
                "tool": "auto-skeleton",
                "version": VERSION,
                "url": self.url,
                "selector": self.selector,
                "collected_at": now_iso(),
                "breakpoints": self.breakpoints,
            },
            "pages": self.pages,
        }
        if self.limits:
            results["notes"] = ["Limits:"] + self.limits
        return results


def build_options(args: argparse.Namespace) -> SkeletonOptions:
    return SkeletonOptions(
        animation=args.animation,
        theme={"type": args.theme} if args.theme else None,
        custom_overrides=read_overrides(args.overrides),
        ignore_elements=tuple(parse_list(args.ignore)),
        respect_user_motion=args.respect_motion,
        timeout=args.timeout,
        max_depth=args.max_depth,
        component_name=args.name,
        debug=DebugConfig(verbose=args.verbose, overlay=args.debug_overlay),
    )


async def main_async(args: argparse.Namespace) -> None:
    collector = SkeletonCollector(
        url=args.url,
        output_dir=args.output,
        selector=args.selector,
        breakpoints=parse_breakpoints(args.breakpoints),
        options=build_options(args),
        reduced_motion=args.reduced_motion,
    )
    await collector.collect_all()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate skeleton placeholders from a rendered component")
    parser.add_argument("url", help="Page URL to analyze")
    parser.add_argument("--selector", "-s", default=DEFAULT_SELECTOR, help="CSS selector of the component root")
    parser.add_argument("--output", "-o", default="./skeleton-output", help="Output directory")
    parser.add_argument(
        "--breakpoints",
        help="Comma-separated breakpoints, e.g. desktop=1440x900,mobile=390x844",
    )
    parser.add_argument("--timeout", type=float, default=5000, help="Layout stabilization timeout in ms")
    parser.add_argument("--max-depth", type=int, default=10, help="Maximum analysis depth")
    parser.add_argument("--animation", choices=sorted(PRESETS), help="Animation preset")
    parser.add_argument("--theme", choices=["light", "dark", "auto"], help="Placeholder theme")
    parser.add_argument("--overrides", help="Path to JSON object of override key -> placeholder fields")
    parser.add_argument("--ignore", help="Comma-separated selectors to leave out of the skeleton")
    parser.add_argument("--name", help="Component name recorded in metadata")
    parser.add_argument(
        "--respect-motion",
        action="store_true",
        help="Disable animations when the page reports prefers-reduced-motion",
    )
    parser.add_argument(
        "--reduced-motion",
        action="store_true",
        help="Emulate prefers-reduced-motion: reduce in the browser",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log pipeline details")
    parser.add_argument("--debug-overlay", action="store_true", help="Also write overlay.html per breakpoint")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main() -> None:
    args = build_parser().parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(main_async(args))


if __name__ == "__main__":
    main()
