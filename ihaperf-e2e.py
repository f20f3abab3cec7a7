#!/usr/bin/env python3
import argparse
import asyncio
import sys
import traceback

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright
from pydantic import ValidationError

from ihaperf_e2e.config import load_config
from ihaperf_e2e.seed import run_seed
from ihaperf_e2e.utils.get_log import GetLog


async def check_playwright_browsers_async(browser_names):
    try:
        async with async_playwright() as p:
            for name in browser_names:
                browser = await getattr(p, name.value).launch(headless=True)
                await browser.close()
        print(f"✅ Playwright browsers available: {', '.join(n.value for n in browser_names)}")
        return True
    except PlaywrightError as e:
        print(f"⚠️ Playwright browsers unavailable: {e}")
        return False


async def run(cfg):
    print("🔍 Checking Playwright browsers...")
    ok = await check_playwright_browsers_async(cfg.browser.browsers)
    if not ok:
        print("Please manually run: `playwright install` to install browser binaries, then retry.", file=sys.stderr)
        sys.exit(1)

    try:
        result = await run_seed(cfg)
    except Exception:
        print("Seed run failed, stack trace:", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)

    if not result.accessible:
        print(f"❌ Application not reachable under {cfg.base_url} (landed on {result.url})", file=sys.stderr)
        sys.exit(1)

    print(f"✓ Performance testing tool is accessible: {result.url}")
    print(f"✓ Title: {result.title}")
    print(f"✓ Screenshot: {result.screenshot_path}")


def parse_args():
    parser = argparse.ArgumentParser(description="IHAPerf E2E seed run")
    parser.add_argument("--config", "-c", help="YAML configuration file path (optional, default auto-search config/config.yaml)")
    parser.add_argument("--base-url", help="Application URL, overrides the config file")
    return parser.parse_args()


def main():
    args = parse_args()

    try:
        cfg = load_config(args.config)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)

    if args.base_url:
        cfg = cfg.model_copy(update={"base_url": args.base_url.rstrip("/")})

    GetLog.get_log(level=cfg.log_level)
    asyncio.run(run(cfg))


if __name__ == "__main__":
    main()
