#!/usr/bin/env python3
"""
Installs auto-skeleton (with test extras) and the Chromium build Playwright drives.
"""

import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent

STEPS = [
    ([sys.executable, "-m", "pip", "install", "-e", f"{ROOT}[test]"], "Installing auto-skeleton"),
    ([sys.executable, "-m", "playwright", "install", "chromium"], "Installing Chromium browser"),
]


def main():
    for cmd, description in STEPS:
        print(f"📦 {description}...")
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            print(f"❌ {description} failed\n{result.stderr}")
            sys.exit(result.returncode)

    print("✅ Setup complete. Try:")
    print("   auto-skeleton <url> --selector '#app' --output ./skeleton-output")


if __name__ == "__main__":
    main()
