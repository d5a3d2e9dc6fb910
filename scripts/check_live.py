#!/usr/bin/env python3
"""Run the QStar checks once on this host and print the collected state.

Usage:
    LOG_FILE_PATH=/opt/QStar/log/syslog python scripts/check_live.py [--debug]

Reads the same environment variables as the collector (LOG_DATE_FMT,
LOG_FILE_PATH, LOG_BUF_SIZE). Nothing is sent anywhere.
"""

import asyncio
import json
import logging
import sys

sys.path.insert(0, "src")

from qstar_agent import LogConfig, QStarCollector, QStarError


async def main() -> None:
    """Run both checks and print their output."""
    level = logging.DEBUG if "--debug" in sys.argv else logging.INFO
    logging.basicConfig(level=level, format="%(name)s %(levelname)s: %(message)s")

    try:
        config = LogConfig.from_env()
    except QStarError as e:
        print(f"ERROR: {e}")
        sys.exit(1)

    collector = QStarCollector(config)
    checks = []
    print("=" * 60)
    print("QSTAR LIVE CHECK - READ ONLY")
    print("=" * 60)

    for key, check in (("qstar", collector.check_qstar), ("log", collector.check_log)):
        try:
            state = await check()
            checks.append((key, "PASS"))
            counts = ", ".join(f"{kind}={len(items)}" for kind, items in state.items())
            print(f"✓ {key}: {counts}")
            print(json.dumps(state, indent=4))
        except QStarError as e:
            checks.append((key, f"FAIL: {e}"))
            print(f"✗ {key}: {e}")

    print("\n" + "=" * 60)
    passed = sum(1 for _, r in checks if r == "PASS")
    print(f"RESULT: {passed}/{len(checks)} checks passed")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
