#!/usr/bin/env python
"""
Run the quotation API with uvicorn.

Usage:
    python scripts/run_api.py [--host HOST] [--port PORT] [--no-reload]
"""
import argparse
import os
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Serve led_quote.api.main:app")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--no-reload", action="store_true", help="Disable auto-reload")
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent

    # uvicorn runs in a child process, so src goes on PYTHONPATH
    env = os.environ.copy()
    src_path = str(project_root / "src")
    env["PYTHONPATH"] = os.pathsep.join(p for p in (src_path, env.get("PYTHONPATH")) if p)

    cmd = [
        sys.executable, "-m", "uvicorn", "led_quote.api.main:app",
        "--host", args.host,
        "--port", str(args.port),
    ]
    if not args.no_reload:
        cmd.append("--reload")

    print(f"Starting LED Quotation API on {args.host}:{args.port}...")
    try:
        subprocess.run(cmd, env=env, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
