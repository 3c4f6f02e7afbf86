#!/usr/bin/env python
"""
Run the Streamlit quotation preview.

Usage:
    python scripts/run_app.py [--port PORT]
"""
import argparse
import subprocess
import sys
from pathlib import Path


def main():
    parser = argparse.ArgumentParser(description="Serve the quotation preview")
    parser.add_argument("--port", type=int, default=8501)
    args = parser.parse_args()

    project_root = Path(__file__).parent.parent
    ui_path = project_root / 'src' / 'led_quote' / 'ui' / 'app_streamlit.py'
    if not ui_path.exists():
        print(f"ERROR: preview page not found at {ui_path}")
        sys.exit(1)

    cmd = [sys.executable, '-m', 'streamlit', 'run', str(ui_path), '--server.port', str(args.port)]
    print(f"Starting Streamlit: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nPreview stopped.")


if __name__ == "__main__":
    main()
