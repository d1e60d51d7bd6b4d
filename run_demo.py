#!/usr/bin/env python
"""
Convenience launcher for demos.

Run specific demo:
  python run_demo.py panel
  python run_demo.py streamlines

Or run from demos folder:
  python demos/demo_naca_panel.py
"""

import sys
from pathlib import Path

DEMO_DIR = Path(__file__).parent / "demos"

DEMOS = {
    "panel": "demo_naca_panel.py",
    "streamlines": "demo_streamlines.py",
}

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))


def main():
    if len(sys.argv) < 2:
        print("Available demos:")
        for name in DEMOS:
            print(f"  python run_demo.py {name}")
        print("\nOr run directly:")
        print("  python demos/demo_naca_panel.py")
        sys.exit(1)

    demo = sys.argv[1].lower()

    if demo not in DEMOS:
        print(f"Unknown demo: {demo}")
        sys.exit(1)

    demo_file = DEMO_DIR / DEMOS[demo]
    if not demo_file.exists():
        print(f"Demo file not found: {demo_file}")
        sys.exit(1)

    # Execute the demo
    with open(demo_file) as f:
        code = f.read()

    exec(code, {"__name__": "__main__", "__file__": str(demo_file)})


if __name__ == "__main__":
    main()
