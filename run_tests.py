#!/usr/bin/env python3
"""
Simple test runner for the hit stats project.

Extra arguments go straight to pytest, e.g.:
    python run_tests.py -k aggregated
    python run_tests.py tests/test_hit_scope.py
"""

import subprocess
import sys
import os

def run_tests(args):
    """Run the test suite (whole tests/ dir unless a path is given)"""
    print("🧪 Running Hit Stats Tests")
    print("=" * 40)

    # Change to project directory
    os.chdir(os.path.dirname(os.path.abspath(__file__)))

    targets = [arg for arg in args if arg.startswith("tests")]
    command = [
        sys.executable, "-m", "pytest",
        "-v",
        "--tb=short",
        "-p", "no:cacheprovider",  # keep the checkout free of .pytest_cache
    ]
    if not targets:
        command.append("tests/")

    try:
        subprocess.run(command + args, check=True)

        print("\n✅ All tests passed!")
        return 0

    except subprocess.CalledProcessError as e:
        print(f"\n❌ Tests failed with exit code {e.returncode}")
        return e.returncode
    except FileNotFoundError:
        print("❌ pytest not found. Install with: pip install -e .[test]")
        return 1

if __name__ == "__main__":
    sys.exit(run_tests(sys.argv[1:]))
