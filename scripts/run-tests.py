#!/usr/bin/env python3
"""
Test runner for HN Digest.

Wraps pytest with the marker selections used in this repo: unit,
integration, fast (everything not marked slow) and coverage.
"""

import argparse
import subprocess
import sys
from pathlib import Path
from typing import List


class TestRunner:
    """Runs pytest in a given mode from the project root."""

    def __init__(self, project_root: Path):
        self.project_root = project_root

    def run_command(self, command: List[str], description: str) -> bool:
        """Run a command and return success status."""
        print(f"\n🧪 {description}...")
        print(f"Running: {' '.join(command)}")

        try:
            result = subprocess.run(command, cwd=self.project_root, check=False)
        except FileNotFoundError:
            print(f"❌ {description} failed - pytest not found")
            return False

        if result.returncode == 0:
            print(f"✅ {description} completed successfully")
            return True

        print(f"❌ {description} failed with exit code {result.returncode}")
        return False

    def run_marked(self, marker: str, description: str, verbose: bool) -> bool:
        cmd = ["pytest", "-m", marker]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, description)

    def run_coverage_tests(self, min_coverage: int) -> bool:
        """Run tests with coverage reporting."""
        cmd = [
            "pytest",
            "--cov=hn_digest",
            f"--cov-fail-under={min_coverage}",
            "--cov-report=term-missing",
        ]
        return self.run_command(cmd, f"Coverage tests (min {min_coverage}%)")

    def run_all_tests(self, verbose: bool = False) -> bool:
        cmd = ["pytest"]
        if verbose:
            cmd.append("-v")
        return self.run_command(cmd, "All tests")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run the HN Digest test suite")
    parser.add_argument("--unit", action="store_true", help="Run unit tests only")
    parser.add_argument(
        "--integration", action="store_true", help="Run integration tests only"
    )
    parser.add_argument("--fast", action="store_true", help="Skip slow tests")
    parser.add_argument(
        "--coverage", action="store_true", help="Run with coverage reporting"
    )
    parser.add_argument(
        "--min-coverage", type=int, default=85, help="Minimum coverage percentage"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    args = parser.parse_args()

    runner = TestRunner(Path(__file__).resolve().parent.parent)

    if args.unit:
        success = runner.run_marked("unit", "Unit tests", args.verbose)
    elif args.integration:
        success = runner.run_marked("integration", "Integration tests", args.verbose)
    elif args.fast:
        success = runner.run_marked("not slow", "Fast tests", args.verbose)
    elif args.coverage:
        success = runner.run_coverage_tests(args.min_coverage)
    else:
        success = runner.run_all_tests(args.verbose)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
