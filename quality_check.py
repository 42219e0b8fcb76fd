#!/usr/bin/env python3
"""
Code quality checker for the photo delivery backend.

1. Ruff (import sorting + linting)
2. Black (code formatting)
3. Pylint (deep code analysis, scored)

For CI/CD integration, run: python quality_check.py
"""

import re
import subprocess
import sys
from pathlib import Path

PYLINT_MIN_SCORE = 9.0
SOURCE_DIRS = ["app/", "models/"]


def run_command(cmd: list[str], description: str, is_pylint: bool = False) -> bool:
    """Run a command and return True if successful."""
    print(f"\n{'='*60}")
    print(f"🔍 {description}")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        print(f"💥 {description} is not installed: {e}")
        return False

    if result.stdout:
        print("STDOUT:", result.stdout)
    if result.stderr:
        print("STDERR:", result.stderr)

    # Pylint exits non-zero for any message; judge it by score
    if is_pylint and result.stdout:
        score_match = re.search(r"rated at ([\d.]+)/10", result.stdout)
        if score_match:
            score = float(score_match.group(1))
            passed = score >= PYLINT_MIN_SCORE
            mark = "✅" if passed else "⚠️"
            print(f"{mark} {description} - Score: {score}/10 (minimum: {PYLINT_MIN_SCORE})")
            return passed

    if result.returncode == 0:
        print(f"✅ {description} - PASSED")
        return True
    print(f"❌ {description} - FAILED (exit code: {result.returncode})")
    return False


def main():
    """Run all quality checks."""
    print("🚀 Running Photo Delivery Backend Quality Checks")
    print(f"Project root: {Path(__file__).parent}")

    checks = [
        (["ruff", "check", *SOURCE_DIRS, "tests/"], "Ruff - Import sorting and linting", False),
        ([sys.executable, "-m", "black", *SOURCE_DIRS, "tests/", "--check"], "Black - Formatting", False),
        ([sys.executable, "-m", "pylint", *SOURCE_DIRS, "--score=y"], "Pylint - Code analysis", True),
    ]

    results = [(description, run_command(cmd, description, is_pylint)) for cmd, description, is_pylint in checks]

    print(f"\n{'='*60}")
    print("📊 QUALITY CHECK SUMMARY")
    print("=" * 60)
    for description, success in results:
        print(f"{description}: {'✅ PASSED' if success else '❌ FAILED'}")

    passed = sum(1 for _, success in results if success)
    print(f"\nOverall: {passed}/{len(results)} checks passed")
    sys.exit(0 if passed == len(results) else 1)


if __name__ == "__main__":
    main()
