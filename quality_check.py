#!/usr/bin/env python3
"""
Code quality checker for the Taskboard client.

1. Ruff (import sorting + linting)
2. Black (code formatting)
3. Pylint (deep code analysis, scored)

For CI/CD integration, run: python quality_check.py
"""

import re
import subprocess
import sys

PYLINT_MIN_SCORE = 9.5


def run_check(cmd: list[str], description: str, scored: bool = False) -> bool:
    """Run a checker and return True if it passed."""
    print(f"\n{'='*60}")
    print(f"🔍 {description}")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except OSError as e:
        print(f"💥 Error running {description}: {e}")
        return False

    if result.stdout:
        print("STDOUT:", result.stdout)
    if result.stderr:
        print("STDERR:", result.stderr)

    # Pylint is judged on its score, not its exit code
    if scored and result.stdout:
        score_match = re.search(r"rated at ([\d.]+)/10", result.stdout)
        if score_match:
            score = float(score_match.group(1))
            if score >= PYLINT_MIN_SCORE:
                print(f"✅ {description} - PASSED (Score: {score}/10)")
                return True
            print(f"⚠️ {description} - LOW SCORE ({score}/10, minimum: {PYLINT_MIN_SCORE})")
            return False

    if result.returncode == 0:
        print(f"✅ {description} - PASSED")
        return True
    print(f"❌ {description} - FAILED (exit code: {result.returncode})")
    return False


def main():
    print("🚀 Running Taskboard Quality Checks")

    checks = [
        (["ruff", "check", "taskboard/", "tests/"], "Ruff - Import sorting and linting", False),
        (
            [sys.executable, "-m", "black", "taskboard/", "tests/", "--check"],
            "Black - Formatting",
            False,
        ),
        (
            [sys.executable, "-m", "pylint", "taskboard/", "--score=y"],
            "Pylint - Code analysis",
            True,
        ),
    ]

    results = [
        (description, run_check(cmd, description, scored)) for cmd, description, scored in checks
    ]

    print(f"\n{'='*60}")
    print("📊 QUALITY CHECK SUMMARY")
    print("=" * 60)
    for description, success in results:
        print(f"{description}: {'✅ PASSED' if success else '❌ FAILED'}")

    passed = sum(1 for _, success in results if success)
    print(f"\nOverall: {passed}/{len(results)} checks passed")

    if passed == len(results):
        print("🎉 All quality checks passed!")
        sys.exit(0)
    print("⚠️  Some quality checks failed. Please review and fix.")
    sys.exit(1)


if __name__ == "__main__":
    main()
