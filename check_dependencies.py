#!/usr/bin/env python3
"""
Dependency Checker Script

This script checks that the packages the hierarchy reader imports are
installed in suitable versions.

Usage:
    python check_dependencies.py [--dev] [--fix]
"""

import sys
import argparse
import subprocess
from importlib import metadata
from packaging import version as pkg_version


class DependencyChecker:
    """Check and validate package dependencies."""

    # Distribution name -> minimum version
    REQUIRED_DEPS = {
        'pandas': '1.5.0',
        'numpy': '1.21.0',
        'rapidfuzz': '2.13.0',
        'tqdm': '4.64.0',
        'psutil': '5.9.0',
    }

    DEV_DEPS = {
        'pytest': '7.0.0',
        'pytest-cov': '4.0.0',
    }

    def __init__(self, verbose=False):
        self.verbose = verbose
        self.missing = []
        self.version_issues = []

    def log(self, message, level='INFO'):
        if self.verbose or level in ['ERROR', 'WARNING', 'SUCCESS']:
            prefix = {
                'INFO': 'ℹ',
                'SUCCESS': '✓',
                'WARNING': '⚠',
                'ERROR': '✗'
            }.get(level, ' ')
            print(f"{prefix} {message}")

    def check_package(self, package_name, min_version):
        """Return True when the distribution is installed at min_version or newer."""
        try:
            installed = metadata.version(package_name)
        except metadata.PackageNotFoundError:
            self.log(f"{package_name} not installed", 'ERROR')
            self.missing.append(package_name)
            return False

        if pkg_version.parse(installed) < pkg_version.parse(min_version):
            self.log(f"{package_name} {installed} (requires {min_version}+)", 'WARNING')
            self.version_issues.append((package_name, installed, min_version))
            return False

        self.log(f"{package_name} {installed} (requires {min_version}+)", 'SUCCESS')
        return True

    def check_group(self, title, deps):
        print(f"{title}:")
        print("-" * 60)
        results = [self.check_package(name, min_version) for name, min_version in deps.items()]
        print()
        return all(results)

    def requirement_specs(self):
        deps = {**self.REQUIRED_DEPS, **self.DEV_DEPS}
        specs = [f"{name}>={deps[name]}" for name in self.missing]
        specs.extend(f"{name}>={required}" for name, _, required in self.version_issues)
        return specs

    def print_summary(self):
        """Print dependency check summary and return overall success."""
        print("=" * 60)
        print("DEPENDENCY CHECK SUMMARY")
        print("=" * 60)

        specs = self.requirement_specs()
        if not specs:
            print("✓ All checked dependencies are satisfied!")
            return True

        print("✗ Dependency check failed! To fix, run:")
        print("  pip install -r requirements.txt")
        print("or:")
        print(f"  pip install {' '.join(specs)}")
        return False

    def fix_dependencies(self):
        """Attempt to install missing or outdated dependencies."""
        specs = self.requirement_specs()
        if not specs:
            return True

        print(f"Installing: {', '.join(specs)}")
        try:
            subprocess.check_call([sys.executable, "-m", "pip", "install"] + specs)
        except subprocess.CalledProcessError as e:
            print(f"✗ Installation failed: {e}")
            return False
        print("✓ Dependencies installed successfully!")
        return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Check Python package dependencies for the hierarchy reader"
    )
    parser.add_argument("--fix", action="store_true", help="Attempt to install missing dependencies")
    parser.add_argument("--verbose", action="store_true", help="Show detailed output")
    parser.add_argument("--dev", action="store_true", help="Also check development dependencies")
    args = parser.parse_args()

    print("=" * 60)
    print("HIERARCHY READER DEPENDENCY CHECK")
    print("=" * 60)

    if sys.version_info < (3, 8):
        print(f"✗ Python {sys.version.split()[0]} (requires 3.8+)")
        sys.exit(1)

    checker = DependencyChecker(verbose=args.verbose)
    checker.check_group("Required Dependencies", checker.REQUIRED_DEPS)
    if args.dev:
        checker.check_group("Development Dependencies", checker.DEV_DEPS)

    success = checker.print_summary()
    if args.fix and not success:
        success = checker.fix_dependencies()

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
