"""Allow running buildpack-release with ``python -m buildpack_release``."""

from buildpack_release.cli.main import main

if __name__ == "__main__":
    main()
