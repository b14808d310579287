"""Console script entrypoint for the vxp CLI."""

from .main import main as _main


def main() -> int:
    """Console entrypoint used by the ``vxp`` script hook."""
    return _main()


if __name__ == "__main__":
    raise SystemExit(main())
