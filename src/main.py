import sys
from typing import Optional, Sequence

from computation_driver import main as run_comparison
from errors import CNVDistanceError
from utils import USAGE, build_config, parse_args


def main(argv: Optional[Sequence[str]] = None) -> int:
    # Parse command-line arguments, argparse exits with status 2 on usage errors
    args = parse_args(argv)

    try:
        config = build_config(args)
        run_comparison(config)
    except CNVDistanceError as e:
        print(f"Error: {e}", file=sys.stderr)
        print(f"Usage: {USAGE}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
