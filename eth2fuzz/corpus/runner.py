import sys
import time

from rich.console import Console
from rich.markup import escape

from eth2fuzz.phase0 import spec as spec_phase0

from .args import parse_arguments
from .emitter import emit
from .exceptions import CorpusError
from .fixtures import write_fixtures
from .generate import CorpusContext, generate
from .operations import OperationKind
from .settings import load_settings
from .utils import time_since


def run_generator(args, spec=spec_phase0, out=None) -> None:
    start_time = time.time()
    console = Console(stderr=True)

    def debug_print(msg):
        """Only print if verbose is enabled."""
        if args.verbose:
            console.print(msg)

    settings = load_settings(args.config)
    debug_print(f"Settings: {settings.CONFIG_NAME}, {settings.NUM_VALIDATORS} validators, "
                f"state epoch {settings.STATE_EPOCH}")

    if args.build_fixtures:
        write_fixtures(spec, settings, args.fixtures_dir)
        debug_print(f"Wrote fixtures into {args.fixtures_dir}")

    ctx = CorpusContext.from_fixtures(spec, settings, args.fixtures_dir)

    if len(args.kinds) != 0:
        kinds = [OperationKind.from_key(key) for key in args.kinds]
    else:
        kinds = list(OperationKind)

    for kind in kinds:
        kind_start = time.time()
        operation = generate(ctx, kind)
        emit(operation, out)
        debug_print(f"Generated: {kind.key} (took {time_since(kind_start)})")

    debug_print(f"Completed generation of {len(kinds)} operation(s) in {time_since(start_time)}")


def main(argv=None) -> int:
    args = parse_arguments(argv)
    try:
        run_generator(args)
    except CorpusError as e:
        Console(stderr=True).print(f"[bold red]error:[/bold red] {escape(str(e))}", highlight=False)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
