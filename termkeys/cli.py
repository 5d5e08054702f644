#!/usr/bin/env python3
"""
termkeys CLI entry point: interactive demos for buffered terminal keys
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import traceback

from termkeys.__version__ import __version__
from termkeys.log import setup_logging

COMMANDS = ('walk', 'dump')


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog='termkeys',
        description='Buffered terminal key input - interactive demos',
    )
    parser.add_argument(
        'command',
        nargs='?',
        choices=COMMANDS,
        default='walk',
        help="'walk': move with WASD, Q quits (default); "
             "'dump': print the codes of every key event, Q quits",
    )
    parser.add_argument(
        '--debug',
        action='store_true',
        help='Enable debug mode with verbose logging'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to config file (default: ~/.config/termkeys/config.json)'
    )
    parser.add_argument(
        '--logfile',
        type=str,
        default=None,
        help='Also write a detailed log to this file'
    )
    parser.add_argument(
        '--fps',
        type=float,
        default=None,
        help='Override the frame rate of the polling loop'
    )
    parser.add_argument(
        '--version',
        action='version',
        version='%(prog)s ' + __version__
    )
    return parser.parse_args(argv)


def run_walk(config: dict, log: logging.Logger) -> None:
    from termkeys.demo import WalkDemo
    from termkeys.loop import FrameLoop
    from termkeys.terminal import open_stdin_keys

    print('Press WASD to move, Q to quit')
    keys = open_stdin_keys(config['read_size'], config['poll_timeout'])
    with keys:
        demo = WalkDemo()
        frames = FrameLoop(keys, demo.step, fps=config['fps']).run()
        log.debug(f"Walk demo ran {frames} frames")
        if keys.error is not None:
            raise keys.error


def run_dump(config: dict, log: logging.Logger) -> None:
    from termkeys.demo import dump_keys
    from termkeys.input.fd_source import FileDescriptorSource

    print('Press any key or key combination, or Q to quit')
    source = FileDescriptorSource(
        read_size=config['read_size'],
        poll_timeout=config['poll_timeout'],
    )
    printed = dump_keys(source)
    log.debug(f"Dumped {printed} key events")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for termkeys"""
    args = parse_args(argv)

    log = setup_logging(debug=args.debug, log_file=args.logfile)
    log.info(f"termkeys started (version {__version__}, PID {os.getpid()})")

    # Import after args parsing to avoid import-time side effects
    from termkeys.config import load_config, validate_config
    from termkeys.terminal import raw_mode

    try:
        log.debug(f"Loading config from: {args.config or 'default'}")
        config = load_config(args.config, args.debug)
        if args.fps is not None:
            config = validate_config(dict(config, fps=args.fps))
    except ValueError as e:
        log.error(f"Invalid configuration: {e}")
        return 1

    if config['debug'] and not args.debug:
        # Debug requested by the config file only: reinstall the handlers
        log = setup_logging(debug=True, log_file=args.logfile)
        log.debug("Debug logging enabled by config")
    config['debug'] = config['debug'] or args.debug

    runner = run_walk if args.command == 'walk' else run_dump

    try:
        with raw_mode():
            runner(config, log)
        log.info("termkeys exited normally")
        return 0

    except KeyboardInterrupt:
        log.info("termkeys terminated by user (Ctrl+C)")
        return 0

    except BrokenPipeError:
        log.error("Broken pipe error - pipeline was closed")
        log.debug(traceback.format_exc())
        return 1

    except OSError as e:
        log.error(f"OS error: {e}")
        log.debug(traceback.format_exc())
        return 1

    except Exception as e:
        log.error(f"Unhandled error: {type(e).__name__}: {e}")
        log.debug(traceback.format_exc())
        return 1


if __name__ == '__main__':
    sys.exit(main())
