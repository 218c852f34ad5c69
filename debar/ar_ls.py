"""ar archive lister.

This is a mini-tool to list the members of an ar archive (e.g. a .deb), or
to dump the content of some of them to stdout.
"""

import argparse
import logging
import re
import shutil
import stat
import sys
import time

from debar.ar_reader import ArReader
from debar.errors import ArError
from debar.source import BufferSource

BLOCKSIZE = 65536


def format_mode(mode: str) -> str:
    # Anything but plain octal digits is shown as found in the archive.
    if not re.fullmatch(r"[0-7]+", mode):
        return mode
    return stat.filemode(stat.S_IFREG | int(mode, 8))[1:]


def format_member(member, verbose=False) -> str:
    if not verbose:
        return member.name
    mtime = time.strftime("%Y-%m-%d %H:%M", time.gmtime(member.timestamp))
    return (f"{format_mode(member.mode)} {member.owner_id}/{member.group_id} "
            f"{member.size:>10} {mtime} {member.name}")


def lsar(ar, out, verbose=False):
    for member in ar:
        print(format_member(member, verbose), file=out)


def print_members(ar, names, out, err) -> int:
    """Copy the data of the named members to `out`, in archive order.

    Returns:
      0 if all members were found, 1 otherwise.
    """
    wanted = set(names)
    for member in ar:
        if member.name in wanted:
            shutil.copyfileobj(member.data(), out, BLOCKSIZE)
            wanted.discard(member.name)
    for name in names:
        if name in wanted:
            print(f"{name}: member not found", file=err)
    return 1 if wanted else 0


def open_archive(path: str) -> ArReader:
    if path == "-":
        return ArReader(BufferSource(sys.stdin.buffer.read()))
    return ArReader.open(path)


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="List the members of an ar archive, such as a .deb package."
    )
    parser.add_argument("archive", help="Path to the archive, or - for stdin.")
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Also show mode, owner/group, size and modification time."
    )
    parser.add_argument(
        "-p", "--print",
        dest="members",
        action="append",
        metavar="MEMBER",
        help="Write the content of MEMBER to stdout. May be repeated."
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        with open_archive(args.archive) as ar:
            if args.members:
                status = print_members(ar, args.members, sys.stdout.buffer, sys.stderr)
                sys.stdout.buffer.flush()
                return status
            lsar(ar, sys.stdout, verbose=args.verbose)
    except ArError as e:
        print(f"{args.archive}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
