import argparse
import sys

from typing import Optional
from compressor import HuffmanCompressor
from errors import CorruptContainerError, HuffmanError
from huffman import build_tree, count_frequencies, format_tree, leaf_count

MAGIC = b"HUF1"  #: Magic number of files written by the CLI
VERSION = 1  #: Current file format version
STDIO = "-"  #: Path meaning stdin/stdout


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        prog="huffc",
        description="Huffman coding compressor with self-describing output",
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    compress = subparsers.add_parser(
        "compress", aliases=["c"], help="Compress a file"
    )
    compress.add_argument(
        "input", help="File to compress ('-' reads standard input)"
    )
    compress.add_argument(
        "-o", "--output", help="Output file path (default: standard output)"
    )
    compress.add_argument(
        "-P",
        "--no-progress",
        action="store_true",
        help="Hide the progress line",
    )

    decompress = subparsers.add_parser(
        "decompress", aliases=["d"], help="Decompress a file"
    )
    decompress.add_argument(
        "input", help="File to decompress ('-' reads standard input)"
    )
    decompress.add_argument(
        "-o", "--output", help="Output file path (default: standard output)"
    )
    decompress.add_argument(
        "-P",
        "--no-progress",
        action="store_true",
        help="Hide the progress line",
    )

    tree = subparsers.add_parser(
        "tree", aliases=["t"], help="Print the Huffman tree of a file"
    )
    tree.add_argument(
        "input", help="File to analyse ('-' reads standard input)"
    )

    return parser


def _read_input(path: str) -> bytes:
    """Read all bytes from ``path`` or from stdin when ``path`` is ``-``.

    :param path: Filesystem path or ``-``.
    :type path: str
    :returns: File contents.
    :rtype: bytes
    """
    if path == STDIO:
        return sys.stdin.buffer.read()
    with open(path, "rb") as f:
        return f.read()


def _write_output(path: Optional[str], data: bytes) -> None:
    """Write ``data`` to ``path``, or to stdout when no path is given.

    :param path: Filesystem path, ``-`` or ``None``.
    :type path: Optional[str]
    :param data: Bytes to write.
    :type data: bytes
    :returns: None
    :rtype: None
    """
    if path is None or path == STDIO:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
        return
    with open(path, "wb") as out:
        out.write(data)


def _print_progress(line: str) -> None:
    """Render and flush a single progress line in-place (carriage return).

    Progress goes to stderr so that stdout can carry the output data.

    :param line: The textual progress line to display.
    :type line: str
    :returns: None
    :rtype: None
    """
    sys.stderr.write("\r" + line)
    sys.stderr.flush()


def _fmt_pct(done: int, total: int) -> str:
    """Format a completion percentage string like ``12.34%``.

    :param done: Units completed.
    :type done: int
    :param total: Total units to complete.
    :type total: int
    :returns: Percentage.
    :rtype: str
    """
    if total <= 0:
        return "0%"
    pct = 100.0 * (done / float(total))
    return f"{pct:6.2f}%"


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi', 'Ti']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} PiB"


class Progress:
    """Callable progress reporter passed as ``on_progress``.

    Redraws the line only when the whole percentage changes.

    :ivar label: Action label (e.g., "Compressing" or "Decompressing").
    :type label: str
    :ivar name: Name of the input being processed.
    :type name: str
    """

    def __init__(self, label: str, name: str) -> None:
        self.label = label
        self.name = name
        self._last_reported = -1

    def __call__(self, done: int, total: int) -> None:
        """Update the progress display.

        :param done: Units processed so far.
        :type done: int
        :param total: Total units.
        :type total: int
        :returns: None
        :rtype: None
        """
        if total <= 0:
            return
        percent_bucket = int((done * 100) / total)
        if percent_bucket == self._last_reported:
            return
        self._last_reported = percent_bucket
        _print_progress(f"{self.label} {self.name}  {_fmt_pct(done, total)}")


def _display_name(path: str) -> str:
    return "<stdin>" if path == STDIO else path


def compress_file(
    input_path: str, output_path: Optional[str], hide_progress: bool
) -> None:
    """Compress a file and write it with the CLI file header.

    File format:
    - Magic: 'HUF1' (4 bytes)
    - Version: 1 byte
    - Container produced by ``HuffmanCompressor.compress``

    :param input_path: File to compress, or ``-`` for stdin.
    :type input_path: str
    :param output_path: Destination file; stdout if ``None``.
    :type output_path: Optional[str]
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :returns: None
    :rtype: None
    :raises EmptyInputError: If the input is empty.
    """
    data = _read_input(input_path)
    on_prog = None
    if not hide_progress:
        on_prog = Progress("Compressing", _display_name(input_path))
    container = HuffmanCompressor().compress(data, on_progress=on_prog)
    if on_prog is not None:
        sys.stderr.write("\n")
    _write_output(output_path, MAGIC + bytes([VERSION]) + container)

    packed = len(MAGIC) + 1 + len(container)
    print("Size before compression: ", _fmt_bytes(len(data)), file=sys.stderr)
    print("Size after compression: ", _fmt_bytes(packed), file=sys.stderr)
    print(f"Compression ratio: {len(data) / packed:.2f}", file=sys.stderr)


def decompress_file(
    input_path: str, output_path: Optional[str], hide_progress: bool
) -> None:
    """Decompress a file written by ``compress_file``.

    :param input_path: File to decompress, or ``-`` for stdin.
    :type input_path: str
    :param output_path: Destination file; stdout if ``None``.
    :type output_path: Optional[str]
    :param hide_progress: Whether to hide the progress line.
    :type hide_progress: bool
    :returns: None
    :rtype: None
    :raises CorruptContainerError: If the header is invalid, the version is
        unsupported or the container is corrupt.
    """
    data = _read_input(input_path)
    if data[:len(MAGIC)] != MAGIC:
        raise CorruptContainerError("Invalid file format (bad magic)")
    if len(data) <= len(MAGIC):
        raise CorruptContainerError("Missing format version")
    ver = data[len(MAGIC)]
    if ver != VERSION:
        raise CorruptContainerError(f"Unsupported file version: {ver}")

    on_prog = None
    if not hide_progress:
        on_prog = Progress("Decompressing", _display_name(input_path))
    restored = HuffmanCompressor().decompress(
        data[len(MAGIC) + 1:], on_progress=on_prog
    )
    if on_prog is not None:
        sys.stderr.write("\n")
    _write_output(output_path, restored)


def show_tree(input_path: str) -> None:
    """Print the Huffman tree built from a file's byte frequencies.

    :param input_path: File to analyse, or ``-`` for stdin.
    :type input_path: str
    :returns: None
    :rtype: None
    :raises EmptyInputError: If the input is empty.
    """
    root = build_tree(count_frequencies(_read_input(input_path)))
    print(format_tree(root))
    print(f"{leaf_count(root)} symbol(s), {root.weight} byte(s)", file=sys.stderr)


def main(argv=None) -> int:
    """Entry point for the CLI tool.

    :param argv: Argument list; ``sys.argv[1:]`` if ``None``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    try:
        if args.cmd in ["compress", "c"]:
            compress_file(args.input, args.output, args.no_progress)
        elif args.cmd in ["decompress", "d"]:
            decompress_file(args.input, args.output, args.no_progress)
        elif args.cmd in ["tree", "t"]:
            show_tree(args.input)
    except FileNotFoundError as e:
        print(f"[!] File not found: {e.filename}", file=sys.stderr)
        return 1
    except (HuffmanError, OSError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
