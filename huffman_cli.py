# filename: huffman_cli.py
#
# Compress: huffman -i input_file -o output_file
# Decompress: huffman -d -i input_file -o output_file
# Code file: huffman -t -i input_file -o output_file
#

import argparse
import logging
import os
import sys

from huffman_errors import HuffmanError, InvalidInput
from huffman_service import HuffmanService

log = logging.getLogger("huffman")


def build_parser():
    parser = argparse.ArgumentParser(prog="huffman", description="Huffman compression with an end-of-stream marker.")
    parser.add_argument("-i", dest="input_file_path", help="The path of the file to read.", required=True)
    parser.add_argument("-o", dest="output_file_path", help="The path of the file to write.", required=True)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("-d", dest="decompress", action="store_true", help="Decompress instead of compressing")
    mode.add_argument("-t", dest="text_codes", action="store_true",
                      help="Write the text code file for the input instead of compressing")
    parser.add_argument("--show-tree", action="store_true", help="Print the code tree built for the input to stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def run(service, args):
    if os.path.realpath(args.input_file_path) == os.path.realpath(args.output_file_path):
        raise InvalidInput(f"input and output are the same file: {args.input_file_path}")

    if args.decompress:
        service.decompress_file(args.input_file_path, args.output_file_path)
        log.info("decompressed %s -> %s", args.input_file_path, args.output_file_path)
        return

    if args.show_tree or args.text_codes:
        with open(args.input_file_path, "rb") as f:
            data = f.read()
        if args.show_tree:
            print(service.logic.build_tree(service.logic.count_frequencies(data)).render())
        if args.text_codes:
            with open(args.output_file_path, "w") as f:
                f.write(service.describe(data))
            log.info("wrote code file %s", args.output_file_path)
            return

    service.compress_file(args.input_file_path, args.output_file_path)
    log.info("compressed %s -> %s", args.input_file_path, args.output_file_path)


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        run(HuffmanService(), args)
    except (HuffmanError, OSError) as exc:
        print(f"huffman: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
