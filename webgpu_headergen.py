#!/usr/bin/env python3
"""
webgpu_headergen

Reads a YAML description of a native API (constants, enums, callbacks, structs and
objects with methods) and writes a single C header exposing it as a stable C ABI.

Usage:
    python webgpu_headergen.py --input <schema.yml> [--output <header.h>] [--no-docs] [--verbose]

Arguments:
    --input, -i     : Path to the YAML schema
    --output, -o    : Path of the header to write (default: stdout)
    --no-docs       : Do not emit documentation comments
    --verbose, -v   : Print debug information to stderr
    --help, -h      : Show this help message

Environment overrides:
    HEADERGEN_INPUT_FILE, HEADERGEN_OUTPUT_FILE, HEADERGEN_DOCS (0/false disables), HEADERGEN_VERBOSE

Example:
    python webgpu_headergen.py --input webgpu.yml --output webgpu.h
    python webgpu_headergen.py -i webgpu.yml --no-docs > webgpu.h
"""

import argparse
import os
import sys
from typing import Optional

from generators.c_header_generator import CHeaderGenerator, HeaderOptions
from schema_debug import debug_print_schema
from schema_errors import SchemaErrors
from schema_loader import load_schema_file
from schema_model import Schema

FALSE_VALUES = ('0', 'false', 'no', 'off', '')


class HeaderConverter:
    """
    Loads a schema file and renders it to a C header.
    The header is written only after generation succeeded, so a failed run leaves no partial output.
    """

    def __init__(self, input_file: str, output_file: Optional[str] = None, options: Optional[HeaderOptions] = None):
        """
        Args:
            input_file: Path to the YAML schema
            output_file: Path of the header to write, or None for stdout
            options: Header generation options (docs, verbosity)
        """
        self.input_file = input_file
        self.output_file = output_file
        self.options = options or HeaderOptions()
        self.schema: Optional[Schema] = None
        self.errors = []

    def debug_print(self, message: str) -> None:
        if self.options.verbose:
            print(f"[DEBUG] {message}", file=sys.stderr)

    def report_errors(self, errors) -> None:
        for error in errors:
            print(f"[ERROR] {error}", file=sys.stderr)

    def load_schema(self) -> bool:
        """
        Returns:
            bool: True if the schema loaded without errors
        """
        if not os.path.exists(self.input_file):
            self.errors = [f"Input file '{self.input_file}' does not exist."]
            self.report_errors(self.errors)
            return False
        try:
            self.schema = load_schema_file(self.input_file, verbose=self.options.verbose)
        except SchemaErrors as e:
            self.errors = e.errors
            self.report_errors(self.errors)
            return False
        if self.options.verbose:
            debug_print_schema(self.schema)
        return True

    def generate_header(self) -> bool:
        """
        Returns:
            bool: True if the header was generated and written
        """
        if not self.schema:
            print("[ERROR] No schema available. Load the schema first.", file=sys.stderr)
            return False
        try:
            header = CHeaderGenerator(self.schema, self.options).generate_header()
        except SchemaErrors as e:
            self.errors = e.errors
            self.report_errors(self.errors)
            return False

        if self.output_file:
            out_dir = os.path.dirname(self.output_file)
            if out_dir:
                os.makedirs(out_dir, exist_ok=True)
            with open(self.output_file, 'w', encoding='utf-8', newline='\n') as f:
                f.write(header)
            self.debug_print(f"Wrote {self.output_file}")
        else:
            sys.stdout.write(header)
            sys.stdout.flush()
        return True


def _env_flag(name: str, default: bool) -> bool:
    if name not in os.environ:
        return default
    return os.environ[name].strip().lower() not in FALSE_VALUES


def parse_arguments(argv=None):
    """
    Returns:
        argparse.Namespace: Parsed command line arguments
    """
    parser = argparse.ArgumentParser(
        description="Generate a C header from a YAML API schema",
        formatter_class=argparse.RawTextHelpFormatter
    )
    parser.add_argument('--input', '-i', help='Path to the YAML schema')
    parser.add_argument('--output', '-o', help='Path of the header to write (default: stdout)')
    parser.add_argument('--no-docs', dest='docs', action='store_false', help='Do not emit documentation comments')
    parser.add_argument('--verbose', '-v', action='store_true', help='Print debug information to stderr')

    args = parser.parse_args(argv)

    # Override with environment variables if set
    args.input = os.environ.get('HEADERGEN_INPUT_FILE', args.input)
    args.output = os.environ.get('HEADERGEN_OUTPUT_FILE', args.output)
    args.docs = _env_flag('HEADERGEN_DOCS', args.docs)
    args.verbose = _env_flag('HEADERGEN_VERBOSE', args.verbose)

    if not args.input:
        parser.error("the following arguments are required: --input/-i")
    return args


def main(argv=None) -> int:
    args = parse_arguments(argv)
    options = HeaderOptions(docs_enabled=args.docs, verbose=args.verbose)
    converter = HeaderConverter(args.input, args.output, options)

    if not converter.load_schema():
        return 1
    if not converter.generate_header():
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
