#!/usr/bin/python3

import argparse, sys

from machine import PROGRAM_START
from opcodes import disassemble


def parse_compiled(code):
    """Turn Octo's "compiled" listing (`0x00 0xE0 ...`) into ROM bytes."""
    code = code.split()
    code = [i[2:] if i.lower().startswith("0x") else i for i in code]
    return bytes(int(i, 16) for i in code)


def listing(rom, origin=PROGRAM_START):
    lines = []
    for offset in range(0, len(rom) - 1, 2):
        word = rom[offset] << 8 | rom[offset + 1]
        lines.append(f"{origin + offset:03X}: {word:04X}  {disassemble(word)}")
    if len(rom) % 2:
        lines.append(f"{origin + len(rom) - 1:03X}: {rom[-1]:02X}    DB 0x{rom[-1]:02X}")
    return lines


def main(argv=None):
    parser = argparse.ArgumentParser()
    method = parser.add_mutually_exclusive_group(required=True)
    method.add_argument("-c", "--compiled", metavar="LISTING",
                        help="Put already-compiled code from Octo in a file")
    method.add_argument("-d", "--disassemble", metavar="ROM",
                        help="Print the instructions of a ROM")
    parser.add_argument("output", nargs="?",
                        help="File to put output in")
    args = parser.parse_args(argv)

    if args.compiled:
        if not args.output:
            parser.error("an output file is needed with --compiled")
        args.output = args.output + ("" if "." in args.output.split("/")[-1] else ".ch8")
        if args.compiled == "-":
            code = sys.stdin.read()
        else:
            with open(args.compiled) as f:
                code = f.read()
        print("Converting input...")
        try:
            rom = parse_compiled(code)
        except ValueError as e:
            parser.error(f"bad listing: {e}")
        print("Writing to file...")
        with open(args.output, "wb+") as f:
            f.write(rom)
        print("Done!")
    else:
        with open(args.disassemble, "rb") as f:
            rom = f.read()
        out = "\n".join(listing(rom)) + "\n"
        if args.output:
            with open(args.output, "w") as f:
                f.write(out)
        else:
            sys.stdout.write(out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
