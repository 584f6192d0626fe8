#!/usr/bin/env python3
"""Reference SHA-3 digests from pycryptodome, for cross-checking sha3_primitives."""
import sys

USAGE = "usage: sha3_reference.py {sha3-224,sha3-256,sha3-384,sha3-512} < data"


def reference_digest(variant: str, data: bytes) -> bytes:
    from Crypto.Hash import SHA3_224, SHA3_256, SHA3_384, SHA3_512

    modules = {
        "sha3-224": SHA3_224,
        "sha3-256": SHA3_256,
        "sha3-384": SHA3_384,
        "sha3-512": SHA3_512,
    }
    try:
        module = modules[variant]
    except KeyError:
        raise ValueError(f"unknown SHA-3 variant: {variant!r}") from None
    h = module.new()
    h.update(data)
    return h.digest()


def main():
    if len(sys.argv) != 2:
        sys.stderr.write(USAGE + "\n")
        sys.exit(2)
    data = sys.stdin.buffer.read()
    try:
        digest = reference_digest(sys.argv[1], data)
    except ImportError as e:
        sys.stderr.write("missing pycryptodome SHA3: {}\n".format(e))
        sys.exit(2)
    except ValueError as e:
        sys.stderr.write("error: {}\n".format(e))
        sys.exit(1)
    sys.stdout.write(digest.hex())

if __name__ == "__main__":
    main()
