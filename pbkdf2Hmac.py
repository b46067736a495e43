import argparse
import json
import logging
import os
import sys
import time
from getpass import getpass

from hexdump import hexdump

from pbkdf2hmac import HASHALGS, Pbkdf2Error, pbkdf2_hmac
from pbkdf2hmac.derive import ENGINES
from pbkdf2hmac.hashalgs import DEFAULT_HASH
from pbkdf2hmac.vectors import KNOWN_VECTORS, generate_vectors

DEFAULT_ITERATIONS = 100000
DEFAULT_SALT_LENGTH = 16


def _hexarg(s):
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f'invalid hex: {e}') from None


def build_parser():
    parser = argparse.ArgumentParser(
        description='Derive a key with PBKDF2-HMAC (RFC 2898) using SHA-1, SHA-256, SHA-384 or SHA-512'
    )
    parser.add_argument('-p', '--password', help='Password (UTF-8, will ask via stdin if not provided)')
    parser.add_argument('--password-hex', type=_hexarg, help='Password as hex bytes')
    salt = parser.add_mutually_exclusive_group()
    salt.add_argument('-s', '--salt', help='Salt (UTF-8)')
    salt.add_argument('--salt-hex', type=_hexarg, help='Salt as hex bytes')
    salt.add_argument(
        '--random-salt',
        type=int,
        nargs='?',
        const=DEFAULT_SALT_LENGTH,
        metavar='N',
        help=f'Use N random salt bytes (default {DEFAULT_SALT_LENGTH})',
    )
    parser.add_argument(
        '-c', '--iterations', type=int, default=DEFAULT_ITERATIONS, help=f'Iteration count (default {DEFAULT_ITERATIONS})'
    )
    parser.add_argument('-l', '--length', type=int, help='Derived key length in bytes (default: hash output length)')
    parser.add_argument('-a', '--hash', default=DEFAULT_HASH, help=f'One of {", ".join(HASHALGS)} (default {DEFAULT_HASH})')
    parser.add_argument('-e', '--engine', choices=ENGINES, default='auto', help='PBKDF2 implementation (default auto)')
    parser.add_argument('-w', '--workers', type=int, default=1, help='Threads for parallel blocks (manual engine)')
    parser.add_argument('--json', action='store_true', help='Output JSON to stdout')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging and hexdump the derived key')

    action = parser.add_mutually_exclusive_group()
    action.add_argument('--vectors', action='store_true', help='Print random test vectors as JSON')
    action.add_argument('--selftest', action='store_true', help='Check the known-answer vectors')
    action.add_argument('--benchmark', type=int, metavar='N', help='Time N derivations of random vectors per engine')
    return parser


def _error(args, msg):
    if args.json:
        print(json.dumps({'error': msg}))
    else:
        print(f'[!] {msg}')


def derive(args):
    if args.password_hex is not None:
        password = args.password_hex
    elif args.password is not None:
        password = args.password
    else:
        password = getpass()

    if args.salt_hex is not None:
        salt = args.salt_hex
    elif args.salt is not None:
        salt = args.salt
    elif args.random_salt is not None:
        if args.random_salt < 0:
            _error(args, 'salt length must not be negative')
            return 2
        salt = os.urandom(args.random_salt)
    else:
        _error(args, 'one of --salt, --salt-hex or --random-salt is required')
        return 2

    length = args.length
    if length is None:
        alg = HASHALGS.get(args.hash)
        length = alg.output_length if alg else 32

    try:
        dk = pbkdf2_hmac(password, salt, args.iterations, length, args.hash, engine=args.engine, workers=args.workers)
    except Pbkdf2Error as e:
        _error(args, f'{type(e).__name__}: {e}')
        return 1

    salt_bytes = salt.encode('utf-8') if isinstance(salt, str) else salt
    if args.json:
        out = {'hash': args.hash, 'iterations': args.iterations, 'salt': salt_bytes.hex(), 'key': dk.hex()}
        print(json.dumps(out))
        return 0

    print(f'[*] Hash : {args.hash}')
    print(f'[*] Iterations : {args.iterations}')
    print(f'[*] Salt : {salt_bytes.hex()}')
    print(f'[+] Derived key : {dk.hex()}')
    if args.debug:
        hexdump(dk)
    return 0


def selftest(args):
    failed = 0
    for n, v in enumerate(KNOWN_VECTORS, 1):
        label = f'{v.hash} c={v.c} dkLen={v.dkLen} {v.comment}'.rstrip()
        try:
            dk = pbkdf2_hmac(v.P, v.S, v.c, v.dkLen, v.hash, engine=args.engine, workers=args.workers)
        except Pbkdf2Error as e:
            ok = v.error is not None and isinstance(e, v.error)
        else:
            ok = v.error is None and dk.hex() == v.output
        if not ok:
            failed += 1
        print(f'[{"+" if ok else "!"}] vector {n} ({label}) : {"Pass" if ok else "Failed"}')
    print(f'[*] Summary: {len(KNOWN_VECTORS) - failed}/{len(KNOWN_VECTORS)} passed')
    return 1 if failed else 0


def benchmark(args):
    if args.benchmark <= 0:
        _error(args, 'benchmark count must be positive')
        return 2
    print('[*] Starting benchmarks for PBKDF2... (keep calm)')
    vectors = generate_vectors()
    engines = [args.engine] if args.engine != 'auto' else ['native', 'manual']
    for engine in engines:
        for v in vectors:
            start = time.perf_counter()
            for _ in range(args.benchmark):
                pbkdf2_hmac(v.P, v.S, v.c, v.dkLen, v.hash, engine=engine, workers=args.workers)
            elapsed = time.perf_counter() - start
            print(
                f' [-] {engine} {v.hash} c={v.c} dkLen={v.dkLen} : '
                f'{args.benchmark / elapsed:.2f} ops/sec ({args.benchmark} runs)'
            )
    print('[*] Benchmark completed')
    return 0


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    if args.vectors:
        print(json.dumps([v.to_dict() for v in generate_vectors()]))
        return 0
    if args.selftest:
        return selftest(args)
    if args.benchmark is not None:
        return benchmark(args)
    return derive(args)


if __name__ == "__main__":
    sys.exit(main())
