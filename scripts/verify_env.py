#!/usr/bin/env python3
"""Check the Google Sheets settings before deploying, without printing secrets."""

from __future__ import annotations

import argparse
import platform
import sys

from config import Config
from services.key_normalizer import PEM_FOOTER, PEM_HEADER, describe_key, normalize_private_key
from services.sheets_store import REQUIRED_SETTINGS


def check_private_key(value: str):
    info = describe_key(value)
    print(f"key_length={info['length']}")
    print(f"has_begin_marker={info['has_begin_marker']}")
    print(f"has_end_marker={info['has_end_marker']}")
    print(f"has_escaped_newlines={info['has_escaped_newlines']}")
    normalized = normalize_private_key(value)
    print(f"normalizes_to_pem={normalized.startswith(PEM_HEADER) and normalized.endswith(PEM_FOOTER)}")


def verify(settings) -> bool:
    ok = True
    for name in REQUIRED_SETTINGS:
        value = settings.get(name)
        if not value:
            print(f"{name}=missing")
            ok = False
            continue
        print(f"{name}=present")
        if name == 'GOOGLE_SHEETS_PRIVATE_KEY':
            check_private_key(value)
    return ok


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description='Verify Spopeer gateway environment settings')
    parser.parse_args(argv)

    print(f"python_version={platform.python_version()}")
    print(f"storage_backend={Config.STORAGE_BACKEND}")

    settings = {name: getattr(Config, name, None) for name in REQUIRED_SETTINGS}
    if not verify(settings):
        print('some required environment variables are missing')
        return 1
    print('all required environment variables are present')
    return 0


if __name__ == '__main__':
    sys.exit(main())
